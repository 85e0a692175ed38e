"""Lightweight simulation configuration helpers."""

import os
from dataclasses import dataclass
from typing import Optional

from simgraph.config.defaults import (
    DEFAULT_DT,
    ENV_DEFAULT_DT,
    ENV_LOG_LEVEL,
    ENV_TIMER_ENABLED,
    ENV_TRACE_MODE,
)
from simgraph.exceptions import ConfigurationError

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class SimulationConfig:
    """Configuration toggles for the simulation driver.

    Attributes:
        default_dt: Step size used when ``animate`` is called with ``dt=0``
            and the root node has no step of its own.
        log_level: Optional explicit log level for ``configure_logging``.
        trace_mode: Publish phase timings on the event bus for DebugTraceSink.
        timer_enabled: Record per-phase timings in the StepTimer.
    """

    default_dt: float = DEFAULT_DT
    log_level: Optional[str] = None
    trace_mode: bool = False
    timer_enabled: bool = True

    def __post_init__(self) -> None:
        if self.default_dt < 0:
            raise ConfigurationError(f"default_dt must be >= 0, got {self.default_dt}")

    def enable_tracing(self) -> None:
        """Enable trace mode (implies timing)."""
        self.trace_mode = True
        self.timer_enabled = True

    @classmethod
    def from_env(cls) -> "SimulationConfig":
        """Build a configuration from ``SIMGRAPH_*`` environment variables."""
        raw_dt = os.getenv(ENV_DEFAULT_DT)
        try:
            default_dt = float(raw_dt) if raw_dt else DEFAULT_DT
        except ValueError as e:
            raise ConfigurationError(f"{ENV_DEFAULT_DT} is not a number: {raw_dt!r}") from e

        return cls(
            default_dt=default_dt,
            log_level=os.getenv(ENV_LOG_LEVEL),
            trace_mode=os.getenv(ENV_TRACE_MODE, "").lower() in _TRUTHY,
            timer_enabled=os.getenv(ENV_TIMER_ENABLED, "true").lower() in _TRUTHY,
        )
