"""Step timing for named simulation phases.

The StepTimer is the instrumentation sink the visitors notify at the start
and end of each phase ("Mechanical", "Collision", "InteractionFF", ...).
Notifications are side effects only: a failing sink or subscriber is
logged and swallowed, it never aborts the step.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Tuple, TypedDict

from simgraph.events import EventBus, PhaseTransitionEvent

logger = logging.getLogger(__name__)


class StepStats(TypedDict):
    count: int
    total_ms: float
    max_ms: float


def _source_name(obj: Any) -> str:
    if obj is None:
        return ""
    name = getattr(obj, "name", None)
    return name if isinstance(name, str) else type(obj).__name__


class StepTimer:
    """Tracks timing statistics for named phases.

    Example:
        timer = StepTimer()
        with timer.step("Mechanical", node):
            solver.solve(params, dt)
        print(timer.get_summary_and_reset())
    """

    def __init__(self, enabled: bool = True, event_bus: Optional[EventBus] = None) -> None:
        self.enabled = enabled
        self.event_bus = event_bus
        self._stats: Dict[str, StepStats] = {}
        self._starts: Dict[Tuple[str, str], float] = {}

    def step_begin(self, name: str, obj: Any = None) -> None:
        """Mark the start of phase ``name`` for ``obj``."""
        if not self.enabled:
            return
        try:
            source = _source_name(obj)
            self._starts[(name, source)] = time.perf_counter()
            self._publish(name, "start", source)
        except Exception:
            logger.exception(f"StepTimer failed at begin of {name!r}")

    def step_end(self, name: str, obj: Any = None) -> float:
        """Mark the end of phase ``name`` for ``obj``.

        Returns:
            Duration in milliseconds (0.0 if the phase was never started)
        """
        if not self.enabled:
            return 0.0
        try:
            source = _source_name(obj)
            start_time = self._starts.pop((name, source), None)
            if start_time is None:
                return 0.0

            duration_ms = (time.perf_counter() - start_time) * 1000.0
            stat = self._stats.setdefault(name, {"count": 0, "total_ms": 0.0, "max_ms": 0.0})
            stat["count"] += 1
            stat["total_ms"] += duration_ms
            if duration_ms > stat["max_ms"]:
                stat["max_ms"] = duration_ms

            self._publish(name, "end", source)
            return duration_ms
        except Exception:
            logger.exception(f"StepTimer failed at end of {name!r}")
            return 0.0

    @contextmanager
    def step(self, name: str, obj: Any = None) -> Iterator[None]:
        """Time the enclosed block as phase ``name``."""
        self.step_begin(name, obj)
        try:
            yield
        finally:
            self.step_end(name, obj)

    def _publish(self, name: str, status: str, source: str) -> None:
        if self.event_bus is not None:
            self.event_bus.emit(PhaseTransitionEvent(phase=name, status=status, source=source))

    def stats_for(self, name: str) -> Dict[str, float]:
        """Get current raw stats for a phase (peek)."""
        if name not in self._stats:
            return {"count": 0, "total_ms": 0.0, "max_ms": 0.0}
        stat = self._stats[name]
        return {
            "count": float(stat["count"]),
            "total_ms": stat["total_ms"],
            "max_ms": stat["max_ms"],
        }

    @property
    def phase_names(self) -> list:
        return list(self._stats)

    def get_summary_and_reset(self) -> str:
        """Get a loggable summary string of all stats and reset them."""
        parts = []
        for name, stat in self._stats.items():
            if stat["count"] > 0:
                avg_ms = stat["total_ms"] / stat["count"]
                parts.append(f"{name}={avg_ms:.2f}ms(max {stat['max_ms']:.2f})")
        self._stats.clear()
        return " ".join(parts)
