"""Configuration package for simgraph."""

from simgraph.config.defaults import DEFAULT_API_PORT, DEFAULT_DT, DEFAULT_START_TIME, DEFAULT_TEMPLATE
from simgraph.config.simulation_config import SimulationConfig

__all__ = [
    "DEFAULT_API_PORT",
    "DEFAULT_DT",
    "DEFAULT_START_TIME",
    "DEFAULT_TEMPLATE",
    "SimulationConfig",
]
