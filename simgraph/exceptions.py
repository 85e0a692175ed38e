"""simgraph exception hierarchy.

Centralised base classes so callers can catch scene-graph failures
without resorting to bare ``except Exception`` blocks.

Registration conflicts and unresolved factory keys are *not* exceptions:
they are reported through return values (``False`` / ``None``).
"""


class SimGraphError(Exception):
    """Root of all simgraph exceptions."""


class SimulationError(SimGraphError):
    """Errors during step execution (driver, visitors)."""


class InvalidStepError(SimulationError, ValueError):
    """Malformed step parameters, e.g. a negative time step."""


class SceneGraphError(SimGraphError):
    """Structural misuse of the scene graph (cycles, slot overflow, mutation while traversed)."""


class ConfigurationError(SimGraphError):
    """Invalid or missing configuration."""
