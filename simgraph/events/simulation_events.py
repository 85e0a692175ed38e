"""Event definitions broadcast through the scene graph.

Graph events are propagated down a subtree by ``PropagateEventVisitor``;
every component of every visited node receives them through
``handle_event``. They are frozen dataclasses and carry nothing beyond
their type, except the animate events which record the step size.

``PhaseTransitionEvent`` is different: it is published on an ``EventBus``
by the StepTimer for instrumentation sinks, never through the graph.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SimulationEvent:
    """Base class of all events propagated through the scene graph."""

    @property
    def event_name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class CollisionBeginEvent(SimulationEvent):
    """Collision detection is about to run on a subtree."""


@dataclass(frozen=True)
class CollisionEndEvent(SimulationEvent):
    """Collision detection and response finished on a subtree."""


@dataclass(frozen=True)
class IntegrateBeginEvent(SimulationEvent):
    """A solver subtree is about to be integrated."""


@dataclass(frozen=True)
class IntegrateEndEvent(SimulationEvent):
    """A solver subtree finished integrating."""


@dataclass(frozen=True)
class AnimateBeginEvent(SimulationEvent):
    """A simulation step is starting.

    Attributes:
        dt: Step size requested by the driver (0 means per-node steps)
    """

    dt: float = 0.0


@dataclass(frozen=True)
class AnimateEndEvent(SimulationEvent):
    """A simulation step finished.

    Attributes:
        dt: Step size requested by the driver (0 means per-node steps)
    """

    dt: float = 0.0


@dataclass(frozen=True)
class PhaseTransitionEvent:
    """A timed phase started or ended.

    Attributes:
        phase: Phase name (e.g. "Mechanical", "Collision")
        status: "start" or "end"
        source: Name of the node or component the phase ran for
    """

    phase: str
    status: str
    source: str = ""
