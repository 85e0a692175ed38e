"""Events module.

Scene-graph events (propagated to components through the graph) and the
EventBus used to publish instrumentation events.
"""

from simgraph.events.event_bus import EventBus
from simgraph.events.simulation_events import (
    AnimateBeginEvent,
    AnimateEndEvent,
    CollisionBeginEvent,
    CollisionEndEvent,
    IntegrateBeginEvent,
    IntegrateEndEvent,
    PhaseTransitionEvent,
    SimulationEvent,
)

__all__ = [
    "AnimateBeginEvent",
    "AnimateEndEvent",
    "CollisionBeginEvent",
    "CollisionEndEvent",
    "EventBus",
    "IntegrateBeginEvent",
    "IntegrateEndEvent",
    "PhaseTransitionEvent",
    "SimulationEvent",
]
