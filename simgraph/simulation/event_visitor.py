"""Propagation of events down a subtree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from simgraph.events import SimulationEvent
from simgraph.params import ExecParams
from simgraph.simulation.visitor import TraversalContext, Visitor, VisitResult

if TYPE_CHECKING:
    from simgraph.simulation.node import Node


@dataclass
class EventContext(TraversalContext):
    delivered: int = 0


class PropagateEventVisitor(Visitor):
    """Delivers one event to every component of the subtree, top-down.

    Delivery is fire-and-forget: ``handle_event`` returns nothing and the
    event cannot be consumed or stopped.
    """

    def __init__(self, params: Optional[ExecParams], event: SimulationEvent) -> None:
        super().__init__(params)
        self.event = event

    def new_context(self) -> EventContext:
        return EventContext()

    def process_node_top_down(self, node: "Node", ctx: EventContext) -> VisitResult:
        for component in list(node.objects):
            component.handle_event(self.event)
            ctx.delivered += 1
        return VisitResult.CONTINUE

    def __repr__(self) -> str:
        return f"PropagateEventVisitor(event={self.event.event_name})"
