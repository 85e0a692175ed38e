"""Visitor engine: depth-first traversal of the scene graph.

A Visitor walks the subtree it is executed on, top-down. For each node:

1. Inactive or sleeping nodes are pruned before any hook runs; their
   descendants are never visited, whatever their own flags.
2. ``process_node_top_down`` runs and returns CONTINUE (descend into the
   children, in insertion order) or PRUNE (skip them).
3. ``process_node_bottom_up`` runs once the children are done.

The default top-down hook dispatches every component of the node to the
per-role hooks, role by role, each role in insertion order.

Transient traversal state lives in a context object created fresh by each
``execute`` call and returned to the caller; a visitor instance keeps no
per-traversal state of its own, so reusing one cannot leak state between
traversals.
"""

from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, ContextManager, Iterable, Optional, TypeVar

from simgraph.params import ExecParams

if TYPE_CHECKING:
    from simgraph.components import (
        BehaviorModel,
        CollisionPipeline,
        InteractionForceField,
        OdeSolver,
    )
    from simgraph.simulation.node import Node
    from simgraph.timing import StepTimer

logger = logging.getLogger(__name__)

C = TypeVar("C")


class VisitResult(Enum):
    """Traversal control returned by ``process_node_top_down``."""

    CONTINUE = "continue"
    PRUNE = "prune"


@dataclass
class TraversalContext:
    """Per-call traversal bookkeeping.

    Attributes:
        visited: Nodes whose top-down hook ran
        pruned: Nodes skipped because they were inactive or sleeping
    """

    visited: int = 0
    pruned: int = 0


class Visitor:
    """Base traversal algorithm.

    Subclasses override ``process_node_top_down`` (and optionally
    ``process_node_bottom_up``) or just the per-role hooks.
    """

    def __init__(self, params: Optional[ExecParams] = None, timer: Optional["StepTimer"] = None) -> None:
        self.params = params if params is not None else ExecParams()
        self.timer = timer

    @property
    def name(self) -> str:
        return type(self).__name__

    def new_context(self) -> TraversalContext:
        """Create the fresh bookkeeping object for one traversal."""
        return TraversalContext()

    def execute(self, node: "Node") -> Any:
        """Traverse the subtree rooted at ``node``.

        Returns:
            The traversal context, holding whatever the visitor accumulated
        """
        ctx = self.new_context()
        self._visit(node, ctx)
        return ctx

    def _visit(self, node: "Node", ctx: TraversalContext) -> VisitResult:
        if not node.is_traversable:
            ctx.pruned += 1
            return VisitResult.PRUNE

        node._enter_traversal()
        try:
            ctx.visited += 1
            result = self.process_node_top_down(node, ctx)
            if result is VisitResult.CONTINUE:
                for child in list(node.children):
                    self._visit(child, ctx)
            self.process_node_bottom_up(node, ctx)
        finally:
            node._leave_traversal()
        return result

    # ------------------------------------------------------------------
    # Node hooks
    # ------------------------------------------------------------------

    def process_node_top_down(self, node: "Node", ctx: Any) -> VisitResult:
        self.for_each(node, node.behavior_models, self.process_behavior_model)
        self.for_each(node, node.interaction_force_fields, self.fwd_interaction_force_field)
        if node.collision_pipeline is not None:
            self.process_collision_pipeline(node, node.collision_pipeline)
        self.for_each(node, node.solvers, self.process_ode_solver)
        return VisitResult.CONTINUE

    def process_node_bottom_up(self, node: "Node", ctx: Any) -> None:
        pass

    # ------------------------------------------------------------------
    # Per-role hooks
    # ------------------------------------------------------------------

    def process_behavior_model(self, node: "Node", obj: "BehaviorModel") -> None:
        pass

    def fwd_interaction_force_field(self, node: "Node", obj: "InteractionForceField") -> None:
        pass

    def process_collision_pipeline(self, node: "Node", obj: "CollisionPipeline") -> None:
        pass

    def process_ode_solver(self, node: "Node", obj: "OdeSolver") -> None:
        pass

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def for_each(node: "Node", components: Iterable[C], hook: Callable[["Node", C], None]) -> None:
        """Call ``hook(node, component)`` for each component, in order."""
        for component in list(components):
            hook(node, component)

    def timed(self, phase: str, obj: Any = None) -> ContextManager[None]:
        """Time the enclosed block on the attached timer, if any."""
        if self.timer is None:
            return nullcontext()
        return self.timer.step(phase, obj)

    def __repr__(self) -> str:
        return f"{self.name}(params={self.params!r})"
