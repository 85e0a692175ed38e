"""Mechanical visitors used around a solver step.

Each visitor applies one operation to the mechanical state (and, where
relevant, the projective constraints) of every node in a subtree:

    MechanicalResetConstraintVisitor               drop constraint rows
    MechanicalBeginIntegrationVisitor              prepare integration state
    MechanicalAccumulateConstraint                 build constraint rows, numbering them
    MechanicalPropagatePositionAndVelocityVisitor  finalize x / v for the new time
    MechanicalEndIntegrationVisitor                release integration state

plus the driver-side helpers InitVisitor, BehaviorUpdatePositionVisitor
and UpdateSimulationContextVisitor.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Set

from simgraph.params import ConstraintParams, ExecParams, MechanicalParams
from simgraph.simulation.visitor import TraversalContext, Visitor, VisitResult

if TYPE_CHECKING:
    from simgraph.components import BehaviorModel, MechanicalState, ProjectiveConstraint
    from simgraph.simulation.node import Node


class MechanicalVisitor(Visitor):
    """Dispatches each node's mechanical state and constraints."""

    def process_node_top_down(self, node: "Node", ctx: Any) -> VisitResult:
        if node.mechanical_state is not None:
            self.fwd_mechanical_state(node, node.mechanical_state, ctx)
        for constraint in list(node.constraints):
            self.fwd_projective_constraint(node, constraint, ctx)
        return VisitResult.CONTINUE

    def fwd_mechanical_state(self, node: "Node", state: "MechanicalState", ctx: Any) -> None:
        pass

    def fwd_projective_constraint(self, node: "Node", constraint: "ProjectiveConstraint", ctx: Any) -> None:
        pass


class MechanicalResetConstraintVisitor(MechanicalVisitor):
    def fwd_mechanical_state(self, node: "Node", state: "MechanicalState", ctx: Any) -> None:
        state.reset_constraint()


class MechanicalBeginIntegrationVisitor(MechanicalVisitor):
    def __init__(self, params: Optional[ExecParams], dt: float) -> None:
        super().__init__(params)
        self.dt = dt

    def fwd_mechanical_state(self, node: "Node", state: "MechanicalState", ctx: Any) -> None:
        state.begin_integration(self.dt)


class MechanicalEndIntegrationVisitor(MechanicalVisitor):
    def __init__(self, params: Optional[ExecParams], dt: float) -> None:
        super().__init__(params)
        self.dt = dt

    def fwd_mechanical_state(self, node: "Node", state: "MechanicalState", ctx: Any) -> None:
        state.end_integration(self.dt)


@dataclass
class ConstraintContext(TraversalContext):
    """Next free constraint id, advanced as rows are built."""

    constraint_id: int = 0


class MechanicalAccumulateConstraint(MechanicalVisitor):
    """Numbers and builds the constraint rows of a subtree.

    Ids start at ``constraint_id`` and are shared across the subtree, in
    traversal order; the context returned by ``execute`` holds the next
    free id.
    """

    def __init__(
        self,
        cparams: ConstraintParams,
        constraint_id: int = 0,
    ) -> None:
        super().__init__(cparams)
        self.first_constraint_id = constraint_id

    def new_context(self) -> ConstraintContext:
        return ConstraintContext(constraint_id=self.first_constraint_id)

    def fwd_projective_constraint(self, node: "Node", constraint: "ProjectiveConstraint", ctx: ConstraintContext) -> None:
        ctx.constraint_id = constraint.build_constraint_matrix(self.params, ctx.constraint_id)


@dataclass
class PropagationContext(TraversalContext):
    """Nodes whose time was advanced, in traversal order."""

    nodes: List["Node"] = field(default_factory=list)


class MechanicalPropagatePositionAndVelocityVisitor(MechanicalVisitor):
    """Projects constraints and stamps ``time`` on every node of the subtree."""

    def __init__(self, mparams: MechanicalParams, time: float) -> None:
        super().__init__(mparams)
        self.time = time

    def new_context(self) -> PropagationContext:
        return PropagationContext()

    def process_node_top_down(self, node: "Node", ctx: PropagationContext) -> VisitResult:
        for constraint in list(node.constraints):
            constraint.project_position()
            constraint.project_velocity()
        if node.mechanical_state is not None:
            node.mechanical_state.propagate(self.time)
        node.time = self.time
        ctx.nodes.append(node)
        return VisitResult.CONTINUE


class InitVisitor(Visitor):
    """Calls ``init()`` on every component, top-down, in insertion order."""

    def process_node_top_down(self, node: "Node", ctx: Any) -> VisitResult:
        for component in list(node.objects):
            component.init()
        return VisitResult.CONTINUE


class BehaviorUpdatePositionVisitor(Visitor):
    """Steps every behavior model; ``dt == 0`` uses each node's own step."""

    def __init__(self, params: Optional[ExecParams], dt: float) -> None:
        super().__init__(params)
        self.dt = dt

    def process_node_top_down(self, node: "Node", ctx: Any) -> VisitResult:
        self.for_each(node, node.behavior_models, self.process_behavior_model)
        return VisitResult.CONTINUE

    def process_behavior_model(self, node: "Node", obj: "BehaviorModel") -> None:
        obj.update_position(self.dt or node.dt)


class UpdateSimulationContextVisitor(Visitor):
    """Advances the clock of every node except the ones listed in ``skip``.

    Each node moves by ``dt``, or by its own step when ``dt`` is 0, the same
    step a solver on that node would have integrated with. Nodes whose own
    step is 0 too fall back to ``default_dt``.
    """

    def __init__(
        self,
        params: Optional[ExecParams],
        dt: float,
        skip: Iterable["Node"] = (),
        default_dt: float = 0.0,
    ) -> None:
        super().__init__(params)
        self.dt = dt
        self.default_dt = default_dt
        self._skip: Set[int] = {id(node) for node in skip}

    def process_node_top_down(self, node: "Node", ctx: Any) -> VisitResult:
        if id(node) not in self._skip:
            node.time = node.time + (self.dt or node.dt or self.default_dt)
        return VisitResult.CONTINUE
