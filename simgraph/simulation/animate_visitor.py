"""The step algorithm: one AnimateVisitor traversal per simulation tick.

Phase order at each visited (active, non-sleeping) node:

1. Constraint reset for the whole traversed tree, on the first node only.
2. Collision: if the node owns a pipeline, CollisionBeginEvent to the
   subtree, collision detection/response over the subtree, CollisionEndEvent.
3. Step size: a zero visitor dt adopts the node's own dt, otherwise the
   visitor dt is pushed onto the node. Afterwards ``node.dt`` is the
   effective step for that node.
4a. Node owns solvers: the subtree is integrated as one unit
    (IntegrateBeginEvent, begin integration, constraint accumulation
    numbered from 0, each solver in insertion order, position/velocity
    propagation to ``time + dt``, end integration, IntegrateEndEvent)
    and the children are pruned.
4b. Otherwise: every interaction force field adds its external force
    contribution and the children are visited.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from simgraph.events import (
    CollisionBeginEvent,
    CollisionEndEvent,
    IntegrateBeginEvent,
    IntegrateEndEvent,
)
from simgraph.exceptions import InvalidStepError
from simgraph.params import ConstraintParams, ExecParams, MechanicalParams, VecId
from simgraph.simulation.collision_visitor import CollisionVisitor
from simgraph.simulation.event_visitor import PropagateEventVisitor
from simgraph.simulation.mechanical_visitors import (
    MechanicalAccumulateConstraint,
    MechanicalBeginIntegrationVisitor,
    MechanicalEndIntegrationVisitor,
    MechanicalPropagatePositionAndVelocityVisitor,
    MechanicalResetConstraintVisitor,
)
from simgraph.simulation.visitor import TraversalContext, Visitor, VisitResult

if TYPE_CHECKING:
    from simgraph.components import CollisionPipeline, InteractionForceField, OdeSolver
    from simgraph.simulation.node import Node
    from simgraph.timing import StepTimer

logger = logging.getLogger(__name__)


@dataclass
class AnimateFrame(TraversalContext):
    """Bookkeeping of one AnimateVisitor traversal.

    Attributes:
        first_node_visited: Set once the one-time constraint reset has fired
        constraint_resets: How many times the reset fired (0 or 1)
        constraint_id: Next free constraint id of the last integrated subtree
        integrated_nodes: Nodes whose time was advanced by a solver subtree
        solver_calls: Number of ``solve`` invocations
        force_field_calls: Number of ``add_force`` invocations in force phases
    """

    first_node_visited: bool = False
    constraint_resets: int = 0
    constraint_id: int = 0
    integrated_nodes: List["Node"] = field(default_factory=list)
    solver_calls: int = 0
    force_field_calls: int = 0


class AnimateVisitor(Visitor):
    """Advances the scene graph by one step.

    Example:
        frame = AnimateVisitor(ExecParams(), dt=0.01).execute(root)
        frame.solver_calls
    """

    def __init__(
        self,
        params: Optional[ExecParams] = None,
        dt: float = 0.0,
        timer: Optional["StepTimer"] = None,
    ) -> None:
        """Create a step visitor.

        Args:
            params: Execution parameters handed to solvers and sub-visitors
            dt: Global step size; 0 means each node uses its own dt
            timer: Optional instrumentation sink

        Raises:
            InvalidStepError: If ``dt`` is negative
        """
        super().__init__(params, timer)
        if dt < 0:
            raise InvalidStepError(f"dt must be >= 0, got {dt}")
        self.dt = float(dt)

    def new_context(self) -> AnimateFrame:
        return AnimateFrame()

    def process_node_top_down(self, node: "Node", ctx: AnimateFrame) -> VisitResult:
        if not ctx.first_node_visited:
            ctx.first_node_visited = True
            self._reset_constraints(node, ctx)

        if node.collision_pipeline is not None:
            self.process_collision_pipeline(node, node.collision_pipeline)

        if self.dt == 0:
            dt = node.dt
        else:
            node.dt = self.dt
            dt = self.dt

        if node.solvers:
            self._integrate(node, dt, ctx)
            return VisitResult.PRUNE

        if node.mechanical_state is not None:
            logger.debug(f"{node.path}: mechanical state without solver, applying force fields only")

        for ff in list(node.interaction_force_fields):
            self.fwd_interaction_force_field(node, ff)
            ctx.force_field_calls += 1
        return VisitResult.CONTINUE

    def _reset_constraints(self, node: "Node", ctx: AnimateFrame) -> None:
        mparams = MechanicalParams.from_exec(self.params, self.dt or node.dt)
        MechanicalResetConstraintVisitor(mparams).execute(node)
        ctx.constraint_resets += 1

    def _integrate(self, node: "Node", dt: float, ctx: AnimateFrame) -> None:
        next_time = node.time + dt
        with self.timed("Mechanical", node):
            PropagateEventVisitor(self.params, IntegrateBeginEvent()).execute(node)
            MechanicalBeginIntegrationVisitor(self.params, dt).execute(node)

            accumulated = MechanicalAccumulateConstraint(
                ConstraintParams.from_exec(self.params),
                constraint_id=0,
            ).execute(node)
            ctx.constraint_id = accumulated.constraint_id

            for solver in list(node.solvers):
                self.process_ode_solver(node, solver)
                ctx.solver_calls += 1

            mparams = MechanicalParams.from_exec(self.params, dt)
            propagated = MechanicalPropagatePositionAndVelocityVisitor(mparams, next_time).execute(node)
            ctx.integrated_nodes.extend(propagated.nodes)

            MechanicalEndIntegrationVisitor(self.params, dt).execute(node)
            PropagateEventVisitor(self.params, IntegrateEndEvent()).execute(node)

    # ------------------------------------------------------------------
    # Per-role hooks
    # ------------------------------------------------------------------

    def process_collision_pipeline(self, node: "Node", obj: "CollisionPipeline") -> None:
        with self.timed("Collision", obj):
            with self.timed("begin collision", obj):
                PropagateEventVisitor(self.params, CollisionBeginEvent()).execute(node)
            CollisionVisitor(self.params, self.timer).execute(node)
            with self.timed("end collision", obj):
                PropagateEventVisitor(self.params, CollisionEndEvent()).execute(node)

    def process_ode_solver(self, node: "Node", obj: "OdeSolver") -> None:
        with self.timed("Solve", obj):
            obj.solve(self.params, node.dt)

    def fwd_interaction_force_field(self, node: "Node", obj: "InteractionForceField") -> None:
        with self.timed("InteractionFF", obj):
            mparams = MechanicalParams.from_exec(self.params, node.dt)
            obj.add_force(mparams, VecId.EXTERNAL_FORCE)
