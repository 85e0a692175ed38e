"""Simulation package - scene graph and traversal.

- node.py: the scene-graph Node
- visitor.py: the generic traversal engine
- animate_visitor.py: the per-step algorithm
- mechanical_visitors.py, collision_visitor.py, event_visitor.py: sub-traversals
- simulation.py: the driver that runs one step per call

Usage:
    from simgraph.simulation import Node, Simulation

    simulation = Simulation()
    simulation.animate(root, dt=0.01)
"""

from simgraph.simulation.animate_visitor import AnimateFrame, AnimateVisitor
from simgraph.simulation.collision_visitor import CollisionVisitor
from simgraph.simulation.event_visitor import PropagateEventVisitor
from simgraph.simulation.mechanical_visitors import (
    BehaviorUpdatePositionVisitor,
    InitVisitor,
    MechanicalAccumulateConstraint,
    MechanicalBeginIntegrationVisitor,
    MechanicalEndIntegrationVisitor,
    MechanicalPropagatePositionAndVelocityVisitor,
    MechanicalResetConstraintVisitor,
    UpdateSimulationContextVisitor,
)
from simgraph.simulation.node import Node
from simgraph.simulation.simulation import Simulation
from simgraph.simulation.visitor import TraversalContext, Visitor, VisitResult

__all__ = [
    "AnimateFrame",
    "AnimateVisitor",
    "BehaviorUpdatePositionVisitor",
    "CollisionVisitor",
    "InitVisitor",
    "MechanicalAccumulateConstraint",
    "MechanicalBeginIntegrationVisitor",
    "MechanicalEndIntegrationVisitor",
    "MechanicalPropagatePositionAndVelocityVisitor",
    "MechanicalResetConstraintVisitor",
    "Node",
    "PropagateEventVisitor",
    "Simulation",
    "TraversalContext",
    "UpdateSimulationContextVisitor",
    "VisitResult",
    "Visitor",
]
