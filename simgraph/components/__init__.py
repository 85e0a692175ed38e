"""Scene-graph components: role contracts, reference library, factory access."""

from simgraph.components.base import (
    BaseComponent,
    BehaviorModel,
    CollisionPipeline,
    InteractionForceField,
    MechanicalState,
    ObjectDescription,
    OdeSolver,
    ProjectiveConstraint,
)
from simgraph.components.factory import ComponentFactory, component_factory, create_component
from simgraph.components.library import (
    BUILTIN_TYPES,
    ConstantForceField,
    ConstraintRow,
    DampingForceField,
    DefaultPipeline,
    EulerSolver,
    FixedConstraint,
    MechanicalObject,
    MechanicalObject1d,
    MechanicalObject3d,
    OscillatorBehavior,
    register_builtin_components,
)

__all__ = [
    "BUILTIN_TYPES",
    "BaseComponent",
    "BehaviorModel",
    "CollisionPipeline",
    "ComponentFactory",
    "ConstantForceField",
    "ConstraintRow",
    "DampingForceField",
    "DefaultPipeline",
    "EulerSolver",
    "FixedConstraint",
    "InteractionForceField",
    "MechanicalObject",
    "MechanicalObject1d",
    "MechanicalObject3d",
    "MechanicalState",
    "ObjectDescription",
    "OdeSolver",
    "OscillatorBehavior",
    "ProjectiveConstraint",
    "component_factory",
    "create_component",
    "register_builtin_components",
]
