"""Demo scene used by the CLI and the HTTP driver."""

from __future__ import annotations

import logging
from typing import Optional

from simgraph.components import ComponentFactory, component_factory, register_builtin_components
from simgraph.config.defaults import DEFAULT_DT
from simgraph.exceptions import ConfigurationError
from simgraph.simulation import Node

logger = logging.getLogger(__name__)

GRAVITY = (0.0, -9.81, 0.0)


def build_demo_scene(factory: Optional[ComponentFactory] = None, dt: float = DEFAULT_DT) -> Node:
    """Assemble a small scene from factory keys.

    Tree:
        root        DefaultPipeline, DampingForceField on /root/falling
        falling     MechanicalObject (Vec3d), EulerSolver, gravity
        anchored    MechanicalObject (Vec1d, 2 dofs), EulerSolver, FixedConstraint on dof 0
        oscillator  OscillatorBehavior

    Raises:
        ConfigurationError: If a required component cannot be created
    """
    factory = factory if factory is not None else component_factory()
    register_builtin_components(factory)

    root = Node("root", dt=dt)
    _require(root.create_object("DefaultPipeline", factory=factory))

    falling = root.create_child("falling")
    falling_state = _require(
        falling.create_object("MechanicalObject", template="Vec3d", factory=factory, position=[(0.0, 10.0, 0.0)])
    )
    _require(falling.create_object("EulerSolver", factory=factory))
    _require(falling.create_object("ConstantForceField", name="gravity", factory=factory, force=GRAVITY))

    _require(
        root.create_object("DampingForceField", name="air", factory=factory, damping=0.05, target=falling_state)
    )

    anchored = root.create_child("anchored")
    _require(
        anchored.create_object("MechanicalObject", template="Vec1d", factory=factory, position=[0.0, 1.0])
    )
    _require(anchored.create_object("EulerSolver", factory=factory))
    _require(anchored.create_object("FixedConstraint", factory=factory, indices=[0]))
    _require(anchored.create_object("ConstantForceField", name="pull", factory=factory, force=(1.0,)))

    oscillator = root.create_child("oscillator")
    _require(oscillator.create_object("OscillatorBehavior", factory=factory, amplitude=0.5, omega=6.0))

    return root


def _require(component):
    if component is None:
        raise ConfigurationError("Demo scene requires the builtin components to be registered")
    return component
