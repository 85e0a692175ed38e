"""Reference component implementations.

Small, dependency-free implementations of each role so a scene can be
assembled from factory keys and stepped end to end. They are deliberately
simple (semi-implicit Euler, constant forces, a counting collision
pipeline); numerical quality is not their purpose.

Registration is explicit: call ``register_builtin_components(factory)``
from the startup path. Nothing registers at import time.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Iterable, List, Optional, Sequence

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
from simgraph.factory import Creator, Factory
from simgraph.params import ConstraintParams, ExecParams, MechanicalParams, VecId

if TYPE_CHECKING:
    from simgraph.simulation.node import Node

logger = logging.getLogger(__name__)


# =============================================================================
# Mechanical state
# =============================================================================


@dataclass(frozen=True)
class ConstraintRow:
    """One row of the holonomic constraint matrix."""

    constraint_id: int
    index: int
    direction: tuple


def _as_vectors(values: Optional[Iterable[Any]], size: int, dim: int) -> List[List[float]]:
    if values is None:
        return [[0.0] * dim for _ in range(size)]
    vectors = []
    for value in values:
        coords = [float(value)] if isinstance(value, (int, float)) else [float(c) for c in value]
        if len(coords) != dim:
            raise ValueError(f"Expected {dim} coordinates per dof, got {len(coords)}")
        vectors.append(coords)
    return vectors


class MechanicalObject(MechanicalState):
    """Degrees of freedom stored as per-dof coordinate lists.

    Attributes:
        dim: Coordinates per dof (set by the templated subclasses)
    """

    dim: ClassVar[int] = 3

    def __init__(
        self,
        name: str = "",
        position: Optional[Sequence[Any]] = None,
        velocity: Optional[Sequence[Any]] = None,
        mass: float = 1.0,
        size: Optional[int] = None,
    ) -> None:
        super().__init__(name)
        if mass <= 0:
            raise ValueError(f"mass must be positive, got {mass}")
        if position is None:
            self.position = _as_vectors(None, size or 1, self.dim)
        else:
            self.position = _as_vectors(position, 0, self.dim)
        n = len(self.position)
        self.velocity = _as_vectors(velocity, n, self.dim)
        if len(self.velocity) != n:
            raise ValueError(f"velocity has {len(self.velocity)} dofs, position has {n}")
        self.force = _as_vectors(None, n, self.dim)
        self.external_force = _as_vectors(None, n, self.dim)
        self.mass = float(mass)
        self.constraint_rows: List[ConstraintRow] = []
        self.time = 0.0
        self.integrating = False

    @property
    def size(self) -> int:
        return len(self.position)

    def vector(self, vec_id: VecId) -> List[List[float]]:
        if vec_id is VecId.POSITION:
            return self.position
        if vec_id is VecId.VELOCITY:
            return self.velocity
        if vec_id is VecId.FORCE:
            return self.force
        return self.external_force

    def reset_constraint(self) -> None:
        self.constraint_rows.clear()

    def add_constraint_row(self, constraint_id: int, index: int, direction: List[float]) -> None:
        if not 0 <= index < self.size:
            raise IndexError(f"{self.name}: dof {index} out of range (size {self.size})")
        self.constraint_rows.append(ConstraintRow(constraint_id, index, tuple(direction)))

    def begin_integration(self, dt: float) -> None:
        # Start this step's force from what interaction force fields accumulated
        self.force = [list(f) for f in self.external_force]
        self.integrating = True

    def end_integration(self, dt: float) -> None:
        self.external_force = _as_vectors(None, self.size, self.dim)
        self.integrating = False

    def propagate(self, time: float) -> None:
        self.time = time

    def get_debug_info(self) -> Dict[str, Any]:
        info = super().get_debug_info()
        info.update(
            {
                "size": self.size,
                "position": [list(p) for p in self.position],
                "velocity": [list(v) for v in self.velocity],
                "constraints": len(self.constraint_rows),
            }
        )
        return info


class MechanicalObject1d(MechanicalObject):
    templates = ("Vec1d",)
    dim = 1


class MechanicalObject3d(MechanicalObject):
    templates = ("Vec3d",)
    dim = 3


# =============================================================================
# Solvers
# =============================================================================


def _subtree_states(node: "Node") -> List[MechanicalState]:
    return [n.mechanical_state for n in node.iter_subtree(traversable_only=True) if n.mechanical_state is not None]


class EulerSolver(OdeSolver):
    """Semi-implicit Euler over the mechanical states of the solver's subtree.

    Inactive and sleeping descendants are left untouched, like in every other
    traversal.

    Force fields of the subtree are evaluated by the solver itself, into the
    FORCE vector seeded from the external forces at begin of integration.
    """

    def __init__(self, name: str = "", symplectic: bool = True) -> None:
        super().__init__(name)
        self.symplectic = symplectic
        self.solve_count = 0

    def solve(self, params: ExecParams, dt: float) -> None:
        if self.context is None:
            logger.warning(f"{self.name}: solver is not attached to a node")
            return

        mparams = MechanicalParams.from_exec(params, dt)
        for node in self.context.iter_subtree(traversable_only=True):
            for ff in node.interaction_force_fields:
                ff.add_force(mparams, VecId.FORCE)

        for state in _subtree_states(self.context):
            position = state.vector(VecId.POSITION)
            velocity = state.vector(VecId.VELOCITY)
            force = state.vector(VecId.FORCE)
            inv_mass = 1.0 / getattr(state, "mass", 1.0)
            for x, v, f in zip(position, velocity, force):
                for axis in range(len(x)):
                    old_v = v[axis]
                    v[axis] += dt * f[axis] * inv_mass
                    x[axis] += dt * (v[axis] if self.symplectic else old_v)
        self.solve_count += 1


# =============================================================================
# Force fields
# =============================================================================


class _TargetedForceField(InteractionForceField):
    """Force field acting on an explicit state, or on its node's state."""

    def __init__(self, name: str = "", target: Optional[MechanicalState] = None) -> None:
        super().__init__(name)
        self.target = target

    def _resolve_target(self) -> Optional[MechanicalState]:
        if self.target is not None:
            return self.target
        if self.context is not None:
            return self.context.mechanical_state
        return None


class ConstantForceField(_TargetedForceField):
    """Adds the same force to every dof of the target state."""

    def __init__(
        self,
        name: str = "",
        force: Sequence[float] = (0.0, 0.0, 0.0),
        target: Optional[MechanicalState] = None,
    ) -> None:
        super().__init__(name, target)
        self.force = [float(c) for c in force]
        self.apply_count = 0

    def add_force(self, mparams: MechanicalParams, force_id: VecId = VecId.EXTERNAL_FORCE) -> None:
        state = self._resolve_target()
        if state is None:
            logger.debug(f"{self.name}: no mechanical state to act on")
            return
        for f in state.vector(force_id):
            for axis in range(min(len(f), len(self.force))):
                f[axis] += self.force[axis]
        self.apply_count += 1


class DampingForceField(_TargetedForceField):
    """Viscous damping ``f = -c v`` on the target state."""

    def __init__(
        self,
        name: str = "",
        damping: float = 0.1,
        target: Optional[MechanicalState] = None,
    ) -> None:
        super().__init__(name, target)
        if damping < 0:
            raise ValueError(f"damping must be >= 0, got {damping}")
        self.damping = float(damping)

    def add_force(self, mparams: MechanicalParams, force_id: VecId = VecId.EXTERNAL_FORCE) -> None:
        state = self._resolve_target()
        if state is None:
            return
        for f, v in zip(state.vector(force_id), state.vector(VecId.VELOCITY)):
            for axis in range(len(f)):
                f[axis] -= self.damping * v[axis]


# =============================================================================
# Collision, constraints, behavior
# =============================================================================


class DefaultPipeline(CollisionPipeline):
    """Collision pipeline that records each phase it runs.

    Narrow-phase geometry is out of scope; the pipeline only exposes the
    reset / detection / response sequencing.
    """

    def __init__(self, name: str = "", verbose: bool = False) -> None:
        super().__init__(name)
        self.verbose = verbose
        self.counters = {"reset": 0, "detection": 0, "response": 0}

    def _count(self, phase: str) -> None:
        self.counters[phase] += 1
        if self.verbose:
            logger.info(f"{self.name}: collision {phase}")

    def compute_collision_reset(self) -> None:
        self._count("reset")

    def compute_collision_detection(self) -> None:
        self._count("detection")

    def compute_collision_response(self) -> None:
        self._count("response")

    def get_debug_info(self) -> Dict[str, Any]:
        info = super().get_debug_info()
        info["counters"] = dict(self.counters)
        return info


class FixedConstraint(ProjectiveConstraint):
    """Pins the listed dofs of its node's mechanical state."""

    def __init__(self, name: str = "", indices: Sequence[int] = ()) -> None:
        super().__init__(name)
        self.indices = [int(i) for i in indices]
        self._rest: Dict[int, List[float]] = {}

    def _state(self) -> Optional[MechanicalState]:
        return self.context.mechanical_state if self.context is not None else None

    def init(self) -> None:
        state = self._state()
        if state is None:
            logger.warning(f"{self.name}: no mechanical state in node, constraint inactive")
            return
        position = state.vector(VecId.POSITION)
        self._rest = {i: list(position[i]) for i in self.indices}

    def build_constraint_matrix(self, cparams: ConstraintParams, constraint_id: int) -> int:
        state = self._state()
        if state is None:
            return constraint_id
        dim = len(state.vector(VecId.POSITION)[0]) if state.vector(VecId.POSITION) else 0
        for index in self.indices:
            for axis in range(dim):
                direction = [0.0] * dim
                direction[axis] = 1.0
                state.add_constraint_row(constraint_id, index, direction)
                constraint_id += 1
        return constraint_id

    def project_position(self) -> None:
        state = self._state()
        if state is None:
            return
        position = state.vector(VecId.POSITION)
        for index, rest in self._rest.items():
            position[index][:] = rest

    def project_velocity(self) -> None:
        state = self._state()
        if state is None:
            return
        velocity = state.vector(VecId.VELOCITY)
        for index in self.indices:
            velocity[index][:] = [0.0] * len(velocity[index])


class OscillatorBehavior(BehaviorModel):
    """Harmonic oscillator ``value = amplitude * sin(omega * t)``."""

    def __init__(self, name: str = "", amplitude: float = 1.0, omega: float = 1.0) -> None:
        super().__init__(name)
        self.amplitude = float(amplitude)
        self.omega = float(omega)
        self.elapsed = 0.0
        self.value = 0.0

    def update_position(self, dt: float) -> None:
        self.elapsed += dt
        self.value = self.amplitude * math.sin(self.omega * self.elapsed)


# =============================================================================
# Registration
# =============================================================================

BUILTIN_TYPES = (
    ("EulerSolver", EulerSolver, False),
    ("ConstantForceField", ConstantForceField, False),
    ("DampingForceField", DampingForceField, False),
    ("DefaultPipeline", DefaultPipeline, False),
    ("FixedConstraint", FixedConstraint, False),
    ("OscillatorBehavior", OscillatorBehavior, False),
    ("MechanicalObject", MechanicalObject1d, True),
    ("MechanicalObject", MechanicalObject3d, True),
)


def register_builtin_components(factory: Factory[str, BaseComponent, ObjectDescription]) -> int:
    """Register the reference components into ``factory``.

    Safe to call more than once: keys already bound are refused by the
    factory and simply not counted. Multi-valued keys are only registered
    when the key is not present yet.

    Returns:
        Number of creators that were actually registered
    """
    registered = 0
    fresh_multi_keys = {key for key, _, multi in BUILTIN_TYPES if multi and key not in factory}
    for key, real_type, multi in BUILTIN_TYPES:
        if multi and key not in fresh_multi_keys:
            continue
        if Creator(factory, key, real_type, multi=multi).registered:
            registered += 1
    logger.debug(f"Registered {registered} builtin component creators")
    return registered
