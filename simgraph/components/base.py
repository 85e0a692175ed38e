"""Base classes for scene-graph components.

Components are the pluggable units attached to a Node. The traversal
engine only knows the role contracts defined here; concrete
implementations are obtained through the component factory.

Roles:
    OdeSolver              - integrates its node's subtree (``solve``)
    InteractionForceField  - adds force contributions (``add_force``)
    CollisionPipeline      - collision reset / detection / response
    BehaviorModel          - non-mechanical models stepped by position
    MechanicalState        - holds degrees of freedom and constraint rows
    ProjectiveConstraint   - contributes constraint rows, projects state
"""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Mapping, Optional, Tuple

from simgraph.config.defaults import DEFAULT_TEMPLATE
from simgraph.params import (
    ConstraintParams,
    ExecParams,
    MechanicalParams,
    VecId,
)

if TYPE_CHECKING:
    from simgraph.events import SimulationEvent
    from simgraph.simulation.node import Node

logger = logging.getLogger(__name__)

__all__ = [
    "ObjectDescription",
    "BaseComponent",
    "OdeSolver",
    "InteractionForceField",
    "CollisionPipeline",
    "BehaviorModel",
    "MechanicalState",
    "ProjectiveConstraint",
]


@dataclass(frozen=True)
class ObjectDescription:
    """Construction argument handed to component creators.

    Attributes:
        type_name: Factory key the description was written for
        name: Instance name
        template: Data template (e.g. "Vec1d", "Vec3d"); None means default
        attributes: Keyword arguments for the component constructor
    """

    type_name: str
    name: str = ""
    template: Optional[str] = None
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @property
    def resolved_template(self) -> str:
        return self.template or DEFAULT_TEMPLATE


class BaseComponent:
    """Base class of everything that can be attached to a Node.

    Subclasses that only support some data templates list them in
    ``templates``; ``create`` declines descriptions for other templates,
    which is what lets several implementations share one factory key.
    """

    templates: ClassVar[Tuple[str, ...]] = ()

    def __init__(self, name: str = "") -> None:
        self.name = name or type(self).__name__
        self.context: Optional["Node"] = None

    @classmethod
    def can_create(cls, description: ObjectDescription) -> bool:
        """Whether this type can be built from ``description``."""
        if cls.templates and description.resolved_template not in cls.templates:
            return False
        try:
            inspect.signature(cls).bind(name=description.name, **description.attributes)
        except TypeError as e:
            logger.debug(f"{cls.__name__} rejects attributes of {description.type_name!r}: {e}")
            return False
        return True

    @classmethod
    def create(cls, description: ObjectDescription) -> Optional["BaseComponent"]:
        """Construction hook used by type-bound creators.

        Returns:
            A new instance, or None when ``description`` does not fit this type
        """
        if not cls.can_create(description):
            return None
        return cls(name=description.name, **description.attributes)

    def init(self) -> None:
        """Resolve links to sibling components once the scene is assembled."""

    def handle_event(self, event: "SimulationEvent") -> None:
        """Receive an event propagated through the graph."""

    def get_debug_info(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": type(self).__name__,
            "node": self.context.name if self.context is not None else None,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class OdeSolver(BaseComponent, ABC):
    """Integrates the mechanical states of its node's subtree over one step."""

    @abstractmethod
    def solve(self, params: ExecParams, dt: float) -> None:
        """Advance positions and velocities in place by ``dt``."""


class InteractionForceField(BaseComponent, ABC):
    """Adds force contributions to one or more mechanical states."""

    @abstractmethod
    def add_force(self, mparams: MechanicalParams, force_id: VecId = VecId.EXTERNAL_FORCE) -> None:
        """Accumulate forces into the ``force_id`` vector of the target states."""


class CollisionPipeline(BaseComponent, ABC):
    """Runs collision detection and response for a subtree."""

    @abstractmethod
    def compute_collision_reset(self) -> None: ...

    @abstractmethod
    def compute_collision_detection(self) -> None: ...

    @abstractmethod
    def compute_collision_response(self) -> None: ...


class BehaviorModel(BaseComponent, ABC):
    """A model stepped directly, outside mechanical integration."""

    @abstractmethod
    def update_position(self, dt: float) -> None: ...


class MechanicalState(BaseComponent, ABC):
    """Holds degrees of freedom and their constraint rows."""

    @abstractmethod
    def vector(self, vec_id: VecId) -> List[List[float]]:
        """The state vector named by ``vec_id`` (mutable, one entry per dof)."""

    @abstractmethod
    def reset_constraint(self) -> None:
        """Drop every accumulated constraint row."""

    @abstractmethod
    def add_constraint_row(self, constraint_id: int, index: int, direction: List[float]) -> None:
        """Record one constraint row acting on dof ``index``."""

    @abstractmethod
    def begin_integration(self, dt: float) -> None: ...

    @abstractmethod
    def end_integration(self, dt: float) -> None: ...

    @abstractmethod
    def propagate(self, time: float) -> None:
        """Positions and velocities are final for simulation ``time``."""


class ProjectiveConstraint(BaseComponent, ABC):
    """Constrains degrees of freedom of its node's mechanical state."""

    @abstractmethod
    def build_constraint_matrix(self, cparams: ConstraintParams, constraint_id: int) -> int:
        """Write constraint rows starting at ``constraint_id``.

        Returns:
            The next free constraint id
        """

    def project_position(self) -> None:
        """Enforce the constraint on positions."""

    def project_velocity(self) -> None:
        """Enforce the constraint on velocities."""
