"""Scene-graph node.

A Node is a typed container: it owns child nodes and components sorted
into role slots, plus the structural flags the visitors consult. It holds
no simulation logic of its own.

Slots:
    solvers                    0..n  OdeSolver, in insertion order
    collision_pipeline         0..1  CollisionPipeline
    interaction_force_fields   0..n  InteractionForceField
    mechanical_state           0..1  MechanicalState
    behavior_models            0..n  BehaviorModel
    constraints                0..n  ProjectiveConstraint
    objects                    every component, in insertion order
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

from simgraph.components import (
    BaseComponent,
    BehaviorModel,
    CollisionPipeline,
    ComponentFactory,
    InteractionForceField,
    MechanicalState,
    OdeSolver,
    ProjectiveConstraint,
    create_component,
)
from simgraph.config.defaults import DEFAULT_DT, DEFAULT_START_TIME
from simgraph.exceptions import InvalidStepError, SceneGraphError

if TYPE_CHECKING:
    from simgraph.simulation.visitor import Visitor

logger = logging.getLogger(__name__)


class Node:
    """One element of the scene graph.

    Attributes:
        name: Node name, unique among siblings by convention only
        parent: Owning node (None for a root)
        children: Child nodes in insertion order
        active: Inactive nodes and their subtrees are skipped by every visitor
        sleeping: Sleeping nodes and their subtrees are skipped by every visitor

    Example:
        root = Node("root")
        body = root.create_child("body")
        body.create_object("MechanicalObject", position=[(0, 1, 0)])
        body.create_object("EulerSolver")
    """

    def __init__(
        self,
        name: str = "root",
        dt: float = DEFAULT_DT,
        time: float = DEFAULT_START_TIME,
        active: bool = True,
        sleeping: bool = False,
    ) -> None:
        self.name = name
        self.parent: Optional[Node] = None
        self.children: List[Node] = []
        self.active = active
        self.sleeping = sleeping
        self._dt = 0.0
        self.dt = dt
        self._time = float(time)

        self.objects: List[BaseComponent] = []
        self.solvers: List[OdeSolver] = []
        self.collision_pipeline: Optional[CollisionPipeline] = None
        self.interaction_force_fields: List[InteractionForceField] = []
        self.mechanical_state: Optional[MechanicalState] = None
        self.behavior_models: List[BehaviorModel] = []
        self.constraints: List[ProjectiveConstraint] = []

        self._traversals = 0

    # ------------------------------------------------------------------
    # Structural predicates and context values
    # ------------------------------------------------------------------

    def is_active(self) -> bool:
        return self.active

    def is_sleeping(self) -> bool:
        return self.sleeping

    @property
    def is_traversable(self) -> bool:
        """Whether visitors may enter this node."""
        return self.active and not self.sleeping

    @property
    def dt(self) -> float:
        return self._dt

    @dt.setter
    def dt(self, value: float) -> None:
        if value < 0:
            raise InvalidStepError(f"Node {self.name!r}: dt must be >= 0, got {value}")
        self._dt = float(value)

    @property
    def time(self) -> float:
        return self._time

    @time.setter
    def time(self, value: float) -> None:
        self._time = float(value)

    def get_dt(self) -> float:
        return self.dt

    def set_dt(self, value: float) -> None:
        self.dt = value

    def get_time(self) -> float:
        return self.time

    def set_time(self, value: float) -> None:
        self.time = value

    @property
    def path(self) -> str:
        if self.parent is None:
            return f"/{self.name}"
        return f"{self.parent.path}/{self.name}"

    @property
    def root(self) -> "Node":
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    # ------------------------------------------------------------------
    # Children
    # ------------------------------------------------------------------

    def add_child(self, child: "Node") -> "Node":
        """Attach ``child`` (detaching it from any previous parent).

        Raises:
            SceneGraphError: On cycles or while this node is being traversed
        """
        self._check_mutable()
        ancestor: Optional[Node] = self
        while ancestor is not None:
            if ancestor is child:
                raise SceneGraphError(f"Cannot add {child.path} under its own subtree")
            ancestor = ancestor.parent
        if child.parent is not None:
            child.parent.remove_child(child)
        child.parent = self
        self.children.append(child)
        return child

    def create_child(self, name: str, **kwargs: Any) -> "Node":
        """Create a child inheriting this node's step size and time."""
        kwargs.setdefault("dt", self.dt)
        kwargs.setdefault("time", self.time)
        return self.add_child(Node(name, **kwargs))

    def remove_child(self, child: "Node") -> bool:
        self._check_mutable()
        if child in self.children:
            self.children.remove(child)
            child.parent = None
            return True
        return False

    def get_child(self, name: str) -> Optional["Node"]:
        for child in self.children:
            if child.name == name:
                return child
        return None

    def iter_subtree(self, traversable_only: bool = False) -> Iterator["Node"]:
        """Depth-first pre-order over this node and its descendants."""
        if traversable_only and not self.is_traversable:
            return
        yield self
        for child in list(self.children):
            yield from child.iter_subtree(traversable_only)

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def add_object(self, component: BaseComponent) -> BaseComponent:
        """Attach a component, sorting it into its role slot(s).

        Raises:
            SceneGraphError: If the component belongs to another node, or a
                single-valued slot is already filled
        """
        self._check_mutable()
        if component.context is not None:
            raise SceneGraphError(f"{component.name} is already attached to {component.context.path}")

        if isinstance(component, CollisionPipeline) and self.collision_pipeline is not None:
            raise SceneGraphError(f"{self.path} already has collision pipeline {self.collision_pipeline.name}")
        if isinstance(component, MechanicalState) and self.mechanical_state is not None:
            raise SceneGraphError(f"{self.path} already has mechanical state {self.mechanical_state.name}")

        if isinstance(component, OdeSolver):
            self.solvers.append(component)
        if isinstance(component, CollisionPipeline):
            self.collision_pipeline = component
        if isinstance(component, InteractionForceField):
            self.interaction_force_fields.append(component)
        if isinstance(component, MechanicalState):
            self.mechanical_state = component
        if isinstance(component, BehaviorModel):
            self.behavior_models.append(component)
        if isinstance(component, ProjectiveConstraint):
            self.constraints.append(component)

        self.objects.append(component)
        component.context = self
        return component

    def remove_object(self, component: BaseComponent) -> bool:
        self._check_mutable()
        if component not in self.objects:
            return False
        self.objects.remove(component)
        for slot in (self.solvers, self.interaction_force_fields, self.behavior_models, self.constraints):
            if component in slot:
                slot.remove(component)
        if self.collision_pipeline is component:
            self.collision_pipeline = None
        if self.mechanical_state is component:
            self.mechanical_state = None
        component.context = None
        return True

    def create_object(
        self,
        type_name: str,
        name: str = "",
        template: Optional[str] = None,
        factory: Optional[ComponentFactory] = None,
        **attributes: Any,
    ) -> Optional[BaseComponent]:
        """Build a component through the factory and attach it.

        Returns:
            The attached component, or None if ``type_name`` could not be
            resolved (a warning is logged, the node is left unchanged)
        """
        component = create_component(type_name, name=name, template=template, factory=factory, **attributes)
        if component is None:
            return None
        return self.add_object(component)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def execute(self, visitor: "Visitor") -> Any:
        """Run ``visitor`` on the subtree rooted here."""
        return visitor.execute(self)

    def _enter_traversal(self) -> None:
        self._traversals += 1

    def _leave_traversal(self) -> None:
        self._traversals -= 1

    def _check_mutable(self) -> None:
        if self._traversals > 0:
            raise SceneGraphError(f"{self.path} cannot be modified while it is being traversed")

    def get_debug_info(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "active": self.active,
            "sleeping": self.sleeping,
            "time": self.time,
            "dt": self.dt,
            "objects": [c.get_debug_info() for c in self.objects],
            "children": [child.get_debug_info() for child in self.children],
        }

    def __repr__(self) -> str:
        return f"Node(name={self.name!r}, children={len(self.children)}, objects={len(self.objects)})"
