"""Components that record how the traversal engine calls them."""

from typing import List, Optional

from simgraph.components import (
    BaseComponent,
    BehaviorModel,
    CollisionPipeline,
    InteractionForceField,
    MechanicalState,
    OdeSolver,
    ProjectiveConstraint,
)
from simgraph.params import VecId


class CallLog:
    """Shared, ordered record of component calls."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []

    def record(self, *entry) -> None:
        self.calls.append(entry)

    def kinds(self) -> List[str]:
        return [entry[0] for entry in self.calls]

    def names(self, kind: str) -> List[str]:
        return [entry[1] for entry in self.calls if entry[0] == kind]


class RecordingSolver(OdeSolver):
    """Solver that records each call and the dt it was given."""

    def __init__(self, name: str = "", log: Optional[CallLog] = None, fail: bool = False) -> None:
        super().__init__(name)
        self.log = log if log is not None else CallLog()
        self.fail = fail
        self.dts: List[float] = []

    def solve(self, params, dt: float) -> None:
        self.log.record("solve", self.name, dt)
        self.dts.append(dt)
        if self.fail:
            raise RuntimeError(f"{self.name} diverged")


class RecordingForceField(InteractionForceField):
    def __init__(self, name: str = "", log: Optional[CallLog] = None) -> None:
        super().__init__(name)
        self.log = log if log is not None else CallLog()
        self.force_ids = []

    def add_force(self, mparams, force_id=None) -> None:
        self.log.record("add_force", self.name, mparams.dt)
        self.force_ids.append(force_id)


class RecordingPipeline(CollisionPipeline):
    def __init__(self, name: str = "", log: Optional[CallLog] = None) -> None:
        super().__init__(name)
        self.log = log if log is not None else CallLog()

    def compute_collision_reset(self) -> None:
        self.log.record("collision", self.name, "reset")

    def compute_collision_detection(self) -> None:
        self.log.record("collision", self.name, "detection")

    def compute_collision_response(self) -> None:
        self.log.record("collision", self.name, "response")


class RecordingBehavior(BehaviorModel):
    def __init__(self, name: str = "", log: Optional[CallLog] = None) -> None:
        super().__init__(name)
        self.log = log if log is not None else CallLog()

    def update_position(self, dt: float) -> None:
        self.log.record("behavior", self.name, dt)


class EventRecorder(BaseComponent):
    """Component that remembers every event it receives."""

    def __init__(self, name: str = "", log: Optional[CallLog] = None) -> None:
        super().__init__(name)
        self.log = log if log is not None else CallLog()
        self.events: List[str] = []

    def handle_event(self, event) -> None:
        self.events.append(event.event_name)
        self.log.record("event", self.name, event.event_name)


class RecordingState(MechanicalState):
    """Mechanical state with one 1-d dof that records every pass over it."""

    def __init__(self, name: str = "", log: Optional[CallLog] = None) -> None:
        super().__init__(name)
        self.log = log if log is not None else CallLog()
        self.vectors = {vec_id: [[0.0]] for vec_id in VecId}
        self.rows = []
        self.time = None

    def vector(self, vec_id):
        return self.vectors[vec_id]

    def reset_constraint(self) -> None:
        self.log.record("reset_constraint", self.name)
        self.rows.clear()

    def add_constraint_row(self, constraint_id, index, direction) -> None:
        self.rows.append((constraint_id, index, tuple(direction)))

    def begin_integration(self, dt: float) -> None:
        self.log.record("begin_integration", self.name, dt)

    def end_integration(self, dt: float) -> None:
        self.log.record("end_integration", self.name, dt)

    def propagate(self, time: float) -> None:
        self.log.record("propagate", self.name, time)
        self.time = time


class RecordingConstraint(ProjectiveConstraint):
    """Adds ``rows`` constraint rows to its node's state."""

    def __init__(self, name: str = "", log: Optional[CallLog] = None, rows: int = 1) -> None:
        super().__init__(name)
        self.log = log if log is not None else CallLog()
        self.rows = rows
        self.first_ids: List[int] = []

    def build_constraint_matrix(self, cparams, constraint_id: int) -> int:
        self.log.record("accumulate", self.name, constraint_id)
        self.first_ids.append(constraint_id)
        state = self.context.mechanical_state
        for offset in range(self.rows):
            state.add_constraint_row(constraint_id + offset, 0, [1.0])
        return constraint_id + self.rows
