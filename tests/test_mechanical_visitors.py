"""Tests for the mechanical, event and driver-side helper visitors."""

import pytest

from simgraph.components import FixedConstraint, MechanicalObject3d
from simgraph.events import AnimateBeginEvent, CollisionBeginEvent
from simgraph.params import ConstraintParams, ExecParams, MechanicalParams
from simgraph.simulation import (
    BehaviorUpdatePositionVisitor,
    InitVisitor,
    MechanicalAccumulateConstraint,
    MechanicalBeginIntegrationVisitor,
    MechanicalEndIntegrationVisitor,
    MechanicalPropagatePositionAndVelocityVisitor,
    MechanicalResetConstraintVisitor,
    Node,
    PropagateEventVisitor,
    UpdateSimulationContextVisitor,
)
from tests.fakes.recording_components import (
    CallLog,
    EventRecorder,
    RecordingBehavior,
    RecordingConstraint,
    RecordingState,
)


def chain(log: CallLog):
    root = Node("root")
    root.add_object(RecordingState("s_root", log))
    child = root.create_child("child")
    child.add_object(RecordingState("s_child", log))
    return root, child


def test_reset_visits_every_state() -> None:
    log = CallLog()
    root, _ = chain(log)
    MechanicalResetConstraintVisitor(MechanicalParams()).execute(root)
    assert log.names("reset_constraint") == ["s_root", "s_child"]


def test_begin_and_end_integration_pass_dt() -> None:
    log = CallLog()
    root, _ = chain(log)
    MechanicalBeginIntegrationVisitor(ExecParams(), 0.25).execute(root)
    MechanicalEndIntegrationVisitor(ExecParams(), 0.25).execute(root)
    assert log.calls == [
        ("begin_integration", "s_root", 0.25),
        ("begin_integration", "s_child", 0.25),
        ("end_integration", "s_root", 0.25),
        ("end_integration", "s_child", 0.25),
    ]


def test_accumulate_numbers_rows_from_start_id() -> None:
    log = CallLog()
    root, child = chain(log)
    first = root.add_object(RecordingConstraint("a", log, rows=2))
    second = child.add_object(RecordingConstraint("b", log, rows=2))

    ctx = MechanicalAccumulateConstraint(ConstraintParams(), constraint_id=10).execute(root)

    assert first.first_ids == [10]
    assert second.first_ids == [12]
    assert ctx.constraint_id == 14
    assert [row[0] for row in root.mechanical_state.rows] == [10, 11]


def test_propagate_projects_and_stamps_time() -> None:
    root = Node("root")
    body = root.create_child("body")
    state = body.add_object(MechanicalObject3d(position=[(1, 1, 1)]))
    fix = body.add_object(FixedConstraint(indices=[0]))
    fix.init()
    state.position[0] = [9.0, 9.0, 9.0]
    state.velocity[0] = [1.0, 0.0, 0.0]

    ctx = MechanicalPropagatePositionAndVelocityVisitor(MechanicalParams(dt=0.1), 0.1).execute(root)

    assert state.position[0] == [1.0, 1.0, 1.0]
    assert state.velocity[0] == [0.0, 0.0, 0.0]
    assert state.time == 0.1
    assert body.time == 0.1
    assert ctx.nodes == [root, body]


def test_event_reaches_every_component_in_order() -> None:
    log = CallLog()
    root = Node("root")
    root.add_object(EventRecorder("r1", log))
    root.add_object(EventRecorder("r2", log))
    root.create_child("child").add_object(EventRecorder("c1", log))
    root.create_child("asleep", sleeping=True).add_object(EventRecorder("zz", log))

    ctx = PropagateEventVisitor(ExecParams(), AnimateBeginEvent(dt=0.01)).execute(root)

    assert log.names("event") == ["r1", "r2", "c1"]
    assert ctx.delivered == 3


def test_event_visitor_repr() -> None:
    visitor = PropagateEventVisitor(ExecParams(), CollisionBeginEvent())
    assert "CollisionBeginEvent" in repr(visitor)


def test_init_visitor_calls_init() -> None:
    root = Node("root")
    state = root.add_object(MechanicalObject3d(position=[(0, 2, 0)]))
    fix = root.add_object(FixedConstraint(indices=[0]))
    InitVisitor().execute(root)
    state.position[0] = [5.0, 5.0, 5.0]
    fix.project_position()
    assert state.position[0] == [0.0, 2.0, 0.0]


def test_behavior_update_uses_node_dt_when_zero() -> None:
    log = CallLog()
    root = Node("root", dt=0.01)
    root.add_object(RecordingBehavior("global", log))
    root.create_child("fine", dt=0.001).add_object(RecordingBehavior("fine", log))

    BehaviorUpdatePositionVisitor(ExecParams(), 0.0).execute(root)
    BehaviorUpdatePositionVisitor(ExecParams(), 0.5).execute(root)

    assert [entry[2] for entry in log.calls] == [0.01, 0.001, 0.5, 0.5]


def test_update_context_skips_listed_nodes() -> None:
    root = Node("root")
    integrated = root.create_child("integrated", time=0.3)
    free = root.create_child("free")

    UpdateSimulationContextVisitor(ExecParams(), 0.5, skip=[integrated]).execute(root)

    assert root.time == 0.5
    assert free.time == 0.5
    assert integrated.time == 0.3


def test_update_context_zero_dt_uses_each_node_step() -> None:
    root = Node("root", dt=0.01)
    fast = root.create_child("fast", dt=0.02)
    slow = root.create_child("slow", dt=0.05)
    unset = root.create_child("unset", dt=0.0)

    UpdateSimulationContextVisitor(ExecParams(), 0.0, default_dt=0.1).execute(root)

    assert root.time == pytest.approx(0.01)
    assert fast.time == pytest.approx(0.02)
    assert slow.time == pytest.approx(0.05)
    assert unset.time == pytest.approx(0.1)
