"""Tests for the generic traversal engine."""

from simgraph.simulation import Node, TraversalContext, Visitor, VisitResult
from simgraph.timing import StepTimer
from tests.fakes.recording_components import (
    CallLog,
    RecordingBehavior,
    RecordingForceField,
    RecordingPipeline,
    RecordingSolver,
)


class OrderVisitor(Visitor):
    """Records top-down and bottom-up calls; prunes nodes named in ``prune``."""

    def __init__(self, prune=()):
        super().__init__()
        self.prune = set(prune)
        self.order = []

    def process_node_top_down(self, node, ctx):
        self.order.append(("down", node.name))
        return VisitResult.PRUNE if node.name in self.prune else VisitResult.CONTINUE

    def process_node_bottom_up(self, node, ctx):
        self.order.append(("up", node.name))


def build_tree():
    root = Node("root")
    a = root.create_child("a")
    a.create_child("a1")
    a.create_child("a2")
    root.create_child("b")
    return root


def test_depth_first_order_with_bottom_up() -> None:
    visitor = OrderVisitor()
    build_tree().execute(visitor)
    assert visitor.order == [
        ("down", "root"),
        ("down", "a"),
        ("down", "a1"),
        ("up", "a1"),
        ("down", "a2"),
        ("up", "a2"),
        ("up", "a"),
        ("down", "b"),
        ("up", "b"),
        ("up", "root"),
    ]


def test_prune_skips_children_but_not_bottom_up() -> None:
    visitor = OrderVisitor(prune={"a"})
    build_tree().execute(visitor)
    assert ("down", "a1") not in visitor.order
    assert ("up", "a") in visitor.order
    assert ("down", "b") in visitor.order


def test_inactive_and_sleeping_subtrees_are_never_entered() -> None:
    root = build_tree()
    root.get_child("a").active = False
    root.get_child("b").sleeping = True

    visitor = OrderVisitor()
    ctx = root.execute(visitor)

    assert visitor.order == [("down", "root"), ("up", "root")]
    assert ctx.visited == 1
    assert ctx.pruned == 2


def test_active_descendant_of_inactive_node_is_not_visited() -> None:
    root = build_tree()
    root.get_child("a").active = False
    a1 = root.get_child("a").get_child("a1")
    assert a1.is_traversable

    visitor = OrderVisitor()
    root.execute(visitor)
    assert ("down", "a1") not in visitor.order


def test_untraversable_root_runs_no_hook() -> None:
    root = build_tree()
    root.sleeping = True
    visitor = OrderVisitor()
    ctx = root.execute(visitor)
    assert visitor.order == []
    assert ctx.visited == 0


def test_each_execute_returns_a_fresh_context() -> None:
    root = build_tree()
    visitor = OrderVisitor()
    first = root.execute(visitor)
    second = root.execute(visitor)
    assert isinstance(first, TraversalContext)
    assert first is not second
    assert first.visited == second.visited == 5


def test_default_dispatch_role_order() -> None:
    log = CallLog()
    node = Node("n")
    node.add_object(RecordingSolver("solver", log))
    node.add_object(RecordingPipeline("pipeline", log))
    node.add_object(RecordingForceField("ff1", log))
    node.add_object(RecordingBehavior("behavior", log))
    node.add_object(RecordingForceField("ff2", log))

    seen = []

    class Dispatch(Visitor):
        def process_behavior_model(self, node, obj):
            seen.append(obj.name)

        def fwd_interaction_force_field(self, node, obj):
            seen.append(obj.name)

        def process_collision_pipeline(self, node, obj):
            seen.append(obj.name)

        def process_ode_solver(self, node, obj):
            seen.append(obj.name)

    node.execute(Dispatch())
    assert seen == ["behavior", "ff1", "ff2", "pipeline", "solver"]


def test_timed_without_timer_is_a_no_op() -> None:
    with Visitor().timed("Phase"):
        pass


def test_timed_records_on_timer() -> None:
    timer = StepTimer()
    with Visitor(timer=timer).timed("Phase", Node("n")):
        pass
    assert timer.stats_for("Phase")["count"] == 1
