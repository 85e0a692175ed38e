"""Tests for the EventBus instrumentation dispatch."""

import logging
from dataclasses import dataclass

from simgraph.events import EventBus, PhaseTransitionEvent


class OtherEvent:
    pass


@dataclass(frozen=True)
class SolverPhaseEvent(PhaseTransitionEvent):
    iterations: int = 0


class TestEventBus:
    """Test suite for EventBus functionality."""

    def test_emit_reaches_subscriber(self) -> None:
        """Verify events are delivered to subscribed handlers."""
        bus = EventBus()
        received_events: list = []

        bus.subscribe(PhaseTransitionEvent, received_events.append)

        event = PhaseTransitionEvent(phase="Mechanical", status="start", source="body")
        assert bus.emit(event) == 1

        assert len(received_events) == 1
        assert received_events[0] is event

    def test_no_subscribers_no_crash(self) -> None:
        bus = EventBus()
        assert bus.emit(PhaseTransitionEvent(phase="Mechanical", status="end")) == 0
        assert bus.subscriber_count(PhaseTransitionEvent) == 0
        assert not bus.has_subscribers(PhaseTransitionEvent)

    def test_handlers_called_in_registration_order(self) -> None:
        bus = EventBus()
        order: list = []
        bus.subscribe(PhaseTransitionEvent, lambda e: order.append("first"))
        bus.subscribe(PhaseTransitionEvent, lambda e: order.append("second"))

        bus.emit(PhaseTransitionEvent(phase="Solve", status="start"))

        assert order == ["first", "second"]

    def test_unrelated_type_is_not_delivered(self) -> None:
        bus = EventBus()
        received: list = []
        bus.subscribe(OtherEvent, received.append)
        bus.emit(PhaseTransitionEvent(phase="Solve", status="start"))
        assert received == []

    def test_base_class_subscriber_sees_subclass_events(self) -> None:
        bus = EventBus()
        order: list = []
        bus.subscribe(PhaseTransitionEvent, lambda e: order.append("phase"))
        bus.subscribe(SolverPhaseEvent, lambda e: order.append("solver"))

        bus.emit(SolverPhaseEvent(phase="Solve", status="end", iterations=3))
        bus.emit(PhaseTransitionEvent(phase="Solve", status="end"))

        assert order == ["solver", "phase", "phase"]
        assert bus.has_subscribers(SolverPhaseEvent)
        assert bus.subscriber_count(SolverPhaseEvent) == 1

    def test_subscription_after_emit_is_picked_up(self) -> None:
        bus = EventBus()
        received: list = []
        bus.emit(SolverPhaseEvent(phase="Solve", status="start"))
        bus.subscribe(PhaseTransitionEvent, received.append)

        bus.emit(SolverPhaseEvent(phase="Solve", status="end"))

        assert [e.status for e in received] == ["end"]

    def test_failing_subscriber_does_not_starve_the_others(self, caplog) -> None:
        bus = EventBus()
        received: list = []

        def broken(event):
            raise ValueError("sink exploded")

        bus.subscribe(PhaseTransitionEvent, broken)
        bus.subscribe(PhaseTransitionEvent, received.append)

        with caplog.at_level(logging.ERROR, logger="simgraph.events.event_bus"):
            handled = bus.emit(PhaseTransitionEvent(phase="Solve", status="start"))

        assert handled == 1
        assert len(received) == 1
        assert bus.handler_errors == 1
        assert "PhaseTransitionEvent subscriber" in caplog.text
        assert "sink exploded" in caplog.text

    def test_unsubscribe_callable(self) -> None:
        bus = EventBus()
        received: list = []
        unsubscribe = bus.subscribe(PhaseTransitionEvent, received.append)

        assert unsubscribe() is True
        assert unsubscribe() is False
        bus.emit(PhaseTransitionEvent(phase="Solve", status="start"))
        assert received == []
        assert not bus.has_subscribers(PhaseTransitionEvent)

    def test_clear_subscribers(self) -> None:
        bus = EventBus()
        bus.subscribe(PhaseTransitionEvent, lambda e: None)
        bus.subscribe(OtherEvent, lambda e: None)
        bus.clear_subscribers()
        assert bus.subscriber_count(PhaseTransitionEvent) == 0
        assert bus.subscriber_count(OtherEvent) == 0
        assert bus.emit(SolverPhaseEvent(phase="Solve", status="start")) == 0
