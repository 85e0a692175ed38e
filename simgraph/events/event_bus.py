"""Instrumentation bus connecting the StepTimer to trace sinks.

Subscribers register for an event class and receive every event whose
type is that class or a subclass of it, so a sink subscribed to
``PhaseTransitionEvent`` also sees specialised phase events. Delivery is
synchronous, in subscription order, on the thread that runs the step.

A subscriber that raises is logged and counted; the remaining subscribers
still receive the event and the caller never sees the error.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

E = TypeVar("E")
Handler = Callable[[E], None]


class EventBus:
    """Synchronous, fault-isolated pub/sub keyed by event class.

    The handler list for each concrete event type is resolved once and
    cached until the subscriptions change, so publishing on a bus nobody
    listens to costs a single dict lookup.

    Example:
        bus = EventBus()
        unsubscribe = bus.subscribe(PhaseTransitionEvent, sink.on_phase)
        timer = StepTimer(event_bus=bus)
        ...
        unsubscribe()

    Attributes:
        handler_errors: Number of subscriber calls that raised
    """

    def __init__(self) -> None:
        self._subscriptions: Dict[type, List[Handler]] = {}
        self._dispatch_cache: Dict[type, Tuple[Handler, ...]] = {}
        self.handler_errors = 0

    def subscribe(self, event_type: Type[E], handler: Handler) -> Callable[[], bool]:
        """Deliver events of ``event_type`` (and its subclasses) to ``handler``.

        Returns:
            A callable removing this subscription; it returns False once the
            subscription is already gone
        """
        self._subscriptions.setdefault(event_type, []).append(handler)
        self._dispatch_cache.clear()
        return lambda: self.unsubscribe(event_type, handler)

    def unsubscribe(self, event_type: type, handler: Handler) -> bool:
        handlers = self._subscriptions.get(event_type)
        if not handlers or handler not in handlers:
            return False
        handlers.remove(handler)
        if not handlers:
            del self._subscriptions[event_type]
        self._dispatch_cache.clear()
        return True

    def emit(self, event: object) -> int:
        """Deliver ``event`` to every matching subscriber.

        Returns:
            Number of subscribers that handled the event without raising
        """
        handled = 0
        for handler in self._handlers_for(type(event)):
            try:
                handler(event)
            except Exception:
                self.handler_errors += 1
                logger.exception(f"{type(event).__name__} subscriber {handler!r} failed")
            else:
                handled += 1
        return handled

    def _handlers_for(self, event_type: type) -> Tuple[Handler, ...]:
        cached = self._dispatch_cache.get(event_type)
        if cached is None:
            # Most specific class first; subscription order within a class
            cached = tuple(
                handler
                for klass in event_type.__mro__
                for handler in self._subscriptions.get(klass, ())
            )
            self._dispatch_cache[event_type] = cached
        return cached

    def clear_subscribers(self) -> None:
        self._subscriptions.clear()
        self._dispatch_cache.clear()

    def has_subscribers(self, event_type: type) -> bool:
        """True if publishing an ``event_type`` would reach anyone."""
        return bool(self._handlers_for(event_type))

    def subscriber_count(self, event_type: type) -> int:
        """Subscribers registered for exactly ``event_type``."""
        return len(self._subscriptions.get(event_type, ()))
