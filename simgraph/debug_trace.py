"""Debug tracing utilities wired through the EventBus."""

import time
from collections import defaultdict
from typing import Callable, Dict, List, Tuple

from simgraph.events import EventBus, PhaseTransitionEvent


class DebugTraceSink:
    """Collects phase timings from PhaseTransitionEvent notifications.

    Records:
        - Phase timings per phase name (milliseconds)
        - The ordered sequence of (phase, status, source) transitions
    """

    def __init__(self, event_bus: EventBus) -> None:
        self.phase_timings: Dict[str, List[float]] = defaultdict(list)
        self.transitions: List[Tuple[str, str, str]] = []
        self._start_times: Dict[Tuple[str, str], float] = {}
        self._unsubscribes: List[Callable[[], bool]] = []
        self._unsubscribes.append(event_bus.subscribe(PhaseTransitionEvent, self._on_phase_event))

    def close(self) -> None:
        """Unsubscribe from all events."""
        for unsubscribe in self._unsubscribes:
            unsubscribe()
        self._unsubscribes.clear()

    def _on_phase_event(self, event: PhaseTransitionEvent) -> None:
        self.transitions.append((event.phase, event.status, event.source))
        key = (event.phase, event.source)
        if event.status == "start":
            self._start_times[key] = time.perf_counter()
        elif event.status == "end":
            start = self._start_times.pop(key, None)
            if start is not None:
                self.phase_timings[event.phase].append((time.perf_counter() - start) * 1000.0)

    def summary(self) -> Dict[str, Dict[str, float]]:
        """Summarize collected timings per phase."""
        result = {}
        for phase, timings in self.phase_timings.items():
            if timings:
                result[phase] = {
                    "count": len(timings),
                    "avg_ms": sum(timings) / len(timings),
                    "max_ms": max(timings),
                }
        return result
