"""Simulation driver.

The Simulation runs one step of a scene graph per ``animate`` call:

    1. AnimateBeginEvent to the whole tree
    2. BehaviorUpdatePositionVisitor
    3. AnimateVisitor (collision, integration, force phases)
    4. Clock update for nodes that no solver advanced, each by its own
       dt when the step was requested with dt=0
    5. AnimateEndEvent to the whole tree

Everything runs synchronously on the calling thread; a step either
completes or raises out of ``animate``. Each step builds fresh visitors,
so a failure in one step leaves nothing behind for the next.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from simgraph.config import SimulationConfig
from simgraph.events import AnimateBeginEvent, AnimateEndEvent, EventBus
from simgraph.exceptions import InvalidStepError
from simgraph.params import ExecParams
from simgraph.simulation.animate_visitor import AnimateFrame, AnimateVisitor
from simgraph.simulation.event_visitor import PropagateEventVisitor
from simgraph.simulation.mechanical_visitors import (
    BehaviorUpdatePositionVisitor,
    InitVisitor,
    UpdateSimulationContextVisitor,
)
from simgraph.timing import StepTimer

if TYPE_CHECKING:
    from simgraph.simulation.node import Node

logger = logging.getLogger(__name__)


class Simulation:
    """Drives scene graphs one step at a time.

    Attributes:
        config: Runtime configuration
        event_bus: Bus the timer publishes phase transitions on (trace mode)
        timer: Instrumentation sink notified around each phase
        step_count: Number of completed ``animate`` calls

    Example:
        simulation = Simulation()
        root = build_demo_scene()
        simulation.init(root)
        for _ in range(100):
            simulation.animate(root, dt=0.01)
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        timer: Optional[StepTimer] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.config = config if config is not None else SimulationConfig()
        self.event_bus = event_bus if event_bus is not None else EventBus()
        if timer is None:
            timer = StepTimer(
                enabled=self.config.timer_enabled,
                event_bus=self.event_bus if self.config.trace_mode else None,
            )
        self.timer = timer
        self.params = ExecParams()
        self.step_count = 0

    def init(self, root: "Node") -> None:
        """Initialize every component of the tree (links, rest states)."""
        InitVisitor(self.params).execute(root)
        logger.info(f"Initialized scene {root.path}")

    def animate(self, root: "Node", dt: float = 0.0, params: Optional[ExecParams] = None) -> AnimateFrame:
        """Advance ``root`` by one step.

        Args:
            root: Root of the tree to step
            dt: Step size; 0 means every node integrates and advances its
                clock with its own dt
            params: Execution parameters (the simulation's own by default)

        Returns:
            The AnimateVisitor bookkeeping for this step

        Raises:
            InvalidStepError: If ``dt`` is negative
        """
        if dt < 0:
            raise InvalidStepError(f"dt must be >= 0, got {dt}")

        params = params if params is not None else self.params

        with self.timer.step("Animate", root):
            PropagateEventVisitor(params, AnimateBeginEvent(dt=dt)).execute(root)
            BehaviorUpdatePositionVisitor(params, dt).execute(root)
            frame = AnimateVisitor(params, dt, timer=self.timer).execute(root)
            UpdateSimulationContextVisitor(
                params, dt, skip=frame.integrated_nodes, default_dt=self.config.default_dt
            ).execute(root)
            PropagateEventVisitor(params, AnimateEndEvent(dt=dt)).execute(root)

        self.step_count += 1
        logger.debug(
            f"Step {self.step_count}: t={root.time:.6f} solvers={frame.solver_calls} "
            f"force_fields={frame.force_field_calls}"
        )
        return frame

    def run(self, root: "Node", steps: int, dt: float = 0.0, stats_interval: int = 0) -> Optional[AnimateFrame]:
        """Run ``steps`` consecutive steps.

        Args:
            root: Root of the tree to step
            steps: Number of steps
            dt: Step size (0 for per-node steps)
            stats_interval: Log a timing summary every N steps (0 disables)

        Returns:
            Bookkeeping of the last step, or None if ``steps`` is 0
        """
        frame = None
        for _ in range(steps):
            frame = self.animate(root, dt)
            if stats_interval and self.step_count % stats_interval == 0:
                logger.info(f"Step {self.step_count} t={root.time:.4f} {self.timer.get_summary_and_reset()}")
        return frame
