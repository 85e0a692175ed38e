"""A scene graph plus the simulation that steps it, shared by the HTTP routes."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Optional

from simgraph.components import ComponentFactory, component_factory
from simgraph.config import SimulationConfig
from simgraph.scenes import build_demo_scene
from simgraph.simulation import AnimateFrame, Node, Simulation

logger = logging.getLogger(__name__)

SceneBuilder = Callable[[ComponentFactory], Node]


class SceneSession:
    """Owns one scene graph and serializes every step and rebuild on it.

    Request handlers may run on several threads; the lock makes sure no
    step overlaps another step or a rebuild of the tree.
    """

    def __init__(
        self,
        builder: SceneBuilder = build_demo_scene,
        factory: Optional[ComponentFactory] = None,
        config: Optional[SimulationConfig] = None,
    ) -> None:
        self.builder = builder
        self.factory = factory if factory is not None else component_factory()
        self.config = config if config is not None else SimulationConfig()
        self._lock = threading.Lock()
        self.simulation = Simulation(self.config)
        self.root = self._build()

    def _build(self) -> Node:
        root = self.builder(self.factory)
        self.simulation.init(root)
        return root

    def step(self, dt: float = 0.0, steps: int = 1) -> Optional[AnimateFrame]:
        """Advance the scene by ``steps`` steps of ``dt``."""
        with self._lock:
            frame = None
            for _ in range(steps):
                frame = self.simulation.animate(self.root, dt)
            return frame

    def reset(self) -> None:
        """Rebuild the scene from its builder and restart the step counter."""
        with self._lock:
            self.simulation = Simulation(self.config)
            self.root = self._build()
            logger.info("Scene rebuilt")

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "step_count": self.simulation.step_count,
                "time": self.root.time,
                "root": self.root.get_debug_info(),
            }

    def timings(self) -> Dict[str, Dict[str, float]]:
        with self._lock:
            timer = self.simulation.timer
            return {name: timer.stats_for(name) for name in timer.phase_names}
