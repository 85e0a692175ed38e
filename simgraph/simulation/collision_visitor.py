"""Collision detection over a subtree."""

from __future__ import annotations

from typing import TYPE_CHECKING

from simgraph.simulation.visitor import Visitor

if TYPE_CHECKING:
    from simgraph.components import CollisionPipeline
    from simgraph.simulation.node import Node


class CollisionVisitor(Visitor):
    """Runs reset, detection and response on every collision pipeline in the subtree."""

    def process_collision_pipeline(self, node: "Node", obj: "CollisionPipeline") -> None:
        with self.timed("CollisionReset", obj):
            obj.compute_collision_reset()
        with self.timed("CollisionDetection", obj):
            obj.compute_collision_detection()
        with self.timed("CollisionResponse", obj):
            obj.compute_collision_response()
