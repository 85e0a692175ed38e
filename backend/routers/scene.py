"""Scene endpoints: inspect and step the shared scene graph."""

import logging
from typing import Dict

from fastapi import APIRouter, HTTPException

from backend.models import SceneResponse, StepRequest, StepResponse
from backend.scene_session import SceneSession
from simgraph.exceptions import SimGraphError

logger = logging.getLogger(__name__)


def setup_scene_router(session: SceneSession) -> APIRouter:
    """Create and configure the scene router.

    Args:
        session: The SceneSession the endpoints operate on

    Returns:
        Configured APIRouter
    """
    router = APIRouter(prefix="/api/scene", tags=["scene"])

    @router.get("", response_model=SceneResponse)
    def get_scene():
        """Return the scene tree with every component's debug info."""
        return SceneResponse(**session.snapshot())

    @router.post("/step", response_model=StepResponse)
    def step_scene(request: StepRequest):
        """Advance the scene by ``steps`` steps of ``dt``."""
        try:
            frame = session.step(dt=request.dt, steps=request.steps)
        except SimGraphError as e:
            logger.error(f"Step failed: {e}")
            raise HTTPException(status_code=400, detail=str(e))

        return StepResponse(
            step_count=session.simulation.step_count,
            time=session.root.time,
            solver_calls=frame.solver_calls,
            force_field_calls=frame.force_field_calls,
            constraint_resets=frame.constraint_resets,
        )

    @router.post("/reset", response_model=SceneResponse)
    def reset_scene():
        """Rebuild the scene from scratch."""
        session.reset()
        return SceneResponse(**session.snapshot())

    @router.get("/timings")
    def get_timings() -> Dict[str, Dict[str, float]]:
        """Raw per-phase timing statistics since the last reset."""
        return session.timings()

    return router
