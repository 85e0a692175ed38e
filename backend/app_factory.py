"""Application factory and context for the simgraph HTTP driver.

The driver is an external collaborator of the scheduling core: it owns a
scene, steps it on request and exposes the component factory and its
registration log for inspection.

Design Decision:
----------------
We use an AppContext dataclass to hold all runtime state instead of module-level
globals. This:
1. Makes testing easier (each test gets a fresh context)
2. Avoids cross-test pollution
3. Makes dependencies explicit and injectable

Usage:
------
    # For production (uses default settings from environment)
    app = create_app()

    # For testing (custom configuration)
    app = create_app(context=AppContext(session=SceneSession(factory=my_factory)))
"""

import logging
import os
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.models import HealthResponse
from backend.routers.factory import setup_factory_router
from backend.routers.scene import setup_scene_router
from backend.scene_session import SceneSession
from simgraph import __version__
from simgraph.config import DEFAULT_API_PORT, SimulationConfig
from simgraph.logging_config import configure_logging


@dataclass
class AppContext:
    """Runtime context holding all application state."""

    config: SimulationConfig = field(default_factory=SimulationConfig.from_env)
    session: Optional[SceneSession] = None

    api_port: int = field(
        default_factory=lambda: int(os.getenv("SIMGRAPH_API_PORT", str(DEFAULT_API_PORT)))
    )
    allowed_origins: list = field(
        default_factory=lambda: os.getenv("ALLOWED_ORIGINS", "*").split(",")
    )
    server_start_time: float = field(default_factory=time.time)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("backend"))

    def get_session(self) -> SceneSession:
        """The scene session, built on first use."""
        if self.session is None:
            self.session = SceneSession(config=self.config)
        return self.session


def create_app(*, context: Optional[AppContext] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        context: Pre-configured AppContext (for testing). If None, creates a new one.

    Returns:
        Configured FastAPI application with context attached as app.state.context
    """
    if context is None:
        context = AppContext()

    context.logger = configure_logging(level=context.config.log_level, extra_loggers=("backend",))
    session = context.get_session()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ctx = app.state.context
        ctx.logger.info(f"simgraph driver ready (port {ctx.api_port}, {len(session.factory)} creators)")
        yield
        ctx.logger.info("simgraph driver shutting down")

    app = FastAPI(title="simgraph", version=__version__, lifespan=lifespan)
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=context.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse(
            status="ok",
            version=__version__,
            components=len(session.factory),
            uptime_seconds=time.time() - context.server_start_time,
        )

    app.include_router(setup_scene_router(session))
    app.include_router(setup_factory_router(session.factory))
    return app
