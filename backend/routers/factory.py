"""Factory endpoints: registered components and the registration log."""

from typing import List

from fastapi import APIRouter

from backend.models import ComponentCreatorInfo, ComponentsResponse, FactoryLogEntryResponse
from simgraph.components import ComponentFactory
from simgraph.factory import get_factory_log


def setup_factory_router(factory: ComponentFactory) -> APIRouter:
    """Create and configure the factory router.

    Args:
        factory: The component factory to expose

    Returns:
        Configured APIRouter
    """
    router = APIRouter(prefix="/api/factory", tags=["factory"])

    @router.get("/components", response_model=ComponentsResponse)
    def list_components():
        """List registered keys and every creator behind them."""
        return ComponentsResponse(
            keys=factory.keys(),
            creators=[
                ComponentCreatorInfo(key=key, produced_type=creator.produced_type_name)
                for key, creator in factory
            ],
        )

    @router.get("/log", response_model=List[FactoryLogEntryResponse])
    def factory_log():
        """The process-wide registration log, oldest first."""
        return [
            FactoryLogEntryResponse(
                base_type=entry.base_type,
                class_name=entry.class_name,
                key=str(entry.key),
                multi=entry.multi,
            )
            for entry in get_factory_log()
        ]

    return router
