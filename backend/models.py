"""Request and response models for the HTTP driver."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class StepRequest(BaseModel):
    """Request body for advancing the scene."""

    dt: float = Field(0.0, ge=0.0, description="Step size; 0 uses each node's own dt")
    steps: int = Field(1, ge=1, le=10_000)


class StepResponse(BaseModel):
    step_count: int
    time: float
    solver_calls: int
    force_field_calls: int
    constraint_resets: int


class SceneResponse(BaseModel):
    step_count: int
    time: float
    root: Dict[str, Any]


class ComponentCreatorInfo(BaseModel):
    """One creator registered in the component factory."""

    key: str
    produced_type: str


class FactoryLogEntryResponse(BaseModel):
    base_type: str
    class_name: str
    key: str
    multi: bool


class HealthResponse(BaseModel):
    status: str
    version: str
    components: int
    uptime_seconds: Optional[float] = None


class ComponentsResponse(BaseModel):
    keys: List[str]
    creators: List[ComponentCreatorInfo]
