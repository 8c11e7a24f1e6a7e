"""Health check payload."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"]
    environment: str
    database: Literal["connected", "disconnected"]
    missing_roles: list[str] = Field(
        default_factory=list,
        description="Role names not seeded yet; registration fails until they exist",
    )
