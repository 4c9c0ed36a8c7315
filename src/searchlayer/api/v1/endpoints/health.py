"""Health check endpoints — Service and engine health monitoring."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from searchlayer import __version__
from searchlayer.api.deps import get_provider
from searchlayer.core.provider import SearchProvider
from searchlayer.models.result import EngineHealth

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Service health check response."""

    status: str = Field(description="Health status (e.g. 'healthy')")
    version: str = Field(description="searchlayer version")
    service: str = Field(description="Service name ('searchlayer')")
    backend: str = Field(description="Configured engine backend")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service Health Check",
    description="Returns service status, version, and the configured engine backend. Does not contact the engine.",
)
async def health_check(provider: SearchProvider = Depends(get_provider)) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        service="searchlayer",
        backend=provider.settings.engine.backend,
    )


@router.get(
    "/health/engine",
    response_model=EngineHealth,
    summary="Engine Health Check",
    description="Queries cluster health and maps green/yellow/red to healthy/degraded/unhealthy.",
)
async def engine_health(provider: SearchProvider = Depends(get_provider)) -> EngineHealth:
    return await provider.health_check()
