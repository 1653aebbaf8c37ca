"""
Health check endpoints.

Liveness is unconditional. Readiness reports the save store, the loaded
card sets and the save slots held in memory.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from pocketpacks.api.dependencies import get_catalog, get_registry
from pocketpacks.services.catalog import CatalogRegistry
from pocketpacks.services.session_registry import SessionRegistry

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str


class ReadinessResponse(BaseModel):
    """Readiness report."""

    status: str
    database: str
    catalog_sets: list[str]
    loaded_saves: list[str]


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe. Does not check dependencies."""
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"model": ReadinessResponse}},
)
async def ready(
    response: Response,
    registry: Annotated[SessionRegistry, Depends(get_registry)],
    catalog: Annotated[CatalogRegistry, Depends(get_catalog)],
) -> ReadinessResponse:
    """
    Readiness probe.

    Returns 503 if the save store is unreachable. Pack opening keeps
    working without it; saves are retried on the next write.
    """
    connected = await registry.database_available()
    if not connected:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(
        status="ready" if connected else "not ready",
        database="connected" if connected else "disconnected",
        catalog_sets=catalog.set_codes(),
        loaded_saves=sorted(registry.loaded_ids()),
    )
