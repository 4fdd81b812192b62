"""Health check endpoints.

`/health` reports the process is up; `/ready` reports whether a catalog
tier is loaded and queries can be answered.
"""

from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from explorer.infrastructure.config import settings

router = APIRouter()

SERVICE_NAME = "landscape-explorer"


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness response schema."""

    status: str
    promoted: bool
    tiers: dict[str, Any]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        version=settings.api_version,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"model": ReadinessResponse}},
)
async def readiness_check(request: Request) -> ReadinessResponse | JSONResponse:
    """Check whether a catalog tier is loaded.

    Returns:
        Readiness status with per-tier loading state; 503 until a tier
        is loaded.
    """
    loader = request.app.state.loader
    ready = loader.current is not None
    body = ReadinessResponse(status="ready" if ready else "loading", **loader.status())
    if ready:
        return body
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body.model_dump())
