"""Health check API routes for ollama-emulator.

Provides liveness (/health) and readiness (/health/ready) endpoints
for container probes and service monitoring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src import __version__


if TYPE_CHECKING:
    from src.services.translation import TranslationAdapter


# =============================================================================
# Constants (S1192: Avoid duplicated string literals)
# =============================================================================

STATUS_OK = "ok"
STATUS_READY = "ready"
STATUS_NOT_READY = "not_ready"
SERVICE_NAME = "ollama-emulator"
REASON_NOT_INITIALIZED = "Translation adapter not initialized"


# =============================================================================
# Response Models
# =============================================================================


class HealthResponse(BaseModel):
    """Response model for /health liveness endpoint."""

    status: str = Field(
        default=STATUS_OK,
        description="Service health status",
        examples=["ok"],
    )
    service: str = Field(
        default=SERVICE_NAME,
        description="Service name",
        examples=["ollama-emulator"],
    )
    version: str = Field(
        default=__version__,
        description="Service version",
        examples=["0.1.0"],
    )


class ReadinessResponse(BaseModel):
    """Response model for /health/ready readiness endpoint.

    Ready once the lifespan has built the translation adapter.
    """

    status: str = Field(
        description="Readiness status",
        examples=["ready", "not_ready"],
    )
    upstream_url: str | None = Field(
        default=None,
        description="Upstream completion endpoint in use",
        examples=["https://api.example.com/v1/complete"],
    )
    reason: str | None = Field(
        default=None,
        description="Reason for not ready status",
        examples=[REASON_NOT_INITIALIZED],
    )


# =============================================================================
# Router
# =============================================================================

router = APIRouter(tags=["health"])


# =============================================================================
# Endpoints
# =============================================================================


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Liveness check",
    description="Returns 200 if the service is running.",
)
async def health_check() -> HealthResponse:
    """Liveness probe endpoint."""
    return HealthResponse(
        status=STATUS_OK,
        service=SERVICE_NAME,
        version=__version__,
    )


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={
        200: {"description": "Service is ready", "model": ReadinessResponse},
        503: {"description": "Service is not ready", "model": ReadinessResponse},
    },
    summary="Readiness check",
    description="Returns 200 once the translation adapter is initialized.",
)
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe endpoint.

    Args:
        request: FastAPI request to access app state.

    Returns:
        JSONResponse with readiness status.
    """
    adapter: TranslationAdapter | None = getattr(
        request.app.state, "translation_adapter", None
    )

    if adapter is None:
        response = ReadinessResponse(
            status=STATUS_NOT_READY,
            reason=REASON_NOT_INITIALIZED,
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(exclude_none=True),
        )

    response = ReadinessResponse(
        status=STATUS_READY,
        upstream_url=adapter.upstream_url,
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=response.model_dump(exclude_none=True),
    )
