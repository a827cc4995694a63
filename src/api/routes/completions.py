"""Completions API route.

POST /v1/completions accepts an OpenAI-style text completion request and
forwards it through the TranslationAdapter to the upstream completion
service. Registered by src.api.dispatcher.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import HTTPException, Request, status

from src.core.logging import get_logger
from src.models.requests import TranslationRequest
from src.models.responses import TranslationResponse


if TYPE_CHECKING:
    from src.services.translation import TranslationAdapter


logger = get_logger(__name__)


# The body is validated by the adapter itself, so FastAPI never sees a typed
# parameter; this keeps the schema in the OpenAPI document.
COMPLETIONS_OPENAPI_EXTRA: dict[str, Any] = {
    "requestBody": {
        "required": True,
        "content": {
            "application/json": {"schema": TranslationRequest.model_json_schema()}
        },
    }
}


# =============================================================================
# Helper Functions
# =============================================================================


def _get_translation_adapter(request: Request) -> TranslationAdapter:
    """Get translation adapter from app state or raise 503.

    Args:
        request: FastAPI request object

    Returns:
        TranslationAdapter instance

    Raises:
        HTTPException: 503 if the adapter is not initialized
    """
    adapter: TranslationAdapter | None = getattr(
        request.app.state, "translation_adapter", None
    )
    if adapter is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Translation adapter not initialized",
        )
    return adapter


# =============================================================================
# Endpoints
# =============================================================================


async def create_completion(request: Request) -> TranslationResponse:
    """Create a text completion through the upstream service.

    Args:
        request: FastAPI request object; its raw body is the completion request.

    Returns:
        TranslationResponse with a single choice.

    Raises:
        InvalidRequestError: Malformed body (400).
        UpstreamUnreachableError: Upstream transport failure (503).
        UpstreamError: Upstream non-success status (502).
    """
    adapter = _get_translation_adapter(request)
    body = await request.body()
    response = await adapter.translate(body)
    logger.info(
        "Completion translated",
        model=response.model,
        completion_id=response.id,
    )
    return response
