"""Error handlers for FastAPI exception handling.

Error Response Schema:
{
    "error": {
        "code": "ERROR_CODE",
        "message": "Human-readable message",
        "type": "retriable|non_retriable",
        "provider": "ollama-emulator",
        "details": {...}
    }
}

Status codes:
    InvalidRequestError / RequestValidationError   400
    RouteNotFoundError / unmatched method or path  404
    UpstreamError                                  502
    UpstreamUnreachableError                       503 + Retry-After
    anything else                                  500

With settings.legacy_upstream_errors both upstream failures are answered
with 404 instead, as earlier releases of the emulator did.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.exceptions import (
    EmulatorServiceError,
    ErrorCode,
    InvalidRequestError,
    RetriableError,
    RouteNotFoundError,
    UpstreamError,
    UpstreamUnreachableError,
)
from src.core.logging import get_logger


logger = get_logger(__name__)

PROVIDER = "ollama-emulator"
LEGACY_UPSTREAM_STATUS = 404


# =============================================================================
# Error Response Models (Pydantic)
# =============================================================================


class ErrorDetail(BaseModel):
    """Error detail schema.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable error message.
        type: Error type (retriable or non_retriable).
        provider: Service that generated the error.
        details: Additional error-specific information.
    """

    code: str
    message: str
    type: str
    provider: str = PROVIDER
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    error: ErrorDetail


# =============================================================================
# Status Code Mapping
# =============================================================================


def get_status_code_for_error(error: Exception, legacy_upstream: bool = False) -> int:
    """Determine HTTP status code based on exception type.

    Args:
        error: The exception to get status code for.
        legacy_upstream: Fold upstream failures into 404.

    Returns:
        Appropriate HTTP status code.
    """
    if legacy_upstream and isinstance(error, (UpstreamError, UpstreamUnreachableError)):
        return LEGACY_UPSTREAM_STATUS
    if isinstance(error, InvalidRequestError):
        return 400
    if isinstance(error, RouteNotFoundError):
        return 404
    if isinstance(error, UpstreamError):
        return 502
    if isinstance(error, RetriableError):
        return 503
    return 500


# =============================================================================
# Error Details Extraction
# =============================================================================


def extract_error_details(error: Exception) -> dict[str, Any]:
    """Extract additional details from exception attributes.

    Args:
        error: The exception to extract details from.

    Returns:
        Dictionary of error details.
    """
    known_attrs = [
        "field",
        "errors",
        "status_code",
        "upstream_url",
        "method",
        "path",
        "setting",
    ]

    details: dict[str, Any] = {}
    for attr in known_attrs:
        value = getattr(error, attr, None)
        if value is not None:
            details[attr] = value
    return details


# =============================================================================
# Error Response Builder
# =============================================================================


def build_error_response(
    error: Exception,
    error_type: str = "non_retriable",
) -> ErrorResponse:
    """Build a standardized error response.

    Args:
        error: The exception that occurred.
        error_type: Either "retriable" or "non_retriable".

    Returns:
        ErrorResponse with structured error information.
    """
    code = (
        error.error_code
        if isinstance(error, EmulatorServiceError)
        else ErrorCode.SERVICE_ERROR.value
    )
    message = error.message if isinstance(error, EmulatorServiceError) else str(error)
    details = extract_error_details(error)

    return ErrorResponse(
        error=ErrorDetail(
            code=code,
            message=message,
            type=error_type,
            details=details or None,
        )
    )


def _legacy_upstream_errors(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(getattr(settings, "legacy_upstream_errors", False))


# =============================================================================
# Exception Handlers
# =============================================================================


async def emulator_service_error_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle EmulatorServiceError and its subclasses.

    Retriable errors carry a Retry-After header unless the legacy status
    mapping is active.
    """
    if not isinstance(exc, EmulatorServiceError):
        return generic_error_handler(request, exc)

    legacy = _legacy_upstream_errors(request)
    status_code = get_status_code_for_error(exc, legacy_upstream=legacy)
    error_type = "retriable" if isinstance(exc, RetriableError) else "non_retriable"
    response = build_error_response(exc, error_type)

    headers: dict[str, str] | None = None
    if isinstance(exc, RetriableError) and status_code == 503:
        retry_after_seconds = max(exc.retry_after_ms // 1000, 1)
        headers = {"Retry-After": str(retry_after_seconds)}

    logger.info(
        "Request failed",
        error_code=response.error.code,
        status_code=status_code,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(),
        headers=headers,
    )


async def request_validation_error_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Reject bodies that do not match a strict request schema with 400."""
    errors: list[dict[str, Any]] = []
    if isinstance(exc, RequestValidationError):
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]

    invalid = InvalidRequestError(
        "Malformed request body",
        field=".".join(str(part) for part in errors[0]["loc"]) if errors else None,
        errors=errors or None,
    )
    return await emulator_service_error_handler(request, invalid)


async def http_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Render Starlette HTTP exceptions with the error envelope.

    Unmatched routes (404) and wrong methods on known paths (405) both
    become ROUTE_NOT_FOUND.
    """
    if not isinstance(exc, StarletteHTTPException):
        return generic_error_handler(request, exc)

    if exc.status_code in (404, 405):
        not_found = RouteNotFoundError(
            f"No route for {request.method} {request.url.path}",
            method=request.method,
            path=request.url.path,
        )
        return await emulator_service_error_handler(request, not_found)

    response = ErrorResponse(
        error=ErrorDetail(
            code=ErrorCode.SERVICE_ERROR.value,
            message=str(exc.detail),
            type="retriable" if exc.status_code == 503 else "non_retriable",
        )
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=response.model_dump(),
        headers=getattr(exc, "headers", None),
    )


def generic_error_handler(
    _request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle generic/unexpected exceptions.

    Args:
        _request: The FastAPI request (unused).
        exc: The exception that was raised.

    Returns:
        JSONResponse with 500 status code.
    """
    logger.error("Unhandled exception", error=type(exc).__name__, exc_info=exc)
    response = ErrorResponse(
        error=ErrorDetail(
            code=ErrorCode.SERVICE_ERROR.value,
            message=f"Internal server error: {exc!s}",
            type="non_retriable",
        )
    )

    return JSONResponse(
        status_code=500,
        content=response.model_dump(),
    )


# =============================================================================
# Handler Registration
# =============================================================================


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(EmulatorServiceError, emulator_service_error_handler)

    # Catch-all for unexpected exceptions
    app.add_exception_handler(Exception, generic_error_handler)
