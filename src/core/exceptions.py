"""Custom exceptions for ollama-emulator.

All custom exceptions end in "Error".

Exception Hierarchy:
    EmulatorServiceError (base)
    ├── RetriableError (transient errors)
    │   └── UpstreamUnreachableError
    └── NonRetriableError (permanent errors)
        ├── InvalidRequestError
        ├── UpstreamError
        ├── RouteNotFoundError
        └── ConfigurationError
"""

from __future__ import annotations

from enum import Enum
from typing import Any


# =============================================================================
# Error Codes Enum
# =============================================================================


class ErrorCode(str, Enum):
    """Machine-readable error codes used in API responses and logs."""

    # Base error
    SERVICE_ERROR = "SERVICE_ERROR"

    # Retriable errors
    UPSTREAM_UNREACHABLE = "UPSTREAM_UNREACHABLE"

    # Non-retriable errors
    INVALID_REQUEST = "INVALID_REQUEST"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


# =============================================================================
# Base Exception
# =============================================================================


class EmulatorServiceError(Exception):
    """Base exception for all ollama-emulator errors.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code from ErrorCode enum.
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.SERVICE_ERROR,
        **kwargs: Any,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code.
            **kwargs: Additional attributes to set on the exception.
        """
        super().__init__(message)
        self.message = message
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )

        for key, value in kwargs.items():
            setattr(self, key, value)


# =============================================================================
# Retriable Error Base
# =============================================================================


class RetriableError(EmulatorServiceError):
    """Base class for transient errors that may succeed if the client retries.

    The service itself never retries; retry_after_ms is only a hint
    surfaced to the caller.

    Attributes:
        retry_after_ms: Suggested retry delay in milliseconds.
    """

    def __init__(
        self,
        message: str,
        retry_after_ms: int = 1000,
        error_code: str | ErrorCode = ErrorCode.SERVICE_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.retry_after_ms = retry_after_ms


# =============================================================================
# Non-Retriable Error Base
# =============================================================================


class NonRetriableError(EmulatorServiceError):
    """Base class for permanent errors that should not be retried."""

    pass


# =============================================================================
# Retriable Exceptions
# =============================================================================


class UpstreamUnreachableError(RetriableError):
    """The upstream completion service could not be reached.

    Raised for transport failures: refused connections, DNS failures,
    timeouts. No response was received.

    Attributes:
        upstream_url: Endpoint that was contacted.
    """

    def __init__(
        self,
        message: str,
        upstream_url: str | None = None,
        retry_after_ms: int = 1000,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            retry_after_ms=retry_after_ms,
            error_code=ErrorCode.UPSTREAM_UNREACHABLE,
            **kwargs,
        )
        self.upstream_url = upstream_url


# =============================================================================
# Non-Retriable Exceptions
# =============================================================================


class InvalidRequestError(NonRetriableError):
    """Client request failed schema validation.

    Attributes:
        field: Dotted location of the first invalid field.
        errors: Validation errors as reported by pydantic.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            error_code=ErrorCode.INVALID_REQUEST,
            **kwargs,
        )
        self.field = field
        self.errors = errors


class UpstreamError(NonRetriableError):
    """Upstream completion service answered with a non-success status.

    Attributes:
        status_code: HTTP status returned by the upstream.
        upstream_url: Endpoint that was contacted.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        upstream_url: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            error_code=ErrorCode.UPSTREAM_ERROR,
            **kwargs,
        )
        self.status_code = status_code
        self.upstream_url = upstream_url


class RouteNotFoundError(NonRetriableError):
    """No operation is registered for the requested method and path.

    Attributes:
        method: HTTP method of the request.
        path: Request path.
    """

    def __init__(
        self,
        message: str,
        method: str | None = None,
        path: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            error_code=ErrorCode.ROUTE_NOT_FOUND,
            **kwargs,
        )
        self.method = method
        self.path = path


class ConfigurationError(NonRetriableError):
    """Service configuration is invalid.

    Attributes:
        setting: Name of the problematic setting.
    """

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            error_code=ErrorCode.CONFIGURATION_ERROR,
            **kwargs,
        )
        self.setting = setting
