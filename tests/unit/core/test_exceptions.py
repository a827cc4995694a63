"""Unit tests for exception hierarchy.

Exit Criteria:
- All exception names match regex `.*Error$`
- Exception hierarchy properly organized
- Each exception carries its error code and context attributes
"""

import re

import pytest

from src.core.exceptions import (
    # Base exceptions
    EmulatorServiceError,
    NonRetriableError,
    RetriableError,
    # Retriable exceptions
    UpstreamUnreachableError,
    # Non-retriable exceptions
    ConfigurationError,
    InvalidRequestError,
    RouteNotFoundError,
    UpstreamError,
    # Error codes
    ErrorCode,
)


ALL_EXCEPTIONS = [
    EmulatorServiceError,
    RetriableError,
    NonRetriableError,
    UpstreamUnreachableError,
    InvalidRequestError,
    UpstreamError,
    RouteNotFoundError,
    ConfigurationError,
]


# =============================================================================
# Hierarchy Tests
# =============================================================================


class TestEmulatorServiceErrorBase:
    """Test the base EmulatorServiceError exception."""

    def test_is_exception(self) -> None:
        assert issubclass(EmulatorServiceError, Exception)

    def test_message(self) -> None:
        error = EmulatorServiceError("test message")
        assert str(error) == "test message"
        assert error.message == "test message"

    def test_default_error_code(self) -> None:
        assert EmulatorServiceError("test").error_code == ErrorCode.SERVICE_ERROR

    def test_error_code_stored_as_string(self) -> None:
        error = EmulatorServiceError("test", error_code=ErrorCode.ROUTE_NOT_FOUND)
        assert error.error_code == "ROUTE_NOT_FOUND"
        assert type(error.error_code) is str

    def test_extra_kwargs_become_attributes(self) -> None:
        error = EmulatorServiceError("test", operation="generate")
        assert error.operation == "generate"  # type: ignore[attr-defined]


class TestHierarchy:
    """Retriable and non-retriable branches."""

    def test_retriable_branch(self) -> None:
        assert issubclass(RetriableError, EmulatorServiceError)
        assert issubclass(UpstreamUnreachableError, RetriableError)

    @pytest.mark.parametrize(
        "exc_class",
        [InvalidRequestError, UpstreamError, RouteNotFoundError, ConfigurationError],
    )
    def test_non_retriable_branch(self, exc_class: type[Exception]) -> None:
        assert issubclass(exc_class, NonRetriableError)
        assert not issubclass(exc_class, RetriableError)

    def test_branches_are_disjoint(self) -> None:
        assert not issubclass(RetriableError, NonRetriableError)
        assert not issubclass(NonRetriableError, RetriableError)

    @pytest.mark.parametrize("exc_class", ALL_EXCEPTIONS)
    def test_names_end_in_error(self, exc_class: type[Exception]) -> None:
        assert re.match(r".*Error$", exc_class.__name__)


# =============================================================================
# Concrete Exception Tests
# =============================================================================


class TestRetriableExceptions:
    def test_retriable_default_delay(self) -> None:
        assert RetriableError("x").retry_after_ms == 1000

    def test_upstream_unreachable(self) -> None:
        error = UpstreamUnreachableError(
            "Connection refused", upstream_url="http://u", retry_after_ms=500
        )
        assert error.error_code == ErrorCode.UPSTREAM_UNREACHABLE
        assert error.upstream_url == "http://u"
        assert error.retry_after_ms == 500


class TestNonRetriableExceptions:
    def test_invalid_request(self) -> None:
        errors = [{"loc": ["prompt"], "msg": "Field required"}]
        error = InvalidRequestError("bad", field="prompt", errors=errors)

        assert error.error_code == ErrorCode.INVALID_REQUEST
        assert error.field == "prompt"
        assert error.errors == errors

    def test_upstream_error(self) -> None:
        error = UpstreamError("bad status", status_code=500, upstream_url="http://u")

        assert error.error_code == ErrorCode.UPSTREAM_ERROR
        assert error.status_code == 500
        assert error.upstream_url == "http://u"

    def test_route_not_found(self) -> None:
        error = RouteNotFoundError("no route", method="GET", path="/api/nope")

        assert error.error_code == ErrorCode.ROUTE_NOT_FOUND
        assert (error.method, error.path) == ("GET", "/api/nope")

    def test_configuration_error(self) -> None:
        error = ConfigurationError("missing", setting="upstream_url")

        assert error.error_code == ErrorCode.CONFIGURATION_ERROR
        assert error.setting == "upstream_url"

    def test_optional_context_defaults_to_none(self) -> None:
        assert InvalidRequestError("x").field is None
        assert RouteNotFoundError("x").path is None
        assert UpstreamUnreachableError("x").upstream_url is None


class TestErrorCodes:
    def test_codes_are_unique_strings(self) -> None:
        values = [code.value for code in ErrorCode]
        assert len(values) == len(set(values))
        assert all(code == code.value for code in ErrorCode)
