"""Structured logging module for ollama-emulator.

Provides JSON-formatted structured logging using structlog.

Patterns applied:
- Singleton _configured flag prevents reconfiguration
- configure_logging() called ONCE at startup
- Underscore-prefix for unused structlog params
- JSON output via JSONRenderer
- Correlation ID support via contextvars, set per request by the
  request-id middleware in src.main
"""

import contextvars
import sys
import uuid
from typing import Any, TextIO

import structlog
from structlog.types import EventDict


# =============================================================================
# Singleton Configuration State
# =============================================================================
_configured: bool = False

REQUEST_ID_HEADER = "X-Request-ID"


# =============================================================================
# Correlation ID Context (for request tracing)
# =============================================================================
_correlation_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


def set_correlation_id(correlation_id: str) -> contextvars.Token[str | None]:
    """Set correlation ID for current async context.

    Args:
        correlation_id: Unique request identifier for tracing.

    Returns:
        Token that restores the previous value via reset_correlation_id().
    """
    return _correlation_id_var.set(correlation_id)


def reset_correlation_id(token: contextvars.Token[str | None]) -> None:
    """Restore the correlation ID that was active before set_correlation_id()."""
    _correlation_id_var.reset(token)


def get_correlation_id() -> str | None:
    """Get current correlation ID.

    Returns:
        Correlation ID if set, None otherwise.
    """
    return _correlation_id_var.get()


def new_correlation_id() -> str:
    """Generate a fresh correlation ID for requests that did not send one."""
    return uuid.uuid4().hex


# =============================================================================
# Custom Processors
# =============================================================================
def add_correlation_id(
    _logger: object, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add correlation ID to log event if set.

    Args:
        _logger: Logger instance (unused - required by structlog interface).
        _method_name: Method name (unused).
        event_dict: Event dictionary to process.

    Returns:
        Event dictionary with correlation_id added if set.
    """
    correlation_id = get_correlation_id()
    if correlation_id is not None:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def _level_to_int(level: str) -> int:
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# =============================================================================
# Singleton Configuration
# =============================================================================
def _apply_config(level: str, stream: TextIO | None) -> None:
    processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        add_correlation_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_to_int(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stdout),
        cache_logger_on_first_use=False,
    )


def configure_logging(
    level: str = "INFO",
    stream: TextIO | None = None,
    force: bool = False,
) -> None:
    """Configure structlog ONCE at application startup.

    Subsequent calls are no-ops unless force=True (for testing).

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        stream: Output stream. Defaults to sys.stdout.
        force: Force reconfiguration (for testing only).
    """
    global _configured

    if _configured and not force:
        return

    _apply_config(level, stream)
    _configured = True


def reset_logging() -> None:
    """Reset configuration state for test isolation."""
    global _configured
    _configured = False


def get_logger(name: str) -> Any:
    """Get a logger by name.

    Loggers are lazy proxies, so module-level loggers pick up the
    configuration applied later by configure_logging(). If structlog has
    not been configured at all, JSON defaults at INFO are applied without
    marking the application configuration as done.

    Args:
        name: Logger name (typically __name__ of the module).

    Returns:
        structlog logger proxy with the name bound as logger_name.
    """
    if not structlog.is_configured():
        _apply_config("INFO", None)
    # "logger" is the first positional parameter of structlog.wrap_logger
    return structlog.get_logger(logger_name=name)
