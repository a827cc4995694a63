"""FastAPI application entrypoint for ollama-emulator.

Patterns applied:
- asynccontextmanager lifespan (not deprecated @app.on_event)
- configure_logging() called ONCE in lifespan startup
- TranslationAdapter built once per process and injected via app.state
- Request-ID middleware feeding the logging correlation ID
- Docs disabled in production
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request, Response

from src import __version__
from src.api.dispatcher import build_router, dispatch
from src.api.error_handlers import register_exception_handlers
from src.api.routes.health import router as health_router
from src.core.config import Settings, get_settings
from src.core.logging import (
    REQUEST_ID_HEADER,
    configure_logging,
    get_logger,
    new_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from src.services.translation import TranslationAdapter
from src.services.upstream_client import UpstreamClient


# =============================================================================
# Application Metadata
# =============================================================================
APP_NAME = "ollama-emulator"
APP_DESCRIPTION = "Ollama-compatible API emulator with an upstream completions bridge"
APP_VERSION = __version__

logger = get_logger(__name__)


# =============================================================================
# Lifespan Context Manager
# =============================================================================
def _build_lifespan(
    upstream_transport: httpx.AsyncBaseTransport | None,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan - startup and shutdown events.

        Args:
            app: FastAPI application instance.

        Yields:
            None after startup, before shutdown.
        """
        # =====================================================================
        # STARTUP
        # =====================================================================
        settings: Settings = app.state.settings

        configure_logging(level=settings.log_level)
        startup_logger = get_logger(__name__)

        client = UpstreamClient.from_settings(settings, transport=upstream_transport)
        app.state.translation_adapter = TranslationAdapter(client)
        app.state.initialized = True

        startup_logger.info(
            "Application starting",
            service=APP_NAME,
            version=APP_VERSION,
            environment=settings.environment,
            host=settings.host,
            port=settings.port,
            upstream_url=settings.upstream_url,
        )

        yield

        # =====================================================================
        # SHUTDOWN
        # =====================================================================
        startup_logger.info("Application shutting down", service=APP_NAME)
        await app.state.translation_adapter.aclose()
        app.state.translation_adapter = None
        app.state.initialized = False

    return lifespan


# =============================================================================
# Request ID Middleware
# =============================================================================
async def request_id_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Bind a correlation ID to the request and echo it in the response."""
    correlation_id = request.headers.get(REQUEST_ID_HEADER) or new_correlation_id()
    token = set_correlation_id(correlation_id)
    try:
        operation = dispatch(request.method, request.url.path)
        response = await call_next(request)
        logger.debug(
            "Request handled",
            method=request.method,
            path=request.url.path,
            operation=operation.name if operation else None,
            status_code=response.status_code,
        )
    finally:
        reset_correlation_id(token)
    response.headers[REQUEST_ID_HEADER] = correlation_id
    return response


# =============================================================================
# Application Factory
# =============================================================================
def create_app(
    settings: Settings | None = None,
    upstream_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to use. Defaults to get_settings().
        upstream_transport: Optional httpx transport for the upstream client.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=APP_NAME,
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
        lifespan=_build_lifespan(upstream_transport),
        redirect_slashes=False,
    )
    app.state.settings = settings
    app.state.translation_adapter = None
    app.state.initialized = False

    app.middleware("http")(request_id_middleware)

    app.include_router(health_router)
    app.include_router(build_router())

    register_exception_handlers(app)
    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn on the configured address."""
    settings = get_settings()
    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
