"""Static operation table and dispatcher.

Every Ollama and completions endpoint is an Operation record: method, path
and the handler function that serves it. The /health probes are mounted
separately by src.main and are not part of the table. The table is built
at import time and never mutated. build_router() hands it to FastAPI;
dispatch() is the equivalent lookup as a pure function of (method, path).

Requests that match no operation are answered with 404 ROUTE_NOT_FOUND by
src.api.error_handlers, including a known path with the wrong method or a
trailing slash.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from src.api.routes import completions, ollama
from src.models.responses import (
    ChatResponse,
    EmbedResponse,
    GenerateResponse,
    ListModelsResponse,
    ModelOperationResponse,
    RunningModelsResponse,
    ShowModelResponse,
    TranslationResponse,
)


@dataclass(frozen=True)
class Operation:
    """One supported endpoint.

    Attributes:
        name: Unique operation name, used as the FastAPI route name.
        method: Upper-case HTTP method.
        path: Exact request path.
        handler: Async function serving the request.
        response_model: Schema of a successful JSON response, None for
            non-JSON responses.
        response_class: Starlette response class used by FastAPI.
        summary: Short description for the OpenAPI document.
        tags: OpenAPI tags.
        openapi_extra: Extra OpenAPI fields merged into the operation.
    """

    name: str
    method: str
    path: str
    handler: Callable[..., Any]
    response_model: type[Any] | None
    response_class: type[Response] = JSONResponse
    summary: str = ""
    tags: tuple[str, ...] = ("ollama",)
    openapi_extra: dict[str, Any] | None = field(default=None, hash=False)

    @property
    def key(self) -> tuple[str, str]:
        return self.method, self.path


OPERATIONS: tuple[Operation, ...] = (
    Operation(
        name="generate",
        method="POST",
        path="/api/generate",
        handler=ollama.generate,
        response_model=GenerateResponse,
        summary="Generate a completion for a prompt",
    ),
    Operation(
        name="chat",
        method="POST",
        path="/api/chat",
        handler=ollama.chat,
        response_model=ChatResponse,
        summary="Generate the next chat message",
    ),
    Operation(
        name="create_model",
        method="POST",
        path="/api/create",
        handler=ollama.create_model,
        response_model=ModelOperationResponse,
        summary="Create a model",
    ),
    Operation(
        name="list_models",
        method="GET",
        path="/api/tags",
        handler=ollama.list_models,
        response_model=ListModelsResponse,
        summary="List local models",
    ),
    Operation(
        name="list_models_post",
        method="POST",
        path="/api/tags",
        handler=ollama.list_models,
        response_model=ListModelsResponse,
        summary="List local models",
    ),
    Operation(
        name="show_model",
        method="POST",
        path="/api/show",
        handler=ollama.show_model,
        response_model=ShowModelResponse,
        summary="Show model information",
    ),
    Operation(
        name="copy_model",
        method="POST",
        path="/api/copy",
        handler=ollama.copy_model,
        response_model=ModelOperationResponse,
        summary="Copy a model",
    ),
    Operation(
        name="delete_model",
        method="DELETE",
        path="/api/delete",
        handler=ollama.delete_model,
        response_model=None,
        response_class=PlainTextResponse,
        summary="Delete a model",
    ),
    Operation(
        name="pull_model",
        method="POST",
        path="/api/pull",
        handler=ollama.pull_model,
        response_model=ModelOperationResponse,
        summary="Pull a model",
    ),
    Operation(
        name="push_model",
        method="POST",
        path="/api/push",
        handler=ollama.push_model,
        response_model=ModelOperationResponse,
        summary="Push a model",
    ),
    Operation(
        name="embed",
        method="POST",
        path="/api/embed",
        handler=ollama.embed,
        response_model=EmbedResponse,
        summary="Generate embeddings",
    ),
    Operation(
        name="list_running_models",
        method="GET",
        path="/api/ps",
        handler=ollama.list_running_models,
        response_model=RunningModelsResponse,
        summary="List running models",
    ),
    Operation(
        name="create_completion",
        method="POST",
        path="/v1/completions",
        handler=completions.create_completion,
        response_model=TranslationResponse,
        summary="Create a text completion via the upstream service",
        tags=("completions",),
        openapi_extra=completions.COMPLETIONS_OPENAPI_EXTRA,
    ),
)


def _index(operations: tuple[Operation, ...]) -> dict[tuple[str, str], Operation]:
    table: dict[tuple[str, str], Operation] = {}
    for operation in operations:
        if operation.key in table:
            msg = f"Duplicate operation for {operation.method} {operation.path}"
            raise ValueError(msg)
        table[operation.key] = operation
    return table


_OPERATION_TABLE = _index(OPERATIONS)


def dispatch(method: str, path: str) -> Operation | None:
    """Resolve a request to its operation.

    Matching is exact on the upper-cased method and the path.

    Args:
        method: HTTP method.
        path: Request path without query string.

    Returns:
        The matching Operation, or None when nothing is registered.
    """
    return _OPERATION_TABLE.get((method.upper(), path))


def build_router(operations: tuple[Operation, ...] = OPERATIONS) -> APIRouter:
    """Register every operation on a new APIRouter."""
    router = APIRouter(redirect_slashes=False)
    for operation in operations:
        router.add_api_route(
            operation.path,
            operation.handler,
            methods=[operation.method],
            name=operation.name,
            response_model=operation.response_model,
            response_class=operation.response_class,
            summary=operation.summary or None,
            tags=list(operation.tags),
            openapi_extra=operation.openapi_extra,
        )
    return router
