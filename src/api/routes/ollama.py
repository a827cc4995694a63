"""Synthesized handlers for the Ollama-style /api/* surface.

No backend is contacted: every response is built from constants, the
current time and fields echoed from the request. Routes are registered by
src.api.dispatcher.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pydantic
from fastapi import Request
from fastapi.responses import JSONResponse, PlainTextResponse

from src.core.logging import get_logger
from src.models.requests import (
    ChatMessage,
    ChatRequest,
    CopyModelRequest,
    CreateModelRequest,
    DeleteModelRequest,
    EmbedRequest,
    GenerateRequest,
    PullModelRequest,
    PushModelRequest,
    ShowModelRequest,
)
from src.models.responses import (
    ChatResponse,
    EmbedResponse,
    GenerateResponse,
    ListModelsResponse,
    ModelDetails,
    ModelInfo,
    ModelOperationResponse,
    RunningModelInfo,
    RunningModelsResponse,
    ShowModelResponse,
)


logger = get_logger(__name__)


# =============================================================================
# Constants (S1192: Avoid duplicated string literals)
# =============================================================================

STATUS_SUCCESS = "success"
INVALID_JSON_ERROR = "Invalid JSON"
MODEL_DELETED = "Model deleted"
CHAT_REPLY = "This is a response from the chat model."
ROLE_ASSISTANT = "assistant"

FORMAT_GGUF = "gguf"
FAMILY_LLAMA = "llama"
QUANTIZATION_Q4_0 = "Q4_0"

LISTED_MODEL_NAME = "llama3:latest"
LISTED_MODEL_SIZE = 3825819519
LISTED_MODEL_DIGEST = "fe938a131f40e6f6d40083c9f0f430a515233eb2edaa6d72eb85c50d64f2300e"

RUNNING_MODEL_NAME = "mistral:latest"
RUNNING_MODEL_SIZE = 5137025024
RUNNING_MODEL_DIGEST = "2ae6f6dd7a3dd734790bbbf58b8909a606e0e7e97e94b7604e0aa7ae4490e6d8"

# Timing counters reported by generate and chat, in nanoseconds.
TOTAL_DURATION_NS = 5_000_000_000
LOAD_DURATION_NS = 1_000_000_000
PROMPT_EVAL_COUNT = 26
PROMPT_EVAL_DURATION_NS = 200_000_000
EVAL_COUNT = 100
EVAL_DURATION_NS = 3_000_000_000
GENERATE_CONTEXT = [1, 2, 3]

EMBEDDINGS = [
    [0.010071029, -0.0017594862, 0.05007221, 0.04692972, 0.054916814],
    [-0.0098027075, 0.06042469, 0.025257962, -0.006364387, 0.07272725],
]
EMBED_TOTAL_DURATION_NS = 14143917
EMBED_LOAD_DURATION_NS = 1019500
EMBED_PROMPT_EVAL_COUNT = 8


# =============================================================================
# Helper Functions
# =============================================================================


def _now_rfc3339() -> str:
    return datetime.now(timezone.utc).isoformat()


def _success() -> ModelOperationResponse:
    return ModelOperationResponse(status=STATUS_SUCCESS)


def _render_prompt(prompt: str | None) -> str:
    """Render an optional prompt as Some("...") or None.

    The quoted text escapes backslashes, double quotes and control
    characters; other characters are kept as-is.
    """
    if prompt is None:
        return "None"
    return f"Some({json.dumps(prompt, ensure_ascii=False)})"


# =============================================================================
# Generation / Chat
# =============================================================================


async def generate(request: Request) -> GenerateResponse | JSONResponse:
    """Synthesize a generation result.

    The body is parsed loosely: anything that is not a valid GenerateRequest
    is answered with HTTP 200 and {"error": "Invalid JSON"}. Existing
    clients rely on that status, so it is kept.
    """
    body = await request.body()
    try:
        generate_request = GenerateRequest.model_validate_json(body)
    except pydantic.ValidationError:
        logger.warning("Failed to parse generate request as JSON")
        return JSONResponse(status_code=200, content={"error": INVALID_JSON_ERROR})

    logger.info(
        "Received generate request",
        model=generate_request.model,
        stream=generate_request.stream,
    )
    prompt = _render_prompt(generate_request.prompt)
    return GenerateResponse(
        model=generate_request.model,
        created_at=_now_rfc3339(),
        response=f"Generated text for prompt: {prompt}",
        done=True,
        context=list(GENERATE_CONTEXT),
        total_duration=TOTAL_DURATION_NS,
        load_duration=LOAD_DURATION_NS,
        prompt_eval_count=PROMPT_EVAL_COUNT,
        prompt_eval_duration=PROMPT_EVAL_DURATION_NS,
        eval_count=EVAL_COUNT,
        eval_duration=EVAL_DURATION_NS,
    )


async def chat(chat_request: ChatRequest) -> ChatResponse:
    """Synthesize a chat reply from the assistant."""
    logger.info(
        "Received chat request",
        model=chat_request.model,
        messages=len(chat_request.messages),
    )
    return ChatResponse(
        model=chat_request.model,
        created_at=_now_rfc3339(),
        message=ChatMessage(role=ROLE_ASSISTANT, content=CHAT_REPLY),
        done=True,
        total_duration=TOTAL_DURATION_NS,
        load_duration=LOAD_DURATION_NS,
        prompt_eval_count=PROMPT_EVAL_COUNT,
        prompt_eval_duration=PROMPT_EVAL_DURATION_NS,
        eval_count=EVAL_COUNT,
        eval_duration=EVAL_DURATION_NS,
    )


# =============================================================================
# Model Management
# =============================================================================


async def create_model(create_request: CreateModelRequest) -> ModelOperationResponse:
    logger.info("Received create model request", name=create_request.name)
    return _success()


async def list_models() -> ListModelsResponse:
    """List the locally available models (always one)."""
    logger.info("Listing local models")
    return ListModelsResponse(
        models=[
            ModelInfo(
                name=LISTED_MODEL_NAME,
                modified_at=_now_rfc3339(),
                size=LISTED_MODEL_SIZE,
                digest=LISTED_MODEL_DIGEST,
                details=ModelDetails(
                    format=FORMAT_GGUF,
                    family=FAMILY_LLAMA,
                    families=None,
                    parameter_size="7B",
                    quantization_level=QUANTIZATION_Q4_0,
                ),
            )
        ]
    )


async def show_model(show_request: ShowModelRequest) -> ShowModelResponse:
    """Describe a model. The same description is returned for any name."""
    logger.info(
        "Received show model request",
        name=show_request.name,
        verbose=show_request.verbose,
    )
    return ShowModelResponse(
        modelfile="# Modelfile",
        parameters="num_ctx 4096",
        template="{{ .Prompt }}",
        details=ModelDetails(
            format=FORMAT_GGUF,
            family=FAMILY_LLAMA,
            families=[FAMILY_LLAMA],
            parameter_size="7B",
            quantization_level=QUANTIZATION_Q4_0,
        ),
        model_info={
            "architecture": FAMILY_LLAMA,
            "parameter_count": 8030261248,
        },
    )


async def copy_model(copy_request: CopyModelRequest) -> ModelOperationResponse:
    logger.info(
        "Received copy model request",
        source=copy_request.source,
        destination=copy_request.destination,
    )
    return _success()


async def delete_model(delete_request: DeleteModelRequest) -> PlainTextResponse:
    """Confirm deletion with a plain-text body."""
    logger.info("Received delete model request", name=delete_request.name)
    return PlainTextResponse(MODEL_DELETED, status_code=200)


async def pull_model(pull_request: PullModelRequest) -> ModelOperationResponse:
    logger.info(
        "Received pull model request",
        name=pull_request.name,
        insecure=pull_request.insecure,
    )
    return _success()


async def push_model(push_request: PushModelRequest) -> ModelOperationResponse:
    logger.info(
        "Received push model request",
        name=push_request.name,
        insecure=push_request.insecure,
    )
    return _success()


# =============================================================================
# Embeddings / Running Models
# =============================================================================


async def embed(embed_request: EmbedRequest) -> EmbedResponse:
    """Return fixed embedding vectors for the requested model."""
    inputs = 1 if isinstance(embed_request.input, str) else len(embed_request.input)
    logger.info("Received embed request", model=embed_request.model, inputs=inputs)
    return EmbedResponse(
        model=embed_request.model,
        embeddings=[list(vector) for vector in EMBEDDINGS],
        total_duration=EMBED_TOTAL_DURATION_NS,
        load_duration=EMBED_LOAD_DURATION_NS,
        prompt_eval_count=EMBED_PROMPT_EVAL_COUNT,
    )


async def list_running_models() -> RunningModelsResponse:
    logger.info("Listing running models")
    return RunningModelsResponse(
        models=[
            RunningModelInfo(
                name=RUNNING_MODEL_NAME,
                model=RUNNING_MODEL_NAME,
                size=RUNNING_MODEL_SIZE,
                digest=RUNNING_MODEL_DIGEST,
                details=ModelDetails(
                    format=FORMAT_GGUF,
                    family=FAMILY_LLAMA,
                    families=[FAMILY_LLAMA],
                    parameter_size="7.2B",
                    quantization_level=QUANTIZATION_Q4_0,
                ),
                expires_at=_now_rfc3339(),
                size_vram=RUNNING_MODEL_SIZE,
            )
        ]
    )
