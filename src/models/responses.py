"""Response schemas for the emulator's HTTP surface."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from src.models.requests import ChatMessage


OBJECT_TEXT_COMPLETION = "text_completion"


# =============================================================================
# Generation / Chat
# =============================================================================


class GenerateResponse(BaseModel):
    """Result of POST /api/generate. Durations are in nanoseconds."""

    model: str
    created_at: str
    response: str
    done: bool
    context: list[int] | None = None
    total_duration: int | None = None
    load_duration: int | None = None
    prompt_eval_count: int | None = None
    prompt_eval_duration: int | None = None
    eval_count: int | None = None
    eval_duration: int | None = None


class ChatResponse(BaseModel):
    """Result of POST /api/chat. Durations are in nanoseconds."""

    model: str
    created_at: str
    message: ChatMessage
    done: bool
    total_duration: int | None = None
    load_duration: int | None = None
    prompt_eval_count: int | None = None
    prompt_eval_duration: int | None = None
    eval_count: int | None = None
    eval_duration: int | None = None


# =============================================================================
# Model Management
# =============================================================================


class ModelOperationResponse(BaseModel):
    """Outcome of create/copy/pull/push."""

    status: str


class ModelDetails(BaseModel):
    """Model metadata details.

    Attributes:
        format: Weights file format (gguf).
        family: Architecture family.
        families: All architecture families, if known.
        parameter_size: Human-readable parameter count (e.g. "7B").
        quantization_level: Quantization scheme (e.g. "Q4_0").
    """

    format: str
    family: str
    families: list[str] | None = None
    parameter_size: str
    quantization_level: str


class ModelInfo(BaseModel):
    """Entry of GET /api/tags."""

    name: str
    modified_at: str
    size: int
    digest: str
    details: ModelDetails


class ListModelsResponse(BaseModel):
    models: list[ModelInfo]


class ShowModelResponse(BaseModel):
    """Result of POST /api/show."""

    model_config = ConfigDict(protected_namespaces=())

    modelfile: str
    parameters: str
    template: str
    details: ModelDetails
    model_info: dict[str, Any]


class RunningModelInfo(BaseModel):
    """Entry of GET /api/ps.

    Attributes:
        expires_at: RFC 3339 time at which the model would be unloaded.
        size_vram: Bytes held in video memory.
    """

    name: str
    model: str
    size: int
    digest: str
    details: ModelDetails
    expires_at: str
    size_vram: int


class RunningModelsResponse(BaseModel):
    models: list[RunningModelInfo]


# =============================================================================
# Embeddings
# =============================================================================


class EmbedResponse(BaseModel):
    """Result of POST /api/embed. Durations are in nanoseconds."""

    model: str
    embeddings: list[list[float]]
    total_duration: int
    load_duration: int
    prompt_eval_count: int


# =============================================================================
# Translation
# =============================================================================


class UpstreamResponse(BaseModel):
    """Expected body of a successful upstream completion reply."""

    completion: str


class Choice(BaseModel):
    """Single completion choice. Only index 0 is ever produced."""

    text: str
    index: int = 0


class TranslationResponse(BaseModel):
    """Client-facing result of POST /v1/completions.

    Attributes:
        id: Unique response identifier.
        object: Always "text_completion".
        created: Unix timestamp of response construction.
        model: Model echoed from the request.
        choices: Exactly one choice.
    """

    id: str
    object: Literal["text_completion"] = OBJECT_TEXT_COMPLETION
    created: int
    model: str
    choices: list[Choice] = Field(..., min_length=1, max_length=1)
