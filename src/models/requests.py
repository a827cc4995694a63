"""Request schemas for every operation the emulator exposes.

Ollama-style /api/* bodies plus the OpenAI-style completion request that is
translated for the upstream completion service.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Generation / Chat
# =============================================================================


class GenerateRequest(BaseModel):
    """Body of POST /api/generate."""

    model: str
    prompt: str | None = None
    suffix: str | None = None
    images: list[str] | None = None
    format: str | None = None
    options: dict[str, Any] | None = None
    system: str | None = None
    template: str | None = None
    context: list[int] | None = None
    stream: bool | None = None
    raw: bool | None = None
    keep_alive: str | None = None


class ToolFunction(BaseModel):
    """Function declaration carried by a tool or a tool call."""

    name: str
    description: str
    parameters: Any


class Tool(BaseModel):
    """Tool made available to the chat model."""

    type: str
    function: ToolFunction


class ToolCall(BaseModel):
    """Tool invocation emitted by a chat message."""

    function: ToolFunction


class ChatMessage(BaseModel):
    """Single message of a chat conversation.

    Attributes:
        role: Message author (system, user, assistant, tool).
        content: Message text.
        images: Optional base64-encoded images.
        tool_calls: Tool invocations requested by the assistant.
    """

    role: str
    content: str
    images: list[str] | None = None
    tool_calls: list[ToolCall] | None = None


class ChatRequest(BaseModel):
    """Body of POST /api/chat."""

    model: str
    messages: list[ChatMessage]
    stream: bool | None = None
    tools: list[Tool] | None = None


# =============================================================================
# Model Management
# =============================================================================


class CreateModelRequest(BaseModel):
    """Body of POST /api/create."""

    name: str
    modelfile: str | None = None
    path: str | None = None
    stream: bool | None = None


class ShowModelRequest(BaseModel):
    """Body of POST /api/show."""

    name: str
    verbose: bool | None = None


class CopyModelRequest(BaseModel):
    """Body of POST /api/copy."""

    source: str
    destination: str


class DeleteModelRequest(BaseModel):
    """Body of DELETE /api/delete."""

    name: str


class PullModelRequest(BaseModel):
    """Body of POST /api/pull."""

    name: str
    insecure: bool | None = None
    stream: bool | None = None


class PushModelRequest(BaseModel):
    """Body of POST /api/push."""

    name: str
    insecure: bool | None = None
    stream: bool | None = None


# =============================================================================
# Embeddings
# =============================================================================


class EmbedRequest(BaseModel):
    """Body of POST /api/embed.

    Attributes:
        model: Embedding model name, echoed in the response.
        input: A single text or a list of texts.
    """

    model: str
    input: str | list[str]
    truncate: bool | None = None
    options: dict[str, Any] | None = None
    keep_alive: str | None = None


# =============================================================================
# Translation (OpenAI-style completions -> upstream completion service)
# =============================================================================


class TranslationRequest(BaseModel):
    """Client-facing body of POST /v1/completions.

    Attributes:
        model: Model name, echoed in the response.
        prompt: Prompt text forwarded upstream as the query.
        max_tokens: Maximum tokens to generate.
        temperature: Sampling temperature (0.0-2.0).
        top_p: Nucleus sampling threshold (0.0-1.0).
        n: Requested number of completions. Only one is ever returned.
        stream: Accepted for compatibility; responses are never streamed.
    """

    # No coercion: true is not 1 and "5" is not 5.
    model_config = ConfigDict(strict=True)

    model: str = Field(..., min_length=1, description="Model identifier")
    prompt: str = Field(..., min_length=1, description="Prompt text")
    max_tokens: int | None = Field(default=None, gt=0)
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    top_p: float | None = Field(default=None, ge=0.0, le=1.0)
    n: int | None = Field(default=None, gt=0)
    stream: bool | None = None


class UpstreamRequest(BaseModel):
    """Body sent to the upstream completion service."""

    query: str
    max_tokens: int | None = None
    temperature: float | None = None
    top_p: float | None = None

    @classmethod
    def from_translation(cls, request: TranslationRequest) -> UpstreamRequest:
        """Map a client request onto the upstream schema (prompt -> query)."""
        return cls(
            query=request.prompt,
            max_tokens=request.max_tokens,
            temperature=request.temperature,
            top_p=request.top_p,
        )

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready body with unset sampling fields omitted."""
        return self.model_dump(exclude_none=True)
