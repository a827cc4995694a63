"""Translation adapter for POST /v1/completions.

Flow per call (stateless end-to-end):

    validate -> map to UpstreamRequest -> POST upstream -> decode -> respond

Failures:
    InvalidRequestError       body does not match TranslationRequest; upstream
                              is not contacted
    UpstreamUnreachableError  transport failure, single attempt
    UpstreamError             upstream answered with a non-2xx status

An unparsable 2xx body is not an error: the completion text falls back to
UNPARSABLE_COMPLETION and the call succeeds.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import pydantic

from src.core.exceptions import InvalidRequestError, UpstreamError
from src.core.logging import get_logger
from src.models.requests import TranslationRequest, UpstreamRequest
from src.models.responses import Choice, TranslationResponse, UpstreamResponse
from src.services.upstream_client import UpstreamClient


logger = get_logger(__name__)

UNPARSABLE_COMPLETION = "Failed to parse API response"
COMPLETION_ID_PREFIX = "cmpl-"


# =============================================================================
# Decoding
# =============================================================================


@dataclass(frozen=True)
class DecodedCompletion:
    """Completion text resolved from an upstream body.

    Attributes:
        text: Completion text, or UNPARSABLE_COMPLETION.
        degraded: True when the body did not match UpstreamResponse.
    """

    text: str
    degraded: bool = False


def decode_completion(body: str) -> DecodedCompletion:
    """Decode an upstream body, falling back to the sentinel text.

    Args:
        body: Raw upstream response body.

    Returns:
        DecodedCompletion; degraded is set instead of raising.
    """
    try:
        parsed = UpstreamResponse.model_validate_json(body)
    except pydantic.ValidationError:
        return DecodedCompletion(text=UNPARSABLE_COMPLETION, degraded=True)
    return DecodedCompletion(text=parsed.completion)


def parse_translation_request(
    body: bytes | str | Mapping[str, Any],
) -> TranslationRequest:
    """Validate a raw client body against TranslationRequest.

    Raises:
        InvalidRequestError: If the body is not valid JSON or fails validation.
    """
    try:
        if isinstance(body, (bytes, str)):
            return TranslationRequest.model_validate_json(body)
        return TranslationRequest.model_validate(body)
    except pydantic.ValidationError as e:
        errors = e.errors(include_url=False, include_context=False)
        field = ".".join(str(part) for part in errors[0]["loc"]) if errors else None
        raise InvalidRequestError(
            f"Malformed completion request: {errors[0]['msg'] if errors else e!s}",
            field=field or None,
            errors=[{"loc": list(err["loc"]), "msg": err["msg"]} for err in errors],
        ) from e


def new_completion_id() -> str:
    return f"{COMPLETION_ID_PREFIX}{uuid.uuid4().hex}"


# =============================================================================
# Adapter
# =============================================================================


class TranslationAdapter:
    """Forwards completion requests to the upstream and normalizes replies.

    The upstream endpoint is fixed by the injected UpstreamClient; nothing
    is re-read from the environment per call.
    """

    def __init__(self, client: UpstreamClient) -> None:
        self._client = client

    @property
    def upstream_url(self) -> str:
        return self._client.url

    async def translate(
        self,
        body: bytes | str | Mapping[str, Any] | TranslationRequest,
    ) -> TranslationResponse:
        """Translate one client request through the upstream service.

        Args:
            body: Raw JSON body, decoded mapping, or an already-validated
                TranslationRequest.

        Returns:
            TranslationResponse with exactly one choice.

        Raises:
            InvalidRequestError: Body failed validation.
            UpstreamUnreachableError: Upstream could not be reached.
            UpstreamError: Upstream returned a non-success status.
        """
        request = (
            body
            if isinstance(body, TranslationRequest)
            else parse_translation_request(body)
        )
        if request.n is not None and request.n > 1:
            logger.info(
                "Multiple completions requested, returning one",
                model=request.model,
                n=request.n,
            )

        upstream_request = UpstreamRequest.from_translation(request)
        reply = await self._client.post(upstream_request.to_payload())

        if not reply.is_success:
            logger.warning(
                "Upstream returned error status",
                upstream_url=self._client.url,
                status_code=reply.status_code,
            )
            raise UpstreamError(
                f"Upstream completion service returned status {reply.status_code}",
                status_code=reply.status_code,
                upstream_url=self._client.url,
            )

        decoded = decode_completion(reply.text)
        if decoded.degraded:
            logger.warning(
                "Upstream body did not match expected schema",
                upstream_url=self._client.url,
                body_length=len(reply.text),
            )

        return TranslationResponse(
            id=new_completion_id(),
            created=int(time.time()),
            model=request.model,
            choices=[Choice(text=decoded.text, index=0)],
        )

    async def aclose(self) -> None:
        await self._client.aclose()
