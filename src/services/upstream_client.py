"""HTTP client for the upstream completion service.

Performs exactly one POST per call and hands back the raw status and body.
Transport failures are converted to UpstreamUnreachableError; status
interpretation is left to the caller. No retries, no caching.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from src.core.exceptions import ConfigurationError, UpstreamUnreachableError
from src.core.logging import get_logger


if TYPE_CHECKING:
    from src.core.config import Settings


logger = get_logger(__name__)


@dataclass(frozen=True)
class UpstreamReply:
    """Raw upstream answer.

    Attributes:
        status_code: HTTP status code.
        text: Full response body decoded as text.
    """

    status_code: int
    text: str

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class UpstreamClient:
    """Thin async client bound to one upstream endpoint.

    Example:
        client = UpstreamClient.from_settings(get_settings())
        reply = await client.post({"query": "hello"})
        await client.aclose()
    """

    def __init__(self, url: str, http_client: httpx.AsyncClient) -> None:
        """Initialize the client.

        Args:
            url: Absolute URL of the upstream completion endpoint.
            http_client: httpx client used for the requests. Closed by aclose().

        Raises:
            ConfigurationError: If url is empty.
        """
        if not url:
            raise ConfigurationError(
                "Upstream URL must not be empty", setting="upstream_url"
            )
        self._url = url
        self._http = http_client

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> UpstreamClient:
        """Build a client with the configured URL and timeout.

        Args:
            settings: Application settings.
            transport: Optional httpx transport (tests pass httpx.MockTransport).
        """
        http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.upstream_timeout_seconds),
            transport=transport,
        )
        return cls(settings.upstream_url, http_client)

    @property
    def url(self) -> str:
        return self._url

    async def post(self, payload: dict[str, Any]) -> UpstreamReply:
        """POST payload as JSON to the upstream endpoint.

        Args:
            payload: JSON-serializable request body.

        Returns:
            UpstreamReply with status code and body text.

        Raises:
            UpstreamUnreachableError: Connection refused, DNS failure, timeout
                or any other transport-level failure.
        """
        try:
            response = await self._http.post(self._url, json=payload)
        except httpx.TransportError as e:
            logger.warning(
                "Upstream request failed",
                upstream_url=self._url,
                error=type(e).__name__,
            )
            raise UpstreamUnreachableError(
                f"Upstream completion service unreachable: {e!s}",
                upstream_url=self._url,
            ) from e

        logger.debug(
            "Upstream responded",
            upstream_url=self._url,
            status_code=response.status_code,
        )
        return UpstreamReply(status_code=response.status_code, text=response.text)

    async def aclose(self) -> None:
        """Close the underlying httpx client."""
        await self._http.aclose()
