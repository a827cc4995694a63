"""pytest configuration and fixtures for ollama-emulator tests.

Shared fixtures build the application against an in-process fake of the
upstream completion service (httpx.MockTransport), so no test touches
the network.
"""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator, Callable, Generator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx
import pytest
from fastapi.testclient import TestClient


if TYPE_CHECKING:
    from fastapi import FastAPI

    from src.core.config import Settings

# =============================================================================
# Constants (S1192: Avoid duplicated string literals)
# =============================================================================

TEST_UPSTREAM_URL = "http://upstream.test/v1/complete"
TEST_MODEL = "llama3"
TEST_PROMPT = "hello"
TEST_COMPLETION = "hi there"


# =============================================================================
# Markers
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, no external dependencies)")


# =============================================================================
# Fake Upstream
# =============================================================================


@dataclass
class FakeUpstream:
    """Scriptable stand-in for the upstream completion service.

    Attributes:
        status_code: Status returned for every request.
        body: Raw body returned for every request.
        error: Transport exception raised instead of answering.
        requests: Every request received, in order.
    """

    status_code: int = 200
    body: str = json.dumps({"completion": TEST_COMPLETION})
    error: Exception | None = None
    requests: list[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def last_payload(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    """Upstream that answers 200 with {"completion": "hi there"}."""
    return FakeUpstream()


# =============================================================================
# Settings / App Fixtures
# =============================================================================


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    """Build Settings with test defaults and optional overrides."""
    from src.core.config import Settings

    def _factory(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "upstream_url": TEST_UPSTREAM_URL,
            "log_level": "DEBUG",
            "upstream_timeout_seconds": 5.0,
        }
        values.update(overrides)
        return Settings(**values)

    return _factory


@pytest.fixture
def test_settings(settings_factory: Callable[..., Settings]) -> Settings:
    return settings_factory()


@pytest.fixture
def app(test_settings: Settings, fake_upstream: FakeUpstream) -> FastAPI:
    """Application wired to the fake upstream."""
    from src.main import create_app

    return create_app(test_settings, upstream_transport=fake_upstream.transport)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """TestClient with the lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
async def upstream_http_client(
    fake_upstream: FakeUpstream,
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """httpx.AsyncClient routed to the fake upstream."""
    async with httpx.AsyncClient(transport=fake_upstream.transport) as http_client:
        yield http_client


# =============================================================================
# Request Fixtures
# =============================================================================


@pytest.fixture
def sample_completion_request() -> dict[str, object]:
    """Minimal valid completion request."""
    return {"model": TEST_MODEL, "prompt": TEST_PROMPT}


@pytest.fixture
def sample_chat_request() -> dict[str, object]:
    return {
        "model": TEST_MODEL,
        "messages": [
            {"role": "system", "content": "You are a helpful assistant."},
            {"role": "user", "content": "Hello, how are you?"},
        ],
        "stream": False,
    }
