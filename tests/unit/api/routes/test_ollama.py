"""Unit tests for the synthesized /api/* routes."""

from __future__ import annotations

from datetime import datetime

import pytest
from fastapi import status
from fastapi.testclient import TestClient


# =============================================================================
# Constants (S1192: Avoid duplicated string literals)
# =============================================================================

MODEL = "llama3"
STATUS_SUCCESS = {"status": "success"}


def _assert_rfc3339(value: str) -> None:
    assert datetime.fromisoformat(value).tzinfo is not None


# =============================================================================
# TestGenerate
# =============================================================================


class TestGenerate:
    """POST /api/generate with loose body parsing."""

    def test_generate_echoes_model(self, client: TestClient) -> None:
        response = client.post("/api/generate", json={"model": MODEL, "prompt": "hi"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["model"] == MODEL
        assert data["done"] is True
        assert data["response"] == 'Generated text for prompt: Some("hi")'
        assert data["context"] == [1, 2, 3]
        assert data["total_duration"] == 5_000_000_000
        assert data["eval_count"] == 100
        _assert_rfc3339(data["created_at"])

    def test_generate_without_prompt(self, client: TestClient) -> None:
        response = client.post("/api/generate", json={"model": MODEL})
        assert response.json()["response"] == "Generated text for prompt: None"

    def test_generate_escapes_quoted_prompt(self, client: TestClient) -> None:
        response = client.post(
            "/api/generate", json={"model": MODEL, "prompt": 'say "hi"\n'}
        )
        assert response.json()["response"] == (
            'Generated text for prompt: Some("say \\"hi\\"\\n")'
        )

    @pytest.mark.parametrize(
        "body",
        [b"this is not json", b"", b'{"prompt": "missing model"}', b"[1, 2]"],
    )
    def test_invalid_body_returns_200_with_error(
        self, client: TestClient, body: bytes
    ) -> None:
        response = client.post(
            "/api/generate",
            content=body,
            headers={"content-type": "application/json"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"error": "Invalid JSON"}


# =============================================================================
# TestChat
# =============================================================================


class TestChat:
    """POST /api/chat."""

    def test_chat_returns_assistant_message(
        self, client: TestClient, sample_chat_request: dict[str, object]
    ) -> None:
        response = client.post("/api/chat", json=sample_chat_request)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["model"] == MODEL
        assert data["message"]["role"] == "assistant"
        assert data["message"]["content"] == "This is a response from the chat model."
        assert data["done"] is True

    def test_chat_with_tools(self, client: TestClient) -> None:
        body = {
            "model": MODEL,
            "messages": [{"role": "user", "content": "weather?"}],
            "tools": [
                {
                    "type": "function",
                    "function": {
                        "name": "get_weather",
                        "description": "Current weather",
                        "parameters": {"type": "object", "properties": {}},
                    },
                }
            ],
        }
        response = client.post("/api/chat", json=body)
        assert response.status_code == status.HTTP_200_OK

    def test_chat_missing_messages_is_rejected(self, client: TestClient) -> None:
        response = client.post("/api/chat", json={"model": MODEL})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        error = response.json()["error"]
        assert error["code"] == "INVALID_REQUEST"
        assert error["details"]["field"] == "body.messages"

    def test_chat_invalid_json_is_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/api/chat",
            content=b"{broken",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# TestModelManagement
# =============================================================================


class TestModelManagement:
    """create / copy / pull / push / delete / show / tags / ps."""

    @pytest.mark.parametrize(
        ("path", "body"),
        [
            ("/api/create", {"name": "mario", "modelfile": "FROM llama3"}),
            ("/api/copy", {"source": "llama3", "destination": "llama3-backup"}),
            ("/api/pull", {"name": "llama3", "insecure": True}),
            ("/api/push", {"name": "me/llama3", "stream": False}),
        ],
    )
    def test_operations_report_success(
        self, client: TestClient, path: str, body: dict[str, object]
    ) -> None:
        response = client.post(path, json=body)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == STATUS_SUCCESS

    def test_copy_requires_destination(self, client: TestClient) -> None:
        response = client.post("/api/copy", json={"source": "llama3"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_delete_returns_plain_text(self, client: TestClient) -> None:
        response = client.request("DELETE", "/api/delete", json={"name": "llama3"})

        assert response.status_code == status.HTTP_200_OK
        assert response.text == "Model deleted"
        assert response.headers["content-type"].startswith("text/plain")

    def test_show_returns_details(self, client: TestClient) -> None:
        response = client.post("/api/show", json={"name": "llama3"})

        data = response.json()
        assert data["modelfile"] == "# Modelfile"
        assert data["parameters"] == "num_ctx 4096"
        assert data["template"] == "{{ .Prompt }}"
        assert data["details"]["families"] == ["llama"]
        assert data["model_info"] == {
            "architecture": "llama",
            "parameter_count": 8030261248,
        }

    @pytest.mark.parametrize("method", ["GET", "POST"])
    def test_tags_lists_a_gguf_model(self, client: TestClient, method: str) -> None:
        response = client.request(method, "/api/tags")

        assert response.status_code == status.HTTP_200_OK
        models = response.json()["models"]
        assert len(models) >= 1
        model = models[0]
        assert model["name"] == "llama3:latest"
        assert model["digest"]
        assert model["details"]["format"] == "gguf"
        assert model["details"]["families"] is None
        _assert_rfc3339(model["modified_at"])

    def test_ps_lists_running_model(self, client: TestClient) -> None:
        response = client.get("/api/ps")

        models = response.json()["models"]
        assert len(models) == 1
        running = models[0]
        assert running["name"] == running["model"] == "mistral:latest"
        assert running["size"] == running["size_vram"] == 5137025024
        assert running["details"]["parameter_size"] == "7.2B"
        _assert_rfc3339(running["expires_at"])


# =============================================================================
# TestEmbed
# =============================================================================


class TestEmbed:
    """POST /api/embed."""

    @pytest.mark.parametrize("value", ["why is the sky blue?", ["a", "b"]])
    def test_embed_returns_vectors(self, client: TestClient, value: object) -> None:
        response = client.post("/api/embed", json={"model": "all-minilm", "input": value})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["model"] == "all-minilm"
        assert len(data["embeddings"]) == 2
        assert all(len(vector) == 5 for vector in data["embeddings"])
        assert data["total_duration"] == 14143917
        assert data["load_duration"] == 1019500
        assert data["prompt_eval_count"] == 8

    def test_embed_requires_input(self, client: TestClient) -> None:
        response = client.post("/api/embed", json={"model": "all-minilm"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
