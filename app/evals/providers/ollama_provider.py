"""
Ollama-backed chat and embedding providers (local backend).

Both talk to the Ollama HTTP API through the shared ServiceHttpClient:

- ``POST {base}/embeddings`` with ``{"model", "prompt"}`` returns ``{"embedding": [...]}``
- ``POST {base}/chat`` with ``{"model", "messages", "stream": false}`` returns
  ``{"message": {"content": ...}}``
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from evalrunner_core.domain.exceptions import EmbeddingError, InferenceError
from evalrunner_core.runtime.http_client import ServiceHttpClient


def _json_body(payload_owner: str, response: Any) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError as e:
        raise ValueError(f"{payload_owner} returned a non-JSON body") from e
    if not isinstance(body, dict):
        raise ValueError(f"{payload_owner} returned {type(body).__name__}, expected an object")
    return body


class OllamaChatModel:
    """ChatPort backed by a locally hosted Ollama model."""

    def __init__(self, http: ServiceHttpClient, model: str):
        self._http = http
        self.model = model

    async def complete(self, prompt: str) -> str:
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "stream": False,
        }
        response = await self._http.post("chat", json=payload)

        try:
            body = _json_body("Ollama chat", response)
            content = body["message"]["content"]
        except (ValueError, KeyError, TypeError) as e:
            raise InferenceError(f"Malformed Ollama chat response: {e}") from e

        return (content or "").strip()


class OllamaEmbedder:
    """EmbeddingPort backed by a locally hosted Ollama embedding model."""

    def __init__(self, http: ServiceHttpClient, model: str):
        self._http = http
        self.model = model

    async def embed(self, text: str) -> list[float]:
        logger.debug(f"Embedding input via Ollama ({self.model}): {text[:60]}")
        response = await self._http.post("embeddings", json={"model": self.model, "prompt": text})

        try:
            body = _json_body("Ollama embeddings", response)
            vector = [float(value) for value in body["embedding"]]
        except (ValueError, KeyError, TypeError) as e:
            raise EmbeddingError(f"Malformed Ollama embedding response: {e}") from e

        return vector
