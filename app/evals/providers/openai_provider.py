"""
OpenAI-backed chat and embedding providers (remote backend).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from evalrunner_core.domain.exceptions import EmbeddingError

if TYPE_CHECKING:
    from openai import AsyncOpenAI


class OpenAIChatModel:
    """
    ChatPort backed by the OpenAI chat completions API.

    Each prompt is sent as a single user message with no system prompt.
    """

    def __init__(self, client: "AsyncOpenAI", model: str):
        self._client = client
        self.model = model

    async def complete(self, prompt: str) -> str:
        response = await self._client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
        )
        content = response.choices[0].message.content
        return (content or "").strip()


class OpenAIEmbedder:
    """EmbeddingPort backed by the OpenAI embeddings API."""

    def __init__(self, client: "AsyncOpenAI", model: str):
        self._client = client
        self.model = model

    async def embed(self, text: str) -> list[float]:
        response = await self._client.embeddings.create(model=self.model, input=text)
        if not response.data:
            raise EmbeddingError(f"OpenAI returned no embedding for model {self.model}")
        vector = list(response.data[0].embedding)
        logger.debug(f"Embedded {len(text)} chars into {len(vector)} dims ({self.model})")
        return vector
