"""
In-process embedding provider using sentence-transformers.

Requires the ``local-embeddings`` extra.
"""

from __future__ import annotations

import asyncio

from evalrunner_core.infrastructure.embeddings import EmbeddingModelSingleton


class SentenceTransformerEmbedder:
    """
    EmbeddingPort backed by a local sentence-transformers model.

    Encoding is CPU/GPU bound, so it runs in a worker thread to keep the
    event loop free for concurrent embedding requests.
    """

    def __init__(self, model: EmbeddingModelSingleton | None = None):
        self._model = model or EmbeddingModelSingleton()

    async def embed(self, text: str) -> list[float]:
        return await asyncio.to_thread(self._model.embed_single, text)
