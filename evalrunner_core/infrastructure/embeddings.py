"""
Local Embedding Model Infrastructure

Provides a singleton wrapper around sentence-transformers so eval runs can
score outputs without calling a remote embedding API.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from evalrunner_core.config import settings

if TYPE_CHECKING:
    from sentence_transformers import SentenceTransformer


class EmbeddingModelSingleton:
    """
    Singleton wrapper for the local embedding model.

    The model is loaded on first use and shared for the rest of the process.

    Usage:
        model = EmbeddingModelSingleton()
        vector = model.embed_single("The answer is 30")
    """

    _instance: "EmbeddingModelSingleton | None" = None
    _model: "SentenceTransformer | None" = None

    def __new__(cls, model_id: str | None = None, device: str | None = None):
        """
        Create or return the singleton instance.

        Args:
            model_id: HuggingFace model ID (default: TEXT_EMBEDDING_MODEL_ID)
            device: Device to load model on (default: EMBEDDING_MODEL_DEVICE)
        """
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._initialize(
                model_id or settings.TEXT_EMBEDDING_MODEL_ID,
                device or settings.EMBEDDING_MODEL_DEVICE,
            )
            cls._instance = instance
        return cls._instance

    def _initialize(self, model_id: str, device: str) -> None:
        from sentence_transformers import SentenceTransformer

        logger.info(f"Loading embedding model: {model_id} on {device}")
        self._model = SentenceTransformer(model_id, device=device)
        logger.info(f"Embedding model loaded. Dimension: {self._model.get_sentence_embedding_dimension()}")

    @classmethod
    def reset(cls) -> None:
        """Drop the loaded model (used by tests)."""
        cls._instance = None

    def embed_single(self, text: str) -> list[float]:
        """Embed a single text string."""
        # sentence-transformers returns numpy arrays, convert to lists
        embedding = self._model.encode(
            text,
            convert_to_numpy=True,
            show_progress_bar=False,
        )
        return embedding.tolist()
