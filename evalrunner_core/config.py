"""
Unified configuration for evalrunner.

This module provides a single Settings class that consolidates all
environment variables used by the harness, plus the RunConfig the evaluation
loop reads. Settings are resolved once at startup and never re-read mid-run.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from evalrunner_core.evals.base import ScoringWeights
from evalrunner_core.runtime.retry import RetryPolicy

# Determine project root for .env file loading (allows running from any CWD)
PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """
    Unified settings for evalrunner.

    Environment variables are loaded from .env file and can be overridden
    by actual environment variables.
    """

    # Service identification
    SERVICE_NAME: str = "evalrunner"
    LOG_LEVEL: str = "INFO"

    # Backend selection: "openai" (remote) or "ollama" (local)
    EVAL_PROVIDER: str = "openai"
    # Optional override: "openai", "ollama" or "sentence_transformers"
    EVAL_EMBEDDING_PROVIDER: str | None = None

    # OpenAI
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL_ID: str = "gpt-4o-mini"
    OPENAI_EMBEDDING_MODEL: str = "text-embedding-3-small"
    OPENAI_BASE_URL: str | None = None

    # Ollama (local)
    OLLAMA_BASE_URL: str = "http://localhost:11434/api"
    OLLAMA_CHAT_MODEL: str = "llama3"
    OLLAMA_EMBEDDING_MODEL: str = "nomic-embed-text:latest"
    OLLAMA_TIMEOUT: float = 60.0

    # In-process embedding model (sentence-transformers)
    TEXT_EMBEDDING_MODEL_ID: str = "sentence-transformers/all-MiniLM-L6-v2"
    EMBEDDING_MODEL_DEVICE: str = "cpu"

    # Scoring
    EVAL_SIMILARITY_THRESHOLD: float = 0.85
    EVAL_GROUND_TRUTH_WEIGHT: float = 0.7
    EVAL_CRITERIA_WEIGHT: float = 0.3

    # Inference retries
    EVAL_MAX_RETRIES: int = 3
    EVAL_RETRY_DELAY_MS: int = 2000
    EVAL_ATTEMPT_TIMEOUT: float | None = None

    # Run behavior
    EVAL_CONCURRENCY: int = 1
    EVAL_SKIP_ON_EMBEDDING_ERROR: bool = False

    # Files
    EVAL_DATASET_PATH: str = "Data/evalset.json"
    EVAL_OUTPUT_DIR: str = "Data"

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        extra="ignore"
    )

    @property
    def embedding_provider(self) -> str:
        """Embedding backend, falling back to the chat backend."""
        return self.EVAL_EMBEDDING_PROVIDER or self.EVAL_PROVIDER


class RunConfig(BaseModel):
    """
    Resolved, read-only options for one evaluation run.

    Attributes:
        threshold: Minimum weighted score for a case to pass.
        ground_truth_weight: Weight of the ground-truth similarity.
        criteria_weight: Weight of the criteria similarity.
        max_retries: Chat attempts per case (including the first).
        retry_delay: Seconds between chat attempts.
        attempt_timeout: Optional per-attempt deadline in seconds.
        concurrency: Cases evaluated at once (1 = sequential).
        skip_on_embedding_error: Drop a case instead of aborting when
            embedding fails.
    """

    threshold: float = Field(default=0.85, ge=0.0, le=1.0)
    ground_truth_weight: float = 0.7
    criteria_weight: float = 0.3
    max_retries: int = Field(default=3, ge=1)
    retry_delay: float = Field(default=2.0, ge=0.0)
    attempt_timeout: float | None = Field(default=None, gt=0.0)
    concurrency: int = Field(default=1, ge=1)
    skip_on_embedding_error: bool = False

    model_config = {"frozen": True}

    @classmethod
    def from_settings(cls, settings: Settings, threshold_override: float | None = None) -> "RunConfig":
        """
        Resolve the run configuration.

        Args:
            settings: Loaded application settings.
            threshold_override: Threshold from the command line; wins over
                EVAL_SIMILARITY_THRESHOLD when given.
        """
        threshold = (
            threshold_override if threshold_override is not None else settings.EVAL_SIMILARITY_THRESHOLD
        )
        return cls(
            threshold=threshold,
            ground_truth_weight=settings.EVAL_GROUND_TRUTH_WEIGHT,
            criteria_weight=settings.EVAL_CRITERIA_WEIGHT,
            max_retries=settings.EVAL_MAX_RETRIES,
            retry_delay=settings.EVAL_RETRY_DELAY_MS / 1000.0,
            attempt_timeout=settings.EVAL_ATTEMPT_TIMEOUT,
            concurrency=settings.EVAL_CONCURRENCY,
            skip_on_embedding_error=settings.EVAL_SKIP_ON_EMBEDDING_ERROR,
        )

    @property
    def weights(self) -> ScoringWeights:
        return ScoringWeights(ground_truth=self.ground_truth_weight, criteria=self.criteria_weight)

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_retries,
            delay=self.retry_delay,
            attempt_timeout=self.attempt_timeout,
        )


# Global settings instance
settings = Settings()  # type: ignore
