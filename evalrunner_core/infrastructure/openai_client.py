"""
OpenAI Client Singleton

Provides a shared async OpenAI client instance for connection reuse across
the chat and embedding providers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from evalrunner_core.config import Settings, settings
from evalrunner_core.domain.exceptions import ConfigurationError

if TYPE_CHECKING:
    from openai import AsyncOpenAI


class OpenAIClientSingleton:
    """
    Singleton wrapper for the async OpenAI client.

    Ensures only one client instance is created and reused by both the
    chat and the embedding provider.

    Usage:
        client = OpenAIClientSingleton.get_instance()
        response = await client.chat.completions.create(...)
    """

    _instance: "AsyncOpenAI | None" = None

    @classmethod
    def get_instance(cls, config: Settings | None = None) -> "AsyncOpenAI":
        """
        Get or create the OpenAI client instance.

        Args:
            config: Settings to build the client from (defaults to the global settings).

        Returns:
            AsyncOpenAI: The shared client instance.

        Raises:
            ConfigurationError: If OPENAI_API_KEY is not configured.
        """
        if cls._instance is None:
            from openai import AsyncOpenAI

            config = config if config is not None else settings
            api_key = config.OPENAI_API_KEY
            if not api_key:
                raise ConfigurationError(
                    "OPENAI_API_KEY not configured. "
                    "Set it in .env or environment variables."
                )

            kwargs = {"api_key": api_key}
            if config.OPENAI_BASE_URL:
                kwargs["base_url"] = config.OPENAI_BASE_URL

            cls._instance = AsyncOpenAI(**kwargs)
            logger.info("OpenAI client initialized (singleton)")

        return cls._instance

    @classmethod
    async def close(cls) -> None:
        """Close the shared client, if one was created."""
        if cls._instance is not None:
            await cls._instance.close()
            cls._instance = None

    @classmethod
    def reset(cls) -> None:
        """
        Reset the singleton instance.

        Useful for testing or when API key changes.
        """
        cls._instance = None
