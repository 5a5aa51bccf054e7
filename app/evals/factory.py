from __future__ import annotations
"""
Factory for creating the chat and embedding backends of an eval run.

The backend is chosen once, from settings, before the run starts. The
evaluation loop only ever sees the ChatPort / EmbeddingPort protocols.
"""

from dataclasses import dataclass, field
from typing import Awaitable, Callable

import httpx
from loguru import logger

from evalrunner_core.config import Settings
from evalrunner_core.domain.exceptions import ConfigurationError
from evalrunner_core.domain.interfaces import ChatPort, EmbeddingPort
from evalrunner_core.infrastructure.openai_client import OpenAIClientSingleton
from evalrunner_core.runtime.context import RunContext
from evalrunner_core.runtime.http_client import ServiceHttpClient

CHAT_PROVIDERS = ("openai", "ollama")
EMBEDDING_PROVIDERS = ("openai", "ollama", "sentence_transformers")


@dataclass
class ProviderBundle:
    """The backends selected for a run, plus the hooks that release them."""

    chat: ChatPort
    embedder: EmbeddingPort
    closers: list[Callable[[], Awaitable[None]]] = field(default_factory=list)

    async def aclose(self) -> None:
        for close in self.closers:
            await close()


def validate_provider_settings(settings: Settings) -> None:
    """
    Check that the selected backends are known and fully configured.

    Raises:
        ConfigurationError: On an unknown backend or missing values.
    """
    chat_provider = settings.EVAL_PROVIDER
    embedding_provider = settings.embedding_provider

    if chat_provider not in CHAT_PROVIDERS:
        raise ConfigurationError(
            f"Unknown EVAL_PROVIDER '{chat_provider}'. Expected one of: {', '.join(CHAT_PROVIDERS)}"
        )
    if embedding_provider not in EMBEDDING_PROVIDERS:
        raise ConfigurationError(
            f"Unknown embedding provider '{embedding_provider}'. "
            f"Expected one of: {', '.join(EMBEDDING_PROVIDERS)}"
        )

    pairs = []
    if "openai" in (chat_provider, embedding_provider):
        pairs.append(("OPENAI_API_KEY", settings.OPENAI_API_KEY))
    if chat_provider == "openai":
        pairs.append(("OPENAI_MODEL_ID", settings.OPENAI_MODEL_ID))
    if embedding_provider == "openai":
        pairs.append(("OPENAI_EMBEDDING_MODEL", settings.OPENAI_EMBEDDING_MODEL))
    if chat_provider == "ollama":
        pairs.append(("OLLAMA_CHAT_MODEL", settings.OLLAMA_CHAT_MODEL))
    if embedding_provider == "ollama":
        pairs.append(("OLLAMA_EMBEDDING_MODEL", settings.OLLAMA_EMBEDDING_MODEL))
    if "ollama" in (chat_provider, embedding_provider):
        pairs.append(("OLLAMA_BASE_URL", settings.OLLAMA_BASE_URL))

    missing = [name for name, value in pairs if not (value or "").strip()]
    if missing:
        raise ConfigurationError(f"Missing required config: {', '.join(missing)}")


def build_providers(
    settings: Settings,
    context: RunContext | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ProviderBundle:
    """
    Create the chat and embedding backends selected in ``settings``.

    Args:
        settings: Application settings.
        context: Run context, used for request correlation headers.
        transport: Optional httpx transport for the Ollama client (tests).
    """
    from app.evals.providers import OllamaChatModel, OllamaEmbedder, OpenAIChatModel, OpenAIEmbedder

    validate_provider_settings(settings)

    chat_provider = settings.EVAL_PROVIDER
    embedding_provider = settings.embedding_provider
    closers: list[Callable[[], Awaitable[None]]] = []

    openai_client = None
    if "openai" in (chat_provider, embedding_provider):
        openai_client = OpenAIClientSingleton.get_instance(settings)
        closers.append(OpenAIClientSingleton.close)

    http = None
    if "ollama" in (chat_provider, embedding_provider):
        http = ServiceHttpClient(
            settings.OLLAMA_BASE_URL,
            timeout=settings.OLLAMA_TIMEOUT,
            context=context,
            transport=transport,
        )
        closers.append(http.close)

    if chat_provider == "ollama":
        chat: ChatPort = OllamaChatModel(http, settings.OLLAMA_CHAT_MODEL)
    else:
        chat = OpenAIChatModel(openai_client, settings.OPENAI_MODEL_ID)

    if embedding_provider == "ollama":
        embedder: EmbeddingPort = OllamaEmbedder(http, settings.OLLAMA_EMBEDDING_MODEL)
    elif embedding_provider == "sentence_transformers":
        from app.evals.providers.local_embeddings import SentenceTransformerEmbedder

        embedder = SentenceTransformerEmbedder()
    else:
        embedder = OpenAIEmbedder(openai_client, settings.OPENAI_EMBEDDING_MODEL)

    logger.info(f"Using chat provider '{chat_provider}' and embedding provider '{embedding_provider}'")
    return ProviderBundle(chat=chat, embedder=embedder, closers=closers)
