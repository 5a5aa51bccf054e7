"""Chat and embedding backends implementing the evalrunner ports."""

from .ollama_provider import OllamaChatModel, OllamaEmbedder
from .openai_provider import OpenAIChatModel, OpenAIEmbedder

__all__ = [
    "OllamaChatModel",
    "OllamaEmbedder",
    "OpenAIChatModel",
    "OpenAIEmbedder",
]
