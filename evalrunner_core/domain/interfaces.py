"""
Backend interfaces (Protocols) for evalrunner.

The evaluation core only talks to language-model backends through these two
capabilities. Concrete providers (remote OpenAI, local Ollama, in-process
sentence-transformers) implement them and are selected once at startup.
These protocols enable:
- Dependency Injection
- Easy faking for testing
- Clear backend contracts
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ChatPort(Protocol):
    """Interface for chat completion."""

    async def complete(self, prompt: str) -> str:
        """
        Produce a completion for a single user prompt.

        Args:
            prompt: The prompt text.

        Returns:
            str: The model's response text.
        """
        ...


@runtime_checkable
class EmbeddingPort(Protocol):
    """Interface for embedding generation.

    Implementations must be safe to call concurrently for independent inputs.
    """

    async def embed(self, text: str) -> list[float]:
        """
        Generate an embedding for a text.

        Args:
            text: The text to embed.

        Returns:
            list: The embedding vector.
        """
        ...
