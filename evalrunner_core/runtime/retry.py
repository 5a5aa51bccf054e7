"""
Retry policy configuration and the retrying chat invoker.

Chat completions are retried a bounded number of times with a fixed delay
between attempts. Embedding calls are never routed through here.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from loguru import logger
from pydantic import BaseModel, Field

from evalrunner_core.domain.interfaces import ChatPort

from .errors import ErrorCode, RetryableError, RetryExhaustedError

SleepFn = Callable[[float], Awaitable[None]]


class RetryPolicy(BaseModel):
    """Configuration for retry behavior.

    The delay between attempts is constant: attempt N waits ``delay`` seconds
    no matter how many attempts came before it.

    Attributes:
        max_attempts: Maximum number of attempts (including the first).
        delay: Seconds to wait between a failed attempt and the next one.
        attempt_timeout: Optional deadline in seconds for a single attempt.
    """

    max_attempts: int = Field(default=3, ge=1)
    delay: float = Field(default=2.0, ge=0.0)
    attempt_timeout: float | None = Field(default=None, gt=0.0)

    model_config = {"frozen": True}

    def calculate_delay(self, attempt: int) -> float:
        """Delay before the attempt following ``attempt`` (0-indexed)."""
        return self.delay

    def has_attempts_left(self, attempt: int) -> bool:
        """Whether another attempt is allowed after ``attempt`` (0-indexed)."""
        return attempt + 1 < self.max_attempts


DEFAULT_RETRY_POLICY = RetryPolicy()


class RetryingInvoker:
    """Calls ``ChatPort.complete`` with bounded, fixed-delay retries.

    Usage:
        invoker = RetryingInvoker(RetryPolicy(max_attempts=3, delay=2.0))
        text = await invoker.invoke(chat, "What is 2 + 2?")

    Raises ``RetryExhaustedError`` once every attempt has failed.
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        sleep: SleepFn = asyncio.sleep,
        on_retry: Callable[[int, Exception, float], None] | None = None,
    ):
        """
        Args:
            policy: Retry policy to use. Defaults to DEFAULT_RETRY_POLICY.
            sleep: Coroutine used to wait between attempts.
            on_retry: Optional callback called before each retry with
                      (attempt, exception, delay).
        """
        self.policy = policy or DEFAULT_RETRY_POLICY
        self._sleep = sleep
        self._on_retry = on_retry

    async def _attempt(self, chat: ChatPort, prompt: str) -> str:
        if self.policy.attempt_timeout is None:
            return await chat.complete(prompt)
        try:
            return await asyncio.wait_for(chat.complete(prompt), timeout=self.policy.attempt_timeout)
        except asyncio.TimeoutError as e:
            raise RetryableError(
                code=ErrorCode.TIMEOUT,
                message_safe=f"Completion timed out after {self.policy.attempt_timeout}s",
                cause=e,
            ) from e

    async def invoke(self, chat: ChatPort, prompt: str) -> str:
        """
        Get a completion for ``prompt``, retrying failed attempts.

        Args:
            chat: The chat backend to call.
            prompt: Prompt text sent as a single user message.

        Returns:
            The completion text from the first successful attempt.

        Raises:
            RetryExhaustedError: If all attempts failed.
        """
        last_exception: Exception | None = None

        for attempt in range(self.policy.max_attempts):
            try:
                return await self._attempt(chat, prompt)
            except Exception as e:
                last_exception = e
                logger.warning(f"Attempt {attempt + 1}/{self.policy.max_attempts} failed: {e}")

                if not self.policy.has_attempts_left(attempt):
                    break

                delay = self.policy.calculate_delay(attempt)
                if self._on_retry:
                    self._on_retry(attempt, e, delay)
                await self._sleep(delay)

        raise RetryExhaustedError(attempts=self.policy.max_attempts, cause=last_exception)
