"""Unit tests for RetryPolicy and RetryingInvoker."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from evalrunner_core.runtime.errors import ErrorCode, RetryableError, RetryExhaustedError
from evalrunner_core.runtime.retry import DEFAULT_RETRY_POLICY, RetryingInvoker, RetryPolicy
from tests.fakes import FakeChatModel


class TestRetryPolicy:
    """Tests for RetryPolicy configuration."""

    def test_default_values(self):
        """Should default to three attempts two seconds apart."""
        policy = RetryPolicy()

        assert policy.max_attempts == 3
        assert policy.delay == 2.0
        assert policy.attempt_timeout is None

    def test_is_frozen(self):
        """Should be immutable."""
        policy = RetryPolicy()
        with pytest.raises(Exception):
            policy.max_attempts = 10

    def test_rejects_zero_attempts(self):
        """At least one attempt is required."""
        with pytest.raises(Exception):
            RetryPolicy(max_attempts=0)

    def test_rejects_negative_delay(self):
        with pytest.raises(Exception):
            RetryPolicy(delay=-1.0)

    def test_delay_is_constant(self):
        """Every retry waits the same amount."""
        policy = RetryPolicy(delay=2.0)

        assert [policy.calculate_delay(n) for n in range(5)] == [2.0] * 5

    def test_has_attempts_left(self):
        policy = RetryPolicy(max_attempts=3)

        assert policy.has_attempts_left(0) is True
        assert policy.has_attempts_left(1) is True
        assert policy.has_attempts_left(2) is False

    def test_default_policy(self):
        assert DEFAULT_RETRY_POLICY == RetryPolicy()


class TestRetryingInvoker:
    """Tests for RetryingInvoker.invoke()."""

    @pytest.mark.asyncio
    async def test_success_first_attempt(self):
        """Should return immediately without sleeping."""
        sleep = AsyncMock()
        chat = FakeChatModel(["hello"])
        invoker = RetryingInvoker(RetryPolicy(max_attempts=3, delay=2.0), sleep=sleep)

        result = await invoker.invoke(chat, "hi")

        assert result == "hello"
        assert chat.prompts == ["hi"]
        sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_fails_twice_then_succeeds(self):
        """Two failures cost exactly two fixed delays."""
        sleep = AsyncMock()
        chat = FakeChatModel([RuntimeError("one"), RuntimeError("two"), "finally"])
        invoker = RetryingInvoker(RetryPolicy(max_attempts=3, delay=2.0), sleep=sleep)

        result = await invoker.invoke(chat, "q")

        assert result == "finally"
        assert len(chat.prompts) == 3
        assert sleep.await_count == 2
        assert [call.args[0] for call in sleep.await_args_list] == [2.0, 2.0]

    @pytest.mark.asyncio
    async def test_always_failing_raises_exhausted(self):
        """Exactly max_attempts calls are made, then RetryExhaustedError."""
        sleep = AsyncMock()
        last = RuntimeError("third")
        chat = FakeChatModel([RuntimeError("first"), RuntimeError("second"), last])
        invoker = RetryingInvoker(RetryPolicy(max_attempts=3, delay=0.5), sleep=sleep)

        with pytest.raises(RetryExhaustedError) as exc_info:
            await invoker.invoke(chat, "q")

        assert len(chat.prompts) == 3
        assert exc_info.value.attempts == 3
        assert exc_info.value.cause is last
        assert exc_info.value.code == ErrorCode.RETRIES_EXHAUSTED
        # no wait after the final attempt
        assert sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_single_attempt_policy(self):
        """max_attempts=1 means no retries and no sleeping."""
        sleep = AsyncMock()
        chat = FakeChatModel([RuntimeError("nope")])
        invoker = RetryingInvoker(RetryPolicy(max_attempts=1), sleep=sleep)

        with pytest.raises(RetryExhaustedError):
            await invoker.invoke(chat, "q")

        assert len(chat.prompts) == 1
        sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_on_retry_callback(self):
        """Should call on_retry before each retry."""
        callback = MagicMock()
        error = RuntimeError("flaky")
        chat = FakeChatModel([error, "ok"])
        invoker = RetryingInvoker(RetryPolicy(delay=1.0), sleep=AsyncMock(), on_retry=callback)

        await invoker.invoke(chat, "q")

        callback.assert_called_once_with(0, error, 1.0)

    @pytest.mark.asyncio
    async def test_attempt_timeout_counts_as_failure(self):
        """A hung attempt is cut off and retried."""

        class HangingOnceChat:
            def __init__(self):
                self.calls = 0

            async def complete(self, prompt: str) -> str:
                self.calls += 1
                if self.calls == 1:
                    await asyncio.sleep(10)
                return "late but fine"

        chat = HangingOnceChat()
        invoker = RetryingInvoker(RetryPolicy(max_attempts=2, attempt_timeout=0.01), sleep=AsyncMock())

        result = await invoker.invoke(chat, "q")

        assert result == "late but fine"
        assert chat.calls == 2

    @pytest.mark.asyncio
    async def test_timeout_on_every_attempt(self):
        """The last cause is a TIMEOUT RetryableError."""

        class HangingChat:
            async def complete(self, prompt: str) -> str:
                await asyncio.sleep(10)
                return "never"

        invoker = RetryingInvoker(RetryPolicy(max_attempts=2, attempt_timeout=0.01), sleep=AsyncMock())

        with pytest.raises(RetryExhaustedError) as exc_info:
            await invoker.invoke(HangingChat(), "q")

        assert isinstance(exc_info.value.cause, RetryableError)
        assert exc_info.value.cause.code == ErrorCode.TIMEOUT

    def test_uses_default_policy(self):
        invoker = RetryingInvoker()

        assert invoker.policy is DEFAULT_RETRY_POLICY
