"""Unit tests for ServiceError hierarchy."""

import pytest

from evalrunner_core.runtime.errors import (
    ErrorCode,
    RetryableError,
    RetryExhaustedError,
    ServiceError,
    TerminalError,
)


class TestServiceError:
    """Tests for ServiceError base class."""

    def test_create_with_required_fields(self):
        """Should create error with required fields."""
        error = ServiceError(code="TEST_ERROR", message_safe="Something went wrong")

        assert error.code == "TEST_ERROR"
        assert error.message_safe == "Something went wrong"
        assert error.message_debug is None
        assert error.retryable is False
        assert error.cause is None
        assert error.debug_id is not None  # Auto-generated

    def test_str_representation(self):
        """Should format as [CODE] message."""
        error = ServiceError(code="MY_CODE", message_safe="My message")

        assert str(error) == "[MY_CODE] My message"

    def test_repr_uses_class_name(self):
        error = TerminalError(code=ErrorCode.NOT_FOUND, message_safe="gone", debug_id="abc")

        assert repr(error).startswith("TerminalError(code='NOT_FOUND'")
        assert "debug_id='abc'" in repr(error)

    def test_to_dict_excludes_debug_info(self):
        """Should only expose safe fields."""
        error = ServiceError(
            code="X",
            message_safe="safe",
            message_debug="secret payload",
            debug_id="id-1",
        )

        assert error.to_dict() == {"code": "X", "message": "safe", "debug_id": "id-1"}

    def test_is_exception(self):
        with pytest.raises(ServiceError):
            raise ServiceError(code="X", message_safe="boom")


class TestRetryClassification:
    """Tests for retryable / terminal subclasses."""

    def test_retryable_error(self):
        error = RetryableError(code=ErrorCode.TIMEOUT, message_safe="slow")

        assert error.retryable is True
        assert isinstance(error, ServiceError)

    def test_terminal_error(self):
        error = TerminalError(code=ErrorCode.UNAUTHORIZED, message_safe="no")

        assert error.retryable is False
        assert isinstance(error, ServiceError)


class TestRetryExhaustedError:
    """Tests for RetryExhaustedError."""

    def test_carries_attempts_and_cause(self):
        cause = RuntimeError("backend down")
        error = RetryExhaustedError(attempts=3, cause=cause)

        assert error.attempts == 3
        assert error.cause is cause
        assert error.code == ErrorCode.RETRIES_EXHAUSTED
        assert error.message_debug == "backend down"
        assert str(error) == "[RETRIES_EXHAUSTED] All 3 attempt(s) failed"

    def test_without_cause(self):
        error = RetryExhaustedError(attempts=1)

        assert error.cause is None
        assert error.message_debug is None
