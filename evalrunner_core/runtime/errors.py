"""
Backend call errors.

Provider calls fail in two ways that matter to an eval run: transient trouble
(timeouts, rate limits, an overloaded local model) that a retry may clear, and
permanent misconfiguration (bad key, unknown model) that it will not. The
runner logs these with their code and debug ID so a skipped case can be traced
to the failure behind it.
"""

from __future__ import annotations

import uuid
from typing import Any


class ErrorCode:
    """Codes raised by the HTTP client and the retrying invoker."""

    TIMEOUT = "TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    RATE_LIMITED = "RATE_LIMITED"

    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"

    RETRIES_EXHAUSTED = "RETRIES_EXHAUSTED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ServiceError(Exception):
    """A backend failure with a code, a log-safe message and a debug ID.

    Attributes:
        code: One of ``ErrorCode``.
        message_safe: Message safe to log and print.
        message_debug: Response body or other detail, kept out of ``to_dict``.
        retryable: Whether another attempt may succeed.
        cause: The underlying exception, if any.
        debug_id: Short ID for matching log lines to this failure.
    """

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        retryable: bool = False,
        cause: Exception | None = None,
        debug_id: str | None = None,
    ):
        super().__init__(message_safe)
        self.code = code
        self.message_safe = message_safe
        self.message_debug = message_debug
        self.retryable = retryable
        self.cause = cause
        self.debug_id = debug_id or str(uuid.uuid4())[:8]

    def __str__(self) -> str:
        return f"[{self.code}] {self.message_safe}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code!r}, "
            f"message_safe={self.message_safe!r}, "
            f"retryable={self.retryable}, "
            f"debug_id={self.debug_id!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Fields bound to log records (no debug detail)."""
        return {
            "code": self.code,
            "message": self.message_safe,
            "debug_id": self.debug_id,
        }


class RetryableError(ServiceError):
    """Transient failure: timeout, connection refused, 429 or 5xx."""

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        cause: Exception | None = None,
        debug_id: str | None = None,
    ):
        super().__init__(code, message_safe, message_debug, True, cause, debug_id)


class TerminalError(ServiceError):
    """Permanent failure: rejected request, bad credentials or unknown model."""

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        cause: Exception | None = None,
        debug_id: str | None = None,
    ):
        super().__init__(code, message_safe, message_debug, False, cause, debug_id)


class RetryExhaustedError(RetryableError):
    """Every attempt of a retried call failed.

    Carries the number of attempts made and the last underlying failure.
    """

    def __init__(
        self,
        attempts: int,
        cause: Exception | None = None,
        debug_id: str | None = None,
    ):
        super().__init__(
            code=ErrorCode.RETRIES_EXHAUSTED,
            message_safe=f"All {attempts} attempt(s) failed",
            message_debug=str(cause) if cause else None,
            cause=cause,
            debug_id=debug_id,
        )
        self.attempts = attempts
