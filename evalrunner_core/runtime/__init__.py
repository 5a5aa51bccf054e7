"""
Service runtime layer for evalrunner.

This package provides shared infrastructure for reliability and observability:
- RunContext: Run-scoped context with a correlation ID
- ServiceError: Standardized errors with retry semantics
- ServiceHttpClient: Pooled async HTTP client with automatic headers
- RetryPolicy / RetryingInvoker: Bounded fixed-delay retries for chat calls
"""

from .context import RunContext
from .errors import ErrorCode, RetryableError, RetryExhaustedError, ServiceError, TerminalError
from .http_client import ServiceHttpClient
from .retry import RetryingInvoker, RetryPolicy

__all__ = [
    "RunContext",
    "ErrorCode",
    "ServiceError",
    "RetryableError",
    "RetryExhaustedError",
    "TerminalError",
    "ServiceHttpClient",
    "RetryPolicy",
    "RetryingInvoker",
]
