"""
Shared async HTTP client for locally hosted model backends.

This module provides a pooled HTTP client that injects the run's correlation
header and converts transport failures and error statuses into ServiceErrors.
It does not retry: retry decisions belong to the caller.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from .context import RunContext
from .errors import ErrorCode, RetryableError, ServiceError, TerminalError


class ServiceHttpClient:
    """Shared HTTP client for model backend calls.

    Features:
    - Connection pooling via httpx.AsyncClient
    - Automatic X-Request-Id header from the RunContext
    - Timeout handling
    - Structured error conversion

    Example:
        client = ServiceHttpClient("http://localhost:11434/api", context=ctx)
        async with client:
            response = await client.post("/embeddings", json={"model": "m", "prompt": "hi"})
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        context: RunContext | None = None,
        max_connections: int = 100,
        max_keepalive: int = 20,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the HTTP client.

        Args:
            base_url: Base URL for all requests.
            timeout: Default timeout in seconds.
            context: RunContext used for header injection.
            max_connections: Maximum total connections in pool.
            max_keepalive: Maximum keepalive connections.
            transport: Optional httpx transport (used by tests).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.context = context

        self._limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive,
            keepalive_expiry=30.0,
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                limits=self._limits,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ServiceHttpClient":
        await self._get_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def _build_url(self, path: str) -> str:
        path = path.lstrip("/")
        return f"{self.base_url}/{path}"

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        status = response.status_code
        body = response.text[:500] if response.text else None

        if status == 429:
            raise RetryableError(
                code=ErrorCode.RATE_LIMITED,
                message_safe="Backend rate limit exceeded",
                message_debug=body,
            )
        if status >= 500:
            raise RetryableError(
                code=ErrorCode.SERVICE_UNAVAILABLE,
                message_safe=f"Backend returned {status}",
                message_debug=body,
            )
        if status == 401:
            raise TerminalError(code=ErrorCode.UNAUTHORIZED, message_safe="Unauthorized")
        if status == 403:
            raise TerminalError(code=ErrorCode.FORBIDDEN, message_safe="Forbidden")
        if status == 404:
            raise TerminalError(
                code=ErrorCode.NOT_FOUND,
                message_safe="Resource not found",
                message_debug=body,
            )
        if status >= 400:
            raise TerminalError(
                code=ErrorCode.INVALID_INPUT,
                message_safe=f"Request failed with status {status}",
                message_debug=body,
            )

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Make an HTTP request with header injection and error conversion.

        Args:
            method: HTTP method (GET, POST, etc.).
            path: Request path.
            **kwargs: Additional arguments passed to httpx.

        Returns:
            The HTTP response.

        Raises:
            RetryableError: For timeouts, connection failures, 429 and 5xx.
            TerminalError: For other 4xx responses.
            ServiceError: For unexpected failures.
        """
        client = await self._get_client()
        url = self._build_url(path)

        headers = dict(kwargs.pop("headers", None) or {})
        if self.context is not None:
            headers.update(self.context.get_headers())

        try:
            response = await client.request(method=method, url=url, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            raise RetryableError(
                code=ErrorCode.TIMEOUT,
                message_safe=f"Request timed out after {self.timeout}s",
                cause=e,
            ) from e
        except httpx.ConnectError as e:
            raise RetryableError(
                code=ErrorCode.CONNECTION_ERROR,
                message_safe=f"Failed to connect to {self.base_url}",
                cause=e,
            ) from e
        except Exception as e:
            logger.error(f"Unexpected error calling {method} {path}: {e}")
            raise ServiceError(
                code=ErrorCode.INTERNAL_ERROR,
                message_safe="Unexpected error during request",
                message_debug=str(e),
                cause=e,
            ) from e

        self._raise_for_status(response)
        return response

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a GET request."""
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a POST request."""
        return await self.request("POST", path, **kwargs)
