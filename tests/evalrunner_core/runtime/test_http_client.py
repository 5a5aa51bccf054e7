"""Unit tests for ServiceHttpClient."""

import httpx
import pytest

from evalrunner_core.runtime.context import RunContext
from evalrunner_core.runtime.errors import (
    ErrorCode,
    RetryableError,
    ServiceError,
    TerminalError,
)
from evalrunner_core.runtime.http_client import ServiceHttpClient


def make_client(handler, context=None) -> ServiceHttpClient:
    return ServiceHttpClient(
        base_url="http://ollama.test/api/",
        timeout=5.0,
        context=context,
        transport=httpx.MockTransport(handler),
    )


class TestServiceHttpClientInit:
    """Tests for client initialization."""

    def test_strips_trailing_slash(self):
        """Should strip trailing slash from base_url."""
        client = ServiceHttpClient(base_url="http://example.com/")
        assert client.base_url == "http://example.com"

    def test_builds_url_with_or_without_leading_slash(self):
        client = ServiceHttpClient(base_url="http://test.com/api")

        assert client._build_url("/chat") == "http://test.com/api/chat"
        assert client._build_url("chat") == "http://test.com/api/chat"


class TestRequests:
    """Tests for successful requests and header injection."""

    @pytest.mark.asyncio
    async def test_post_sends_json_and_returns_response(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = request.content
            return httpx.Response(200, json={"ok": True})

        async with make_client(handler) as client:
            response = await client.post("embeddings", json={"model": "m", "prompt": "hi"})

        assert response.json() == {"ok": True}
        assert seen["url"] == "http://ollama.test/api/embeddings"
        assert b'"prompt"' in seen["body"]

    @pytest.mark.asyncio
    async def test_injects_run_id_header(self):
        """Should inject X-Request-Id from the RunContext."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(200, json={})

        async with make_client(handler, context=RunContext(run_id="run-42")) as client:
            await client.get("tags", headers={"Custom-Header": "value"})

        assert seen["x-request-id"] == "run-42"
        assert seen["custom-header"] == "value"

    @pytest.mark.asyncio
    async def test_does_not_modify_caller_headers(self):
        """The caller's headers dict is left as passed."""
        caller_headers = {"Custom-Header": "value"}

        async with make_client(lambda request: httpx.Response(200), context=RunContext(run_id="run-42")) as client:
            await client.post("chat", headers=caller_headers)

        assert caller_headers == {"Custom-Header": "value"}

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        client = make_client(lambda request: httpx.Response(200))
        await client.get("x")

        await client.close()
        await client.close()

        assert client._client is None


class TestErrorHandling:
    """Tests for status and transport error conversion."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,code",
        [(429, ErrorCode.RATE_LIMITED), (500, ErrorCode.SERVICE_UNAVAILABLE), (503, ErrorCode.SERVICE_UNAVAILABLE)],
    )
    async def test_retryable_statuses(self, status, code):
        client = make_client(lambda request: httpx.Response(status, text="busy"))

        with pytest.raises(RetryableError) as exc_info:
            await client.post("chat")

        assert exc_info.value.code == code
        assert exc_info.value.message_debug == "busy"
        await client.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,code",
        [
            (400, ErrorCode.INVALID_INPUT),
            (401, ErrorCode.UNAUTHORIZED),
            (403, ErrorCode.FORBIDDEN),
            (404, ErrorCode.NOT_FOUND),
            (422, ErrorCode.INVALID_INPUT),
        ],
    )
    async def test_terminal_statuses(self, status, code):
        client = make_client(lambda request: httpx.Response(status))

        with pytest.raises(TerminalError) as exc_info:
            await client.post("chat")

        assert exc_info.value.code == code
        assert exc_info.value.retryable is False
        await client.close()

    @pytest.mark.asyncio
    async def test_timeout_is_retryable(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        client = make_client(handler)

        with pytest.raises(RetryableError) as exc_info:
            await client.post("chat")

        assert exc_info.value.code == ErrorCode.TIMEOUT
        await client.close()

    @pytest.mark.asyncio
    async def test_connect_error_is_retryable(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = make_client(handler)

        with pytest.raises(RetryableError) as exc_info:
            await client.post("chat")

        assert exc_info.value.code == ErrorCode.CONNECTION_ERROR
        await client.close()

    @pytest.mark.asyncio
    async def test_unexpected_error_is_internal(self):
        def handler(request):
            raise RuntimeError("weird")

        client = make_client(handler)

        with pytest.raises(ServiceError) as exc_info:
            await client.post("chat")

        assert exc_info.value.code == ErrorCode.INTERNAL_ERROR
        assert not isinstance(exc_info.value, RetryableError)
        await client.close()
