"""
Tests for TracedHttpClient.

These tests verify:
- X-Request-ID header injection from structlog context
- Request/response logging
- Async context manager lifecycle
"""

# mypy: disallow-untyped-defs=False, check-untyped-defs=False

from unittest.mock import AsyncMock, patch

import httpx
import pytest
import respx
import structlog
from common.http_client import DEFAULT_TRACE_ID, TracedHttpClient
from structlog.testing import capture_logs


@pytest.fixture(autouse=True)
def clean_context():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.mark.asyncio
async def test_context_manager_registers_hooks_and_closes():
    with patch("common.http_client.httpx.AsyncClient") as mock_class:
        mock_class.return_value.aclose = AsyncMock()

        async with TracedHttpClient("http://test-service") as client:
            assert client._client is not None

        hooks = mock_class.call_args.kwargs["event_hooks"]
        assert len(hooks["request"]) == 1
        assert len(hooks["response"]) == 1
        mock_class.return_value.aclose.assert_awaited_once()
        assert client._client is None


@pytest.mark.asyncio
async def test_get_outside_context_manager_raises():
    client = TracedHttpClient("http://test-service")

    with pytest.raises(RuntimeError, match="Client not initialized"):
        await client.get("/anything")


@pytest.mark.asyncio
@respx.mock
async def test_trace_id_header_from_context():
    route = respx.get("http://test-service/v3/assets").mock(
        return_value=httpx.Response(200, json={"results": []})
    )
    structlog.contextvars.bind_contextvars(trace_id="trace-abc")

    async with TracedHttpClient("http://test-service") as client:
        response = await client.get("/v3/assets")

    assert response.status_code == 200
    assert route.calls.last.request.headers["X-Request-ID"] == "trace-abc"


@pytest.mark.asyncio
@respx.mock
async def test_default_trace_id_without_context():
    route = respx.get("http://test-service/v3/assets").mock(return_value=httpx.Response(200))

    async with TracedHttpClient("http://test-service") as client:
        await client.get("/v3/assets")

    assert route.calls.last.request.headers["X-Request-ID"] == DEFAULT_TRACE_ID


@pytest.mark.asyncio
@respx.mock
async def test_configured_headers_sent_with_every_request():
    route = respx.get("http://test-service/v3/companies").mock(return_value=httpx.Response(200))
    config = {"headers": {"Authorization": "Bearer secret", "Accept": "application/json"}}

    async with TracedHttpClient("http://test-service", config=config) as client:
        await client.get("/v3/companies")
        await client.get("/v3/companies")

    assert route.call_count == 2
    for call in route.calls:
        assert call.request.headers["Authorization"] == "Bearer secret"
        assert call.request.headers["Accept"] == "application/json"


@pytest.mark.asyncio
@respx.mock
async def test_successful_response_logged_without_headers():
    respx.get("http://test-service/ok").mock(return_value=httpx.Response(200, json={}))
    config = {"headers": {"Authorization": "Bearer secret"}}

    with capture_logs() as logs:
        async with TracedHttpClient("http://test-service", config=config) as client:
            await client.get("/ok")

    events = [entry["event"] for entry in logs]
    assert events == ["http_request_started", "http_request_completed"]
    completed = logs[1]
    assert completed["status_code"] == 200
    assert completed["duration_ms"] >= 0
    assert all("secret" not in str(entry) for entry in logs)


@pytest.mark.asyncio
@respx.mock
async def test_error_response_logged_with_body():
    respx.get("http://test-service/broken").mock(
        return_value=httpx.Response(500, text="Internal Server Error")
    )

    with capture_logs() as logs:
        async with TracedHttpClient("http://test-service") as client:
            response = await client.get("/broken")

    assert response.status_code == 500
    failed = next(entry for entry in logs if entry["event"] == "http_request_failed")
    assert failed["log_level"] == "warning"
    assert failed["status_code"] == 500
    assert failed["response_body"] == "Internal Server Error"


@pytest.mark.asyncio
async def test_custom_transport_is_used():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    config = {"transport": httpx.MockTransport(handler)}
    async with TracedHttpClient("http://test-service", timeout=None, config=config) as client:
        response = await client.get("/ping")

    assert response.status_code == 204
    assert seen[0].url.path == "/ping"
