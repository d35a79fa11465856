"""
Tests for CDTExpressClient.

These tests verify:
- Bearer token and Accept headers on every request
- Non-2xx statuses become HttpError with the body kept verbatim
- Transport failures become NetworkError
- Non-JSON success bodies are kept as text
"""

# mypy: disallow-untyped-defs=False, check-untyped-defs=False

import httpx
import pytest
import respx
from cdt_express.clients.cdt_client import CDTExpressClient
from cdt_express.core.exceptions import HttpError, NetworkError

BASE_URL = "https://api.example.test"
ASSET_ID = "3fa85f64-5717-4562-b3fc-2c963f66afa6"


@pytest.mark.asyncio
@respx.mock
async def test_fetch_page_sends_credentials():
    route = respx.get(f"{BASE_URL}/v3/assets/{ASSET_ID}").mock(
        return_value=httpx.Response(200, json={"id": ASSET_ID})
    )

    async with CDTExpressClient(BASE_URL, "secret-key") as client:
        page = await client.fetch_page(f"/v3/assets/{ASSET_ID}", "")

    assert page.body == {"id": ASSET_ID}
    request = route.calls.last.request
    assert request.headers["Authorization"] == "Bearer secret-key"
    assert request.headers["Accept"] == "application/json"
    assert "X-Request-ID" in request.headers


@pytest.mark.asyncio
@respx.mock
async def test_query_string_passed_through():
    route = respx.get(f"{BASE_URL}/v3/assets").mock(
        return_value=httpx.Response(
            200, json={"results": [{"id": 1}], "pagination": {"cursor": "c1", "last_page": False}}
        )
    )

    async with CDTExpressClient(f"{BASE_URL}/", "k") as client:
        page = await client.fetch_page("/v3/assets", "limit=2&cursor=c0")

    assert route.calls.last.request.url.params["cursor"] == "c0"
    assert page.results == [{"id": 1}]
    assert page.pagination.cursor == "c1"


@pytest.mark.asyncio
@respx.mock
async def test_error_status_raises_http_error():
    respx.get(f"{BASE_URL}/v3/assets").mock(
        return_value=httpx.Response(401, text='{"detail":"Invalid API key"}')
    )

    async with CDTExpressClient(BASE_URL, "bad") as client:
        with pytest.raises(HttpError) as exc_info:
            await client.fetch_page("/v3/assets", "")

    assert exc_info.value.status_code == 401
    assert exc_info.value.message == 'API Error 401: {"detail":"Invalid API key"}'


@pytest.mark.asyncio
@respx.mock
async def test_transport_failure_raises_network_error():
    respx.get(f"{BASE_URL}/v3/assets").mock(side_effect=httpx.ConnectError("connection refused"))

    async with CDTExpressClient(BASE_URL, "k") as client:
        with pytest.raises(NetworkError) as exc_info:
            await client.fetch_page("/v3/assets", "")

    assert exc_info.value.message == "Network Error: connection refused"
    assert exc_info.value.error_code == "NETWORK_ERROR"


@pytest.mark.asyncio
@respx.mock
async def test_non_json_success_body_kept_as_text():
    respx.get(f"{BASE_URL}/health").mock(return_value=httpx.Response(200, text="OK"))

    async with CDTExpressClient(BASE_URL, "k") as client:
        page = await client.fetch_page("/health", "")

    assert page.body == "OK"
    assert page.results == []


@pytest.mark.asyncio
async def test_custom_transport():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"path": request.url.path})

    async with CDTExpressClient(BASE_URL, "k", transport=httpx.MockTransport(handler)) as client:
        page = await client.fetch_page("/v3/companies", "")

    assert page.body == {"path": "/v3/companies"}


@pytest.mark.asyncio
async def test_fetch_outside_context_manager():
    client = CDTExpressClient(BASE_URL, "k")

    with pytest.raises(RuntimeError, match="not initialized"):
        await client.fetch_page("/v3/assets", "")


def test_build_url():
    assert CDTExpressClient.build_url("/v3/assets", "") == "/v3/assets"
    assert CDTExpressClient.build_url("/v3/assets", "limit=2") == "/v3/assets?limit=2"
