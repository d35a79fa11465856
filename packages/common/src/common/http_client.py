"""
Traced async HTTP client for outbound API calls.

Every request sent through TracedHttpClient carries the caller's trace_id
as an X-Request-ID header and produces two structured log lines: one when
it leaves, one when its response arrives. Header values are never logged,
so credentials configured as default headers stay out of the logs.

Usage:
    from common.http_client import TracedHttpClient

    async with TracedHttpClient("https://api.riskthinking.ai", timeout=None) as client:
        response = await client.get("/v3/assets?limit=10")
"""

import time
from types import TracebackType
from typing import Any, TypedDict

import httpx
import structlog

logger = structlog.get_logger(__name__)

DEFAULT_TRACE_ID = "internal-request"
TRACE_HEADER = "X-Request-ID"
LOGGED_BODY_LIMIT = 500

_STARTED_AT = "traced_started_at"


class HttpClientConfig(TypedDict, total=False):
    """httpx.AsyncClient options a caller may set."""

    headers: dict[str, str]
    verify: bool
    follow_redirects: bool
    transport: httpx.AsyncBaseTransport


def current_trace_id() -> str:
    return structlog.contextvars.get_contextvars().get("trace_id") or DEFAULT_TRACE_ID


def _duration_ms(request: httpx.Request) -> float:
    started_at = request.extensions.get(_STARTED_AT)
    if started_at is None:
        return 0.0
    return round((time.perf_counter() - started_at) * 1000, 2)


async def stamp_request(request: httpx.Request) -> None:
    """Request hook: attach the trace id and remember when the request left."""
    trace_id = current_trace_id()
    request.headers[TRACE_HEADER] = trace_id
    request.extensions[_STARTED_AT] = time.perf_counter()

    logger.info(
        "http_request_started",
        method=request.method,
        url=str(request.url),
        trace_id=trace_id,
    )


async def log_response(response: httpx.Response) -> None:
    """Response hook: error bodies are read so the reason ends up in the log."""
    request = response.request
    fields: dict[str, Any] = {
        "method": request.method,
        "url": str(request.url),
        "status_code": response.status_code,
        "duration_ms": _duration_ms(request),
    }

    if response.is_error:
        await response.aread()
        logger.warning(
            "http_request_failed", response_body=response.text[:LOGGED_BODY_LIMIT], **fields
        )
    else:
        logger.info("http_request_completed", **fields)


class TracedHttpClient:
    """
    Read-only HTTP client bound to one base URL.

    Owns an httpx.AsyncClient (and its connection pool) between __aenter__
    and __aexit__; the pool is shared by every request made in between, so
    concurrent callers reuse connections.

    Args:
        base_url: API root, e.g. "https://api.riskthinking.ai"
        timeout: Request timeout in seconds; None waits indefinitely
        config: Extra httpx options (default headers, TLS verification,
            redirects, a custom transport for tests)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float | None = 10.0,
        config: HttpClientConfig | None = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.config = config or {}
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "TracedHttpClient":
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            event_hooks={"request": [stamp_request], "response": [log_response]},
            **self.config,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """
        Send a GET request relative to base_url.

        Raises:
            RuntimeError: Outside `async with`
            httpx.HTTPError: Transport failures (status codes never raise)
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")
        return await self._client.get(url, **kwargs)
