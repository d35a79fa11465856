"""
HTTP client for the CDT Express API.

Wraps TracedHttpClient so every request carries the bearer token, the
X-Request-ID header and structured request/response logging. Requests are
never retried: a failed page aborts whatever walk asked for it.

Example:
    ```python
    async with CDTExpressClient(base_url, api_key) as client:
        page = await client.fetch_page("/v3/assets/abc", "")
    ```
"""

from types import TracebackType

import httpx
from common.http_client import HttpClientConfig, TracedHttpClient
from common.logging import get_logger

from cdt_express.core.constants import HTTP_SUCCESS_RANGE
from cdt_express.core.exceptions import HttpError, NetworkError
from cdt_express.dispatch.pagination import PageEnvelope

logger = get_logger(__name__)


class CDTExpressClient:
    """
    Page fetcher backed by the CDT Express HTTP API.

    Args:
        base_url: API root, e.g. "https://api.riskthinking.ai"
        api_key: Bearer token
        timeout: Per-request timeout in seconds; None waits indefinitely
        transport: Optional httpx transport (tests use respx or MockTransport)
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        config: HttpClientConfig = {
            "headers": {
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
        }
        if transport is not None:
            config["transport"] = transport
        self._config = config
        self._client: TracedHttpClient | None = None

    async def __aenter__(self) -> "CDTExpressClient":
        self._client = TracedHttpClient(
            base_url=self.base_url, timeout=self.timeout, config=self._config
        )
        await self._client.__aenter__()
        logger.debug("cdt_client_connected", base_url=self.base_url, timeout=self.timeout)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client:
            await self._client.__aexit__(exc_type, exc_val, exc_tb)
            self._client = None
        logger.debug("cdt_client_disconnected", base_url=self.base_url)

    @staticmethod
    def build_url(path: str, query: str) -> str:
        return f"{path}?{query}" if query else path

    async def fetch_page(self, path: str, query: str) -> PageEnvelope:
        """
        GET one page and decode it.

        Raises:
            HttpError: The API answered outside 2xx (body kept verbatim)
            NetworkError: No status was obtained (DNS, connect, timeout)
            RuntimeError: The client was used outside `async with`
        """
        if not self._client:
            raise RuntimeError("CDT Express client not initialized. Use 'async with' context manager.")

        url = self.build_url(path, query)
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            logger.warning(
                "cdt_network_error",
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise NetworkError(str(e) or type(e).__name__) from e

        if response.status_code not in HTTP_SUCCESS_RANGE:
            raise HttpError(response.status_code, response.text)

        try:
            body = response.json()
        except ValueError:
            logger.debug("cdt_non_json_body", url=url, status_code=response.status_code)
            body = response.text
        return PageEnvelope.from_body(body)
