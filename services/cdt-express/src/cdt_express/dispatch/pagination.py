"""
Cursor pagination over the CDT Express API.

Paginated endpoints answer with a body shaped like

    {"results": [...], "pagination": {"cursor": "...", "last_page": false, "count": 100}}

Any of those keys may be missing. PageEnvelope reads them defensively and
PaginationWalker follows the cursor until the API reports the last page or
stops handing out cursors.
"""

from collections.abc import Mapping
from typing import Any, Protocol

from common.logging import get_logger
from pydantic import BaseModel, ConfigDict, Field

from cdt_express.core.constants import CURSOR_PARAM, PAGINATION_KEY, RESULTS_KEY
from cdt_express.core.exceptions import PaginationLimitError
from cdt_express.dispatch.query import encode_query
from cdt_express.dispatch.template import ResolvedRequest

logger = get_logger(__name__)


class PaginationInfo(BaseModel):
    """The `pagination` block of a page, with unusable values dropped."""

    model_config = ConfigDict(frozen=True)

    cursor: str | None = None
    last_page: bool = False
    count: int | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> "PaginationInfo | None":
        if not isinstance(raw, Mapping):
            return None
        cursor = raw.get("cursor")
        count = raw.get("count")
        return cls(
            cursor=cursor if isinstance(cursor, str) and cursor else None,
            last_page=raw.get("last_page") is True,
            count=count if isinstance(count, int) and not isinstance(count, bool) else None,
        )


class PageEnvelope(BaseModel):
    """
    Decoded body of one API response.

    Attributes:
        body: The decoded JSON value, or the raw text when it was not JSON
        results: Records of the page; empty when absent or not a list
        has_results: Whether the body carried a `results` key at all
        pagination: Parsed pagination block, None when absent
    """

    model_config = ConfigDict(frozen=True)

    body: Any = None
    results: list[Any] = Field(default_factory=list)
    has_results: bool = False
    pagination: PaginationInfo | None = None

    @classmethod
    def from_body(cls, body: Any) -> "PageEnvelope":
        if not isinstance(body, Mapping):
            return cls(body=body)
        raw_results = body.get(RESULTS_KEY)
        return cls(
            body=body,
            results=list(raw_results) if isinstance(raw_results, list) else [],
            has_results=RESULTS_KEY in body,
            pagination=PaginationInfo.from_raw(body.get(PAGINATION_KEY)),
        )


class PageFetcher(Protocol):
    """Anything that can GET one fully resolved page."""

    async def fetch_page(self, path: str, query: str) -> PageEnvelope: ...


class WalkResult(BaseModel):
    """
    Outcome of a walk.

    `body` is what JSON output renders: the raw page body for a single
    fetch, the aggregated records for an exhaustive walk. `records` is what
    CSV output renders.
    """

    model_config = ConfigDict(frozen=True)

    body: Any = None
    records: Any = None
    pages_fetched: int = 0
    exhaustive: bool = False


class PaginationWalker:
    """
    Drives a PageFetcher over one resolved request.

    Pages are fetched strictly one after another since each query depends on
    the previous page's cursor. Any error raised by the fetcher aborts the
    walk and nothing aggregated so far is returned.

    Args:
        fetcher: Page source (normally CDTExpressClient)
        max_pages: Optional cap on fetches in exhaustive mode; None means
            the server's last_page/cursor signals are trusted completely
    """

    def __init__(self, fetcher: PageFetcher, max_pages: int | None = None) -> None:
        if max_pages is not None and max_pages < 1:
            raise ValueError("max_pages must be at least 1")
        self._fetcher = fetcher
        self._max_pages = max_pages

    async def walk(self, request: ResolvedRequest, exhaustive: bool = False) -> WalkResult:
        if not exhaustive:
            page = await self._fetcher.fetch_page(request.path, encode_query(request.query_params))
            return WalkResult(
                body=page.body,
                records=page.results if page.has_results else page.body,
                pages_fetched=1,
            )
        return await self._walk_all(request)

    async def _walk_all(self, request: ResolvedRequest) -> WalkResult:
        # The request's own map stays untouched; only this copy gets the cursor
        working_params = dict(request.query_params)
        aggregated: list[Any] = []
        pages_fetched = 0

        while True:
            if self._max_pages is not None and pages_fetched >= self._max_pages:
                logger.warning(
                    "pagination_limit_reached",
                    path=request.path,
                    max_pages=self._max_pages,
                    records=len(aggregated),
                )
                raise PaginationLimitError(self._max_pages)

            page = await self._fetcher.fetch_page(request.path, encode_query(working_params))
            pages_fetched += 1
            aggregated.extend(page.results)

            info = page.pagination
            logger.debug(
                "pagination_page_fetched",
                path=request.path,
                page=pages_fetched,
                page_records=len(page.results),
                total_records=len(aggregated),
                last_page=info.last_page if info else None,
                has_cursor=bool(info and info.cursor),
            )

            if info is None or info.last_page or not info.cursor:
                break
            working_params[CURSOR_PARAM] = info.cursor

        logger.info(
            "pagination_completed",
            path=request.path,
            pages=pages_fetched,
            records=len(aggregated),
        )
        return WalkResult(
            body=aggregated, records=aggregated, pages_fetched=pages_fetched, exhaustive=True
        )
