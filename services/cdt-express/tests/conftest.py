from collections.abc import Iterable
from typing import Any

import pytest
import structlog
from cdt_express.core.exceptions import CDTExpressError
from cdt_express.dispatch.pagination import PageEnvelope

ASSET_ID = "3fa85f64-5717-4562-b3fc-2c963f66afa6"
COMPANY_ID = "7c9e6679-7425-40de-944b-e07fc1f90ae7"
INDEX_ID = "0b7a1d2e-4c3f-4e5a-9b8c-1d2e3f4a5b6c"


class ScriptedFetcher:
    """
    PageFetcher that replays a fixed sequence of bodies (or errors).

    Records every (path, query) it was asked for, so tests can check how
    many fetches happened and with which cursor.
    """

    def __init__(self, pages: Iterable[Any]) -> None:
        self._pages = list(pages)
        self.calls: list[tuple[str, str]] = []

    async def fetch_page(self, path: str, query: str) -> PageEnvelope:
        self.calls.append((path, query))
        if not self._pages:
            raise AssertionError(f"Unexpected extra fetch: {path}?{query}")
        page = self._pages.pop(0)
        if isinstance(page, CDTExpressError):
            raise page
        return PageEnvelope.from_body(page)


@pytest.fixture
def scripted_fetcher():
    def factory(*pages: Any) -> ScriptedFetcher:
        return ScriptedFetcher(pages)

    return factory


@pytest.fixture
def two_page_script() -> list[dict[str, Any]]:
    return [
        {
            "results": [{"id": 1}, {"id": 2}],
            "pagination": {"cursor": "c1", "last_page": False, "count": 2},
        },
        {
            "results": [{"id": 3}],
            "pagination": {"cursor": None, "last_page": True, "count": 1},
        },
    ]


@pytest.fixture(autouse=True)
def clean_log_context():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
