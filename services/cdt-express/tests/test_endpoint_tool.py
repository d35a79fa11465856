"""
Tests for EndpointTool: the full call path from raw arguments to envelope.

Run:
    pytest services/cdt-express/tests/test_endpoint_tool.py -v
"""

# mypy: disallow-untyped-defs=False, check-untyped-defs=False

import json
from urllib.parse import parse_qs

import pytest
import structlog
from cdt_express.core.exceptions import HttpError, NetworkError
from cdt_express.dispatch.pagination import PageEnvelope
from cdt_express.tools.endpoint_tool import EndpointTool, split_controls
from cdt_express.tools.endpoints import ENDPOINTS
from structlog.testing import capture_logs

ASSET_ID = "3fa85f64-5717-4562-b3fc-2c963f66afa6"
DEFINITIONS = {definition.name: definition for definition in ENDPOINTS}


def _tool(name, fetcher, max_pages=None) -> EndpointTool:
    return EndpointTool(DEFINITIONS[name], fetcher, max_pages=max_pages)


class TestValidation:
    @pytest.mark.asyncio
    async def test_invalid_input_never_reaches_network(self, scripted_fetcher):
        fetcher = scripted_fetcher()
        tool = _tool("get_climate_metrics_exposure", fetcher)

        response = await tool.run(latitude=500, foo=1, pathway=["ssp245"])

        assert response.is_error
        assert response.text == (
            "Validation Failed: foo: Unrecognized field; "
            "latitude: Number must be less than or equal to 90; longitude: Required"
        )
        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_control_issues_merged_with_field_issues(self, scripted_fetcher):
        fetcher = scripted_fetcher()
        tool = _tool("list_assets", fetcher)

        response = await tool.run(response_format="xml", fetch_all="yes", limit=0)

        assert response.is_error
        assert response.text == (
            "Validation Failed: "
            "response_format: Invalid enum value. Expected 'json' | 'csv', received 'xml'; "
            "fetch_all: Expected boolean, received string; "
            "limit: Number must be greater than or equal to 1"
        )
        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_control_issue_alone_still_fails(self, scripted_fetcher):
        fetcher = scripted_fetcher()

        response = await _tool("list_assets", fetcher).run(response_format="xml")

        assert response.is_error
        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_fetch_all_unknown_on_single_resource(self, scripted_fetcher):
        fetcher = scripted_fetcher()

        response = await _tool("get_asset", fetcher).run(asset_id=ASSET_ID, fetch_all=True)

        assert response.is_error
        assert response.text == "Validation Failed: fetch_all: Unrecognized field"


class TestDispatch:
    @pytest.mark.asyncio
    async def test_path_placeholder_filled(self, scripted_fetcher):
        fetcher = scripted_fetcher({"id": ASSET_ID, "name": "Plant"})

        response = await _tool("get_asset", fetcher).run(asset_id=ASSET_ID)

        assert not response.is_error
        assert fetcher.calls == [(f"/v3/assets/{ASSET_ID}", "")]
        assert json.loads(response.text) == {"id": ASSET_ID, "name": "Plant"}

    @pytest.mark.asyncio
    async def test_defaults_sent_as_query(self, scripted_fetcher):
        fetcher = scripted_fetcher({"scores": []})

        await _tool("get_asset_climate_scores", fetcher).run(asset_id=ASSET_ID, horizon="2050")

        path, query = fetcher.calls[0]
        assert path == f"/v3/assets/{ASSET_ID}/climate/scores"
        assert parse_qs(query) == {"risk": ["physical"], "horizon": ["2050"], "metric": ["dcr_score"]}

    @pytest.mark.asyncio
    async def test_arrays_sent_comma_joined(self, scripted_fetcher):
        fetcher = scripted_fetcher({"results": []})

        await _tool("get_climate_metrics_exposure", fetcher).run(
            latitude=43.7, longitude=-79.4, pathway=["ssp245", "ssp585"], percentiles=[50, 95]
        )

        query = parse_qs(fetcher.calls[0][1])
        assert query["pathway"] == ["ssp245,ssp585"]
        assert query["percentiles"] == ["50,95"]

    @pytest.mark.asyncio
    async def test_single_page_json_keeps_pagination_block(self, scripted_fetcher, two_page_script):
        fetcher = scripted_fetcher(two_page_script[0])

        response = await _tool("list_assets", fetcher).run(limit=2)

        assert json.loads(response.text) == two_page_script[0]
        assert len(fetcher.calls) == 1

    @pytest.mark.asyncio
    async def test_csv_renders_records(self, scripted_fetcher, two_page_script):
        fetcher = scripted_fetcher(two_page_script[0])

        response = await _tool("list_assets", fetcher).run(response_format="csv")

        assert response.text == "id\n1\n2"

    @pytest.mark.asyncio
    async def test_fetch_all_aggregates_pages(self, scripted_fetcher, two_page_script):
        fetcher = scripted_fetcher(*two_page_script)

        response = await _tool("list_assets", fetcher).run(fetch_all=True, limit=2)

        assert json.loads(response.text) == [{"id": 1}, {"id": 2}, {"id": 3}]
        assert parse_qs(fetcher.calls[1][1])["cursor"] == ["c1"]

    @pytest.mark.asyncio
    async def test_fetch_all_false_fetches_once(self, scripted_fetcher, two_page_script):
        fetcher = scripted_fetcher(*two_page_script)

        await _tool("list_assets", fetcher).run(fetch_all=False)

        assert len(fetcher.calls) == 1


class TestFailures:
    @pytest.mark.asyncio
    async def test_http_error_mid_walk_returns_no_partial_data(self, scripted_fetcher, two_page_script):
        fetcher = scripted_fetcher(two_page_script[0], HttpError(500, "Internal Server Error"))

        response = await _tool("list_assets", fetcher).run(fetch_all=True)

        assert response.is_error
        assert response.text == "API Error 500: Internal Server Error"
        assert '"id"' not in response.text

    @pytest.mark.asyncio
    async def test_network_error(self, scripted_fetcher):
        fetcher = scripted_fetcher(NetworkError("connection refused"))

        response = await _tool("get_asset", fetcher).run(asset_id=ASSET_ID)

        assert response.is_error
        assert response.text == "Network Error: connection refused"

    @pytest.mark.asyncio
    async def test_page_cap_reported_as_error(self, scripted_fetcher):
        endless = {"results": [1], "pagination": {"cursor": "next", "last_page": False}}
        fetcher = scripted_fetcher(endless)

        response = await _tool("list_assets", fetcher, max_pages=1).run(fetch_all=True)

        assert response.is_error
        assert response.text.startswith("Pagination Error: stopped after 1 page(s)")

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_enveloped(self):
        class BrokenFetcher:
            async def fetch_page(self, path, query):
                raise RuntimeError("boom")

        with capture_logs() as logs:
            response = await _tool("get_asset", BrokenFetcher()).run(asset_id=ASSET_ID)

        assert response.is_error
        assert response.text == "RuntimeError: boom"
        error = next(entry for entry in logs if entry["event"] == "tool_execution_error")
        assert error["log_level"] == "error"
        assert error["error_type"] == "RuntimeError"


class TestTraceContext:
    @pytest.mark.asyncio
    async def test_trace_id_bound_during_fetch_and_cleared_after(self):
        seen = {}

        class RecordingFetcher:
            async def fetch_page(self, path, query):
                seen.update(structlog.contextvars.get_contextvars())
                return PageEnvelope.from_body({"ok": True})

        await _tool("get_asset", RecordingFetcher()).run(asset_id=ASSET_ID)

        assert seen["tool"] == "get_asset"
        assert seen["trace_id"]
        assert "trace_id" not in structlog.contextvars.get_contextvars()

    @pytest.mark.asyncio
    async def test_existing_trace_id_reused(self):
        seen = {}

        class RecordingFetcher:
            async def fetch_page(self, path, query):
                seen.update(structlog.contextvars.get_contextvars())
                return PageEnvelope.from_body({"ok": True})

        structlog.contextvars.bind_contextvars(trace_id="upstream-trace")
        await _tool("get_asset", RecordingFetcher()).run(asset_id=ASSET_ID)

        assert seen["trace_id"] == "upstream-trace"


class TestMetadata:
    def test_paginated_endpoint_advertises_both_controls(self, scripted_fetcher):
        parameters = _tool("list_assets", scripted_fetcher()).metadata.parameters

        assert parameters["properties"]["response_format"]["enum"] == ["json", "csv"]
        assert parameters["properties"]["fetch_all"]["type"] == "boolean"
        assert parameters["additionalProperties"] is False

    def test_single_resource_endpoint_has_no_fetch_all(self, scripted_fetcher):
        parameters = _tool("get_asset", scripted_fetcher()).metadata.parameters

        assert "fetch_all" not in parameters["properties"]
        assert parameters["required"] == ["asset_id"]

    def test_schema_json_not_mutated_by_controls(self, scripted_fetcher):
        _tool("list_assets", scripted_fetcher())

        assert "response_format" not in DEFINITIONS["list_assets"].schema.json_schema()["properties"]


def test_split_controls_leaves_other_arguments():
    remaining, controls, issues = split_controls({"limit": 5, "response_format": "csv"}, paginated=True)

    assert remaining == {"limit": 5}
    assert controls.response_format == "csv"
    assert controls.fetch_all is False
    assert issues == []
