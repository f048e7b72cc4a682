"""
Tests for the MCP front end handlers.

The handlers are exercised directly, then through an in-memory client
session so error codes are checked as a client receives them.
"""

import asyncio
import json

import httpx
import pytest
from mcp import types
from mcp.server.lowlevel import Server
from mcp.shared.exceptions import McpError
from mcp.shared.memory import create_connected_server_and_client_session

from findatasets import FinancialDatasetsClient, HttpClientConfig, Settings
from findatasets.mcp import FinancialDatasetsMCP, create_server, list_mcp_tools

from conftest import RecordingHandler


def run(coro):
    return asyncio.run(coro)


def _make_handler(handler=None, api_key="test-key") -> FinancialDatasetsMCP:
    client = None
    if handler is not None:
        client = FinancialDatasetsClient(
            HttpClientConfig(api_key="test-key"),
            transport=httpx.MockTransport(handler),
        )
    return FinancialDatasetsMCP(Settings(api_key=api_key), client=client)


class TestListTools:
    def test_names_match_registry(self, registry):
        tools = run(_make_handler().list_tools())
        names = [t.name for t in tools]
        assert len(names) == len(set(names))
        assert set(names) == set(registry.list_all())

    def test_descriptor_shape(self, registry):
        tools = {t.name: t for t in list_mcp_tools(registry)}
        tool = tools["getIncomeStatements"]
        assert isinstance(tool, types.Tool)
        assert tool.description == "Get income statements for a company ticker"
        assert tool.inputSchema["required"] == ["ticker", "period"]
        assert tool.inputSchema == registry["getIncomeStatements"].input_schema

    def test_listing_needs_no_api_key(self, registry):
        tools = run(_make_handler(api_key=None).list_tools())
        assert len(tools) == registry.count


class TestCallTool:
    def test_success_returns_json_text(self):
        body = {"snapshot": {"ticker": "AAPL", "price": 189.5}}
        handler = RecordingHandler(body=body)
        content = run(_make_handler(handler).call_tool("getPriceSnapshot", {"ticker": "AAPL"}))

        assert len(content) == 1
        assert content[0].type == "text"
        assert json.loads(content[0].text) == body
        assert content[0].text == json.dumps(body, indent=2)
        assert handler.last.url.path == "/prices/snapshot"

    @pytest.mark.parametrize("name", ["getPriceSnapshot", "getWeather"])
    def test_missing_api_key(self, name):
        handler = RecordingHandler()
        mcp_handler = _make_handler(handler, api_key=None)
        with pytest.raises(McpError) as exc:
            run(mcp_handler.call_tool(name, {"ticker": "AAPL"}))
        assert exc.value.error.code == types.INVALID_REQUEST
        assert "FINANCIAL_DATASETS_API_KEY" in exc.value.error.message
        assert handler.requests == []

    def test_missing_api_key_from_env(self, monkeypatch):
        monkeypatch.delenv("FINANCIAL_DATASETS_API_KEY", raising=False)
        mcp_handler = FinancialDatasetsMCP(Settings.from_env())
        with pytest.raises(McpError) as exc:
            run(mcp_handler.call_tool("getCompanyFacts", {"ticker": "AAPL"}))
        assert exc.value.error.code == types.INVALID_REQUEST

    def test_unknown_tool(self):
        handler = RecordingHandler()
        with pytest.raises(McpError) as exc:
            run(_make_handler(handler).call_tool("getWeather", {"city": "Paris"}))
        assert exc.value.error.code == types.METHOD_NOT_FOUND
        assert exc.value.error.message == "Tool 'getWeather' not found"
        assert handler.requests == []

    def test_invalid_arguments(self):
        handler = RecordingHandler()
        with pytest.raises(McpError) as exc:
            run(_make_handler(handler).call_tool("getIncomeStatements", {"ticker": "AAPL", "period": "weekly"}))
        assert exc.value.error.code == types.INVALID_PARAMS
        assert handler.requests == []

    def test_none_arguments(self):
        handler = RecordingHandler()
        with pytest.raises(McpError) as exc:
            run(_make_handler(handler).call_tool("getPriceSnapshot", None))
        assert exc.value.error.code == types.INVALID_PARAMS

    def test_server_error_raised(self):
        handler = RecordingHandler(status=404, body={"error": "Not Found", "message": "Ticker not found"})
        with pytest.raises(McpError) as exc:
            run(_make_handler(handler).call_tool("getCompanyFacts", {"ticker": "ZZZZ"}))
        assert exc.value.error.code == types.INTERNAL_ERROR
        assert exc.value.error.message == "Financial API error: Ticker not found"

    def test_no_response_raised(self):
        handler = RecordingHandler(exc=httpx.ReadTimeout)
        with pytest.raises(McpError) as exc:
            run(_make_handler(handler).call_tool("getCompanyFacts", {"ticker": "AAPL"}))
        assert exc.value.error.code == types.INTERNAL_ERROR
        assert exc.value.error.message == (
            "Financial API error: The API request timed out or received no response"
        )

    def test_post_tool(self):
        handler = RecordingHandler(body={"search_results": []})
        args = {"line_items": ["revenue"], "tickers": ["AAPL"], "period": "annual"}
        content = run(_make_handler(handler).call_tool("searchLineItems", args))
        assert json.loads(content[0].text) == {"search_results": []}
        assert json.loads(handler.last.content) == args

    def test_client_built_from_settings(self):
        mcp_handler = FinancialDatasetsMCP(Settings(api_key="abc", base_url="http://localhost:9000"))
        client = mcp_handler.client
        assert client is mcp_handler.client
        assert client.config.api_key == "abc"
        assert client.config.base_url == "http://localhost:9000"
        run(mcp_handler.aclose())


class TestCreateServer:
    def test_server_registers_handlers(self):
        app = create_server(_make_handler())
        assert isinstance(app, Server)
        assert app.name == "financial-datasets"
        assert types.ListToolsRequest in app.request_handlers
        assert types.CallToolRequest in app.request_handlers


# ── Over a client session ────────────────────────────────────

def _session_call(mcp_handler, name, arguments):
    """Call a tool through a connected in-memory client; return the result or the McpError."""
    async def _call():
        app = create_server(mcp_handler)
        async with create_connected_server_and_client_session(app) as session:
            try:
                return await session.call_tool(name, arguments)
            except McpError as e:
                return e
    return run(_call())


class TestClientSession:
    def test_list_tools(self, registry):
        async def _list():
            async with create_connected_server_and_client_session(create_server(_make_handler())) as session:
                return await session.list_tools()
        result = run(_list())
        assert {t.name for t in result.tools} == set(registry.list_all())

    def test_success(self):
        body = {"company_facts": {"ticker": "AAPL"}}
        handler = RecordingHandler(body=body)
        result = _session_call(_make_handler(handler), "getCompanyFacts", {"ticker": "AAPL"})
        assert not isinstance(result, McpError)
        assert not result.isError
        assert json.loads(result.content[0].text) == body

    def test_unknown_tool_is_method_not_found(self):
        handler = RecordingHandler()
        result = _session_call(_make_handler(handler), "getWeather", {"city": "Paris"})
        assert isinstance(result, McpError)
        assert result.error.code == types.METHOD_NOT_FOUND
        assert result.error.message == "Tool 'getWeather' not found"
        assert handler.requests == []

    @pytest.mark.parametrize("name,arguments", [
        ("getIncomeStatements", {"ticker": "AAPL", "period": "weekly"}),
        ("getIncomeStatements", {"ticker": "AAPL", "period": "annual"}),
        ("getWeather", {"city": "Paris"}),
    ])
    def test_missing_key_is_invalid_request(self, name, arguments):
        handler = RecordingHandler()
        result = _session_call(_make_handler(handler, api_key=None), name, arguments)
        assert isinstance(result, McpError)
        assert result.error.code == types.INVALID_REQUEST
        assert "FINANCIAL_DATASETS_API_KEY" in result.error.message
        assert handler.requests == []

    def test_invalid_arguments_are_invalid_params(self):
        handler = RecordingHandler()
        result = _session_call(
            _make_handler(handler), "getIncomeStatements", {"ticker": "AAPL", "period": "weekly"}
        )
        assert isinstance(result, McpError)
        assert result.error.code == types.INVALID_PARAMS
        assert handler.requests == []

    def test_api_error_is_internal_error(self):
        handler = RecordingHandler(status=404, body={"error": "Not Found", "message": "Ticker not found"})
        result = _session_call(_make_handler(handler), "getCompanyFacts", {"ticker": "ZZZZ"})
        assert isinstance(result, McpError)
        assert result.error.code == types.INTERNAL_ERROR
        assert result.error.message == "Financial API error: Ticker not found"
