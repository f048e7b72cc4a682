"""
Financial Datasets MCP server.

Exposes the shared tool registry over the Model Context Protocol (stdio).

Run as:
    FINANCIAL_DATASETS_API_KEY=... python -m findatasets.mcp.server
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from ..catalog import load_default_registry
from ..client import FinancialDatasetsClient
from ..config import API_KEY_ENV, Settings
from ..errors import ToolValidationError, normalize_error
from ..executor import execute
from ..registry import ToolRegistry

logger = logging.getLogger(__name__)

SERVER_NAME = "financial-datasets"
SERVER_VERSION = "1.0.0"


def _error(code: int, message: str) -> McpError:
    return McpError(types.ErrorData(code=code, message=message))


def list_mcp_tools(registry: ToolRegistry) -> list[types.Tool]:
    """One MCP tool descriptor per registry entry."""
    return [
        types.Tool(name=entry.name, description=entry.description, inputSchema=entry.input_schema)
        for entry in registry.values()
    ]


class FinancialDatasetsMCP:
    """
    Tool handlers behind the MCP server.

    call_tool() checks, in order: API key present, tool known, arguments
    valid. Only then is the HTTP call made. Every failure is raised as an
    McpError; success is the JSON body as text content. Arguments are
    checked by the tool's own model, never by the transport, so the key
    check always comes first.
    """

    def __init__(
        self,
        settings: Settings,
        registry: ToolRegistry | None = None,
        client: FinancialDatasetsClient | None = None,
    ):
        self.settings = settings
        self.registry = registry if registry is not None else load_default_registry()
        self._client = client

    @property
    def client(self) -> FinancialDatasetsClient:
        if self._client is None:
            self._client = FinancialDatasetsClient(self.settings.client_config())
        return self._client

    async def list_tools(self) -> list[types.Tool]:
        return list_mcp_tools(self.registry)

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        if not self.settings.has_api_key:
            raise _error(types.INVALID_REQUEST, f"{API_KEY_ENV} environment variable is not set")

        entry = self.registry.get(name)
        if entry is None:
            raise _error(types.METHOD_NOT_FOUND, f"Tool '{name}' not found")

        try:
            data = await execute(entry, self.client, arguments)
        except ToolValidationError as e:
            raise _error(types.INVALID_PARAMS, str(e)) from e
        except Exception as e:
            info = normalize_error(e)
            raise _error(types.INTERNAL_ERROR, f"Financial API error: {info['message']}") from e

        return [types.TextContent(type="text", text=json.dumps(data, indent=2))]

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()


def create_server(handler: FinancialDatasetsMCP) -> Server:
    """
    Wire the handler into an MCP server.

    tools/call is a raw request handler, not @app.call_tool(), so a raised
    McpError reaches the client as a JSON-RPC error with its code.
    """
    app = Server(SERVER_NAME, version=SERVER_VERSION)

    @app.list_tools()
    async def _list_tools() -> list[types.Tool]:
        return await handler.list_tools()

    async def _call_tool(request: types.CallToolRequest) -> types.ServerResult:
        content = await handler.call_tool(request.params.name, request.params.arguments)
        return types.ServerResult(types.CallToolResult(content=content, isError=False))

    app.request_handlers[types.CallToolRequest] = _call_tool
    return app


async def serve(settings: Settings) -> None:
    handler = FinancialDatasetsMCP(settings)
    app = create_server(handler)
    if not settings.has_api_key:
        logger.warning(f"{API_KEY_ENV} is not set; every tool call will be rejected")

    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info(f"Financial Datasets MCP server running on stdio ({handler.registry.count} tools)")
            await app.run(read_stream, write_stream, app.create_initialization_options())
    finally:
        await handler.aclose()


def main():
    settings = Settings.from_env()
    # stdout carries the protocol; logs go to stderr
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    asyncio.run(serve(settings))


if __name__ == "__main__":
    main()
