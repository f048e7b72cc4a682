"""
Direct function-calling SDK.

Usage:
    tools = create_financial_data_tools(api_key)
    result = await tools["getIncomeStatements"].execute(ticker="AAPL", period="annual")
    if isinstance(result, dict) and "error" in result:
        ...

    # Or hand them to a LangChain / LangGraph agent
    lc_tools = tools.as_langchain_tools()
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Mapping

from langchain_core.tools import StructuredTool
from pydantic import BaseModel

from .catalog import load_default_registry
from .client import DEFAULT_BASE_URL, FinancialDatasetsClient, HttpClientConfig
from .executor import invoke, prepare
from .models import InvocationRequest, PreparedRequest
from .registry import ToolEntry, ToolRegistry

logger = logging.getLogger(__name__)


class FinancialTool:
    """
    One callable tool: a parameter schema plus an async execute().

    execute() raises ToolValidationError for bad arguments and returns
    either the API response body or a normalized error dict.
    """

    def __init__(self, entry: ToolEntry, client: FinancialDatasetsClient):
        self.entry = entry
        self.client = client

    @property
    def name(self) -> str:
        return self.entry.name

    @property
    def description(self) -> str:
        return self.entry.description

    @property
    def parameters(self) -> type[BaseModel]:
        return self.entry.args_model

    @property
    def input_schema(self) -> dict:
        return self.entry.input_schema

    async def execute(self, arguments: dict[str, Any] | None = None, **kwargs: Any) -> Any:
        return await invoke(self.entry, self.client, {**(arguments or {}), **kwargs})

    def prepare(self, arguments: dict[str, Any] | None = None, **kwargs: Any) -> PreparedRequest:
        """Validate and build the request without sending it."""
        return prepare(self.entry, {**(arguments or {}), **kwargs})

    def as_langchain_tool(self) -> StructuredTool:
        async def _run(**kwargs: Any) -> Any:
            return await self.execute(kwargs)

        return StructuredTool.from_function(
            coroutine=_run,
            name=self.name,
            description=self.description,
            args_schema=self.parameters,
        )

    def __repr__(self) -> str:
        return f"FinancialTool({self.name!r})"


class FinancialDataToolkit(Mapping[str, FinancialTool]):
    """The named set of tools sharing one HTTP client."""

    def __init__(self, client: FinancialDatasetsClient, registry: ToolRegistry | None = None):
        self.client = client
        self.registry = registry if registry is not None else load_default_registry()
        self._tools = {name: FinancialTool(entry, client) for name, entry in self.registry.items()}

    def __getitem__(self, name: str) -> FinancialTool:
        return self._tools[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def __getattr__(self, name: str) -> FinancialTool:
        tools = self.__dict__.get("_tools", {})
        if name in tools:
            return tools[name]
        raise AttributeError(name)

    async def execute(self, name: str, arguments: dict[str, Any] | None = None) -> Any:
        """Invoke a tool by name. Raises UnknownToolError for unregistered names."""
        return await self.run(InvocationRequest(tool_name=name, arguments=arguments or {}))

    async def run(self, request: InvocationRequest) -> Any:
        entry = self.registry.require(request.tool_name)
        return await self._tools[entry.name].execute(request.arguments)

    def as_langchain_tools(self) -> list[StructuredTool]:
        return [tool.as_langchain_tool() for tool in self._tools.values()]

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> FinancialDataToolkit:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def create_financial_data_tools(
    api_key: str,
    base_url: str | None = None,
    registry: ToolRegistry | None = None,
    transport: Any = None,
) -> FinancialDataToolkit:
    """
    Create the Financial Datasets tools.

    Args:
        api_key: Your Financial Datasets API key (required, non-empty).
        base_url: API base URL (defaults to the production URL).
        registry: Custom tool catalog (defaults to the bundled one).
        transport: httpx transport override, mainly for tests.

    Returns:
        A FinancialDataToolkit mapping tool names to FinancialTool objects.
    """
    config = HttpClientConfig(api_key=api_key, base_url=base_url or DEFAULT_BASE_URL)
    client = FinancialDatasetsClient(config, transport=transport)
    toolkit = FinancialDataToolkit(client, registry)
    logger.info(f"Created {len(toolkit)} financial data tools for {config.base_url}")
    return toolkit
