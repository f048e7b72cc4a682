"""
Financial Datasets tools: the Financial Datasets API as LLM-callable tools.

Usage:
    from findatasets import create_financial_data_tools

    tools = create_financial_data_tools(api_key)
    data = await tools["getPriceSnapshot"].execute(ticker="AAPL")

    # Or serve the same tools over MCP (stdio)
    #   FINANCIAL_DATASETS_API_KEY=... findatasets-mcp
"""

from .models import (
    HttpMethod,
    InvocationRequest,
    ParamSpec,
    ParamType,
    Placement,
    PreparedRequest,
    ToolDefinition,
)
from .errors import (
    ConfigurationError,
    ErrorKind,
    FinancialDatasetsError,
    ToolDefinitionError,
    ToolValidationError,
    UnknownToolError,
    normalize_error,
)
from .registry import ToolEntry, ToolRegistry
from .catalog import load_default_registry
from .client import DEFAULT_BASE_URL, FinancialDatasetsClient, HttpClientConfig
from .config import Settings
from .executor import build_request, execute, invoke
from .toolkit import FinancialDataToolkit, FinancialTool, create_financial_data_tools

__version__ = "0.1.0"

__all__ = [
    # Core
    "create_financial_data_tools",
    "FinancialDataToolkit",
    "FinancialTool",
    "ToolRegistry",
    "ToolEntry",
    "load_default_registry",
    # HTTP
    "FinancialDatasetsClient",
    "HttpClientConfig",
    "DEFAULT_BASE_URL",
    "build_request",
    "execute",
    "invoke",
    # Config
    "Settings",
    # Models
    "InvocationRequest",
    "ParamSpec",
    "PreparedRequest",
    "ToolDefinition",
    # Enums
    "HttpMethod",
    "ParamType",
    "Placement",
    "ErrorKind",
    # Errors
    "FinancialDatasetsError",
    "ConfigurationError",
    "ToolDefinitionError",
    "ToolValidationError",
    "UnknownToolError",
    "normalize_error",
]
