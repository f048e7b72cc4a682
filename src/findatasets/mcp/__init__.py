"""
MCP front end.

Provides:
- FinancialDatasetsMCP: tool handlers (list / call) over the shared registry
- create_server: wires the handlers into an mcp.server.lowlevel.Server
- main: stdio entry point
"""

from .server import FinancialDatasetsMCP, create_server, list_mcp_tools, main

__all__ = [
    "FinancialDatasetsMCP",
    "create_server",
    "list_mcp_tools",
    "main",
]
