#!/usr/bin/env python3
"""
Run Tool: call a Financial Datasets tool from the command line.

Usage:
    # List available tools
    python scripts/run_tool.py --list

    # Show a tool's parameters
    python scripts/run_tool.py --describe getPrices

    # Build the request only (no network, no API key needed)
    python scripts/run_tool.py --tool getIncomeStatements --args '{"ticker": "AAPL", "period": "annual"}' --dry-run

    # Live call (requires FINANCIAL_DATASETS_API_KEY)
    python scripts/run_tool.py --tool getPriceSnapshot --args '{"ticker": "AAPL"}'
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Ensure src/ is on path for development
PROJECT_ROOT = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from findatasets import (
    InvocationRequest,
    Settings,
    ToolRegistry,
    ToolValidationError,
    UnknownToolError,
    create_financial_data_tools,
    load_default_registry,
)
from findatasets.config import API_KEY_ENV

logger = logging.getLogger(__name__)


def run_dry(registry: ToolRegistry, request: InvocationRequest) -> int:
    from findatasets.executor import prepare

    entry = registry.require(request.tool_name)
    prepared = prepare(entry, request.arguments)
    print(json.dumps(prepared.to_dict(), indent=2))
    return 0


async def run_live(settings: Settings, registry: ToolRegistry, request: InvocationRequest) -> int:
    async with create_financial_data_tools(settings.api_key, settings.base_url, registry=registry) as tools:
        result = await tools.run(request)

    print(json.dumps(result, indent=2))
    if isinstance(result, dict) and "error" in result:
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Call a Financial Datasets tool.",
    )
    parser.add_argument("--list", action="store_true", help="List available tools")
    parser.add_argument("--describe", "-d", type=str, help="Show a tool's parameters")
    parser.add_argument("--tool", "-t", type=str, help="Tool name to call")
    parser.add_argument("--args", "-a", type=str, default="{}", help="Tool arguments as a JSON object")
    parser.add_argument("--catalog", type=str, default=None, help="Custom YAML tool catalog")
    parser.add_argument("--settings", type=str, default=None, help="YAML settings file")
    parser.add_argument("--dry-run", action="store_true", help="Print the request instead of sending it")
    parser.add_argument("--verbose", "-v", action="store_true")

    args = parser.parse_args(argv)

    settings = Settings.from_yaml(args.settings) if args.settings else Settings.from_env()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    registry = ToolRegistry.from_yaml(args.catalog) if args.catalog else load_default_registry()

    if args.list:
        print(f"\nAvailable tools ({registry.count}):\n")
        for entry in registry.values():
            definition = entry.definition
            print(f"  {entry.name:<30} {definition.method.value:<5} {definition.path}")
        print()
        return 0

    if args.describe:
        try:
            print(registry.describe(args.describe))
        except UnknownToolError as e:
            print(f"Error: {e}. Available: {e.available}", file=sys.stderr)
            return 2
        return 0

    if not args.tool:
        parser.error("Use --list, --describe <tool>, or --tool <tool> --args <json>")

    try:
        arguments = json.loads(args.args)
    except json.JSONDecodeError as e:
        parser.error(f"--args is not valid JSON: {e}")

    request = InvocationRequest(tool_name=args.tool, arguments=arguments)

    try:
        if args.dry_run:
            return run_dry(registry, request)

        if not settings.has_api_key:
            print(f"{API_KEY_ENV} not set. Use --dry-run to see the request.", file=sys.stderr)
            return 2
        return asyncio.run(run_live(settings, registry, request))
    except (UnknownToolError, ToolValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
