"""
Tool Registry.

Maps tool names to their definitions, generated argument models and
MCP input schemas. Built once from the declarative catalog and shared,
read-only, by the SDK and the MCP server.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping

import yaml
from pydantic import BaseModel

from .errors import ToolDefinitionError, UnknownToolError
from .models import HttpMethod, ParamSpec, ToolDefinition
from .params import build_args_model, build_input_schema, validate_arguments

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolEntry:
    """A tool definition together with both of its generated schemas."""
    definition: ToolDefinition
    args_model: type[BaseModel]
    input_schema: dict

    @classmethod
    def from_definition(cls, definition: ToolDefinition) -> ToolEntry:
        return cls(
            definition=definition,
            args_model=build_args_model(definition),
            input_schema=build_input_schema(definition),
        )

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def description(self) -> str:
        return self.definition.description

    def validate(self, arguments: dict[str, Any] | None) -> dict[str, Any]:
        return validate_arguments(self.definition, self.args_model, arguments)


class ToolRegistry(Mapping[str, ToolEntry]):
    """
    Read-only catalog of tools keyed by name.

    Usage:
        registry = ToolRegistry.from_yaml("tools.yaml")
        entry = registry.require("getPrices")
        params = entry.validate({"ticker": "AAPL", ...})
    """

    def __init__(self, definitions: list[ToolDefinition] | tuple[ToolDefinition, ...] = ()):
        tools: dict[str, ToolEntry] = {}
        for definition in definitions:
            if definition.name in tools:
                raise ToolDefinitionError(f"Duplicate tool name: {definition.name}")
            tools[definition.name] = ToolEntry.from_definition(definition)
        self._tools = MappingProxyType(tools)

    # ── Loading ──────────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: dict) -> ToolRegistry:
        """
        Build a registry from a catalog mapping.

        Format:
            {
                "parameters": {"ticker": {"type": "string", ...}, ...},
                "tools": [
                    {"name": "getPriceSnapshot", "method": "GET",
                     "path": "/prices/snapshot", "params": ["ticker"]},
                    ...
                ],
            }
        """
        shared = data.get("parameters", {}) or {}
        definitions = [cls._entry_to_definition(entry, shared) for entry in data.get("tools", [])]
        return cls(definitions)

    @classmethod
    def from_yaml(cls, path: str | Path) -> ToolRegistry:
        """Load a registry from a YAML catalog file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Tool catalog not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ToolDefinitionError(f"Tool catalog must be a YAML mapping, got {type(data).__name__}")

        registry = cls.from_dict(data)
        logger.info(f"Loaded {registry.count} tools from {path}")
        return registry

    @staticmethod
    def _entry_to_definition(entry: dict, shared: dict[str, dict]) -> ToolDefinition:
        for key in ("name", "method", "path"):
            if key not in entry:
                raise ToolDefinitionError(f"Tool entry requires a '{key}' field: {entry}")

        params = []
        for item in entry.get("params", []):
            if isinstance(item, str):
                name, overrides = item, {}
            else:
                overrides = dict(item)
                name = overrides.pop("name")
            if name not in shared and "type" not in overrides:
                raise ToolDefinitionError(f"{entry['name']}: parameter '{name}' is not defined")
            params.append(ParamSpec.from_dict(name, {**shared.get(name, {}), **overrides}))

        return ToolDefinition(
            name=entry["name"],
            description=entry.get("description", ""),
            method=HttpMethod(entry["method"].upper()),
            path=entry["path"],
            params=tuple(params),
            require_one_of=tuple(entry.get("require_one_of", ())),
        )

    # ── Lookup ───────────────────────────────────────────────

    def __getitem__(self, name: str) -> ToolEntry:
        return self._tools[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def require(self, name: str) -> ToolEntry:
        entry = self._tools.get(name)
        if entry is None:
            raise UnknownToolError(name, self.list_all())
        return entry

    def list_all(self) -> list[str]:
        return list(self._tools.keys())

    @property
    def count(self) -> int:
        return len(self._tools)

    def search(self, query: str) -> list[ToolEntry]:
        """Tools whose name or description mentions every word of the query."""
        words = query.lower().split()
        return [
            t for t in self._tools.values()
            if all(w in f"{t.name} {t.description}".lower() for w in words)
        ]

    def describe(self, name: str) -> str:
        """Prompt-ready description of a tool and its parameters."""
        entry = self.require(name)
        definition = entry.definition
        lines = [f"## Tool: {definition.name}", definition.description, ""]
        if definition.params:
            lines.append("Parameters:")
            for p in definition.params:
                ptype = p.type.value
                if p.values:
                    ptype = " | ".join(p.values)
                elif p.items is not None:
                    ptype = f"array of {p.items.type.value}"
                flag = "" if p.required else ", optional"
                lines.append(f"  - {p.name} ({ptype}{flag}): {p.description}")
        if definition.require_one_of:
            lines.append(f"At least one of: {', '.join(definition.require_one_of)}")
        return "\n".join(lines)
