"""
Data models for Financial Datasets tools.

Enums, dataclasses, and type definitions used across the system.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import ToolDefinitionError


# ── Enums ────────────────────────────────────────────────────

class ParamType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    ENUM = "enum"
    ARRAY = "array"
    FILTER = "filter"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"


class Placement(str, Enum):
    """Where a parameter travels in the outgoing request."""
    QUERY = "query"
    BODY = "body"
    PATH = "path"


FILTER_OPERATORS = ("gt", "lt", "gte", "lte", "eq", "in")

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


# ── Core data models ─────────────────────────────────────────

@dataclass(frozen=True)
class ParamSpec:
    """Shape and constraints of a single tool parameter."""
    name: str
    type: ParamType
    description: str = ""
    required: bool = True
    values: tuple[str, ...] = ()
    items: ParamSpec | None = None

    # None = decided by the tool's HTTP method
    placement: Placement | None = None

    def __post_init__(self):
        if self.type == ParamType.ENUM and not self.values:
            raise ToolDefinitionError(f"Enum parameter '{self.name}' declares no values")
        if self.type == ParamType.ARRAY and self.items is None:
            raise ToolDefinitionError(f"Array parameter '{self.name}' declares no items")

    @classmethod
    def from_dict(cls, name: str, data: dict) -> ParamSpec:
        """Create a ParamSpec from a catalog entry."""
        if "type" not in data:
            raise ToolDefinitionError(f"Parameter '{name}' requires a 'type' field")

        items = data.get("items")
        if isinstance(items, str):
            items = {"type": items}

        placement = data.get("in")
        return cls(
            name=name,
            type=ParamType(data["type"]),
            description=data.get("description", ""),
            required=data.get("required", True),
            values=tuple(data.get("values", ())),
            items=cls.from_dict(f"{name}[]", items) if items else None,
            placement=Placement(placement) if placement else None,
        )


@dataclass(frozen=True)
class ToolDefinition:
    """
    One row of the tool table: a parameter schema bound to one HTTP call.

    The constructor enforces that the path template, the parameter list
    and require_one_of agree with each other.
    """
    name: str
    description: str
    method: HttpMethod
    path: str
    params: tuple[ParamSpec, ...] = ()
    require_one_of: tuple[str, ...] = ()

    def __post_init__(self):
        names = [p.name for p in self.params]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ToolDefinitionError(f"{self.name}: duplicate parameters {duplicates}")

        placeholders = set(_PLACEHOLDER.findall(self.path))
        path_params = {p.name for p in self.params if self.placement_of(p) == Placement.PATH}
        if placeholders != path_params:
            raise ToolDefinitionError(
                f"{self.name}: path placeholders {sorted(placeholders)} "
                f"do not match path parameters {sorted(path_params)}"
            )
        for p in self.params:
            if p.name in path_params and not p.required:
                raise ToolDefinitionError(f"{self.name}: path parameter '{p.name}' must be required")

        unknown = [n for n in self.require_one_of if n not in names]
        if unknown:
            raise ToolDefinitionError(f"{self.name}: require_one_of names unknown parameters {unknown}")

    def placement_of(self, param: ParamSpec) -> Placement:
        if param.placement is not None:
            return param.placement
        return Placement.BODY if self.method == HttpMethod.POST else Placement.QUERY

    def get_param(self, name: str) -> ParamSpec | None:
        return next((p for p in self.params if p.name == name), None)

    @property
    def required_params(self) -> list[str]:
        return [p.name for p in self.params if p.required]

    @property
    def optional_params(self) -> list[str]:
        return [p.name for p in self.params if not p.required]


@dataclass
class InvocationRequest:
    """A tool name plus the caller's arguments. One per call."""
    tool_name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass
class PreparedRequest:
    """The HTTP request built from a validated parameter set."""
    method: HttpMethod
    path: str
    query: dict[str, Any] = field(default_factory=dict)
    body: dict[str, Any] | None = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"method": self.method.value, "path": self.path}
        if self.query:
            data["query"] = self.query
        if self.body is not None:
            data["body"] = self.body
        return data
