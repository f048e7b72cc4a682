"""
Parameter Schema Set.

A ParamSpec is the single source for both schema dialects a tool needs:
  - a pydantic model (argument validation, LangChain args_schema)
  - a JSON Schema object (MCP inputSchema)
"""

from __future__ import annotations

from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, create_model, model_validator

from .errors import ToolDefinitionError, ToolValidationError
from .models import FILTER_OPERATORS, ParamSpec, ParamType, ToolDefinition


class SearchFilter(BaseModel):
    """A field/operator/value triple forwarded as-is in a search body."""
    model_config = ConfigDict(extra="forbid")

    field: str = Field(description="The criteria to filter on")
    operator: Literal[FILTER_OPERATORS] = Field(description="The comparison operator")
    value: Union[int, float, List[str]] = Field(description="The value to compare against")


_FILTER_SCHEMA = {
    "type": "object",
    "properties": {
        "field": {"type": "string", "description": "The criteria to filter on"},
        "operator": {
            "type": "string",
            "enum": list(FILTER_OPERATORS),
            "description": "The comparison operator",
        },
        "value": {
            "anyOf": [
                {"type": "number"},
                {"type": "array", "items": {"type": "string"}},
            ],
            "description": "The value to compare against",
        },
    },
    "required": ["field", "operator", "value"],
}


# ── Python types ─────────────────────────────────────────────

def python_type(spec: ParamSpec) -> Any:
    """The annotation used for a parameter in the generated pydantic model."""
    if spec.type == ParamType.STRING:
        return str
    if spec.type == ParamType.NUMBER:
        return Union[int, float]
    if spec.type == ParamType.INTEGER:
        return int
    if spec.type == ParamType.ENUM:
        return Literal[spec.values]
    if spec.type == ParamType.FILTER:
        return SearchFilter
    if spec.type == ParamType.ARRAY:
        return List[python_type(spec.items)]
    raise ToolDefinitionError(f"Unsupported parameter type: {spec.type}")


def _model_name(tool_name: str) -> str:
    return tool_name[:1].upper() + tool_name[1:] + "Args"


def is_absent(value: Any) -> bool:
    """None and the empty string both mean "not supplied"; 0 is a value."""
    return value is None or (isinstance(value, str) and value == "")


def _require_one_of_validator(names: tuple[str, ...]):
    def check(self):
        if all(is_absent(getattr(self, n)) for n in names):
            raise ValueError(f"Either {' or '.join(names)} must be provided")
        return self
    return model_validator(mode="after")(check)


def build_args_model(definition: ToolDefinition) -> type[BaseModel]:
    """Generate the pydantic model that validates a tool's arguments."""
    fields: dict[str, Any] = {}
    for spec in definition.params:
        annotation = python_type(spec)
        if spec.required:
            fields[spec.name] = (annotation, Field(description=spec.description))
        else:
            fields[spec.name] = (Optional[annotation], Field(default=None, description=spec.description))

    validators = {}
    if definition.require_one_of:
        validators["require_one_of"] = _require_one_of_validator(definition.require_one_of)

    return create_model(
        _model_name(definition.name),
        __config__=ConfigDict(extra="forbid"),
        __doc__=definition.description,
        __validators__=validators or None,
        **fields,
    )


def validate_arguments(
    definition: ToolDefinition,
    model: type[BaseModel],
    arguments: dict[str, Any] | None,
) -> dict[str, Any]:
    """
    Validate caller arguments and return the parameters to send.

    Absent optionals (missing or None) are dropped from the result.
    Raises ToolValidationError on any violation.
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise ToolValidationError(definition.name, f"arguments must be an object, got {type(arguments).__name__}")

    try:
        parsed = model.model_validate(arguments)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False)
        raise ToolValidationError(definition.name, _summarize(errors), errors) from e

    return parsed.model_dump(exclude_none=True)


def _summarize(errors: list[dict]) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


# ── JSON Schema ──────────────────────────────────────────────

def param_json_schema(spec: ParamSpec) -> dict:
    if spec.type == ParamType.FILTER:
        schema = dict(_FILTER_SCHEMA)
    elif spec.type == ParamType.ENUM:
        schema = {"type": "string", "enum": list(spec.values)}
    elif spec.type == ParamType.ARRAY:
        schema = {"type": "array", "items": param_json_schema(spec.items)}
    else:
        schema = {"type": spec.type.value}

    if spec.description:
        schema["description"] = spec.description
    return schema


def build_input_schema(definition: ToolDefinition) -> dict:
    """Generate the MCP inputSchema for a tool."""
    schema: dict[str, Any] = {
        "type": "object",
        "properties": {p.name: param_json_schema(p) for p in definition.params},
        "required": definition.required_params,
        "additionalProperties": False,
    }
    if definition.require_one_of:
        schema["anyOf"] = [{"required": [name]} for name in definition.require_one_of]
    return schema
