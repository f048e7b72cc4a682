"""
Request builder and executor.

One engine for every tool: validated parameters are placed into the
query string, JSON body or path of a single HTTP call, and the response
body is returned untouched.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from .client import FinancialDatasetsClient
from .errors import normalize_error
from .models import HttpMethod, Placement, PreparedRequest, ToolDefinition
from .params import is_absent
from .registry import ToolEntry

logger = logging.getLogger(__name__)


def build_request(definition: ToolDefinition, params: dict[str, Any]) -> PreparedRequest:
    """
    Place validated parameters into a PreparedRequest.

    Parameters absent from `params` (or None) are never sent, and neither
    are optional parameters given as an empty string.
    """
    path = definition.path
    query: dict[str, Any] = {}
    body: dict[str, Any] | None = {} if definition.method == HttpMethod.POST else None

    for spec in definition.params:
        value = params.get(spec.name)
        if value is None or (not spec.required and is_absent(value)):
            continue
        placement = definition.placement_of(spec)
        if placement == Placement.PATH:
            path = path.replace(f"{{{spec.name}}}", quote(str(value), safe=""))
        elif placement == Placement.BODY:
            if body is None:
                body = {}
            body[spec.name] = value
        else:
            query[spec.name] = value

    return PreparedRequest(method=definition.method, path=path, query=query, body=body)


def prepare(entry: ToolEntry, arguments: dict[str, Any] | None) -> PreparedRequest:
    """Validate arguments and build the request. Raises ToolValidationError."""
    return build_request(entry.definition, entry.validate(arguments))


async def execute(
    entry: ToolEntry,
    client: FinancialDatasetsClient,
    arguments: dict[str, Any] | None,
) -> Any:
    """
    Run one tool call and return the response body verbatim.

    Validation errors and HTTP failures propagate as exceptions.
    """
    request = prepare(entry, arguments)
    logger.info(f"{entry.name}: {request.method.value} {request.path}")
    return await client.send(request)


async def invoke(
    entry: ToolEntry,
    client: FinancialDatasetsClient,
    arguments: dict[str, Any] | None,
) -> Any:
    """
    Like execute(), but HTTP failures come back as a normalized error dict.

    Validation still raises: a bad argument never reaches the network.
    """
    request = prepare(entry, arguments)
    logger.info(f"{entry.name}: {request.method.value} {request.path}")
    try:
        return await client.send(request)
    except Exception as e:
        return normalize_error(e)
