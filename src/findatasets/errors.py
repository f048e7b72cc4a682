"""
Error taxonomy and the error normalizer.

Local failures (bad arguments, bad configuration, unknown tools) are
exceptions. Failures of the HTTP call itself are collapsed by
normalize_error() into one of three dict shapes so every tool reports
them the same way.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    VALIDATION = "ValidationError"
    SERVER = "ServerError"
    NO_RESPONSE = "NoResponse"
    REQUEST_SETUP = "RequestSetupError"
    CONFIGURATION = "ConfigurationError"
    UNKNOWN_TOOL = "UnknownTool"


NO_RESPONSE_ERROR = "No Response"
NO_RESPONSE_MESSAGE = "The API request timed out or received no response"
REQUEST_ERROR = "Request Error"
API_ERROR = "API Error"


# ── Exceptions ───────────────────────────────────────────────

class FinancialDatasetsError(Exception):
    """Base class for errors raised by this package."""
    kind: ErrorKind | None = None


class ToolValidationError(FinancialDatasetsError, ValueError):
    """Arguments rejected before any network call."""
    kind = ErrorKind.VALIDATION

    def __init__(self, tool_name: str, message: str, errors: list[dict] | None = None):
        super().__init__(f"Invalid arguments for {tool_name}: {message}")
        self.tool_name = tool_name
        self.errors = errors or []


class ConfigurationError(FinancialDatasetsError):
    kind = ErrorKind.CONFIGURATION


class UnknownToolError(FinancialDatasetsError, KeyError):
    kind = ErrorKind.UNKNOWN_TOOL

    def __init__(self, name: str, available: list[str] | None = None):
        super().__init__(name)
        self.name = name
        self.available = available or []

    def __str__(self) -> str:
        return f"Tool '{self.name}' not found"


class ToolDefinitionError(FinancialDatasetsError):
    """A catalog row that breaks the tool definition invariants."""


# ── Normalizer ───────────────────────────────────────────────

# Sent, but nothing came back.
_NO_RESPONSE_ERRORS = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


def classify_error(exc: BaseException) -> ErrorKind:
    """Which of the three network failure modes an exception belongs to."""
    if isinstance(exc, httpx.HTTPStatusError):
        return ErrorKind.SERVER
    if isinstance(exc, _NO_RESPONSE_ERRORS):
        return ErrorKind.NO_RESPONSE
    return ErrorKind.REQUEST_SETUP


def normalize_error(exc: BaseException) -> dict[str, Any]:
    """
    Convert a failed HTTP call into a structured error dict. Never raises.

    Shapes:
        {"error": ..., "message": ..., "status": ...}   server answered non-2xx
        {"error": "No Response", "message": ...}        request sent, no reply
        {"error": "Request Error", "message": ...}      request never went out
    """
    kind = classify_error(exc)

    if kind == ErrorKind.SERVER:
        response = exc.response
        body = _response_body(response)
        result = {
            "error": body.get("error") or API_ERROR,
            "message": body.get("message") or response.reason_phrase,
            "status": response.status_code,
        }
    elif kind == ErrorKind.NO_RESPONSE:
        result = {"error": NO_RESPONSE_ERROR, "message": NO_RESPONSE_MESSAGE}
    else:
        result = {"error": REQUEST_ERROR, "message": str(exc) or type(exc).__name__}

    logger.warning(f"{kind.value}: {result['message']}")
    return result


def _response_body(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
