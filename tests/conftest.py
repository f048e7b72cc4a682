"""Shared fixtures: a recording httpx transport and sample arguments."""

import json

import httpx
import pytest

from findatasets import create_financial_data_tools, load_default_registry
from findatasets.models import ParamType


class RecordingHandler:
    """
    httpx.MockTransport handler that records every request.

    Replies with `status`/`body`, or raises `exc` (an httpx exception class
    or any exception instance) instead of answering.
    """

    def __init__(self, status: int = 200, body=None, exc=None):
        self.status = status
        self.body = {"ok": True} if body is None else body
        self.exc = exc
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            if isinstance(self.exc, type):
                raise self.exc("simulated failure", request=request)
            raise self.exc
        return httpx.Response(self.status, json=self.body)

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]

    def last_query(self) -> dict:
        return dict(self.last.url.params)

    def last_body(self) -> dict:
        return json.loads(self.last.content)


@pytest.fixture
def handler():
    return RecordingHandler()


@pytest.fixture
def registry():
    return load_default_registry()


@pytest.fixture
def make_tools():
    """Build a toolkit whose HTTP calls go to the given handler."""
    def _make(handler, api_key="test-key", base_url=None):
        return create_financial_data_tools(
            api_key, base_url, transport=httpx.MockTransport(handler),
        )
    return _make


def sample_value(spec):
    if spec.type == ParamType.STRING:
        return "2024-01-02" if "date" in spec.name else "AAPL"
    if spec.type in (ParamType.NUMBER, ParamType.INTEGER):
        return 5
    if spec.type == ParamType.ENUM:
        return spec.values[0]
    if spec.type == ParamType.FILTER:
        return {"field": "revenue", "operator": "gt", "value": 1000}
    if spec.type == ParamType.ARRAY:
        return [sample_value(spec.items)]
    raise AssertionError(f"no sample for {spec.type}")


def required_args(definition) -> dict:
    """Valid arguments using only required parameters (plus one of require_one_of)."""
    args = {p.name: sample_value(p) for p in definition.params if p.required}
    if definition.require_one_of:
        first = definition.get_param(definition.require_one_of[0])
        args[first.name] = sample_value(first)
    return args
