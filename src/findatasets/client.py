"""
HTTP client adapter for the Financial Datasets API.

One httpx.AsyncClient bound to a base URL and the API-key header, used by
every tool. Deliberately thin: no retries, httpx's default timeout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from .errors import ConfigurationError
from .models import HttpMethod, PreparedRequest

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.financialdatasets.ai"
API_KEY_HEADER = "X-API-KEY"


@dataclass(frozen=True)
class HttpClientConfig:
    """Process-wide connection settings. Read-only once built."""
    api_key: str
    base_url: str = DEFAULT_BASE_URL

    def __post_init__(self):
        if not isinstance(self.api_key, str) or not self.api_key.strip():
            raise ConfigurationError("An API key is required")
        if not self.base_url:
            object.__setattr__(self, "base_url", DEFAULT_BASE_URL)

    def headers(self) -> dict[str, str]:
        return {
            API_KEY_HEADER: self.api_key,
            "Content-Type": "application/json",
        }


class FinancialDatasetsClient:
    """
    Async client for the Financial Datasets REST API.

    Usage:
        async with FinancialDatasetsClient(HttpClientConfig(api_key)) as client:
            data = await client.get("/prices/snapshot", {"ticker": "AAPL"})

    Non-2xx responses raise httpx.HTTPStatusError; transport failures raise
    the matching httpx exception. See errors.normalize_error().
    """

    def __init__(self, config: HttpClientConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            headers=config.headers(),
            transport=transport,
        )

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self._request(HttpMethod.GET, path, params=params or None)

    async def post(self, path: str, body: dict[str, Any] | None = None) -> Any:
        return await self._request(HttpMethod.POST, path, json=body or {})

    async def send(self, request: PreparedRequest) -> Any:
        """Issue a request built by the executor."""
        if request.method == HttpMethod.POST:
            return await self._request(request.method, request.path, params=request.query or None, json=request.body or {})
        return await self._request(request.method, request.path, params=request.query or None)

    async def _request(self, method: HttpMethod, path: str, **kwargs: Any) -> Any:
        logger.debug(f"{method.value} {path} {kwargs}")
        response = await self._http.request(method.value, path, **kwargs)
        response.raise_for_status()

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> FinancialDatasetsClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
