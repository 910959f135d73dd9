"""Minimal Finnhub API wrapper for the quote and symbol-search endpoints."""

from __future__ import annotations

from typing import Any

import httpx

DEFAULT_BASE_URL = "https://finnhub.io/api/v1"


class FinnhubError(Exception):
    """Base exception for Finnhub client errors."""


class FinnhubRequestError(FinnhubError):
    """Raised when Finnhub answers with a non-success status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class FinnhubTransportError(FinnhubError):
    """Raised when Finnhub cannot be reached or times out."""


class FinnhubResponseError(FinnhubError):
    """Raised when a Finnhub response body is not JSON."""


class FinnhubClient:
    """
    Thin client that appends the server-held token to every request.

    No retries: each call issues exactly one outbound request and either
    returns the decoded JSON body or raises a `FinnhubError`.
    """

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 10.0,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def get_quote(self, symbol: str) -> Any:
        return await self._get("/quote", {"symbol": symbol})

    async def search(self, query: str) -> Any:
        return await self._get("/search", {"q": query})

    async def _get(self, path: str, params: dict[str, str]) -> Any:
        url = f"{self.base_url}{path}"
        query = {**params, "token": self.api_key}

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.get(url, params=query)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FinnhubTransportError(f"Finnhub request to {path} failed: {exc.__class__.__name__}") from exc

        if not response.is_success:
            raise FinnhubRequestError(response.status_code, f"Finnhub {path} returned {response.status_code}")

        try:
            return response.json()
        except ValueError as exc:
            raise FinnhubResponseError(f"Invalid JSON from Finnhub {path}") from exc
