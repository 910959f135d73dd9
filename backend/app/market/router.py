"""Credential-hiding pass-through routes for Finnhub quote and symbol search."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Any

from fastapi import APIRouter, Depends, Query
from structlog.contextvars import bound_contextvars

from app.config import settings
from app.errors import BadRequest, InternalError, ServiceUnavailable, UpstreamError
from app.logging_utils import get_logger
from app.market.finnhub_client import (
    FinnhubClient,
    FinnhubRequestError,
    FinnhubResponseError,
    FinnhubTransportError,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["market"])

MISSING_KEY_MESSAGE = "API key not configured. Set FINNHUB_API_KEY in .env"


def get_finnhub_client() -> FinnhubClient:
    return FinnhubClient(
        api_key=settings.finnhub_api_key,
        base_url=settings.finnhub_base_url,
        timeout_seconds=settings.upstream_timeout_seconds,
    )


def normalize_symbol(raw: str | None) -> str:
    return (raw or "").strip().upper()


def _require_configured(client: FinnhubClient) -> None:
    if not client.configured:
        raise ServiceUnavailable(MISSING_KEY_MESSAGE)


async def _forward(call: Awaitable[Any], operation: str) -> Any:
    # one outbound call; upstream failures collapse into 502/500
    try:
        return await call
    except FinnhubRequestError as exc:
        logger.warning("upstream_status_error", operation=operation, upstream_status=exc.status_code)
        raise UpstreamError("upstream error") from exc
    except (FinnhubTransportError, FinnhubResponseError) as exc:
        logger.error("upstream_call_failed", operation=operation, error=str(exc))
        raise InternalError() from exc


@router.get("/quote")
async def quote(
    symbol: str | None = Query(default=None),
    client: FinnhubClient = Depends(get_finnhub_client),
) -> dict[str, Any]:
    """
    Look up the latest quote for one ticker.

    Example: `GET /api/quote?symbol=aapl` ->
    `{"symbol": "AAPL", "quote": {"c": 150, "h": 152, "l": 149, "o": 151, "pc": 150}}`
    """
    normalized = normalize_symbol(symbol)
    if not normalized:
        raise BadRequest("symbol query param required")
    _require_configured(client)

    with bound_contextvars(symbol=normalized):
        payload = await _forward(client.get_quote(normalized), "quote")

    return {"symbol": normalized, "quote": payload}


@router.get("/search")
async def search(
    q: str | None = Query(default=None),
    client: FinnhubClient = Depends(get_finnhub_client),
) -> Any:
    """Symbol lookup; the upstream JSON is returned unmodified."""
    query = (q or "").strip()
    if not query:
        raise BadRequest("q query param required")
    _require_configured(client)

    with bound_contextvars(query=query):
        return await _forward(client.search(query), "search")
