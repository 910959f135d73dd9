from __future__ import annotations

import logging

import httpx
import pytest
from fastapi.testclient import TestClient
from respx import MockRouter

import app.market.router as market_router
from app.main import app
from app.market.finnhub_client import FinnhubClient

BASE_URL = "https://finnhub.test/api/v1"
API_KEY = "test-key"
SAMPLE_QUOTE = {"c": 150, "h": 152, "l": 149, "o": 151, "pc": 150}


def _override_client(api_key: str) -> None:
    app.dependency_overrides[market_router.get_finnhub_client] = lambda: FinnhubClient(
        api_key=api_key,
        base_url=BASE_URL,
    )


@pytest.fixture
def client_with_key():
    _override_client(API_KEY)
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def client_without_key():
    _override_client("")
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def test_quote_wraps_upstream_payload_with_normalized_symbol(client_with_key, respx_mock: MockRouter) -> None:
    route = respx_mock.get(host="finnhub.test", path="/api/v1/quote").mock(
        return_value=httpx.Response(200, json=SAMPLE_QUOTE)
    )

    response = client_with_key.get("/api/quote", params={"symbol": "aapl"})

    assert response.status_code == 200
    assert response.json() == {"symbol": "AAPL", "quote": SAMPLE_QUOTE}
    sent = route.calls.last.request.url.params
    assert sent["symbol"] == "AAPL"
    assert sent["token"] == API_KEY


def test_quote_trims_whitespace_around_symbol(client_with_key, respx_mock: MockRouter) -> None:
    route = respx_mock.get(host="finnhub.test", path="/api/v1/quote").mock(
        return_value=httpx.Response(200, json={"c": 410.5})
    )

    response = client_with_key.get("/api/quote", params={"symbol": "  msft "})

    assert response.status_code == 200
    assert response.json()["symbol"] == "MSFT"
    assert route.calls.last.request.url.params["symbol"] == "MSFT"


@pytest.mark.parametrize("params", [{}, {"symbol": ""}, {"symbol": "   "}])
def test_quote_requires_symbol(client_with_key, respx_mock: MockRouter, params) -> None:
    response = client_with_key.get("/api/quote", params=params)

    assert response.status_code == 400
    assert response.json() == {"error": "symbol query param required"}
    assert not respx_mock.calls


def test_quote_missing_symbol_is_400_even_without_key(client_without_key) -> None:
    response = client_without_key.get("/api/quote")

    assert response.status_code == 400
    assert response.json() == {"error": "symbol query param required"}


@pytest.mark.parametrize(
    ("path", "params"),
    [("/api/quote", {"symbol": "AAPL"}), ("/api/search", {"q": "apple"})],
)
def test_missing_key_returns_503_without_calling_upstream(
    client_without_key, respx_mock: MockRouter, path, params
) -> None:
    response = client_without_key.get(path, params=params)

    assert response.status_code == 503
    assert response.json() == {"error": "API key not configured. Set FINNHUB_API_KEY in .env"}
    assert not respx_mock.calls


def test_default_client_reads_key_from_settings(monkeypatch, respx_mock: MockRouter) -> None:
    monkeypatch.setattr(market_router.settings, "finnhub_api_key", "")

    with TestClient(app) as client:
        response = client.get("/api/search", params={"q": "apple"})

    assert response.status_code == 503
    assert "FINNHUB_API_KEY" in response.json()["error"]


@pytest.mark.parametrize("upstream_status", [401, 403, 404, 429, 500, 503])
def test_upstream_non_success_maps_to_502(client_with_key, respx_mock: MockRouter, upstream_status) -> None:
    respx_mock.get(host="finnhub.test", path="/api/v1/quote").mock(
        return_value=httpx.Response(upstream_status, json={"error": "nope"})
    )

    response = client_with_key.get("/api/quote", params={"symbol": "AAPL"})

    assert response.status_code == 502
    assert response.json() == {"error": "upstream error"}


def test_upstream_is_called_once_without_retry(client_with_key, respx_mock: MockRouter) -> None:
    route = respx_mock.get(host="finnhub.test", path="/api/v1/search").mock(
        return_value=httpx.Response(503)
    )

    response = client_with_key.get("/api/search", params={"q": "apple"})

    assert response.status_code == 502
    assert route.call_count == 1


UPSTREAM_PATHS = [
    ("/api/quote", "/api/v1/quote", {"symbol": "AAPL"}),
    ("/api/search", "/api/v1/search", {"q": "apple"}),
]


@pytest.mark.parametrize(("path", "upstream_path", "params"), UPSTREAM_PATHS)
@pytest.mark.parametrize(
    "failure",
    [httpx.ConnectError, httpx.ReadTimeout, httpx.ConnectTimeout, httpx.TooManyRedirects, httpx.DecodingError],
)
def test_transport_failure_maps_to_500(
    client_with_key, respx_mock: MockRouter, failure, path, upstream_path, params
) -> None:
    respx_mock.get(host="finnhub.test", path=upstream_path).mock(side_effect=failure)

    response = client_with_key.get(path, params=params)

    assert response.status_code == 500
    assert response.json() == {"error": "server error"}
    assert API_KEY not in response.text


@pytest.mark.parametrize(("path", "upstream_path", "params"), UPSTREAM_PATHS)
def test_malformed_upstream_body_maps_to_500(
    client_with_key, respx_mock: MockRouter, path, upstream_path, params
) -> None:
    respx_mock.get(host="finnhub.test", path=upstream_path).mock(
        return_value=httpx.Response(200, text="<html>maintenance</html>")
    )

    response = client_with_key.get(path, params=params)

    assert response.status_code == 500
    assert response.json() == {"error": "server error"}


def test_server_error_keeps_cors_headers(client_with_key, respx_mock: MockRouter) -> None:
    respx_mock.get(host="finnhub.test", path="/api/v1/quote").mock(side_effect=httpx.DecodingError)

    response = client_with_key.get(
        "/api/quote",
        params={"symbol": "AAPL"},
        headers={"Origin": "https://site.test"},
    )

    assert response.status_code == 500
    assert response.json() == {"error": "server error"}
    assert "access-control-allow-origin" in response.headers


def test_upstream_token_is_not_logged(capsys, respx_mock: MockRouter) -> None:
    secret = "do-not-log-this-token"
    respx_mock.get(host="finnhub.test", path="/api/v1/quote").mock(
        return_value=httpx.Response(200, json=SAMPLE_QUOTE)
    )
    _override_client(secret)
    try:
        with TestClient(app) as client:
            response = client.get("/api/quote", params={"symbol": "aapl"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert logging.getLogger("httpx").level == logging.WARNING
    captured = capsys.readouterr()
    assert secret not in captured.out
    assert secret not in captured.err


def test_search_passes_upstream_json_through(client_with_key, respx_mock: MockRouter) -> None:
    upstream = {
        "count": 1,
        "result": [
            {"description": "APPLE INC", "displaySymbol": "AAPL", "symbol": "AAPL", "type": "Common Stock"}
        ],
    }
    route = respx_mock.get(host="finnhub.test", path="/api/v1/search").mock(
        return_value=httpx.Response(200, json=upstream)
    )

    response = client_with_key.get("/api/search", params={"q": " apple "})

    assert response.status_code == 200
    assert response.json() == upstream
    sent = route.calls.last.request.url.params
    assert sent["q"] == "apple"
    assert sent["token"] == API_KEY


@pytest.mark.parametrize("params", [{}, {"q": ""}, {"q": "  "}])
def test_search_requires_query(client_with_key, respx_mock: MockRouter, params) -> None:
    response = client_with_key.get("/api/search", params=params)

    assert response.status_code == 400
    assert response.json() == {"error": "q query param required"}
    assert not respx_mock.calls
