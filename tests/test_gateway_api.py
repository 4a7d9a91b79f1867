"""Gateway routes over ASGI with a mocked journal API."""

from __future__ import annotations

import json

import httpx
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from trading_journal.api.dependencies import get_bus, get_journal_api, get_market_data
from trading_journal.api.errors import register_error_handlers
from trading_journal.api.routes import api_router
from trading_journal.services.invalidation import InvalidationBus, Topic
from trading_journal.services.journal_api import JournalAPI
from trading_journal.services.market_data import MarketDataCache

BASE_URL = "http://journal.test/api"

ACCOUNTS = [
    {"id": "acc-1", "name": "Tài khoản mặc định"},
    {"id": "acc-2", "name": "SSI"},
]


class JournalBackend:
    """Minimal in-memory stand-in for the journal REST API."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.transfer_response = httpx.Response(200, json={"message": "Chuyển cổ phiếu thành công"})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        if path == "/portfolio":
            return httpx.Response(
                200,
                json={
                    "portfolio": [{"ticker": "FPT", "quantity": 100, "avgCost": 90_000, "stockAccountId": "acc-1"}],
                    "totalCount": 1,
                },
            )
        if path == "/market-data":
            return httpx.Response(200, json={"FPT": 100_000})
        if path == "/stock-accounts" and request.method == "GET":
            return httpx.Response(200, json=ACCOUNTS)
        if path == "/transactions/transfer":
            return self.transfer_response
        if path == "/transactions" and request.method == "GET":
            return httpx.Response(200, json={"transactions": [], "totalCount": 97})
        if path == "/profit-stats":
            return httpx.Response(200, json={"totalPL": 0})
        if path.startswith("/stock-accounts/") and request.method == "DELETE":
            return httpx.Response(204)
        return httpx.Response(404, json={"error": "Không tìm thấy"})

    def paths(self) -> list[str]:
        return [request.url.path.removeprefix("/api") for request in self.requests]


def _app(backend: JournalBackend, bus: InvalidationBus | None = None) -> FastAPI:
    client = httpx.AsyncClient(transport=httpx.MockTransport(backend))
    api = JournalAPI(BASE_URL, token="", client=client)
    cache = MarketDataCache(BASE_URL, client=client, token="", retry_count=0)
    bus = bus or InvalidationBus()

    app = FastAPI()
    app.include_router(api_router)
    register_error_handlers(app)
    app.dependency_overrides[get_journal_api] = lambda: api
    app.dependency_overrides[get_market_data] = lambda: cache
    app.dependency_overrides[get_bus] = lambda: bus
    return app


async def _call(app: FastAPI, method: str, url: str, **kwargs) -> httpx.Response:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.request(method, url, **kwargs)


async def test_portfolio_view_includes_prices():
    backend = JournalBackend()
    response = await _call(_app(backend), "GET", "/portfolio?stockAccountId=acc-1")

    assert response.status_code == 200
    payload = response.json()
    assert payload["rows"][0]["currentPrice"] == 100_000
    assert payload["rows"][0]["unrealizedPL"] == 1_000_000
    assert payload["pageSize"] == 25
    assert "stockAccountId=acc-1" in payload["query"]
    assert backend.requests[0].url.params["stockAccountId"] == "acc-1"


async def test_transactions_view_paginates():
    backend = JournalBackend()
    response = await _call(_app(backend), "GET", "/transactions?pageSize=25")

    payload = response.json()
    assert response.status_code == 200
    assert payload["totalPages"] == 4
    assert payload["pages"] == [1, 2, 3, 4]
    assert "/profit-stats" in backend.paths()


async def test_invalid_dividend_event_is_rejected_before_forwarding():
    backend = JournalBackend()
    response = await _call(
        _app(backend),
        "POST",
        "/cost-basis-adjustments",
        json={"adjustmentType": "CASH_DIVIDEND", "ticker": "FPT", "stockAccountId": "acc-1",
              "eventDate": "2024-06-14", "dividendPerShare": 1500},
    )

    assert response.status_code == 422
    assert response.json()["errors"] == {"taxRate": "Thuế suất phải trong khoảng 0-1"}
    assert backend.requests == []


async def test_transfer_to_source_account_is_refused():
    backend = JournalBackend()
    response = await _call(
        _app(backend),
        "POST",
        "/portfolio/transfer",
        json={"selected": [{"ticker": "FPT", "stockAccountId": "acc-1"}], "targetAccountId": "acc-1"},
    )

    assert response.status_code == 400
    assert "/transactions/transfer" not in backend.paths()


async def test_transfer_forwards_and_invalidates():
    backend = JournalBackend()
    bus = InvalidationBus()
    response = await _call(
        _app(backend, bus),
        "POST",
        "/portfolio/transfer",
        json={"selected": [{"ticker": "FPT", "stockAccountId": "acc-1"}], "targetAccountId": "acc-2"},
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Chuyển cổ phiếu thành công"
    transfer = next(request for request in backend.requests if request.url.path.endswith("/transfer"))
    assert json.loads(transfer.content) == {"tickers": ["FPT"], "targetAccountId": "acc-2"}
    assert bus.version(Topic.PORTFOLIO) == 1


async def test_failed_transfer_keeps_upstream_status():
    backend = JournalBackend()
    backend.transfer_response = httpx.Response(503, json={"error": "Hệ thống đang bảo trì"})
    bus = InvalidationBus()
    response = await _call(
        _app(backend, bus),
        "POST",
        "/portfolio/transfer",
        json={"selected": [{"ticker": "FPT", "stockAccountId": "acc-1"}], "targetAccountId": "acc-2"},
    )

    assert response.status_code == 503
    assert response.json() == {"detail": "Hệ thống đang bảo trì"}
    assert bus.version(Topic.PORTFOLIO) == 0


async def test_default_account_delete_conflicts():
    backend = JournalBackend()
    response = await _call(_app(backend), "DELETE", "/stock-accounts/acc-1")

    assert response.status_code == 409
    assert "DELETE" not in [request.method for request in backend.requests]

    response = await _call(_app(backend), "DELETE", "/stock-accounts/acc-2")
    assert response.status_code == 204


async def test_upstream_errors_keep_their_status():
    backend = JournalBackend()
    response = await _call(_app(backend), "GET", "/transactions/tx-404")

    assert response.status_code == 404
    assert response.json() == {"detail": "Không tìm thấy"}


async def test_market_data_route_dedupes():
    backend = JournalBackend()
    app = _app(backend)
    first = await _call(app, "GET", "/market-data?tickers=fpt")
    second = await _call(app, "GET", "/market-data?tickers=FPT,")

    assert first.json() == second.json() == {"tickers": ["FPT"], "data": {"FPT": 100_000}, "error": None}
    assert backend.paths().count("/market-data") == 1


async def test_price_step_routes():
    app = _app(JournalBackend())
    info = (await _call(app, "GET", "/price-steps?price=49980")).json()
    ladder = (await _call(app, "GET", "/price-steps/range?min=9990&max=10010&current=9500")).json()

    assert info["step"] == 50
    assert info["roundedPrice"] == 50_000
    assert info["isValid"] is False
    assert ladder == [9_990, 10_000, 10_010]


async def test_price_range_rejects_non_finite_bounds():
    app = _app(JournalBackend())

    unbounded = await _call(app, "GET", "/price-steps/range?min=inf&max=inf&current=1000")
    not_a_number = await _call(app, "GET", "/price-steps/range?min=0&max=nan&current=1000")
    step = await _call(app, "GET", "/price-steps?price=inf")

    assert unbounded.status_code == 422
    assert not_a_number.status_code == 422
    assert step.status_code == 422


async def test_risk_metrics_route():
    trades = [
        {"id": "t1", "ticker": "FPT", "type": "SELL", "quantity": 10, "price": 1,
         "transactionDate": "2024-03-01T10:00:00", "calculatedPl": 100},
        {"id": "t2", "ticker": "FPT", "type": "SELL", "quantity": 10, "price": 1,
         "transactionDate": "2024-03-02T10:00:00", "calculatedPl": 100},
    ]
    response = await _call(_app(JournalBackend()), "POST", "/analytics/risk-metrics", json=trades)

    assert response.status_code == 200
    assert response.json()["riskScore"] == 33
