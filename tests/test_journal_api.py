"""Journal REST client against a mocked transport."""

from __future__ import annotations

import json

import httpx
import pytest

from trading_journal.errors import JournalAPIError
from trading_journal.forms.validation import validate_dividend_event
from trading_journal.schemas import TransferRequest
from trading_journal.services.journal_api import JournalAPI

BASE_URL = "http://journal.test/api"


def _api(handler, token: str = "secret") -> JournalAPI:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return JournalAPI(BASE_URL, token=token, client=client)


async def test_list_transactions_drops_empty_params():
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"transactions": [], "totalCount": 0})

    api = _api(handler)
    page = await api.list_transactions({"ticker": "", "type": None, "page": "2", "pageSize": 10})

    assert page.total_count == 0
    request = captured[0]
    assert request.url.path == "/api/transactions"
    assert dict(request.url.params) == {"page": "2", "pageSize": "10"}
    assert request.headers["authorization"] == "Bearer secret"


async def test_error_body_becomes_journal_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"error": "Không thể xóa tài khoản mặc định"})

    api = _api(handler)
    with pytest.raises(JournalAPIError) as excinfo:
        await api.delete_stock_account("acc-default")

    assert excinfo.value.status_code == 409
    assert excinfo.value.message == "Không thể xóa tài khoản mặc định"
    assert excinfo.value.is_business_rule


async def test_non_json_error_uses_fallback_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="<html>oops</html>")

    api = _api(handler)
    with pytest.raises(JournalAPIError) as excinfo:
        await api.get_portfolio()

    assert excinfo.value.message == "Không thể lấy dữ liệu danh mục đầu tư"
    assert not excinfo.value.is_business_rule


async def test_stock_accounts_default_first():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=[
                {"id": "a2", "name": "SSI", "createdAt": "2024-01-02T00:00:00Z"},
                {"id": "a1", "name": "Tài khoản mặc định", "createdAt": "2024-02-01T00:00:00Z"},
                {"id": "a3", "name": "VPS", "createdAt": "2024-01-01T00:00:00Z"},
            ],
        )

    accounts = await _api(handler).list_stock_accounts()
    assert [account.id for account in accounts] == ["a1", "a3", "a2"]


async def test_transfer_uses_put_with_camel_case_body():
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"message": "Đã chuyển 2 mã"})

    result = await _api(handler).transfer_stocks(TransferRequest(tickers=["FPT", "VNM"], target_account_id="acc-2"))

    assert result.message == "Đã chuyển 2 mã"
    assert captured[0].method == "PUT"
    assert captured[0].url.path == "/api/transactions/transfer"
    assert json.loads(captured[0].content) == {"tickers": ["FPT", "VNM"], "targetAccountId": "acc-2"}


@pytest.mark.parametrize("wrapper", ["data", "adjustment", None])
async def test_create_adjustment_unwraps_response(wrapper):
    row = {
        "id": "adj-1",
        "ticker": "FPT",
        "stockAccountId": "acc-1",
        "adjustmentType": "CASH_DIVIDEND",
        "eventDate": "2024-06-14T00:00:00Z",
        "dividendPerShare": 2000,
        "taxRate": 0.05,
    }
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(201, json={wrapper: row} if wrapper else row)

    event = validate_dividend_event(
        {
            "adjustmentType": "CASH_DIVIDEND",
            "ticker": "FPT",
            "stockAccountId": "acc-1",
            "eventDate": "2024-06-14",
            "dividendPerShare": 2000,
            "taxRate": 0.05,
        }
    )
    adjustment = await _api(handler).create_adjustment(event)

    assert adjustment.id == "adj-1"
    assert captured[0].url.path == "/api/cost-basis-adjustments"
    assert json.loads(captured[0].content)["taxRate"] == 0.05


async def test_empty_delete_response_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(204)

    assert await _api(handler).delete_transaction("tx-1") is None
