"""HTTP client for the Trading Journal REST API."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx
from opentelemetry.propagate import inject

from trading_journal.config import get_settings
from trading_journal.errors import GENERIC_ERROR_MESSAGE, JournalAPIError
from trading_journal.schemas import (
    AccountFee,
    AccountFeePage,
    AdjustmentList,
    CostBasisAdjustment,
    DashboardPayload,
    DividendEvent,
    PortfolioPage,
    StockAccount,
    Transaction,
    TransactionPage,
    TransferRequest,
    TransferResult,
    sort_accounts,
)

logger = logging.getLogger(__name__)

QueryParams = Mapping[str, Any]


def _clean_params(params: QueryParams | None) -> dict[str, str]:
    """Drop empty values so the query string stays minimal."""

    if not params:
        return {}
    cleaned: dict[str, str] = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        cleaned[key] = str(value)
    return cleaned


def _error_message(response: httpx.Response, fallback: str) -> tuple[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return fallback, response.text
    if isinstance(payload, dict):
        for key in ("error", "message", "detail"):
            message = payload.get(key)
            if isinstance(message, str) and message:
                return message, payload
    return fallback, payload


class JournalAPI:
    """Typed wrapper over every endpoint the journal views consume."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.journal_api_url).rstrip("/")
        self._token = token if token is not None else settings.journal_api_token
        self._timeout = timeout or settings.journal_api_timeout_seconds
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "JournalAPI":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: QueryParams | None = None,
        json: Any | None = None,
        error_message: str = GENERIC_ERROR_MESSAGE,
    ) -> Any:
        url = f"{self.base_url}{path}"
        headers: dict[str, str] = {}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        # Inject current trace context so downstream spans link to this request
        try:
            inject(headers)
        except Exception:
            # Best-effort; keep request functional even if tracing is unavailable
            pass

        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        response = await self._client.request(
            method, url, params=_clean_params(params), json=json, headers=headers
        )
        if response.status_code >= 400:
            message, detail = _error_message(response, error_message)
            logger.warning("Journal API error %s for %s %s: %s", response.status_code, method, url, message)
            raise JournalAPIError(response.status_code, message, detail)
        if not response.content:
            return None
        if response.headers.get("content-type", "").startswith("application/json"):
            return response.json()
        return response.content

    # Portfolio -----------------------------------------------------------

    async def get_portfolio(self, params: QueryParams | None = None) -> PortfolioPage:
        payload = await self._request(
            "GET", "/portfolio", params=params, error_message="Không thể lấy dữ liệu danh mục đầu tư"
        )
        return PortfolioPage.model_validate(payload or {})

    # Transactions --------------------------------------------------------

    async def list_transactions(self, params: QueryParams | None = None) -> TransactionPage:
        payload = await self._request(
            "GET", "/transactions", params=params, error_message="Không thể tải danh sách giao dịch"
        )
        return TransactionPage.model_validate(payload or {})

    async def get_transaction(self, transaction_id: str) -> Transaction:
        payload = await self._request("GET", f"/transactions/{transaction_id}")
        return Transaction.model_validate(payload)

    async def create_transaction(self, payload: Mapping[str, Any]) -> Transaction:
        created = await self._request(
            "POST", "/transactions", json=dict(payload), error_message="Không thể thêm giao dịch"
        )
        return Transaction.model_validate(created)

    async def update_transaction(self, transaction_id: str, payload: Mapping[str, Any]) -> Transaction:
        updated = await self._request(
            "PUT",
            f"/transactions/{transaction_id}",
            json=dict(payload),
            error_message="Không thể cập nhật giao dịch",
        )
        return Transaction.model_validate(updated)

    async def delete_transaction(self, transaction_id: str) -> None:
        await self._request(
            "DELETE", f"/transactions/{transaction_id}", error_message="Không thể xóa giao dịch"
        )

    async def transfer_stocks(self, request: TransferRequest) -> TransferResult:
        payload = await self._request(
            "PUT",
            "/transactions/transfer",
            json=request.to_wire(),
            error_message="Không thể chuyển cổ phiếu",
        )
        return TransferResult.model_validate(payload or {})

    async def get_profit_stats(self, params: QueryParams | None = None) -> dict[str, Any]:
        payload = await self._request("GET", "/profit-stats", params=params)
        return payload or {}

    async def get_journal_entry(self, transaction_id: str) -> dict[str, Any] | None:
        return await self._request("GET", "/journal", params={"transactionId": transaction_id})

    # Account fees --------------------------------------------------------

    async def list_account_fees(self, params: QueryParams | None = None) -> AccountFeePage:
        payload = await self._request(
            "GET", "/account-fees", params=params, error_message="Không thể tải danh sách phí"
        )
        return AccountFeePage.model_validate(payload or {})

    async def create_account_fee(self, payload: Mapping[str, Any]) -> AccountFee:
        created = await self._request("POST", "/account-fees", json=dict(payload))
        return AccountFee.model_validate(created)

    async def update_account_fee(self, fee_id: str, payload: Mapping[str, Any]) -> AccountFee:
        updated = await self._request("PUT", f"/account-fees/{fee_id}", json=dict(payload))
        return AccountFee.model_validate(updated)

    async def delete_account_fee(self, fee_id: str) -> None:
        await self._request("DELETE", f"/account-fees/{fee_id}")

    # Stock accounts ------------------------------------------------------

    async def list_stock_accounts(self) -> list[StockAccount]:
        payload = await self._request(
            "GET", "/stock-accounts", error_message="Không thể tải danh sách tài khoản"
        )
        if not isinstance(payload, list):
            return []
        return sort_accounts([StockAccount.model_validate(item) for item in payload])

    async def create_stock_account(self, payload: Mapping[str, Any]) -> StockAccount:
        created = await self._request("POST", "/stock-accounts", json=dict(payload))
        return StockAccount.model_validate(created)

    async def update_stock_account(self, account_id: str, payload: Mapping[str, Any]) -> StockAccount:
        updated = await self._request("PUT", f"/stock-accounts/{account_id}", json=dict(payload))
        return StockAccount.model_validate(updated)

    async def delete_stock_account(self, account_id: str) -> None:
        await self._request("DELETE", f"/stock-accounts/{account_id}")

    # Cost-basis adjustments ----------------------------------------------

    async def list_adjustments(self, params: QueryParams | None = None) -> AdjustmentList:
        payload = await self._request("GET", "/cost-basis-adjustments", params=params)
        return AdjustmentList.model_validate(payload or {})

    async def create_adjustment(self, event: DividendEvent) -> CostBasisAdjustment:
        created = await self._request(
            "POST", "/cost-basis-adjustments", json=event.to_wire(exclude_none=True)
        )
        # The API wraps the created row as either ``data`` or ``adjustment``
        if isinstance(created, dict):
            created = created.get("data") or created.get("adjustment") or created
        return CostBasisAdjustment.model_validate(created)

    async def set_adjustment_active(self, adjustment_id: str, is_active: bool) -> dict[str, Any]:
        return await self._request(
            "PATCH", f"/cost-basis-adjustments/{adjustment_id}", json={"isActive": is_active}
        )

    async def delete_adjustment(self, adjustment_id: str) -> dict[str, Any]:
        return await self._request("DELETE", f"/cost-basis-adjustments/{adjustment_id}")

    # Analytics -----------------------------------------------------------

    async def get_dashboard(self, period: str | None = None) -> DashboardPayload:
        payload = await self._request("GET", "/dashboard", params={"period": period})
        return DashboardPayload.model_validate(payload or {})

    # Strategies ----------------------------------------------------------

    async def list_strategies(self) -> list[dict[str, Any]]:
        payload = await self._request("GET", "/strategies")
        return payload if isinstance(payload, list) else []

    async def create_strategy(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/strategies", json=dict(payload))

    async def delete_strategy(self, strategy_id: str) -> None:
        await self._request("DELETE", f"/strategies/{strategy_id}")


__all__ = ["JournalAPI", "QueryParams"]
