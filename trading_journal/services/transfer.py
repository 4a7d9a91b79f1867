"""Batch transfer of holdings between stock accounts."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

import httpx

from trading_journal.errors import JournalAPIError
from trading_journal.schemas import PortfolioHolding, StockAccount, TransferRequest, TransferResult

logger = logging.getLogger(__name__)

UNKNOWN_ACCOUNT_NAME = "Tài khoản không xác định"
MISSING_TARGET_MESSAGE = "Vui lòng chọn tài khoản đích"
EMPTY_SELECTION_MESSAGE = "Không có cổ phiếu nào được chọn"
TRANSFER_FAILED_MESSAGE = "Không thể chuyển cổ phiếu"
ACCOUNTS_FAILED_MESSAGE = "Không thể tải danh sách tài khoản"


@dataclass(frozen=True)
class SelectedStock:
    ticker: str
    account_id: str | None
    account_name: str | None = None

    @classmethod
    def from_holding(cls, holding: PortfolioHolding) -> "SelectedStock":
        account = holding.stock_account
        return cls(
            ticker=holding.ticker,
            account_id=holding.stock_account_id or (account.id if account else None),
            account_name=account.name if account else None,
        )

    @property
    def key(self) -> str:
        return selection_key(self.ticker, self.account_id)


@dataclass
class AccountGroup:
    account_id: str
    account_name: str
    tickers: list[str] = field(default_factory=list)


def selection_key(ticker: str, account_id: str | None) -> str:
    return f"{ticker}-{account_id or ''}"


def source_account_ids(selected: Iterable[SelectedStock]) -> set[str]:
    return {stock.account_id for stock in selected if stock.account_id}


def eligible_destinations(
    accounts: Sequence[StockAccount],
    selected: Sequence[SelectedStock],
) -> list[StockAccount]:
    """Accounts that are not a source of any selected holding."""

    if not selected:
        return list(accounts)
    sources = source_account_ids(selected)
    return [account for account in accounts if account.id not in sources]


def group_by_source(selected: Iterable[SelectedStock]) -> list[AccountGroup]:
    groups: dict[str, AccountGroup] = {}
    for stock in selected:
        key = stock.account_id or "unknown"
        group = groups.get(key)
        if group is None:
            group = groups[key] = AccountGroup(key, stock.account_name or UNKNOWN_ACCOUNT_NAME)
        group.tickers.append(stock.ticker)
    return list(groups.values())


def build_transfer_request(selected: Sequence[SelectedStock], target_account_id: str) -> TransferRequest:
    tickers = list(dict.fromkeys(stock.ticker for stock in selected))
    return TransferRequest(tickers=tickers, target_account_id=target_account_id)


class SelectAllState(str, enum.Enum):
    NONE = "none"
    SOME = "some"
    ALL = "all"


class HoldingSelection:
    """Row checkboxes plus the tri-state "select all" box of a holdings table."""

    def __init__(self) -> None:
        self._selected: dict[str, SelectedStock] = {}

    def __len__(self) -> int:
        return len(self._selected)

    def __contains__(self, holding: PortfolioHolding) -> bool:
        return SelectedStock.from_holding(holding).key in self._selected

    @property
    def selected(self) -> list[SelectedStock]:
        return list(self._selected.values())

    def toggle(self, holding: PortfolioHolding) -> bool:
        stock = SelectedStock.from_holding(holding)
        if stock.key in self._selected:
            del self._selected[stock.key]
            return False
        self._selected[stock.key] = stock
        return True

    def state(self, rows: Sequence[PortfolioHolding]) -> SelectAllState:
        if not rows:
            return SelectAllState.NONE
        checked = sum(1 for row in rows if row in self)
        if checked == 0:
            return SelectAllState.NONE
        if checked == len(rows):
            return SelectAllState.ALL
        return SelectAllState.SOME

    def toggle_all(self, rows: Sequence[PortfolioHolding]) -> SelectAllState:
        """Clear every visible row when all are checked, otherwise check them all."""

        if self.state(rows) is SelectAllState.ALL:
            for row in rows:
                self._selected.pop(SelectedStock.from_holding(row).key, None)
        else:
            for row in rows:
                stock = SelectedStock.from_holding(row)
                self._selected[stock.key] = stock
        return self.state(rows)

    def clear(self) -> None:
        self._selected.clear()


class TransferDialog:
    """State of the "transfer stocks" dialog.

    Failures are kept in :attr:`error` and leave the dialog open so the user
    can pick another account and retry. A failed request also keeps the
    underlying exception in :attr:`failure`.
    """

    def __init__(self, api, selected: Sequence[SelectedStock]) -> None:
        self._api = api
        self.selected = list(selected)
        self.accounts: list[StockAccount] = []
        self.target_account_id = ""
        self.error = ""
        self.is_open = False
        self.is_submitting = False
        self.failure: JournalAPIError | httpx.HTTPError | None = None

    async def open(self) -> None:
        self.is_open = True
        self.target_account_id = ""
        self.error = ""
        try:
            self.accounts = await self._api.list_stock_accounts()
        except (JournalAPIError, httpx.HTTPError) as exc:
            logger.warning("Could not load stock accounts for transfer: %s", exc)
            self.error = ACCOUNTS_FAILED_MESSAGE

    def close(self) -> None:
        self.is_open = False

    @property
    def available_accounts(self) -> list[StockAccount]:
        return eligible_destinations(self.accounts, self.selected)

    @property
    def groups(self) -> list[AccountGroup]:
        return group_by_source(self.selected)

    @property
    def can_submit(self) -> bool:
        return bool(self.target_account_id) and not self.is_submitting and bool(self.available_accounts)

    def choose(self, account_id: str) -> None:
        self.target_account_id = account_id

    async def submit(self) -> TransferResult | None:
        if not self.target_account_id:
            self.error = MISSING_TARGET_MESSAGE
            return None
        if not self.selected:
            self.error = EMPTY_SELECTION_MESSAGE
            return None

        self.is_submitting = True
        self.error = ""
        self.failure = None
        try:
            result = await self._api.transfer_stocks(
                build_transfer_request(self.selected, self.target_account_id)
            )
        except JournalAPIError as exc:
            self.failure = exc
            self.error = exc.message or TRANSFER_FAILED_MESSAGE
            return None
        except httpx.HTTPError as exc:
            logger.warning("Transfer request failed: %s", exc)
            self.failure = exc
            self.error = TRANSFER_FAILED_MESSAGE
            return None
        finally:
            self.is_submitting = False

        logger.info(
            "Transferred %d tickers to account %s", len(self.selected), self.target_account_id
        )
        self.close()
        return result


__all__ = [
    "SelectedStock",
    "AccountGroup",
    "SelectAllState",
    "HoldingSelection",
    "TransferDialog",
    "selection_key",
    "source_account_ids",
    "eligible_destinations",
    "group_by_source",
    "build_transfer_request",
    "MISSING_TARGET_MESSAGE",
    "EMPTY_SELECTION_MESSAGE",
    "TRANSFER_FAILED_MESSAGE",
    "ACCOUNTS_FAILED_MESSAGE",
]
