"""Stock account management."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from trading_journal.errors import JournalAPIError
from trading_journal.forms.validation import validate_stock_account
from trading_journal.schemas import StockAccount, sort_accounts
from trading_journal.services.invalidation import InvalidationBus, Topic
from trading_journal.services.journal_api import JournalAPI
from trading_journal.services.notifications import NotificationQueue

from .base import Confirm, ask, report_failure

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNT_DELETE_WARNING = (
    "Không thể xóa tài khoản mặc định. Bạn có thể chỉnh sửa tên và thông tin của nó."
)
DELETE_CONFIRMATION = "Bạn có chắc chắn muốn xóa tài khoản này không?"
LOAD_FAILED_MESSAGE = "Không thể tải danh sách tài khoản"


class StockAccountsController:
    def __init__(
        self,
        api: JournalAPI,
        *,
        bus: InvalidationBus | None = None,
        notifications: NotificationQueue | None = None,
    ) -> None:
        self.api = api
        self.bus = bus or InvalidationBus()
        self.notifications = notifications or NotificationQueue()
        self.accounts: list[StockAccount] = []
        self.is_loading = False
        self.error: str | None = None

    @property
    def default_account(self) -> StockAccount | None:
        return next((account for account in self.accounts if account.is_default), None)

    async def load(self) -> list[StockAccount]:
        self.is_loading = True
        try:
            self.accounts = await self.api.list_stock_accounts()
            self.error = None
        except (JournalAPIError, httpx.HTTPError) as exc:
            logger.warning("Loading stock accounts failed: %s", exc)
            self.error = LOAD_FAILED_MESSAGE
        finally:
            self.is_loading = False
        return self.accounts

    async def save(self, form: Mapping[str, Any], account_id: str | None = None) -> StockAccount | None:
        payload = validate_stock_account(form).to_wire(exclude_none=True)
        try:
            if account_id is None:
                account = await self.api.create_stock_account(payload)
            else:
                account = await self.api.update_stock_account(account_id, payload)
        except (JournalAPIError, httpx.HTTPError) as exc:
            self._report(exc)
            return None
        others = [item for item in self.accounts if item.id != account.id]
        self.accounts = sort_accounts([*others, account])
        self.bus.publish(Topic.STOCK_ACCOUNTS)
        return account

    async def delete(self, account: StockAccount, confirm: Confirm | None) -> bool:
        if account.is_default:
            self.notifications.show_warning(DEFAULT_ACCOUNT_DELETE_WARNING)
            return False
        if not await ask(confirm, DELETE_CONFIRMATION):
            return False
        try:
            await self.api.delete_stock_account(account.id)
        except (JournalAPIError, httpx.HTTPError) as exc:
            self._report(exc)
            return False
        self.accounts = [item for item in self.accounts if item.id != account.id]
        self.bus.publish(Topic.STOCK_ACCOUNTS)
        self.bus.publish(Topic.PORTFOLIO)
        return True

    def _report(self, exc: JournalAPIError | httpx.HTTPError) -> None:
        report_failure(self.notifications, exc, "Lỗi: ")


__all__ = ["StockAccountsController", "DEFAULT_ACCOUNT_DELETE_WARNING"]
