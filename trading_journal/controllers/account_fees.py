"""Account fees view."""

from __future__ import annotations

from typing import Any, Mapping

import httpx

from trading_journal.errors import JournalAPIError
from trading_journal.forms.validation import validate_account_fee
from trading_journal.schemas import AccountFee, AccountFeePage
from trading_journal.services.invalidation import Topic
from trading_journal.state.filters import ACCOUNT_FEES, FilterState

from .base import Confirm, PagedController, ask

DELETE_CONFIRMATION = "Bạn có chắc chắn muốn xóa phí này không?"
SAVED_MESSAGE = "Lưu phí tài khoản thành công"
DELETED_MESSAGE = "Xóa phí tài khoản thành công"


class AccountFeesController(PagedController[AccountFeePage]):
    schema = ACCOUNT_FEES

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.fees: list[AccountFee] = []
        self.summary_stats: list[dict[str, Any]] = []

    async def _load_page(self, state: FilterState) -> AccountFeePage:
        return await self.api.list_account_fees(state.params())

    async def _apply_page(self, page: AccountFeePage, state: FilterState) -> None:
        self.fees = list(page.account_fees)
        self.summary_stats = list(page.summary_stats)
        self.total_count = page.total_count

    async def save(self, form: Mapping[str, Any], fee_id: str | None = None) -> AccountFee | None:
        """Create a fee, or update ``fee_id`` when given."""

        payload = validate_account_fee(form).to_wire(exclude_none=True)
        try:
            if fee_id is None:
                fee = await self.api.create_account_fee(payload)
            else:
                fee = await self.api.update_account_fee(fee_id, payload)
        except (JournalAPIError, httpx.HTTPError) as exc:
            self._report(exc)
            return None
        self.notifications.show_success(SAVED_MESSAGE)
        self.bus.publish(Topic.ACCOUNT_FEES)
        await self._refresh(aggregates=True)
        return fee

    async def delete(self, fee_id: str, confirm: Confirm | None) -> bool:
        if not await ask(confirm, DELETE_CONFIRMATION):
            return False
        try:
            await self.api.delete_account_fee(fee_id)
        except (JournalAPIError, httpx.HTTPError) as exc:
            self._report(exc)
            return False
        self.notifications.show_success(DELETED_MESSAGE)
        self.bus.publish(Topic.ACCOUNT_FEES)
        await self._refresh(aggregates=True)
        return True


__all__ = ["AccountFeesController", "DELETE_CONFIRMATION"]
