"""Transactions view: filtered list, realized P/L statistics and edits."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from trading_journal.errors import JournalAPIError
from trading_journal.forms.validation import validate_dividend_event, validate_transaction
from trading_journal.schemas import CostBasisAdjustment, Transaction, TransactionPage
from trading_journal.services.invalidation import Topic
from trading_journal.state.filters import TRANSACTIONS, FilterState

from .base import Confirm, PagedController, ask

logger = logging.getLogger(__name__)

DELETE_CONFIRMATION = "Bạn có chắc chắn muốn xóa giao dịch này không? Hành động này không thể hoàn tác."
CREATED_MESSAGE = "Thêm giao dịch thành công!"
UPDATED_MESSAGE = "Cập nhật giao dịch thành công!"
DELETED_MESSAGE = "Xóa giao dịch thành công!"


class TransactionsController(PagedController[TransactionPage]):
    schema = TRANSACTIONS
    load_error_prefix = "Lỗi khi tải giao dịch: "

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.transactions: list[Transaction] = []
        self.profit_stats: dict[str, Any] | None = None

    async def _load_page(self, state: FilterState) -> TransactionPage:
        return await self.api.list_transactions(state.params())

    async def _apply_page(self, page: TransactionPage, state: FilterState) -> None:
        self.transactions = list(page.transactions)
        self.total_count = page.total_count

    async def _load_aggregates(self, state: FilterState) -> dict[str, Any]:
        return await self.api.get_profit_stats(state.params(include_pagination=False))

    def _apply_aggregates(self, aggregates: dict[str, Any]) -> None:
        self.profit_stats = aggregates

    def _changed(self) -> None:
        self.bus.publish(Topic.TRANSACTIONS)
        self.bus.publish(Topic.PORTFOLIO)

    async def create(self, form: Mapping[str, Any]) -> Transaction | None:
        """Validate and create a transaction.

        Raises :class:`FormValidationError` before any request when the form is
        invalid.
        """

        request = validate_transaction(form)
        try:
            created = await self.api.create_transaction(request.to_wire(exclude_none=True))
        except (JournalAPIError, httpx.HTTPError) as exc:
            self._report(exc)
            return None
        self.notifications.show_success(CREATED_MESSAGE)
        self._changed()
        await self._refresh(aggregates=True)
        return created

    async def update(self, transaction_id: str, form: Mapping[str, Any]) -> Transaction | None:
        request = validate_transaction(form)
        try:
            updated = await self.api.update_transaction(transaction_id, request.to_wire(exclude_none=True))
        except (JournalAPIError, httpx.HTTPError) as exc:
            self._report(exc)
            return None
        self.notifications.show_success(UPDATED_MESSAGE)
        self._changed()
        await self._refresh(aggregates=True)
        return updated

    async def delete(self, transaction_id: str, confirm: Confirm | None) -> bool:
        if not await ask(confirm, DELETE_CONFIRMATION):
            return False
        try:
            await self.api.delete_transaction(transaction_id)
        except (JournalAPIError, httpx.HTTPError) as exc:
            self._report(exc)
            return False
        self.transactions = [item for item in self.transactions if item.id != transaction_id]
        self.notifications.show_success(DELETED_MESSAGE)
        self._changed()
        await self._refresh(aggregates=True)
        return True

    async def create_dividend_event(self, form: Mapping[str, Any]) -> CostBasisAdjustment | None:
        event = validate_dividend_event(form)
        try:
            adjustment = await self.api.create_adjustment(event)
        except (JournalAPIError, httpx.HTTPError) as exc:
            self._report(exc)
            return None
        self.notifications.show_success(
            f"✅ {adjustment.adjustment_type.value} cho {adjustment.ticker} đã được tạo thành công!"
        )
        self.bus.publish(Topic.ADJUSTMENTS)
        self.bus.publish(Topic.PORTFOLIO)
        await self._refresh(aggregates=True)
        return adjustment


__all__ = ["TransactionsController", "DELETE_CONFIRMATION"]
