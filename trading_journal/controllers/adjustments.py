"""Cost-basis adjustment (dividend and split event) list."""

from __future__ import annotations

from typing import Any

import httpx

from trading_journal.errors import JournalAPIError
from trading_journal.schemas import AdjustmentList, CostBasisAdjustment
from trading_journal.services.invalidation import Topic
from trading_journal.state.filters import ADJUSTMENTS, FilterState

from .base import Confirm, PagedController, ask

DELETE_CONFIRMATION = "Bạn có chắc muốn xóa sự kiện quyền này?"
DELETED_MESSAGE = "✅ Đã xóa sự kiện quyền thành công!"
DELETE_FAILED_PREFIX = "❌ Lỗi khi xóa sự kiện quyền: "
TOGGLE_FAILED_PREFIX = "❌ Lỗi khi cập nhật trạng thái: "


class AdjustmentsController(PagedController[AdjustmentList]):
    schema = ADJUSTMENTS
    load_error_prefix = "Lỗi khi tải sự kiện quyền: "

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.adjustments: list[CostBasisAdjustment] = []

    async def _load_page(self, state: FilterState) -> AdjustmentList:
        return await self.api.list_adjustments(state.params())

    async def _apply_page(self, page: AdjustmentList, state: FilterState) -> None:
        self.adjustments = list(page.adjustments)
        self.total_count = len(self.adjustments)

    def _changed(self) -> None:
        self.bus.publish(Topic.ADJUSTMENTS)
        self.bus.publish(Topic.PORTFOLIO)

    async def toggle_active(self, adjustment: CostBasisAdjustment) -> bool:
        activate = not adjustment.is_active
        try:
            await self.api.set_adjustment_active(adjustment.id, activate)
        except (JournalAPIError, httpx.HTTPError) as exc:
            self._report(exc, TOGGLE_FAILED_PREFIX)
            return False
        self.notifications.show_success(
            f"✅ Đã {'kích hoạt' if activate else 'vô hiệu hóa'} sự kiện quyền!"
        )
        self._changed()
        await self._refresh(aggregates=False, force=True)
        return True

    async def delete(self, adjustment_id: str, confirm: Confirm | None) -> bool:
        if not await ask(confirm, DELETE_CONFIRMATION):
            return False
        try:
            await self.api.delete_adjustment(adjustment_id)
        except (JournalAPIError, httpx.HTTPError) as exc:
            self._report(exc, DELETE_FAILED_PREFIX)
            return False
        self.notifications.show_success(DELETED_MESSAGE)
        self._changed()
        await self._refresh(aggregates=False, force=True)
        return True


__all__ = ["AdjustmentsController", "DELETE_CONFIRMATION"]
