"""Pydantic schemas for cost-basis adjustments (dividends, splits)."""

from __future__ import annotations

import enum
from datetime import date, datetime
from typing import Annotated, Literal, Union

from pydantic import Field, TypeAdapter

from .common import JournalModel


class AdjustmentType(str, enum.Enum):
    CASH_DIVIDEND = "CASH_DIVIDEND"
    STOCK_DIVIDEND = "STOCK_DIVIDEND"
    STOCK_SPLIT = "STOCK_SPLIT"
    REVERSE_SPLIT = "REVERSE_SPLIT"
    MERGER = "MERGER"
    SPINOFF = "SPINOFF"


ADJUSTMENT_TYPE_LABELS: dict[AdjustmentType, str] = {
    AdjustmentType.CASH_DIVIDEND: "Cổ tức tiền mặt",
    AdjustmentType.STOCK_DIVIDEND: "Cổ tức cổ phiếu",
    AdjustmentType.STOCK_SPLIT: "Chia tách cổ phiếu",
    AdjustmentType.REVERSE_SPLIT: "Gộp cổ phiếu",
    AdjustmentType.MERGER: "Sáp nhập",
    AdjustmentType.SPINOFF: "Tách công ty",
}


class CostBasisAdjustment(JournalModel):
    id: str
    ticker: str
    stock_account_id: str
    adjustment_type: AdjustmentType
    event_date: datetime
    dividend_per_share: float | None = None
    tax_rate: float | None = None
    split_ratio: float | None = None
    stock_dividend_ratio: float | None = None
    description: str | None = None
    external_ref: str | None = None
    is_active: bool = True
    processed_at: datetime | None = None


class _DividendEventBase(JournalModel):
    ticker: str
    stock_account_id: str
    event_date: date
    description: str | None = None
    external_ref: str | None = None


class CashDividendEvent(_DividendEventBase):
    adjustment_type: Literal["CASH_DIVIDEND"] = "CASH_DIVIDEND"
    dividend_per_share: float = Field(..., gt=0)
    tax_rate: float = Field(..., ge=0, le=1)


class StockDividendEvent(_DividendEventBase):
    adjustment_type: Literal["STOCK_DIVIDEND"] = "STOCK_DIVIDEND"
    stock_dividend_ratio: float = Field(..., gt=0)


class StockSplitEvent(_DividendEventBase):
    adjustment_type: Literal["STOCK_SPLIT"] = "STOCK_SPLIT"
    split_ratio: float = Field(..., gt=0)


DividendEvent = Annotated[
    Union[CashDividendEvent, StockDividendEvent, StockSplitEvent],
    Field(discriminator="adjustment_type"),
]
dividend_event_adapter: TypeAdapter[DividendEvent] = TypeAdapter(DividendEvent)


class AdjustmentList(JournalModel):
    adjustments: list[CostBasisAdjustment] = Field(default_factory=list)


__all__ = [
    "AdjustmentType",
    "ADJUSTMENT_TYPE_LABELS",
    "CostBasisAdjustment",
    "CashDividendEvent",
    "StockDividendEvent",
    "StockSplitEvent",
    "DividendEvent",
    "dividend_event_adapter",
    "AdjustmentList",
]
