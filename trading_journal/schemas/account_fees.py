"""Pydantic schemas for account fees."""

from __future__ import annotations

import enum
from datetime import date, datetime
from typing import Any

from pydantic import Field

from .common import JournalModel


class FeeType(str, enum.Enum):
    CUSTODY_FEE = "CUSTODY_FEE"
    ADVANCE_SELLING_FEE = "ADVANCE_SELLING_FEE"
    ACCOUNT_MAINTENANCE = "ACCOUNT_MAINTENANCE"
    TRANSFER_FEE = "TRANSFER_FEE"
    DIVIDEND_TAX = "DIVIDEND_TAX"
    INTEREST_FEE = "INTEREST_FEE"
    DATA_FEED_FEE = "DATA_FEED_FEE"
    SMS_NOTIFICATION_FEE = "SMS_NOTIFICATION_FEE"
    STATEMENT_FEE = "STATEMENT_FEE"
    WITHDRAWAL_FEE = "WITHDRAWAL_FEE"
    OTHER_FEE = "OTHER_FEE"


FEE_TYPE_LABELS: dict[FeeType, str] = {
    FeeType.CUSTODY_FEE: "Phí lưu ký chứng khoán",
    FeeType.ADVANCE_SELLING_FEE: "Phí ứng trước tiền bán",
    FeeType.ACCOUNT_MAINTENANCE: "Phí duy trì tài khoản",
    FeeType.TRANSFER_FEE: "Phí chuyển nhượng",
    FeeType.DIVIDEND_TAX: "Thuế cổ tức",
    FeeType.INTEREST_FEE: "Phí lãi vay margin",
    FeeType.DATA_FEED_FEE: "Phí cung cấp dữ liệu",
    FeeType.SMS_NOTIFICATION_FEE: "Phí SMS thông báo",
    FeeType.STATEMENT_FEE: "Phí sao kê",
    FeeType.WITHDRAWAL_FEE: "Phí rút tiền",
    FeeType.OTHER_FEE: "Phí khác",
}


class AccountFee(JournalModel):
    id: str
    stock_account_id: str
    fee_type: FeeType
    amount: float
    description: str | None = None
    fee_date: datetime
    reference_number: str | None = None
    attachment_url: str | None = None


class AccountFeeCreateRequest(JournalModel):
    stock_account_id: str
    fee_type: FeeType
    amount: float = Field(..., gt=0)
    description: str | None = None
    fee_date: date
    reference_number: str | None = None
    attachment_url: str | None = None


class AccountFeePage(JournalModel):
    account_fees: list[AccountFee] = Field(default_factory=list)
    total_count: int = 0
    summary_stats: list[dict[str, Any]] = Field(default_factory=list)



class AccountFeeListView(JournalModel):
    fees: list[AccountFee] = Field(default_factory=list)
    summary_stats: list[dict[str, Any]] = Field(default_factory=list)
    total_count: int = 0
    total_pages: int = 0
    page: int = 1
    page_size: int = 10
    query: str = ""
    pages: list[int | str] = Field(default_factory=list)


__all__ = [
    "FeeType",
    "FEE_TYPE_LABELS",
    "AccountFee",
    "AccountFeeCreateRequest",
    "AccountFeePage",
    "AccountFeeListView",
]
