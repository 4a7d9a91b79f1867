"""Pydantic schemas for transactions and account transfers."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field

from .common import JournalModel


class TransactionType(str, enum.Enum):
    BUY = "BUY"
    SELL = "SELL"


class Transaction(JournalModel):
    id: str
    ticker: str
    type: TransactionType
    quantity: float
    price: float
    fee: float = 0.0
    tax_rate: float = 0.0
    transaction_date: datetime
    notes: str | None = None
    stock_account_id: str | None = None
    calculated_pl: float | None = Field(
        default=None, description="Realized P/L, only populated for SELL transactions"
    )


class TransactionCreateRequest(JournalModel):
    ticker: str = Field(..., examples=["FPT"])
    type: TransactionType
    quantity: float = Field(..., gt=0)
    price: float = Field(..., gt=0)
    fee: float = 0.0
    tax_rate: float = 0.0
    transaction_date: datetime
    notes: str | None = None
    stock_account_id: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "ticker": "FPT",
                "type": "BUY",
                "quantity": 100,
                "price": 120000,
                "fee": 180,
                "taxRate": 0,
                "transactionDate": "2024-03-01T09:15:00+07:00",
                "notes": "Initial position",
                "stockAccountId": "acc_default",
            }
        }
    )


class TransactionPage(JournalModel):
    transactions: list[Transaction] = Field(default_factory=list)
    total_count: int = 0
    profit_stats: dict[str, Any] | None = None


class TransactionListView(JournalModel):
    """Resolved transactions page returned by the gateway."""

    transactions: list[Transaction] = Field(default_factory=list)
    total_count: int = 0
    total_pages: int = 0
    page: int = 1
    page_size: int = 10
    profit_stats: dict[str, Any] | None = None
    query: str = ""
    pages: list[int | str] = Field(default_factory=list)


class TransferRequest(JournalModel):
    tickers: list[str] = Field(..., min_length=1)
    target_account_id: str


class TransferResult(JournalModel):
    message: str | None = None
    transferred_count: int | None = None


__all__ = [
    "TransactionType",
    "Transaction",
    "TransactionCreateRequest",
    "TransactionPage",
    "TransactionListView",
    "TransferRequest",
    "TransferResult",
]
