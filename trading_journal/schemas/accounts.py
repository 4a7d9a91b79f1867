"""Pydantic schemas for stock (brokerage) accounts."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .common import JournalModel

DEFAULT_ACCOUNT_NAME = "Tài khoản mặc định"


class StockAccount(JournalModel):
    id: str
    name: str
    broker_name: str | None = None
    account_number: str | None = None
    description: str | None = None
    created_at: datetime | None = None

    @property
    def is_default(self) -> bool:
        return self.name == DEFAULT_ACCOUNT_NAME


class StockAccountCreateRequest(JournalModel):
    name: str = Field(..., min_length=1, max_length=100)
    broker_name: str | None = None
    account_number: str | None = None
    description: str | None = None


def sort_accounts(accounts: list[StockAccount]) -> list[StockAccount]:
    """Default account first, the rest by creation time."""

    return sorted(
        accounts,
        key=lambda account: (
            not account.is_default,
            account.created_at.timestamp() if account.created_at else 0.0,
        ),
    )


__all__ = [
    "DEFAULT_ACCOUNT_NAME",
    "StockAccount",
    "StockAccountCreateRequest",
    "sort_accounts",
]
