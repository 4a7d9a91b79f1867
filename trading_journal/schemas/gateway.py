"""Request and response bodies that only exist on the gateway surface."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from .common import JournalModel


class SelectedHolding(JournalModel):
    ticker: str
    stock_account_id: str | None = None
    account_name: str | None = None


class TransferBody(JournalModel):
    selected: list[SelectedHolding] = Field(..., min_length=1)
    target_account_id: str


class MarketQuotes(JournalModel):
    tickers: list[str] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None


class PriceStepInfo(JournalModel):
    price: float
    step: int
    rounded_price: float
    is_valid: bool
    next_up: float
    next_down: float
    formatted: str


class BenchmarkRequest(JournalModel):
    portfolio_returns: list[float] = Field(default_factory=list)
    market_returns: list[float] = Field(default_factory=list)
    risk_free_rate: float | None = None


class ActiveToggle(JournalModel):
    is_active: bool


__all__ = [
    "SelectedHolding",
    "TransferBody",
    "MarketQuotes",
    "PriceStepInfo",
    "BenchmarkRequest",
    "ActiveToggle",
]
