"""Pydantic schemas for portfolio holdings and enriched views."""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field

from .common import JournalModel


class StockAccountRef(JournalModel):
    id: str
    name: str | None = None
    broker_name: str | None = None


class PortfolioHolding(JournalModel):
    """Open position as computed by the journal API."""

    model_config = ConfigDict(extra="allow")

    ticker: str
    quantity: float
    avg_cost: float
    stock_account_id: str | None = None
    stock_account: StockAccountRef | None = None


class EnrichedHolding(PortfolioHolding):
    """Holding joined with its latest close price.

    The four price-derived fields stay ``None`` until a finite price is known
    for the ticker, so "no market data" never reads as a zero P/L.
    """

    current_price: float | None = None
    market_value: float | None = None
    unrealized_pl: float | None = Field(default=None, alias="unrealizedPL")
    pl_percentage: float | None = None
    allocation_percentage: float = 0.0


class PortfolioTotals(JournalModel):
    total_cost: float = 0.0
    total_market_value: float | None = None
    total_unrealized_pl: float | None = Field(default=None, alias="totalUnrealizedPL")
    priced_count: int = 0


class PortfolioPage(JournalModel):
    portfolio: list[PortfolioHolding] = Field(default_factory=list)
    total_count: int = 0
    total_pages: int = 0
    total_summary: dict[str, Any] | None = None
    all_portfolio_for_charts: list[PortfolioHolding] = Field(default_factory=list)
    account_allocations: list[dict[str, Any]] = Field(default_factory=list)


class PortfolioView(JournalModel):
    """Resolved portfolio page returned by the gateway."""

    rows: list[EnrichedHolding] = Field(default_factory=list)
    chart_rows: list[EnrichedHolding] = Field(default_factory=list)
    totals: PortfolioTotals = Field(default_factory=PortfolioTotals)
    total_count: int = 0
    total_pages: int = 0
    page: int = 1
    page_size: int = 10
    query: str = ""
    account_allocations: list[dict[str, Any]] = Field(default_factory=list)
    market_data_error: str | None = None


__all__ = [
    "StockAccountRef",
    "PortfolioHolding",
    "EnrichedHolding",
    "PortfolioTotals",
    "PortfolioPage",
    "PortfolioView",
]
