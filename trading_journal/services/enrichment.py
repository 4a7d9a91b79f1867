"""Join portfolio holdings with market prices."""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping, Sequence

from trading_journal.schemas import EnrichedHolding, PortfolioHolding, PortfolioTotals

logger = logging.getLogger(__name__)


def extract_price(value: Any) -> float | None:
    """Return ``value`` as a price if it is a finite number, else ``None``.

    The market data endpoint answers ``{"error": ...}`` or ``null`` for tickers
    it could not price; those, booleans and NaN all count as "no price".
    """

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _as_holding(holding: PortfolioHolding | Mapping[str, Any]) -> PortfolioHolding:
    if isinstance(holding, PortfolioHolding):
        return holding
    return PortfolioHolding.model_validate(holding)


def enrich_holding(
    holding: PortfolioHolding | Mapping[str, Any],
    market_data: Mapping[str, Any],
) -> EnrichedHolding:
    base = _as_holding(holding)
    fields = base.model_dump()
    price = extract_price(market_data.get(base.ticker))
    if price is None:
        return EnrichedHolding(**fields)

    market_value = base.quantity * price
    unrealized_pl = market_value - base.quantity * base.avg_cost
    # Zero cost basis (shares received as dividend) reports 0% rather than dividing by zero
    pl_percentage = (price - base.avg_cost) / base.avg_cost * 100 if base.avg_cost > 0 else 0.0
    return EnrichedHolding(
        **fields,
        current_price=price,
        market_value=market_value,
        unrealized_pl=unrealized_pl,
        pl_percentage=pl_percentage,
    )


def enrich_holdings(
    holdings: Iterable[PortfolioHolding | Mapping[str, Any]],
    market_data: Mapping[str, Any] | None,
) -> list[EnrichedHolding]:
    """Enrich every holding and attach its share of the total market value.

    The result is rebuilt from scratch on every call; nothing from a previous
    enrichment is carried over.
    """

    prices = market_data or {}
    enriched = [enrich_holding(holding, prices) for holding in holdings]
    total_market_value = sum(row.market_value or 0.0 for row in enriched)
    for row in enriched:
        if total_market_value > 0 and row.market_value:
            row.allocation_percentage = row.market_value / total_market_value * 100
        else:
            row.allocation_percentage = 0.0

    missing = [row.ticker for row in enriched if row.current_price is None]
    if missing and prices:
        logger.debug("No market price for %s", ", ".join(missing))
    return enriched


def summarize(rows: Sequence[EnrichedHolding]) -> PortfolioTotals:
    """Portfolio totals; market totals stay ``None`` until any row is priced."""

    total_cost = sum(row.quantity * row.avg_cost for row in rows)
    priced = [row for row in rows if row.market_value is not None]
    if not priced:
        return PortfolioTotals(total_cost=total_cost)
    return PortfolioTotals(
        total_cost=total_cost,
        total_market_value=sum(row.market_value or 0.0 for row in priced),
        total_unrealized_pl=sum(row.unrealized_pl or 0.0 for row in priced),
        priced_count=len(priced),
    )


__all__ = ["extract_price", "enrich_holding", "enrich_holdings", "summarize"]
