"""Joining holdings with live prices."""

from __future__ import annotations

import math

import pytest

from trading_journal.services.enrichment import enrich_holding, enrich_holdings, extract_price, summarize


def _holding(ticker: str, quantity: float, avg_cost: float) -> dict:
    return {"ticker": ticker, "quantity": quantity, "avgCost": avg_cost, "stockAccountId": "acc-1"}


def test_priced_holding():
    row = enrich_holding(_holding("FPT", 100, 100_000), {"FPT": 120_000})

    assert row.current_price == 120_000
    assert row.market_value == 12_000_000
    assert row.unrealized_pl == 2_000_000
    assert row.pl_percentage == pytest.approx(20.0)


def test_zero_cost_basis_reports_zero_percent():
    row = enrich_holding(_holding("VNM", 50, 0), {"VNM": 70_000})

    assert row.market_value == 3_500_000
    assert row.unrealized_pl == 3_500_000
    assert row.pl_percentage == 0.0


@pytest.mark.parametrize("quote", [None, {"error": "not found"}, float("nan"), True, "120000"])
def test_unusable_quotes_leave_fields_empty(quote):
    row = enrich_holding(_holding("HPG", 10, 25_000), {"HPG": quote})

    assert row.current_price is None
    assert row.market_value is None
    assert row.unrealized_pl is None
    assert row.pl_percentage is None


def test_extract_price_rejects_infinity():
    assert extract_price(math.inf) is None
    assert extract_price(10) == 10.0


def test_allocation_and_totals():
    rows = enrich_holdings(
        [_holding("FPT", 10, 100_000), _holding("VNM", 10, 50_000), _holding("HPG", 10, 20_000)],
        {"FPT": 150_000, "VNM": 50_000},
    )

    assert [row.allocation_percentage for row in rows] == [pytest.approx(75.0), pytest.approx(25.0), 0.0]
    totals = summarize(rows)
    assert totals.total_cost == 1_700_000
    assert totals.total_market_value == 2_000_000
    assert totals.total_unrealized_pl == 500_000
    assert totals.priced_count == 2


def test_totals_without_prices():
    totals = summarize(enrich_holdings([_holding("FPT", 10, 100_000)], None))

    assert totals.total_cost == 1_000_000
    assert totals.total_market_value is None
    assert totals.total_unrealized_pl is None


def test_enrichment_is_rebuilt_each_time():
    holdings = [_holding("FPT", 10, 100_000)]
    enrich_holdings(holdings, {"FPT": 110_000})
    rows = enrich_holdings(holdings, {})

    assert rows[0].current_price is None
    assert "currentPrice" not in holdings[0]
