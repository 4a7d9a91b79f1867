"""Filter state, URL sync and page arithmetic."""

from __future__ import annotations

import pytest

from trading_journal.state.filters import ACCOUNT_FEES, PORTFOLIO, TRANSACTIONS, FilterState
from trading_journal.state.pagination import ELLIPSIS, clamp_page, pagination_items, total_pages


def test_query_round_trip_ignores_unknown_keys():
    state = FilterState.from_query(TRANSACTIONS, "?ticker=FPT&page=3&utm_source=mail")

    assert state["ticker"] == "FPT"
    assert state.page == 3
    assert state.to_url() == "/transactions?ticker=FPT&sortBy=transactionDate&sortOrder=desc&page=3&pageSize=10"


def test_filter_change_resets_page():
    state = FilterState.from_query(TRANSACTIONS, "page=4")
    transition = state.apply(ticker="VNM")

    assert transition.filters_changed
    assert transition.state["page"] == "1"
    assert "page=1&" in transition.url


def test_page_size_change_resets_page_in_state_and_url():
    state = FilterState.from_query(TRANSACTIONS, "page=3")
    transition = state.apply(pageSize=25)

    assert not transition.filters_changed
    assert transition.state.page == 1
    assert transition.state.page_size == 25
    assert transition.url.endswith("page=1&pageSize=25")


def test_page_change_keeps_filters():
    state = FilterState.from_query(ACCOUNT_FEES, "feeType=CUSTODY_FEE")
    transition = state.with_page(2)

    assert not transition.filters_changed
    assert transition.state["feeType"] == "CUSTODY_FEE"
    assert transition.state.page == 2


def test_params_split_filters_from_pagination():
    state = FilterState.from_query(TRANSACTIONS, "ticker=FPT&page=2")

    assert state.params(include_pagination=False) == {
        "ticker": "FPT",
        "sortBy": "transactionDate",
        "sortOrder": "desc",
    }
    assert state.params()["page"] == "2"


def test_unknown_filter_key_is_rejected():
    with pytest.raises(ValueError):
        FilterState.initial(TRANSACTIONS).apply(symbol="FPT")


def test_portfolio_force_refresh_keys():
    state = FilterState.initial(PORTFOLIO)

    assert state.apply(stockAccountId="acc-2").force_refresh
    assert state.apply(includeAdjustments=True).state["includeAdjustments"] == "true"
    assert not state.apply(stockAccountId="").force_refresh
    assert not state.apply(sortBy="marketValue").force_refresh


def test_reset_restores_defaults():
    state = FilterState.from_query(ACCOUNT_FEES, "search=lưu ký&page=5")
    transition = state.reset()

    assert transition.state.values == dict(ACCOUNT_FEES.defaults)
    assert transition.url == "/account-fees?sortBy=feeDate&sortOrder=desc&page=1&pageSize=10"


def test_portfolio_defaults():
    state = FilterState.initial(PORTFOLIO)

    assert state.page_size == 25
    assert state.params() == {"sortBy": "totalCost", "sortOrder": "desc", "page": "1", "pageSize": "25"}


@pytest.mark.parametrize(
    ("total", "size", "pages"),
    [(97, 25, 4), (100, 25, 4), (0, 25, 0), (1, 10, 1), (10, 0, 0)],
)
def test_total_pages(total, size, pages):
    assert total_pages(total, size) == pages


def test_clamp_page():
    assert clamp_page(5, 3) == 1
    assert clamp_page(2, 3) == 2
    assert clamp_page(4, 0) == 4
    assert clamp_page(0, 3) == 1


def test_pagination_items():
    assert pagination_items(1, 1) == []
    assert pagination_items(2, 5) == [1, 2, 3, 4, 5]
    assert pagination_items(1, 10) == [1, 2, ELLIPSIS, 10]
    assert pagination_items(5, 10) == [1, ELLIPSIS, 4, 5, 6, ELLIPSIS, 10]
    assert pagination_items(3, 10) == [1, 2, 3, 4, ELLIPSIS, 10]
    assert pagination_items(10, 10) == [1, ELLIPSIS, 9, 10]


def test_reapplying_the_same_filter_value_keeps_page_and_statistics():
    state = FilterState.from_query(TRANSACTIONS, "ticker=FPT&page=3")
    transition = state.apply(ticker="FPT")

    assert not transition.filters_changed
    assert transition.state.page == 3
    assert transition.url == state.to_url()
