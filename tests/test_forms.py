"""Client-side form validation."""

from __future__ import annotations

from datetime import date

import pytest

from trading_journal.errors import FormValidationError
from trading_journal.forms.validation import (
    ACCOUNT_NAME_TOO_LONG,
    TAX_RATE_RANGE,
    validate_account_fee,
    validate_dividend_event,
    validate_stock_account,
    validate_transaction,
)
from trading_journal.schemas import CashDividendEvent, StockSplitEvent


def _dividend_form(**overrides):
    form = {
        "adjustmentType": "CASH_DIVIDEND",
        "ticker": "fpt",
        "stockAccountId": "acc-1",
        "eventDate": "2024-06-14",
        "dividendPerShare": "2000",
        "taxRate": "0.05",
    }
    form.update(overrides)
    return form


def test_cash_dividend_builds_typed_event():
    event = validate_dividend_event(_dividend_form())

    assert isinstance(event, CashDividendEvent)
    assert event.ticker == "FPT"
    assert event.event_date == date(2024, 6, 14)
    assert event.to_wire(exclude_none=True) == {
        "adjustmentType": "CASH_DIVIDEND",
        "ticker": "FPT",
        "stockAccountId": "acc-1",
        "eventDate": "2024-06-14",
        "dividendPerShare": 2000.0,
        "taxRate": 0.05,
    }


@pytest.mark.parametrize("tax_rate", [None, "", "1.5", "-0.1", "abc"])
def test_cash_dividend_requires_tax_rate_in_range(tax_rate):
    with pytest.raises(FormValidationError) as excinfo:
        validate_dividend_event(_dividend_form(taxRate=tax_rate))

    assert excinfo.value.errors == {"taxRate": TAX_RATE_RANGE}
    assert str(excinfo.value) == "Thuế suất phải trong khoảng 0-1"


def test_tax_rate_bounds_are_inclusive():
    assert validate_dividend_event(_dividend_form(taxRate=0)).tax_rate == 0
    assert validate_dividend_event(_dividend_form(taxRate=1)).tax_rate == 1


def test_split_event_ignores_cash_fields():
    event = validate_dividend_event(
        _dividend_form(adjustmentType="STOCK_SPLIT", splitRatio="2", taxRate=None, dividendPerShare=None)
    )

    assert isinstance(event, StockSplitEvent)
    assert event.split_ratio == 2


def test_unsupported_event_type():
    with pytest.raises(FormValidationError) as excinfo:
        validate_dividend_event(_dividend_form(adjustmentType="MERGER"))
    assert "adjustmentType" in excinfo.value.errors


def test_missing_date_and_account_are_reported_together():
    with pytest.raises(FormValidationError) as excinfo:
        validate_dividend_event(_dividend_form(eventDate="", stockAccountId=" "))
    assert set(excinfo.value.errors) == {"eventDate", "stockAccountId"}


def test_transaction_form():
    request = validate_transaction(
        {
            "ticker": " hpg ",
            "type": "sell",
            "quantity": "100",
            "price": "25000",
            "fee": "",
            "transactionDate": "2024-03-01T09:15:00+07:00",
            "stockAccountId": "acc-1",
        }
    )

    assert request.ticker == "HPG"
    assert request.type.value == "SELL"
    assert request.fee == 0.0
    assert request.to_wire(exclude_none=True)["stockAccountId"] == "acc-1"


def test_transaction_form_errors():
    with pytest.raises(FormValidationError) as excinfo:
        validate_transaction({"ticker": "", "quantity": "0", "price": "-1", "type": "HOLD"})

    assert set(excinfo.value.errors) == {"ticker", "quantity", "price", "type", "stockAccountId"}


def test_account_fee_form():
    fee = validate_account_fee(
        {"stockAccountId": "acc-1", "feeType": "CUSTODY_FEE", "amount": "12000", "feeDate": "2024-05-01"}
    )
    assert fee.fee_date == date(2024, 5, 1)

    with pytest.raises(FormValidationError) as excinfo:
        validate_account_fee({"stockAccountId": "acc-1", "feeType": "PARKING", "amount": 0, "feeDate": "x"})
    assert set(excinfo.value.errors) == {"feeType", "amount", "feeDate"}


def test_stock_account_name_length():
    assert validate_stock_account({"name": " SSI "}).name == "SSI"
    with pytest.raises(FormValidationError) as excinfo:
        validate_stock_account({"name": "x" * 101})
    assert excinfo.value.errors == {"name": ACCOUNT_NAME_TOO_LONG}
