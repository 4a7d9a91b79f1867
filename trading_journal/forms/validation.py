"""Client-side validation of journal forms.

Each ``validate_*`` function takes raw form input (strings or numbers keyed by
the wire field names) and either returns the request model to submit or raises
:class:`~trading_journal.errors.FormValidationError` with one message per
offending field. Validation never touches the network.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Mapping
from zoneinfo import ZoneInfo

from trading_journal.config import get_settings
from trading_journal.errors import FormValidationError
from trading_journal.schemas import (
    AccountFeeCreateRequest,
    AdjustmentType,
    DividendEvent,
    FeeType,
    StockAccountCreateRequest,
    TransactionCreateRequest,
    TransactionType,
    dividend_event_adapter,
)

FormData = Mapping[str, Any]

TICKER_REQUIRED = "Mã cổ phiếu là bắt buộc"
QUANTITY_POSITIVE = "Số lượng phải là số dương"
PRICE_POSITIVE = "Giá phải là số dương"
TRANSACTION_ACCOUNT_REQUIRED = "Vui lòng chọn tài khoản chứng khoán"

FEE_ACCOUNT_REQUIRED = "Tài khoản chứng khoán là bắt buộc"
FEE_TYPE_REQUIRED = "Loại phí là bắt buộc"
FEE_AMOUNT_POSITIVE = "Số tiền phí phải là số dương"
FEE_DATE_REQUIRED = "Ngày phí là bắt buộc"

ACCOUNT_NAME_REQUIRED = "Tên tài khoản là bắt buộc"
ACCOUNT_NAME_TOO_LONG = "Tên tài khoản không được vượt quá 100 ký tự"
ACCOUNT_NAME_MAX_LENGTH = 100

EVENT_ACCOUNT_REQUIRED = "Tài khoản là bắt buộc"
EVENT_DATE_REQUIRED = "Ngày ex-dividend là bắt buộc"
DIVIDEND_PER_SHARE_POSITIVE = "Cổ tức mỗi cổ phiếu phải lớn hơn 0"
TAX_RATE_RANGE = "Thuế suất phải trong khoảng 0-1"
STOCK_DIVIDEND_RATIO_POSITIVE = "Tỷ lệ cổ tức cổ phiếu phải lớn hơn 0"
SPLIT_RATIO_POSITIVE = "Tỷ lệ chia tách phải lớn hơn 0"
UNSUPPORTED_EVENT_TYPE = "Loại sự kiện không được hỗ trợ"
TRANSACTION_TYPE_INVALID = "Loại giao dịch không hợp lệ"


def _text(data: FormData, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    return str(value).strip()


def _number(data: FormData, key: str) -> float | None:
    value = data.get(key)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        parsed = float(str(value).strip())
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


def _positive(data: FormData, key: str) -> float | None:
    number = _number(data, key)
    return number if number is not None and number > 0 else None


def _optional(data: FormData, key: str) -> str | None:
    return _text(data, key) or None


def validate_transaction(data: FormData, *, require_account: bool = True) -> TransactionCreateRequest:
    errors: dict[str, str] = {}
    ticker = _text(data, "ticker").upper()
    if not ticker:
        errors["ticker"] = TICKER_REQUIRED
    quantity = _positive(data, "quantity")
    if quantity is None:
        errors["quantity"] = QUANTITY_POSITIVE
    price = _positive(data, "price")
    if price is None:
        errors["price"] = PRICE_POSITIVE
    transaction_type = _text(data, "type").upper() or TransactionType.BUY.value
    if transaction_type not in TransactionType.__members__:
        errors["type"] = TRANSACTION_TYPE_INVALID
    account_id = _optional(data, "stockAccountId")
    if require_account and account_id is None:
        errors["stockAccountId"] = TRANSACTION_ACCOUNT_REQUIRED
    if errors:
        raise FormValidationError(errors)

    transaction_date = data.get("transactionDate") or datetime.now(ZoneInfo(get_settings().timezone))
    return TransactionCreateRequest(
        ticker=ticker,
        type=transaction_type,
        quantity=quantity,
        price=price,
        fee=_number(data, "fee") or 0.0,
        tax_rate=_number(data, "taxRate") or 0.0,
        transaction_date=transaction_date,
        notes=_optional(data, "notes"),
        stock_account_id=account_id,
    )


def validate_account_fee(data: FormData) -> AccountFeeCreateRequest:
    errors: dict[str, str] = {}
    if not _text(data, "stockAccountId"):
        errors["stockAccountId"] = FEE_ACCOUNT_REQUIRED
    if _text(data, "feeType") not in FeeType.__members__:
        errors["feeType"] = FEE_TYPE_REQUIRED
    amount = _positive(data, "amount")
    if amount is None:
        errors["amount"] = FEE_AMOUNT_POSITIVE
    fee_date = _parse_date(data.get("feeDate"))
    if fee_date is None:
        errors["feeDate"] = FEE_DATE_REQUIRED
    if errors:
        raise FormValidationError(errors)

    return AccountFeeCreateRequest(
        stock_account_id=_text(data, "stockAccountId"),
        fee_type=_text(data, "feeType"),
        amount=amount,
        description=_optional(data, "description"),
        fee_date=fee_date,
        reference_number=_optional(data, "referenceNumber"),
        attachment_url=_optional(data, "attachmentUrl"),
    )


def validate_stock_account(data: FormData) -> StockAccountCreateRequest:
    name = _text(data, "name")
    if not name:
        raise FormValidationError({"name": ACCOUNT_NAME_REQUIRED})
    if len(name) > ACCOUNT_NAME_MAX_LENGTH:
        raise FormValidationError({"name": ACCOUNT_NAME_TOO_LONG})
    return StockAccountCreateRequest(
        name=name,
        broker_name=_optional(data, "brokerName"),
        account_number=_optional(data, "accountNumber"),
        description=_optional(data, "description"),
    )


def validate_dividend_event(data: FormData) -> DividendEvent:
    """Validate a dividend/split form and build the matching event variant."""

    errors: dict[str, str] = {}
    ticker = _text(data, "ticker").upper()
    if not ticker:
        errors["ticker"] = TICKER_REQUIRED
    if not _text(data, "stockAccountId"):
        errors["stockAccountId"] = EVENT_ACCOUNT_REQUIRED
    event_date = _parse_date(data.get("eventDate"))
    if event_date is None:
        errors["eventDate"] = EVENT_DATE_REQUIRED

    adjustment_type = _text(data, "adjustmentType") or AdjustmentType.CASH_DIVIDEND.value
    payload: dict[str, Any] = {
        "adjustmentType": adjustment_type,
        "ticker": ticker,
        "stockAccountId": _text(data, "stockAccountId"),
        "eventDate": event_date,
        "description": _optional(data, "description"),
        "externalRef": _optional(data, "externalRef"),
    }

    if adjustment_type == AdjustmentType.CASH_DIVIDEND.value:
        dividend = _positive(data, "dividendPerShare")
        if dividend is None:
            errors["dividendPerShare"] = DIVIDEND_PER_SHARE_POSITIVE
        tax_rate = _number(data, "taxRate")
        if tax_rate is None or not 0 <= tax_rate <= 1:
            errors["taxRate"] = TAX_RATE_RANGE
        payload.update(dividendPerShare=dividend, taxRate=tax_rate)
    elif adjustment_type == AdjustmentType.STOCK_DIVIDEND.value:
        ratio = _positive(data, "stockDividendRatio")
        if ratio is None:
            errors["stockDividendRatio"] = STOCK_DIVIDEND_RATIO_POSITIVE
        payload["stockDividendRatio"] = ratio
    elif adjustment_type == AdjustmentType.STOCK_SPLIT.value:
        ratio = _positive(data, "splitRatio")
        if ratio is None:
            errors["splitRatio"] = SPLIT_RATIO_POSITIVE
        payload["splitRatio"] = ratio
    else:
        errors["adjustmentType"] = UNSUPPORTED_EVENT_TYPE

    if errors:
        raise FormValidationError(errors)
    return dividend_event_adapter.validate_python(payload)


def _parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


__all__ = [
    "validate_transaction",
    "validate_account_fee",
    "validate_stock_account",
    "validate_dividend_event",
    "TAX_RATE_RANGE",
    "TICKER_REQUIRED",
    "QUANTITY_POSITIVE",
    "PRICE_POSITIVE",
    "TRANSACTION_ACCOUNT_REQUIRED",
    "FEE_ACCOUNT_REQUIRED",
    "FEE_TYPE_REQUIRED",
    "FEE_AMOUNT_POSITIVE",
    "FEE_DATE_REQUIRED",
    "ACCOUNT_NAME_REQUIRED",
    "ACCOUNT_NAME_TOO_LONG",
    "EVENT_ACCOUNT_REQUIRED",
    "EVENT_DATE_REQUIRED",
    "DIVIDEND_PER_SHARE_POSITIVE",
    "STOCK_DIVIDEND_RATIO_POSITIVE",
    "SPLIT_RATIO_POSITIVE",
]
