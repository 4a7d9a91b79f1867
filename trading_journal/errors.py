"""Error types shared by the journal client, controllers and gateway."""

from __future__ import annotations

from typing import Any, Mapping

GENERIC_ERROR_MESSAGE = "Đã xảy ra lỗi khi kết nối tới máy chủ"

# Statuses the journal API uses to reject a request on business grounds,
# e.g. deleting the default stock account.
BUSINESS_RULE_STATUSES = frozenset({400, 403, 409, 422})


class JournalError(RuntimeError):
    """Base class for Trading Journal client errors."""


class JournalAPIError(JournalError):
    """Raised when the Trading Journal API answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str | None = None, detail: Any = None) -> None:
        self.status_code = status_code
        self.message = message or GENERIC_ERROR_MESSAGE
        self.detail = detail
        super().__init__(self.message)

    @property
    def is_business_rule(self) -> bool:
        return self.status_code in BUSINESS_RULE_STATUSES


class MarketDataError(JournalAPIError):
    """Raised when the market data endpoint fails."""

    def __init__(self, status_code: int, body: str, elapsed_ms: int) -> None:
        self.body = body
        self.elapsed_ms = elapsed_ms
        super().__init__(status_code, f"HTTP {status_code}: {body} ({elapsed_ms}ms)", detail=body)


class FormValidationError(JournalError):
    """Raised when form input fails client-side validation.

    ``errors`` maps the offending wire field name (``taxRate``, ``amount``...)
    to the message shown next to that field.
    """

    def __init__(self, errors: Mapping[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__(next(iter(self.errors.values()), "Vui lòng kiểm tra lại thông tin"))


__all__ = [
    "GENERIC_ERROR_MESSAGE",
    "JournalError",
    "JournalAPIError",
    "MarketDataError",
    "FormValidationError",
]
