"""URL-synchronised filter and pagination state for the list views.

A :class:`FilterState` is immutable. :meth:`FilterState.apply` returns a
:class:`FilterTransition` describing the new state, whether the change touched
anything beyond pagination, and the URL to write back to the address bar.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.parse import parse_qsl, urlencode

PAGE = "page"
PAGE_SIZE = "pageSize"
PAGINATION_KEYS = frozenset({PAGE, PAGE_SIZE})


@dataclass(frozen=True)
class FilterSchema:
    path: str
    defaults: Mapping[str, str]
    force_refresh_keys: frozenset[str] = field(default_factory=frozenset)

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(self.defaults)


TRANSACTIONS = FilterSchema(
    path="/transactions",
    defaults={
        "ticker": "",
        "type": "",
        "stockAccountId": "",
        "dateFrom": "",
        "dateTo": "",
        "minAmount": "",
        "maxAmount": "",
        "sortBy": "transactionDate",
        "sortOrder": "desc",
        PAGE: "1",
        PAGE_SIZE: "10",
    },
)

ACCOUNT_FEES = FilterSchema(
    path="/account-fees",
    defaults={
        "feeType": "",
        "stockAccountId": "",
        "dateFrom": "",
        "dateTo": "",
        "minAmount": "",
        "maxAmount": "",
        "search": "",
        "sortBy": "feeDate",
        "sortOrder": "desc",
        PAGE: "1",
        PAGE_SIZE: "10",
    },
)

PORTFOLIO = FilterSchema(
    path="/portfolio",
    defaults={
        "stockAccountId": "",
        "includeAdjustments": "",
        "sortBy": "totalCost",
        "sortOrder": "desc",
        PAGE: "1",
        PAGE_SIZE: "25",
    },
    force_refresh_keys=frozenset({"stockAccountId", "includeAdjustments"}),
)

ADJUSTMENTS = FilterSchema(
    path="/cost-basis-adjustments",
    defaults={"ticker": "", "adjustmentType": "", "isActive": ""},
)


def _to_text(value: Any) -> str:
    if value is None or value is False:
        return ""
    if value is True:
        return "true"
    return str(value).strip()


def _positive_int(value: str, fallback: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return fallback
    return number if number > 0 else fallback


@dataclass(frozen=True)
class FilterTransition:
    state: "FilterState"
    filters_changed: bool
    force_refresh: bool
    url: str


@dataclass(frozen=True)
class FilterState:
    schema: FilterSchema
    values: Mapping[str, str]

    @classmethod
    def initial(cls, schema: FilterSchema) -> "FilterState":
        return cls(schema, dict(schema.defaults))

    @classmethod
    def from_query(cls, schema: FilterSchema, query: str | Mapping[str, Any] | None = None) -> "FilterState":
        """Restore state from a query string; unknown keys are ignored."""

        if isinstance(query, str):
            pairs = parse_qsl(query.lstrip("?"), keep_blank_values=True)
        else:
            pairs = list((query or {}).items())
        values = dict(schema.defaults)
        for key, value in pairs:
            if key in values:
                values[key] = _to_text(value)
        return cls(schema, values)

    def __getitem__(self, key: str) -> str:
        return self.values[key]

    @property
    def page(self) -> int:
        return _positive_int(self.values.get(PAGE, "1"), 1)

    @property
    def page_size(self) -> int:
        return _positive_int(self.values.get(PAGE_SIZE, ""), _positive_int(self.schema.defaults.get(PAGE_SIZE, ""), 10))

    def filters(self) -> dict[str, str]:
        """Non-pagination keys; the input of aggregate (statistics) requests."""

        return {key: value for key, value in self.values.items() if key not in PAGINATION_KEYS}

    def params(self, *, include_pagination: bool = True) -> dict[str, str]:
        source = self.values if include_pagination else self.filters()
        return {key: value for key, value in source.items() if value != ""}

    def to_query(self) -> str:
        return urlencode([(key, self.values[key]) for key in self.schema.keys if self.values[key] != ""])

    def to_url(self) -> str:
        query = self.to_query()
        return f"{self.schema.path}?{query}" if query else self.schema.path

    def apply(self, changes: Mapping[str, Any] | None = None, **kwargs: Any) -> FilterTransition:
        """Merge ``changes`` and work out what has to be refetched.

        Any changed key outside ``page``/``pageSize`` resets the page to ``"1"``; so does
        a new page size, since the old page number no longer points at the
        same rows.
        """

        updates = {**(changes or {}), **kwargs}
        unknown = [key for key in updates if key not in self.schema.defaults]
        if unknown:
            raise ValueError(f"Unknown filter keys for {self.schema.path}: {', '.join(sorted(unknown))}")

        values = dict(self.values)
        for key, value in updates.items():
            values[key] = _to_text(value)

        filters_changed = any(
            key not in PAGINATION_KEYS and values[key] != self.values.get(key)
            for key in updates
        )
        page_size_changed = PAGE_SIZE in updates and values[PAGE_SIZE] != self.values.get(PAGE_SIZE)
        if PAGE in values and (filters_changed or page_size_changed):
            values[PAGE] = "1"

        force_refresh = any(
            key in self.schema.force_refresh_keys and values[key] != self.values.get(key)
            for key in updates
        )
        state = FilterState(self.schema, values)
        return FilterTransition(state, filters_changed, force_refresh, state.to_url())

    def with_page(self, page: int) -> FilterTransition:
        return self.apply({PAGE: page})

    def reset(self) -> FilterTransition:
        state = FilterState.initial(self.schema)
        return FilterTransition(state, True, False, state.to_url())


__all__ = [
    "PAGE",
    "PAGE_SIZE",
    "PAGINATION_KEYS",
    "FilterSchema",
    "FilterState",
    "FilterTransition",
    "TRANSACTIONS",
    "ACCOUNT_FEES",
    "PORTFOLIO",
    "ADJUSTMENTS",
]
