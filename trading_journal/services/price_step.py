"""Tick-size (price step) rules for HOSE/HNX listed equities.

Prices are whole VND amounts. Every helper here is pure; non-finite input
(NaN, infinity) flows through the arithmetic instead of raising, and callers
are expected to guard against it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Literal

Direction = Literal["up", "down"]


@dataclass(frozen=True)
class PriceStepRule:
    min_price: float
    max_price: float
    step: int
    description: str


PRICE_STEP_RULES: tuple[PriceStepRule, ...] = (
    PriceStepRule(0, 9_999, 10, "< 10,000 VNĐ"),
    PriceStepRule(10_000, 49_999, 50, "10,000 - 49,999 VNĐ"),
    PriceStepRule(50_000, 99_999, 100, "50,000 - 99,999 VNĐ"),
    PriceStepRule(100_000, 499_999, 500, "100,000 - 499,999 VNĐ"),
    PriceStepRule(500_000, math.inf, 1_000, "≥ 500,000 VNĐ"),
)


def calculate_price_step(price: float) -> int:
    if price < 10_000:
        return 10
    if price < 50_000:
        return 50
    if price < 100_000:
        return 100
    if price < 500_000:
        return 500
    return 1_000


def _round_half_up(value: float) -> float:
    if not math.isfinite(value):
        return value
    return float(math.floor(value + 0.5))


def round_to_valid_price(price: float) -> float:
    """Round ``price`` to a multiple of its own tier's step.

    The step comes from the input price, not the rounded result: 49,980 rounds
    with step 50 to 50,000 even though 50,000 sits in the 100 VND tier.
    """

    step = calculate_price_step(price)
    return _round_half_up(price / step) * step


def is_valid_price(price: float) -> bool:
    if not math.isfinite(price) or not float(price).is_integer():
        return False
    return int(price) % calculate_price_step(price) == 0


def get_next_valid_price(price: float, direction: Direction = "up") -> float:
    step = calculate_price_step(price)
    rounded = round_to_valid_price(price)
    if direction == "up":
        return rounded if rounded >= price else rounded + step
    return rounded if rounded <= price else rounded - step


def iter_valid_prices(min_price: float, max_price: float, current_price: float) -> Iterator[float]:
    """Yield ascending prices from ``round(min_price)`` up to ``max_price``.

    The step is taken once from ``current_price`` and used for the whole range,
    so prices past a tier boundary are not re-stepped.
    """

    step = calculate_price_step(current_price)
    price = round_to_valid_price(min_price)
    while price <= max_price:
        yield price
        price += step


def generate_valid_price_range(min_price: float, max_price: float, current_price: float) -> list[float]:
    return list(iter_valid_prices(min_price, max_price, current_price))


def format_price(price: float) -> str:
    """Format a VND amount the vi-VN way (``1.234.567``)."""

    if not math.isfinite(price):
        return str(price)
    if float(price).is_integer():
        return f"{int(price):,}".replace(",", ".")
    whole, _, fraction = f"{price:,.3f}".rstrip("0").partition(".")
    return f"{whole.replace(',', '.')},{fraction}" if fraction else whole.replace(",", ".")


__all__ = [
    "PRICE_STEP_RULES",
    "PriceStepRule",
    "calculate_price_step",
    "round_to_valid_price",
    "is_valid_price",
    "get_next_valid_price",
    "iter_valid_prices",
    "generate_valid_price_range",
    "format_price",
]
