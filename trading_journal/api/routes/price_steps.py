"""Tick-size helpers for order entry."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from trading_journal.schemas import PriceStepInfo
from trading_journal.services.price_step import (
    calculate_price_step,
    format_price,
    generate_valid_price_range,
    get_next_valid_price,
    is_valid_price,
    round_to_valid_price,
)

router = APIRouter()
MAX_RANGE_SIZE = 1_000


@router.get("", response_model=PriceStepInfo)
async def get_price_step(price: float = Query(..., ge=0, allow_inf_nan=False)) -> PriceStepInfo:
    return PriceStepInfo(
        price=price,
        step=calculate_price_step(price),
        rounded_price=round_to_valid_price(price),
        is_valid=is_valid_price(price),
        next_up=get_next_valid_price(price, "up"),
        next_down=get_next_valid_price(price, "down"),
        formatted=format_price(price),
    )


@router.get("/range", response_model=list[float])
async def get_price_range(
    min_price: float = Query(..., alias="min", ge=0, allow_inf_nan=False),
    max_price: float = Query(..., alias="max", ge=0, allow_inf_nan=False),
    current_price: float = Query(..., alias="current", ge=0, allow_inf_nan=False),
) -> list[float]:
    """Ladder from ``min`` to ``max`` stepped by the tier of ``current``."""

    if max_price < min_price:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="max must not be below min")
    if (max_price - min_price) / calculate_price_step(current_price) > MAX_RANGE_SIZE:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Requested range is too large")
    return generate_valid_price_range(min_price, max_price, current_price)
