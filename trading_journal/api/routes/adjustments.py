"""Cost-basis adjustments: dividend and split events."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, Response, status

from trading_journal.api.dependencies import get_bus, get_journal_api
from trading_journal.forms.validation import validate_dividend_event
from trading_journal.schemas import ActiveToggle, AdjustmentList, CostBasisAdjustment
from trading_journal.services.invalidation import InvalidationBus, Topic
from trading_journal.services.journal_api import JournalAPI
from trading_journal.state.filters import ADJUSTMENTS, FilterState

router = APIRouter()


def _changed(bus: InvalidationBus) -> None:
    bus.publish(Topic.ADJUSTMENTS)
    bus.publish(Topic.PORTFOLIO)


@router.get("", response_model=AdjustmentList)
async def list_adjustments(request: Request, api: JournalAPI = Depends(get_journal_api)) -> AdjustmentList:
    state = FilterState.from_query(ADJUSTMENTS, request.url.query)
    return await api.list_adjustments(state.params())


@router.post("", response_model=CostBasisAdjustment, status_code=status.HTTP_201_CREATED)
async def post_dividend_event(
    payload: dict[str, Any] = Body(...),
    api: JournalAPI = Depends(get_journal_api),
    bus: InvalidationBus = Depends(get_bus),
) -> CostBasisAdjustment:
    """Record a cash dividend, stock dividend or stock split.

    The form is validated before anything is sent, so a cash dividend without
    a tax rate answers 422 without reaching the journal API.
    """

    event = validate_dividend_event(payload)
    adjustment = await api.create_adjustment(event)
    _changed(bus)
    return adjustment


@router.patch("/{adjustment_id}")
async def patch_adjustment(
    adjustment_id: str,
    payload: ActiveToggle,
    api: JournalAPI = Depends(get_journal_api),
    bus: InvalidationBus = Depends(get_bus),
) -> dict[str, Any]:
    result = await api.set_adjustment_active(adjustment_id, payload.is_active)
    _changed(bus)
    return result or {}


@router.delete("/{adjustment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_adjustment(
    adjustment_id: str,
    api: JournalAPI = Depends(get_journal_api),
    bus: InvalidationBus = Depends(get_bus),
) -> Response:
    await api.delete_adjustment(adjustment_id)
    _changed(bus)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
