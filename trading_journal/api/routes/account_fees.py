"""Account fee list and edits."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response, status

from trading_journal.api.dependencies import get_bus, get_journal_api
from trading_journal.controllers.account_fees import AccountFeesController
from trading_journal.forms.validation import validate_account_fee
from trading_journal.schemas import AccountFee, AccountFeeListView
from trading_journal.services.invalidation import InvalidationBus, Topic
from trading_journal.services.journal_api import JournalAPI

router = APIRouter()


@router.get("", response_model=AccountFeeListView)
async def list_account_fees(
    request: Request,
    api: JournalAPI = Depends(get_journal_api),
    bus: InvalidationBus = Depends(get_bus),
) -> AccountFeeListView:
    controller = AccountFeesController(api, bus=bus, query=request.url.query)
    await controller.load()
    if controller.error:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=controller.error)
    return AccountFeeListView(
        fees=controller.fees,
        summary_stats=controller.summary_stats,
        total_count=controller.total_count,
        total_pages=controller.total_pages,
        page=controller.page,
        page_size=controller.page_size,
        query=controller.state.to_query(),
        pages=controller.pagination_items(),
    )


@router.post("", response_model=AccountFee, status_code=status.HTTP_201_CREATED)
async def post_account_fee(
    payload: dict[str, Any] = Body(...),
    api: JournalAPI = Depends(get_journal_api),
    bus: InvalidationBus = Depends(get_bus),
) -> AccountFee:
    request = validate_account_fee(payload)
    fee = await api.create_account_fee(request.to_wire(exclude_none=True))
    bus.publish(Topic.ACCOUNT_FEES)
    return fee


@router.put("/{fee_id}", response_model=AccountFee)
async def put_account_fee(
    fee_id: str,
    payload: dict[str, Any] = Body(...),
    api: JournalAPI = Depends(get_journal_api),
    bus: InvalidationBus = Depends(get_bus),
) -> AccountFee:
    request = validate_account_fee(payload)
    fee = await api.update_account_fee(fee_id, request.to_wire(exclude_none=True))
    bus.publish(Topic.ACCOUNT_FEES)
    return fee


@router.delete("/{fee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account_fee(
    fee_id: str,
    api: JournalAPI = Depends(get_journal_api),
    bus: InvalidationBus = Depends(get_bus),
) -> Response:
    await api.delete_account_fee(fee_id)
    bus.publish(Topic.ACCOUNT_FEES)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
