"""Transactions list, edits and journal entries."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response, status

from trading_journal.api.dependencies import get_bus, get_journal_api
from trading_journal.controllers.transactions import TransactionsController
from trading_journal.forms.validation import validate_transaction
from trading_journal.schemas import Transaction, TransactionListView
from trading_journal.services.invalidation import InvalidationBus, Topic
from trading_journal.services.journal_api import JournalAPI

router = APIRouter()


def _changed(bus: InvalidationBus) -> None:
    bus.publish(Topic.TRANSACTIONS)
    bus.publish(Topic.PORTFOLIO)


@router.get("", response_model=TransactionListView)
async def list_transactions(
    request: Request,
    api: JournalAPI = Depends(get_journal_api),
    bus: InvalidationBus = Depends(get_bus),
) -> TransactionListView:
    controller = TransactionsController(api, bus=bus, query=request.url.query)
    await controller.load()
    if controller.error:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=controller.error)
    return TransactionListView(
        transactions=controller.transactions,
        total_count=controller.total_count,
        total_pages=controller.total_pages,
        page=controller.page,
        page_size=controller.page_size,
        profit_stats=controller.profit_stats,
        query=controller.state.to_query(),
        pages=controller.pagination_items(),
    )


@router.post("", response_model=Transaction, status_code=status.HTTP_201_CREATED)
async def post_transaction(
    payload: dict[str, Any] = Body(...),
    api: JournalAPI = Depends(get_journal_api),
    bus: InvalidationBus = Depends(get_bus),
) -> Transaction:
    request = validate_transaction(payload)
    created = await api.create_transaction(request.to_wire(exclude_none=True))
    _changed(bus)
    return created


@router.get("/{transaction_id}", response_model=Transaction)
async def get_transaction(transaction_id: str, api: JournalAPI = Depends(get_journal_api)) -> Transaction:
    return await api.get_transaction(transaction_id)


@router.put("/{transaction_id}", response_model=Transaction)
async def put_transaction(
    transaction_id: str,
    payload: dict[str, Any] = Body(...),
    api: JournalAPI = Depends(get_journal_api),
    bus: InvalidationBus = Depends(get_bus),
) -> Transaction:
    request = validate_transaction(payload)
    updated = await api.update_transaction(transaction_id, request.to_wire(exclude_none=True))
    _changed(bus)
    return updated


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: str,
    api: JournalAPI = Depends(get_journal_api),
    bus: InvalidationBus = Depends(get_bus),
) -> Response:
    await api.delete_transaction(transaction_id)
    _changed(bus)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{transaction_id}/journal")
async def get_journal_entry(transaction_id: str, api: JournalAPI = Depends(get_journal_api)) -> dict[str, Any]:
    entry = await api.get_journal_entry(transaction_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Journal entry not found")
    return entry
