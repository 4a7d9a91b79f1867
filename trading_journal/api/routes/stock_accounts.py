"""Stock (brokerage) account management."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from trading_journal.api.dependencies import get_bus, get_journal_api
from trading_journal.controllers.accounts import DEFAULT_ACCOUNT_DELETE_WARNING
from trading_journal.forms.validation import validate_stock_account
from trading_journal.schemas import StockAccount
from trading_journal.services.invalidation import InvalidationBus, Topic
from trading_journal.services.journal_api import JournalAPI

router = APIRouter()


@router.get("", response_model=list[StockAccount])
async def list_stock_accounts(api: JournalAPI = Depends(get_journal_api)) -> list[StockAccount]:
    """Accounts with the default account first."""

    return await api.list_stock_accounts()


@router.post("", response_model=StockAccount, status_code=status.HTTP_201_CREATED)
async def post_stock_account(
    payload: dict[str, Any] = Body(...),
    api: JournalAPI = Depends(get_journal_api),
    bus: InvalidationBus = Depends(get_bus),
) -> StockAccount:
    request = validate_stock_account(payload)
    account = await api.create_stock_account(request.to_wire(exclude_none=True))
    bus.publish(Topic.STOCK_ACCOUNTS)
    return account


@router.put("/{account_id}", response_model=StockAccount)
async def put_stock_account(
    account_id: str,
    payload: dict[str, Any] = Body(...),
    api: JournalAPI = Depends(get_journal_api),
    bus: InvalidationBus = Depends(get_bus),
) -> StockAccount:
    request = validate_stock_account(payload)
    account = await api.update_stock_account(account_id, request.to_wire(exclude_none=True))
    bus.publish(Topic.STOCK_ACCOUNTS)
    return account


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_stock_account(
    account_id: str,
    api: JournalAPI = Depends(get_journal_api),
    bus: InvalidationBus = Depends(get_bus),
) -> Response:
    accounts = await api.list_stock_accounts()
    account = next((item for item in accounts if item.id == account_id), None)
    if account is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Stock account not found")
    if account.is_default:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DEFAULT_ACCOUNT_DELETE_WARNING)
    await api.delete_stock_account(account_id)
    bus.publish(Topic.STOCK_ACCOUNTS)
    bus.publish(Topic.PORTFOLIO)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
