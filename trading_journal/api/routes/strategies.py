"""Trading strategy notes, proxied as-is."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Response, status

from trading_journal.api.dependencies import get_journal_api
from trading_journal.services.journal_api import JournalAPI

router = APIRouter()


@router.get("")
async def list_strategies(api: JournalAPI = Depends(get_journal_api)) -> list[dict[str, Any]]:
    return await api.list_strategies()


@router.post("", status_code=status.HTTP_201_CREATED)
async def post_strategy(
    payload: dict[str, Any] = Body(...),
    api: JournalAPI = Depends(get_journal_api),
) -> dict[str, Any]:
    return await api.create_strategy(payload)


@router.delete("/{strategy_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_strategy(strategy_id: str, api: JournalAPI = Depends(get_journal_api)) -> Response:
    await api.delete_strategy(strategy_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
