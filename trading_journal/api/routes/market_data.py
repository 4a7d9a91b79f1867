"""Latest close prices through the shared deduplicating cache."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from trading_journal.api.dependencies import get_market_data
from trading_journal.schemas import MarketQuotes
from trading_journal.services.market_data import MarketDataCache, normalize_tickers

router = APIRouter()


@router.get("", response_model=MarketQuotes)
async def get_market_data(
    tickers: str = Query(..., description="Comma separated ticker symbols"),
    force: bool = Query(False, description="Bypass the dedupe window"),
    cache: MarketDataCache = Depends(get_market_data),
) -> MarketQuotes:
    symbols = normalize_tickers(tickers.split(","))
    if not symbols:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No tickers requested")
    state = await cache.get(symbols, force=force)
    if state.error is not None and not state.data:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(state.error))
    return MarketQuotes(
        tickers=symbols,
        data=state.data,
        error=str(state.error) if state.error is not None else None,
    )
