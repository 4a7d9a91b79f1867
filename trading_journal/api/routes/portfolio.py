"""Portfolio view with live prices, and batch transfers between accounts."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from trading_journal.api.dependencies import get_bus, get_journal_api, get_market_data
from trading_journal.controllers.portfolio import PortfolioController
from trading_journal.schemas import PortfolioView, TransferBody, TransferResult
from trading_journal.services.invalidation import InvalidationBus, Topic
from trading_journal.services.journal_api import JournalAPI
from trading_journal.services.market_data import MarketDataCache
from trading_journal.services.transfer import SelectedStock, TransferDialog

router = APIRouter()

SAME_ACCOUNT_MESSAGE = "Tài khoản đích phải khác tài khoản nguồn"


@router.get("", response_model=PortfolioView)
async def get_portfolio(
    request: Request,
    api: JournalAPI = Depends(get_journal_api),
    market_data: MarketDataCache = Depends(get_market_data),
    bus: InvalidationBus = Depends(get_bus),
) -> PortfolioView:
    """Holdings page enriched with the latest prices.

    Query parameters follow the portfolio filter keys (``stockAccountId``,
    ``includeAdjustments``, ``sortBy``, ``sortOrder``, ``page``, ``pageSize``).
    """

    controller = PortfolioController(api, market_data, bus=bus, query=request.url.query)
    await controller.load(force=True)
    if controller.error:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=controller.error)
    return controller.view()


@router.post("/transfer", response_model=TransferResult)
async def post_transfer(
    payload: TransferBody,
    api: JournalAPI = Depends(get_journal_api),
    bus: InvalidationBus = Depends(get_bus),
) -> TransferResult:
    selected = [
        SelectedStock(ticker=item.ticker, account_id=item.stock_account_id, account_name=item.account_name)
        for item in payload.selected
    ]
    dialog = TransferDialog(api, selected)
    await dialog.open()
    if dialog.error:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=dialog.error)
    if payload.target_account_id not in {account.id for account in dialog.available_accounts}:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=SAME_ACCOUNT_MESSAGE)

    dialog.choose(payload.target_account_id)
    result = await dialog.submit()
    if result is None:
        if dialog.failure is not None:
            raise dialog.failure
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=dialog.error)
    bus.publish(Topic.TRANSACTIONS)
    bus.publish(Topic.PORTFOLIO)
    return result
