"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from .account_fees import router as account_fees_router
from .adjustments import router as adjustments_router
from .analytics import router as analytics_router
from .market_data import router as market_data_router
from .portfolio import router as portfolio_router
from .price_steps import router as price_steps_router
from .stock_accounts import router as stock_accounts_router
from .strategies import router as strategies_router
from .transactions import router as transactions_router

api_router = APIRouter()
api_router.include_router(portfolio_router, prefix="/portfolio", tags=["portfolio"])
api_router.include_router(transactions_router, prefix="/transactions", tags=["transactions"])
api_router.include_router(account_fees_router, prefix="/account-fees", tags=["account-fees"])
api_router.include_router(stock_accounts_router, prefix="/stock-accounts", tags=["stock-accounts"])
api_router.include_router(adjustments_router, prefix="/cost-basis-adjustments", tags=["adjustments"])
api_router.include_router(market_data_router, prefix="/market-data", tags=["market-data"])
api_router.include_router(price_steps_router, prefix="/price-steps", tags=["price-steps"])
api_router.include_router(analytics_router, prefix="/analytics", tags=["analytics"])
api_router.include_router(strategies_router, prefix="/strategies", tags=["strategies"])

__all__ = ["api_router"]
