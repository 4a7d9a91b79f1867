"""Dashboard proxy and risk statistics."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from trading_journal.api.dependencies import get_journal_api
from trading_journal.schemas import BenchmarkComparison, BenchmarkRequest, DashboardPayload, RiskMetrics
from trading_journal.services.journal_api import JournalAPI
from trading_journal.services.risk import compare_with_benchmark, compute_risk_metrics

router = APIRouter()


@router.get("/dashboard", response_model=DashboardPayload)
async def get_dashboard(
    period: str | None = Query(None, examples=["1M"]),
    api: JournalAPI = Depends(get_journal_api),
) -> DashboardPayload:
    return await api.get_dashboard(period)


@router.post("/risk-metrics", response_model=RiskMetrics)
async def post_risk_metrics(trades: list[dict[str, Any]] = Body(...)) -> RiskMetrics:
    """Volatility, Sharpe ratio, drawdown and score from realized SELL trades."""

    return compute_risk_metrics(trades)


@router.post("/benchmark", response_model=BenchmarkComparison)
async def post_benchmark(payload: BenchmarkRequest) -> BenchmarkComparison:
    return compare_with_benchmark(
        payload.portfolio_returns, payload.market_returns, payload.risk_free_rate
    )
