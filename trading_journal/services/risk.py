"""Risk metrics derived from realized trade P/L."""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Sequence

import numpy as np
import pandas as pd

from trading_journal.config import get_settings
from trading_journal.schemas import BenchmarkComparison, RiskMetrics, Transaction, TransactionType

TRADING_DAYS = 252


def _trade_frame(trades: Iterable[Transaction | Mapping[str, Any]]) -> pd.DataFrame:
    rows = []
    for trade in trades:
        if not isinstance(trade, Transaction):
            trade = Transaction.model_validate(trade)
        if trade.type is not TransactionType.SELL or trade.calculated_pl is None:
            continue
        rows.append({"date": trade.transaction_date.date(), "pl": trade.calculated_pl})
    return pd.DataFrame(rows, columns=["date", "pl"])


def daily_pl(trades: Iterable[Transaction | Mapping[str, Any]]) -> pd.Series:
    """Realized P/L summed per calendar day, oldest first."""

    df = _trade_frame(trades)
    if df.empty:
        return pd.Series(dtype=float)
    return df.groupby("date")["pl"].sum().sort_index()


def compute_risk_metrics(
    trades: Iterable[Transaction | Mapping[str, Any]],
    risk_free_rate: float | None = None,
) -> RiskMetrics:
    """Volatility, Sharpe ratio, max drawdown and a 0-100 risk score.

    All figures are taken over the cumulative realized P/L curve. Fewer than
    two trading days give the neutral defaults (risk score 50).
    """

    if risk_free_rate is None:
        risk_free_rate = get_settings().risk_free_rate
    values = daily_pl(trades).cumsum().to_numpy(dtype=float)
    if len(values) <= 1:
        return RiskMetrics()

    mean = float(values.mean())
    volatility = float(values.std(ddof=0)) / abs(mean or 1) * 100
    sharpe_ratio = (mean - risk_free_rate) / (volatility / 100) if volatility > 0 else 0.0

    peaks = np.maximum.accumulate(values)
    positive = peaks > 0
    drawdowns = np.zeros_like(values)
    drawdowns[positive] = (peaks[positive] - values[positive]) / peaks[positive] * 100
    max_drawdown = float(drawdowns.max())

    score = min(volatility, 40.0) + max(0.0, 30 - sharpe_ratio * 10) + min(max_drawdown, 30.0)
    return RiskMetrics(
        volatility=max(0.0, volatility),
        sharpe_ratio=max(0.0, sharpe_ratio),
        max_drawdown=max(0.0, max_drawdown),
        risk_score=int(math.floor(min(100.0, score) + 0.5)),
    )


def compute_beta(portfolio_returns: Sequence[float], market_returns: Sequence[float]) -> float:
    if len(portfolio_returns) != len(market_returns) or not portfolio_returns:
        return 1.0
    portfolio = np.asarray(portfolio_returns, dtype=float)
    market = np.asarray(market_returns, dtype=float)
    market_diff = market - market.mean()
    variance = float((market_diff ** 2).sum())
    if variance == 0:
        return 1.0
    return float(((portfolio - portfolio.mean()) * market_diff).sum() / variance)


def compute_correlation(portfolio_returns: Sequence[float], market_returns: Sequence[float]) -> float:
    if len(portfolio_returns) != len(market_returns) or len(portfolio_returns) < 2:
        return 0.0
    portfolio = pd.Series(portfolio_returns, dtype=float)
    market = pd.Series(market_returns, dtype=float)
    correlation = portfolio.corr(market)
    return 0.0 if pd.isna(correlation) else float(correlation)


def compare_with_benchmark(
    portfolio_returns: Sequence[float],
    market_returns: Sequence[float],
    risk_free_rate: float | None = None,
) -> BenchmarkComparison:
    """Beta, annualized alpha (in percent) and correlation against a benchmark."""

    if risk_free_rate is None:
        risk_free_rate = get_settings().risk_free_rate
    if not portfolio_returns or not market_returns:
        return BenchmarkComparison()
    beta = compute_beta(portfolio_returns, market_returns)
    portfolio_return = float(np.mean(portfolio_returns)) * TRADING_DAYS
    market_return = float(np.mean(market_returns)) * TRADING_DAYS
    alpha = portfolio_return - (risk_free_rate + beta * (market_return - risk_free_rate))
    return BenchmarkComparison(
        beta=round(beta, 3),
        alpha=round(alpha * 100, 2),
        correlation=round(compute_correlation(portfolio_returns, market_returns), 3),
    )


__all__ = [
    "TRADING_DAYS",
    "daily_pl",
    "compute_risk_metrics",
    "compute_beta",
    "compute_correlation",
    "compare_with_benchmark",
]
