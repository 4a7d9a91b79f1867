"""Pydantic schemas for the analytics dashboard."""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field

from .common import JournalModel


class RiskMetrics(JournalModel):
    volatility: float = 0.0
    sharpe_ratio: float = 0.0
    max_drawdown: float = 0.0
    risk_score: int = 50


class BenchmarkComparison(JournalModel):
    beta: float = 1.0
    alpha: float = 0.0
    correlation: float = 0.0


class DashboardPayload(JournalModel):
    model_config = ConfigDict(extra="allow")

    summary: dict[str, Any] = Field(default_factory=dict)
    risk_metrics: RiskMetrics = Field(default_factory=RiskMetrics)
    benchmark: BenchmarkComparison = Field(default_factory=BenchmarkComparison)
    sector_analysis: dict[str, Any] = Field(default_factory=dict)
    performance: list[dict[str, Any]] = Field(default_factory=list)


__all__ = ["RiskMetrics", "BenchmarkComparison", "DashboardPayload"]
