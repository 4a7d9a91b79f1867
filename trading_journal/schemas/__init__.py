"""Pydantic schema exports."""

from .accounts import DEFAULT_ACCOUNT_NAME, StockAccount, StockAccountCreateRequest, sort_accounts
from .account_fees import (
    FEE_TYPE_LABELS,
    AccountFee,
    AccountFeeCreateRequest,
    AccountFeeListView,
    AccountFeePage,
    FeeType,
)
from .adjustments import (
    ADJUSTMENT_TYPE_LABELS,
    AdjustmentList,
    AdjustmentType,
    CashDividendEvent,
    CostBasisAdjustment,
    DividendEvent,
    StockDividendEvent,
    StockSplitEvent,
    dividend_event_adapter,
)
from .common import JournalModel
from .dashboard import BenchmarkComparison, DashboardPayload, RiskMetrics
from .gateway import (
    ActiveToggle,
    BenchmarkRequest,
    MarketQuotes,
    PriceStepInfo,
    SelectedHolding,
    TransferBody,
)
from .portfolio import (
    EnrichedHolding,
    PortfolioHolding,
    PortfolioPage,
    PortfolioTotals,
    PortfolioView,
    StockAccountRef,
)
from .transactions import (
    Transaction,
    TransactionCreateRequest,
    TransactionListView,
    TransactionPage,
    TransactionType,
    TransferRequest,
    TransferResult,
)

__all__ = [
    "JournalModel",
    "DEFAULT_ACCOUNT_NAME",
    "StockAccount",
    "StockAccountCreateRequest",
    "sort_accounts",
    "FeeType",
    "FEE_TYPE_LABELS",
    "AccountFee",
    "AccountFeeCreateRequest",
    "AccountFeePage",
    "AccountFeeListView",
    "AdjustmentType",
    "ADJUSTMENT_TYPE_LABELS",
    "CostBasisAdjustment",
    "CashDividendEvent",
    "StockDividendEvent",
    "StockSplitEvent",
    "DividendEvent",
    "dividend_event_adapter",
    "AdjustmentList",
    "RiskMetrics",
    "BenchmarkComparison",
    "DashboardPayload",
    "StockAccountRef",
    "PortfolioHolding",
    "EnrichedHolding",
    "PortfolioTotals",
    "PortfolioPage",
    "PortfolioView",
    "TransactionType",
    "Transaction",
    "TransactionCreateRequest",
    "TransactionPage",
    "TransactionListView",
    "TransferRequest",
    "TransferResult",
    "SelectedHolding",
    "TransferBody",
    "MarketQuotes",
    "PriceStepInfo",
    "BenchmarkRequest",
    "ActiveToggle",
]
