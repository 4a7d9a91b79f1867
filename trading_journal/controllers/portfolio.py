"""Portfolio view: holdings page, chart data, live prices and transfers."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping
from urllib.parse import parse_qsl

from trading_journal.config import get_settings
from trading_journal.schemas import EnrichedHolding, PortfolioHolding, PortfolioPage, PortfolioTotals, PortfolioView
from trading_journal.services.enrichment import enrich_holdings, summarize
from trading_journal.services.invalidation import InvalidationBus, Topic
from trading_journal.services.journal_api import JournalAPI
from trading_journal.services.market_data import MarketDataCache, MarketDataState, normalize_tickers
from trading_journal.services.notifications import NotificationQueue
from trading_journal.services.transfer import HoldingSelection, TransferDialog
from trading_journal.state.filters import PORTFOLIO, FilterState

from .base import PagedController

logger = logging.getLogger(__name__)

TRANSFER_SUCCESS_MESSAGE = "Chuyển cổ phiếu thành công"
WATCHED_TOPICS = (Topic.PORTFOLIO, Topic.TRANSACTIONS, Topic.ADJUSTMENTS)


class PortfolioController(PagedController[PortfolioPage]):
    schema = PORTFOLIO

    def __init__(
        self,
        api: JournalAPI,
        market_data: MarketDataCache,
        *,
        bus: InvalidationBus | None = None,
        notifications: NotificationQueue | None = None,
        query: str | Mapping[str, Any] | None = None,
        cache_ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(api, bus=bus, notifications=notifications, query=query)
        self.market_data = market_data
        self.cache_ttl_seconds = (
            get_settings().portfolio_cache_ttl_seconds if cache_ttl_seconds is None else cache_ttl_seconds
        )
        self._clock = clock
        self.holdings: list[PortfolioHolding] = []
        self.chart_holdings: list[PortfolioHolding] = []
        self.rows: list[EnrichedHolding] = []
        self.chart_rows: list[EnrichedHolding] = []
        self.totals = PortfolioTotals()
        self.account_allocations: list[dict[str, Any]] = []
        self.total_summary: dict[str, Any] | None = None
        self.market_state = MarketDataState()
        self.selection = HoldingSelection()
        self._last_fetch: tuple[str, float, tuple[int, ...]] | None = None

        # Restore the last cost-basis mode unless the URL says otherwise
        mode = self.bus.last_payload(Topic.COST_BASIS_MODE)
        if mode is not None and not _query_has(query, "includeAdjustments"):
            self.state = self.state.apply({"includeAdjustments": bool(mode)}).state
            self.url = self.state.to_url()

    @property
    def include_adjustments(self) -> bool:
        return self.state["includeAdjustments"] == "true"

    # Short-TTL guard -----------------------------------------------------

    def _versions(self) -> tuple[int, ...]:
        return tuple(self.bus.version(topic) for topic in WATCHED_TOPICS)

    def _should_skip(self, state: FilterState) -> bool:
        if self._last_fetch is None:
            return False
        query, fetched_at, versions = self._last_fetch
        return (
            query == state.to_query()
            and self._clock() - fetched_at < self.cache_ttl_seconds
            and versions == self._versions()
        )

    # Loading -------------------------------------------------------------

    async def _load_page(self, state: FilterState) -> PortfolioPage:
        return await self.api.get_portfolio(state.params())

    async def _apply_page(self, page: PortfolioPage, state: FilterState) -> None:
        token = self._page_token
        holdings = list(page.portfolio)
        chart_holdings = list(page.all_portfolio_for_charts or page.portfolio)
        market_state = await self._fetch_prices(holdings, chart_holdings)
        if token != self._page_token:
            logger.debug("Dropping stale portfolio prices (token %d < %d)", token, self._page_token)
            return

        self._last_fetch = (state.to_query(), self._clock(), self._versions())
        self.holdings = holdings
        self.chart_holdings = chart_holdings
        self.total_count = page.total_count
        self.total_summary = page.total_summary
        self.account_allocations = list(page.account_allocations)
        self._show(market_state)

    async def _fetch_prices(
        self,
        holdings: list[PortfolioHolding],
        chart_holdings: list[PortfolioHolding],
        *,
        force: bool = False,
    ) -> MarketDataState:
        tickers = normalize_tickers(holding.ticker for holding in [*holdings, *chart_holdings])
        if not tickers:
            return MarketDataState()
        market_state = await self.market_data.get(tickers, force=force)
        if market_state.error is not None:
            logger.warning("Market data unavailable: %s", market_state.error)
        return market_state

    def _show(self, market_state: MarketDataState) -> None:
        self.market_state = market_state
        prices = market_state.data
        self.rows = enrich_holdings(self.holdings, prices)
        self.chart_rows = enrich_holdings(self.chart_holdings, prices)
        self.totals = summarize(self.chart_rows)

    async def refresh_prices(self) -> None:
        """Refetch prices for the visible tickers, bypassing the price cache."""

        token = self._page_token
        market_state = await self._fetch_prices(self.holdings, self.chart_holdings, force=True)
        if token == self._page_token:
            self._show(market_state)

    async def refresh(self) -> None:
        await self.load(force=True)

    # Filters that force a refetch ----------------------------------------

    async def select_account(self, account_id: str | None) -> None:
        self.selection.clear()
        await self.update_filters({"stockAccountId": account_id or ""})

    async def set_cost_basis_mode(self, include_adjustments: bool) -> None:
        self.bus.publish(Topic.COST_BASIS_MODE, include_adjustments)
        await self.update_filters({"includeAdjustments": include_adjustments})

    # Transfer ------------------------------------------------------------

    async def open_transfer(self) -> TransferDialog:
        dialog = TransferDialog(self.api, self.selection.selected)
        await dialog.open()
        return dialog

    async def transfer(self, dialog: TransferDialog) -> bool:
        result = await dialog.submit()
        if result is None:
            return False
        self.notifications.show_success(result.message or TRANSFER_SUCCESS_MESSAGE)
        self.selection.clear()
        self.bus.publish(Topic.TRANSACTIONS)
        self.bus.publish(Topic.PORTFOLIO)
        await self.refresh()
        return True

    # View ----------------------------------------------------------------

    def view(self) -> PortfolioView:
        error = self.market_state.error
        return PortfolioView(
            rows=self.rows,
            chart_rows=self.chart_rows,
            totals=self.totals,
            total_count=self.total_count,
            total_pages=self.total_pages,
            page=self.page,
            page_size=self.page_size,
            query=self.state.to_query(),
            account_allocations=self.account_allocations,
            market_data_error=str(error) if error is not None else None,
        )


def _query_has(query: str | Mapping[str, Any] | None, key: str) -> bool:
    if query is None:
        return False
    if isinstance(query, str):
        return any(name == key for name, _ in parse_qsl(query.lstrip("?"), keep_blank_values=True))
    return key in query


__all__ = ["PortfolioController", "TRANSFER_SUCCESS_MESSAGE"]
