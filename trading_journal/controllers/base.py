"""Shared fetch orchestration for the paged list views."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Generic, Mapping, TypeVar

import httpx

from trading_journal.errors import GENERIC_ERROR_MESSAGE, JournalAPIError
from trading_journal.services.invalidation import InvalidationBus
from trading_journal.services.journal_api import JournalAPI
from trading_journal.services.notifications import NotificationQueue
from trading_journal.state.filters import FilterSchema, FilterState, FilterTransition
from trading_journal.state.pagination import pagination_items, total_pages

logger = logging.getLogger(__name__)

PageT = TypeVar("PageT")
UrlListener = Callable[[str], None]
Confirm = Callable[[str], "bool | Awaitable[bool]"]


async def ask(confirm: Confirm | None, message: str) -> bool:
    """Run a confirmation callback, sync or async. No callback means no."""

    if confirm is None:
        return False
    answer = confirm(message)
    if inspect.isawaitable(answer):
        answer = await answer
    return bool(answer)


class PagedController(Generic[PageT]):
    """Filter state, URL sync and latest-request-wins loading for one list view.

    Subclasses implement :meth:`_load_page` and :meth:`_apply_page`, and
    optionally :meth:`_load_aggregates` for statistics that depend on the
    filters but not on the page.
    """

    schema: FilterSchema
    load_error_prefix = ""

    def __init__(
        self,
        api: JournalAPI,
        *,
        bus: InvalidationBus | None = None,
        notifications: NotificationQueue | None = None,
        query: str | Mapping[str, Any] | None = None,
    ) -> None:
        self.api = api
        self.bus = bus or InvalidationBus()
        self.notifications = notifications or NotificationQueue()
        self.state = FilterState.from_query(self.schema, query)
        self.url = self.state.to_url()
        self.total_count = 0
        self.is_loading = False
        self.error: str | None = None
        self._page_token = 0
        self._aggregate_token = 0
        self._url_listeners: list[UrlListener] = []

    # URL sync ------------------------------------------------------------

    def on_url_change(self, listener: UrlListener) -> Callable[[], None]:
        self._url_listeners.append(listener)
        return lambda: self._url_listeners.remove(listener)

    def _set_state(self, transition: FilterTransition) -> None:
        self.state = transition.state
        if transition.url != self.url:
            self.url = transition.url
            for listener in list(self._url_listeners):
                listener(self.url)

    # Derived pagination --------------------------------------------------

    @property
    def page(self) -> int:
        return self.state.page

    @property
    def page_size(self) -> int:
        return self.state.page_size

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_count, self.page_size)

    def pagination_items(self) -> list[int | str]:
        return pagination_items(self.page, self.total_pages)

    # Transitions ---------------------------------------------------------

    async def load(self, *, force: bool = False) -> None:
        """Initial load: the page and, when present, its aggregates."""

        await self._refresh(aggregates=True, force=force)

    async def update_filters(self, changes: Mapping[str, Any] | None = None, **kwargs: Any) -> FilterTransition:
        transition = self.state.apply(changes, **kwargs)
        self._set_state(transition)
        await self._refresh(aggregates=transition.filters_changed, force=transition.force_refresh)
        return transition

    async def go_to_page(self, page: int) -> FilterTransition:
        return await self.update_filters({"page": page})

    async def set_page_size(self, page_size: int) -> FilterTransition:
        return await self.update_filters({"pageSize": page_size})

    async def reset_filters(self) -> FilterTransition:
        transition = self.state.reset()
        self._set_state(transition)
        await self._refresh(aggregates=True, force=True)
        return transition

    # Loading -------------------------------------------------------------

    async def _refresh(self, *, aggregates: bool, force: bool = False) -> None:
        await self._fetch_page(force=force)
        if aggregates:
            await self._fetch_aggregates()

    def _should_skip(self, state: FilterState) -> bool:
        return False

    async def _fetch_page(self, *, force: bool = False) -> None:
        if not force and self._should_skip(self.state):
            logger.debug("Skipping %s fetch; recent result still fresh", self.schema.path)
            return

        self._page_token += 1
        token = self._page_token
        state = self.state
        self.is_loading = True
        try:
            page = await self._load_page(state)
        except (JournalAPIError, httpx.HTTPError) as exc:
            if token == self._page_token:
                self.error = f"{self.load_error_prefix}{_message(exc)}"
                logger.warning("Loading %s failed: %s", self.schema.path, exc)
            return
        finally:
            if token == self._page_token:
                self.is_loading = False

        if token != self._page_token:
            logger.debug("Dropping stale %s response (token %d < %d)", self.schema.path, token, self._page_token)
            return

        self.error = None
        await self._apply_page(page, state)
        if token != self._page_token:
            return

        pages = self.total_pages
        if state.page > pages > 0:
            logger.info("Page %d is past the last page (%d); returning to page 1", state.page, pages)
            self._set_state(self.state.with_page(1))
            await self._fetch_page(force=True)

    async def _fetch_aggregates(self) -> None:
        self._aggregate_token += 1
        token = self._aggregate_token
        state = self.state
        try:
            aggregates = await self._load_aggregates(state)
        except (JournalAPIError, httpx.HTTPError) as exc:
            logger.warning("Loading aggregates for %s failed: %s", self.schema.path, exc)
            return
        if token != self._aggregate_token or aggregates is None:
            return
        self._apply_aggregates(aggregates)

    async def _load_page(self, state: FilterState) -> PageT:
        raise NotImplementedError

    async def _apply_page(self, page: PageT, state: FilterState) -> None:
        raise NotImplementedError

    async def _load_aggregates(self, state: FilterState) -> Any:
        return None

    def _apply_aggregates(self, aggregates: Any) -> None:
        return None

    # Mutations -----------------------------------------------------------

    def _report(self, exc: JournalAPIError | httpx.HTTPError, prefix: str = "") -> None:
        report_failure(self.notifications, exc, prefix)


def report_failure(
    notifications: NotificationQueue, exc: JournalAPIError | httpx.HTTPError, prefix: str = ""
) -> None:
    """Surface a failed mutation as a notification.

    Business-rule rejections are warnings shown verbatim; anything else is an
    error prefixed with ``prefix``.
    """

    if isinstance(exc, JournalAPIError) and exc.is_business_rule:
        notifications.show_warning(exc.message)
    else:
        notifications.show_error(f"{prefix}{_message(exc)}")


def _message(exc: Exception) -> str:
    if isinstance(exc, JournalAPIError):
        return exc.message
    return GENERIC_ERROR_MESSAGE


__all__ = ["Confirm", "PagedController", "ask", "report_failure"]
