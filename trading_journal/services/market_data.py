"""Deduplicating cache over the journal's ``/market-data`` endpoint.

A ticker set is fetched at most once per dedupe interval. Callers asking for
the same set while a request is in flight share that request instead of
issuing their own. Failed fetches are retried a fixed number of times and the
last error is reported through :class:`MarketDataState` rather than raised.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

import httpx
from opentelemetry.propagate import inject

from trading_journal.config import get_settings
from trading_journal.errors import MarketDataError

logger = logging.getLogger(__name__)

MarketPrices = dict[str, Any]


@dataclass
class MarketDataState:
    data: MarketPrices = field(default_factory=dict)
    error: Exception | None = None
    is_loading: bool = False


@dataclass
class _CacheEntry:
    fetched_at: float
    data: MarketPrices


def normalize_tickers(tickers: Iterable[str | None] | None) -> list[str]:
    """Uppercase, drop blanks and duplicates, sort."""

    if not tickers:
        return []
    return sorted({ticker.strip().upper() for ticker in tickers if ticker and ticker.strip()})


def build_cache_key(tickers: Iterable[str | None] | None) -> str | None:
    normalized = normalize_tickers(tickers)
    return ",".join(normalized) if normalized else None


class MarketDataCache:
    """Request-deduplicating, TTL-bound market price cache."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        dedupe_seconds: float | None = None,
        retry_count: int | None = None,
        retry_backoff_seconds: float | None = None,
        token: str | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.journal_api_url).rstrip("/")
        self.dedupe_seconds = (
            settings.market_data_dedupe_seconds if dedupe_seconds is None else dedupe_seconds
        )
        self.retry_count = settings.market_data_retry_count if retry_count is None else retry_count
        self.retry_backoff_seconds = (
            settings.market_data_retry_backoff_seconds
            if retry_backoff_seconds is None
            else retry_backoff_seconds
        )
        self._token = token if token is not None else settings.journal_api_token
        self._client = client
        self._owns_client = client is None
        self._timeout = settings.journal_api_timeout_seconds
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}
        self._errors: dict[str, Exception] = {}
        self._inflight: dict[str, asyncio.Task[MarketPrices]] = {}
        self.request_count = 0

    async def __aenter__(self) -> "MarketDataCache":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def state(self, tickers: Iterable[str | None] | None) -> MarketDataState:
        """Snapshot of what a caller would render right now, without fetching."""

        key = build_cache_key(tickers)
        if key is None:
            return MarketDataState()
        entry = self._entries.get(key)
        return MarketDataState(
            data=dict(entry.data) if entry else {},
            error=self._errors.get(key),
            is_loading=key in self._inflight,
        )

    async def get(self, tickers: Iterable[str | None] | None, *, force: bool = False) -> MarketDataState:
        key = build_cache_key(tickers)
        if key is None:
            return MarketDataState()

        entry = self._entries.get(key)
        if not force and entry is not None and self._is_fresh(entry):
            return MarketDataState(data=dict(entry.data))

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch_with_retry(key))
            self._inflight[key] = task
            task.add_done_callback(lambda _task, _key=key: self._inflight.pop(_key, None))

        try:
            data = await asyncio.shield(task)
        except (MarketDataError, httpx.HTTPError) as exc:
            self._errors[key] = exc
            stale = self._entries.get(key)
            return MarketDataState(data=dict(stale.data) if stale else {}, error=exc)

        self._errors.pop(key, None)
        return MarketDataState(data=dict(data))

    async def mutate(
        self,
        tickers: Iterable[str | None] | None,
        data: Mapping[str, Any] | None = None,
    ) -> MarketDataState:
        """Replace the cached prices for ``tickers`` or, without data, refetch them."""

        key = build_cache_key(tickers)
        if key is None:
            return MarketDataState()
        if data is not None:
            self._entries[key] = _CacheEntry(fetched_at=self._clock(), data=dict(data))
            self._errors.pop(key, None)
            return MarketDataState(data=dict(data))
        return await self.get(tickers, force=True)

    def invalidate(self, tickers: Iterable[str | None] | None = None) -> None:
        if tickers is None:
            self._entries.clear()
            self._errors.clear()
            return
        key = build_cache_key(tickers)
        if key is not None:
            self._entries.pop(key, None)
            self._errors.pop(key, None)

    def _is_fresh(self, entry: _CacheEntry) -> bool:
        return self._clock() - entry.fetched_at < self.dedupe_seconds

    async def _fetch_with_retry(self, key: str) -> MarketPrices:
        attempts = self.retry_count + 1
        for attempt in range(1, attempts + 1):
            try:
                data = await self._fetch(key)
            except (MarketDataError, httpx.HTTPError) as exc:
                if attempt >= attempts:
                    logger.warning("Market data fetch for %s failed after %d attempts: %s", key, attempt, exc)
                    raise
                logger.info("Market data fetch for %s failed (attempt %d/%d): %s", key, attempt, attempts, exc)
                if self.retry_backoff_seconds:
                    await asyncio.sleep(self.retry_backoff_seconds * 2 ** (attempt - 1))
                continue
            self._entries[key] = _CacheEntry(fetched_at=self._clock(), data=data)
            return data
        raise AssertionError("unreachable")  # pragma: no cover

    async def _fetch(self, key: str) -> MarketPrices:
        headers = {"Cache-Control": "no-store"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        try:
            inject(headers)
        except Exception:
            # Tracing is optional; the request must go out regardless
            pass

        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        self.request_count += 1
        started = time.perf_counter()
        response = await self._client.get(
            f"{self.base_url}/market-data",
            params={"tickers": key},
            headers=headers,
        )
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        if response.status_code >= 400:
            raise MarketDataError(response.status_code, response.text, elapsed_ms)

        payload = response.json()
        if not isinstance(payload, dict):
            raise MarketDataError(response.status_code, "unexpected payload", elapsed_ms)
        missing = [ticker for ticker in key.split(",") if not _is_price(payload.get(ticker))]
        if missing:
            logger.warning("Missing market data for tickers: %s", ", ".join(missing))
        logger.debug("Loaded market data for %s in %dms", key, elapsed_ms)
        return payload


def _is_price(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


__all__ = [
    "MarketDataCache",
    "MarketDataState",
    "MarketPrices",
    "build_cache_key",
    "normalize_tickers",
]
