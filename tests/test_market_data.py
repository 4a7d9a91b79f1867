"""Market data cache: dedupe window, shared in-flight requests, retries."""

from __future__ import annotations

import asyncio

import httpx

from trading_journal.errors import MarketDataError
from trading_journal.services.market_data import MarketDataCache, build_cache_key, normalize_tickers

BASE_URL = "http://journal.test/api"


def _cache(handler, clock, **kwargs) -> MarketDataCache:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    options = {"dedupe_seconds": 60, "retry_count": 2, "retry_backoff_seconds": 0}
    options.update(kwargs)
    return MarketDataCache(BASE_URL, client=client, token="", clock=clock, **options)


def test_cache_key_is_order_and_case_insensitive():
    assert normalize_tickers([" vnm", "FPT", "fpt", "", None]) == ["FPT", "VNM"]
    assert build_cache_key(["VNM", "FPT"]) == build_cache_key(["fpt", "vnm"]) == "FPT,VNM"
    assert build_cache_key([]) is None


async def test_repeated_requests_within_window_hit_network_once(clock):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"FPT": 120_000, "VNM": 70_000})

    cache = _cache(handler, clock)
    first = await cache.get(["FPT", "VNM"])
    clock.advance(30)
    second = await cache.get(["VNM", "fpt"])

    assert cache.request_count == 1
    assert first.data == second.data == {"FPT": 120_000, "VNM": 70_000}
    assert seen[0].url.params["tickers"] == "FPT,VNM"
    assert seen[0].headers["cache-control"] == "no-store"


async def test_expired_entry_is_refetched(clock):
    prices = iter([{"FPT": 100_000}, {"FPT": 101_000}])

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=next(prices))

    cache = _cache(handler, clock)
    await cache.get(["FPT"])
    clock.advance(61)
    state = await cache.get(["FPT"])

    assert cache.request_count == 2
    assert state.data == {"FPT": 101_000}


async def test_concurrent_callers_share_one_request(clock):
    release = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        await release.wait()
        return httpx.Response(200, json={"HPG": 25_000})

    cache = _cache(handler, clock)
    first = asyncio.ensure_future(cache.get(["HPG"]))
    second = asyncio.ensure_future(cache.get(["hpg"]))
    await asyncio.sleep(0)
    assert cache.state(["HPG"]).is_loading

    release.set()
    results = await asyncio.gather(first, second)

    assert cache.request_count == 1
    assert [result.data for result in results] == [{"HPG": 25_000}, {"HPG": 25_000}]
    assert not cache.state(["HPG"]).is_loading


async def test_force_bypasses_window(clock):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"FPT": 100_000})

    cache = _cache(handler, clock)
    await cache.get(["FPT"])
    await cache.get(["FPT"], force=True)

    assert cache.request_count == 2


async def test_failures_are_retried_then_reported(clock):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="upstream down")

    cache = _cache(handler, clock, retry_count=2)
    state = await cache.get(["FPT"])

    assert cache.request_count == 3
    assert state.data == {}
    assert isinstance(state.error, MarketDataError)
    assert state.error.status_code == 503
    message = str(state.error)
    assert message.startswith("HTTP 503: upstream down (")
    assert message.endswith("ms)")


async def test_retry_recovers_after_transient_error(clock):
    responses = iter([httpx.Response(500, text="boom"), httpx.Response(200, json={"FPT": 99_000})])

    def handler(request: httpx.Request) -> httpx.Response:
        return next(responses)

    cache = _cache(handler, clock)
    state = await cache.get(["FPT"])

    assert cache.request_count == 2
    assert state.error is None
    assert state.data == {"FPT": 99_000}


async def test_stale_data_survives_failed_refresh(clock):
    responses = iter([httpx.Response(200, json={"FPT": 99_000})] + [httpx.Response(502, text="bad")] * 3)

    def handler(request: httpx.Request) -> httpx.Response:
        return next(responses)

    cache = _cache(handler, clock)
    await cache.get(["FPT"])
    state = await cache.get(["FPT"], force=True)

    assert state.data == {"FPT": 99_000}
    assert state.error is not None


async def test_mutate_with_data_skips_network(clock):
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - must not be called
        raise AssertionError("unexpected request")

    cache = _cache(handler, clock)
    await cache.mutate(["FPT"], {"FPT": 123_000})
    state = await cache.get(["FPT"])

    assert cache.request_count == 0
    assert state.data == {"FPT": 123_000}


async def test_empty_ticker_list_makes_no_request(clock):
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - must not be called
        raise AssertionError("unexpected request")

    cache = _cache(handler, clock)
    state = await cache.get([" ", None])

    assert state.data == {}
    assert cache.request_count == 0
