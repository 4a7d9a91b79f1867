"""Shared clients handed to route handlers through ``Depends``."""

from __future__ import annotations

import httpx
from fastapi import FastAPI, Request

from trading_journal.config import AppSettings
from trading_journal.services.invalidation import InvalidationBus
from trading_journal.services.journal_api import JournalAPI
from trading_journal.services.market_data import MarketDataCache


def attach_resources(app: FastAPI, settings: AppSettings) -> None:
    """Create the process-wide HTTP client, price cache and invalidation bus."""

    client = httpx.AsyncClient(timeout=settings.journal_api_timeout_seconds)
    app.state.http_client = client
    app.state.journal_api = JournalAPI(
        settings.journal_api_url, token=settings.journal_api_token, client=client
    )
    app.state.market_data = MarketDataCache(
        settings.journal_api_url,
        client=client,
        token=settings.journal_api_token,
        dedupe_seconds=settings.market_data_dedupe_seconds,
        retry_count=settings.market_data_retry_count,
        retry_backoff_seconds=settings.market_data_retry_backoff_seconds,
    )
    app.state.bus = InvalidationBus()


async def release_resources(app: FastAPI) -> None:
    client = getattr(app.state, "http_client", None)
    if client is not None:
        await client.aclose()


def get_journal_api(request: Request) -> JournalAPI:
    return request.app.state.journal_api


def get_market_data(request: Request) -> MarketDataCache:
    return request.app.state.market_data


def get_bus(request: Request) -> InvalidationBus:
    return request.app.state.bus


__all__ = [
    "attach_resources",
    "release_resources",
    "get_journal_api",
    "get_market_data",
    "get_bus",
]
