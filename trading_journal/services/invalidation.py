"""Publish/subscribe staleness signals shared between controllers.

Each topic carries a version counter that only moves forward, plus the payload
of its latest publish. A controller that records the version it last loaded
can tell on its next load that data went stale, even when the publish happened
before it subscribed.
"""

from __future__ import annotations

import enum
import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

Listener = Callable[["Topic", Any], None]


class Topic(str, enum.Enum):
    PORTFOLIO = "portfolio"
    TRANSACTIONS = "transactions"
    ACCOUNT_FEES = "account-fees"
    STOCK_ACCOUNTS = "stock-accounts"
    ADJUSTMENTS = "cost-basis-adjustments"
    COST_BASIS_MODE = "cost-basis-mode"


class InvalidationBus:
    def __init__(self) -> None:
        self._versions: dict[Topic, int] = defaultdict(int)
        self._payloads: dict[Topic, Any] = {}
        self._listeners: dict[Topic, list[Listener]] = defaultdict(list)

    def subscribe(self, topic: Topic, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""

        self._listeners[topic].append(listener)
        return lambda: self.unsubscribe(topic, listener)

    def unsubscribe(self, topic: Topic, listener: Listener) -> None:
        listeners = self._listeners.get(topic, [])
        if listener in listeners:
            listeners.remove(listener)

    def publish(self, topic: Topic, payload: Any = None) -> int:
        self._versions[topic] += 1
        if payload is not None:
            self._payloads[topic] = payload
        version = self._versions[topic]
        logger.debug("Invalidated %s (version %d)", topic.value, version)
        for listener in list(self._listeners.get(topic, [])):
            listener(topic, payload)
        return version

    def version(self, topic: Topic) -> int:
        return self._versions.get(topic, 0)

    def last_payload(self, topic: Topic, default: Any = None) -> Any:
        return self._payloads.get(topic, default)

    def is_stale(self, topic: Topic, seen_version: int) -> bool:
        return self.version(topic) > seen_version


__all__ = ["InvalidationBus", "Listener", "Topic"]
