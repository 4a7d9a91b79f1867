"""Transient user notifications.

Producers enqueue messages through ``show_*``; a single consumer calls
:meth:`NotificationQueue.drain` to drop expired entries and read what is still
visible.
"""

from __future__ import annotations

import enum
import itertools
import logging
import time
from dataclasses import dataclass
from typing import Callable

from trading_journal.config import get_settings

logger = logging.getLogger(__name__)


class NotificationType(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    id: int
    message: str
    type: NotificationType
    duration_ms: int
    created_at: float

    def expires_at(self) -> float | None:
        # A non-positive duration keeps the notification until it is removed
        if self.duration_ms <= 0:
            return None
        return self.created_at + self.duration_ms / 1000


class NotificationQueue:
    def __init__(
        self,
        default_duration_ms: int | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if default_duration_ms is None:
            default_duration_ms = get_settings().notification_duration_ms
        self.default_duration_ms = default_duration_ms
        self._clock = clock
        self._ids = itertools.count(1)
        self._items: list[Notification] = []

    def __len__(self) -> int:
        return len(self._items)

    def enqueue(
        self,
        message: str,
        type: NotificationType = NotificationType.SUCCESS,
        duration_ms: int | None = None,
    ) -> Notification:
        notification = Notification(
            id=next(self._ids),
            message=message,
            type=NotificationType(type),
            duration_ms=self.default_duration_ms if duration_ms is None else duration_ms,
            created_at=self._clock(),
        )
        self._items.append(notification)
        logger.debug("Notification %s queued: %s", notification.type.value, message)
        return notification

    def show_success(self, message: str, duration_ms: int | None = None) -> Notification:
        return self.enqueue(message, NotificationType.SUCCESS, duration_ms)

    def show_error(self, message: str, duration_ms: int | None = None) -> Notification:
        return self.enqueue(message, NotificationType.ERROR, duration_ms)

    def show_warning(self, message: str, duration_ms: int | None = None) -> Notification:
        return self.enqueue(message, NotificationType.WARNING, duration_ms)

    def show_info(self, message: str, duration_ms: int | None = None) -> Notification:
        return self.enqueue(message, NotificationType.INFO, duration_ms)

    def remove(self, notification_id: int) -> bool:
        before = len(self._items)
        self._items = [item for item in self._items if item.id != notification_id]
        return len(self._items) != before

    def drain(self) -> list[Notification]:
        """Drop expired notifications and return the ones still active."""

        now = self._clock()
        self._items = [
            item for item in self._items if item.expires_at() is None or item.expires_at() > now
        ]
        return list(self._items)

    def active(self) -> list[Notification]:
        return self.drain()

    def clear(self) -> None:
        self._items.clear()


__all__ = ["Notification", "NotificationQueue", "NotificationType"]
