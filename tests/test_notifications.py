"""Notification queue expiry and ordering."""

from __future__ import annotations

from trading_journal.services.notifications import NotificationQueue, NotificationType


def test_notifications_expire_after_duration(clock):
    queue = NotificationQueue(3000, clock=clock)
    queue.show_success("Lưu thành công")
    clock.advance(1)
    queue.show_error("Lỗi", duration_ms=5000)

    assert [item.message for item in queue.drain()] == ["Lưu thành công", "Lỗi"]
    clock.advance(2.5)
    active = queue.drain()
    assert [item.type for item in active] == [NotificationType.ERROR]
    clock.advance(5)
    assert queue.drain() == []


def test_zero_duration_sticks_until_removed(clock):
    queue = NotificationQueue(3000, clock=clock)
    sticky = queue.show_warning("Không thể xóa", duration_ms=0)
    clock.advance(3600)

    assert queue.drain() == [sticky]
    assert queue.remove(sticky.id)
    assert not queue.remove(sticky.id)
    assert len(queue) == 0


def test_ids_are_unique(clock):
    queue = NotificationQueue(3000, clock=clock)
    ids = {queue.show_info(f"message {index}").id for index in range(5)}
    assert len(ids) == 5
