"""User notifications. The only mutation is flipping `read` (and stamping `read_at`)."""

from __future__ import annotations

import time

from organizeit.clock import Clock, iso_from_ms, now_ms
from organizeit.log import logger
from organizeit.state import open_collection
from organizeit.store.kv import KeyValueStore


class NotificationService:
    def __init__(self, store: KeyValueStore, *, clock: Clock = time.time) -> None:
        self._notifications = open_collection("notifications", store, clock)
        self._clock = clock

    def list(self) -> dict:
        notifications = self._notifications.read()
        return {
            "notifications": notifications,
            "unread_count": sum(1 for n in notifications if not n.get("read")),
            "total_count": len(notifications),
            "last_updated": iso_from_ms(now_ms(self._clock)),
        }

    def mark_read(self, notification_id: str) -> dict:
        stamp = iso_from_ms(now_ms(self._clock))

        def mutate(notification: dict) -> None:
            notification["read"] = True
            notification["read_at"] = stamp

        notification = self._notifications.update(notification_id, mutate)
        logger.debug("Notification %s marked read", notification_id)
        return {"notification": notification, "message": "Notification marked as read"}
