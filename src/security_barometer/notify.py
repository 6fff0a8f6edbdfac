"""Notifier — bounded in-memory feed of user-facing notifications.

Operations that must not raise (adapter fetches, alert integration) report
their outcome here instead; the dashboard polls GET /notifications.
"""

from __future__ import annotations

from collections import deque

from security_barometer.logger import get_logger
from security_barometer.model.notification import Notification, Variant

logger = get_logger(__name__)


class Notifier:
    def __init__(self, max_retained: int = 200) -> None:
        self._items: deque[Notification] = deque(maxlen=max_retained)

    def push(self, title: str, description: str, variant: Variant = "default") -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self._items.append(notification)
        logger.info("notification", title=title, variant=variant)
        return notification

    def recent(self, limit: int = 50) -> list[Notification]:
        """Return up to `limit` notifications, newest first."""
        return list(reversed(self._items))[:limit]

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)
