"""Order notification intake: append in arrival order, dedup, dismiss."""

from __future__ import annotations

import logging
from typing import AsyncIterable, Callable

from restaurant_console.models import Notification, WireDict

logger = logging.getLogger(__name__)

# How many dismissed keys are remembered to suppress redelivered events.
DISMISSED_MEMORY = 500


class NotificationIntake:
    """Holds order notifications until the owner dismisses them.

    Entries keep arrival order and are never re-sorted by their embedded
    timestamp. An event repeating a listed or recently dismissed
    ``(id, timestamp)`` pair is dropped; dismissal removes by ``id`` alone.
    """

    def __init__(
        self,
        on_change: Callable[[], None] | None = None,
        dismissed_memory: int = DISMISSED_MEMORY,
    ) -> None:
        self.on_change = on_change
        self.dismissed_memory = dismissed_memory
        self._notifications: list[Notification] = []
        self._listed: set[tuple[str, str]] = set()
        # Insertion ordered; the oldest keys are evicted first.
        self._dismissed: dict[tuple[str, str], None] = {}

    @property
    def notifications(self) -> tuple[Notification, ...]:
        return tuple(self._notifications)

    def __len__(self) -> int:
        return len(self._notifications)

    def ingest(self, event: WireDict) -> Notification | None:
        """Append the notification for ``event``; returns None for a duplicate."""
        notification = Notification.from_event(event)
        key = notification.display_key
        if key in self._listed or key in self._dismissed:
            logger.debug("Dropping duplicate notification %s", key)
            return None
        self._listed.add(key)
        self._notifications.append(notification)
        self._changed()
        return notification

    async def run(self, source: AsyncIterable[WireDict]) -> None:
        async for event in source:
            try:
                self.ingest(event)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed order event %r: %s", event, exc)

    def dismiss(self, notification_id: str) -> int:
        """Remove every notification with ``notification_id``; returns how many went."""
        kept = []
        for notification in self._notifications:
            if notification.id != notification_id:
                kept.append(notification)
                continue
            self._listed.discard(notification.display_key)
            self._remember_dismissed(notification.display_key)

        removed = len(self._notifications) - len(kept)
        if removed:
            self._notifications = kept
            self._changed()
        return removed

    def _remember_dismissed(self, key: tuple[str, str]) -> None:
        self._dismissed.pop(key, None)
        self._dismissed[key] = None
        while len(self._dismissed) > self.dismissed_memory:
            del self._dismissed[next(iter(self._dismissed))]

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()
