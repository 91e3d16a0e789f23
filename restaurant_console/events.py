"""Order event source polling the store."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator

from restaurant_console.config import ORDER_POLL_SECONDS
from restaurant_console.errors import StoreError
from restaurant_console.models import WireDict
from restaurant_console.store import RestaurantStore

logger = logging.getLogger(__name__)


async def poll_order_events(
    store: RestaurantStore,
    interval: float = ORDER_POLL_SECONDS,
) -> AsyncIterator[WireDict]:
    """Yield order-created events forever, asking only for ones after the last seen timestamp.

    A failed poll is logged and retried on the next tick.
    """
    since = None
    while True:
        try:
            events = await store.fetch_order_events(since)
        except StoreError as exc:
            logger.warning("Order poll failed: %s", exc)
            events = []

        for event in events:
            if isinstance(event, dict) and event.get("timestamp") is not None:
                since = event["timestamp"]
            yield event

        await asyncio.sleep(interval)
