from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, Hashable, List, Optional, Tuple

from pipetrack.core.settings import get_app_settings
from pipetrack.schemas.orders import OrderRead

logger = logging.getLogger(__name__)


class OrderReadCache:
    """
    Read-through cache of order list snapshots.

    The database stays the only source of truth: entries are built by the
    loader passed to get_or_load and every write path calls invalidate()
    after its transaction commits. Entries also expire after ttl_seconds.
    """

    def __init__(self, ttl_seconds: float) -> None:
        self.ttl_seconds = ttl_seconds
        self._entries: Dict[Hashable, Tuple[float, List[OrderRead]]] = {}
        self._generation = 0
        self._lock = asyncio.Lock()

    # PUBLIC_INTERFACE
    async def get_or_load(
        self, key: Hashable, loader: Callable[[], Awaitable[List[OrderRead]]]
    ) -> List[OrderRead]:
        """Return the cached snapshot for key, loading it on miss or expiry."""
        if self.ttl_seconds <= 0:
            return await loader()

        now = time.monotonic()
        async with self._lock:
            hit = self._entries.get(key)
            if hit is not None and now - hit[0] < self.ttl_seconds:
                return list(hit[1])
            generation = self._generation

        value = await loader()

        async with self._lock:
            # A write that landed while loading makes this snapshot stale.
            if generation == self._generation:
                self._entries[key] = (time.monotonic(), value)
        return list(value)

    # PUBLIC_INTERFACE
    def invalidate(self, reason: Optional[str] = None) -> None:
        """Drop every snapshot. Called after each committed write."""
        self._generation += 1
        if self._entries:
            logger.debug("Order cache invalidated (%s)", reason or "write")
        self._entries.clear()


# Singleton instance
order_cache = OrderReadCache(ttl_seconds=get_app_settings().ORDER_CACHE_TTL_SECONDS)
