"""
In-process response cache with per-entry time-to-live.

Expiry is checked lazily on every read and, independently, by a
background sweep task that drops stale entries between reads.
There is no size bound and no LRU ordering.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

from steam_profile_api.config import CacheConfig
from steam_profile_api.logger import get_logger

DEFAULT_SWEEP_INTERVAL_SECONDS = 5 * 60


def _wall_clock_ms() -> float:
    return time.time() * 1000


def ms_to_datetime(timestamp_ms: float) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)


@dataclass
class CacheEntry:
    """One cached payload and the moment it was stored."""

    payload: Any
    stored_at_ms: float
    ttl_ms: int

    @property
    def expires_at_ms(self) -> float:
        return self.stored_at_ms + self.ttl_ms

    def is_expired(self, now_ms: float) -> bool:
        return now_ms - self.stored_at_ms > self.ttl_ms


class TTLCache:
    """
    Mapping of string keys to payloads that expire after a per-entry TTL.

    Example:
        >>> cache = TTLCache()
        >>> cache.set("steam-user-76561197960287930", payload, ttl_ms=600_000)
        >>> cache.get("steam-user-76561197960287930")
    """

    def __init__(
        self,
        *,
        sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """
        Args:
            sweep_interval_seconds: Period of the background expiry sweep
            clock: Returns "now" in epoch milliseconds (wall clock if None)
        """
        self._store: dict[str, CacheEntry] = {}
        self._sweep_interval = sweep_interval_seconds
        self._clock = clock or _wall_clock_ms
        self._sweeper: asyncio.Task[None] | None = None
        self._logger = get_logger(__name__, component="cache")

    def get(self, key: str) -> Any | None:
        """Return the payload for ``key``, or None if missing or expired."""
        entry = self._store.get(key)
        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            del self._store[key]
            self._logger.debug("Cache entry expired", key=key)
            return None

        return entry.payload

    def set(self, key: str, payload: Any, ttl_ms: int) -> None:
        """Store ``payload`` under ``key``, replacing any previous entry."""
        self._store[key] = CacheEntry(
            payload=payload,
            stored_at_ms=self._clock(),
            ttl_ms=ttl_ms,
        )

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def clear(self) -> None:
        self._store.clear()

    def stored_at(self, key: str) -> datetime | None:
        """When the entry under ``key`` was written."""
        entry = self._store.get(key)
        if entry is None:
            return None
        return ms_to_datetime(entry.stored_at_ms)

    def expiry_of(self, key: str) -> datetime | None:
        """When the entry under ``key`` stops being served."""
        entry = self._store.get(key)
        if entry is None:
            return None
        return ms_to_datetime(entry.expires_at_ms)

    def sweep(self) -> int:
        """
        Delete every expired entry.

        Returns:
            int: Number of entries removed
        """
        now = self._clock()
        expired = [key for key, entry in self._store.items() if entry.is_expired(now)]
        for key in expired:
            del self._store[key]

        if expired:
            self._logger.debug("Swept expired entries", removed=len(expired))
        return len(expired)

    def start(self) -> None:
        """
        Start the background sweep on the running event loop.

        Calling it again while the sweep is alive is a no-op.
        """
        if self._sweeper is not None and not self._sweeper.done():
            return
        self._sweeper = asyncio.get_running_loop().create_task(self._sweep_forever())
        self._logger.debug("Cache sweeper started", interval_seconds=self._sweep_interval)

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            self.sweep()

    @property
    def is_sweeping(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    async def close(self) -> None:
        """Stop the sweeper and drop every entry."""
        if self._sweeper is not None:
            self._sweeper.cancel()
            try:
                await self._sweeper
            except asyncio.CancelledError:
                pass
            self._sweeper = None
        self.clear()

    def stats(self) -> dict[str, int]:
        """Entry count (for monitoring)."""
        return {"item_count": len(self._store)}

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store


@lru_cache
def get_cache() -> TTLCache:
    """
    Get the process-wide cache used by the HTTP adapters.

    Aggregators take the cache as a constructor argument; this is only
    the default instance handed to them at the edges.
    """
    return TTLCache(sweep_interval_seconds=CacheConfig().sweep_interval_seconds)
