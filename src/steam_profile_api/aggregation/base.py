"""
Base aggregator: cache lookup, request coalescing and timing.

Subclasses only describe how to build their payload from the upstream;
this class decides whether that needs to happen at all.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, ClassVar, Generic, TypeVar

from steam_profile_api.aggregation.fanout import FanOut
from steam_profile_api.cache import TTLCache
from steam_profile_api.client.protocol import SteamClientProtocol
from steam_profile_api.config import TTLConfig
from steam_profile_api.logger import get_logger
from steam_profile_api.models import ResponseKind

P = TypeVar("P")


def _consume_exception(task: asyncio.Task[Any]) -> None:
    # every caller may have been cancelled before the fetch failed
    if not task.cancelled():
        task.exception()


@dataclass(frozen=True)
class AggregationResult(Generic[P]):
    """A payload plus where it came from."""

    payload: P
    cached: bool
    cached_at: datetime
    cache_expiry: datetime
    fetch_duration_ms: float

    @property
    def fetch_duration(self) -> str:
        return f"{round(self.fetch_duration_ms)}ms"


class BaseAggregator(ABC, Generic[P]):
    """
    Serves one response kind for any user id.

    Lifecycle of a key: MISS -> FETCHING -> stored on success, or the
    error propagates and nothing is stored. Callers arriving while a
    fetch for the same key is running await that fetch instead of
    starting another one.
    """

    kind: ClassVar[ResponseKind]

    def __init__(
        self,
        client: SteamClientProtocol,
        cache: TTLCache,
        ttl: TTLConfig,
        *,
        fanout: FanOut | None = None,
    ) -> None:
        """
        Args:
            client: Upstream capability
            cache: Where finished payloads are kept
            ttl: Lifetimes for every response kind, in milliseconds
            fanout: Per-app-id worker pool (sequential default if None)
        """
        self._client = client
        self._cache = cache
        self._ttl = ttl
        self._fanout = fanout or FanOut(client, max_concurrency=1)
        self._in_flight: dict[str, asyncio.Task[Any]] = {}
        self._logger = get_logger(
            self.__class__.__name__,
            component="aggregator",
            kind=self.kind.value,
        )

    @property
    @abstractmethod
    def ttl_ms(self) -> int:
        """Lifetime of this kind's cache entries."""
        ...

    @abstractmethod
    async def build(self, user_id: str) -> P:
        """Fetch everything from the upstream and assemble the payload."""
        ...

    def cache_key(self, user_id: str) -> str:
        return f"{self.kind.value}-{user_id}"

    async def fetch(self, user_id: str) -> AggregationResult[P]:
        """
        The payload for ``user_id`` with cache metadata.

        Raises:
            PlayerNotFoundError: If the profile lookup finds nobody
            UpstreamError: If a non-isolated upstream call fails
        """
        key = self.cache_key(user_id)
        start_time = time.perf_counter()

        cached = self._cache.get(key)
        if cached is not None:
            self._logger.debug("Cache hit", key=key)
            return self._result(key, cached, cached=True, start_time=start_time)

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._refresh(key, user_id))
            task.add_done_callback(_consume_exception)
            self._in_flight[key] = task
        else:
            self._logger.debug("Joining in-flight fetch", key=key)

        # A caller going away must not abort the fetch other callers await.
        payload = await asyncio.shield(task)
        return self._result(key, payload, cached=False, start_time=start_time)

    async def _refresh(self, key: str, user_id: str) -> P:
        self._logger.info("Fetching fresh data", user_id=user_id)
        start_time = time.perf_counter()

        try:
            payload = await self.build(user_id)
        except Exception:
            self._logger.exception("Aggregation failed", user_id=user_id)
            raise
        finally:
            self._in_flight.pop(key, None)

        self._cache.set(key, payload, self.ttl_ms)
        self._logger.info(
            "Fetched fresh data",
            user_id=user_id,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return payload

    def _result(self, key: str, payload: P, *, cached: bool, start_time: float) -> AggregationResult[P]:
        now = datetime.now(timezone.utc)
        return AggregationResult(
            payload=payload,
            cached=cached,
            cached_at=self._cache.stored_at(key) or now,
            cache_expiry=self._cache.expiry_of(key) or now,
            fetch_duration_ms=(time.perf_counter() - start_time) * 1000,
        )
