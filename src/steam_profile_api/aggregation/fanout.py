"""
Per-app-id upstream fan-out with failure isolation.

Store-detail and achievement lookups run through a bounded worker pool.
One broken app id never fails the batch: a store lookup that errors or
times out becomes ``StoreDetailResult(success=False)``, and an
achievement lookup that errors is left out of the result.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from steam_profile_api.client.protocol import SteamClientProtocol
from steam_profile_api.contracts import AchievementData, StoreDetailResult
from steam_profile_api.logger import get_logger

R = TypeVar("R")

DEFAULT_STORE_TIMEOUT_SECONDS = 5.0
DEFAULT_STORE_DELAY_SECONDS = 0.1


class FanOut:
    """
    Runs one upstream call per app id with at most ``max_concurrency``
    calls in flight.

    With ``max_concurrency=1`` calls run strictly one after another, in
    list order.
    """

    def __init__(
        self,
        client: SteamClientProtocol,
        *,
        max_concurrency: int = 4,
        store_timeout: float = DEFAULT_STORE_TIMEOUT_SECONDS,
        store_delay: float = DEFAULT_STORE_DELAY_SECONDS,
    ) -> None:
        """
        Args:
            client: Upstream capability
            max_concurrency: Calls in flight at once
            store_timeout: Upper bound for each store-detail call, in seconds
            store_delay: Pause held by a worker after each store-detail call
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._client = client
        self._max_concurrency = max_concurrency
        self._store_timeout = store_timeout
        self._store_delay = store_delay
        self._logger = get_logger(__name__, component="fanout")

    async def _run(
        self,
        app_ids: Sequence[int],
        call: Callable[[int], Awaitable[R | None]],
    ) -> dict[int, R]:
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def worker(app_id: int) -> R | None:
            async with semaphore:
                return await call(app_id)

        results = await asyncio.gather(*(worker(app_id) for app_id in app_ids))
        return {
            app_id: result
            for app_id, result in zip(app_ids, results)
            if result is not None
        }

    async def store_details(self, app_ids: Sequence[int]) -> dict[int, StoreDetailResult]:
        """
        Store detail for every app id.

        Every requested id is present in the result.
        """
        start_time = time.perf_counter()

        async def fetch(app_id: int) -> StoreDetailResult:
            try:
                return await asyncio.wait_for(
                    self._client.get_store_detail(app_id),
                    timeout=self._store_timeout,
                )
            except asyncio.TimeoutError:
                self._logger.warning(
                    "Store detail timed out",
                    app_id=app_id,
                    timeout_seconds=self._store_timeout,
                )
                return StoreDetailResult(success=False)
            except Exception as e:
                self._logger.warning("Store detail failed", app_id=app_id, error=str(e))
                return StoreDetailResult(success=False)
            finally:
                if self._store_delay > 0:
                    await asyncio.sleep(self._store_delay)

        results = await self._run(app_ids, fetch)

        self._logger.info(
            "Store details fetched",
            total=len(app_ids),
            successful=sum(1 for r in results.values() if r.success),
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return results

    async def achievements(
        self, user_id: str, app_ids: Sequence[int]
    ) -> dict[int, AchievementData]:
        """
        Achievement data for every app id whose lookup succeeded.

        Failed ids are absent from the result.
        """
        start_time = time.perf_counter()

        async def fetch(app_id: int) -> AchievementData | None:
            try:
                return await self._client.get_achievements(user_id, app_id)
            except Exception as e:
                self._logger.warning("Achievements fetch failed", app_id=app_id, error=str(e))
                return None

        results = await self._run(app_ids, fetch)

        self._logger.info(
            "Achievements fetched",
            total=len(app_ids),
            successful=len(results),
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return results
