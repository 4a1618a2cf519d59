"""
Token bucket shared by every request a client makes.

The fan-out runs several workers against the same API key; they all
draw from one bucket so bursts stay inside Steam's per-key budget.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any

from steam_profile_api.logger import get_logger


@dataclass(frozen=True)
class RateLimiterConfig:
    """Sustained rate and burst capacity."""

    requests_per_minute: int = 120
    burst_size: int = 10

    @property
    def tokens_per_second(self) -> float:
        return self.requests_per_minute / 60.0


class RateLimiter:
    """
    Token bucket for upstream requests.

    Example:
        >>> limiter = RateLimiter(RateLimiterConfig(requests_per_minute=120))
        >>> async with limiter:
        ...     await client.get_store_detail(570)
    """

    def __init__(self, config: RateLimiterConfig | None = None) -> None:
        self.config = config or RateLimiterConfig()
        self._tokens = float(self.config.burst_size)
        self._updated_at = time.monotonic()
        self._lock = asyncio.Lock()
        self._logger = get_logger(__name__, component="rate_limiter")

    def _refill(self) -> None:
        now = time.monotonic()
        gained = (now - self._updated_at) * self.config.tokens_per_second
        self._tokens = min(float(self.config.burst_size), self._tokens + gained)
        self._updated_at = now

    async def acquire(self) -> None:
        """Take one token, sleeping until one is available. Waiters queue on the lock."""
        async with self._lock:
            self._refill()
            deficit = 1 - self._tokens
            if deficit > 0:
                wait_seconds = deficit / self.config.tokens_per_second
                self._logger.debug("Throttling upstream request", wait_seconds=round(wait_seconds, 2))
                await asyncio.sleep(wait_seconds)
                self._refill()
            self._tokens -= 1

    async def __aenter__(self) -> "RateLimiter":
        await self.acquire()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        return None

    @property
    def available_tokens(self) -> float:
        self._refill()
        return self._tokens
