"""
The three aggregators wired to one client, cache and fan-out.

This is the object adapters hold for their lifetime; coalescing of
concurrent fetches only works across requests that share it.
"""

from typing import Any

from steam_profile_api.aggregation.achievements import AchievementsAggregator
from steam_profile_api.aggregation.base import AggregationResult, BaseAggregator
from steam_profile_api.aggregation.fanout import FanOut
from steam_profile_api.aggregation.games import GamesAggregator
from steam_profile_api.aggregation.user import UserAggregator
from steam_profile_api.cache import TTLCache, get_cache
from steam_profile_api.client.protocol import SteamClientProtocol
from steam_profile_api.client.steam_api import SteamWebAPIClient
from steam_profile_api.config import Settings, TTLConfig
from steam_profile_api.models import ResponseKind


class ProfileService:
    """
    Entry point for the aggregation core.

    Example:
        >>> service = ProfileService.from_settings(get_settings())
        >>> result = await service.fetch(ResponseKind.GAMES, "76561197960287930")
        >>> result.payload.total_count
    """

    def __init__(
        self,
        client: SteamClientProtocol,
        cache: TTLCache,
        ttl: TTLConfig,
        *,
        fanout: FanOut | None = None,
    ) -> None:
        self.client = client
        self.cache = cache
        self.ttl = ttl
        fanout = fanout or FanOut(client)
        self.aggregators: dict[ResponseKind, BaseAggregator[Any]] = {
            ResponseKind.USER: UserAggregator(client, cache, ttl, fanout=fanout),
            ResponseKind.GAMES: GamesAggregator(client, cache, ttl, fanout=fanout),
            ResponseKind.ACHIEVEMENTS: AchievementsAggregator(client, cache, ttl, fanout=fanout),
        }

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        cache: TTLCache | None = None,
        client: SteamClientProtocol | None = None,
    ) -> "ProfileService":
        """Build the service with the HTTP client and the process-wide cache."""
        client = client or SteamWebAPIClient(
            steam_config=settings.steam,
            retry_config=settings.retry,
        )
        fanout = FanOut(
            client,
            max_concurrency=settings.steam.max_concurrency,
            store_timeout=settings.steam.store_timeout_seconds,
            store_delay=settings.steam.store_delay_seconds,
        )
        return cls(
            client,
            cache if cache is not None else get_cache(),
            settings.cache.ttl(),
            fanout=fanout,
        )

    async def fetch(self, kind: ResponseKind, user_id: str) -> AggregationResult[Any]:
        return await self.aggregators[kind].fetch(user_id)

    async def close(self) -> None:
        """Release the upstream client's connections."""
        close = getattr(self.client, "close", None)
        if close is not None:
            await close()
