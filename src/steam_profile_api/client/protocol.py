"""
Capability interface the aggregators depend on.

Anything with these coroutines can stand in for the Steam Web API,
which is how the aggregator tests run against an in-memory fake.
"""

from typing import Protocol, runtime_checkable

from steam_profile_api.contracts import (
    AchievementData,
    OwnedGame,
    PlayerSummary,
    RecentlyPlayedGames,
    StoreDetailResult,
)


@runtime_checkable
class SteamClientProtocol(Protocol):
    """Upstream calls needed to build the three responses."""

    async def get_player_profile(self, user_id: str) -> list[PlayerSummary]:
        """Profiles for ``user_id``; an empty list means not found or private."""
        ...

    async def get_owned_games(
        self, user_id: str, include_catalog_info: bool = True
    ) -> list[OwnedGame]: ...

    async def get_recently_played(self, user_id: str, limit: int) -> RecentlyPlayedGames: ...

    async def get_store_detail(self, app_id: int) -> StoreDetailResult:
        """May raise; callers convert failures to ``StoreDetailResult(success=False)``."""
        ...

    async def get_achievements(self, user_id: str, app_id: int) -> AchievementData:
        """Empty lists, not an exception, for games without stats."""
        ...

    def set_region(self, country_code: str) -> None: ...
