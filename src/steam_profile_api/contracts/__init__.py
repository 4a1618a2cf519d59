"""
Data contracts for Steam API responses.

This module provides Pydantic models that define the expected
structure of data from the Steam Web and Store APIs, ensuring
type safety and validation before aggregation.
"""

from steam_profile_api.contracts.steam_achievements import (
    AchievementData,
    AchievementSchemaEntry,
    PlayerAchievement,
)
from steam_profile_api.contracts.steam_store import (
    PriceOverview,
    ReleaseDate,
    StoreDetail,
    StoreDetailResult,
)
from steam_profile_api.contracts.steam_user import (
    AppId,
    OwnedGame,
    PlayerSummary,
    RecentlyPlayedGames,
)

__all__ = [
    "AchievementData",
    "AchievementSchemaEntry",
    "AppId",
    "OwnedGame",
    "PlayerAchievement",
    "PlayerSummary",
    "PriceOverview",
    "RecentlyPlayedGames",
    "ReleaseDate",
    "StoreDetail",
    "StoreDetailResult",
]
