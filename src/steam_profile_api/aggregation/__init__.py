"""
Response aggregation.

Each aggregator fans out to the Steam APIs, merges the payloads into
one response model and keeps it in the TTL cache.
"""

from steam_profile_api.aggregation.achievements import AchievementsAggregator
from steam_profile_api.aggregation.base import AggregationResult, BaseAggregator
from steam_profile_api.aggregation.fanout import FanOut
from steam_profile_api.aggregation.games import GamesAggregator
from steam_profile_api.aggregation.service import ProfileService
from steam_profile_api.aggregation.user import UserAggregator

__all__ = [
    "AchievementsAggregator",
    "AggregationResult",
    "BaseAggregator",
    "FanOut",
    "GamesAggregator",
    "ProfileService",
    "UserAggregator",
]
