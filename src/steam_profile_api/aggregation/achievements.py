"""
Achievements detail aggregator.

Joins achievement schemas with the player's unlock state for the
recently played games and the head of the owned catalog.
"""

from steam_profile_api.aggregation.base import BaseAggregator
from steam_profile_api.aggregation.formatting import (
    achievement_targets,
    build_achievement_group,
    percentage,
    resolve_game_name,
)
from steam_profile_api.aggregation.games import ACHIEVEMENT_SCAN_LIMIT, RECENT_LIMIT
from steam_profile_api.models import AchievementsData, GameAchievementGroup, ResponseKind


class AchievementsAggregator(BaseAggregator[AchievementsData]):
    """
    Builds ``AchievementsData`` for one player.

    Games without achievements, and games whose lookup failed, are
    left out of ``by_game`` and of the totals.
    """

    kind = ResponseKind.ACHIEVEMENTS

    @property
    def ttl_ms(self) -> int:
        return self._ttl.achievements

    async def build(self, user_id: str) -> AchievementsData:
        recent = await self._client.get_recently_played(user_id, RECENT_LIMIT)
        owned = await self._client.get_owned_games(user_id, include_catalog_info=False)

        recent_games = recent.games[:RECENT_LIMIT]
        targets = achievement_targets(
            (g.appid for g in recent_games),
            (g.appid for g in owned),
            ACHIEVEMENT_SCAN_LIMIT,
        )
        achievements = await self._fanout.achievements(user_id, targets)

        groups: list[GameAchievementGroup] = []
        for app_id in targets:
            group = build_achievement_group(
                app_id,
                resolve_game_name(app_id, recent_games, owned),
                achievements.get(app_id),
            )
            if group is not None:
                groups.append(group)

        total = sum(g.total for g in groups)
        unlocked = sum(g.unlocked for g in groups)

        return AchievementsData(
            total_count=total,
            unlocked_count=unlocked,
            unlocked_percentage=percentage(unlocked, total),
            by_game=groups,
        )
