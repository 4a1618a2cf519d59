"""
Games library aggregator.

Combines the owned catalog, the recently played list, store pages for
the recent titles and achievement progress into ``GamesData``.
"""

from steam_profile_api.aggregation.base import BaseAggregator
from steam_profile_api.aggregation.formatting import (
    achievement_targets,
    build_achievement_summary,
    build_game_entry,
    build_recent_entry,
)
from steam_profile_api.models import GamesData, ResponseKind

RECENT_LIMIT = 10
LIBRARY_LIMIT = 100
ACHIEVEMENT_SCAN_LIMIT = 50


class GamesAggregator(BaseAggregator[GamesData]):
    """
    Builds ``GamesData`` for one player.

    Truncation: at most 10 recent games, at most 100 library entries,
    and only the first 50 owned games are checked for achievements, so
    library entries 51-100 never carry an achievement summary.
    """

    kind = ResponseKind.GAMES

    @property
    def ttl_ms(self) -> int:
        return self._ttl.games

    async def build(self, user_id: str) -> GamesData:
        owned = await self._client.get_owned_games(user_id, include_catalog_info=True)
        recent = await self._client.get_recently_played(user_id, RECENT_LIMIT)

        recent_games = recent.games[:RECENT_LIMIT]
        recent_ids = [g.appid for g in recent_games]

        store = await self._fanout.store_details(recent_ids)

        targets = achievement_targets(
            recent_ids, (g.appid for g in owned), ACHIEVEMENT_SCAN_LIMIT
        )
        achievements = await self._fanout.achievements(user_id, targets)

        recent_entries = [
            build_recent_entry(
                game,
                store.get(game.appid),
                build_achievement_summary(achievements.get(game.appid)),
            )
            for game in recent_games
        ]

        all_entries = [
            build_game_entry(
                game,
                build_achievement_summary(achievements.get(game.appid))
                if rank < ACHIEVEMENT_SCAN_LIMIT
                else None,
            )
            for rank, game in enumerate(owned[:LIBRARY_LIMIT])
        ]

        return GamesData(
            total_count=len(owned),
            recent_count=recent.total_count,
            recent_games=recent_entries,
            all_games=all_entries,
        )
