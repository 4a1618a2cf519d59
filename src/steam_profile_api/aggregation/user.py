"""
User summary aggregator.

Profile, presence and lifetime playtime totals. Nothing per game is
fetched here, so the summary can live on a short TTL and be refreshed
cheaply without pulling the whole library again.
"""

from steam_profile_api.aggregation.base import BaseAggregator
from steam_profile_api.aggregation.formatting import build_user_profile
from steam_profile_api.errors import PlayerNotFoundError
from steam_profile_api.models import ResponseKind, UserProfile


class UserAggregator(BaseAggregator[UserProfile]):
    """Builds ``UserProfile`` for one player."""

    kind = ResponseKind.USER

    @property
    def ttl_ms(self) -> int:
        return self._ttl.user

    async def build(self, user_id: str) -> UserProfile:
        profiles = await self._client.get_player_profile(user_id)
        if not profiles:
            raise PlayerNotFoundError(user_id)

        player = profiles[0]
        if player.loccountrycode:
            self._logger.debug("Detected player country", country_code=player.loccountrycode)
            self._client.set_region(player.loccountrycode)

        # Totals only: the catalog without names and icons is enough.
        owned = await self._client.get_owned_games(user_id, include_catalog_info=False)

        return build_user_profile(player, owned)
