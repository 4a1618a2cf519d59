"""
Steam Web API client.

Implements the upstream capability used by the aggregators on top of
the public Steam Web API and Store API.
"""

from typing import Any

from steam_profile_api.client.base import BaseSteamClient
from steam_profile_api.config import RetryConfig, SteamAPIConfig, get_settings
from steam_profile_api.contracts import (
    AchievementData,
    AchievementSchemaEntry,
    OwnedGame,
    PlayerAchievement,
    PlayerSummary,
    RecentlyPlayedGames,
    StoreDetailResult,
)
from steam_profile_api.errors import UpstreamError
from steam_profile_api.utils.rate_limiter import RateLimiter, RateLimiterConfig

# Steam answers GetPlayerAchievements with 400 for games without stats
# and 403 for profiles whose game details are private.
NO_STATS_STATUS_CODES = frozenset({400, 403})


class SteamWebAPIClient(BaseSteamClient):
    """
    Client for the Steam Web API and Store API.

    Example:
        >>> async with SteamWebAPIClient() as client:
        ...     players = await client.get_player_profile("76561197960287930")
        ...     games = await client.get_owned_games(players[0].steamid)
    """

    source_name = "steam_web_api"

    def __init__(
        self,
        *,
        steam_config: SteamAPIConfig | None = None,
        retry_config: RetryConfig | None = None,
        rate_limiter: RateLimiter | None = None,
        country_code: str | None = None,
    ) -> None:
        """
        Initialize Steam Web API client.

        Args:
            steam_config: Steam section of the settings (loaded from env if None)
            retry_config: Retry section of the settings (loaded from env if None)
            rate_limiter: Custom rate limiter (creates one from config if None)
            country_code: Store region overriding the configured default
        """
        if steam_config is None or retry_config is None:
            settings = get_settings()
            steam_config = steam_config or settings.steam
            retry_config = retry_config or settings.retry

        super().__init__(
            retry_config=retry_config,
            timeout=steam_config.timeout_seconds,
            rate_limiter=rate_limiter
            or RateLimiter(
                RateLimiterConfig(requests_per_minute=steam_config.requests_per_minute)
            ),
        )
        self._api_key = steam_config.api_key.get_secret_value()
        self._base_url = steam_config.base_url.rstrip("/")
        self._store_url = steam_config.store_url.rstrip("/")
        self._language = steam_config.language
        self._store_timeout = steam_config.store_timeout_seconds
        self._country_code = country_code or steam_config.country_code

    @property
    def country_code(self) -> str:
        return self._country_code

    def set_region(self, country_code: str) -> None:
        """Use ``country_code`` for subsequent store prices."""
        if country_code and country_code != self._country_code:
            self._logger.info("Store region changed", country_code=country_code)
            self._country_code = country_code

    def _web_api(self, path: str) -> str:
        return f"{self._base_url}/{path}"

    async def _call_web_api(self, path: str, **params: Any) -> dict[str, Any]:
        data = await self._get_json(
            self._web_api(path),
            params={"key": self._api_key, "format": "json", **params},
        )
        if not isinstance(data, dict):
            raise UpstreamError(
                "Unexpected response shape",
                source=self.source_name,
                endpoint=path,
            )
        return data

    async def get_player_profile(self, user_id: str) -> list[PlayerSummary]:
        path = "ISteamUser/GetPlayerSummaries/v0002/"
        data = await self._call_web_api(path, steamids=user_id)
        players = data.get("response", {}).get("players", [])
        return [self._validate(PlayerSummary, p, endpoint=path) for p in players]

    async def get_owned_games(
        self, user_id: str, include_catalog_info: bool = True
    ) -> list[OwnedGame]:
        """
        Games owned by ``user_id``.

        Args:
            user_id: SteamID64
            include_catalog_info: Ask for names and image hashes. Without
                them the payload is much smaller, which is enough when
                only playtime totals are needed.
        """
        path = "IPlayerService/GetOwnedGames/v0001/"
        data = await self._call_web_api(
            path,
            steamid=user_id,
            include_appinfo=1 if include_catalog_info else 0,
            include_played_free_games=1,
        )
        games = data.get("response", {}).get("games", [])
        return [self._validate(OwnedGame, g, endpoint=path) for g in games]

    async def get_recently_played(self, user_id: str, limit: int = 10) -> RecentlyPlayedGames:
        path = "IPlayerService/GetRecentlyPlayedGames/v0001/"
        data = await self._call_web_api(path, steamid=user_id, count=limit)
        response = data.get("response", {})
        games = [self._validate(OwnedGame, g, endpoint=path) for g in response.get("games", [])]
        return RecentlyPlayedGames(
            games=games,
            total_count=response.get("total_count", len(games)),
        )

    async def get_store_detail(self, app_id: int) -> StoreDetailResult:
        """
        Store page data for one app.

        Not retried: the call is bounded by the store timeout and the
        caller treats any failure as a missing entry.
        """
        url = f"{self._store_url}/appdetails"
        data = await self._get_json(
            url,
            params={"appids": app_id, "cc": self._country_code, "l": self._language},
            timeout=self._store_timeout,
            retry=False,
        )
        app_data = data.get(str(app_id)) if isinstance(data, dict) else None
        if not app_data or not app_data.get("success", False):
            self._logger.debug("Store returned success=false", app_id=app_id)
            return StoreDetailResult(success=False)
        return self._validate(StoreDetailResult, app_data, endpoint=url)

    async def get_achievements(self, user_id: str, app_id: int) -> AchievementData:
        """
        Achievement schema and the player's unlock state for one app.

        Games without stats (or hidden game details) yield empty lists.
        """
        player_path = "ISteamUserStats/GetPlayerAchievements/v0001/"
        try:
            player_data = await self._call_web_api(player_path, steamid=user_id, appid=app_id)
        except UpstreamError as e:
            if e.status_code in NO_STATS_STATUS_CODES:
                self._logger.debug("No stats for app", app_id=app_id, status_code=e.status_code)
                return AchievementData()
            raise

        raw_state = player_data.get("playerstats", {}).get("achievements", [])
        player_state = [
            self._validate(PlayerAchievement, a, endpoint=player_path) for a in raw_state
        ]
        if not player_state:
            return AchievementData()

        schema_path = "ISteamUserStats/GetSchemaForGame/v2/"
        schema_data = await self._call_web_api(schema_path, appid=app_id, l=self._language)
        raw_schema = (
            schema_data.get("game", {}).get("availableGameStats", {}).get("achievements", [])
        )
        schema_entries = [
            self._validate(AchievementSchemaEntry, s, endpoint=schema_path) for s in raw_schema
        ]

        return AchievementData(schema_entries=schema_entries, player_state=player_state)
