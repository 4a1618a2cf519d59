"""Shared fixtures: an in-memory Steam client, a manual clock, env isolation."""

import asyncio
import os
from collections import Counter
from collections.abc import Iterator
from typing import Any
from unittest.mock import patch

import pytest

from steam_profile_api.cache import TTLCache, get_cache
from steam_profile_api.config import TTLConfig, get_settings
from steam_profile_api.contracts import (
    AchievementData,
    AchievementSchemaEntry,
    OwnedGame,
    PlayerAchievement,
    PlayerSummary,
    PriceOverview,
    RecentlyPlayedGames,
    ReleaseDate,
    StoreDetail,
    StoreDetailResult,
)
from steam_profile_api.errors import UpstreamError

USER_ID = "76561197960287930"

TEST_ENV = {
    "STEAM_API_KEY": "test_api_key_123",
    "STEAM_USER_ID": USER_ID,
}


class ManualClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, start_ms: float = 1_700_000_000_000) -> None:
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += ms


class FakeSteamClient:
    """
    In-memory stand-in for the Steam Web API.

    Every call is counted in ``calls`` so tests can assert what was
    (or was not) fetched.
    """

    def __init__(self) -> None:
        self.profiles: list[PlayerSummary] = []
        self.owned: list[OwnedGame] = []
        self.recent: list[OwnedGame] = []
        self.recent_total: int | None = None
        self.store: dict[int, StoreDetailResult] = {}
        self.achievements: dict[int, AchievementData] = {}
        self.failing_store: set[int] = set()
        self.failing_achievements: set[int] = set()
        self.failing_profile: Exception | None = None
        self.store_delay: float = 0.0
        self.profile_delay: float = 0.0
        self.region: str | None = None
        self.calls: Counter[str] = Counter()
        self.achievement_calls: list[int] = []
        self.store_calls: list[int] = []
        self.owned_catalog_flags: list[bool] = []

    # -- builders -----------------------------------------------------------

    def add_profile(self, **overrides: Any) -> "FakeSteamClient":
        data: dict[str, Any] = {
            "steamid": USER_ID,
            "personaname": "Gabe",
            "profileurl": f"https://steamcommunity.com/profiles/{USER_ID}/",
            "avatar": "https://avatars.steamstatic.com/abc.jpg",
            "avatarmedium": "https://avatars.steamstatic.com/abc_medium.jpg",
            "avatarfull": "https://avatars.steamstatic.com/abc_full.jpg",
            "avatarhash": "abc",
            "personastate": 1,
        }
        data.update(overrides)
        self.profiles.append(PlayerSummary.model_validate(data))
        return self

    def add_owned(
        self, appid: int, *, name: str | None = None, forever: int = 0, two_weeks: int = 0
    ) -> "FakeSteamClient":
        self.owned.append(
            OwnedGame(
                appid=appid,
                name=name if name is not None else f"Game {appid}",
                playtime_forever=forever,
                playtime_2weeks=two_weeks,
                img_icon_url=f"icon{appid}",
                img_logo_url=f"logo{appid}",
            )
        )
        return self

    def add_recent(
        self, appid: int, *, name: str | None = None, forever: int = 0, two_weeks: int = 0
    ) -> "FakeSteamClient":
        self.recent.append(
            OwnedGame(
                appid=appid,
                name=name if name is not None else f"Game {appid}",
                playtime_forever=forever,
                playtime_2weeks=two_weeks,
                img_icon_url=f"icon{appid}",
                img_logo_url=f"logo{appid}",
            )
        )
        return self

    def set_store(
        self,
        appid: int,
        *,
        final: int = 2999,
        currency: str | None = "USD",
        formatted: str = "$29.99",
        release_date: str = "10 Dec, 2020",
        description: str = "An open-world RPG.",
    ) -> "FakeSteamClient":
        self.store[appid] = StoreDetailResult(
            success=True,
            data=StoreDetail(
                steam_appid=appid,
                name=f"Game {appid}",
                short_description=description,
                price_overview=PriceOverview(
                    currency=currency,
                    initial=final,
                    final=final,
                    final_formatted=formatted,
                ),
                release_date=ReleaseDate(date=release_date),
            ),
        )
        return self

    def set_achievements(
        self,
        appid: int,
        *,
        unlocked: int,
        total: int,
        with_schema: bool = True,
    ) -> "FakeSteamClient":
        names = [f"ACH_{appid}_{i}" for i in range(total)]
        self.achievements[appid] = AchievementData(
            schema_entries=[
                AchievementSchemaEntry(
                    name=n,
                    displayName=f"Title {n}",
                    description=f"Do {n}",
                    icon=f"https://cdn.example/apps/{appid}/{n}.jpg",
                    icongray=f"https://cdn.example/apps/{appid}/{n}_gray.jpg",
                )
                for n in names
            ]
            if with_schema
            else [],
            player_state=[
                PlayerAchievement(
                    apiname=n,
                    achieved=1 if i < unlocked else 0,
                    unlocktime=1_600_000_000 + i if i < unlocked else 0,
                )
                for i, n in enumerate(names)
            ],
        )
        return self

    # -- capability ---------------------------------------------------------

    async def get_player_profile(self, user_id: str) -> list[PlayerSummary]:
        self.calls["get_player_profile"] += 1
        if self.profile_delay:
            await asyncio.sleep(self.profile_delay)
        if self.failing_profile is not None:
            raise self.failing_profile
        return list(self.profiles)

    async def get_owned_games(
        self, user_id: str, include_catalog_info: bool = True
    ) -> list[OwnedGame]:
        self.calls["get_owned_games"] += 1
        self.owned_catalog_flags.append(include_catalog_info)
        if include_catalog_info:
            return list(self.owned)
        return [
            OwnedGame(
                appid=g.appid,
                playtime_forever=g.playtime_forever,
                playtime_2weeks=g.playtime_2weeks,
            )
            for g in self.owned
        ]

    async def get_recently_played(self, user_id: str, limit: int) -> RecentlyPlayedGames:
        self.calls["get_recently_played"] += 1
        total = self.recent_total if self.recent_total is not None else len(self.recent)
        return RecentlyPlayedGames(games=self.recent[:limit], total_count=total)

    async def get_store_detail(self, app_id: int) -> StoreDetailResult:
        self.calls["get_store_detail"] += 1
        self.store_calls.append(app_id)
        if self.store_delay:
            await asyncio.sleep(self.store_delay)
        if app_id in self.failing_store:
            raise UpstreamError(f"store failed for {app_id}", status_code=500)
        return self.store.get(app_id, StoreDetailResult(success=False))

    async def get_achievements(self, user_id: str, app_id: int) -> AchievementData:
        self.calls["get_achievements"] += 1
        self.achievement_calls.append(app_id)
        if app_id in self.failing_achievements:
            raise UpstreamError(f"achievements failed for {app_id}", status_code=500)
        return self.achievements.get(app_id, AchievementData())

    def set_region(self, country_code: str) -> None:
        self.region = country_code


@pytest.fixture(autouse=True)
def _reset_singletons() -> Iterator[None]:
    """Settings and the default cache are process-wide; isolate each test."""
    get_settings.cache_clear()
    get_cache.cache_clear()
    yield
    get_settings.cache_clear()
    get_cache.cache_clear()


@pytest.fixture
def mock_env() -> Iterator[None]:
    """Mock environment variables for tests."""
    with patch.dict(os.environ, TEST_ENV, clear=True):
        yield


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def cache(clock: ManualClock) -> TTLCache:
    return TTLCache(clock=clock)


@pytest.fixture
def ttl() -> TTLConfig:
    return TTLConfig(user=10 * 60 * 1000, games=24 * 60 * 60 * 1000, achievements=60 * 60 * 1000)


@pytest.fixture
def steam() -> FakeSteamClient:
    return FakeSteamClient()


@pytest.fixture
def user_id() -> str:
    return USER_ID
