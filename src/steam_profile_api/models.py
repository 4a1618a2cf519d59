"""
Response shapes served to API consumers.

Field names are snake_case in Python and camelCase on the wire;
serialize with ``model_dump(by_alias=True)`` (see ``ResponseModel.to_json_dict``).
Every model is frozen so a cached payload cannot be mutated by a caller.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ResponseModel(BaseModel):
    """Base for all outbound models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """JSON-ready dict with wire names; unset optional blocks are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ResponseKind(str, Enum):
    """The three aggregated responses; values double as cache key prefixes."""

    USER = "steam-user"
    GAMES = "steam-games"
    ACHIEVEMENTS = "steam-achievements"


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------


class PresenceStatus(str, Enum):
    """Steam persona state."""

    OFFLINE = "offline"
    ONLINE = "online"
    BUSY = "busy"
    AWAY = "away"
    SNOOZE = "snooze"
    TRADING = "trading"
    PLAYING = "playing"

    @classmethod
    def from_code(cls, code: int) -> "PresenceStatus":
        """Map the upstream numeric persona state; unknown codes are offline."""
        return _PERSONA_STATES.get(code, cls.OFFLINE)

    @property
    def label(self) -> str:
        return self.value.capitalize()


_PERSONA_STATES: dict[int, PresenceStatus] = {
    0: PresenceStatus.OFFLINE,
    1: PresenceStatus.ONLINE,
    2: PresenceStatus.BUSY,
    3: PresenceStatus.AWAY,
    4: PresenceStatus.SNOOZE,
    5: PresenceStatus.TRADING,
    6: PresenceStatus.PLAYING,
}


class Avatar(ResponseModel):
    small: str
    medium: str
    large: str


class CurrentGame(ResponseModel):
    appid: int
    name: str


class PlaytimeStats(ResponseModel):
    """Aggregate playtime in whole hours."""

    total_forever: int = Field(..., ge=0)
    total_two_weeks: int = Field(..., ge=0)


class UserProfile(ResponseModel):
    """Identity, presence and playtime totals for one player."""

    steamid: str
    username: str
    profile_url: str
    avatar: Avatar
    status: PresenceStatus
    status_message: str
    country_code: str | None = None
    current_game: CurrentGame | None = None
    playtime_stats: PlaytimeStats


# ---------------------------------------------------------------------------
# Games
# ---------------------------------------------------------------------------


class AchievementSummary(ResponseModel):
    total: int = Field(..., ge=0)
    unlocked: int = Field(..., ge=0)
    percentage: int = Field(..., ge=0, le=100)


class GamePrice(ResponseModel):
    amount: int = Field(..., description="Final price in cents")
    currency: str
    display_price: str


class GameImages(ResponseModel):
    icon: str
    header_image: str


class RecentGameImages(GameImages):
    logo: str
    hero_image: str
    library_hero_image: str


class GameEntry(ResponseModel):
    """A title in the full library listing."""

    appid: int
    name: str
    playtime_forever: int = Field(..., ge=0, description="Hours")
    playtime_two_weeks: int = Field(..., ge=0, description="Hours")
    images: GameImages
    achievements: AchievementSummary | None = None


class RecentGameEntry(GameEntry):
    """A recently played title enriched with store metadata."""

    images: RecentGameImages
    price: GamePrice
    release_date: str
    short_description: str


class GamesData(ResponseModel):
    total_count: int = Field(..., ge=0, description="Owned games")
    recent_count: int = Field(..., ge=0, description="Upstream-reported recently played games")
    recent_games: list[RecentGameEntry]
    all_games: list[GameEntry]


# ---------------------------------------------------------------------------
# Achievements
# ---------------------------------------------------------------------------


class AchievementImages(ResponseModel):
    icon: str
    icon_gray: str


class AchievementRecord(ResponseModel):
    name: str
    description: str
    unlocked: bool
    unlock_time: int = Field(..., description="Epoch seconds, 0 when locked")
    images: AchievementImages


class GameAchievementGroup(ResponseModel):
    appid: int
    game_name: str
    total: int = Field(..., ge=0)
    unlocked: int = Field(..., ge=0)
    percentage: int = Field(..., ge=0, le=100)
    items: list[AchievementRecord]


class AchievementsData(ResponseModel):
    total_count: int = Field(..., ge=0)
    unlocked_count: int = Field(..., ge=0)
    unlocked_percentage: int = Field(..., ge=0, le=100)
    by_game: list[GameAchievementGroup]


ResponsePayload = UserProfile | GamesData | AchievementsData


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


class ResponseMetadata(ResponseModel):
    cached: bool
    cached_at: datetime
    cache_expiry: datetime
    fetch_duration: str


class SuccessResponse(ResponseModel):
    success: Literal[True] = True
    data: dict[str, Any]
    metadata: ResponseMetadata


class ErrorResponse(ResponseModel):
    success: Literal[False] = False
    error: str
    code: str
