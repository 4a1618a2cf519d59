"""
Data contracts for Steam user endpoints.

Covers ISteamUser/GetPlayerSummaries, IPlayerService/GetOwnedGames
and IPlayerService/GetRecentlyPlayedGames.
"""

from typing import Annotated

from pydantic import BaseModel, Field, field_validator

AppId = Annotated[int, Field(gt=0, description="Steam App ID")]


class PlayerSummary(BaseModel):
    """
    One player from GetPlayerSummaries.

    Endpoint: ISteamUser/GetPlayerSummaries/v0002/
    """

    steamid: str = Field(..., description="SteamID64")
    personaname: str = Field(default="", description="Display name")
    profileurl: str = Field(default="", description="Community profile URL")
    avatar: str = Field(default="", description="32x32 avatar URL")
    avatarmedium: str = Field(default="", description="64x64 avatar URL")
    avatarfull: str = Field(default="", description="184x184 avatar URL")
    avatarhash: str = Field(default="", description="Avatar hash for CDN URLs")
    personastate: int = Field(
        default=0,
        description="0=offline, 1=online, 2=busy, 3=away, 4=snooze, 5=trading, 6=playing",
    )
    communityvisibilitystate: int = Field(default=1, description="3 = public profile")
    loccountrycode: str | None = Field(default=None, description="ISO country code")
    gameid: str | None = Field(default=None, description="App id of the game being played")
    gameextrainfo: str | None = Field(default=None, description="Name of the game being played")

    @property
    def current_app_id(self) -> int | None:
        """App id of the running game, if Steam reports a numeric one."""
        if self.gameid and self.gameid.isdigit():
            return int(self.gameid)
        return None


class OwnedGame(BaseModel):
    """
    One game from GetOwnedGames or GetRecentlyPlayedGames.

    Name and image hashes are only present when app info is requested.
    """

    appid: AppId
    name: str = Field(default="")
    playtime_forever: int = Field(default=0, ge=0, description="Lifetime playtime in minutes")
    playtime_2weeks: int = Field(default=0, ge=0, description="Playtime in last 2 weeks (minutes)")
    img_icon_url: str = Field(default="", description="Icon hash")
    img_logo_url: str = Field(default="", description="Logo hash")
    has_community_visible_stats: bool = Field(default=False)
    rtime_last_played: int = Field(default=0, description="Unix timestamp of last played")

    @field_validator("playtime_forever", "playtime_2weeks", mode="before")
    @classmethod
    def coerce_missing_playtime(cls, v: int | None) -> int:
        """Steam sends null for games never launched on some platforms."""
        return v or 0


class RecentlyPlayedGames(BaseModel):
    """Recently played games plus the upstream total."""

    games: list[OwnedGame] = Field(default_factory=list)
    total_count: int = Field(default=0, ge=0, description="Games played in the recency window")
