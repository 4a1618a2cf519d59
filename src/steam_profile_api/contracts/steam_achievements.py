"""
Data contracts for Steam achievement endpoints.

Endpoints:
    ISteamUserStats/GetSchemaForGame/v2/
    ISteamUserStats/GetPlayerAchievements/v0001/
"""

from pydantic import BaseModel, Field


class AchievementSchemaEntry(BaseModel):
    """Static definition of one achievement."""

    name: str = Field(..., description="Internal API name")
    displayName: str = Field(default="", description="Localized title")
    description: str = Field(default="", description="Hidden achievements omit this")
    icon: str = Field(default="", description="Unlocked icon URL")
    icongray: str = Field(default="", description="Locked icon URL")
    hidden: int = Field(default=0)
    defaultvalue: int = Field(default=0)


class PlayerAchievement(BaseModel):
    """A player's state for one achievement."""

    apiname: str = Field(..., description="Internal API name")
    achieved: int = Field(default=0, description="1 when unlocked")
    unlocktime: int = Field(default=0, description="Unix timestamp, 0 when locked")

    @property
    def is_unlocked(self) -> bool:
        return self.achieved == 1


class AchievementData(BaseModel):
    """Schema and player state for one app id."""

    schema_entries: list[AchievementSchemaEntry] = Field(default_factory=list)
    player_state: list[PlayerAchievement] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.player_state)

    @property
    def unlocked(self) -> int:
        return sum(1 for a in self.player_state if a.is_unlocked)
