"""
Data contracts for Steam Store API responses.

These Pydantic models define the fields of /appdetails that the
games library reads, with validation and type safety.
"""

from pydantic import BaseModel, Field


class PriceOverview(BaseModel):
    """Price information for a game."""

    currency: str | None = Field(default=None, description="Currency code (e.g., USD, CNY)")
    initial: int = Field(default=0, description="Initial price in cents")
    final: int = Field(default=0, description="Final price in cents (after discount)")
    discount_percent: int = Field(default=0, ge=0, le=100, description="Discount percentage")
    initial_formatted: str = Field(default="", description="Formatted initial price")
    final_formatted: str = Field(default="", description="Formatted final price")


class ReleaseDate(BaseModel):
    """Release date information."""

    coming_soon: bool = Field(default=False, description="Whether the game is not yet released")
    date: str = Field(default="", description="Release date string")


class StoreDetail(BaseModel):
    """
    Game data from the Steam Store API.

    A subset of the /appdetails payload.
    """

    steam_appid: int = Field(..., description="Steam application ID")
    name: str = Field(default="", description="Game name")
    type: str = Field(default="game", description="Type: game, dlc, demo, etc.")
    short_description: str = Field(default="", description="Brief description")
    is_free: bool = Field(default=False, description="Whether the game is free")

    # Pricing (free games don't have this)
    price_overview: PriceOverview | None = Field(
        default=None, description="Price info (None for free games)"
    )
    release_date: ReleaseDate = Field(default_factory=ReleaseDate)
    header_image: str = Field(default="", description="Header image URL")


class StoreDetailResult(BaseModel):
    """
    One entry of the Store API response.

    The API returns {app_id: {success: bool, data: {...}}}; a failed or
    timed out lookup is represented as success=False with no data.
    """

    success: bool = False
    data: StoreDetail | None = None
