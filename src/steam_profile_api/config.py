"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables with validation,
type coercion, and sensible defaults.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from steam_profile_api.errors import ConfigurationError

STEAM_ID_PATTERN = re.compile(r"^[0-9]{17}$")

MS_PER_MINUTE = 60 * 1000
MS_PER_HOUR = 60 * MS_PER_MINUTE


def minutes_to_ms(minutes: float) -> int:
    """Convert a TTL expressed in minutes to milliseconds."""
    return int(minutes * MS_PER_MINUTE)


def hours_to_ms(hours: float) -> int:
    """Convert a TTL expressed in hours to milliseconds."""
    return int(hours * MS_PER_HOUR)


def is_valid_steam_id(value: str) -> bool:
    """Check that a value is a 17-digit SteamID64."""
    return bool(STEAM_ID_PATTERN.match(value))


@dataclass(frozen=True)
class TTLConfig:
    """Per-response-kind cache lifetimes, in milliseconds."""

    user: int
    games: int
    achievements: int


class SteamAPIConfig(BaseSettings):
    """Steam API specific configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STEAM_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_key: SecretStr = Field(
        default=...,
        description="Steam Web API key from https://steamcommunity.com/dev/apikey",
    )
    user_id: str = Field(
        default=...,
        description="SteamID64 of the profile being served",
    )
    base_url: str = Field(
        default="https://api.steampowered.com",
        description="Base URL for Steam Web API",
    )
    store_url: str = Field(
        default="https://store.steampowered.com/api",
        description="Base URL for Steam Store API",
    )
    country_code: str = Field(
        default="cn",
        description="Store region used for prices until the profile reports one",
    )
    language: str = Field(
        default="english",
        description="Store language for descriptions",
    )
    requests_per_minute: int = Field(
        default=120,
        ge=1,
        le=600,
        description="Rate limit for API requests per minute",
    )
    timeout_seconds: int = Field(
        default=30,
        ge=5,
        le=120,
        description="HTTP request timeout in seconds",
    )
    store_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=60.0,
        description="Upper bound for a single store-detail call",
    )
    store_delay_seconds: float = Field(
        default=0.1,
        ge=0.0,
        le=10.0,
        description="Pacing delay after each store-detail call",
    )
    max_concurrency: int = Field(
        default=4,
        ge=1,
        le=16,
        description="Parallel upstream calls during store/achievement fan-out",
    )

    @field_validator("user_id")
    @classmethod
    def validate_user_id(cls, v: str) -> str:
        """Validate that the user id is a SteamID64."""
        v = v.strip()
        if not is_valid_steam_id(v):
            raise ValueError("STEAM_USER_ID must be a 17-digit number")
        return v


class CacheConfig(BaseSettings):
    """Response cache lifetimes."""

    model_config = SettingsConfigDict(
        env_prefix="CACHE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    ttl_user_minutes: float = Field(
        default=10,
        gt=0,
        description="Lifetime of the user summary",
    )
    ttl_games_hours: float = Field(
        default=24,
        gt=0,
        description="Lifetime of the games library",
    )
    ttl_achievements_hours: float = Field(
        default=1,
        gt=0,
        description="Lifetime of the achievements detail",
    )
    sweep_interval_seconds: float = Field(
        default=300.0,
        ge=1.0,
        description="Period of the background expiry sweep",
    )

    def ttl(self) -> TTLConfig:
        """Return lifetimes converted to milliseconds."""
        return TTLConfig(
            user=minutes_to_ms(self.ttl_user_minutes),
            games=hours_to_ms(self.ttl_games_hours),
            achievements=hours_to_ms(self.ttl_achievements_hours),
        )


class RetryConfig(BaseSettings):
    """Retry behavior configuration for the upstream HTTP client."""

    model_config = SettingsConfigDict(
        env_prefix="RETRY_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum number of retry attempts",
    )
    base_delay_seconds: float = Field(
        default=1.0,
        ge=0.1,
        le=30.0,
        description="Base delay between retries (exponential backoff)",
    )
    max_delay_seconds: float = Field(
        default=60.0,
        ge=1.0,
        le=300.0,
        description="Maximum delay between retries",
    )
    exponential_base: float = Field(
        default=2.0,
        ge=1.5,
        le=4.0,
        description="Base for exponential backoff calculation",
    )


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    format: Literal["json", "console"] = Field(
        default="json",
        description="Log output format",
    )
    include_timestamp: bool = Field(
        default=True,
        description="Include timestamp in log entries",
    )


class ServerConfig(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SERVER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=4000, ge=1, le=65535, description="Bind port")
    cors_origin: str = Field(default="*", description="Access-Control-Allow-Origin value")


class Settings(BaseSettings):
    """
    Main application settings.

    Aggregates all configuration sections and provides
    a single entry point for configuration access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )

    # Sub-configurations
    steam: SteamAPIConfig = Field(default_factory=SteamAPIConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once
    and reused across the application.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()


def _describe_validation_error(error: ValidationError) -> str:
    """Turn a pydantic error into a single operator-facing line."""
    first = error.errors()[0]
    loc = first.get("loc") or ("value",)
    field = str(loc[-1])
    if first.get("type") == "missing":
        return f"STEAM_{field.upper()} environment variable is not set"
    message = str(first.get("msg", "invalid value"))
    return message.removeprefix("Value error, ")


def load_settings() -> Settings:
    """
    Get settings, turning validation failures into ``ConfigurationError``.

    Raises:
        ConfigurationError: If credentials or the user id are missing or malformed
    """
    try:
        return get_settings()
    except ValidationError as e:
        raise ConfigurationError(_describe_validation_error(e), original_error=e) from e


def validate_environment() -> tuple[bool, str | None]:
    """
    Check that the environment holds a usable configuration.

    Returns:
        (True, None) when settings load, otherwise (False, reason).
    """
    try:
        load_settings()
    except ConfigurationError as e:
        return False, str(e)
    return True, None
