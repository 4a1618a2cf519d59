"""
Exception hierarchy shared by the client, the aggregators and the adapters.

Every error carries a short machine-readable ``code`` that adapters copy
into the error envelope.
"""

from datetime import datetime, timezone

ENV_ERROR = "ENV_ERROR"
STEAM_API_ERROR = "STEAM_API_ERROR"
METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
NOT_FOUND = "NOT_FOUND"
INTERNAL_ERROR = "INTERNAL_ERROR"


class SteamProfileError(Exception):
    """Base exception for this package."""

    code: str = INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        endpoint: str | None = None,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.endpoint = endpoint
        self.status_code = status_code
        self.original_error = original_error
        self.timestamp = datetime.now(timezone.utc)


class ConfigurationError(SteamProfileError):
    """Raised when credentials or the target user id are missing or malformed."""

    code = ENV_ERROR


class UpstreamError(SteamProfileError):
    """Raised when a Steam API call fails."""

    code = STEAM_API_ERROR


class RateLimitError(UpstreamError):
    """Raised when rate limit is exceeded."""

    pass


class ResponseValidationError(UpstreamError):
    """Raised when an upstream payload does not match its contract."""

    pass


class PlayerNotFoundError(UpstreamError):
    """
    Raised when the profile lookup returns no players.

    Steam does not distinguish an unknown id from a private profile,
    so neither do we; adapters report it like any other upstream failure.
    """

    def __init__(self, user_id: str) -> None:
        super().__init__(
            "Player not found or profile is private",
            source="steam_user_api",
        )
        self.user_id = user_id
