"""
Utility modules.

Provides shared request throttling for the upstream client.
"""

from steam_profile_api.utils.rate_limiter import RateLimiter, RateLimiterConfig

__all__ = [
    "RateLimiter",
    "RateLimiterConfig",
]
