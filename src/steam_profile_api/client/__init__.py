"""
Upstream clients for the Steam APIs.

The aggregators only see ``SteamClientProtocol``; ``SteamWebAPIClient``
is the HTTP implementation used in production.
"""

from steam_profile_api.client.base import BaseSteamClient
from steam_profile_api.client.protocol import SteamClientProtocol
from steam_profile_api.client.steam_api import SteamWebAPIClient

__all__ = [
    "BaseSteamClient",
    "SteamClientProtocol",
    "SteamWebAPIClient",
]
