"""
Steam Profile API.

Aggregates a player's Steam profile, games library and achievements
into three cached JSON responses.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
