"""Spotify accounts service integration."""

from dev.lm04.stats.spotify.token import (
    RefreshFailed,
    get_valid_access_token,
    refresh_access_token,
)

__all__ = ["RefreshFailed", "get_valid_access_token", "refresh_access_token"]
