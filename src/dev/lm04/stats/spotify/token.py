"""Spotify refresh-token exchange.

Trades the stored refresh token for a new access token at the Spotify accounts
service and writes the result back through the credential store.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import ClientSession
import sentry_sdk

from dev.lm04.stats.app.config import Settings
from dev.lm04.stats.credentials import (
    CredentialRecord,
    CredentialStore,
    CredentialStoreError,
    is_expired,
)
from dev.lm04.stats.credentials.store import utc_now

logger = logging.getLogger(__name__)


class RefreshFailed(CredentialStoreError):
    """The token endpoint rejected the exchange or answered with an unusable body."""

    def __init__(
        self, message: str, status: Optional[int] = None, body: Optional[str] = None
    ) -> None:
        if status is not None:
            message = f"{message} (status {status})"
        if body:
            message = f"{message}: {body}"
        super().__init__(message)
        self.status = status
        self.body = body


def parse_expires_at(token_response: Dict[str, Any]) -> Optional[datetime]:
    expires_in = token_response.get("expires_in", None)
    if expires_in is None:
        return None
    try:
        return utc_now() + timedelta(seconds=int(expires_in))
    except (TypeError, ValueError, OverflowError) as e:
        raise RefreshFailed(f"Invalid expires_in value {expires_in!r}") from e


async def refresh_access_token(
    http_session: ClientSession,
    store: CredentialStore,
    settings: Settings,
    record: Optional[CredentialRecord] = None,
) -> CredentialRecord:
    """
    Exchange the refresh token for a new access token and store it.

    The refresh token in the response replaces the stored one only when the
    response carries one. ``expires_at`` is derived from ``expires_in``.

    Args:
        http_session: HTTP client session
        store: Credential store to read from and write to
        settings: Application settings with the Spotify client credentials
        record: Record to refresh; the current record is loaded when omitted

    Returns:
        The updated credential record

    Raises:
        RefreshFailed: Client credentials are missing or the exchange failed
        NotFound: No record exists and none was given
        StorageError: The new token could not be stored
    """
    if not settings.spotify_client_id or not settings.spotify_client_secret:
        raise RefreshFailed("Spotify client credentials are not configured")

    if record is None:
        record = await store.get_current()

    data = {
        "grant_type": "refresh_token",
        "refresh_token": record.refresh_token,
        "client_id": settings.spotify_client_id,
        "client_secret": settings.spotify_client_secret,
    }

    logger.debug("Refreshing Spotify access token for record %s", record.id)

    try:
        async with http_session.post(settings.spotify_token_url, data=data) as resp:
            if resp.status != 200:
                body = await resp.text()
                logger.warning(
                    "Spotify token refresh failed with status %s", resp.status
                )
                raise RefreshFailed(
                    "Token refresh failed", status=resp.status, body=body
                )
            try:
                token_response = await resp.json()
            except (aiohttp.ContentTypeError, ValueError) as e:
                raise RefreshFailed(
                    "Invalid token response", status=resp.status
                ) from e
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        sentry_sdk.capture_exception(e)
        logger.warning("Spotify token request failed: %s", e)
        raise RefreshFailed("Token request failed") from e

    if not isinstance(token_response, dict):
        raise RefreshFailed("Invalid token response")

    access_token = token_response.get("access_token", None)
    if not access_token:
        raise RefreshFailed("No access token")

    refreshed = await store.upsert(
        access_token,
        token_response.get("refresh_token", None) or "",
        scope=token_response.get("scope", None),
        expires_at=parse_expires_at(token_response),
    )
    logger.info("Refreshed Spotify access token, expires at %s", refreshed.expires_at)
    return refreshed


async def get_valid_access_token(
    http_session: ClientSession,
    store: CredentialStore,
    settings: Settings,
    now: Optional[datetime] = None,
) -> CredentialRecord:
    """
    Return the current record, refreshing it first if its access token expired.

    A record without an expiry is returned unchanged.
    """
    record = await store.get_current()
    if not is_expired(record, now):
        return record

    logger.info("Spotify access token expired at %s", record.expires_at)
    return await refresh_access_token(http_session, store, settings, record)
