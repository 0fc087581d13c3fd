import argparse
import asyncio
import logging
import sys
from datetime import timedelta
from typing import List, Optional

import aiohttp
import sentry_sdk

from dev.lm04.stats.app.cli import configure_logging, configure_sentry
from dev.lm04.stats.app.config import Settings
from dev.lm04.stats.credentials import (
    CredentialRecord,
    CredentialStoreError,
    NotFound,
    open_store,
)
from dev.lm04.stats.credentials.store import utc_now
from dev.lm04.stats.spotify import refresh_access_token

logger = logging.getLogger(__name__)


def mask_token(value: str) -> str:
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}...{value[-4:]}"


def describe(record: CredentialRecord) -> str:
    return "\n".join(
        [
            f"id:            {record.id}",
            f"access_token:  {mask_token(record.access_token)}",
            f"refresh_token: {mask_token(record.refresh_token)}",
            f"scope:         {record.scope or '-'}",
            f"expires_at:    {record.expires_at.isoformat() if record.expires_at else '-'}",
            f"updated_at:    {record.updated_at.isoformat() if record.updated_at else '-'}",
            f"expired:       {'yes' if record.is_expired() else 'no'}",
        ]
    )


async def initDb(settings: Settings) -> int:
    async with open_store(settings.database_url, echo=settings.debug) as store:
        await store.create_schema()
    print("Created spotify_token table")
    return 0


async def setToken(
    settings: Settings,
    access_token: str,
    refresh_token: str,
    scope: Optional[str],
    expires_in: Optional[int],
) -> int:
    expires_at = None
    if expires_in is not None:
        expires_at = utc_now() + timedelta(seconds=expires_in)

    async with open_store(settings.database_url, echo=settings.debug) as store:
        record = await store.upsert(
            access_token, refresh_token, scope=scope, expires_at=expires_at
        )
    print(describe(record))
    return 0


async def showToken(settings: Settings) -> int:
    async with open_store(settings.database_url, echo=settings.debug) as store:
        try:
            record = await store.get_current()
        except NotFound as e:
            print(str(e), file=sys.stderr)
            return 1
    print(describe(record))
    return 0


async def refreshToken(settings: Settings) -> int:
    async with (
        open_store(settings.database_url, echo=settings.debug) as store,
        aiohttp.ClientSession() as http_session,
    ):
        record = await refresh_access_token(http_session, store, settings)
    print(describe(record))
    return 0


async def realMain(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="lm04-stats-util", description="lm04-stats credential utilities"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    _ = subparsers.add_parser("init-db", help="Create the spotify_token table")
    _ = subparsers.add_parser("show", help="Show the current Spotify token")
    _ = subparsers.add_parser("refresh", help="Refresh the Spotify access token")
    set_token = subparsers.add_parser("set", help="Store a Spotify token pair")

    set_token.add_argument("access_token", help="The Spotify access token.")
    set_token.add_argument("refresh_token", help="The Spotify refresh token.")
    set_token.add_argument("--scope", default=None, help="The granted scope.")
    set_token.add_argument(
        "--expires-in",
        type=int,
        default=None,
        help="Seconds until the access token expires.",
    )

    args = vars(parser.parse_args(argv))
    command = args.get("command", None)

    settings = Settings()  # type: ignore
    configure_logging(settings.debug)
    configure_sentry(settings)

    try:
        if command == "init-db":
            return await initDb(settings)
        elif command == "set":
            return await setToken(
                settings,
                args["access_token"],
                args["refresh_token"],
                args.get("scope", None),
                args.get("expires_in", None),
            )
        elif command == "show":
            return await showToken(settings)
        elif command == "refresh":
            return await refreshToken(settings)
    except CredentialStoreError as e:
        sentry_sdk.capture_exception(e)
        logger.error("%s failed: %s", command, e)
        return 1
    return 2


def main() -> None:
    sys.exit(asyncio.run(realMain()))


if __name__ == "__main__":
    main()
