"""Persistence of the current Spotify credential record.

The store sits on an SQLAlchemy async engine and exposes three operations:
reading the authoritative record, writing a new token pair, and checking a
record for expiry. It does no logging and no retrying; every failure is raised
to the immediate caller.
"""

import asyncio
import contextlib
from datetime import datetime, timezone
from typing import AsyncIterator, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from dev.lm04.stats.credentials.errors import NotFound, StorageError, ValidationError
from dev.lm04.stats.model.base import Base, ensure_utc
from dev.lm04.stats.model.spotify_token import SpotifyToken


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CredentialRecord(BaseModel):
    """Immutable snapshot of a ``spotify_token`` row."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    access_token: str = Field(repr=False)
    refresh_token: str = Field(repr=False)
    scope: Optional[str] = None
    expires_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return is_expired(self, now)


def is_expired(record: CredentialRecord, now: Optional[datetime] = None) -> bool:
    """
    Check whether the record's access token has expired at ``now``.

    A record without ``expires_at`` is never considered expired here; callers
    have to rely on the API answering 401 in that case. ``now`` defaults to the
    current time and a naive value is read as UTC.
    """
    if record.expires_at is None:
        return False
    if now is None:
        now = utc_now()
    return ensure_utc(now) >= ensure_utc(record.expires_at)


def current_token_stmt() -> Select:
    return (
        select(SpotifyToken)
        .order_by(SpotifyToken.updated_at.desc().nulls_last(), SpotifyToken.id.desc())
        .limit(1)
    )


class CredentialStore:
    """
    Credential store over the ``spotify_token`` table.

    Writers are serialized through an in-process lock and run in a single
    transaction that locks the current row where the engine supports
    ``SELECT ... FOR UPDATE``. Readers never block each other.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.engine = engine
        self._session_maker = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )
        self._clock = clock
        self._write_lock = asyncio.Lock()

    async def create_schema(self) -> None:
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"Unable to create schema: {e}") from e

    async def get_current(self) -> CredentialRecord:
        """
        Return the most recently updated credential record.

        Raises:
            NotFound: nothing has been written yet
            StorageError: the database could not be read
        """
        try:
            async with self._session_maker() as database_session:
                token: Optional[SpotifyToken] = (
                    await database_session.scalars(current_token_stmt())
                ).first()
                record = None if token is None else CredentialRecord.model_validate(token)
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"Unable to read Spotify token: {e}") from e

        if record is None:
            raise NotFound()
        return record

    async def upsert(
        self,
        access_token: str,
        refresh_token: Optional[str],
        scope: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> CredentialRecord:
        """
        Create the credential record or update the current one in place.

        On update, ``scope`` and ``expires_at`` are only overwritten when given
        and ``refresh_token`` only when non-empty, since a refresh exchange does
        not always hand back a new refresh token. ``updated_at`` is set to the
        time of the call either way.

        Raises:
            ValidationError: ``access_token`` is empty, or ``refresh_token`` is
                empty and there is no record yet
            StorageError: the database rejected the read or the write
        """
        if not access_token:
            raise ValidationError("access_token", "must not be empty")

        expires_at = ensure_utc(expires_at)

        async with self._write_lock:
            try:
                async with self._session_maker() as database_session:
                    async with database_session.begin():
                        token: Optional[SpotifyToken] = (
                            await database_session.scalars(
                                current_token_stmt().with_for_update()
                            )
                        ).first()

                        now = ensure_utc(self._clock())

                        if token is None:
                            if not refresh_token:
                                raise ValidationError(
                                    "refresh_token", "required when creating a record"
                                )
                            token = SpotifyToken(
                                access_token=access_token,
                                refresh_token=refresh_token,
                                scope=scope,
                                expires_at=expires_at,
                                updated_at=now,
                            )
                            database_session.add(token)
                        else:
                            token.access_token = access_token
                            if refresh_token:
                                token.refresh_token = refresh_token
                            if scope is not None:
                                token.scope = scope
                            if expires_at is not None:
                                token.expires_at = expires_at
                            token.updated_at = now

                        await database_session.flush()
                        record = CredentialRecord.model_validate(token)
            except (SQLAlchemyError, OSError) as e:
                raise StorageError(f"Unable to write Spotify token: {e}") from e

        return record


@contextlib.asynccontextmanager
async def open_store(
    database_url: str, *, echo: bool = False
) -> AsyncIterator[CredentialStore]:
    """Create an engine for ``database_url`` and dispose of it on exit."""
    engine = create_async_engine(database_url, echo=echo)
    try:
        yield CredentialStore(engine)
    finally:
        await engine.dispose()
