"""
Configuration Module for lm04-stats

Settings are loaded from environment variables (and a ``.env`` file when one is
present) through Pydantic, with defaults suitable for local development.

Key configuration areas include:
- Database connection
- Spotify application credentials used by the token refresh exchange
- Debugging and error reporting
"""

from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


ASYNC_DRIVERS = {
    "sqlite": "sqlite+aiosqlite",
    "postgres": "postgresql+asyncpg",
    "postgresql": "postgresql+asyncpg",
}
"""Plain DSN schemes and the async driver each is rewritten to."""


class Settings(BaseSettings):
    """
    Application settings for lm04-stats.

    The database connection string can be set with either DATABASE_URL or
    DB_DSN. Spotify credentials are only needed by the refresh exchange, so
    they are optional here and checked where they are used.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    debug: bool = False
    """
    Echo SQL statements and log at DEBUG.
    Set with DEBUG=true environment variable.
    """

    database_url: str = Field(
        "sqlite+aiosqlite:///lm04-stats.db",
        validation_alias=AliasChoices("database_url", "db_dsn"),
    )
    """
    SQLAlchemy connection string for the token database.
    Set with DATABASE_URL or DB_DSN environment variables.
    Default: sqlite+aiosqlite:///lm04-stats.db
    """

    spotify_client_id: Optional[str] = None
    """Set with SPOTIFY_CLIENT_ID environment variable."""

    spotify_client_secret: Optional[str] = None
    """Set with SPOTIFY_CLIENT_SECRET environment variable."""

    spotify_token_url: str = "https://accounts.spotify.com/api/token"
    """
    Spotify accounts service token endpoint.
    Set with SPOTIFY_TOKEN_URL environment variable.
    """

    sentry_dsn: Optional[str] = None
    """
    Sentry DSN for error reporting. Optional, no error reporting if not set.
    Set with SENTRY_DSN environment variable.
    """

    @field_validator("database_url", mode="after")
    @classmethod
    def use_async_driver(cls, v: str) -> str:
        """
        Rewrite plain ``sqlite://`` and ``postgres(ql)://`` DSNs to their async
        drivers, leaving DSNs that already name a driver alone.

        Raises:
            ValueError: If the value is not a URL
        """
        scheme, sep, rest = v.partition("://")
        if not sep:
            raise ValueError("database_url must be a URL such as sqlite:///path.db")
        if "+" in scheme:
            return v
        driver = ASYNC_DRIVERS.get(scheme)
        if driver is None:
            return v
        return f"{driver}://{rest}"
