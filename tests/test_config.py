"""
Unit tests for application settings in dev.lm04.stats.app.config

Tests cover environment loading, DSN aliases and async driver selection.
"""

import pytest
from pydantic import ValidationError

from dev.lm04.stats.app.config import Settings


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Run each test without inherited settings or a stray .env file."""
    for name in [
        "DATABASE_URL",
        "DB_DSN",
        "DEBUG",
        "SPOTIFY_CLIENT_ID",
        "SPOTIFY_CLIENT_SECRET",
        "SPOTIFY_TOKEN_URL",
        "SENTRY_DSN",
    ]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestSettings:
    """Test suite for Settings."""

    def test_defaults(self):
        """Test development defaults."""
        settings = Settings()

        assert settings.database_url == "sqlite+aiosqlite:///lm04-stats.db"
        assert settings.debug is False
        assert settings.spotify_client_id is None
        assert settings.spotify_token_url == "https://accounts.spotify.com/api/token"
        assert settings.sentry_dsn is None

    def test_database_url_from_environment(self, monkeypatch):
        """Test DATABASE_URL is read from the environment."""
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///data/tokens.db")

        assert Settings().database_url == "sqlite+aiosqlite:///data/tokens.db"

    def test_db_dsn_alias(self, monkeypatch):
        """Test DB_DSN is accepted as an alias."""
        monkeypatch.setenv("DB_DSN", "postgresql+asyncpg://postgres:password@db/lm04")

        assert Settings().database_url == "postgresql+asyncpg://postgres:password@db/lm04"

    def test_spotify_credentials_from_environment(self, monkeypatch):
        """Test Spotify client credentials are read from the environment."""
        monkeypatch.setenv("SPOTIFY_CLIENT_ID", "client-id")
        monkeypatch.setenv("SPOTIFY_CLIENT_SECRET", "client-secret")

        settings = Settings()

        assert settings.spotify_client_id == "client-id"
        assert settings.spotify_client_secret == "client-secret"

    def test_dotenv_file(self, tmp_path):
        """Test values are read from a .env file in the working directory."""
        (tmp_path / ".env").write_text("SPOTIFY_CLIENT_ID=from-dotenv\n")

        assert Settings().spotify_client_id == "from-dotenv"

    @pytest.mark.parametrize(
        "given, expected",
        [
            ("sqlite:///lm04.db", "sqlite+aiosqlite:///lm04.db"),
            ("postgres://u:p@db/lm04", "postgresql+asyncpg://u:p@db/lm04"),
            ("postgresql://u:p@db/lm04", "postgresql+asyncpg://u:p@db/lm04"),
            ("postgresql+psycopg://u:p@db/lm04", "postgresql+psycopg://u:p@db/lm04"),
            ("mysql+aiomysql://u:p@db/lm04", "mysql+aiomysql://u:p@db/lm04"),
        ],
    )
    def test_async_driver_rewrite(self, given, expected):
        """Test plain DSN schemes are rewritten to async drivers."""
        assert Settings(database_url=given).database_url == expected

    def test_database_url_must_be_url(self):
        """Test a value without a scheme is rejected."""
        with pytest.raises(ValidationError):
            Settings(database_url="lm04.db")
