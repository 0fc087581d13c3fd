"""Spotify OAuth credential data model.

Provides the SQLAlchemy model for the ``spotify_token`` table, which holds the
access/refresh token pair for the single Spotify account the service acts for.
"""
from typing import Optional
from sqlalchemy import Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from dev.lm04.stats.model.base import Base, strtext, utcdatetime


class SpotifyToken(Base):
    """Spotify access and refresh token with grant metadata.

    The identifier space permits several rows; the most recently updated
    row is the authoritative one.
    """
    __tablename__ = "spotify_token"
    __table_args__ = (Index("idx_spotify_token_updated_at", "updated_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    access_token: Mapped[strtext] = mapped_column(nullable=False)
    refresh_token: Mapped[strtext] = mapped_column(nullable=False)
    scope: Mapped[Optional[strtext]] = mapped_column(nullable=True)
    expires_at: Mapped[Optional[utcdatetime]] = mapped_column(nullable=True)
    updated_at: Mapped[Optional[utcdatetime]] = mapped_column(nullable=True)

    def __repr__(self) -> str:
        return f"SpotifyToken(id={self.id!r}, updated_at={self.updated_at!r})"
