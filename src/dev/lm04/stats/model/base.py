from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Text, orm
from sqlalchemy.types import TypeDecorator

from typing_extensions import Annotated


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return value as an aware UTC datetime. Naive values are taken to be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timestamp column that always round-trips as an aware UTC datetime.

    PostgreSQL hands back aware values for ``timestamptz`` columns, SQLite hands
    back naive ones. Values are normalised to UTC on the way in and tagged as UTC
    on the way out so every reader sees the same instant.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return ensure_utc(value)

    def process_result_value(self, value, dialect):
        return ensure_utc(value)


strtext = Annotated[str, "text"]
utcdatetime = Annotated[datetime, "utcdatetime"]


class Base(orm.DeclarativeBase):
    type_annotation_map = {
        strtext: Text(),
        utcdatetime: UTCDateTime(),
    }
