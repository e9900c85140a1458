"""SQLAlchemy ORM models for local SQLite storage.

Tables:
- kv_store: JSON blobs keyed by a storage key (passages cache, bookmarks,
  guest journal collections, ...)
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class KeyValue(Base):
    """A single serialized value stored under a string key."""

    __tablename__ = "kv_store"

    key: Mapped[str] = mapped_column(String(200), primary_key=True)
    value: Mapped[str] = mapped_column(Text)  # JSON
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
    )

    def __repr__(self) -> str:
        return f"<KeyValue(key='{self.key}', size={len(self.value or '')})>"
