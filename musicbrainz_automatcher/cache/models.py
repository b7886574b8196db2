"""SQLAlchemy ORM models for the persistent lookup cache."""

from __future__ import annotations

from sqlalchemy import Float, Index, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class CacheBase(DeclarativeBase):
    """Base class for cache ORM models."""

    pass


class CacheEntry(CacheBase):
    """One memoized lookup result.

    ``value`` holds the JSON-encoded result; ``expires_at`` is a POSIX
    timestamp after which the row is treated as absent.
    """

    __tablename__ = "cache_entries"

    key: Mapped[str] = mapped_column(String(1024), primary_key=True)
    value: Mapped[str] = mapped_column(Text)
    expires_at: Mapped[float] = mapped_column(Float)

    __table_args__ = (Index("ix_cache_entries_expires_at", "expires_at"),)

    def __repr__(self) -> str:
        return f"<CacheEntry(key='{self.key[:40]}', expires_at={self.expires_at})>"
