"""Key-value cache stores: in-process memory and SQLite via SQLAlchemy.

Stores hold JSON text; encoding values is the executor's job.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Generator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Final, Protocol

from sqlalchemy import create_engine, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from musicbrainz_automatcher.cache.models import CacheBase, CacheEntry
from musicbrainz_automatcher.exceptions import CacheError, ConfigValidationError

log = logging.getLogger(__name__)

BACKENDS = ("memory", "sqlite")


class _Miss:
    """Sentinel type for "key not in cache"."""

    _instance: _Miss | None = None

    def __new__(cls) -> _Miss:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISS"

    def __bool__(self) -> bool:
        return False


MISS: Final = _Miss()


class CacheStore(Protocol):
    """Minimal store interface used by CachedExecutor."""

    def get(self, key: str) -> str | _Miss: ...

    def put(self, key: str, value: str, expires_at: datetime) -> None: ...

    def clear(self) -> None: ...


class MemoryStore:
    """Thread-safe in-process store. Contents are lost on exit."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._entries: dict[str, tuple[str, datetime]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def get(self, key: str) -> str | _Miss:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return MISS
            value, expires_at = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return MISS
            return value

    def put(self, key: str, value: str, expires_at: datetime) -> None:
        with self._lock:
            self._purge_expired()
            self._entries[key] = (value, expires_at)

    def _purge_expired(self) -> None:
        # Caller holds the lock.
        now = self._clock()
        stale = [key for key, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in stale:
            del self._entries[key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class SqlStore:
    """Persistent store backed by a SQLite file.

    Tables are created on first use. Each operation runs in its own
    session so the store can be shared between threads.

    Args:
        path: SQLite database file. Parent directories are created.
        clock: Returns the current local time, injectable for tests.
    """

    def __init__(self, path: Path, clock: Callable[[], datetime] = datetime.now) -> None:
        self.path = path
        self._clock = clock
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheError(f"Cannot create cache directory {path.parent}: {e}") from e
        self._engine = create_engine(
            f"sqlite:///{path}",
            connect_args={
                "timeout": 30,
                "check_same_thread": False,
            },
        )
        try:
            CacheBase.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            msg = str(e).lower()
            if "malformed" in msg or "corrupt" in msg or "not a database" in msg:
                log.warning("Cache database appears corrupt, rebuilding: %s", e)
                self._engine.dispose()
                path.unlink(missing_ok=True)
                CacheBase.metadata.create_all(self._engine)
            else:
                raise CacheError(f"Cannot open cache database {path}: {e}") from e
        self._session_factory = sessionmaker(bind=self._engine)

    @contextmanager
    def _session(self) -> Generator[Session, None, None]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise CacheError(f"Cache database error: {e}") from e
        finally:
            session.close()

    def get(self, key: str) -> str | _Miss:
        now = self._clock().timestamp()
        with self._session() as session:
            entry = session.get(CacheEntry, key)
            if entry is None:
                return MISS
            if entry.expires_at <= now:
                session.delete(entry)
                return MISS
            return entry.value

    def put(self, key: str, value: str, expires_at: datetime) -> None:
        with self._session() as session:
            session.merge(CacheEntry(key=key, value=value, expires_at=expires_at.timestamp()))

    def purge_expired(self) -> int:
        """Delete all expired rows. Returns the number removed."""
        now = self._clock().timestamp()
        with self._session() as session:
            result = session.execute(delete(CacheEntry).where(CacheEntry.expires_at <= now))
            count = result.rowcount or 0
        if count:
            log.info("Purged %d expired cache entries", count)
        return count

    def clear(self) -> None:
        with self._session() as session:
            session.execute(delete(CacheEntry))


def create_store(
    backend: str,
    path: Path | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> CacheStore:
    """Build a cache store by backend name.

    Raises:
        ConfigValidationError: For an unknown backend, or "sqlite" without a path.
    """
    if backend == "memory":
        return MemoryStore(clock=clock)
    if backend == "sqlite":
        if path is None:
            raise ConfigValidationError("cache.path", None, "required for the sqlite backend")
        return SqlStore(path.expanduser(), clock=clock)
    raise ConfigValidationError(
        "cache.backend", backend, f"must be one of: {', '.join(BACKENDS)}"
    )
