"""Memoization of lookups with a fixed daily expiry.

Entries expire at the same wall-clock time every day (18:00 by default)
rather than after a rolling TTL, so cached results refresh once a day
however often they are read.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import datetime, time, timedelta
from typing import Any, TypeVar

from musicbrainz_automatcher.cache.store import MISS, CacheStore
from musicbrainz_automatcher.exceptions import CacheError, ConfigValidationError
from musicbrainz_automatcher.models import NO_MATCH, Matched, NoMatch

log = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_EXPIRY_TIME = time(18, 0)


def parse_daily_time(value: str) -> time:
    """Parse an "HH:MM" string.

    Raises:
        ConfigValidationError: If the string isn't a valid time of day.
    """
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except ValueError as e:
        raise ConfigValidationError("cache.expires_at", value, "must be HH:MM") from e


def next_expiry(now: datetime, at: time = DEFAULT_EXPIRY_TIME) -> datetime:
    """Next occurrence of the daily time *at* strictly after *now*."""
    candidate = datetime.combine(now.date(), at, tzinfo=now.tzinfo)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


# ---------------------------------------------------------------------------
# Value encoding
# ---------------------------------------------------------------------------


def encode_value(value: Any) -> str:
    """Serialize a cacheable value to JSON text.

    Supports MatchDecision, sequences of strings (alias sets) and
    plain JSON scalars.
    """
    if isinstance(value, Matched):
        payload: dict[str, Any] = {"type": "matched", "artist_id": value.artist_id}
    elif isinstance(value, NoMatch):
        payload = {"type": "no_match"}
    elif isinstance(value, (list, tuple)):
        payload = {"type": "list", "items": list(value)}
    else:
        payload = {"type": "value", "value": value}
    try:
        return json.dumps(payload, ensure_ascii=False)
    except TypeError as e:
        raise CacheError(f"Cannot cache value of type {type(value).__name__}") from e


def decode_value(text: str) -> Any:
    """Inverse of encode_value. Lists come back as tuples."""
    try:
        payload = json.loads(text)
        kind = payload["type"]
    except (ValueError, KeyError, TypeError) as e:
        raise CacheError(f"Corrupt cache entry: {text[:80]!r}") from e
    if kind == "matched":
        return Matched(payload["artist_id"])
    if kind == "no_match":
        return NO_MATCH
    if kind == "list":
        return tuple(payload["items"])
    return payload.get("value")


class CachedExecutor:
    """Run a computation once per key per day.

    Concurrent misses on the same key may each compute and write;
    the last write wins.

    Args:
        store: Backing cache store.
        expires_at: Daily wall-clock time at which entries expire.
        clock: Returns the current local time, injectable for tests.
    """

    def __init__(
        self,
        store: CacheStore,
        expires_at: time = DEFAULT_EXPIRY_TIME,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.expires_at = expires_at
        self._clock = clock

    def call(self, key: str, compute: Callable[[], T]) -> T:
        """Return the cached value for *key*, computing and storing it on a miss."""
        cached = self.store.get(key)
        if cached is not MISS:
            log.debug("Cache hit: %s", key)
            return decode_value(cached)  # type: ignore[arg-type]

        log.debug("Cache miss: %s", key)
        value = compute()
        self.store.put(key, encode_value(value), next_expiry(self._clock(), self.expires_at))
        return value
