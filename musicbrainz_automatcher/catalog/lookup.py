"""Bounded retry with quadratic backoff around catalog calls."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from musicbrainz_automatcher.exceptions import CatalogError, LookupFailedError
from musicbrainz_automatcher.models import Artist, SearchResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RETRIES = 3


class Catalog(Protocol):
    """The three catalog operations the resolver needs."""

    def search_tracks(self, query: str, limit: int) -> list[SearchResult]: ...

    def search_artists(self, name: str, limit: int) -> list[SearchResult]: ...

    def get_artist(self, artist_id: str) -> Artist | None: ...


@dataclass(frozen=True)
class RetryOutcome(Generic[T]):
    """Result of a retried call.

    Exactly one of ``value``/``error`` is meaningful: ``error`` is None
    on success.
    """

    value: T | None
    error: CatalogError | None
    attempts: int
    total_delay: float

    @property
    def ok(self) -> bool:
        return self.error is None


def backoff_delay(attempt: int) -> float:
    """Seconds to wait after the given (1-based) failed attempt."""
    return float(attempt**2)


def retry_call(
    func: Callable[[], T],
    max_attempts: int,
    sleep: Callable[[float], None] = time.sleep,
    description: str = "catalog call",
) -> RetryOutcome[T]:
    """Call *func* until it succeeds or *max_attempts* is reached.

    Only CatalogError is retried; anything else is a bug and propagates.
    No delay follows the final failed attempt.
    """
    max_attempts = max(1, max_attempts)
    total_delay = 0.0
    last_error: CatalogError | None = None

    for attempt in range(1, max_attempts + 1):
        try:
            value = func()
        except CatalogError as e:
            last_error = e
            if attempt == max_attempts:
                break
            delay = backoff_delay(attempt)
            logger.warning(
                "Error querying MusicBrainz for %s (attempt %d/%d), retrying in %.0fs: %s",
                description,
                attempt,
                max_attempts,
                delay,
                e,
            )
            sleep(delay)
            total_delay += delay
            continue
        return RetryOutcome(value=value, error=None, attempts=attempt, total_delay=total_delay)

    return RetryOutcome(value=None, error=last_error, attempts=max_attempts, total_delay=total_delay)


class ResilientLookup:
    """Catalog wrapper that retries failed calls and escalates exhaustion.

    Args:
        catalog: The underlying catalog client.
        max_retries: Upper bound on attempts per call (at least one is made).
        sleep: Blocking sleep function, injectable for tests.
    """

    def __init__(
        self,
        catalog: Catalog,
        max_retries: int = DEFAULT_RETRIES,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.catalog = catalog
        self.max_retries = max_retries
        self._sleep = sleep

    def _run(self, description: str, func: Callable[[], T]) -> T:
        outcome = retry_call(func, self.max_retries, sleep=self._sleep, description=description)
        if not outcome.ok:
            assert outcome.error is not None
            logger.error(
                "Giving up on %s after %d attempt(s): %s",
                description,
                outcome.attempts,
                outcome.error,
            )
            raise LookupFailedError(description, outcome.attempts, outcome.error) from outcome.error
        return outcome.value  # type: ignore[return-value]

    def search_tracks(self, query: str, limit: int) -> list[SearchResult]:
        return self._run("track search", lambda: self.catalog.search_tracks(query, limit))

    def search_artists(self, name: str, limit: int) -> list[SearchResult]:
        return self._run("artist search", lambda: self.catalog.search_artists(name, limit))

    def get_artist(self, artist_id: str) -> Artist | None:
        return self._run("artist aliases", lambda: self.catalog.get_artist(artist_id))
