"""Match informally written artist names to a single MusicBrainz artist.

Resolution runs in up to three stages and stops at the first that
produces a confident answer:
  Stage A: recording search by artist and track title
  Stage A (relaxed): same, with a trailing "(...)" removed from the title
  Stage B: artist search by name alone

When more than one artist is an equally good answer the input is
ambiguous and the result is NoMatch rather than a guess.
"""

from __future__ import annotations

import logging
import re
import time as _time
from collections import defaultdict
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

from musicbrainz_automatcher.cache.executor import (
    DEFAULT_EXPIRY_TIME,
    CachedExecutor,
    parse_daily_time,
)
from musicbrainz_automatcher.cache.store import create_store
from musicbrainz_automatcher.catalog.client import (
    DEFAULT_HOST,
    DEFAULT_TIMEOUT,
    SEARCH_LIMIT,
    MusicBrainzClient,
    build_track_query,
)
from musicbrainz_automatcher.catalog.lookup import DEFAULT_RETRIES, Catalog, ResilientLookup
from musicbrainz_automatcher.models import NO_MATCH, Artist, MatchDecision, Matched, NoMatch
from musicbrainz_automatcher.utils.names import (
    clean_artists,
    first_title,
    join_artists,
    strip_parenthetical,
)
from musicbrainz_automatcher.utils.similarity import string_similarity

if TYPE_CHECKING:
    from musicbrainz_automatcher.config import Config

VARIOUS_ARTISTS_ID = "89ad4ac3-39f7-470e-963a-56509c546377"

TRACK_SCORE_THRESHOLD = 75
TRACK_SIMILARITY_THRESHOLD = 75
ARTIST_SCORE_THRESHOLD = 50
ARTIST_SIMILARITY_THRESHOLD = 85

# Two consecutive stars mark a censored swear word
_MASKED_WORD = re.compile(r"\*\*")
_THE_PREFIX = re.compile(r"^The ", re.IGNORECASE)


@dataclass(frozen=True)
class Ambiguous:
    """Stage A found two different artists that both pass the thresholds."""

    first_id: str
    second_id: str


TrackOutcome = Matched | NoMatch | Ambiguous


class Automatcher:
    """Resolves artist names (and optional track titles) to MusicBrainz artist ids.

    Args:
        catalog: Catalog client; defaults to a MusicBrainzClient built
            from the network options.
        cache: Memoizing executor; defaults to one over ``cache_backend``.
        network_timeout: HTTP timeout in seconds.
        network_retries: Maximum attempts per catalog call.
        musicbrainz_host: Web service host.
        proxy: Optional HTTP(S) proxy URL.
        cache_backend: "memory" or "sqlite".
        cache_path: SQLite file for the "sqlite" backend.
        cache_expires_at: Daily time at which cached results expire.
        logger: Diagnostic sink; defaults to this module's logger.
        sleep: Blocking sleep used between retries.
    """

    def __init__(
        self,
        catalog: Catalog | None = None,
        cache: CachedExecutor | None = None,
        *,
        network_timeout: float = DEFAULT_TIMEOUT,
        network_retries: int = DEFAULT_RETRIES,
        musicbrainz_host: str = DEFAULT_HOST,
        proxy: str | None = None,
        cache_backend: str = "memory",
        cache_path: Path | None = None,
        cache_expires_at: time = DEFAULT_EXPIRY_TIME,
        logger: logging.Logger | None = None,
        sleep: Callable[[float], None] = _time.sleep,
    ) -> None:
        if catalog is None:
            catalog = MusicBrainzClient(host=musicbrainz_host, timeout=network_timeout, proxy=proxy)
        if cache is None:
            cache = CachedExecutor(create_store(cache_backend, cache_path), cache_expires_at)

        self.lookup = ResilientLookup(catalog, max_retries=network_retries, sleep=sleep)
        self.cache = cache
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> Automatcher:
        """Build an Automatcher from a loaded Config."""
        catalog = kwargs.pop("catalog", None) or MusicBrainzClient(
            host=config.musicbrainz_host,
            timeout=config.network_timeout,
            proxy=config.proxy,
            rate_limit_interval=config.rate_limit_interval,
            user_agent=config.user_agent,
        )
        return cls(
            catalog=catalog,
            network_retries=config.network_retries,
            cache_backend=config.cache_backend,
            cache_path=config.cache_path,
            cache_expires_at=parse_daily_time(config.cache_expires_at),
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def match_artist(
        self,
        artists: str | Sequence[str],
        title: str | Sequence[str] | None = None,
    ) -> MatchDecision:
        """Find the MusicBrainz artist for the given artist name(s).

        Args:
            artists: One name, or several, possibly joined with
                "feat.", "vs", "/" or "&".
            title: Optional track title. If a sequence is given only
                the first element is used.

        Returns:
            Matched(artist_id) or NO_MATCH.

        Raises:
            LookupFailedError: If MusicBrainz could not be reached after
                all retries. This is not the same as "no such artist".
        """
        title = first_title(title)
        names = clean_artists(artists)
        if not names:
            return NO_MATCH

        artist = join_artists(names)
        if _MASKED_WORD.search(artist):
            self.logger.info("Not matching '%s': name contains a masked word", artist)
            return NO_MATCH

        return self.cache.call(
            f"artists={artist} title={title or ''}",
            lambda: self._resolve(artist, title),
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _resolve(self, artist: str, title: str | None) -> MatchDecision:
        if title is not None:
            outcome = self.lookup_by_track(artist, title)

            if isinstance(outcome, NoMatch):
                core_title = strip_parenthetical(title)
                if core_title:
                    outcome = self.lookup_by_track(artist, core_title)

            if isinstance(outcome, Ambiguous):
                return NO_MATCH
            if isinstance(outcome, Matched):
                return outcome

        return self.cache.call(f"artist_name={artist}", lambda: self.lookup_by_artist(artist))

    def lookup_by_track(self, artist: str, title: str) -> TrackOutcome:
        """Stage A: find the artist through recordings with this title.

        Results are walked in ranking order until the search score drops
        below the threshold. The first artist whose name is similar
        enough becomes the candidate; a second, different one makes the
        lookup ambiguous.
        """
        self.logger.info("Looking up '%s' with track '%s'", artist, title)
        results = self.lookup.search_tracks(build_track_query(artist, title), SEARCH_LIMIT)

        matched_id: str | None = None
        for result in results:
            if result.score < TRACK_SCORE_THRESHOLD:
                break

            track = result.entity
            self.logger.debug(
                "  Score: %d  title: %s  artist: %s (%s)",
                result.score,
                track.title,
                track.artist.name,
                track.artist.id,
            )

            # Same artist as already matched, nothing new to learn
            if track.artist.id == matched_id:
                continue

            if self.artist_similarity(track.artist, artist) < TRACK_SIMILARITY_THRESHOLD:
                self.logger.debug("  artist name similarity is less than 75%, skipping.")
                continue

            if matched_id is not None:
                self.logger.info("  Found more than one artist with a high score, giving up.")
                return Ambiguous(matched_id, track.artist.id)
            matched_id = track.artist.id

        if matched_id is None:
            self.logger.info("  Lookup by track failed")
            return NO_MATCH

        self.logger.info("  Matched to artist ID: %s", matched_id)
        return Matched(matched_id)

    def lookup_by_artist(self, name: str) -> MatchDecision:
        """Stage B: find the artist by name alone.

        Candidates are grouped by name similarity; the single artist with
        the best similarity wins if it is similar enough. A tie at the top
        is ambiguous.
        """
        self.logger.info("Looking up '%s' just by name", name)
        results = self.lookup.search_artists(name, SEARCH_LIMIT)

        by_similarity: dict[int, list[Artist]] = defaultdict(list)
        for result in results:
            if result.score < ARTIST_SCORE_THRESHOLD:
                break

            candidate = result.entity
            similarity = self.artist_similarity(candidate, name)
            if similarity <= 0:
                continue

            self.logger.debug(
                "  Score: %d  name: %s  similarity: %d", result.score, candidate.name, similarity
            )
            if all(a.id != candidate.id for a in by_similarity[similarity]):
                by_similarity[similarity].append(candidate)

        if not by_similarity:
            self.logger.info("  No matches found when looking up just by name")
            return NO_MATCH

        best = max(by_similarity)
        if best < ARTIST_SIMILARITY_THRESHOLD:
            self.logger.info("  Closest match is less than 85% similar")
            return NO_MATCH
        if len(by_similarity[best]) != 1:
            self.logger.info("  More than one artist equally similar, giving up")
            return NO_MATCH

        winner = by_similarity[best][0]
        self.logger.debug("  Found artist by name: %s", winner.id)
        return Matched(winner.id)

    # ------------------------------------------------------------------
    # Alias-aware similarity
    # ------------------------------------------------------------------

    def artist_similarity(self, artist: Artist, name: str) -> int:
        """Best similarity between *name* and the artist's name or any alias."""
        best = string_similarity(artist.name, name)
        self.logger.debug("Comparing artist '%s' with '%s' : similarity=%d%%", artist.name, name, best)

        # Can't do better than 100% similar
        if best >= 100:
            return best

        for alias in self.artist_aliases(artist.id):
            percent = string_similarity(alias, name)
            self.logger.debug("Comparing alias '%s' with '%s' : similarity=%d%%", alias, name, percent)
            best = max(best, percent)
        return best

    def artist_aliases(self, artist_id: str) -> tuple[str, ...]:
        """Alias names for an artist, plus a synthesized "The <Name>".

        Cached per artist id. Various Artists is never looked up.
        """
        if artist_id == VARIOUS_ARTISTS_ID:
            return ()
        return self.cache.call(f"artist_aliases={artist_id}", lambda: self._fetch_aliases(artist_id))

    def _fetch_aliases(self, artist_id: str) -> tuple[str, ...]:
        artist = self.lookup.get_artist(artist_id)
        if artist is None:
            return ()

        aliases = list(artist.aliases)
        the_name = f"The {artist.name}"
        if not _THE_PREFIX.match(artist.name) and the_name not in aliases:
            aliases.append(the_name)
        return tuple(aliases)
