"""Catalog entities and match results.

The resolver only depends on this narrow shape, never on the
catalog client's raw JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Artist:
    """A MusicBrainz artist."""

    id: str
    name: str
    sort_name: str | None = None
    aliases: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Track:
    """A MusicBrainz recording with its primary credited artist."""

    id: str
    title: str
    artist: Artist


@dataclass(frozen=True)
class SearchResult:
    """One ranked hit from a catalog search.

    Attributes:
        score: Search relevance, 0-100, as reported by the service.
        entity: The matched track or artist.
    """

    score: int
    entity: Track | Artist


@dataclass(frozen=True)
class Matched:
    """A confident match to a single artist."""

    artist_id: str

    @property
    def is_match(self) -> bool:
        return True


@dataclass(frozen=True)
class NoMatch:
    """No confident match (blank input, filtered, ambiguous or below threshold)."""

    @property
    def is_match(self) -> bool:
        return False


NO_MATCH = NoMatch()

MatchDecision = Matched | NoMatch
