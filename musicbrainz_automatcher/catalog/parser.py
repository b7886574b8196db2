"""Parsing of MusicBrainz WS/2 JSON responses into catalog entities."""

from __future__ import annotations

import logging
from typing import Any

from musicbrainz_automatcher.exceptions import CatalogParseError
from musicbrainz_automatcher.models import Artist, SearchResult, Track

logger = logging.getLogger(__name__)


def _expect_object(value: Any, what: str, url: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise CatalogParseError(url, f"{what} is not an object: {value!r}")
    return value


def _expect_list(value: Any, what: str, url: str) -> list[Any]:
    if not isinstance(value, list):
        raise CatalogParseError(url, f"{what} is not a list: {value!r}")
    return value


def parse_artist(data: dict[str, Any], url: str) -> Artist:
    """Build an Artist from an artist JSON object.

    Raises:
        CatalogParseError: If the id or name is missing, or the object
            or its aliases are malformed.
    """
    data = _expect_object(data, "artist", url)
    try:
        artist_id = data["id"]
        name = data["name"]
    except KeyError as e:
        raise CatalogParseError(url, f"artist without id/name: {e}") from e

    aliases = tuple(
        alias["name"]
        for alias in _expect_list(data.get("aliases") or [], "aliases", url)
        if _expect_object(alias, "alias", url).get("name")
    )
    return Artist(
        id=artist_id,
        name=name,
        sort_name=data.get("sort-name"),
        aliases=aliases,
    )


def _parse_score(data: dict[str, Any], url: str) -> int:
    try:
        return int(data.get("score", 0))
    except (TypeError, ValueError) as e:
        raise CatalogParseError(url, f"invalid score {data.get('score')!r}") from e


def parse_recording_results(payload: dict[str, Any], url: str) -> list[SearchResult]:
    """Parse a recording search response.

    The track's artist is the first artist in its artist credit.
    Recordings without any credited artist are skipped.
    """
    recordings = payload.get("recordings")
    if not isinstance(recordings, list):
        raise CatalogParseError(url, "missing 'recordings' list")

    results: list[SearchResult] = []
    for rec in recordings:
        rec = _expect_object(rec, "recording", url)
        credit = _expect_list(rec.get("artist-credit") or [], "artist-credit", url)
        if not credit or not isinstance(credit[0], dict) or "artist" not in credit[0]:
            logger.debug("Skipping recording %s without artist credit", rec.get("id"))
            continue
        try:
            track = Track(
                id=rec["id"],
                title=rec.get("title", ""),
                artist=parse_artist(credit[0]["artist"], url),
            )
        except KeyError as e:
            raise CatalogParseError(url, f"recording without id: {e}") from e
        results.append(SearchResult(score=_parse_score(rec, url), entity=track))
    return results


def parse_artist_results(payload: dict[str, Any], url: str) -> list[SearchResult]:
    """Parse an artist search response."""
    artists = payload.get("artists")
    if not isinstance(artists, list):
        raise CatalogParseError(url, "missing 'artists' list")

    results: list[SearchResult] = []
    for item in artists:
        item = _expect_object(item, "artist", url)
        results.append(SearchResult(score=_parse_score(item, url), entity=parse_artist(item, url)))
    return results
