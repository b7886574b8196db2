"""MusicBrainz catalog access: HTTP client, response parsing and retries."""

from musicbrainz_automatcher.catalog.client import MusicBrainzClient, build_track_query
from musicbrainz_automatcher.catalog.lookup import Catalog, ResilientLookup

__all__ = [
    "Catalog",
    "MusicBrainzClient",
    "ResilientLookup",
    "build_track_query",
]
