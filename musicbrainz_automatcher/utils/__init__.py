"""Utility modules for musicbrainz-automatcher."""

from musicbrainz_automatcher.utils.names import (
    clean_artists,
    escape_query,
    join_artists,
)
from musicbrainz_automatcher.utils.output import (
    console,
    error,
    info,
    success,
    warning,
)
from musicbrainz_automatcher.utils.similarity import (
    compact_string,
    string_similarity,
)

__all__ = [
    "clean_artists",
    "compact_string",
    "console",
    "error",
    "escape_query",
    "info",
    "join_artists",
    "string_similarity",
    "success",
    "warning",
]
