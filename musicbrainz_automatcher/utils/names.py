"""Artist name splitting, joining and search-query escaping."""

from __future__ import annotations

import re
from collections.abc import Sequence

# ---------------------------------------------------------------------------
# Pre-compiled patterns
# ---------------------------------------------------------------------------

# Applied in order; every name is split exhaustively by each one.
_ARTIST_SEPARATORS = (
    re.compile(r"\s+featuring\s+", re.IGNORECASE),
    re.compile(r"\s+feat\.?\s+", re.IGNORECASE),
    re.compile(r"\s+ft\.?\s+", re.IGNORECASE),
    re.compile(r"\s+vs\.?\s+", re.IGNORECASE),
    re.compile(r"/"),
    re.compile(r"&"),
)

_QUERY_SPECIAL = re.compile(r"""([+\-|!(){}\[\]^'"~*?:\\])""")

# "Wonderwall (live lounge session)" -> "Wonderwall"
_PARENTHETICAL_SUFFIX = re.compile(r"^(.+)\s+\(.+\)$")


def clean_artists(artists: str | Sequence[str]) -> list[str]:
    """Split raw artist input into individual, trimmed artist names.

    A single string is treated as a one-element list. Each name is split
    on "featuring", "feat", "ft", "vs", "/" and "&", whitespace is stripped
    and blank names are dropped. Order is preserved.

    Examples:
        >>> clean_artists("Kate Nash ft. Jay-Z")
        ['Kate Nash', 'Jay-Z']
        >>> clean_artists("A/B&C")
        ['A', 'B', 'C']
    """
    names = [artists] if isinstance(artists, str) else list(artists)

    for pattern in _ARTIST_SEPARATORS:
        names = [part for name in names for part in pattern.split(name)]

    return [name.strip() for name in names if name.strip()]


def join_artists(names: Sequence[str]) -> str:
    """Join artist names for display: ``["A", "B", "C"] -> "A, B and C"``."""
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " and " + names[-1]


def escape_query(term: str) -> str:
    """Backslash-escape characters that are special in Lucene query syntax."""
    return _QUERY_SPECIAL.sub(r"\\\1", term)


def strip_parenthetical(title: str) -> str | None:
    """Return the title without a trailing parenthetical, or None if there is none."""
    m = _PARENTHETICAL_SUFFIX.match(title)
    if not m:
        return None
    return m.group(1).strip()


def first_title(title: str | Sequence[str] | None) -> str | None:
    """Normalize a title argument to a stripped string, or None if blank.

    Some callers always pass lists; only the first element is used.
    """
    if title is not None and not isinstance(title, str):
        title = title[0] if len(title) > 0 else None
    if title is None:
        return None
    title = title.strip()
    return title or None
