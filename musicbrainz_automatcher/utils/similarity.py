"""String similarity scoring for artist names.

Scores are integer percentages from 0 to 101. Identical strings get 101
so a perfect match can be told apart from one that only becomes 100%
after normalization (e.g. "José González" vs "Jose Gonzalez").
"""

from __future__ import annotations

import re

from rapidfuzz.distance import Levenshtein
from unidecode import unidecode

EXACT_MATCH = 101

_NON_WORD = re.compile(r"[\W_]+")


def compact_string(s: str | bytes) -> str:
    """Reduce a name to lowercase ASCII letters and digits.

    Non-ASCII letters are transliterated ("Røyksopp" -> "royksopp",
    "Weiß" -> "weiss"), "&" becomes "and", and everything else that
    isn't alphanumeric is removed.

    Raises:
        UnicodeError: If *s* is bytes that aren't valid UTF-8.
    """
    if isinstance(s, bytes):
        s = s.decode("utf-8")
    ascii_form = unidecode(s.casefold()).lower().replace("&", " and ")
    return _NON_WORD.sub("", ascii_form)


def string_similarity(str1: str | bytes, str2: str | bytes) -> int:
    """How similar two names are, as an integer percentage.

    Uses Levenshtein distance over the compacted strings. The percentage
    is truncated (never rounded up) so 74.9% does not pass a 75% cutoff.
    Strings that can't be decoded score 0.
    """
    if str1 == str2:
        return EXACT_MATCH

    try:
        s1 = compact_string(str1)
        s2 = compact_string(str2)
    except UnicodeError:
        return 0

    # Don't allow empty strings to match
    if not s1 or not s2:
        return 0

    distance = Levenshtein.distance(s1, s2)
    length = max(len(s1), len(s2))
    # Integer arithmetic: float division can land just under a cutoff
    return (length - distance) * 100 // length
