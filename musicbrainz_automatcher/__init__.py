"""musicbrainz-automatcher: match artist names to MusicBrainz artist ids."""

__version__ = "0.2.0"

from musicbrainz_automatcher.models import NO_MATCH, Matched, MatchDecision, NoMatch  # noqa: E402
from musicbrainz_automatcher.resolver import Automatcher  # noqa: E402

__all__ = [
    "NO_MATCH",
    "Automatcher",
    "MatchDecision",
    "Matched",
    "NoMatch",
    "__version__",
]
