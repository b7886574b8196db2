"""Match artist names to a MusicBrainz artist ID."""

from __future__ import annotations

import json

import click

from musicbrainz_automatcher.cli import Context, pass_context
from musicbrainz_automatcher.exceptions import AutomatcherError, LookupFailedError
from musicbrainz_automatcher.models import Matched
from musicbrainz_automatcher.resolver import Automatcher
from musicbrainz_automatcher.utils.names import clean_artists, join_artists
from musicbrainz_automatcher.utils.output import console, error, verbose

EXIT_MATCHED = 0
EXIT_NO_MATCH = 1
EXIT_LOOKUP_FAILED = 2


@click.command("match")
@click.argument("artists", nargs=-1, required=True)
@click.option(
    "--title",
    "-t",
    default=None,
    help="Track title to narrow down the artist",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the result as JSON",
)
@pass_context
def cli(ctx: Context, artists: tuple[str, ...], title: str | None, as_json: bool) -> None:
    """Find the MusicBrainz artist ID for ARTISTS.

    Several artists may be given as separate arguments or joined with
    "feat.", "ft.", "vs", "/" or "&" in a single argument.

    Exits with 0 when a match is found, 1 when there is no confident
    match, and 2 when MusicBrainz could not be queried.

    Examples:

    \b
      # Match using a track title (most reliable)
      musicbrainz-automatcher match "Kate Nash" --title "Pumpkin Soup"

    \b
      # Several artists
      musicbrainz-automatcher match "Jay-Z" "Linkin Park" -t "Numb/Encore"

    \b
      # Name only, JSON output
      musicbrainz-automatcher match "The Last Shadow Puppets" --json
    """
    config = ctx.get_config()
    display_name = join_artists(clean_artists(list(artists)))

    try:
        matcher = Automatcher.from_config(config)
        verbose(f"Matching '{display_name}'" + (f" with track '{title}'" if title else ""))
        decision = matcher.match_artist(list(artists), title)
    except LookupFailedError as e:
        error(str(e), hint="Check your network connection or try again later")
        raise SystemExit(EXIT_LOOKUP_FAILED) from e
    except AutomatcherError as e:
        error(str(e))
        raise SystemExit(EXIT_LOOKUP_FAILED) from e

    artist_id = decision.artist_id if isinstance(decision, Matched) else None

    if as_json:
        click.echo(
            json.dumps(
                {"artist": display_name, "title": title, "artist_id": artist_id},
                ensure_ascii=False,
            )
        )
    elif artist_id is not None:
        if ctx.quiet:
            click.echo(artist_id)
        else:
            console.print(f"[artist]{display_name}[/artist] -> [mbid]{artist_id}[/mbid]")
    elif not ctx.quiet:
        console.print(f"[warning]No confident match for[/warning] [artist]{display_name}[/artist]")

    if artist_id is None:
        raise SystemExit(EXIT_NO_MATCH)
