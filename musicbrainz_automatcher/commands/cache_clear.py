"""Empty the lookup cache."""

from __future__ import annotations

import click

from musicbrainz_automatcher.cache.store import SqlStore, create_store
from musicbrainz_automatcher.cli import Context, pass_context
from musicbrainz_automatcher.exceptions import AutomatcherError
from musicbrainz_automatcher.utils.output import error, info, success


@click.command("cache-clear")
@click.option(
    "--expired",
    is_flag=True,
    default=False,
    help="Only remove entries that have already expired",
)
@pass_context
def cli(ctx: Context, expired: bool) -> None:
    """Remove cached matches and alias lookups.

    Only useful with the persistent "sqlite" cache backend; the
    "memory" backend never outlives a single command.

    Examples:

    \b
      # Drop everything
      musicbrainz-automatcher cache-clear

    \b
      # Drop only stale rows
      musicbrainz-automatcher cache-clear --expired
    """
    config = ctx.get_config()

    if config.cache_backend == "memory":
        info("The memory cache backend keeps nothing between runs; nothing to clear.")
        return

    try:
        store = create_store(config.cache_backend, config.cache_path)
        if expired and isinstance(store, SqlStore):
            removed = store.purge_expired()
            success(f"Removed {removed} expired entries from {config.cache_path}")
            return
        store.clear()
    except AutomatcherError as e:
        error(str(e))
        raise SystemExit(1) from e

    success(f"Cleared cache: {config.cache_path}")
