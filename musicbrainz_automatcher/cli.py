"""Command-line interface for musicbrainz-automatcher."""

from __future__ import annotations

import os
from pathlib import Path

import click

from musicbrainz_automatcher import __version__
from musicbrainz_automatcher.config import Config, load_config
from musicbrainz_automatcher.utils.output import (
    error,
    set_color,
    set_verbosity,
    warning,
)


class Context:
    """Shared context for all commands."""

    def __init__(self) -> None:
        self.config: Config | None = None
        self.verbose: bool = False
        self.debug: bool = False
        self.quiet: bool = False

    def get_config(self) -> Config:
        """Return the loaded config, loading defaults if the group didn't run."""
        if self.config is None:
            self.config, _ = load_config()
        return self.config


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False, path_type=Path),
    help="Path to config file (default: ~/.config/musicbrainz-automatcher/config.toml)",
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug output (implies --verbose)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Suppress non-error output",
)
@click.version_option(version=__version__, prog_name="musicbrainz-automatcher")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    no_color: bool,
    verbose: bool,
    debug: bool,
    quiet: bool,
) -> None:
    """musicbrainz-automatcher: Match artist names to MusicBrainz artist IDs.

    Takes informally written artist names (such as "Kate Nash ft. Jay-Z")
    and an optional track title, and finds the single MusicBrainz artist
    they refer to. Ambiguous names are rejected rather than guessed.

    Configuration is loaded from ~/.config/musicbrainz-automatcher/config.toml
    by default. Use --config to specify an alternative configuration file.

    Examples:

        # Match an artist using a track title
        musicbrainz-automatcher match "Kate Nash" --title "Pumpkin Soup"

        # Show help for a specific command
        musicbrainz-automatcher match --help
    """
    # Initialize context
    ctx.ensure_object(Context)
    app_ctx = ctx.obj
    app_ctx.verbose = verbose or debug
    app_ctx.debug = debug
    app_ctx.quiet = quiet

    # Configure verbosity for output helpers and library logging
    set_verbosity(verbose=verbose, debug=debug)

    # Configure color output: disabled by --no-color, NO_COLOR env, or config
    disable_color = no_color or os.environ.get("NO_COLOR") is not None

    if disable_color:
        set_color(False)

    # Load configuration
    try:
        loaded_config, warnings = load_config(config)
        app_ctx.config = loaded_config

        # Apply config settings
        if not disable_color and not loaded_config.colored_output:
            set_color(False)

        # Show warnings unless quiet (a missing config file is normal)
        if not quiet:
            for warn in warnings:
                if not warn.startswith("No config file found"):
                    warning(warn)

    except Exception as e:
        error(str(e))
        ctx.exit(1)


def register_commands() -> None:
    """Register all commands from the commands package."""
    from musicbrainz_automatcher.commands import discover_commands

    for command in discover_commands():
        cli.add_command(command)


# Register commands on import
register_commands()
