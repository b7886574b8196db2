"""Initialize configuration file for musicbrainz-automatcher."""

from __future__ import annotations

import re
from importlib import resources
from pathlib import Path

import click
import tomli_w

from musicbrainz_automatcher.cache.store import BACKENDS
from musicbrainz_automatcher.cli import Context, pass_context
from musicbrainz_automatcher.config import get_default_config_path, load_config
from musicbrainz_automatcher.exceptions import ConfigError
from musicbrainz_automatcher.utils.output import error, info, success, warning

_BACKEND_LINE = re.compile(r"^backend = .*$", re.MULTILINE)
_USER_AGENT_LINE = re.compile(r"^# user_agent = .*$", re.MULTILINE)


def _load_example_config() -> str:
    """Load the example configuration from package data."""
    return (
        resources.files("musicbrainz_automatcher")
        .joinpath("config.example.toml")
        .read_text(encoding="utf-8")
    )


def _toml_line(key: str, value: str) -> str:
    return tomli_w.dumps({key: value}).rstrip("\n")


def render_config(cache: str = "memory", user_agent: str | None = None) -> str:
    """Return the example config with the chosen settings filled in.

    Comments are kept; only the ``backend`` line and, when given, the
    commented-out ``user_agent`` line are replaced.
    """
    text = _BACKEND_LINE.sub(lambda _: _toml_line("backend", cache), _load_example_config(), 1)
    if user_agent:
        text = _USER_AGENT_LINE.sub(lambda _: _toml_line("user_agent", user_agent), text, 1)
    return text


@click.command("init-config")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    default=False,
    help="Overwrite existing config file",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Output path for config file (default: ~/.config/musicbrainz-automatcher/config.toml)",
)
@click.option(
    "--cache",
    type=click.Choice(BACKENDS),
    default="memory",
    show_default=True,
    help="Cache backend to configure",
)
@click.option(
    "--user-agent",
    default=None,
    metavar="UA",
    help='User-Agent with contact details, e.g. "my-app/1.0 ( me@example.com )"',
)
@pass_context
def cli(
    ctx: Context,
    force: bool,
    output: Path | None,
    cache: str,
    user_agent: str | None,
) -> None:
    """Create a new configuration file with default settings.

    The file documents every option. The cache backend and the
    User-Agent sent to MusicBrainz can be set up front; the written
    file is loaded back to make sure it is valid.

    Examples:

    \b
      # Create config at default location
      musicbrainz-automatcher init-config

    \b
      # Persistent cache and a contact address for MusicBrainz
      musicbrainz-automatcher init-config --cache sqlite \\
          --user-agent "my-app/1.0 ( me@example.com )"
    """
    config_path = output if output is not None else get_default_config_path()
    config_path = config_path.expanduser().resolve()

    if config_path.exists() and not force:
        error(
            f"Config file already exists: {config_path}",
            hint="Use --force to overwrite",
        )
        raise SystemExit(1)

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(render_config(cache, user_agent), encoding="utf-8")
    except OSError as e:
        error(f"Failed to write config file: {e}")
        raise SystemExit(1) from e

    try:
        _, warnings = load_config(config_path)
    except ConfigError as e:
        error(f"Written config does not load: {e}")
        raise SystemExit(1) from e
    for message in warnings:
        warning(message)

    success(f"Created config file: {config_path}")
    if user_agent is None:
        info("Set network.user_agent so MusicBrainz can contact you about your traffic.")
