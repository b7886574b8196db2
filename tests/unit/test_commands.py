"""Unit tests for command discovery."""

from __future__ import annotations

from musicbrainz_automatcher.cli import cli
from musicbrainz_automatcher.commands import discover_commands


def test_discovers_all_commands_sorted() -> None:
    assert [cmd.name for cmd in discover_commands()] == ["cache-clear", "init-config", "match"]


def test_commands_registered_on_group() -> None:
    assert {"cache-clear", "init-config", "match"} <= set(cli.commands)
