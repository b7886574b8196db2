"""Subcommands of the musicbrainz-automatcher CLI.

Every public module here defines a click command named ``cli``.
"""

from __future__ import annotations

import importlib
import pkgutil

import click


def discover_commands() -> list[click.Command]:
    """Import the command modules and return their commands, sorted by name.

    Modules starting with an underscore are skipped.

    Raises:
        RuntimeError: If two modules register the same command name.
    """
    commands: dict[str, click.Command] = {}
    for module_info in pkgutil.iter_modules(__path__):
        if module_info.name.startswith("_"):
            continue
        module = importlib.import_module(f"{__name__}.{module_info.name}")
        cmd = getattr(module, "cli", None)
        if not isinstance(cmd, click.Command):
            continue
        if cmd.name in commands:
            raise RuntimeError(f"Duplicate command name {cmd.name!r} in {module.__name__}")
        commands[cmd.name] = cmd
    return [commands[name] for name in sorted(commands)]
