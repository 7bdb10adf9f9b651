"""Subcommand modules for nanocad.

Provides register_commands() which uses deferred imports to keep
``nanocad --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from nanocad.commands.history import history
    from nanocad.commands.inspect_cmd import inspect_cmd
    from nanocad.commands.repl import repl
    from nanocad.commands.run import run

    cli.add_command(run)
    cli.add_command(repl)
    cli.add_command(inspect_cmd)
    cli.add_command(history)
