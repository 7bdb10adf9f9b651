"""Command: describe a variable or layer after loading a drawing."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nanocad.commands._base import NanoCommand

if TYPE_CHECKING:
    from nanocad.commands._context import AppContext


@click.command(
    "inspect",
    cls=NanoCommand,
    examples="""\
  nanocad inspect drawing.cad '&door'
  nanocad inspect drawing.cad '&^'
  nanocad inspect drawing.cad '$width'
  nanocad inspect drawing.cad l1""",
)
@click.argument("path", type=click.Path(dir_okay=False))
@click.argument("target")
@click.pass_obj
def inspect_cmd(app: AppContext, path: str, target: str) -> None:
    """Load PATH, then describe TARGET ($fixed, @coord, &object or l<N>)."""
    app.load(path)
    app.emit(app.interpreter.inspect(target))
