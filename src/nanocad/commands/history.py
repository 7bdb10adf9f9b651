"""Command: list the accepted lines of a drawing."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nanocad.commands._base import NanoCommand

if TYPE_CHECKING:
    from nanocad.commands._context import AppContext


@click.command(
    cls=NanoCommand,
    examples="""\
  nanocad history drawing.cad
  nanocad -q history drawing.cad""",
)
@click.argument("path", type=click.Path(dir_okay=False))
@click.pass_obj
def history(app: AppContext, path: str) -> None:
    """Load PATH and print its accepted lines, numbered from 001."""
    app.load(path)
    app.emit(app.interpreter.history())
