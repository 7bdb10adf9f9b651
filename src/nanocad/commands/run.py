"""Command: execute a drawing file."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nanocad.commands._base import NanoCommand

if TYPE_CHECKING:
    from nanocad.commands._context import AppContext


@click.command(
    cls=NanoCommand,
    examples="""\
  nanocad run drawing.cad
  nanocad run drawing.cad --dump
  nanocad --json run drawing.cad --dump""",
)
@click.argument("path", type=click.Path(dir_okay=False))
@click.option("--dump", is_flag=True, help="Print every object, dimension and layer afterwards.")
@click.pass_obj
def run(app: AppContext, path: str, dump: bool) -> None:
    """Execute every line of PATH, stopping at the first rejected line."""
    result = app.interpreter.load_file(path)
    if dump and result.ok:
        app.emit(app.interpreter.snapshot())
    else:
        app.emit(result)
