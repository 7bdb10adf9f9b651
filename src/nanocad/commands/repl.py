"""Command: interactive line-by-line session on stdin."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nanocad.commands._base import NanoCommand

if TYPE_CHECKING:
    from nanocad.commands._context import AppContext

PROMPT = "nanocad> "


@click.command(
    cls=NanoCommand,
    examples="""\
  nanocad repl
  nanocad repl --load base.cad
  echo 'line x0;y0, x10;y10' | nanocad --json repl""",
)
@click.option(
    "--load",
    "load_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Drawing file to execute before reading stdin.",
)
@click.option("--dump", is_flag=True, help="Print the drawing when input ends.")
@click.pass_obj
def repl(app: AppContext, load_path: str | None, dump: bool) -> None:
    """Read statements from stdin, one per line.

    A rejected line is reported on stderr and the session carries on. The
    exit code is 1 when any line was rejected.
    """
    if load_path:
        app.load(load_path)

    stdin = click.get_text_stream("stdin")
    interactive = stdin.isatty()
    failures = 0
    while True:
        if interactive:
            click.echo(PROMPT, nl=False, err=True)
        raw = stdin.readline()
        if not raw:
            break
        if not app.report(app.interpreter.execute_line(raw)):
            failures += 1

    if interactive:
        click.echo(err=True)
    if dump:
        app.report(app.interpreter.snapshot())
    if failures:
        raise SystemExit(1)
