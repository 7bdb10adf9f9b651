"""Root CLI group for nanocad with global flags and command registration."""

from __future__ import annotations

import click

from nanocad import __version__
from nanocad.commands import register_commands
from nanocad.commands._base import NanoGroup
from nanocad.commands._context import AppContext
from nanocad.config.settings import NanoSettings

SESSION_EXAMPLES = """\
  $ cat > wall.cad
  layer 1, Walls, ff0000
  set $len, 2m
  line x0;y0, x$len;y0, l1 = &wall
  odimen &wall[0], &wall[1], d, 20cm
  $ nanocad run wall.cad --dump
  $ nanocad inspect wall.cad '&wall'
  $ nanocad repl --load wall.cad"""


@click.group(cls=NanoGroup, invoke_without_command=True, examples=SESSION_EXAMPLES)
@click.version_option(version=__version__, prog_name="nanocad")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Show substitution counts and error detail.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option(
    "-c", "--config", "config_path", default=None, help="Use this nanocad.toml instead of searching."
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """nanocad: draw lines, rectangles, circles and dimensions from text.

    \b
    Statements, one per line:
      line|rect|circle <p1>, <p2> [, l<N>] [= &name]
      dimen <start>, <end>, <line_start>, <line_end> [, l<N>]
      odimen <start>, <end>, u|d|l|r|ul|ur|dl|dr, <offset> [, l<N>]
      layer <N>, <name>, <RRGGBB>
      set $name|@name|&name, <value>
      list | inspect <$x|@p|&o|&^|l<N>>

    Points are x<num>;y<num>, or w<num>/h<num> relative to the first point.
    Numbers take an optional mm, cm or m suffix.
    """
    ctx.ensure_object(dict)
    settings = NanoSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
