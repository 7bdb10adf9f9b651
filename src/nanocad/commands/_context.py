"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy interpreter initialization and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from nanocad.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from nanocad.config.settings import NanoSettings
    from nanocad.services.interpreter import InterpreterService
    from nanocad.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The interpreter is created on first use so ``--help`` and
    ``--version`` never build a session.
    """

    def __init__(self, settings: NanoSettings) -> None:
        self.settings = settings
        self._interpreter: InterpreterService | None = None

        from nanocad.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def interpreter(self) -> InterpreterService:
        """The interpreter for this invocation (created lazily on first access)."""
        if self._interpreter is None:
            from nanocad.services.interpreter import InterpreterService

            self._interpreter = InterpreterService.create(self.settings.engine_config())
        return self._interpreter

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def load(self, path: str | Path) -> None:
        """Load a drawing file into the interpreter, exiting 1 on the first bad line."""
        result = self.interpreter.load_file(path)
        if not result.ok:
            self.emit(result)

    def report(self, result: ServiceResult) -> bool:
        """Format and output a ServiceResult without exiting.

        Success goes to stdout, failure to stderr. Returns ``result.ok``.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            if output:
                click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
        return result.ok

    def emit(self, result: ServiceResult) -> None:
        """Like :meth:`report`, but a failure exits with code 1."""
        if not self.report(result):
            raise SystemExit(1)
