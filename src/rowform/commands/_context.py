"""AppContext: shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Configures logging and centralizes result emission
(stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rowform.config.logging import configure_logging
from rowform.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from rowform.config.settings import RowformSettings
    from rowform.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: RowformSettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
        * Failure: writes to stderr, exits with code 1.

        Warnings always go to stderr so they never pollute piped output.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        click.echo(output, err=not result.ok)
        # In JSON mode, warnings are already in the serialized payload.
        if not settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
        if not result.ok:
            raise SystemExit(1)
