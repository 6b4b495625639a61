"""Command: show the resolved field schema."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rowform.commands._base import RowformCommand

if TYPE_CHECKING:
    from rowform.commands._context import AppContext


@click.command(
    cls=RowformCommand,
    examples="""\
  rowform schema
  rowform --json schema
  rowform -c ./forms/ranges.toml schema""",
)
@click.pass_obj
def schema(app: AppContext) -> None:
    """Show the field rules in effect (config file or built-in defaults)."""
    from rowform.services.rows_file import RowsFileService

    app.emit(RowsFileService(app.settings).schema())
