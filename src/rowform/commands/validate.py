"""Command: validate a rows file against the configured schema."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from rowform.commands._base import RowformCommand
from rowform.config.logging import bind_source

if TYPE_CHECKING:
    from rowform.commands._context import AppContext


@click.command(
    cls=RowformCommand,
    examples="""\
  rowform validate rows.json
  rowform --json validate rows.json
  rowform -q validate rows.json
  rowform -c ./forms/ranges.toml validate rows.json""",
)
@click.argument("rows_file", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
def validate(app: AppContext, rows_file: Path) -> None:
    """Validate ROWS_FILE (a JSON array of row objects); exit 1 on errors."""
    from rowform.services.rows_file import RowsFileService

    bind_source(str(rows_file))
    app.emit(RowsFileService(app.settings).validate(rows_file))
