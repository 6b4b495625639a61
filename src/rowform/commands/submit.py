"""Command: submit a rows file through the submission gate."""

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
  rowform submit rows.json
  rowform submit rows.json -o payload.json
  rowform --json submit rows.json
  rowform -v submit rows.json""",
)
@click.argument("rows_file", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Write the submitted payload (ids stripped) to this JSON file.",
)
@click.pass_obj
def submit(app: AppContext, rows_file: Path, output: Path | None) -> None:
    """Submit ROWS_FILE; nothing is written unless every row is valid."""
    from rowform.services.rows_file import RowsFileService

    bind_source(str(rows_file))
    app.emit(RowsFileService(app.settings).submit(rows_file, output=output))
