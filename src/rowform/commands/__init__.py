"""Subcommand modules for rowform.

register_commands() imports command modules lazily so ``rowform --help``
stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from rowform.commands.schema import schema
    from rowform.commands.submit import submit
    from rowform.commands.validate import validate

    cli.add_command(validate)
    cli.add_command(submit)
    cli.add_command(schema)
