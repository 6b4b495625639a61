"""Rich Console factory and theme for rowform output.

Consoles render into a StringIO buffer so renderers keep the
``format_result() -> str`` contract. Rich drops color codes on its own when
the output is not a terminal (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

ROWFORM_THEME = Theme(
    {
        "rf.ok": "bold green",
        "rf.error": "bold red",
        "rf.warning": "bold yellow",
        "rf.op": "bold cyan",
        "rf.key": "dim",
        "rf.path": "bold blue",
        "rf.field": "bold",
        "rf.kind.required": "red",
        "rf.kind.type": "magenta",
        "rf.kind.choice": "yellow",
        "rf.kind.range": "cyan",
        "rf.kind.cross_field": "blue",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Fixed width, for stable output in tests.
    """
    return Console(
        file=StringIO(),
        theme=ROWFORM_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    """Rich style name for an error kind (``required``, ``range``, ...)."""
    style = f"rf.kind.{kind}"
    return style if style in ROWFORM_THEME.styles else ""
