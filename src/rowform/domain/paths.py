"""Canonical field paths for error and touched lookups.

A path names one field of one row by its current position, in the same
bracket/dot notation form libraries use: ``items[0].start``.

Absent paths are never exceptional: :func:`get` returns ``None`` and
:func:`parse_path` returns ``None`` for strings that are not paths.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TypeVar

DEFAULT_ROOT = "items"

PATH_PATTERN = re.compile(
    r"^(?P<root>[A-Za-z_][\w]*)\[(?P<index>\d+)\]\.(?P<field>[A-Za-z_][\w]*)$"
)

V = TypeVar("V")


def to_path(row_index: int, field_name: str, root: str = DEFAULT_ROOT) -> str:
    """Encode a (row index, field name) pair as a path.

    Examples:
        >>> to_path(0, "start")
        'items[0].start'
        >>> to_path(3, "end", root="ranges")
        'ranges[3].end'
    """
    return f"{root}[{row_index}].{field_name}"


def parse_path(path: str) -> tuple[str, int, str] | None:
    """Decode a path into ``(root, row_index, field_name)``.

    Returns None when *path* is not in canonical form.

    Examples:
        >>> parse_path("items[2].category")
        ('items', 2, 'category')
        >>> parse_path("items.2.category") is None
        True
    """
    match = PATH_PATTERN.match(path)
    if match is None:
        return None
    return match.group("root"), int(match.group("index")), match.group("field")


def get(mapping: Mapping[str, V], path: str) -> V | None:
    """Look up *path* in *mapping*; absence yields None, never an error."""
    return mapping.get(path)
