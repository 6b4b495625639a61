"""Locating ``rowform.toml``.

Lookup order:
  1. ``ROWFORM_CONFIG``: names the file outright; the walk-up is skipped
     even when the named file does not exist.
  2. The nearest ``rowform.toml`` in the start directory or any ancestor.

``--config`` bypasses this module entirely (see ``RowformSettings.from_cli``).
Parsing and validation happen in :mod:`rowform.config.settings`.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "rowform.toml"
CONFIG_ENV_VAR = "ROWFORM_CONFIG"


def _search_dirs(start: Path) -> Iterator[Path]:
    resolved = start.resolve()
    yield resolved
    yield from resolved.parents


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect for *start* (default: cwd), or None."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        named = Path(override)
        return named if named.is_file() else None

    for directory in _search_dirs(start or Path.cwd()):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
