"""Row ID generation contracts.

Two ID strategies:
- Random (default): ``row_`` + 32 hex chars from uuid4.
- Sequential (tests, reproducible fixtures): ``ROW-`` + counter, minimum 4 digits.

INVARIANT: IDs are permanent. Once assigned to a row, an ID never changes and
is never handed out again by the same generator.
"""

from __future__ import annotations

import itertools
import uuid
from collections.abc import Callable

IdFactory = Callable[[], str]

RANDOM_PREFIX = "row_"
SEQUENTIAL_PREFIX = "ROW-"


def random_row_id() -> str:
    """Generate a random row ID (``row_<uuid4 hex>``)."""
    return f"{RANDOM_PREFIX}{uuid.uuid4().hex}"


def sequential_ids(prefix: str = SEQUENTIAL_PREFIX, start: int = 1) -> IdFactory:
    """Return a generator function yielding ``ROW-0001``, ``ROW-0002``, ...

    Each call to :func:`sequential_ids` starts an independent counter, so a
    test can inject a fresh deterministic source per form.
    """
    counter = itertools.count(start)

    def next_id() -> str:
        return f"{prefix}{next(counter):04d}"

    return next_id
