"""Rows, collections, and the RowStore mutation operations.

Collections are immutable snapshots. Every RowStore operation returns a
collection and never touches its input, so earlier snapshots stay valid for
equality comparison.

Operations are total: an unknown id, or a removal that would drop below the
configured minimum, returns the input collection unchanged.

Row ids are never reused. A RowStore remembers every id it has handed out
and refuses a generated id it has seen before, even after that row is gone.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, field_validator

from rowform.domain.ids import IdFactory, random_row_id
from rowform.domain.types import FieldValue

logger = logging.getLogger(__name__)

DEFAULT_MIN_ROWS = 1
MAX_ID_ATTEMPTS = 100


class Row(BaseModel):
    """One editable record: a stable id plus field values.

    ``values`` is a read-only view; a changed row is a new Row.
    """

    model_config = {"frozen": True}

    id: str
    values: Mapping[str, FieldValue]

    @field_validator("values", mode="after")
    @classmethod
    def _read_only(cls, values: Mapping[str, FieldValue]) -> Mapping[str, FieldValue]:
        return MappingProxyType(dict(values))

    def get(self, field_name: str) -> FieldValue:
        return self.values.get(field_name)


class Collection(BaseModel):
    """Ordered sequence of rows. Order is submission and display order."""

    model_config = {"frozen": True}

    rows: tuple[Row, ...] = ()

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(row.id for row in self.rows)

    def index_of(self, row_id: str) -> int | None:
        """Current position of *row_id*, or None if it is not live."""
        for index, row in enumerate(self.rows):
            if row.id == row_id:
                return index
        return None

    def find(self, row_id: str) -> Row | None:
        index = self.index_of(row_id)
        return None if index is None else self.rows[index]


def snapshot(collection: Collection) -> list[dict[str, Any]]:
    """Field values of every row in order, ids excluded.

    This is the payload handed to submit callbacks; identity is an internal
    concern and never leaves the form.
    """
    return [dict(row.values) for row in collection.rows]


class RowStore:
    """Mutation operations over :class:`Collection` snapshots.

    Collections go in and come out untouched; the only state a store keeps is
    the set of ids it has issued.

    Parameters:
        id_factory: Zero-argument callable producing fresh row ids.
        min_rows: Removals never take a collection below this length.
    """

    def __init__(
        self,
        *,
        id_factory: IdFactory | None = None,
        min_rows: int = DEFAULT_MIN_ROWS,
    ) -> None:
        if min_rows < 0:
            raise ValueError(f"min_rows must be non-negative, got {min_rows}")
        self._id_factory = id_factory or random_row_id
        self.min_rows = min_rows
        self._issued: set[str] = set()

    def new_row(self, default_fields: Mapping[str, FieldValue], taken: set[str]) -> Row:
        """Build a row with an id that is neither in *taken* nor issued before."""
        for _ in range(MAX_ID_ATTEMPTS):
            row_id = self._id_factory()
            if row_id not in taken and row_id not in self._issued:
                self._issued.add(row_id)
                return Row(id=row_id, values=default_fields)
            logger.debug("Id generator returned used id %s, retrying", row_id)
        msg = f"Id generator produced no unused id in {MAX_ID_ATTEMPTS} attempts"
        raise RuntimeError(msg)

    def append(
        self,
        collection: Collection,
        default_fields: Mapping[str, FieldValue],
    ) -> Collection:
        """Return *collection* with one new row at the end."""
        row = self.new_row(default_fields, set(collection.ids))
        logger.debug("Appended row %s at index %d", row.id, len(collection))
        return Collection(rows=(*collection.rows, row))

    def remove_by_id(self, collection: Collection, row_id: str) -> Collection:
        """Return *collection* without the row *row_id*.

        No-op when the id is absent or the minimum row count would be violated.
        """
        if collection.index_of(row_id) is None:
            logger.debug("Remove ignored: no row %s", row_id)
            return collection
        if len(collection) - 1 < self.min_rows:
            logger.debug("Remove ignored: %s would leave fewer than %d rows", row_id, self.min_rows)
            return collection
        return Collection(rows=tuple(row for row in collection.rows if row.id != row_id))

    def update_field(
        self,
        collection: Collection,
        row_id: str,
        field_name: str,
        value: FieldValue,
    ) -> Collection:
        """Return *collection* with one field of row *row_id* replaced."""
        index = collection.index_of(row_id)
        if index is None:
            logger.debug("Update ignored: no row %s", row_id)
            return collection
        row = collection.rows[index]
        current = row.values.get(field_name)
        if field_name in row.values and type(current) is type(value) and current == value:
            return collection
        updated = Row(id=row.id, values={**row.values, field_name: value})
        rows = list(collection.rows)
        rows[index] = updated
        return Collection(rows=tuple(rows))
