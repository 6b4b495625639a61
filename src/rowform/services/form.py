"""FormController: the single entry point for user-driven mutations.

Composes a :class:`RowStore`, the validation engine and touched state over a
frozen :class:`FormState`. Every mutation replaces the state with a new
snapshot and re-runs validation over the whole collection.

Touched flags are stored against ``(row id, field name)`` rather than against
positional paths, so removing a row never moves another row's flag. The
path-keyed views (:attr:`FormController.touched`,
:attr:`FormController.visible_errors`) are projected through current
positions on read.

INVARIANT: mutations never raise. Unknown ids and unknown field names are
no-ops that leave the state unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from pydantic import BaseModel

from rowform.domain.ids import IdFactory
from rowform.domain.paths import DEFAULT_ROOT, to_path
from rowform.domain.rows import DEFAULT_MIN_ROWS, Collection, Row, RowStore, snapshot
from rowform.domain.schema import FormSchema
from rowform.domain.types import FieldValue
from rowform.domain.validation import ErrorMap, FieldError, validate

logger = logging.getLogger(__name__)

DefaultRowFactory = Callable[[], Mapping[str, FieldValue]]
TouchedKey = tuple[str, str]


class FormState(BaseModel):
    """Authoritative form state. Validation results are derived, not stored here."""

    model_config = {"frozen": True}

    collection: Collection
    touched: frozenset[TouchedKey] = frozenset()
    submitting: bool = False


class FormController:
    """State machine over ``{collection, touched, submitting}``.

    Parameters:
        schema: Field rules; fixed for the lifetime of the form.
        initial_rows: Field values for the starting rows, padded with default
            rows up to ``min_rows``. When omitted the form starts with
            ``max(min_rows, 1)`` default rows.
        id_factory: Injected row id generator.
        default_row_factory: Initial values for rows added by :meth:`add_row`.
            Defaults to :meth:`FormSchema.default_row`.
        min_rows: Minimum collection length enforced on removal.
        root: Path root used for error and touched keys.
    """

    def __init__(
        self,
        schema: FormSchema,
        *,
        initial_rows: Iterable[Mapping[str, FieldValue]] | None = None,
        id_factory: IdFactory | None = None,
        default_row_factory: DefaultRowFactory | None = None,
        min_rows: int = DEFAULT_MIN_ROWS,
        root: str = DEFAULT_ROOT,
    ) -> None:
        self.schema = schema
        self.root = root
        self._store = RowStore(id_factory=id_factory, min_rows=min_rows)
        self._default_row = default_row_factory or schema.default_row

        seeds = list(initial_rows) if initial_rows is not None else []
        target = min_rows if initial_rows is not None else max(min_rows, 1)
        while len(seeds) < target:
            seeds.append(self._default_row())
        rows: list[Row] = []
        for values in seeds:
            rows.append(self._store.new_row(values, {row.id for row in rows}))

        self._state = FormState(collection=Collection(rows=tuple(rows)))
        self._errors = self._derive_errors()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def collection(self) -> Collection:
        return self._state.collection

    @property
    def rows(self) -> tuple[Row, ...]:
        return self._state.collection.rows

    @property
    def submitting(self) -> bool:
        return self._state.submitting

    @property
    def errors(self) -> ErrorMap:
        """Every current validation error, touched or not."""
        return dict(self._errors)

    @property
    def is_valid(self) -> bool:
        return not self._errors

    @property
    def touched(self) -> dict[str, bool]:
        """Touched flags keyed by current path. Untouched paths are absent."""
        result: dict[str, bool] = {}
        for index, row in enumerate(self.rows):
            for field_name in self.schema.fields:
                if (row.id, field_name) in self._state.touched:
                    result[self.path_for(index, field_name)] = True
        return result

    @property
    def visible_errors(self) -> ErrorMap:
        """Errors the presentation layer should show: touched and failing."""
        touched = self.touched
        return {path: error for path, error in self._errors.items() if touched.get(path)}

    def path_for(self, row_index: int, field_name: str) -> str:
        return to_path(row_index, field_name, self.root)

    def is_touched(self, row_id: str, field_name: str) -> bool:
        return (row_id, field_name) in self._state.touched

    def error_for(self, row_id: str, field_name: str) -> FieldError | None:
        """The error to display for one field, or None.

        An error is shown only once the field has been touched.
        """
        index = self.collection.index_of(row_id)
        if index is None or not self.is_touched(row_id, field_name):
            return None
        return self._errors.get(self.path_for(index, field_name))

    def snapshot(self) -> list[dict[str, Any]]:
        """Current field values in row order, ids excluded."""
        return snapshot(self.collection)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_row(self) -> FormState:
        collection = self._store.append(self.collection, self._default_row())
        return self._commit(collection=collection)

    def remove_row(self, row_id: str) -> FormState:
        collection = self._store.remove_by_id(self.collection, row_id)
        if collection is self.collection:
            return self._state
        touched = frozenset(key for key in self._state.touched if key[0] != row_id)
        return self._commit(collection=collection, touched=touched)

    def change_field(self, row_id: str, field_name: str, value: FieldValue) -> FormState:
        if field_name not in self.schema.fields:
            logger.debug("Change ignored: unknown field %s", field_name)
            return self._state
        collection = self._store.update_field(self.collection, row_id, field_name, value)
        if collection is self.collection:
            return self._state
        return self._commit(collection=collection)

    def blur_field(self, row_id: str, field_name: str) -> FormState:
        """Mark one field touched. Touched flags are never cleared."""
        if field_name not in self.schema.fields or self.collection.index_of(row_id) is None:
            logger.debug("Blur ignored: %s/%s is not a live field", row_id, field_name)
            return self._state
        key = (row_id, field_name)
        if key in self._state.touched:
            return self._state
        self._state = self._state.model_copy(update={"touched": self._state.touched | {key}})
        return self._state

    def touch_all(self) -> FormState:
        """Mark every field of every live row touched (rejected submit)."""
        keys = {(row.id, field_name) for row in self.rows for field_name in self.schema.fields}
        self._state = self._state.model_copy(update={"touched": self._state.touched | keys})
        return self._state

    def set_submitting(self, submitting: bool) -> FormState:
        """Flip the submitting flag. Owned by the submission coordinator."""
        self._state = self._state.model_copy(update={"submitting": submitting})
        return self._state

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _commit(self, **changes: Any) -> FormState:
        self._state = self._state.model_copy(update=changes)
        self._errors = self._derive_errors()
        logger.debug(
            "Form state: %d rows, %d errors, %d touched",
            len(self.collection),
            len(self._errors),
            len(self._state.touched),
        )
        return self._state

    def _derive_errors(self) -> ErrorMap:
        return validate(self.collection, self.schema, root=self.root)
