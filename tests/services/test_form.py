"""Tests for FormController: mutations, touched state and visible errors."""

from typing import Any

import pytest

from rowform.domain.ids import IdFactory
from rowform.domain.schema import FormSchema
from rowform.domain.types import ErrorKind
from rowform.services.form import FormController
from tests.conftest import make_form

VALID = {"category": "option1", "start": 0, "end": 10}
EMPTY: dict[str, Any] = {"category": "", "start": "", "end": ""}


class TestConstruction:
    def test_starts_with_one_default_row(self, form: FormController) -> None:
        assert form.collection.ids == ("ROW-0001",)
        assert form.snapshot() == [EMPTY]
        assert form.touched == {}
        assert form.submitting is False

    def test_min_rows_sets_initial_count(self, schema: FormSchema, ids: IdFactory) -> None:
        form = FormController(schema, id_factory=ids, min_rows=3)
        assert len(form.collection) == 3

    def test_min_rows_zero_still_starts_with_one(self, schema: FormSchema, ids: IdFactory) -> None:
        form = FormController(schema, id_factory=ids, min_rows=0)
        assert len(form.collection) == 1

    def test_initial_rows(self, schema: FormSchema) -> None:
        form = make_form(schema, [VALID, EMPTY])
        assert form.collection.ids == ("ROW-0001", "ROW-0002")
        assert form.snapshot() == [VALID, EMPTY]

    def test_empty_initial_rows_padded_to_minimum(self, schema: FormSchema, ids: IdFactory) -> None:
        form = FormController(schema, initial_rows=[], id_factory=ids)
        assert form.collection.ids == ("ROW-0001",)
        assert form.snapshot() == [EMPTY]
        assert form.is_valid is False

    def test_short_initial_rows_padded(self, schema: FormSchema, ids: IdFactory) -> None:
        form = FormController(schema, initial_rows=[VALID], id_factory=ids, min_rows=2)
        assert form.snapshot() == [VALID, EMPTY]

    def test_initial_rows_zero_minimum_may_be_empty(
        self, schema: FormSchema, ids: IdFactory
    ) -> None:
        form = FormController(schema, initial_rows=[], id_factory=ids, min_rows=0)
        assert len(form.collection) == 0
        assert form.is_valid

    def test_errors_derived_immediately(self, form: FormController) -> None:
        assert set(form.errors) == {"items[0].category", "items[0].start", "items[0].end"}
        assert form.is_valid is False
        assert form.visible_errors == {}

    def test_custom_default_row(self, schema: FormSchema, ids: IdFactory) -> None:
        form = FormController(schema, id_factory=ids, default_row_factory=lambda: dict(VALID))
        form.add_row()
        assert form.snapshot() == [VALID, VALID]
        assert form.is_valid


class TestMutations:
    def test_add_row_appends_default(self, form: FormController) -> None:
        form.add_row()
        assert form.collection.ids == ("ROW-0001", "ROW-0002")
        assert form.snapshot()[1] == EMPTY
        assert "items[1].category" in form.errors

    def test_change_field_revalidates(self, form: FormController) -> None:
        form.change_field("ROW-0001", "category", "option2")
        form.change_field("ROW-0001", "start", "1")
        form.change_field("ROW-0001", "end", "2")
        assert form.is_valid
        assert form.snapshot() == [{"category": "option2", "start": "1", "end": "2"}]

    def test_change_unknown_field_is_noop(self, form: FormController) -> None:
        before = form.state
        assert form.change_field("ROW-0001", "colour", "red") is before
        assert form.state is before

    def test_change_unknown_row_is_noop(self, form: FormController) -> None:
        before = form.state
        assert form.change_field("ROW-9999", "start", 1) is before

    def test_remove_row(self, schema: FormSchema) -> None:
        form = make_form(schema, [VALID, EMPTY])
        form.remove_row("ROW-0002")
        assert form.collection.ids == ("ROW-0001",)
        assert form.is_valid

    def test_removed_id_not_reused(self, schema: FormSchema) -> None:
        generated = iter(["A", "B", "A", "C"])
        form = FormController(schema, id_factory=lambda: next(generated))
        form.add_row()
        form.remove_row("A")
        form.add_row()
        assert form.collection.ids == ("B", "C")

    def test_row_values_read_only(self, form: FormController) -> None:
        with pytest.raises(TypeError):
            form.rows[0].values["start"] = 1  # type: ignore[index]
        assert form.snapshot() == [EMPTY]

    def test_remove_last_row_refused(self, form: FormController) -> None:
        before = form.state
        assert form.remove_row("ROW-0001") is before
        assert len(form.collection) == 1

    def test_remove_unknown_row_is_noop(self, form: FormController) -> None:
        before = form.state
        assert form.remove_row("nope") is before

    def test_previous_state_unchanged(self, form: FormController) -> None:
        before = form.state
        form.add_row()
        assert len(before.collection) == 1
        assert len(form.state.collection) == 2


class TestTouched:
    def test_blur_marks_touched(self, form: FormController) -> None:
        form.blur_field("ROW-0001", "start")
        assert form.touched == {"items[0].start": True}
        assert form.is_touched("ROW-0001", "start")
        assert not form.is_touched("ROW-0001", "end")

    def test_blur_reveals_error(self, form: FormController) -> None:
        assert form.error_for("ROW-0001", "start") is None
        form.blur_field("ROW-0001", "start")
        error = form.error_for("ROW-0001", "start")
        assert error is not None
        assert error.kind == ErrorKind.REQUIRED
        assert set(form.visible_errors) == {"items[0].start"}

    def test_blur_unknown_targets_are_noops(self, form: FormController) -> None:
        before = form.state
        assert form.blur_field("ROW-9999", "start") is before
        assert form.blur_field("ROW-0001", "colour") is before

    def test_blur_twice_keeps_state(self, form: FormController) -> None:
        first = form.blur_field("ROW-0001", "start")
        assert form.blur_field("ROW-0001", "start") is first

    def test_change_does_not_touch(self, form: FormController) -> None:
        form.change_field("ROW-0001", "start", "abc")
        assert form.touched == {}
        assert form.error_for("ROW-0001", "start") is None

    def test_touched_never_cleared_by_valid_value(self, form: FormController) -> None:
        form.blur_field("ROW-0001", "start")
        form.change_field("ROW-0001", "start", 3)
        assert form.touched == {"items[0].start": True}
        assert form.error_for("ROW-0001", "start") is None

    def test_touch_all(self, schema: FormSchema) -> None:
        form = make_form(schema, [EMPTY, EMPTY])
        form.touch_all()
        assert len(form.touched) == 6
        assert form.visible_errors == form.errors

    def test_removal_drops_touched_flags(self, schema: FormSchema) -> None:
        form = make_form(schema, [EMPTY, EMPTY])
        form.blur_field("ROW-0002", "end")
        form.remove_row("ROW-0002")
        form.add_row()
        assert form.collection.ids == ("ROW-0001", "ROW-0003")
        assert form.touched == {}

    def test_touched_follows_row_after_earlier_removal(self, schema: FormSchema) -> None:
        form = make_form(schema, [VALID, EMPTY, EMPTY])
        form.blur_field("ROW-0003", "start")
        form.remove_row("ROW-0001")
        assert form.touched == {"items[1].start": True}
        assert set(form.visible_errors) == {"items[1].start"}

    def test_custom_root(self, schema: FormSchema, ids: IdFactory) -> None:
        form = FormController(schema, id_factory=ids, root="ranges")
        form.blur_field("ROW-0001", "end")
        assert form.touched == {"ranges[0].end": True}
        assert set(form.visible_errors) == {"ranges[0].end"}


class TestSubmittingFlag:
    def test_set_submitting_keeps_collection(self, form: FormController) -> None:
        before = form.collection
        form.set_submitting(True)
        assert form.submitting is True
        assert form.collection is before
        form.set_submitting(False)
        assert form.submitting is False
