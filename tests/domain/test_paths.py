"""Tests for canonical path encoding and lookup."""

import pytest

from rowform.domain.paths import DEFAULT_ROOT, get, parse_path, to_path


class TestToPath:
    def test_format(self) -> None:
        assert to_path(0, "start") == "items[0].start"

    def test_custom_root(self) -> None:
        assert to_path(12, "end", root="ranges") == "ranges[12].end"

    def test_deterministic(self) -> None:
        assert to_path(3, "category") == to_path(3, "category")

    def test_distinct_rows_distinct_paths(self) -> None:
        assert to_path(0, "start") != to_path(1, "start")


class TestParsePath:
    @pytest.mark.parametrize(
        "index,field",
        [(0, "start"), (7, "end"), (123, "category"), (2, "_private")],
    )
    def test_reverses_to_path(self, index: int, field: str) -> None:
        assert parse_path(to_path(index, field)) == (DEFAULT_ROOT, index, field)

    @pytest.mark.parametrize(
        "text",
        ["", "items", "items[0]", "items.0.start", "items[-1].start", "items[a].start", "[0].x"],
    )
    def test_rejects_non_paths(self, text: str) -> None:
        assert parse_path(text) is None


class TestGet:
    def test_present(self) -> None:
        assert get({"items[0].start": "boom"}, "items[0].start") == "boom"

    def test_absent_is_none(self) -> None:
        assert get({}, "items[0].start") is None

    def test_absent_in_populated_map(self) -> None:
        assert get({"items[0].start": True}, "items[1].start") is None
