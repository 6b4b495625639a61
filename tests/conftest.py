"""Shared pytest fixtures and test helpers for rowform tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from rowform.config.models import default_fields
from rowform.domain.ids import IdFactory, sequential_ids
from rowform.domain.schema import FormSchema
from rowform.services.form import FormController


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def schema() -> FormSchema:
    """The built-in category/start/end schema."""
    return FormSchema(fields=default_fields())


@pytest.fixture
def ids() -> IdFactory:
    """Deterministic id source: ROW-0001, ROW-0002, ..."""
    return sequential_ids()


@pytest.fixture
def form(schema: FormSchema, ids: IdFactory) -> FormController:
    """A fresh form with one empty row (id ROW-0001)."""
    return FormController(schema, id_factory=ids)


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Generator[None]:
    """Undo the handler each CLI invocation installs on the root logger."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def _isolated_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run in an empty temp directory with no config discovery leaking in.

    Use via ``@pytest.mark.usefixtures("_isolated_dir")`` on CLI test classes.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ROWFORM_CONFIG", raising=False)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_form(
    schema: FormSchema,
    rows: list[dict[str, Any]],
    **kwargs: Any,
) -> FormController:
    """Form seeded with *rows*, ids ROW-0001.. in order."""
    kwargs.setdefault("id_factory", sequential_ids())
    return FormController(schema, initial_rows=rows, **kwargs)


def write_rows(directory: Path, rows: Any, name: str = "rows.json") -> Path:
    """Write *rows* as JSON and return the file path."""
    path = directory / name
    path.write_text(json.dumps(rows), encoding="utf-8")
    return path
