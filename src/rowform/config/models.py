"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults are baked here and ``rowform.toml`` only holds
overrides. A ``[fields.*]`` table in TOML replaces the default field set as a
whole; field rule sets are not merged key by key.

The default field set is the category/start/end range form: a required
category picked from three options, a non-negative start, and an end that
must exceed the start.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from rowform.domain.paths import DEFAULT_ROOT
from rowform.domain.rows import DEFAULT_MIN_ROWS
from rowform.domain.schema import FieldOption, FieldSchema
from rowform.domain.types import FieldKind


def default_fields() -> dict[str, FieldSchema]:
    """The built-in category/start/end field set."""
    return {
        "category": FieldSchema(
            required=True,
            kind=FieldKind.STRING,
            label="Category",
            default="",
            options=(
                FieldOption(value="option1", label="Option A"),
                FieldOption(value="option2", label="Option B"),
                FieldOption(value="option3", label="Option C"),
            ),
        ),
        "start": FieldSchema(
            required=True,
            kind=FieldKind.NUMERIC,
            min=0,
            label="Start",
            default="",
        ),
        "end": FieldSchema(
            required=True,
            kind=FieldKind.NUMERIC,
            more_than="start",
            label="End",
            default="",
        ),
    }


class FormConfig(BaseModel):
    """[form] section."""

    model_config = {"frozen": True}

    min_rows: int = Field(default=DEFAULT_MIN_ROWS, ge=0)
    root: str = Field(default=DEFAULT_ROOT, pattern=r"^[A-Za-z_]\w*$")
