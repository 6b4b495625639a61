"""Field kinds and validation error classification enums."""

from __future__ import annotations

from enum import StrEnum
from typing import TypeAlias

# A field value is empty/unset, a string, or a number.
FieldValue: TypeAlias = str | int | float | None


class FieldKind(StrEnum):
    """Value kind a field is validated as."""

    STRING = "string"
    NUMERIC = "numeric"


class ErrorKind(StrEnum):
    """Classification of field-level validation failures.

    Order of members matches the order rules are evaluated in.
    """

    REQUIRED = "required"
    TYPE = "type"
    CHOICE = "choice"
    RANGE = "range"
    CROSS_FIELD = "cross_field"
