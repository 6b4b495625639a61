"""Schema-driven validation of a whole collection.

``validate`` is a pure function of (collection, schema). It is always run in
full over the current snapshot; nothing is carried over between runs.

Per field, rules are evaluated in order and stop at the first failure, so a
field carries at most one error:

1. required     empty value on a required field
2. type         numeric field whose value does not coerce to a finite number
3. choice       value outside the field's option list
4. range        numeric value below ``min``
5. cross_field  numeric value not strictly greater than the ``more_than`` sibling

A non-required empty field is valid and skips the remaining rules. The
cross-field rule compares against whatever the sibling currently holds; a
sibling that is empty or non-numeric fails the comparison.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, TypeAlias

from pydantic import BaseModel, Field

from rowform.domain.paths import DEFAULT_ROOT, to_path
from rowform.domain.rows import Collection
from rowform.domain.schema import TEMPLATE_FIELDS, FieldSchema, FormSchema
from rowform.domain.types import ErrorKind, FieldKind, FieldValue


class FieldError(BaseModel):
    """A single validation failure scoped to one field of one row."""

    model_config = {"frozen": True}

    kind: ErrorKind
    field: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


ErrorMap: TypeAlias = dict[str, FieldError]


def is_empty(value: FieldValue) -> bool:
    """None and blank strings count as empty."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def coerce_number(value: FieldValue) -> float | None:
    """Coerce *value* to a finite float, or None when that is not possible.

    Examples:
        >>> coerce_number(" 4.5 ")
        4.5
        >>> coerce_number(3)
        3.0
        >>> coerce_number("abc") is None
        True
        >>> coerce_number("nan") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return number


def _error(
    schema: FormSchema,
    kind: ErrorKind,
    field_name: str,
    **detail: Any,
) -> FieldError:
    context = {**TEMPLATE_FIELDS, "label": schema.label_for(field_name), **detail}
    message = schema.messages.template(kind).format(**context)
    return FieldError(kind=kind, field=field_name, message=message, detail=detail)


def validate_field(
    values: Mapping[str, FieldValue],
    field_name: str,
    rule: FieldSchema,
    schema: FormSchema,
) -> FieldError | None:
    """Evaluate one field's rules against one row's values."""
    value = values.get(field_name)

    if is_empty(value):
        if rule.required:
            return _error(schema, ErrorKind.REQUIRED, field_name)
        return None

    number: float | None = None
    if rule.kind == FieldKind.NUMERIC:
        number = coerce_number(value)
        if number is None:
            return _error(schema, ErrorKind.TYPE, field_name)

    candidate = value if number is None else number
    if rule.options and candidate not in rule.option_values:
        allowed = [option.value for option in rule.options]
        return _error(schema, ErrorKind.CHOICE, field_name, allowed=allowed)

    if number is None:
        return None

    if rule.min is not None and number < rule.min:
        return _error(schema, ErrorKind.RANGE, field_name, min=_display_number(rule.min))

    if rule.more_than is not None:
        other = coerce_number(values.get(rule.more_than))
        if other is None or not number > other:
            return _error(
                schema,
                ErrorKind.CROSS_FIELD,
                field_name,
                other=schema.label_for(rule.more_than),
                other_field=rule.more_than,
            )

    return None


def validate(
    collection: Collection,
    schema: FormSchema,
    *,
    root: str = DEFAULT_ROOT,
) -> ErrorMap:
    """Validate every schema field of every row.

    Returns a mapping containing an entry only for failing paths; an absent
    path means the field is valid.
    """
    errors: ErrorMap = {}
    for index, row in enumerate(collection.rows):
        for field_name, rule in schema.fields.items():
            error = validate_field(row.values, field_name, rule, schema)
            if error is not None:
                errors[to_path(index, field_name, root)] = error
    return errors


def is_valid(collection: Collection, schema: FormSchema) -> bool:
    return not validate(collection, schema)


def _display_number(number: float) -> int | float:
    return int(number) if number.is_integer() else number
