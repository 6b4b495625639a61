"""Declarative per-field rule sets.

A :class:`FormSchema` is supplied once when a form is constructed and never
changes afterwards (all models are frozen). Inconsistent schemas are rejected
at construction with ``pydantic.ValidationError``; that is the only place
this package raises for bad input.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

from rowform.domain.types import ErrorKind, FieldKind, FieldValue

# Placeholders available to message templates, with neutral fill-ins.
TEMPLATE_FIELDS: dict[str, Any] = {
    "label": "",
    "min": "",
    "other": "",
    "other_field": "",
    "allowed": "",
}


class FieldOption(BaseModel):
    """One entry of an option list: the stored value and its display label."""

    model_config = {"frozen": True}

    value: str | int | float
    label: str


class FieldSchema(BaseModel):
    """Rule set for one field.

    Attributes:
        required: Empty values fail with ``required``.
        kind: ``numeric`` values must coerce to a finite number.
        min: Inclusive lower bound (numeric fields only).
        more_than: Sibling field this field must strictly exceed.
        options: Allowed values for enumerated fields; empty means unrestricted.
        label: Human-readable name used in messages.
        default: Initial value for newly appended rows.
    """

    model_config = {"frozen": True}

    required: bool = False
    kind: FieldKind = FieldKind.STRING
    min: float | None = None
    more_than: str | None = None
    options: tuple[FieldOption, ...] = ()
    label: str | None = None
    default: FieldValue = None

    @model_validator(mode="after")
    def _numeric_rules_need_numeric_kind(self) -> FieldSchema:
        if self.kind != FieldKind.NUMERIC:
            if self.min is not None:
                raise ValueError("'min' is only allowed on numeric fields")
            if self.more_than is not None:
                raise ValueError("'more_than' is only allowed on numeric fields")
        return self

    @property
    def option_values(self) -> frozenset[str | int | float]:
        return frozenset(option.value for option in self.options)


class Messages(BaseModel):
    """Message templates, one per error kind.

    Placeholders: ``{label}`` (this field), ``{min}`` (range bound),
    ``{other}`` and ``{other_field}`` (label and name of the ``more_than``
    field), ``{allowed}`` (option values).
    """

    model_config = {"frozen": True}

    required: str = "This field is required"
    type: str = "Enter a number"
    choice: str = "Select one of the available options"
    range: str = "Must be {min} or greater"
    cross_field: str = "Must be greater than {other}"

    @model_validator(mode="after")
    def _templates_format(self) -> Messages:
        for kind in ErrorKind:
            try:
                self.template(kind).format(**TEMPLATE_FIELDS)
            except (KeyError, IndexError, ValueError) as exc:
                raise ValueError(f"Invalid {kind} message template: {exc!r}") from exc
        return self

    def template(self, kind: ErrorKind) -> str:
        return str(getattr(self, kind.value))


class FormSchema(BaseModel):
    """Ordered mapping of field name to :class:`FieldSchema`, plus messages.

    Field order is the order rows are validated in and the order fields
    appear in a default row.
    """

    model_config = {"frozen": True}

    fields: dict[str, FieldSchema] = Field(min_length=1)
    messages: Messages = Field(default_factory=Messages)

    @model_validator(mode="after")
    def _cross_field_targets_exist(self) -> FormSchema:
        for name, rule in self.fields.items():
            if rule.more_than is None:
                continue
            if rule.more_than == name:
                raise ValueError(f"Field '{name}' cannot be compared with itself")
            other = self.fields.get(rule.more_than)
            if other is None:
                raise ValueError(
                    f"Field '{name}' references unknown field '{rule.more_than}' in more_than"
                )
            if other.kind != FieldKind.NUMERIC:
                raise ValueError(
                    f"Field '{name}' must reference a numeric field, "
                    f"'{rule.more_than}' is {other.kind}"
                )
        return self

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(self.fields)

    def label_for(self, field_name: str) -> str:
        rule = self.fields.get(field_name)
        if rule is not None and rule.label:
            return rule.label
        return field_name

    def default_row(self) -> dict[str, FieldValue]:
        """Initial field values for a new row (each field's ``default``)."""
        return {name: rule.default for name, rule in self.fields.items()}

    def describe(self) -> dict[str, Any]:
        """Plain-dict view for output (``rowform schema``)."""
        return {
            name: {"kind": str(rule.kind), **rule.model_dump(mode="json", exclude_defaults=True)}
            for name, rule in self.fields.items()
        }
