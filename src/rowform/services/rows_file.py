"""RowsFileService: drive a form from a JSON rows file.

Backs the ``validate``, ``submit`` and ``schema`` commands. A rows file is a
JSON array of objects mapping field names to values. Keys outside the schema
are dropped with a warning (``id`` silently, since row identity is assigned
by the form); schema fields missing from an object start empty. A file with
fewer rows than ``[form] min_rows`` is rejected as invalid input.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from rowform.domain.types import FieldValue
from rowform.services.form import FormController
from rowform.services.result import ErrorCode, ServiceError, ServiceResult
from rowform.services.submission import Payload, SubmissionCoordinator

if TYPE_CHECKING:
    from rowform.config.settings import RowformSettings

logger = logging.getLogger(__name__)


class RowsFileError(ValueError):
    """The rows file is unreadable or not shaped as an array of row objects."""


class RowsFileService:
    """Validate and submit rows files against the configured schema."""

    def __init__(self, settings: RowformSettings) -> None:
        self._settings = settings
        self._schema = settings.form_schema()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def load_rows(self, path: Path) -> tuple[list[dict[str, FieldValue]], list[str]]:
        """Parse *path* into per-row field values plus load warnings."""
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise RowsFileError(f"Cannot read {path}: {exc}") from exc
        if not isinstance(raw, list):
            raise RowsFileError(f"{path} must contain a JSON array of row objects")

        warnings: list[str] = []
        rows: list[dict[str, FieldValue]] = []
        for position, item in enumerate(raw):
            if not isinstance(item, dict):
                raise RowsFileError(f"Row {position} is not an object")
            unknown = sorted(set(item) - set(self._schema.fields) - {"id"})
            if unknown:
                warnings.append(f"Row {position}: ignored unknown keys {unknown}")
            values: dict[str, FieldValue] = {}
            for name in self._schema.fields:
                value = item.get(name)
                if isinstance(value, bool) or not isinstance(value, (str, int, float, type(None))):
                    raise RowsFileError(
                        f"Row {position}: '{name}' must be a string, number or null"
                    )
                values[name] = value
            rows.append(values)
        min_rows = self._settings.form.min_rows
        if len(rows) < min_rows:
            raise RowsFileError(f"{path} has {len(rows)} row(s), at least {min_rows} required")
        logger.debug("Loaded %d rows from %s", len(rows), path)
        return rows, warnings

    def _form(self, rows: list[dict[str, FieldValue]]) -> FormController:
        return FormController(
            self._schema,
            initial_rows=rows,
            min_rows=self._settings.form.min_rows,
            root=self._settings.form.root,
        )

    @staticmethod
    def _invalid_input(op: str, exc: RowsFileError) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=ErrorCode.INVALID_INPUT, message=str(exc)),
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def validate(self, path: Path) -> ServiceResult:
        """Validate every row, reporting every error as a rejected submit would."""
        op = "validate"
        try:
            rows, warnings = self.load_rows(path)
        except RowsFileError as exc:
            return self._invalid_input(op, exc)

        form = self._form(rows)
        form.touch_all()
        if not rows:
            warnings.append("Rows file is empty")
        errors = form.visible_errors
        if errors:
            return ServiceResult(
                ok=False,
                op=op,
                data={"source": str(path), "rows": len(rows), "valid": False},
                warnings=warnings,
                error=ServiceError(
                    code=ErrorCode.VALIDATION_FAILED,
                    message=f"{len(errors)} field(s) failed validation",
                    detail={
                        "errors": {p: err.model_dump(mode="json") for p, err in errors.items()}
                    },
                ),
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={"source": str(path), "rows": len(rows), "valid": True},
            warnings=warnings,
        )

    def submit(self, path: Path, output: Path | None = None) -> ServiceResult:
        """Run the rows through the submission gate.

        When *output* is given the callback writes the payload there as JSON;
        otherwise the payload only travels back in the result.
        """
        try:
            rows, warnings = self.load_rows(path)
        except RowsFileError as exc:
            return self._invalid_input("submit", exc)

        def write_payload(payload: Payload) -> None:
            if output is not None:
                text = json.dumps(payload, ensure_ascii=False, indent=2)
                output.write_text(text + "\n", encoding="utf-8")

        result = SubmissionCoordinator(self._form(rows), write_payload).submit()
        data: dict[str, Any] = {"source": str(path), **result.data}
        if result.ok and output is not None:
            data["output"] = str(output)
        return result.model_copy(update={"data": data, "warnings": warnings + result.warnings})

    def schema(self) -> ServiceResult:
        """Describe the resolved schema."""
        config_path = self._settings.config_path
        return ServiceResult(
            ok=True,
            op="schema",
            data={
                "fields": self._schema.describe(),
                "min_rows": self._settings.form.min_rows,
                "config_path": str(config_path) if config_path else None,
            },
        )
