"""ServiceResult and ServiceError, the return contract of the service layer.

INVARIANT: submit requests and CLI operations report failure as data.
A rejected, ignored or failed submit is a ``ServiceResult`` with ``ok=False``
and a coded ``ServiceError``; nothing is raised to the caller.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Codes carried by :class:`ServiceError`."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    SUBMIT_IN_PROGRESS = "SUBMIT_IN_PROGRESS"
    CALLBACK_FAILED = "CALLBACK_FAILED"
    INVALID_INPUT = "INVALID_INPUT"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of a service operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (``"submit"``, ``"validate"``, ``"schema"``).
        data: Operation-specific payload.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (row counts, timing).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

