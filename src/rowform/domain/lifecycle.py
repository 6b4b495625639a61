"""Submission lifecycle: states and allowed transitions.

Two states. A submit request moves ``idle`` to ``submitting`` only when the
collection is valid; the callback settling (success or failure) always moves
``submitting`` back to ``idle``. There is no ``submitting -> submitting``
transition: a second request while in flight is dropped.
"""

from __future__ import annotations

from enum import StrEnum


class SubmitState(StrEnum):
    """Coordinator state."""

    IDLE = "idle"
    SUBMITTING = "submitting"


class SubmitOutcome(StrEnum):
    """How a submit request was resolved."""

    SUBMITTED = "submitted"
    REJECTED = "rejected"
    IGNORED = "ignored"
    FAILED = "failed"


SUBMIT_TRANSITIONS: dict[str, list[str]] = {
    "idle": ["submitting"],
    "submitting": ["idle"],
}


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]] = SUBMIT_TRANSITIONS,
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed
