"""SubmissionCoordinator: gates and serializes submit attempts.

Lifecycle (see :mod:`rowform.domain.lifecycle`):

- ``idle`` + request, collection invalid: every field is marked touched so
  all errors surface, state stays ``idle``, the callback is not invoked.
- ``idle`` + request, collection valid: state becomes ``submitting`` and the
  callback receives the id-free snapshot.
- ``submitting`` + request: dropped.
- callback settles, success or failure: back to ``idle`` unconditionally.

Row edits, additions and removals stay allowed while a submit is in flight.
A callback that never settles leaves the coordinator ``submitting``; there is
no timeout.

INVARIANT: callback failures are returned as ``ServiceResult`` data, never
re-raised, and leave collection and validation state untouched.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

from rowform.domain.lifecycle import SubmitOutcome, SubmitState, is_valid_transition
from rowform.services.form import FormController
from rowform.services.result import ErrorCode, ServiceError, ServiceResult

logger = logging.getLogger(__name__)

Payload = list[dict[str, Any]]
SubmitCallback = Callable[[Payload], Any]
SettledListener = Callable[[ServiceResult], None]

OP = "submit"


class SubmissionCoordinator:
    """Submit gate for one :class:`FormController`.

    Parameters:
        form: The controller whose collection is submitted.
        callback: External submit handler. Receives the payload; its return
            value is ignored except for awaitables, which
            :meth:`submit_async` awaits.
        on_settled: Optional listener called with the result of every
            submit that reached the callback.
    """

    def __init__(
        self,
        form: FormController,
        callback: SubmitCallback,
        *,
        on_settled: SettledListener | None = None,
    ) -> None:
        self._form = form
        self._callback = callback
        self._on_settled = on_settled

    @property
    def state(self) -> SubmitState:
        return SubmitState.SUBMITTING if self._form.submitting else SubmitState.IDLE

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def submit(self) -> ServiceResult:
        """Run a submit attempt with a synchronous callback.

        If the callback returns an awaitable, use :meth:`submit_async`
        instead; here the awaitable is closed without running and the
        submit is reported as failed.
        """
        gate = self._begin()
        if gate is not None:
            return gate

        payload = self._form.snapshot()
        try:
            outcome = self._callback(payload)
            if inspect.isawaitable(outcome):
                _close_awaitable(outcome)
                raise TypeError("Submit callback returned an awaitable; use submit_async()")
        except Exception as exc:
            result = self._failed(exc)
        else:
            result = self._submitted(payload)
        finally:
            self._finish()
        return self._settled(result)

    async def submit_async(self) -> ServiceResult:
        """Run a submit attempt, awaiting the callback if it returns an awaitable."""
        gate = self._begin()
        if gate is not None:
            return gate

        payload = self._form.snapshot()
        try:
            outcome = self._callback(payload)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as exc:
            result = self._failed(exc)
        else:
            result = self._submitted(payload)
        finally:
            self._finish()
        return self._settled(result)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _begin(self) -> ServiceResult | None:
        """Gate a request. Returns a result when the callback must not run."""
        if self.state == SubmitState.SUBMITTING:
            logger.debug("Submit ignored: already submitting")
            return ServiceResult(
                ok=False,
                op=OP,
                data={"outcome": str(SubmitOutcome.IGNORED)},
                error=ServiceError(
                    code=ErrorCode.SUBMIT_IN_PROGRESS,
                    message="A submit is already in progress",
                ),
            )

        errors = self._form.errors
        if errors:
            error_map = {path: err.model_dump(mode="json") for path, err in errors.items()}
            self._form.touch_all()
            logger.info("Submit rejected: %d invalid fields", len(errors))
            return ServiceResult(
                ok=False,
                op=OP,
                data={"outcome": str(SubmitOutcome.REJECTED)},
                error=ServiceError(
                    code=ErrorCode.VALIDATION_FAILED,
                    message=f"{len(errors)} field(s) failed validation",
                    detail={"errors": error_map},
                ),
            )

        self._transition(SubmitState.SUBMITTING)
        return None

    def _finish(self) -> None:
        self._transition(SubmitState.IDLE)

    def _transition(self, target: SubmitState) -> None:
        current = self.state
        if not is_valid_transition(current, target):
            logger.warning("Unexpected submit transition %s -> %s", current, target)
        self._form.set_submitting(target == SubmitState.SUBMITTING)

    def _submitted(self, payload: Payload) -> ServiceResult:
        logger.info("Submitted %d rows", len(payload))
        return ServiceResult(
            ok=True,
            op=OP,
            data={
                "outcome": str(SubmitOutcome.SUBMITTED),
                "rows": len(payload),
                "payload": payload,
            },
        )

    def _failed(self, exc: Exception) -> ServiceResult:
        logger.warning("Submit callback failed: %s", exc, exc_info=True)
        return ServiceResult(
            ok=False,
            op=OP,
            data={"outcome": str(SubmitOutcome.FAILED)},
            error=ServiceError(
                code=ErrorCode.CALLBACK_FAILED,
                message=str(exc) or type(exc).__name__,
                detail={"exception": type(exc).__name__},
            ),
        )

    def _settled(self, result: ServiceResult) -> ServiceResult:
        if self._on_settled is None:
            return result
        warnings = list(result.warnings)
        try:
            self._on_settled(result)
        except Exception:
            logger.debug("on_settled listener failed", exc_info=True)
            warnings.append("on_settled listener failed")
            return result.model_copy(update={"warnings": warnings})
        return result


def _close_awaitable(awaitable: Any) -> None:
    close = getattr(awaitable, "close", None)
    if close is not None:
        close()
