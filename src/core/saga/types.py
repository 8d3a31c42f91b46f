# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Saga type definitions.

A saga is an ordered list of steps. Each step has a forward action and an
optional compensation that semantically undoes it. Two flags shape the
rollback policy:

- pivot: once the step succeeds, everything before it is committed and no
  longer compensable.
- critical: a non-critical step's failure is recovered into a warning and
  never triggers compensation.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

ContextT = TypeVar("ContextT")

# Final state name reported once every step has run
DONE_STATE = "done"


class SagaStatus(str, Enum):
    """Overall saga status."""

    PENDING = "pending"
    EXECUTING = "executing"
    COMPLETED = "completed"
    COMPENSATING = "compensating"
    ROLLED_BACK = "rolled_back"
    FAILED = "failed"


@dataclass(frozen=True)
class SagaStep(Generic[ContextT]):
    """A single saga step.

    Attributes:
        name: Step name, also reported as the saga state while it runs.
        action: Forward action. Receives the shared saga context.
        compensation: Undo action, run in reverse order on later failure.
        pivot: Commit point. Clears pending compensations on success.
        critical: If False, failure becomes a warning instead of a rollback.
        describe_failure: Builds the warning text for a non-critical failure.
    """

    name: str
    action: Callable[[ContextT], Awaitable[Any]]
    compensation: Callable[[ContextT], Awaitable[Any]] | None = None
    pivot: bool = False
    critical: bool = True
    describe_failure: Callable[[Exception], str] | None = None

    @property
    def is_compensable(self) -> bool:
        """Whether this step registers a compensation when it completes."""
        return self.compensation is not None and not self.pivot


@dataclass
class CompensationFailure:
    """A compensation that raised while rolling back.

    Attributes:
        step_name: Step whose compensation failed.
        error: The exception raised by the compensation.
    """

    step_name: str
    error: Exception


@dataclass
class SagaResult:
    """Result of a saga execution.

    Attributes:
        saga_id: Unique id of this execution, used to correlate log entries.
        saga_name: Name of the saga definition.
        status: Final status.
        state: Last state reached. DONE_STATE on success, otherwise the
            name of the step that failed.
        completed_steps: Steps whose forward action succeeded, in order.
        compensated_steps: Steps successfully compensated, in the order run.
        recovered_steps: Non-critical steps whose failure became a warning.
        failed_step: Name of the critical step that failed, if any.
        error: The original error of the failed step.
        warnings: Warnings from recovered non-critical steps.
        compensation_failures: Compensations that raised.
        pivot_reached: Whether a pivot step completed.
    """

    saga_id: str
    saga_name: str
    status: SagaStatus = SagaStatus.PENDING
    state: str | None = None
    completed_steps: list[str] = field(default_factory=list)
    compensated_steps: list[str] = field(default_factory=list)
    recovered_steps: list[str] = field(default_factory=list)
    failed_step: str | None = None
    error: Exception | None = None
    warnings: list[str] = field(default_factory=list)
    compensation_failures: list[CompensationFailure] = field(default_factory=list)
    pivot_reached: bool = False

    @property
    def success(self) -> bool:
        """True if every critical step completed."""
        return self.status == SagaStatus.COMPLETED

    @property
    def needs_reconciliation(self) -> bool:
        """True if a compensation failed and resources may be orphaned."""
        return bool(self.compensation_failures)
