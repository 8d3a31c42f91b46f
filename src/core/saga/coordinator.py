# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Saga coordinator.

Runs saga steps strictly in order on the caller's task and keeps a stack of
completed, compensable steps. When a critical step fails, the stack is
unwound in reverse order and the original error is reported on the result.

There is no durable saga log. If the process dies between a side effect and
its compensation, the resource is left behind and has to be reconciled by
hand.

Example:
    >>> saga = SagaCoordinator(
    ...     "order",
    ...     [
    ...         SagaStep("reserve", reserve, compensation=release),
    ...         SagaStep("charge", charge, pivot=True),
    ...         SagaStep("notify", notify, critical=False),
    ...     ],
    ... )
    >>> result = await saga.execute(context)
    >>> result.success
    True
"""

import logging
import uuid
from collections.abc import Sequence
from typing import Generic

from src.core.saga.types import (
    DONE_STATE,
    CompensationFailure,
    ContextT,
    SagaResult,
    SagaStatus,
    SagaStep,
)
from src.utils.logging import RECONCILIATION_LOGGER

logger = logging.getLogger(__name__)
reconciliation_logger = logging.getLogger(RECONCILIATION_LOGGER)


class SagaDefinitionError(ValueError):
    """Raised when a saga is defined with an invalid step list."""

    pass


class SagaCoordinator(Generic[ContextT]):
    """Executes an ordered list of saga steps with compensating rollback.

    Attributes:
        name: Saga name used in logs and results.
        steps: Ordered step definitions.
    """

    def __init__(self, name: str, steps: Sequence[SagaStep[ContextT]]) -> None:
        """Initialize the coordinator.

        Args:
            name: Saga name.
            steps: Ordered step definitions.

        Raises:
            SagaDefinitionError: If the step list is empty or names repeat.
        """
        if not steps:
            raise SagaDefinitionError(f"Saga '{name}' has no steps")

        names = [step.name for step in steps]
        if len(set(names)) != len(names):
            raise SagaDefinitionError(f"Saga '{name}' has duplicate step names: {names}")

        self.name = name
        self.steps = tuple(steps)

    async def execute(self, context: ContextT, saga_id: str | None = None) -> SagaResult:
        """Run all steps against the given context.

        Errors raised by step actions never escape this method; they are
        reported on the returned result after compensation has run.

        Args:
            context: Mutable context shared by all steps.
            saga_id: Optional execution id. Generated if omitted.

        Returns:
            SagaResult describing the outcome.
        """
        result = SagaResult(
            saga_id=saga_id or str(uuid.uuid4()),
            saga_name=self.name,
            status=SagaStatus.EXECUTING,
        )
        stack: list[SagaStep[ContextT]] = []

        for step in self.steps:
            result.state = step.name
            logger.debug("Saga %s [%s] step started: %s", self.name, result.saga_id, step.name)

            try:
                await step.action(context)
            except Exception as exc:
                if not step.critical:
                    self._recover(step, exc, result)
                    continue

                result.failed_step = step.name
                result.error = exc
                logger.warning(
                    "Saga %s [%s] step failed: %s (%s: %s)",
                    self.name,
                    result.saga_id,
                    step.name,
                    type(exc).__name__,
                    exc,
                )

                if not stack:
                    result.status = SagaStatus.FAILED
                    return result

                result.status = SagaStatus.COMPENSATING
                await self._compensate(context, stack, result)
                result.status = (
                    SagaStatus.FAILED if result.compensation_failures else SagaStatus.ROLLED_BACK
                )
                return result

            result.completed_steps.append(step.name)

            if step.pivot:
                # Everything before the pivot is now committed
                stack.clear()
                result.pivot_reached = True
            elif step.is_compensable:
                stack.append(step)

        result.state = DONE_STATE
        result.status = SagaStatus.COMPLETED
        logger.info(
            "Saga %s [%s] completed (%d warnings)",
            self.name,
            result.saga_id,
            len(result.warnings),
        )
        return result

    def _recover(self, step: SagaStep[ContextT], exc: Exception, result: SagaResult) -> None:
        """Turn a non-critical step failure into a warning."""
        if step.describe_failure is not None:
            warning = step.describe_failure(exc)
        else:
            warning = f"{step.name} failed: {exc}"

        result.recovered_steps.append(step.name)
        result.warnings.append(warning)
        logger.warning("Saga %s [%s] recovered: %s", self.name, result.saga_id, warning)

    async def _compensate(
        self,
        context: ContextT,
        stack: list[SagaStep[ContextT]],
        result: SagaResult,
    ) -> None:
        """Pop and run compensations in reverse completion order.

        A failing compensation is recorded and logged for manual
        reconciliation; the remaining compensations still run.
        """
        while stack:
            step = stack.pop()
            assert step.compensation is not None

            try:
                await step.compensation(context)
            except Exception as exc:
                result.compensation_failures.append(CompensationFailure(step.name, exc))
                reconciliation_logger.error(
                    "Compensation failed, manual reconciliation required: "
                    "saga=%s saga_id=%s step=%s error=%s: %s",
                    self.name,
                    result.saga_id,
                    step.name,
                    type(exc).__name__,
                    exc,
                )
                continue

            result.compensated_steps.append(step.name)
            logger.info("Saga %s [%s] compensated: %s", self.name, result.saga_id, step.name)
