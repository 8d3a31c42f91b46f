# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Saga package.

Generic executor for multi-step operations that span independently failing
subsystems without a shared transaction. Partial work is undone by running
compensations in reverse order.
"""

from src.core.saga.coordinator import SagaCoordinator, SagaDefinitionError
from src.core.saga.types import (
    DONE_STATE,
    CompensationFailure,
    SagaResult,
    SagaStatus,
    SagaStep,
)

__all__ = [
    "DONE_STATE",
    "CompensationFailure",
    "SagaCoordinator",
    "SagaDefinitionError",
    "SagaResult",
    "SagaStatus",
    "SagaStep",
]
