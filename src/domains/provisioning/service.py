# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student provisioning service.

Provisions a student across three subsystems that share no transaction:
the identity service, the profile store and the academic records store.
The workflow runs as a saga:

1. validating: normalize the request (no side effects)
2. duplicate_checking: advisory email check against profiles
3. resolving_department: program code and department from the catalog
4. allocating_matric: unique matric number from the program code
5. provisioning_identity: invite the student (compensation: delete account)
6. writing_profile: insert profile (compensation: delete profile)
7. writing_student: insert student record (pivot)
8. upserting_registration: session registration (failure becomes a warning)

Example:
    >>> service = StudentProvisioningService(catalog, allocator, identity, profiles, students)
    >>> response = await service.provision(body, redirect_to="https://school.edu/api/auth/confirm")
    >>> response.matric_no
    'CSC/2025/0001'
"""

import logging
import uuid
from collections.abc import Mapping
from typing import Any

from src.core.saga import SagaCoordinator, SagaResult, SagaStep
from src.domains.provisioning.errors import ProvisioningError, UnexpectedError
from src.domains.provisioning.ports import (
    IdentityProvider,
    MatricAllocator,
    ProfileStore,
    ProgramCatalog,
    StudentStore,
)
from src.domains.provisioning.steps import ProvisioningContext, StudentProvisioningSteps
from src.models.provisioning import ProvisioningResponse
from src.utils.logging import RECONCILIATION_LOGGER, bind_context, clear_context

logger = logging.getLogger(__name__)
reconciliation_logger = logging.getLogger(RECONCILIATION_LOGGER)

SAGA_NAME = "student_provisioning"
UNEXPECTED_ERROR_MESSAGE = "Unexpected server error"


def describe_registration_failure(exc: Exception) -> str:
    return f"Student created but registration failed: {exc}"


class StudentProvisioningService:
    """Runs the student provisioning saga.

    Attributes:
        saga: The coordinator holding the step definitions.
    """

    def __init__(
        self,
        catalog: ProgramCatalog,
        matric_allocator: MatricAllocator,
        identity: IdentityProvider,
        profiles: ProfileStore,
        students: StudentStore,
    ) -> None:
        steps = StudentProvisioningSteps(
            catalog=catalog,
            matric_allocator=matric_allocator,
            identity=identity,
            profiles=profiles,
            students=students,
        )
        self.saga: SagaCoordinator[ProvisioningContext] = SagaCoordinator(
            SAGA_NAME,
            [
                SagaStep("validating", steps.validate),
                SagaStep("duplicate_checking", steps.check_duplicate_profile),
                SagaStep("resolving_department", steps.resolve_department),
                SagaStep("allocating_matric", steps.allocate_matric),
                SagaStep(
                    "provisioning_identity",
                    steps.provision_identity,
                    compensation=steps.delete_identity,
                ),
                SagaStep(
                    "writing_profile",
                    steps.write_profile,
                    compensation=steps.delete_profile,
                ),
                SagaStep("writing_student", steps.write_student, pivot=True),
                SagaStep(
                    "upserting_registration",
                    steps.upsert_registration,
                    critical=False,
                    describe_failure=describe_registration_failure,
                ),
            ],
        )

    async def provision(
        self,
        raw: Mapping[str, Any],
        redirect_to: str,
    ) -> ProvisioningResponse:
        """Provision a student from a raw request body.

        Args:
            raw: Decoded JSON request body.
            redirect_to: Activation link target for the invite email.

        Returns:
            ProvisioningResponse, with a warning if registration failed.

        Raises:
            ProvisioningError: The taxonomy error of the failed step, raised
                after compensation has run. Faults outside the taxonomy are
                wrapped in UnexpectedError.
        """
        saga_id = str(uuid.uuid4())
        ctx = ProvisioningContext(raw=raw, redirect_to=redirect_to)

        bind_context(saga_id=saga_id)
        try:
            result = await self.saga.execute(ctx, saga_id=saga_id)
            if result.needs_reconciliation:
                self._report_orphans(result, ctx)
        finally:
            clear_context()

        if not result.success:
            error = result.error
            if isinstance(error, ProvisioningError):
                raise error
            logger.error(
                "Unexpected failure in %s at %s",
                SAGA_NAME,
                result.failed_step,
                exc_info=error,
            )
            raise UnexpectedError(UNEXPECTED_ERROR_MESSAGE) from error

        assert ctx.student_id is not None and ctx.matric_no is not None
        request = ctx.valid_request

        logger.info(
            "Student provisioned: student_id=%s matric_no=%s",
            ctx.student_id,
            ctx.matric_no,
        )

        return ProvisioningResponse(
            student_id=ctx.student_id,
            matric_no=ctx.matric_no,
            student_email=request.email,
            redirect_to=redirect_to,
            warning=result.warnings[0] if result.warnings else None,
        )

    def _report_orphans(self, result: SagaResult, ctx: ProvisioningContext) -> None:
        """Log resources left behind by failed compensations."""
        orphans = {
            "provisioning_identity": ("identity_id", ctx.identity_id),
            "writing_profile": ("profile_id", ctx.profile_id),
        }
        for failure in result.compensation_failures:
            kind, resource_id = orphans.get(failure.step_name, ("resource", None))
            reconciliation_logger.error(
                "Orphaned resource: saga_id=%s %s=%s email=%s",
                result.saga_id,
                kind,
                resource_id,
                ctx.request.email if ctx.request else None,
            )
