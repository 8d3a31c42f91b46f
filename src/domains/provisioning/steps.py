# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student provisioning steps.

Each step is an async function of the shared ProvisioningContext. Steps
talk to one collaborator each and translate its infrastructure errors
into the provisioning error taxonomy. Ordering and rollback policy live
in the service, not here.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from src.domains.provisioning.errors import (
    ConfigurationError,
    ConflictError,
    UpstreamError,
)
from src.domains.provisioning.ports import (
    IdentityProvider,
    MatricAllocator,
    NewProfile,
    NewRegistration,
    NewStudent,
    ProfileStore,
    ProgramCatalog,
    ProgramInfo,
    StudentStore,
)
from src.domains.provisioning.validation import is_uuid, validate_provisioning_request
from src.infrastructure.database.connection import DatabaseError, UniqueViolationError
from src.infrastructure.identity.client import (
    IdentityAlreadyExistsError,
    IdentityServiceError,
)
from src.models.provisioning import ProvisioningRequest
from src.utils.datetime import utc_today

logger = logging.getLogger(__name__)

EMAIL_EXISTS_MESSAGE = "A user with this email already exists."
IDENTITY_EXISTS_MESSAGE = "User already exists"
STUDENT_EXISTS_MESSAGE = "A student record with this matric number or profile already exists."
PROGRAM_NOT_FOUND_MESSAGE = "Program not found."
MISSING_DEPARTMENT_MESSAGE = (
    "Selected program has no valid department linked. Fix programs.department_id."
)
MATRIC_FAILED_MESSAGE = "Failed to generate matric number."
MISSING_IDENTITY_ID_MESSAGE = "Invite succeeded but no user id returned."

# Metadata attached to new identity accounts
IDENTITY_METADATA = {"onboarding_status": "pending", "main_role": "student"}


@dataclass
class ProvisioningContext:
    """Mutable state shared by the provisioning steps.

    Fields after redirect_to are filled in as steps complete; compensations
    read the ids recorded here.
    """

    raw: Mapping[str, Any]
    redirect_to: str
    request: ProvisioningRequest | None = None
    program: ProgramInfo | None = None
    matric_no: str | None = None
    identity_id: str | None = None
    profile_id: str | None = None
    student_id: str | None = None

    @property
    def valid_request(self) -> ProvisioningRequest:
        assert self.request is not None, "validate must run first"
        return self.request


class StudentProvisioningSteps:
    """Forward actions and compensations of the provisioning workflow."""

    def __init__(
        self,
        catalog: ProgramCatalog,
        matric_allocator: MatricAllocator,
        identity: IdentityProvider,
        profiles: ProfileStore,
        students: StudentStore,
    ) -> None:
        self._catalog = catalog
        self._matric_allocator = matric_allocator
        self._identity = identity
        self._profiles = profiles
        self._students = students

    async def validate(self, ctx: ProvisioningContext) -> None:
        ctx.request = validate_provisioning_request(ctx.raw)

    async def check_duplicate_profile(self, ctx: ProvisioningContext) -> None:
        """Reject emails that already have a profile.

        Advisory only: a concurrent request can pass this check too, and
        the profile insert's unique constraint decides the winner.
        """
        email = ctx.valid_request.email
        try:
            existing = await self._profiles.find_by_email(email)
        except DatabaseError as e:
            raise UpstreamError(str(e)) from e

        if existing is not None:
            raise ConflictError(EMAIL_EXISTS_MESSAGE)

    async def resolve_department(self, ctx: ProvisioningContext) -> None:
        try:
            program = await self._catalog.get_program(ctx.valid_request.program_id)
        except DatabaseError as e:
            raise UpstreamError(str(e)) from e

        if program is None:
            raise ConfigurationError(PROGRAM_NOT_FOUND_MESSAGE)
        if not is_uuid(program.department_id):
            raise ConfigurationError(MISSING_DEPARTMENT_MESSAGE)

        ctx.program = program

    async def allocate_matric(self, ctx: ProvisioningContext) -> None:
        assert ctx.program is not None
        try:
            matric_no = await self._matric_allocator.allocate(ctx.program.code)
        except DatabaseError as e:
            logger.error("Matric allocation failed for %s: %s", ctx.program.code, e)
            raise UpstreamError(MATRIC_FAILED_MESSAGE) from e

        if not matric_no:
            raise UpstreamError(MATRIC_FAILED_MESSAGE)

        ctx.matric_no = matric_no

    async def provision_identity(self, ctx: ProvisioningContext) -> None:
        """Invite the student by email. First durable side effect."""
        try:
            identity_id = await self._identity.invite_user_by_email(
                ctx.valid_request.email,
                redirect_to=ctx.redirect_to,
                metadata=dict(IDENTITY_METADATA),
            )
        except IdentityAlreadyExistsError as e:
            raise ConflictError(IDENTITY_EXISTS_MESSAGE) from e
        except IdentityServiceError as e:
            raise UpstreamError(str(e)) from e

        if not identity_id:
            raise UpstreamError(MISSING_IDENTITY_ID_MESSAGE)

        ctx.identity_id = identity_id

    async def delete_identity(self, ctx: ProvisioningContext) -> None:
        if ctx.identity_id is None:
            return
        await self._identity.delete_user(ctx.identity_id)
        logger.info("Compensated identity account %s", ctx.identity_id)

    async def write_profile(self, ctx: ProvisioningContext) -> None:
        request = ctx.valid_request
        assert ctx.identity_id is not None

        profile = NewProfile(
            id=ctx.identity_id,
            first_name=request.first_name,
            last_name=request.last_name,
            email=request.email,
            middle_name=request.middle_name,
            phone=request.phone,
            gender=request.gender,
            date_of_birth=request.date_of_birth,
            state_of_origin=request.state_of_origin,
            lga_of_origin=request.lga_of_origin,
            nin=request.nin,
            religion=request.religion,
            address=request.address,
        )

        try:
            ctx.profile_id = await self._profiles.insert_profile(profile)
        except UniqueViolationError as e:
            raise ConflictError(EMAIL_EXISTS_MESSAGE) from e
        except DatabaseError as e:
            raise UpstreamError(str(e)) from e

    async def delete_profile(self, ctx: ProvisioningContext) -> None:
        if ctx.profile_id is None:
            return
        await self._profiles.delete_profile(ctx.profile_id)
        logger.info("Compensated profile %s", ctx.profile_id)

    async def write_student(self, ctx: ProvisioningContext) -> None:
        request = ctx.valid_request
        assert ctx.program is not None and ctx.program.department_id is not None
        assert ctx.profile_id is not None and ctx.matric_no is not None

        student = NewStudent(
            profile_id=ctx.profile_id,
            matric_no=ctx.matric_no,
            program_id=request.program_id,
            department_id=ctx.program.department_id,
            admission_type=request.admission_type,
            enrollment_date=utc_today(),
            previous_school=request.previous_school,
            previous_qualification=request.previous_qualification,
            special_needs=request.special_needs,
            guardian_first_name=request.guardian_first_name,
            guardian_last_name=request.guardian_last_name,
            guardian_phone=request.guardian_phone,
            guardian_status=request.guardian_status,
        )

        try:
            summary = await self._students.insert_student(student)
        except UniqueViolationError as e:
            raise ConflictError(STUDENT_EXISTS_MESSAGE) from e
        except DatabaseError as e:
            raise UpstreamError(str(e)) from e

        ctx.student_id = summary.id
        ctx.matric_no = summary.matric_no

    async def upsert_registration(self, ctx: ProvisioningContext) -> None:
        assert ctx.student_id is not None
        request = ctx.valid_request
        await self._students.upsert_registration(
            NewRegistration(
                student_id=ctx.student_id,
                session_id=request.session_id,
                level=request.level,
            )
        )
