# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Collaborator interfaces used by student provisioning.

Each collaborator fails independently and none shares a transaction with
another. Adapters raise the infrastructure errors they own
(DatabaseError / UniqueViolationError for stores, IdentityServiceError /
IdentityAlreadyExistsError for the identity service); the provisioning
steps map those onto the provisioning error taxonomy.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Protocol


@dataclass(frozen=True)
class ProgramInfo:
    """Catalog data needed to admit a student into a program.

    Attributes:
        id: Program id.
        code: Program code, used as the matric number prefix.
        department_id: Linked department, None when the catalog is incomplete.
    """

    id: str
    code: str
    department_id: str | None


@dataclass(frozen=True)
class ProfileSummary:
    """Minimal view of an existing profile."""

    id: str
    email: str
    onboarding_status: str | None


@dataclass(frozen=True)
class NewProfile:
    """Profile row to insert, keyed by the identity account id."""

    id: str
    first_name: str
    last_name: str
    email: str
    middle_name: str | None = None
    phone: str | None = None
    gender: str | None = None
    date_of_birth: str | None = None
    state_of_origin: str | None = None
    lga_of_origin: str | None = None
    nin: str | None = None
    religion: str | None = None
    address: str | None = None
    main_role: str = "student"
    onboarding_status: str = "pending"


@dataclass(frozen=True)
class NewStudent:
    """Student record to insert."""

    profile_id: str
    matric_no: str
    program_id: str
    department_id: str
    admission_type: str
    enrollment_date: date
    previous_school: str | None = None
    previous_qualification: str | None = None
    special_needs: str | None = None
    guardian_first_name: str | None = None
    guardian_last_name: str | None = None
    guardian_phone: str | None = None
    guardian_status: str | None = None
    status: str = "active"


@dataclass(frozen=True)
class StudentSummary:
    """Identifiers of an inserted student record."""

    id: str
    matric_no: str


@dataclass(frozen=True)
class NewRegistration:
    """Registration to upsert on (student_id, session_id)."""

    student_id: str
    session_id: str
    level: str | None = None
    status: str = "registered"


class ProgramCatalog(Protocol):
    """Program/department catalog lookup."""

    async def get_program(self, program_id: str) -> ProgramInfo | None:
        """Return the program, or None if it does not exist."""
        ...


class MatricAllocator(Protocol):
    """External allocator of unique matric numbers."""

    async def allocate(self, prefix: str) -> str | None:
        """Allocate a new unique matric number with the given prefix."""
        ...


class IdentityProvider(Protocol):
    """Admin interface of the identity (authentication) service."""

    async def invite_user_by_email(
        self,
        email: str,
        *,
        redirect_to: str,
        metadata: dict[str, Any],
    ) -> str | None:
        """Create a pending account and email an activation link.

        Returns:
            The new account id, or None if the service did not return one.
        """
        ...

    async def delete_user(self, user_id: str) -> None:
        """Delete an account by id."""
        ...

    async def send_password_recovery(self, email: str, *, redirect_to: str) -> None:
        """Email a password recovery link to an existing account."""
        ...


class ProfileStore(Protocol):
    """Relational store for person profiles."""

    async def find_by_email(self, email: str) -> ProfileSummary | None:
        """Return the profile with this email, if any."""
        ...

    async def insert_profile(self, profile: NewProfile) -> str:
        """Insert a profile and return its id."""
        ...

    async def delete_profile(self, profile_id: str) -> None:
        """Delete a profile by id."""
        ...


class StudentStore(Protocol):
    """Relational store for academic records."""

    async def insert_student(self, student: NewStudent) -> StudentSummary:
        """Insert a student record."""
        ...

    async def upsert_registration(self, registration: NewRegistration) -> None:
        """Insert or update the registration for (student_id, session_id)."""
        ...
