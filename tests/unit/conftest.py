# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-memory collaborators for provisioning unit tests.

The fakes keep just enough state to check what the workflow left behind.
The profile store enforces email uniqueness the way the database does.
"""

import asyncio
import uuid

import pytest

from src.domains.provisioning import StudentProvisioningService
from src.domains.provisioning.ports import (
    NewProfile,
    NewRegistration,
    NewStudent,
    ProfileSummary,
    ProgramInfo,
    StudentSummary,
)
from src.infrastructure.database.connection import DatabaseError, UniqueViolationError
from src.infrastructure.identity import IdentityServiceError


class FakeCatalog:
    def __init__(self) -> None:
        self.programs: dict[str, ProgramInfo] = {}
        self.error: Exception | None = None

    async def get_program(self, program_id: str) -> ProgramInfo | None:
        if self.error:
            raise self.error
        return self.programs.get(program_id)


class FakeMatricAllocator:
    def __init__(self) -> None:
        self.counters: dict[str, int] = {}
        self.result_override: str | None = None
        self.error: Exception | None = None
        self.calls = 0

    async def allocate(self, prefix: str) -> str | None:
        self.calls += 1
        if self.error:
            raise self.error
        if self.result_override is not None:
            return self.result_override
        self.counters[prefix] = self.counters.get(prefix, 0) + 1
        return f"{prefix}/2025/{self.counters[prefix]:04d}"


class FakeIdentityProvider:
    """Identity service that never detects duplicate emails itself."""

    def __init__(self) -> None:
        self.users: dict[str, str] = {}
        self.invites: list[dict] = []
        self.deleted: list[str] = []
        self.recoveries: list[str] = []
        self.invite_error: Exception | None = None
        self.delete_error: Exception | None = None
        self.recovery_error: Exception | None = None
        self.return_no_id = False

    async def invite_user_by_email(self, email, *, redirect_to, metadata):
        self.invites.append({"email": email, "redirect_to": redirect_to, "metadata": metadata})
        if self.invite_error:
            raise self.invite_error
        if self.return_no_id:
            return None
        user_id = str(uuid.uuid4())
        self.users[user_id] = email
        # Yield so concurrent sagas interleave
        await asyncio.sleep(0)
        return user_id

    async def delete_user(self, user_id: str) -> None:
        if self.delete_error:
            raise self.delete_error
        self.users.pop(user_id, None)
        self.deleted.append(user_id)

    async def send_password_recovery(self, email, *, redirect_to):
        if self.recovery_error:
            raise self.recovery_error
        self.recoveries.append(email)


class FakeProfileStore:
    def __init__(self) -> None:
        self.profiles: dict[str, NewProfile] = {}
        self.statuses: dict[str, str] = {}
        self.lookup_error: Exception | None = None
        self.insert_error: Exception | None = None
        self.delete_error: Exception | None = None
        self.deleted: list[str] = []

    def seed(self, email: str, onboarding_status: str = "pending") -> str:
        profile_id = str(uuid.uuid4())
        self.profiles[profile_id] = NewProfile(
            id=profile_id, first_name="Existing", last_name="User", email=email
        )
        self.statuses[profile_id] = onboarding_status
        return profile_id

    async def find_by_email(self, email: str) -> ProfileSummary | None:
        if self.lookup_error:
            raise self.lookup_error
        for profile in self.profiles.values():
            if profile.email == email:
                return ProfileSummary(
                    id=profile.id,
                    email=profile.email,
                    onboarding_status=self.statuses.get(profile.id, profile.onboarding_status),
                )
        return None

    async def insert_profile(self, profile: NewProfile) -> str:
        if self.insert_error:
            raise self.insert_error
        if any(p.email == profile.email for p in self.profiles.values()):
            raise UniqueViolationError("duplicate key value violates uq_profiles_email")
        self.profiles[profile.id] = profile
        return profile.id

    async def delete_profile(self, profile_id: str) -> None:
        if self.delete_error:
            raise self.delete_error
        self.profiles.pop(profile_id, None)
        self.deleted.append(profile_id)


class FakeStudentStore:
    def __init__(self) -> None:
        self.students: dict[str, NewStudent] = {}
        self.registrations: dict[tuple[str, str], NewRegistration] = {}
        self.insert_error: Exception | None = None
        self.registration_error: Exception | None = None

    async def insert_student(self, student: NewStudent) -> StudentSummary:
        if self.insert_error:
            raise self.insert_error
        if any(s.matric_no == student.matric_no for s in self.students.values()):
            raise UniqueViolationError("duplicate key value violates uq_students_matric_no")
        student_id = str(uuid.uuid4())
        self.students[student_id] = student
        return StudentSummary(id=student_id, matric_no=student.matric_no)

    async def upsert_registration(self, registration: NewRegistration) -> None:
        if self.registration_error:
            raise self.registration_error
        key = (registration.student_id, registration.session_id)
        self.registrations[key] = registration


@pytest.fixture
def catalog(program_id: str, department_id: str) -> FakeCatalog:
    catalog = FakeCatalog()
    catalog.programs[program_id] = ProgramInfo(
        id=program_id, code="CSC", department_id=department_id
    )
    return catalog


@pytest.fixture
def matric_allocator() -> FakeMatricAllocator:
    return FakeMatricAllocator()


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def profiles() -> FakeProfileStore:
    return FakeProfileStore()


@pytest.fixture
def students() -> FakeStudentStore:
    return FakeStudentStore()


@pytest.fixture
def service(
    catalog: FakeCatalog,
    matric_allocator: FakeMatricAllocator,
    identity: FakeIdentityProvider,
    profiles: FakeProfileStore,
    students: FakeStudentStore,
) -> StudentProvisioningService:
    return StudentProvisioningService(
        catalog=catalog,
        matric_allocator=matric_allocator,
        identity=identity,
        profiles=profiles,
        students=students,
    )


@pytest.fixture
def db_error() -> DatabaseError:
    return DatabaseError("Database operation failed", RuntimeError("connection reset"))


@pytest.fixture
def identity_error() -> IdentityServiceError:
    return IdentityServiceError("SMTP rate limit exceeded", 429, "over_email_send_rate_limit")
