# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQL adapters for the academic catalog and student records.

Each call opens its own session and commits before returning, so every
write is independently durable. Nothing here spans a transaction across
calls; undoing earlier writes is the caller's job.

Example:
    >>> profiles = SqlProfileStore()
    >>> existing = await profiles.find_by_email("jane@x.com")
"""

import logging
from contextlib import AbstractAsyncContextManager
from typing import Callable

from sqlalchemy import delete, func, select, text
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.provisioning.ports import (
    NewProfile,
    NewRegistration,
    NewStudent,
    ProfileSummary,
    ProgramInfo,
    StudentSummary,
)
from src.infrastructure.database.connection import get_session
from src.infrastructure.database.models import Profile, Program, Student, StudentRegistration

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class SqlProgramCatalog:
    """Program lookup against the programs table."""

    def __init__(self, session_factory: SessionFactory = get_session) -> None:
        self._session_factory = session_factory

    async def get_program(self, program_id: str) -> ProgramInfo | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Program.id, Program.code, Program.department_id).where(
                    Program.id == program_id
                )
            )
            row = result.one_or_none()

        if row is None:
            return None
        return ProgramInfo(id=str(row.id), code=row.code, department_id=row.department_id)


class SqlMatricAllocator:
    """Matric number allocation through the generate_student_matric_no function.

    The database function increments a per-prefix, per-year counter under
    a row lock, so uniqueness is guaranteed by the database and no lock is
    held here.
    """

    def __init__(self, session_factory: SessionFactory = get_session) -> None:
        self._session_factory = session_factory

    async def allocate(self, prefix: str) -> str | None:
        async with self._session_factory() as session:
            result = await session.execute(
                text("SELECT generate_student_matric_no(:prefix)"),
                {"prefix": prefix},
            )
            value = result.scalar_one_or_none()

        return str(value) if value else None


class SqlProfileStore:
    """Profile persistence."""

    def __init__(self, session_factory: SessionFactory = get_session) -> None:
        self._session_factory = session_factory

    async def find_by_email(self, email: str) -> ProfileSummary | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Profile.id, Profile.email, Profile.onboarding_status).where(
                    Profile.email == email
                )
            )
            row = result.one_or_none()

        if row is None:
            return None
        return ProfileSummary(
            id=str(row.id),
            email=row.email,
            onboarding_status=row.onboarding_status,
        )

    async def insert_profile(self, profile: NewProfile) -> str:
        """Insert a profile.

        Raises:
            UniqueViolationError: If the email (or id) is already taken.
            DatabaseError: On any other database failure.
        """
        async with self._session_factory() as session:
            session.add(
                Profile(
                    id=profile.id,
                    first_name=profile.first_name,
                    middle_name=profile.middle_name,
                    last_name=profile.last_name,
                    email=profile.email,
                    phone=profile.phone,
                    gender=profile.gender,
                    date_of_birth=profile.date_of_birth,
                    state_of_origin=profile.state_of_origin,
                    lga_of_origin=profile.lga_of_origin,
                    nin=profile.nin,
                    religion=profile.religion,
                    address=profile.address,
                    main_role=profile.main_role,
                    onboarding_status=profile.onboarding_status,
                )
            )
            await session.flush()

        return profile.id

    async def delete_profile(self, profile_id: str) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(Profile).where(Profile.id == profile_id))
        logger.info("Profile deleted: %s", profile_id)


class SqlStudentStore:
    """Student record and session registration persistence."""

    def __init__(self, session_factory: SessionFactory = get_session) -> None:
        self._session_factory = session_factory

    async def insert_student(self, student: NewStudent) -> StudentSummary:
        """Insert a student record.

        Raises:
            UniqueViolationError: If the matric number or profile is taken.
            DatabaseError: On any other database failure.
        """
        async with self._session_factory() as session:
            row = Student(
                profile_id=student.profile_id,
                matric_no=student.matric_no,
                program_id=student.program_id,
                department_id=student.department_id,
                admission_type=student.admission_type,
                previous_school=student.previous_school,
                previous_qualification=student.previous_qualification,
                special_needs=student.special_needs,
                status=student.status,
                enrollment_date=student.enrollment_date,
                guardian_first_name=student.guardian_first_name,
                guardian_last_name=student.guardian_last_name,
                guardian_phone=student.guardian_phone,
                guardian_status=student.guardian_status,
            )
            session.add(row)
            await session.flush()
            summary = StudentSummary(id=str(row.id), matric_no=row.matric_no)

        return summary

    async def upsert_registration(self, registration: NewRegistration) -> None:
        stmt = pg_insert(StudentRegistration).values(
            student_id=registration.student_id,
            session_id=registration.session_id,
            level=registration.level,
            status=registration.status,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[StudentRegistration.student_id, StudentRegistration.session_id],
            set_={
                "level": stmt.excluded.level,
                "status": stmt.excluded.status,
                "updated_at": func.now(),
            },
        )

        async with self._session_factory() as session:
            await session.execute(stmt)
