# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Person and student record models.

A Profile shares its id with the identity account it belongs to. The unique
constraints on profiles.email and students.matric_no are the authoritative
duplicate guards for concurrent provisioning.
"""

from datetime import date

from sqlalchemy import Date, ForeignKey, String, Text, UniqueConstraint, text
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, TimestampMixin


class Profile(Base, TimestampMixin):
    """Person profile, one-to-one with an identity account."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(postgresql.UUID(as_uuid=False), primary_key=True)
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    middle_name: Mapped[str | None] = mapped_column(Text)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    phone: Mapped[str | None] = mapped_column(Text)
    gender: Mapped[str | None] = mapped_column(Text)
    date_of_birth: Mapped[str | None] = mapped_column(Text)
    state_of_origin: Mapped[str | None] = mapped_column(Text)
    lga_of_origin: Mapped[str | None] = mapped_column(Text)
    nin: Mapped[str | None] = mapped_column(Text)
    religion: Mapped[str | None] = mapped_column(Text)
    address: Mapped[str | None] = mapped_column(Text)
    main_role: Mapped[str] = mapped_column(String(30), nullable=False)
    # 'pending' until the invite is accepted, then 'active'
    onboarding_status: Mapped[str] = mapped_column(
        String(20), server_default="pending", nullable=False
    )


class Student(Base, TimestampMixin):
    """Academic record of an admitted student."""

    __tablename__ = "students"

    id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    profile_id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    matric_no: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    program_id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("programs.id"),
        nullable=False,
    )
    department_id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("departments.id"),
        nullable=False,
    )
    # 'fresh' or 'direct_entry'
    admission_type: Mapped[str] = mapped_column(
        String(20), server_default="fresh", nullable=False
    )
    previous_school: Mapped[str | None] = mapped_column(Text)
    previous_qualification: Mapped[str | None] = mapped_column(Text)
    special_needs: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), server_default="active", nullable=False)
    enrollment_date: Mapped[date | None] = mapped_column(Date)
    guardian_first_name: Mapped[str | None] = mapped_column(Text)
    guardian_last_name: Mapped[str | None] = mapped_column(Text)
    guardian_phone: Mapped[str | None] = mapped_column(Text)
    guardian_status: Mapped[str | None] = mapped_column(Text)


class StudentRegistration(Base, TimestampMixin):
    """Registration of a student for an academic session."""

    __tablename__ = "student_registrations"
    __table_args__ = (
        UniqueConstraint("student_id", "session_id", name="uq_student_registrations_student_session"),
    )

    id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    student_id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
    )
    session_id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("academic_sessions.id"),
        nullable=False,
    )
    level: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), server_default="registered", nullable=False)
