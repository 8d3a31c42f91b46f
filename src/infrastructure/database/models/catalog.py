# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic catalog models.

Departments, programs and admission sessions are maintained by
administrators. Provisioning only reads them: a student's department is
always taken from the chosen program's department link.
"""

from sqlalchemy import Boolean, ForeignKey, Integer, String, text
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, TimestampMixin


class Department(Base, TimestampMixin):
    """Academic department."""

    __tablename__ = "departments"

    id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class Program(Base, TimestampMixin):
    """Degree or diploma program.

    The code doubles as the matric number prefix. A program without a
    department link is a catalog setup defect and cannot admit students.
    """

    __tablename__ = "programs"

    id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    department_id: Mapped[str | None] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("departments.id", ondelete="SET NULL"),
        nullable=True,
    )
    duration_years: Mapped[int | None] = mapped_column(Integer, nullable=True)


class AcademicSession(Base, TimestampMixin):
    """Admission / academic session (e.g. 2025/2026)."""

    __tablename__ = "academic_sessions"

    id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    is_current: Mapped[bool] = mapped_column(Boolean, server_default="false", nullable=False)
