# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""ORM models for the Registrar database."""

from src.infrastructure.database.models.base import Base, TimestampMixin
from src.infrastructure.database.models.catalog import AcademicSession, Department, Program
from src.infrastructure.database.models.student import Profile, Student, StudentRegistration

__all__ = [
    "Base",
    "TimestampMixin",
    # Catalog
    "AcademicSession",
    "Department",
    "Program",
    # People
    "Profile",
    "Student",
    "StudentRegistration",
]
