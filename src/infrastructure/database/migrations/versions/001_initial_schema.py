# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial schema: catalog, profiles, students, registrations.

Also creates the matric number allocator: a per-prefix, per-year counter
table and the generate_student_matric_no(prefix) function that increments
it atomically and formats PREFIX/YEAR/NNNN.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2025-09-01
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Counter is zero-padded to four digits; longer values keep every digit
MATRIC_FUNCTION_SQL = """
CREATE OR REPLACE FUNCTION generate_student_matric_no(p_prefix text)
RETURNS text
LANGUAGE plpgsql
AS $$
DECLARE
    v_prefix text := upper(trim(p_prefix));
    v_year integer := EXTRACT(YEAR FROM now())::integer;
    v_next integer;
BEGIN
    IF v_prefix IS NULL OR v_prefix = '' THEN
        RAISE EXCEPTION 'matric prefix must not be empty';
    END IF;

    INSERT INTO matric_sequences (prefix, year, last_value)
    VALUES (v_prefix, v_year, 1)
    ON CONFLICT (prefix, year)
    DO UPDATE SET last_value = matric_sequences.last_value + 1
    RETURNING last_value INTO v_next;

    RETURN v_prefix || '/' || v_year || '/' || lpad(v_next::text, greatest(4, length(v_next::text)), '0');
END;
$$
"""


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def _uuid_pk() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=False),
        server_default=sa.text("gen_random_uuid()"),
        primary_key=True,
    )


def upgrade() -> None:
    """Create tables, constraints and the matric allocator."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    # =========================================================================
    # CATALOG
    # =========================================================================

    op.create_table(
        "departments",
        _uuid_pk(),
        sa.Column("code", sa.String(20), unique=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "programs",
        _uuid_pk(),
        sa.Column("code", sa.String(20), unique=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "department_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey("departments.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("duration_years", sa.Integer, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "academic_sessions",
        _uuid_pk(),
        sa.Column("name", sa.String(50), unique=True, nullable=False),
        sa.Column("is_current", sa.Boolean, nullable=False, server_default="false"),
        *_timestamps(),
    )

    # =========================================================================
    # PEOPLE
    # =========================================================================

    # id is the identity account id, never generated here
    op.create_table(
        "profiles",
        sa.Column("id", postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column("first_name", sa.Text, nullable=False),
        sa.Column("middle_name", sa.Text, nullable=True),
        sa.Column("last_name", sa.Text, nullable=False),
        sa.Column("email", sa.Text, nullable=False),
        sa.Column("phone", sa.Text, nullable=True),
        sa.Column("gender", sa.Text, nullable=True),
        sa.Column("date_of_birth", sa.Text, nullable=True),
        sa.Column("state_of_origin", sa.Text, nullable=True),
        sa.Column("lga_of_origin", sa.Text, nullable=True),
        sa.Column("nin", sa.Text, nullable=True),
        sa.Column("religion", sa.Text, nullable=True),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("main_role", sa.String(30), nullable=False),
        sa.Column("onboarding_status", sa.String(20), nullable=False, server_default="pending"),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_profiles_email"),
    )

    op.create_table(
        "students",
        _uuid_pk(),
        sa.Column(
            "profile_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("matric_no", sa.String(50), nullable=False),
        sa.Column(
            "program_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey("programs.id"),
            nullable=False,
        ),
        sa.Column(
            "department_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey("departments.id"),
            nullable=False,
        ),
        sa.Column("admission_type", sa.String(20), nullable=False, server_default="fresh"),
        sa.Column("previous_school", sa.Text, nullable=True),
        sa.Column("previous_qualification", sa.Text, nullable=True),
        sa.Column("special_needs", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("enrollment_date", sa.Date, nullable=True),
        sa.Column("guardian_first_name", sa.Text, nullable=True),
        sa.Column("guardian_last_name", sa.Text, nullable=True),
        sa.Column("guardian_phone", sa.Text, nullable=True),
        sa.Column("guardian_status", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("profile_id", name="uq_students_profile_id"),
        sa.UniqueConstraint("matric_no", name="uq_students_matric_no"),
        sa.CheckConstraint(
            "admission_type IN ('fresh', 'direct_entry')",
            name="ck_students_admission_type",
        ),
    )

    op.create_table(
        "student_registrations",
        _uuid_pk(),
        sa.Column(
            "student_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey("students.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "session_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey("academic_sessions.id"),
            nullable=False,
        ),
        sa.Column("level", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="registered"),
        *_timestamps(),
        sa.UniqueConstraint(
            "student_id", "session_id", name="uq_student_registrations_student_session"
        ),
    )

    # =========================================================================
    # MATRIC NUMBER ALLOCATOR
    # =========================================================================

    op.create_table(
        "matric_sequences",
        sa.Column("prefix", sa.String(20), primary_key=True),
        sa.Column("year", sa.Integer, primary_key=True),
        sa.Column("last_value", sa.Integer, nullable=False),
    )

    op.execute(MATRIC_FUNCTION_SQL)


def downgrade() -> None:
    """Drop everything created by upgrade()."""
    op.execute("DROP FUNCTION IF EXISTS generate_student_matric_no(text)")
    op.drop_table("matric_sequences")
    op.drop_table("student_registrations")
    op.drop_table("students")
    op.drop_table("profiles")
    op.drop_table("academic_sessions")
    op.drop_table("programs")
    op.drop_table("departments")
