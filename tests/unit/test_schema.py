# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the ORM models and the initial migration."""

import importlib.util
from pathlib import Path

import pytest
from sqlalchemy import Text

from src.domains.provisioning.validation import OPTIONAL_FIELDS
from src.infrastructure.database.models import Profile, Student, StudentRegistration

MIGRATION_PATH = (
    Path(__file__).resolve().parents[2]
    / "src/infrastructure/database/migrations/versions/001_initial_schema.py"
)


def load_initial_migration():
    spec = importlib.util.spec_from_file_location("initial_schema", MIGRATION_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def column_for(field: str):
    for model in (Profile, Student, StudentRegistration):
        if field in model.__table__.columns:
            return model.__table__.columns[field]
    raise AssertionError(f"no column for {field}")


class TestFreeTextColumns:
    """Tests that caller supplied text is stored without a length limit."""

    @pytest.mark.parametrize(
        "field",
        [
            "first_name",
            "last_name",
            "email",
            *OPTIONAL_FIELDS,
            "previous_school",
            "previous_qualification",
        ],
    )
    def test_column_is_unbounded_text(self, field: str) -> None:
        column = column_for(field)

        assert isinstance(column.type, Text)
        assert column.type.length is None


class TestMatricFunction:
    """Tests for the generate_student_matric_no definition."""

    def test_counter_padding_never_truncates(self) -> None:
        """Test that counters past 9999 keep all digits."""
        sql = load_initial_migration().MATRIC_FUNCTION_SQL

        assert "lpad(v_next::text, greatest(4, length(v_next::text)), '0')" in sql
        assert "lpad(v_next::text, 4," not in sql

    def test_counter_is_per_prefix_and_year(self) -> None:
        sql = load_initial_migration().MATRIC_FUNCTION_SQL

        assert "ON CONFLICT (prefix, year)" in sql
        assert "RETURNING last_value INTO v_next" in sql
