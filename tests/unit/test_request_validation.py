# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for provisioning request validation."""

from typing import Any

import pytest

from src.domains.provisioning import ValidationError, validate_provisioning_request
from src.domains.provisioning.validation import (
    clean_email,
    clean_text,
    is_uuid,
    is_valid_email,
    parse_admission_type,
)


class TestHelpers:
    """Tests for the field cleaning helpers."""

    def test_clean_text(self) -> None:
        """Test trimming and blank handling."""
        assert clean_text("  Jane ") == "Jane"
        assert clean_text("   ") is None
        assert clean_text("") is None
        assert clean_text(None) is None
        assert clean_text(42) is None

    def test_clean_email_lowercases(self) -> None:
        """Test that emails are trimmed and lower-cased."""
        assert clean_email(" Jane@X.COM ") == "jane@x.com"
        assert clean_email(["jane@x.com"]) is None

    def test_is_uuid(self) -> None:
        """Test canonical UUID detection."""
        assert is_uuid("0b6f4f6e-8a43-4c61-9d1a-3f0a1b2c3d4e")
        assert is_uuid("0B6F4F6E-8A43-4C61-9D1A-3F0A1B2C3D4E")
        assert not is_uuid("0b6f4f6e8a434c619d1a3f0a1b2c3d4e")
        assert not is_uuid("0b6f4f6e-8a43-6c61-9d1a-3f0a1b2c3d4e")
        assert not is_uuid("0b6f4f6e-8a43-4c61-7d1a-3f0a1b2c3d4e")
        assert not is_uuid(None)
        assert not is_uuid("")

    def test_is_valid_email(self) -> None:
        """Test email syntax checking."""
        assert is_valid_email("jane@x.com")
        assert not is_valid_email("jane")
        assert not is_valid_email("jane@x")
        assert not is_valid_email("@x.com")
        assert not is_valid_email("jane@x.")
        assert not is_valid_email("ja ne@x.com")
        assert not is_valid_email("a@b@x.com")
        assert not is_valid_email("jane..doe@x.com")
        assert not is_valid_email("jane@-x.com")

    def test_parse_admission_type(self) -> None:
        """Test that only direct_entry selects direct entry."""
        assert parse_admission_type("direct_entry") == "direct_entry"
        assert parse_admission_type("fresh") == "fresh"
        assert parse_admission_type("DIRECT_ENTRY") == "fresh"
        assert parse_admission_type(None) == "fresh"


class TestValidateProvisioningRequest:
    """Tests for validate_provisioning_request."""

    def test_normalizes_valid_request(self, student_payload: dict[str, Any]) -> None:
        """Test that a valid request is normalized."""
        student_payload.update(first_name="  Jane ", middle_name="   ", level="100")

        request = validate_provisioning_request(student_payload)

        assert request.first_name == "Jane"
        assert request.email == "jane@x.com"
        assert request.middle_name is None
        assert request.level == "100"
        assert request.admission_type == "fresh"

    @pytest.mark.parametrize("missing", ["first_name", "last_name", "email"])
    def test_required_fields(self, student_payload: dict[str, Any], missing: str) -> None:
        """Test that each required field is enforced."""
        student_payload[missing] = "  "

        with pytest.raises(ValidationError) as exc_info:
            validate_provisioning_request(student_payload)

        assert exc_info.value.message == "first_name, last_name, email are required"

    @pytest.mark.parametrize("email", ["jane-at-x.com", "jane..doe@x.com", "jane@x_y.com"])
    def test_malformed_email(self, student_payload: dict[str, Any], email: str) -> None:
        """Test that a malformed email is rejected."""
        student_payload["email"] = email

        with pytest.raises(ValidationError) as exc_info:
            validate_provisioning_request(student_payload)

        assert exc_info.value.message == "email must be a valid email address"

    @pytest.mark.parametrize("field", ["program_id", "session_id"])
    def test_invalid_uuids(self, student_payload: dict[str, Any], field: str) -> None:
        """Test that program and session ids must be UUIDs."""
        student_payload[field] = "not-a-uuid"

        with pytest.raises(ValidationError) as exc_info:
            validate_provisioning_request(student_payload)

        assert exc_info.value.message == "program_id and session_id must be valid UUIDs"

    def test_direct_entry_requires_previous_schooling(
        self,
        student_payload: dict[str, Any],
    ) -> None:
        """Test the conditional direct entry requirement."""
        student_payload.update(admission_type="direct_entry", previous_school="Kings College")

        with pytest.raises(ValidationError) as exc_info:
            validate_provisioning_request(student_payload)

        assert exc_info.value.message == (
            "previous_school and previous_qualification are required for direct_entry"
        )

    def test_fresh_admission_drops_previous_schooling(
        self,
        student_payload: dict[str, Any],
    ) -> None:
        """Test that previous schooling is discarded for fresh admissions."""
        student_payload.update(previous_school="Kings College", previous_qualification="OND")

        request = validate_provisioning_request(student_payload)

        assert request.previous_school is None
        assert request.previous_qualification is None

    def test_department_id_is_not_carried(self, student_payload: dict[str, Any]) -> None:
        """Test that a caller supplied department is dropped."""
        student_payload["department_id"] = "11111111-1111-4111-8111-111111111111"

        request = validate_provisioning_request(student_payload)

        assert "department_id" not in request.model_dump()

    def test_request_is_immutable(self, student_payload: dict[str, Any]) -> None:
        """Test that the normalized request is frozen."""
        request = validate_provisioning_request(student_payload)

        with pytest.raises(Exception):
            request.email = "other@x.com"  # type: ignore[misc]

    def test_long_optional_fields_are_kept(self, student_payload: dict[str, Any]) -> None:
        """Test that free-text fields are not truncated or length checked."""
        student_payload.update(
            date_of_birth="1st of January 2001",
            nin="1234567890123456789012345",
            level="Postgraduate Diploma",
        )

        request = validate_provisioning_request(student_payload)

        assert request.date_of_birth == "1st of January 2001"
        assert request.nin == "1234567890123456789012345"
        assert request.level == "Postgraduate Diploma"
