# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request validation for student provisioning.

Turns a raw request body into a normalized ProvisioningRequest. Pure
function of its input: nothing here touches a collaborator.

Example:
    >>> request = validate_provisioning_request({
    ...     "first_name": "Jane",
    ...     "last_name": "Doe",
    ...     "email": " Jane@X.com ",
    ...     "program_id": "0b6f4f6e-8a43-4c61-9d1a-3f0a1b2c3d4e",
    ...     "session_id": "5a7e2b9c-1d3f-4e8a-b6c2-7d9e0f1a2b3c",
    ... })
    >>> request.email
    'jane@x.com'
"""

import re
from collections.abc import Mapping
from typing import Any

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from src.domains.provisioning.errors import ValidationError
from src.models.provisioning import AdmissionType, ProvisioningRequest

# Canonical RFC 4122 UUID, versions 1-5
UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

REQUIRED_FIELDS_MESSAGE = "first_name, last_name, email are required"
INVALID_EMAIL_MESSAGE = "email must be a valid email address"
INVALID_UUIDS_MESSAGE = "program_id and session_id must be valid UUIDs"
DIRECT_ENTRY_MESSAGE = "previous_school and previous_qualification are required for direct_entry"

EMAIL_ADAPTER = TypeAdapter(EmailStr)

# Optional text fields copied through clean_text
OPTIONAL_FIELDS = (
    "middle_name",
    "phone",
    "gender",
    "date_of_birth",
    "state_of_origin",
    "lga_of_origin",
    "nin",
    "religion",
    "address",
    "level",
    "special_needs",
    "guardian_first_name",
    "guardian_last_name",
    "guardian_phone",
    "guardian_status",
)


def clean_text(value: Any) -> str | None:
    """Trim a string value; non-strings and blank strings become None."""
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def clean_email(value: Any) -> str | None:
    cleaned = clean_text(value)
    return cleaned.lower() if cleaned else None


def is_uuid(value: str | None) -> bool:
    return bool(value) and UUID_PATTERN.match(value) is not None


def is_valid_email(email: str) -> bool:
    """Check an address with pydantic's EmailStr (email-validator syntax rules)."""
    try:
        EMAIL_ADAPTER.validate_python(email)
    except PydanticValidationError:
        return False
    return True


def parse_admission_type(value: Any) -> AdmissionType:
    """Only an explicit "direct_entry" selects direct entry."""
    return "direct_entry" if clean_text(value) == "direct_entry" else "fresh"


def validate_provisioning_request(raw: Mapping[str, Any]) -> ProvisioningRequest:
    """Validate and normalize a raw provisioning request.

    Any department_id in the input is dropped: the department is always
    derived from the selected program.

    Args:
        raw: Decoded JSON request body.

    Returns:
        Normalized request.

    Raises:
        ValidationError: If a required field is missing or malformed.
    """
    first_name = clean_text(raw.get("first_name"))
    last_name = clean_text(raw.get("last_name"))
    email = clean_email(raw.get("email"))

    if not first_name or not last_name or not email:
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)

    if not is_valid_email(email):
        raise ValidationError(INVALID_EMAIL_MESSAGE)

    program_id = clean_text(raw.get("program_id"))
    session_id = clean_text(raw.get("session_id"))

    if not is_uuid(program_id) or not is_uuid(session_id):
        raise ValidationError(INVALID_UUIDS_MESSAGE)

    optional = {name: clean_text(raw.get(name)) for name in OPTIONAL_FIELDS}

    admission_type = parse_admission_type(raw.get("admission_type"))
    previous_school = clean_text(raw.get("previous_school"))
    previous_qualification = clean_text(raw.get("previous_qualification"))

    if admission_type == "direct_entry":
        if not previous_school or not previous_qualification:
            raise ValidationError(DIRECT_ENTRY_MESSAGE)
    else:
        previous_school = None
        previous_qualification = None

    return ProvisioningRequest(
        first_name=first_name,
        last_name=last_name,
        email=email,
        program_id=program_id.lower(),
        session_id=session_id.lower(),
        admission_type=admission_type,
        previous_school=previous_school,
        previous_qualification=previous_qualification,
        **optional,
    )
