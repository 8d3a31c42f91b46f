# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student provisioning models.

ProvisioningRequest is the normalized form produced by the request
validator; raw request bodies are never persisted as-is. Response models
serialize with camelCase keys.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

AdmissionType = Literal["fresh", "direct_entry"]


class ProvisioningRequest(BaseModel):
    """Normalized student provisioning request.

    Optional text fields are None when absent or blank. There is no
    department field: the department is always derived from the program.
    """

    model_config = ConfigDict(frozen=True)

    # Personal
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

    # Academic
    program_id: str
    session_id: str
    level: str | None = None

    # Admission
    admission_type: AdmissionType = "fresh"
    previous_school: str | None = None
    previous_qualification: str | None = None
    special_needs: str | None = None

    # Guardian
    guardian_first_name: str | None = None
    guardian_last_name: str | None = None
    guardian_phone: str | None = None
    guardian_status: str | None = None


class ProvisioningResponse(BaseModel):
    """Successful provisioning response.

    A non-empty warning means the student was created but a secondary step
    (session registration) failed and can be retried separately.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    student_id: str
    matric_no: str
    student_email: str
    invite_queued: bool = True
    redirect_to: str
    warning: str | None = None


class ErrorResponse(BaseModel):
    """Error body returned for failed requests."""

    error: str = Field(description="Human-readable error message")


class ResendInviteResponse(BaseModel):
    """Response for invite resends; identical whether or not the email exists."""

    ok: bool = True
