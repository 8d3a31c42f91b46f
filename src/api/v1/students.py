# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student admission API endpoints.

This module provides the student provisioning endpoint used by the
admissions office:
- POST /students - Create the identity account, profile and student record

Authentication:
    Requires a Bearer token for an admin or a non-academic staff member of
    the admissions unit.

Example:
    POST /api/v1/students
    Headers:
        Authorization: Bearer <token>
    Body:
        {
            "first_name": "Jane",
            "last_name": "Doe",
            "email": "jane@x.com",
            "program_id": "0b6f4f6e-8a43-4c61-9d1a-3f0a1b2c3d4e",
            "session_id": "5a7e2b9c-1d3f-4e8a-b6c2-7d9e0f1a2b3c",
            "admission_type": "fresh"
        }
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from src.api.dependencies import (
    get_provisioning_service,
    get_redirect_to,
    require_admissions_staff,
)
from src.domains.auth import TokenPayload
from src.domains.provisioning import ProvisioningError, StudentProvisioningService
from src.models.provisioning import ErrorResponse, ProvisioningResponse

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_BODY_MESSAGE = "Invalid JSON body"


async def read_json_object(request: Request) -> dict[str, Any]:
    """Decode the request body, which must be a JSON object.

    Raises:
        HTTPException: 400 if the body is not a JSON object.
    """
    try:
        body = await request.json()
    except ValueError:
        body = None

    if not isinstance(body, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=INVALID_BODY_MESSAGE,
        )
    return body


@router.post(
    "",
    response_model=ProvisioningResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Provision a student",
    description="Create a student's identity account, profile and academic record.",
)
async def create_student(
    request: Request,
    caller: TokenPayload = Depends(require_admissions_staff),
    service: StudentProvisioningService = Depends(get_provisioning_service),
    redirect_to: str = Depends(get_redirect_to),
) -> ProvisioningResponse:
    """Provision a student.

    Returns:
        ProvisioningResponse with the new student id and matric number.

    Raises:
        HTTPException: With the status of the provisioning error.
    """
    body = await read_json_object(request)

    try:
        result = await service.provision(body, redirect_to=redirect_to)
    except ProvisioningError as e:
        logger.warning(
            "Student provisioning failed (%s) by %s: %s",
            type(e).__name__,
            caller.sub,
            e.message,
        )
        raise HTTPException(status_code=e.status_code, detail=e.message)

    logger.info("Student %s provisioned by %s", result.matric_no, caller.sub)
    return result
