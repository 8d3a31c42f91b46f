# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication API endpoints.

This module provides account activation helpers:
- POST /auth/resend-invite - Resend the activation email to a pending student

The endpoint answers the same way whether or not the email is known, so it
cannot be used to discover registered addresses.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from src.api.dependencies import get_invite_service, get_redirect_to
from src.api.v1.students import read_json_object
from src.domains.provisioning import InviteService, ValidationError
from src.models.provisioning import ErrorResponse, ResendInviteResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/resend-invite",
    response_model=ResendInviteResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Resend activation invite",
)
async def resend_invite(
    request: Request,
    invites: InviteService = Depends(get_invite_service),
    redirect_to: str = Depends(get_redirect_to),
) -> ResendInviteResponse:
    """Resend the activation invite for a pending account."""
    body = await read_json_object(request)

    try:
        await invites.resend_invite(body.get("email"), redirect_to=redirect_to)
    except ValidationError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        logger.exception("Resend invite failed")

    return ResendInviteResponse()
