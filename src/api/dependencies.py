# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get the authenticated caller
- Enforce admissions access
- Build the activation redirect URL
- Get service instances

Example:
    @router.post("")
    async def create_student(
        service: StudentProvisioningService = Depends(get_provisioning_service),
        caller: TokenPayload = Depends(require_admissions_staff),
    ):
        ...
"""

import logging

from fastapi import Depends, HTTPException, Request, status

from src.api.middleware.auth import get_current_user
from src.core.config import get_settings
from src.domains.auth import AccessDeniedError, TokenPayload, require_admissions_access
from src.domains.provisioning import InviteService, StudentProvisioningService
from src.infrastructure.database.academic_records import (
    SqlMatricAllocator,
    SqlProfileStore,
    SqlProgramCatalog,
    SqlStudentStore,
)
from src.infrastructure.identity import IdentityClient

logger = logging.getLogger(__name__)

# Path the identity service's activation link points back to
CONFIRM_PATH = "/api/auth/confirm"
DEFAULT_BASE_URL = "http://localhost:3000"


# =========================================================================
# Authentication Dependencies
# =========================================================================


def require_auth(request: Request) -> TokenPayload:
    """Require an authenticated caller.

    Raises:
        HTTPException: 401 if no valid token was presented.
    """
    user = get_current_user(request)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admissions_staff(
    user: TokenPayload = Depends(require_auth),
) -> TokenPayload:
    """Require an admin or an admissions staff member.

    Raises:
        HTTPException: 403 if the caller has another role.
    """
    try:
        return require_admissions_access(user)
    except AccessDeniedError as e:
        logger.info("Admissions access denied for %s: %s", user.sub, e)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden",
        )


# =========================================================================
# Redirect URL
# =========================================================================


def resolve_base_url(request: Request, site_url: str | None = None) -> str:
    """Work out the public base URL of the site.

    A configured site URL wins. Otherwise the forwarded host (or Host header)
    is used with the forwarded protocol; local hosts always use http.

    Args:
        request: HTTP request.
        site_url: Configured public site URL, if any.

    Returns:
        Base URL without a trailing slash.
    """
    if site_url:
        return site_url.rstrip("/")

    host = request.headers.get("x-forwarded-host") or request.headers.get("host")
    if not host:
        return DEFAULT_BASE_URL

    proto = request.headers.get("x-forwarded-proto") or "http"
    if "localhost" in host or host.startswith("127.0.0.1"):
        proto = "http"

    return f"{proto}://{host}".rstrip("/")


def get_redirect_to(request: Request) -> str:
    """Activation link target for invite emails."""
    base_url = resolve_base_url(request, get_settings().site_url)
    return f"{base_url}{CONFIRM_PATH}"


# =========================================================================
# Service Dependencies
# =========================================================================


def get_identity_client(request: Request) -> IdentityClient:
    """Get the identity client created at application startup.

    Raises:
        HTTPException: 503 if the client is not initialized.
    """
    client = getattr(request.app.state, "identity_client", None)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Identity service client not initialized",
        )
    return client


def get_provisioning_service(
    identity: IdentityClient = Depends(get_identity_client),
) -> StudentProvisioningService:
    """Get the student provisioning service wired to the SQL stores."""
    return StudentProvisioningService(
        catalog=SqlProgramCatalog(),
        matric_allocator=SqlMatricAllocator(),
        identity=identity,
        profiles=SqlProfileStore(),
        students=SqlStudentStore(),
    )


def get_invite_service(
    identity: IdentityClient = Depends(get_identity_client),
) -> InviteService:
    """Get the invite resend service."""
    return InviteService(identity=identity, profiles=SqlProfileStore())
