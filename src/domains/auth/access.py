# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Caller authorization rules.

Student provisioning is restricted to administrators and to non-academic
staff working in the admissions unit.
"""

from src.domains.auth.jwt import TokenPayload

ADMIN_ROLE = "admin"
STAFF_ROLE = "non_academic_staff"
ADMISSIONS_UNIT = "admissions"


class AccessDeniedError(Exception):
    """Raised when an authenticated caller lacks the required role."""

    pass


def has_admissions_access(claims: TokenPayload) -> bool:
    """Check whether the caller may provision students."""
    role = (claims.main_role or "").lower()
    if role == ADMIN_ROLE:
        return True
    unit = (claims.unit or "").lower()
    return role == STAFF_ROLE and unit == ADMISSIONS_UNIT


def require_admissions_access(claims: TokenPayload) -> TokenPayload:
    """Return the claims unchanged, or raise if access is denied.

    Raises:
        AccessDeniedError: If the caller is not admissions staff or admin.
    """
    if not has_admissions_access(claims):
        raise AccessDeniedError(f"Role {claims.main_role!r} cannot manage admissions")
    return claims
