# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain services.

This module provides caller authentication and authorization:
- JWT token creation and validation
- Admissions access rules for student provisioning

Exports:
    JWTManager: JWT token creation and validation.
    TokenPayload: Decoded token claims.
    AccessDeniedError: Raised for authenticated callers without access.
    require_admissions_access: Admissions role check.
"""

from src.domains.auth.access import (
    AccessDeniedError,
    has_admissions_access,
    require_admissions_access,
)
from src.domains.auth.jwt import (
    InvalidTokenError,
    JWTError,
    JWTManager,
    TokenExpiredError,
    TokenPayload,
)

__all__ = [
    "AccessDeniedError",
    "InvalidTokenError",
    "JWTError",
    "JWTManager",
    "TokenExpiredError",
    "TokenPayload",
    "has_admissions_access",
    "require_admissions_access",
]
