# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Identity (authentication) service integration."""

from src.infrastructure.identity.client import (
    IdentityAlreadyExistsError,
    IdentityClient,
    IdentityServiceError,
    is_duplicate_account_error,
)

__all__ = [
    "IdentityAlreadyExistsError",
    "IdentityClient",
    "IdentityServiceError",
    "is_duplicate_account_error",
]
