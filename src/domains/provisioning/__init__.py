# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student provisioning domain.

Creates a student's identity account, profile and academic record as one
saga, compensating earlier steps when a later one fails. Also resends
activation invites to students who have not activated yet.
"""

from src.domains.provisioning.errors import (
    ConfigurationError,
    ConflictError,
    ProvisioningError,
    UnexpectedError,
    UpstreamError,
    ValidationError,
)
from src.domains.provisioning.invites import InviteService
from src.domains.provisioning.service import StudentProvisioningService
from src.domains.provisioning.steps import ProvisioningContext, StudentProvisioningSteps
from src.domains.provisioning.validation import validate_provisioning_request

__all__ = [
    "ConfigurationError",
    "ConflictError",
    "InviteService",
    "ProvisioningContext",
    "ProvisioningError",
    "StudentProvisioningService",
    "StudentProvisioningSteps",
    "UnexpectedError",
    "UpstreamError",
    "ValidationError",
    "validate_provisioning_request",
]
