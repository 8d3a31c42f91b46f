# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Provisioning error taxonomy.

Every provisioning failure is one of these types. Each carries the HTTP
status the API layer answers with.
"""


class ProvisioningError(Exception):
    """Base exception for provisioning errors.

    Attributes:
        message: Human-readable error message returned to the caller.
        status_code: HTTP status for this error type.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ProvisioningError):
    """Bad or missing input. Raised before any side effect."""

    status_code = 400


class ConflictError(ProvisioningError):
    """Duplicate email or identity, detected by pre-check or at write time."""

    status_code = 409


class ConfigurationError(ProvisioningError):
    """Catalog data defect, e.g. a program without a department link.

    Reported separately from caller errors because it needs fixing by an
    administrator, not by the caller.
    """

    status_code = 400


class UpstreamError(ProvisioningError):
    """Any other failure reported by an external collaborator."""

    status_code = 500


class UnexpectedError(ProvisioningError):
    """Uncaught fault inside the workflow."""

    status_code = 500
