# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Identity service admin client.

Talks to the admin API of the authentication service (GoTrue-compatible)
that owns login principals:

- POST /invite: create a pending account and email an activation link
- DELETE /admin/users/{id}: delete an account (used for compensation)
- POST /recover: email a password recovery link

Example:
    >>> client = IdentityClient(settings.identity)
    >>> user_id = await client.invite_user_by_email(
    ...     "jane@x.com",
    ...     redirect_to="https://school.edu/api/auth/confirm",
    ...     metadata={"onboarding_status": "pending", "main_role": "student"},
    ... )
    >>> await client.close()
"""

import logging
from typing import Any

import httpx

from src.core.config.settings import IdentitySettings

logger = logging.getLogger(__name__)

# Phrases the identity service uses when an account already exists
DUPLICATE_ACCOUNT_PHRASES = (
    "already registered",
    "already been registered",
    "already exists",
    "user already registered",
    "duplicate",
)

# Error codes with the same meaning
DUPLICATE_ACCOUNT_CODES = frozenset({"email_exists", "user_already_exists"})


class IdentityServiceError(Exception):
    """Raised when an identity service call fails.

    Attributes:
        status_code: HTTP status returned by the service, if any.
        code: Machine-readable error code returned by the service, if any.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class IdentityAlreadyExistsError(IdentityServiceError):
    """Raised when the service reports that the account already exists."""

    pass


def is_duplicate_account_error(message: str, code: str | None = None) -> bool:
    """Check whether an identity service error means "account already exists".

    Args:
        message: Error message returned by the service.
        code: Error code returned by the service, if any.

    Returns:
        True if the error reports an existing account.
    """
    if code and code.lower() in DUPLICATE_ACCOUNT_CODES:
        return True
    lowered = message.lower()
    return any(phrase in lowered for phrase in DUPLICATE_ACCOUNT_PHRASES)


def _error_details(response: httpx.Response) -> tuple[str, str | None]:
    """Extract message and error code from an error response."""
    try:
        data = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}", None

    if not isinstance(data, dict):
        return str(data), None

    message = (
        data.get("msg")
        or data.get("message")
        or data.get("error_description")
        or data.get("error")
        or f"HTTP {response.status_code}"
    )
    code = data.get("error_code") or data.get("code")
    return str(message), str(code) if code is not None else None


class IdentityClient:
    """HTTP client for the identity service admin API.

    Attributes:
        _settings: Identity service configuration.
        _client: HTTP client for API requests.
    """

    def __init__(
        self,
        settings: IdentitySettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Identity service configuration.
            transport: Optional transport override (used in tests).
        """
        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.base_url.rstrip("/"),
            headers=settings.auth_headers,
            timeout=settings.timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request and raise IdentityServiceError on failure."""
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Identity service request failed: %s %s: %s", method, url, str(e))
            raise IdentityServiceError(f"Identity service unavailable: {str(e)}") from e

        if response.is_error:
            message, code = _error_details(response)
            if is_duplicate_account_error(message, code):
                raise IdentityAlreadyExistsError(message, response.status_code, code)
            logger.error(
                "Identity service error: %s %s -> %d %s",
                method,
                url,
                response.status_code,
                message,
            )
            raise IdentityServiceError(message, response.status_code, code)

        return response

    async def invite_user_by_email(
        self,
        email: str,
        *,
        redirect_to: str,
        metadata: dict[str, Any],
    ) -> str | None:
        """Create a pending account and send an activation invite.

        Args:
            email: Normalized email address.
            redirect_to: Activation endpoint the emailed link points to.
            metadata: User metadata stored on the account.

        Returns:
            The new account id, or None if the response carried none.

        Raises:
            IdentityAlreadyExistsError: If the account already exists.
            IdentityServiceError: On any other failure.
        """
        response = await self._request(
            "POST",
            "/invite",
            params={"redirect_to": redirect_to},
            json={"email": email, "data": metadata},
        )
        data = response.json()
        user = data.get("user", data) if isinstance(data, dict) else {}
        user_id = user.get("id") if isinstance(user, dict) else None

        logger.info("Invite sent: email=%s user_id=%s", email, user_id)
        return str(user_id) if user_id else None

    async def delete_user(self, user_id: str) -> None:
        """Delete an account.

        Raises:
            IdentityServiceError: If deletion fails.
        """
        await self._request("DELETE", f"/admin/users/{user_id}")
        logger.info("Identity account deleted: %s", user_id)

    async def send_password_recovery(self, email: str, *, redirect_to: str) -> None:
        """Send a password recovery email.

        Raises:
            IdentityServiceError: If the request fails.
        """
        await self._request(
            "POST",
            "/recover",
            params={"redirect_to": redirect_to},
            json={"email": email},
        )
