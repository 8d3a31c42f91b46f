# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activation invite resending.

Students who lost or never received their activation email can request a
new one. The outcome is never reported back to the caller, so the endpoint
cannot be used to probe which emails are registered.
"""

import logging

from src.domains.provisioning.errors import ValidationError
from src.domains.provisioning.ports import IdentityProvider, ProfileStore
from src.domains.provisioning.validation import clean_email
from src.infrastructure.database.connection import DatabaseError
from src.infrastructure.identity.client import (
    IdentityAlreadyExistsError,
    IdentityServiceError,
)

logger = logging.getLogger(__name__)

EMAIL_REQUIRED_MESSAGE = "Email is required"


class InviteService:
    """Resends activation invites to pending accounts."""

    def __init__(self, identity: IdentityProvider, profiles: ProfileStore) -> None:
        self._identity = identity
        self._profiles = profiles

    async def resend_invite(self, raw_email: object, redirect_to: str) -> None:
        """Send a fresh invite if the email belongs to a pending profile.

        Accounts that already exist in the identity service get a password
        recovery email instead. Lookup and delivery failures are logged and
        swallowed.

        Args:
            raw_email: Email as received in the request body.
            redirect_to: Activation link target.

        Raises:
            ValidationError: If no email was given.
        """
        email = clean_email(raw_email)
        if not email:
            raise ValidationError(EMAIL_REQUIRED_MESSAGE)

        try:
            profile = await self._profiles.find_by_email(email)
        except DatabaseError as e:
            logger.error("Resend invite profile lookup failed: %s", e)
            return

        if profile is None:
            return

        if (profile.onboarding_status or "").lower() == "active":
            logger.debug("Resend invite skipped, profile %s already active", profile.id)
            return

        try:
            await self._identity.invite_user_by_email(
                email,
                redirect_to=redirect_to,
                metadata={"onboarding_status": "pending"},
            )
        except IdentityAlreadyExistsError:
            await self._send_recovery(email, redirect_to)
            return
        except IdentityServiceError as e:
            logger.error("Resend invite failed for profile %s: %s", profile.id, e)
            return

        logger.info("Invite resent for profile %s", profile.id)

    async def _send_recovery(self, email: str, redirect_to: str) -> None:
        try:
            await self._identity.send_password_recovery(email, redirect_to=redirect_to)
        except IdentityServiceError as e:
            logger.error("Password recovery fallback failed: %s", e)
