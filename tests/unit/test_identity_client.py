# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the identity service admin client."""

import json

import httpx
import pytest
from pydantic import SecretStr

from src.core.config.settings import IdentitySettings
from src.infrastructure.identity import (
    IdentityAlreadyExistsError,
    IdentityClient,
    IdentityServiceError,
    is_duplicate_account_error,
)


@pytest.fixture
def identity_settings() -> IdentitySettings:
    """Create identity settings pointing at a fake host."""
    return IdentitySettings(
        base_url="https://auth.school.test/auth/v1/",
        service_key=SecretStr("service-key"),
        timeout=5.0,
    )


def make_client(settings: IdentitySettings, handler) -> IdentityClient:
    return IdentityClient(settings, transport=httpx.MockTransport(handler))


class TestDuplicateDetection:
    """Tests for is_duplicate_account_error."""

    @pytest.mark.parametrize(
        "message",
        [
            "A user with this email address has already been registered",
            "User already registered",
            "Email already exists",
            "duplicate key value violates unique constraint",
        ],
    )
    def test_duplicate_messages(self, message: str) -> None:
        """Test that duplicate phrases are recognized case-insensitively."""
        assert is_duplicate_account_error(message)

    def test_duplicate_codes(self) -> None:
        """Test that duplicate error codes are recognized."""
        assert is_duplicate_account_error("Conflict", "email_exists")
        assert is_duplicate_account_error("Conflict", "USER_ALREADY_EXISTS")

    def test_other_errors(self) -> None:
        """Test that unrelated errors are not duplicates."""
        assert not is_duplicate_account_error("Email rate limit exceeded", "over_email_send_rate_limit")


class TestIdentityClient:
    """Tests for IdentityClient requests."""

    @pytest.mark.asyncio
    async def test_invite_sends_request_and_returns_id(
        self,
        identity_settings: IdentitySettings,
    ) -> None:
        """Test the invite request shape and returned account id."""
        captured: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["method"] = request.method
            captured["url"] = request.url
            captured["headers"] = request.headers
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "user-123", "email": "jane@x.com"})

        client = make_client(identity_settings, handler)
        user_id = await client.invite_user_by_email(
            "jane@x.com",
            redirect_to="https://school.edu/api/auth/confirm",
            metadata={"onboarding_status": "pending", "main_role": "student"},
        )
        await client.close()

        assert user_id == "user-123"
        assert captured["method"] == "POST"
        assert captured["url"].path == "/auth/v1/invite"
        assert captured["url"].params["redirect_to"] == "https://school.edu/api/auth/confirm"
        assert captured["headers"]["apikey"] == "service-key"
        assert captured["headers"]["authorization"] == "Bearer service-key"
        assert captured["body"] == {
            "email": "jane@x.com",
            "data": {"onboarding_status": "pending", "main_role": "student"},
        }

    @pytest.mark.asyncio
    async def test_invite_reads_nested_user(self, identity_settings: IdentitySettings) -> None:
        """Test that an id nested under "user" is returned."""
        client = make_client(
            identity_settings,
            lambda request: httpx.Response(200, json={"user": {"id": "user-456"}}),
        )

        assert await client.invite_user_by_email("a@x.com", redirect_to="r", metadata={}) == "user-456"
        await client.close()

    @pytest.mark.asyncio
    async def test_invite_without_id(self, identity_settings: IdentitySettings) -> None:
        """Test that a response without an id returns None."""
        client = make_client(identity_settings, lambda request: httpx.Response(200, json={}))

        assert await client.invite_user_by_email("a@x.com", redirect_to="r", metadata={}) is None
        await client.close()

    @pytest.mark.asyncio
    async def test_invite_duplicate_raises_already_exists(
        self,
        identity_settings: IdentitySettings,
    ) -> None:
        """Test that a duplicate account response raises IdentityAlreadyExistsError."""
        client = make_client(
            identity_settings,
            lambda request: httpx.Response(
                422,
                json={
                    "code": 422,
                    "error_code": "email_exists",
                    "msg": "A user with this email address has already been registered",
                },
            ),
        )

        with pytest.raises(IdentityAlreadyExistsError) as exc_info:
            await client.invite_user_by_email("a@x.com", redirect_to="r", metadata={})
        await client.close()

        assert exc_info.value.status_code == 422
        assert exc_info.value.code == "email_exists"

    @pytest.mark.asyncio
    async def test_server_error_raises_service_error(
        self,
        identity_settings: IdentitySettings,
    ) -> None:
        """Test that other error responses raise IdentityServiceError."""
        client = make_client(
            identity_settings,
            lambda request: httpx.Response(500, text="internal error"),
        )

        with pytest.raises(IdentityServiceError) as exc_info:
            await client.invite_user_by_email("a@x.com", redirect_to="r", metadata={})
        await client.close()

        assert not isinstance(exc_info.value, IdentityAlreadyExistsError)
        assert str(exc_info.value) == "internal error"

    @pytest.mark.asyncio
    async def test_transport_error_raises_service_error(
        self,
        identity_settings: IdentitySettings,
    ) -> None:
        """Test that connection failures raise IdentityServiceError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(identity_settings, handler)

        with pytest.raises(IdentityServiceError, match="Identity service unavailable"):
            await client.delete_user("user-123")
        await client.close()

    @pytest.mark.asyncio
    async def test_delete_user(self, identity_settings: IdentitySettings) -> None:
        """Test the account deletion request."""
        captured: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["method"] = request.method
            captured["path"] = request.url.path
            return httpx.Response(200, json={})

        client = make_client(identity_settings, handler)
        await client.delete_user("user-123")
        await client.close()

        assert captured == {"method": "DELETE", "path": "/auth/v1/admin/users/user-123"}

    @pytest.mark.asyncio
    async def test_send_password_recovery(self, identity_settings: IdentitySettings) -> None:
        """Test the password recovery request."""
        captured: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["path"] = request.url.path
            captured["params"] = dict(request.url.params)
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={})

        client = make_client(identity_settings, handler)
        await client.send_password_recovery("jane@x.com", redirect_to="https://school.edu/cb")
        await client.close()

        assert captured["path"] == "/auth/v1/recover"
        assert captured["body"] == {"email": "jane@x.com"}
        assert captured["params"] == {"redirect_to": "https://school.edu/cb"}
