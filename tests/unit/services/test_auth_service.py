"""
Unit tests for the auth service.
"""

import os

import pytest

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-purposes-only-32chars")


class TestSignup:
    """Tests for account registration."""

    @pytest.mark.unit
    @pytest.mark.auth
    @pytest.mark.asyncio
    async def test_signup_issues_token(self, auth_service):
        from app.core.security import verify_token

        user, token = await auth_service.signup("Ada", "ada@example.com", "pw-123456")

        assert user.name == "Ada"
        assert user.email == "ada@example.com"
        assert user.password_hash != "pw-123456"
        assert verify_token(token)["sub"] == user.id

    @pytest.mark.unit
    @pytest.mark.auth
    @pytest.mark.asyncio
    async def test_duplicate_email(self, auth_service):
        from app.core.exceptions import ValidationError

        await auth_service.signup("Ada", "ada@example.com", "pw-123456")

        with pytest.raises(ValidationError) as exc_info:
            await auth_service.signup("Other", "ada@example.com", "pw-654321")

        assert exc_info.value.message == "Email already used"


class TestLogin:
    """Tests for password login."""

    @pytest.mark.unit
    @pytest.mark.auth
    @pytest.mark.asyncio
    async def test_login_success(self, auth_service):
        created, _ = await auth_service.signup("Ada", "ada@example.com", "pw-123456")

        user, token = await auth_service.login("ada@example.com", "pw-123456")

        assert user.id == created.id
        assert token

    @pytest.mark.unit
    @pytest.mark.auth
    @pytest.mark.asyncio
    async def test_wrong_password(self, auth_service):
        from app.core.exceptions import InvalidCredentialsError

        await auth_service.signup("Ada", "ada@example.com", "pw-123456")

        with pytest.raises(InvalidCredentialsError) as exc_info:
            await auth_service.login("ada@example.com", "nope")

        assert exc_info.value.message == "wrong email or password"

    @pytest.mark.unit
    @pytest.mark.auth
    @pytest.mark.asyncio
    async def test_unknown_email(self, auth_service):
        from app.core.exceptions import InvalidCredentialsError

        with pytest.raises(InvalidCredentialsError):
            await auth_service.login("nobody@example.com", "pw-123456")
