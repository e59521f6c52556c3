"""Unit tests for bearer token verification and role checks."""

import time
from unittest.mock import MagicMock, patch

import pytest
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from wallet_admin.core.auth import (
    AuthenticatedUser,
    get_current_user,
    require_admin_role,
    user_from_claims,
    verify_token,
)
from wallet_admin.core.errors import ForbiddenError, UnauthorizedError
from wallet_admin.domain.models.account import AccountRole

SECRET = "unit-test-secret"


def make_token(secret: str = SECRET, **claims) -> str:
    payload = {"sub": "user-1", "email": "u@example.com", "role": "user", "exp": int(time.time()) + 300}
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestVerifyToken:
    def test_valid_token(self):
        claims = verify_token(make_token(role="admin"))
        assert claims["sub"] == "user-1"
        assert claims["role"] == "admin"

    def test_wrong_secret(self):
        with pytest.raises(UnauthorizedError):
            verify_token(make_token(secret="other-secret"))

    def test_expired_token(self):
        with pytest.raises(UnauthorizedError):
            verify_token(make_token(exp=int(time.time()) - 10))

    def test_garbage_token(self):
        with pytest.raises(UnauthorizedError):
            verify_token("not-a-jwt")

    def test_audience_checked_when_configured(self, monkeypatch):
        monkeypatch.setenv("AUTH_AUDIENCE", "wallet-admin")
        with pytest.raises(UnauthorizedError):
            verify_token(make_token(aud="someone-else"))
        assert verify_token(make_token(aud="wallet-admin"))["aud"] == "wallet-admin"

    def test_missing_secret_rejects(self, monkeypatch):
        monkeypatch.setenv("AUTH_JWT_SECRET", "")
        with pytest.raises(UnauthorizedError):
            verify_token(make_token())


class TestUserFromClaims:
    def test_admin_role(self):
        user = user_from_claims({"sub": "a-1", "email": "a@example.com", "role": "admin"})
        assert user.is_admin
        assert user.user_id == "a-1"

    def test_unknown_role_falls_back_to_user(self):
        assert user_from_claims({"sub": "a-1", "role": "superuser"}).role is AccountRole.USER

    def test_missing_sub(self):
        with pytest.raises(UnauthorizedError):
            user_from_claims({"email": "a@example.com"})


class TestDependencies:
    @pytest.mark.asyncio
    async def test_missing_header(self):
        with pytest.raises(UnauthorizedError):
            await get_current_user(credentials=None)

    @pytest.mark.asyncio
    async def test_valid_header(self):
        user = await get_current_user(credentials=_bearer(make_token(sub="u-9")))
        assert user.user_id == "u-9"
        assert user.role is AccountRole.USER

    @pytest.mark.asyncio
    async def test_bypass_returns_local_admin(self):
        settings = MagicMock()
        settings.security.skip_jwt_validation = True
        with patch("wallet_admin.core.auth.get_settings", return_value=settings):
            user = await get_current_user(credentials=None)
        assert user.is_admin

    def test_require_admin_rejects_user(self):
        with pytest.raises(ForbiddenError):
            require_admin_role(AuthenticatedUser(user_id="u", role=AccountRole.USER))

    def test_require_admin_accepts_admin(self):
        admin = AuthenticatedUser(user_id="a", role=AccountRole.ADMIN)
        assert require_admin_role(admin) is admin
