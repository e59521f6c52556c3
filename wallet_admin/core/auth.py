"""
JWT bearer token verification and authorization utilities.

Tokens are issued by the platform's auth service and signed with a shared
secret. This module only verifies them and exposes FastAPI dependencies
for authentication and the admin role check.
"""

import logging
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from wallet_admin.core.config import get_settings
from wallet_admin.core.errors import ForbiddenError, UnauthorizedError
from wallet_admin.domain.models.account import AccountRole

logger = logging.getLogger(__name__)

INVALID_OR_EXPIRED_TOKEN_MSG = "Invalid or expired token"

# Authorization header is optional so bypass mode can work without it
_optional_security = HTTPBearer(auto_error=False)


class AuthenticatedUser(BaseModel):
    """Authenticated caller information."""

    user_id: str
    email: str | None = None
    role: AccountRole = AccountRole.USER

    @property
    def is_admin(self) -> bool:
        """Check if caller has the admin role."""
        return self.role == AccountRole.ADMIN


def verify_token(token: str) -> dict[str, Any]:
    """Verify a JWT and return its claims."""
    settings = get_settings()
    secret = settings.auth.jwt_secret.get_secret_value()
    if not secret:
        logger.error("AUTH_JWT_SECRET is not configured; rejecting token")
        raise UnauthorizedError(INVALID_OR_EXPIRED_TOKEN_MSG)

    options = {"verify_aud": settings.auth.audience is not None}
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=settings.auth.algorithms_list,
            audience=settings.auth.audience,
            issuer=settings.auth.issuer,
            options=options,
        )
    except jwt.ExpiredSignatureError:
        logger.warning("Token has expired")
        raise UnauthorizedError(INVALID_OR_EXPIRED_TOKEN_MSG) from None
    except jwt.JWTClaimsError as e:
        logger.warning(f"Invalid token claims: {e}")
        raise UnauthorizedError(INVALID_OR_EXPIRED_TOKEN_MSG) from None
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        raise UnauthorizedError(INVALID_OR_EXPIRED_TOKEN_MSG) from None

    logger.debug(f"Token verified successfully for subject: {payload.get('sub')}")
    return payload


def _create_bypass_user() -> AuthenticatedUser:
    """
    Create a fixed admin principal for local development.

    This is ONLY used when SECURITY_SKIP_JWT_VALIDATION=True and APP_ENV=local.
    """
    return AuthenticatedUser(
        user_id="00000000-0000-0000-0000-000000000001",
        email="local-dev@example.com",
        role=AccountRole.ADMIN,
    )


def user_from_claims(payload: dict[str, Any]) -> AuthenticatedUser:
    sub = payload.get("sub")
    if not sub:
        logger.error("JWT payload missing 'sub' claim")
        raise UnauthorizedError("Invalid token - missing user identifier")

    try:
        role = AccountRole(payload.get("role", AccountRole.USER.value))
    except ValueError:
        logger.warning(f"Unknown role claim: {payload.get('role')!r}")
        role = AccountRole.USER

    return AuthenticatedUser(user_id=str(sub), email=payload.get("email"), role=role)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_optional_security),
) -> AuthenticatedUser:
    """Extract and verify the bearer token, returning the caller."""
    settings = get_settings()

    if settings.security.skip_jwt_validation is True:
        logger.info("JWT validation bypassed - returning local admin user")
        return _create_bypass_user()

    if credentials is None:
        logger.warning("Missing Authorization header")
        raise UnauthorizedError("Missing authorization header")

    return user_from_claims(verify_token(credentials.credentials))


def require_admin_role(
    user: AuthenticatedUser = Depends(get_current_user),
) -> AuthenticatedUser:
    """Dependency that enforces the admin role."""
    if not user.is_admin:
        logger.warning(
            "Access denied - user %s lacks admin role. User role: %s",
            user.user_id,
            user.role.value,
        )
        raise ForbiddenError("Admin access required", details={"required_role": "admin"})
    return user
