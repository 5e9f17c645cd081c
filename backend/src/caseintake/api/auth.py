"""Authentication and authorization dependencies.

Bearer JWTs are decoded into an Identity. Mutating and reading case data
both require an active identity. ``require_role`` builds role-gated
dependencies; admin user management and login live outside this service.
"""

from datetime import datetime, timedelta, timezone
from typing import Annotated

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from ..config import get_settings
from ..errors import AuthError
from ..identity import Identity, require_active

# Security scheme
security = HTTPBearer(auto_error=False)


class TokenPayload(BaseModel):
    """JWT token payload."""

    sub: str  # Subject (user ID)
    email: str = ""
    name: str = ""
    role: str = "staff"
    active: bool = True
    exp: datetime  # Expiration time
    iat: datetime  # Issued at time


# =========================
# JWT Functions
# =========================


def create_access_token(identity: Identity, expires_in: timedelta | None = None) -> str:
    """Create a JWT access token for an identity.

    Args:
        identity: Identity to create the token for
        expires_in: Token lifetime (defaults to the configured hours)

    Returns:
        Encoded JWT token
    """
    settings = get_settings()

    now = datetime.now(timezone.utc)
    lifetime = expires_in or timedelta(hours=settings.jwt_expiration_hours)
    payload = {
        "sub": identity.id,
        "email": identity.email,
        "name": identity.name,
        "role": identity.role,
        "active": identity.active,
        "exp": now + lifetime,
        "iat": now,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> TokenPayload:
    """Decode and validate a JWT access token.

    Raises:
        AuthError: If token is invalid or expired
    """
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise AuthError(f"Invalid token: {e}")


# =========================
# Dependency Injection
# =========================


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Identity:
    """Resolve the caller's identity; it must be valid and active.

    Raises:
        AuthError: 401 if unauthenticated, 403 if the identity is inactive
    """
    if not credentials:
        raise AuthError("Missing or invalid Authorization header")

    payload = decode_access_token(credentials.credentials)
    identity = Identity(
        id=payload.sub,
        email=payload.email,
        name=payload.name,
        role=payload.role,
        active=payload.active,
    )
    return require_active(identity)


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]


def require_role(role: str):
    """Create a dependency that admits only identities holding ``role``.

    Admins pass every role check.

    Usage:
        @router.delete("/{case_id}/purge", dependencies=[Depends(require_role("admin"))])
    """

    async def role_checker(identity: CurrentIdentity) -> Identity:
        if identity.role != role and identity.role != "admin":
            raise AuthError(f"Role '{role}' required", status_code=403)
        return identity

    return role_checker
