"""Authenticated identity handed to the intake core by the auth layer."""

from pydantic import BaseModel

from .errors import AuthError


class Identity(BaseModel):
    """Caller identity resolved from a bearer token."""

    id: str
    email: str = ""
    name: str = ""
    role: str = "staff"
    active: bool = True


def require_active(identity: Identity | None) -> Identity:
    """Reject a missing or deactivated identity.

    Raises:
        AuthError: 401 when there is no identity, 403 when it is inactive
    """
    if identity is None:
        raise AuthError("Authentication required")
    if not identity.active:
        raise AuthError("User is not active", status_code=403)
    return identity
