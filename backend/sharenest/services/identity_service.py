"""Session and identity gate.

Bearer tokens are issued by the identity provider; the gate decodes them and
joins the subject against the stored profile to produce a ``CallerIdentity``.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from sharenest.core.errors import (
    Forbidden,
    InvalidInput,
    ProfileNotFound,
    Unauthenticated,
)
from sharenest.core.security import create_access_token, decode_access_token, verify_password
from sharenest.models.user import User, UserRole, UserStatus
from sharenest.schemas.user import UserCreate
from sharenest.services import user_service


@dataclass(frozen=True, slots=True)
class CallerIdentity:
    """Authenticated caller resolved from a bearer credential."""

    user_id: uuid.UUID
    role: UserRole
    is_verified: bool
    email: str | None = None
    name: str | None = None

    @classmethod
    def from_user(cls, user: User) -> "CallerIdentity":
        return cls(
            user_id=user.id,
            role=user.role,
            is_verified=user.is_verified,
            email=user.email,
            name=user.name or None,
        )


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Principal asserted by a valid credential, before the profile join."""

    subject: uuid.UUID
    email: str | None = None


def read_claims(credential: str | None) -> TokenClaims:
    """Validate a bearer credential and return its principal."""
    if not credential:
        raise Unauthenticated("Missing bearer credential")
    try:
        payload: dict[str, Any] = decode_access_token(credential)
    except JWTError as exc:
        raise Unauthenticated() from exc

    subject = payload.get("sub")
    if subject is None:
        raise Unauthenticated()
    try:
        user_id = uuid.UUID(str(subject))
    except ValueError as exc:
        raise Unauthenticated() from exc
    email = payload.get("email")
    return TokenClaims(subject=user_id, email=str(email) if email else None)


async def resolve_caller(
    session: AsyncSession, credential: str | None
) -> CallerIdentity:
    """Resolve the caller behind a bearer credential.

    Raises ``Unauthenticated`` for missing, malformed or expired credentials
    and for suspended profiles, ``ProfileNotFound`` when the credential is
    valid but no profile row exists yet.
    """

    claims = read_claims(credential)
    user = await user_service.get_user(session, claims.subject)
    if user is None:
        raise ProfileNotFound()
    if user.status != UserStatus.ACTIVE:
        raise Unauthenticated("Account is suspended")
    return CallerIdentity.from_user(user)


def has_role(identity: CallerIdentity | None, required_role: UserRole) -> bool:
    """True when the caller's role ranks at or above ``required_role``."""
    if identity is None:
        return False
    return identity.role.rank >= required_role.rank


def require_role(identity: CallerIdentity | None, required_role: UserRole) -> CallerIdentity:
    if identity is None:
        raise Unauthenticated()
    if not has_role(identity, required_role):
        raise Forbidden(f"{required_role.value} role required")
    return identity


async def authenticate_user(
    session: AsyncSession, email: str, password: str
) -> User | None:
    """Validate credentials and return a user if correct."""
    user = await user_service.get_user_by_email(session, email=email)
    if user is None:
        return None
    if user.status != UserStatus.ACTIVE:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def create_access_token_for_user(user: User) -> str:
    """Generate a JWT for a user."""
    return create_access_token(str(user.id), email=user.email, role=user.role.value)


async def provision_profile(
    session: AsyncSession,
    credential: str | None,
    *,
    name: str = "",
    phone_number: str | None = None,
) -> tuple[User, bool]:
    """Create the profile for a valid credential that has none yet.

    New profiles always start with the ``user`` role. Returns the profile and
    whether it was created by this call.
    """

    claims = read_claims(credential)
    existing = await user_service.get_user(session, claims.subject)
    if existing is not None:
        return existing, False
    if not claims.email:
        raise InvalidInput("Credential carries no email claim to provision from")
    payload = UserCreate(email=claims.email, name=name, phone_number=phone_number)
    user = await user_service.create_user(session, payload, user_id=claims.subject)
    return user, True
