"""Password hashing and bearer token helpers for ShareNest callers."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from sharenest.core.config import get_settings

ACCESS_TOKEN_TYPE = "access"


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Check a password against its bcrypt hash.

    Provisioned profiles have no password and never match.
    """
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())
    except (ValueError, TypeError):
        return False


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def create_access_token(
    subject: str, expires_delta: timedelta | None = None, **claims: Any
) -> str:
    """Issue an HS256 bearer token whose ``sub`` is the profile id."""
    settings = get_settings()
    issued_at = datetime.now(UTC)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    payload: dict[str, Any] = {
        **claims,
        "sub": subject,
        "iat": issued_at,
        "exp": issued_at + lifetime,
        "typ": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Return the verified claims of a bearer token.

    Raises ``JWTError`` for bad signatures, expiry, a missing subject or a
    token that is not an access token.
    """
    settings = get_settings()
    payload = jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
        options={"require_sub": True, "require_exp": True},
    )
    if payload.get("typ", ACCESS_TOKEN_TYPE) != ACCESS_TOKEN_TYPE:
        raise JWTError("Unexpected token type")
    return payload
