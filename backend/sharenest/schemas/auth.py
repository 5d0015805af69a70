"""Authentication schemas."""
from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field

from sharenest.schemas.user import UserRead


class Token(BaseModel):
    """Response body for access tokens."""

    access_token: str
    token_type: str = "bearer"


class RegistrationRequest(BaseModel):
    """Self-service registration payload for renters."""

    email: EmailStr
    password: str = Field(min_length=8)
    name: str = Field(min_length=1, max_length=200)
    phone_number: str | None = None
    license_number: str | None = Field(default=None, max_length=64)


class RegistrationResponse(BaseModel):
    """Response after successful self-service registration."""

    token: Token
    user: UserRead
