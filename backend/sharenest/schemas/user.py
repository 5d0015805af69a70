"""User profile schemas."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field

from sharenest.models.user import LicenseStatus, UserRole, UserStatus
from sharenest.schemas.base import APIModel


class UserCreate(APIModel):
    email: EmailStr
    password: str | None = Field(default=None, min_length=8)
    name: str = ""
    phone_number: str | None = None
    role: UserRole = UserRole.USER
    status: UserStatus = UserStatus.ACTIVE


class UserRead(APIModel):
    id: uuid.UUID
    email: EmailStr
    name: str
    phone_number: str | None = None
    role: UserRole
    status: UserStatus
    is_verified: bool
    license_status: LicenseStatus
    created_at: datetime


class ProfileProvisionRequest(APIModel):
    """Fields a caller may set when provisioning their own profile."""

    name: str = ""
    phone_number: str | None = None


class LicenseRead(APIModel):
    id: uuid.UUID
    email: EmailStr
    name: str
    license_number: str | None = None
    license_status: LicenseStatus
    license_rejection_reason: str | None = None
    is_verified: bool


class LicenseReviewRequest(APIModel):
    action: Literal["approve", "reject"]
    reason: str | None = Field(default=None, max_length=1000)
