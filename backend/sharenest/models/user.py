"""User profile model for renters, vehicle owners and administrators."""
from __future__ import annotations

import enum
import uuid

from sqlalchemy import Boolean, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sharenest.db.base import Base
from sharenest.models.mixins import TimestampMixin


class UserRole(str, enum.Enum):
    """Role enumeration for platform permissions, lowest to highest."""

    USER = "user"
    OWNER = "owner"
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]


_ROLE_RANK = {UserRole.USER: 1, UserRole.OWNER: 2, UserRole.ADMIN: 3}


class UserStatus(str, enum.Enum):
    """Enumerates user activation states."""

    ACTIVE = "active"
    SUSPENDED = "suspended"


class LicenseStatus(str, enum.Enum):
    """Driver license review states."""

    NONE = "none"
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class User(TimestampMixin, Base):
    """Stored profile joined against the bearer token subject."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    hashed_password: Mapped[str | None] = mapped_column(String(255))
    name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    phone_number: Mapped[str | None] = mapped_column(String(32))
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole), default=UserRole.USER, nullable=False
    )
    status: Mapped[UserStatus] = mapped_column(
        Enum(UserStatus), default=UserStatus.ACTIVE, nullable=False
    )
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    license_status: Mapped[LicenseStatus] = mapped_column(
        Enum(LicenseStatus), default=LicenseStatus.NONE, nullable=False
    )
    license_number: Mapped[str | None] = mapped_column(String(64))
    license_rejection_reason: Mapped[str | None] = mapped_column(Text())
