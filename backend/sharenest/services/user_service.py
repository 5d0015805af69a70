"""User data access helpers."""
from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sharenest.core.errors import InvalidInput
from sharenest.core.security import get_password_hash
from sharenest.models.user import LicenseStatus, User
from sharenest.schemas.user import UserCreate


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    """Return a user by email address."""
    result = await session.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def get_user(session: AsyncSession, user_id: uuid.UUID) -> User | None:
    """Return a user by ID."""
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def create_user(
    session: AsyncSession,
    payload: UserCreate,
    *,
    user_id: uuid.UUID | None = None,
    license_number: str | None = None,
) -> User:
    """Persist a new user, hashing the password when one is given."""
    user = User(
        email=payload.email.lower(),
        hashed_password=get_password_hash(payload.password) if payload.password else None,
        name=payload.name,
        phone_number=payload.phone_number,
        role=payload.role,
        status=payload.status,
        license_number=license_number,
        license_status=LicenseStatus.PENDING if license_number else LicenseStatus.NONE,
    )
    if user_id is not None:
        user.id = user_id
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise InvalidInput("Email already registered") from exc
    await session.refresh(user)
    return user


async def list_license_reviews(
    session: AsyncSession, *, status: LicenseStatus | None = None
) -> list[User]:
    """Return users that submitted a driver license, optionally by status."""
    stmt = select(User).where(User.license_status != LicenseStatus.NONE)
    if status is not None:
        stmt = stmt.where(User.license_status == status)
    result = await session.execute(stmt.order_by(User.updated_at.desc()))
    return list(result.scalars().all())


async def review_license(
    session: AsyncSession,
    user: User,
    *,
    approve: bool,
    reason: str | None = None,
) -> User:
    """Approve or reject a driver license; approval marks the user verified."""
    if approve:
        user.license_status = LicenseStatus.VERIFIED
        user.license_rejection_reason = None
        user.is_verified = True
    else:
        user.license_status = LicenseStatus.REJECTED
        user.license_rejection_reason = reason
        user.is_verified = False
    await session.commit()
    await session.refresh(user)
    return user
