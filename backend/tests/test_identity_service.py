"""Identity gate tests."""

from __future__ import annotations

import uuid
from datetime import timedelta

import pytest
from sqlalchemy import select

from sharenest.core.errors import Forbidden, ProfileNotFound, Unauthenticated
from sharenest.core.security import create_access_token
from sharenest.models import User, UserRole, UserStatus
from sharenest.services import identity_service
from sharenest.services.identity_service import CallerIdentity

pytestmark = pytest.mark.asyncio


async def test_resolve_caller_joins_profile(seeded, session) -> None:
    token = identity_service.create_access_token_for_user(seeded["renter_user"])
    caller = await identity_service.resolve_caller(session, token)
    assert caller.user_id == seeded["renter"].user_id
    assert caller.role is UserRole.USER
    assert caller.is_verified is False
    assert caller.email == "renter@example.com"


@pytest.mark.parametrize("credential", [None, "", "not-a-jwt"])
async def test_bad_credentials_are_unauthenticated(seeded, session, credential) -> None:
    with pytest.raises(Unauthenticated):
        await identity_service.resolve_caller(session, credential)


async def test_expired_token_is_unauthenticated(seeded, session) -> None:
    token = create_access_token(
        str(seeded["renter"].user_id), expires_delta=timedelta(minutes=-5)
    )
    with pytest.raises(Unauthenticated):
        await identity_service.resolve_caller(session, token)


async def test_non_uuid_subject_is_unauthenticated(seeded, session) -> None:
    token = create_access_token("someone")
    with pytest.raises(Unauthenticated):
        await identity_service.resolve_caller(session, token)


async def test_missing_profile_is_distinct_error(seeded, session) -> None:
    token = create_access_token(str(uuid.uuid4()), email="new@example.com")
    with pytest.raises(ProfileNotFound):
        await identity_service.resolve_caller(session, token)


async def test_suspended_profile_is_unauthenticated(seeded, session) -> None:
    user = seeded["renter_user"]
    user.status = UserStatus.SUSPENDED
    await session.commit()
    token = identity_service.create_access_token_for_user(user)
    with pytest.raises(Unauthenticated):
        await identity_service.resolve_caller(session, token)


async def test_provision_profile_creates_user_once(seeded, session) -> None:
    subject = uuid.uuid4()
    token = create_access_token(str(subject), email="Fresh@Example.com")

    user, created = await identity_service.provision_profile(
        session, token, name="Fresh Driver"
    )
    assert created is True
    assert user.id == subject
    assert user.email == "fresh@example.com"
    assert user.role is UserRole.USER

    again, created_again = await identity_service.provision_profile(session, token)
    assert created_again is False
    assert again.id == subject

    caller = await identity_service.resolve_caller(session, token)
    assert caller.user_id == subject

    rows = await session.execute(select(User).where(User.id == subject))
    assert len(rows.scalars().all()) == 1


async def test_role_ordering() -> None:
    def make(role: UserRole) -> CallerIdentity:
        return CallerIdentity(user_id=uuid.uuid4(), role=role, is_verified=False)

    assert identity_service.has_role(make(UserRole.ADMIN), UserRole.OWNER)
    assert identity_service.has_role(make(UserRole.OWNER), UserRole.OWNER)
    assert not identity_service.has_role(make(UserRole.USER), UserRole.OWNER)
    assert not identity_service.has_role(None, UserRole.USER)

    with pytest.raises(Unauthenticated):
        identity_service.require_role(None, UserRole.USER)
    with pytest.raises(Forbidden):
        identity_service.require_role(make(UserRole.USER), UserRole.ADMIN)


async def test_authenticate_user_checks_password(seeded, session) -> None:
    user = await identity_service.authenticate_user(
        session, "Renter@Example.com", "Passw0rd!"
    )
    assert user is not None
    assert user.id == seeded["renter"].user_id
    assert await identity_service.authenticate_user(session, "renter@example.com", "nope") is None
    assert await identity_service.authenticate_user(session, "ghost@example.com", "Passw0rd!") is None
