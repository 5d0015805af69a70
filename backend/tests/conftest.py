"""Test fixtures for the ShareNest backend."""
from __future__ import annotations

import asyncio
import itertools
import os
from collections.abc import AsyncIterator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.pop("STRIPE_SECRET_KEY", None)
os.environ.pop("ADMIN_PRIMARY_EMAIL", None)

from sharenest.api import deps
from sharenest.core.config import get_settings
from sharenest.core.security import get_password_hash
from sharenest.db.base import Base
from sharenest.db.session import dispose_engine, get_sessionmaker
from sharenest.integrations import (
    PaymentGatewayError,
    PaymentIntent,
    PaymentIntentNotFound,
    PaymentIntentStatus,
)
from sharenest.main import app
from sharenest.models import User, UserRole, UserStatus, Vehicle
from sharenest.services.identity_service import CallerIdentity

RENTER_PASSWORD = "Passw0rd!"


class FakeGateway:
    """In-memory payment gateway with controllable outcomes."""

    def __init__(self) -> None:
        self.intents: dict[str, PaymentIntent] = {}
        self.unavailable = False
        self.create_calls: list[dict[str, Any]] = []
        self.retrieve_calls = 0
        self.latency = 0.0
        self._ids = itertools.count(1)

    async def create_intent(
        self,
        *,
        amount: int,
        currency: str,
        metadata: dict[str, Any],
        idempotency_key: str | None = None,
    ) -> PaymentIntent:
        self.create_calls.append(
            {
                "amount": amount,
                "currency": currency,
                "metadata": dict(metadata),
                "idempotency_key": idempotency_key,
            }
        )
        await asyncio.sleep(self.latency)
        if self.unavailable:
            raise PaymentGatewayError("gateway unreachable")
        intent_id = f"pi_test_{next(self._ids)}"
        intent = PaymentIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret_fake",
            amount=amount,
            currency=currency,
            status=PaymentIntentStatus.CREATED,
            metadata={key: str(value) for key, value in metadata.items()},
        )
        self.intents[intent_id] = intent
        return intent

    async def retrieve_intent(self, payment_intent_id: str) -> PaymentIntent:
        self.retrieve_calls += 1
        await asyncio.sleep(self.latency)
        if self.unavailable:
            raise PaymentGatewayError("gateway unreachable")
        intent = self.intents.get(payment_intent_id)
        if intent is None:
            raise PaymentIntentNotFound(payment_intent_id)
        return intent

    def add_intent(
        self,
        intent_id: str,
        *,
        amount: int,
        metadata: dict[str, str],
        status: PaymentIntentStatus = PaymentIntentStatus.SUCCEEDED,
        currency: str = "jpy",
    ) -> PaymentIntent:
        intent = PaymentIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret_fake",
            amount=amount,
            currency=currency,
            status=status,
            metadata=dict(metadata),
        )
        self.intents[intent_id] = intent
        return intent

    def mark_succeeded(self, intent_id: str) -> None:
        self.intents[intent_id].status = PaymentIntentStatus.SUCCEEDED

    def mark_failed(self, intent_id: str) -> None:
        self.intents[intent_id].status = PaymentIntentStatus.FAILED


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def session(reset_database: None, db_url: str) -> AsyncIterator[AsyncSession]:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as db_session:
        yield db_session


@pytest.fixture()
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest_asyncio.fixture()
async def seeded(session: AsyncSession) -> dict[str, Any]:
    """Two renters, an admin and two catalog vehicles."""
    renter = User(
        email="renter@example.com",
        hashed_password=get_password_hash(RENTER_PASSWORD),
        name="Riko Renter",
        role=UserRole.USER,
        status=UserStatus.ACTIVE,
    )
    other = User(
        email="other@example.com",
        hashed_password=get_password_hash(RENTER_PASSWORD),
        name="Olli Other",
        role=UserRole.USER,
        status=UserStatus.ACTIVE,
    )
    admin = User(
        email="admin@example.com",
        hashed_password=get_password_hash(RENTER_PASSWORD),
        name="Ada Admin",
        role=UserRole.ADMIN,
        status=UserStatus.ACTIVE,
        is_verified=True,
    )
    sakura = Vehicle(
        id="sakura-2023",
        title="Nissan SAKURA",
        brand="Nissan",
        model="SAKURA",
        year=2023,
        seats=4,
        powertrain="EV",
        range_km=100,
        daily_rate=6000,
        hourly_rate=800,
        per_km_rate=0,
        deposit_amount=30000,
        pickup_points=["Kyoto Station", "Shijo Kawaramachi"],
    )
    model3 = Vehicle(
        id="model3p-2022",
        title="Tesla Model 3 Performance",
        brand="Tesla",
        model="Model 3 Performance",
        year=2022,
        seats=5,
        powertrain="EV",
        range_km=400,
        daily_rate=20000,
        hourly_rate=0,
        per_km_rate=25,
        deposit_amount=50000,
        pickup_points=["Kyoto Station", "Osaka Umeda"],
    )
    session.add_all([renter, other, admin, sakura, model3])
    await session.commit()
    return {
        "renter": CallerIdentity.from_user(renter),
        "other": CallerIdentity.from_user(other),
        "admin": CallerIdentity.from_user(admin),
        "renter_user": renter,
        "admin_user": admin,
        "sakura": sakura,
        "model3": model3,
    }


@pytest_asyncio.fixture()
async def app_context(
    seeded: dict[str, Any], fake_gateway: FakeGateway
) -> AsyncIterator[dict[str, Any]]:
    """Yield an async client wired to the fake gateway plus seeded data."""
    app.dependency_overrides[deps.get_payment_gateway] = lambda: fake_gateway
    context = dict(seeded)
    context["gateway"] = fake_gateway
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            context["client"] = client
            yield context
    finally:
        app.dependency_overrides.pop(deps.get_payment_gateway, None)
