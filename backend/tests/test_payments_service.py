"""Payment intent service tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

from sharenest.core.errors import InvalidInput, PaymentGatewayUnavailable, VehicleNotFound
from sharenest.core.settings import PaymentSettings
from sharenest.services import payments_service

pytestmark = pytest.mark.asyncio


async def test_create_intent_prices_server_side(seeded, session, fake_gateway) -> None:
    result = await payments_service.create_intent(
        session,
        fake_gateway,
        vehicle_id="sakura-2023",
        duration_hours=30,
        distance_km=0,
        caller=seeded["renter"],
    )

    assert result.amount == 41800
    assert result.currency == "jpy"
    assert result.breakdown.total_amount == 41800
    assert result.client_handle.startswith(result.intent_id)

    call = fake_gateway.create_calls[0]
    assert call["amount"] == 41800
    metadata = call["metadata"]
    assert metadata["vehicle_id"] == "sakura-2023"
    assert metadata["duration_hours"] == "30"
    assert metadata["distance_km"] == "0"
    assert metadata["daily_rate"] == "6000"
    assert metadata["hourly_rate"] == "800"
    assert metadata["rate_version"] == "1"
    assert metadata["insurance_amount"] == "1000"
    assert metadata["user_id"] == str(seeded["renter"].user_id)


async def test_anonymous_intent_has_no_user(seeded, session, fake_gateway) -> None:
    await payments_service.create_intent(
        session,
        fake_gateway,
        vehicle_id="model3p-2022",
        duration_hours=Decimal("24"),
        distance_km=Decimal("400.0"),
    )
    metadata = fake_gateway.create_calls[0]["metadata"]
    assert "user_id" not in metadata
    assert metadata["distance_km"] == "400"
    assert fake_gateway.create_calls[0]["amount"] == 81000


async def test_unknown_vehicle_fails_before_gateway(seeded, session, fake_gateway) -> None:
    with pytest.raises(VehicleNotFound):
        await payments_service.create_intent(
            session, fake_gateway, vehicle_id="missing", duration_hours=1, distance_km=0
        )
    assert fake_gateway.create_calls == []


async def test_invalid_duration_rejected(seeded, session, fake_gateway) -> None:
    with pytest.raises(InvalidInput):
        await payments_service.create_intent(
            session, fake_gateway, vehicle_id="sakura-2023", duration_hours=-2, distance_km=0
        )
    assert fake_gateway.create_calls == []


async def test_gateway_failure_is_retryable(seeded, session, fake_gateway) -> None:
    fake_gateway.unavailable = True
    with pytest.raises(PaymentGatewayUnavailable) as excinfo:
        await payments_service.create_intent(
            session, fake_gateway, vehicle_id="sakura-2023", duration_hours=1, distance_km=0
        )
    assert excinfo.value.retryable is True


async def test_missing_gateway_fails_closed(seeded, session) -> None:
    with pytest.raises(PaymentGatewayUnavailable):
        await payments_service.create_intent(
            session, None, vehicle_id="sakura-2023", duration_hours=1, distance_km=0
        )


async def test_amount_clamped_to_gateway_minimum(seeded, session, fake_gateway) -> None:
    settings = PaymentSettings(minimum_amount=50, insurance_flat_fee=0)
    seeded["sakura"].deposit_amount = 0
    await session.commit()

    result = await payments_service.create_intent(
        session,
        fake_gateway,
        vehicle_id="sakura-2023",
        duration_hours=Decimal("0.05"),
        distance_km=0,
        settings=settings,
    )
    assert result.breakdown.total_amount == 40
    assert result.amount == 50


async def test_idempotency_key_forwarded(seeded, session, fake_gateway) -> None:
    await payments_service.create_intent(
        session,
        fake_gateway,
        vehicle_id="sakura-2023",
        duration_hours=1,
        distance_km=0,
        idempotency_key="checkout-42",
    )
    assert fake_gateway.create_calls[0]["idempotency_key"] == "checkout-42"
