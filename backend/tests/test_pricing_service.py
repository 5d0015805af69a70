"""Tests for the pricing engine."""

from __future__ import annotations

from decimal import Decimal

import pytest

from sharenest.core.errors import InvalidInput, VehicleNotFound
from sharenest.services import pricing_service
from sharenest.services.pricing_service import RateCard

SAKURA_CARD = RateCard(daily_rate=6000, hourly_rate=800, per_km_rate=0, deposit_amount=30000)
MODEL3_CARD = RateCard(daily_rate=20000, hourly_rate=0, per_km_rate=25, deposit_amount=50000)


def test_day_plus_remaining_hours() -> None:
    breakdown = pricing_service.compute_price(SAKURA_CARD, 30, 0)
    assert breakdown.base_amount == 10800
    assert breakdown.distance_amount == 0
    assert breakdown.insurance_amount == 1000
    assert breakdown.deposit_amount == 30000
    assert breakdown.total_amount == 41800


def test_distance_billed_per_km() -> None:
    breakdown = pricing_service.compute_price(MODEL3_CARD, 24, 400)
    assert breakdown.base_amount == 20000
    assert breakdown.distance_amount == 10000
    assert breakdown.total_amount == 20000 + 10000 + 1000 + 50000


def test_zero_per_km_rate_ignores_distance() -> None:
    breakdown = pricing_service.compute_price(SAKURA_CARD, 2, 5000)
    assert breakdown.distance_amount == 0
    assert breakdown.base_amount == 1600


def test_fractional_products_round_half_up() -> None:
    card = RateCard(daily_rate=0, hourly_rate=5, per_km_rate=3, deposit_amount=0)
    breakdown = pricing_service.compute_price(
        card, Decimal("0.5"), Decimal("0.5"), insurance_amount=0
    )
    # 2.5 -> 3 and 1.5 -> 2
    assert breakdown.base_amount == 3
    assert breakdown.distance_amount == 2
    assert breakdown.total_amount == 5


def test_exact_multiple_of_day_has_no_hourly_part() -> None:
    breakdown = pricing_service.compute_price(SAKURA_CARD, 48, 0)
    assert breakdown.base_amount == 12000


def test_zero_duration_still_charges_fixed_parts() -> None:
    breakdown = pricing_service.compute_price(SAKURA_CARD, 0, 0)
    assert breakdown.base_amount == 0
    assert breakdown.total_amount == 31000


def test_insurance_amount_is_configurable() -> None:
    breakdown = pricing_service.compute_price(SAKURA_CARD, 30, 0, insurance_amount=1500)
    assert breakdown.insurance_amount == 1500
    assert breakdown.total_amount == 42300


def test_total_is_sum_of_parts() -> None:
    for hours in ("1", "23.5", "24", "25.25", "72", "100"):
        for km in ("0", "12.4", "400"):
            breakdown = pricing_service.compute_price(MODEL3_CARD, hours, km)
            assert breakdown.total_amount == (
                breakdown.base_amount
                + breakdown.distance_amount
                + breakdown.insurance_amount
                + breakdown.deposit_amount
            )


def test_compute_price_is_deterministic() -> None:
    first = pricing_service.compute_price(MODEL3_CARD, "49.5", "123.4")
    second = pricing_service.compute_price(MODEL3_CARD, Decimal("49.5"), Decimal("123.4"))
    assert first == second
    assert first.to_dict() == second.to_dict()


@pytest.mark.parametrize(
    ("hours", "km"),
    [(-1, 0), (1, -5), ("abc", 0), ("NaN", 0), ("Infinity", 0)],
)
def test_invalid_quantities_rejected(hours: object, km: object) -> None:
    with pytest.raises(InvalidInput):
        pricing_service.compute_price(SAKURA_CARD, hours, km)  # type: ignore[arg-type]


def test_negative_rate_rejected() -> None:
    card = RateCard(daily_rate=-1, hourly_rate=0, per_km_rate=0, deposit_amount=0)
    with pytest.raises(InvalidInput):
        pricing_service.compute_price(card, 1, 0)


def test_rate_card_metadata_snapshot() -> None:
    card = RateCard(
        daily_rate=6000, hourly_rate=800, per_km_rate=0, deposit_amount=30000, version=3
    )
    assert RateCard.from_metadata(card.to_metadata()) == card
    assert RateCard.from_metadata({"vehicle_id": "sakura-2023"}) is None
    assert RateCard.from_metadata({**card.to_metadata(), "daily_rate": "oops"}) is None


@pytest.mark.asyncio
async def test_quote_vehicle_uses_catalog_rates(seeded, session) -> None:
    vehicle, breakdown = await pricing_service.quote_vehicle(
        session, vehicle_id="sakura-2023", duration_hours=30, distance_km=0
    )
    assert vehicle.id == "sakura-2023"
    assert breakdown.total_amount == 41800


@pytest.mark.asyncio
async def test_quote_unknown_vehicle(seeded, session) -> None:
    with pytest.raises(VehicleNotFound):
        await pricing_service.quote_vehicle(
            session, vehicle_id="missing", duration_hours=1, distance_km=0
        )
