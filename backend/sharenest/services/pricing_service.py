"""Pricing engine for vehicle rentals.

``compute_price`` is pure: the preview endpoint, intent creation and booking
confirmation all call it and must agree to the yen.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from sharenest.core.errors import InvalidInput
from sharenest.models import Vehicle
from sharenest.schemas.pricing import MAX_DISTANCE_KM, MAX_RENTAL_HOURS, QUANTITY_PLACES
from sharenest.services import vehicle_service

DEFAULT_INSURANCE_AMOUNT = 1000
HOURS_PER_DAY = 24

_QUANTITY_STEP = Decimal(1).scaleb(-QUANTITY_PLACES)
_QUANTITY_LIMITS = {"duration_hours": MAX_RENTAL_HOURS, "distance_km": MAX_DISTANCE_KM}

Number = Decimal | int | float | str


@dataclass(frozen=True, slots=True)
class RateCard:
    """Snapshot of a vehicle's prices at quote time."""

    daily_rate: int
    hourly_rate: int
    per_km_rate: int
    deposit_amount: int
    version: int = 1

    def to_metadata(self) -> dict[str, str]:
        return {
            "daily_rate": str(self.daily_rate),
            "hourly_rate": str(self.hourly_rate),
            "per_km_rate": str(self.per_km_rate),
            "deposit_amount": str(self.deposit_amount),
            "rate_version": str(self.version),
        }

    @classmethod
    def from_metadata(cls, metadata: Mapping[str, str]) -> "RateCard | None":
        """Rebuild a snapshot stamped on a payment intent, if one is present."""
        try:
            return cls(
                daily_rate=int(metadata["daily_rate"]),
                hourly_rate=int(metadata["hourly_rate"]),
                per_km_rate=int(metadata["per_km_rate"]),
                deposit_amount=int(metadata["deposit_amount"]),
                version=int(metadata.get("rate_version", "1")),
            )
        except (KeyError, ValueError):
            return None


@dataclass(frozen=True, slots=True)
class PriceBreakdown:
    """Itemized cost of a prospective rental, in integer yen."""

    base_amount: int
    distance_amount: int
    insurance_amount: int
    deposit_amount: int
    total_amount: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def rate_card_for(vehicle: Vehicle) -> RateCard:
    """Snapshot the vehicle's current rate columns."""
    return RateCard(
        daily_rate=vehicle.daily_rate,
        hourly_rate=vehicle.hourly_rate,
        per_km_rate=vehicle.per_km_rate,
        deposit_amount=vehicle.deposit_amount,
        version=vehicle.rate_version,
    )


def to_quantity(value: Number, field: str) -> Decimal:
    """Parse a non-negative, finite quantity with at most two decimal places.

    Quantities are priced exactly as the booking stores them, so anything
    the ``Numeric(10, 2)`` columns would round is rejected.
    """
    try:
        quantity = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidInput(f"{field} must be a number") from exc
    if not quantity.is_finite():
        raise InvalidInput(f"{field} must be finite")
    if quantity < 0:
        raise InvalidInput(f"{field} must not be negative")
    limit = _QUANTITY_LIMITS.get(field, MAX_DISTANCE_KM)
    if quantity > limit:
        raise InvalidInput(f"{field} must not exceed {limit}")
    if quantity != quantity.quantize(_QUANTITY_STEP):
        raise InvalidInput(f"{field} allows at most {QUANTITY_PLACES} decimal places")
    return quantity.quantize(_QUANTITY_STEP)


def _round_yen(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_price(
    rate_card: RateCard,
    duration_hours: Number,
    distance_km: Number,
    *,
    insurance_amount: int = DEFAULT_INSURANCE_AMOUNT,
) -> PriceBreakdown:
    """Price a rental from a rate card, a duration and a distance estimate.

    Whole days are billed at the daily rate and the remainder at the hourly
    rate. Each fractional product is rounded half-up before summing.
    """

    hours = to_quantity(duration_hours, "duration_hours")
    distance = to_quantity(distance_km, "distance_km")
    for name in ("daily_rate", "hourly_rate", "per_km_rate", "deposit_amount"):
        if getattr(rate_card, name) < 0:
            raise InvalidInput(f"{name} must not be negative")
    if insurance_amount < 0:
        raise InvalidInput("insurance_amount must not be negative")

    days = int(hours // HOURS_PER_DAY)
    remaining_hours = hours % HOURS_PER_DAY

    base_amount = days * rate_card.daily_rate + _round_yen(
        remaining_hours * rate_card.hourly_rate
    )
    distance_amount = (
        _round_yen(distance * rate_card.per_km_rate) if rate_card.per_km_rate > 0 else 0
    )
    deposit_amount = rate_card.deposit_amount
    total_amount = base_amount + distance_amount + insurance_amount + deposit_amount

    return PriceBreakdown(
        base_amount=base_amount,
        distance_amount=distance_amount,
        insurance_amount=insurance_amount,
        deposit_amount=deposit_amount,
        total_amount=total_amount,
    )


async def quote_vehicle(
    session: AsyncSession,
    *,
    vehicle_id: str,
    duration_hours: Number,
    distance_km: Number,
    insurance_amount: int = DEFAULT_INSURANCE_AMOUNT,
) -> tuple[Vehicle, PriceBreakdown]:
    """Price a rental against the vehicle's current rate card."""

    vehicle = await vehicle_service.require_vehicle(session, vehicle_id)
    breakdown = compute_price(
        rate_card_for(vehicle),
        duration_hours,
        distance_km,
        insurance_amount=insurance_amount,
    )
    return vehicle, breakdown
