"""Pricing schema definitions."""

from __future__ import annotations

from decimal import Decimal

from pydantic import Field

from sharenest.schemas.base import APIModel

# Rentals are booked for at most a year; booking columns are Numeric(10, 2).
MAX_RENTAL_HOURS = Decimal("8760")
MAX_DISTANCE_KM = Decimal("100000")
QUANTITY_PLACES = 2


class RentalRequest(APIModel):
    """Vehicle, duration and distance shared by quote and intent requests."""

    vehicle_id: str = Field(min_length=1, max_length=64)
    hours: Decimal = Field(
        ge=0, le=MAX_RENTAL_HOURS, decimal_places=QUANTITY_PLACES, allow_inf_nan=False
    )
    distance_km: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        le=MAX_DISTANCE_KM,
        decimal_places=QUANTITY_PLACES,
        allow_inf_nan=False,
    )


class PriceBreakdownRead(APIModel):
    """Itemized rental cost in the smallest currency unit."""

    base_amount: int
    distance_amount: int
    insurance_amount: int
    deposit_amount: int
    total_amount: int


class PricingQuoteRead(APIModel):
    vehicle_id: str
    hours: Decimal
    distance_km: Decimal
    rate_version: int
    breakdown: PriceBreakdownRead
