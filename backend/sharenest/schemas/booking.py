"""Booking schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import Field

from sharenest.models.booking import BookingStatus
from sharenest.schemas.base import APIModel
from sharenest.schemas.pricing import PriceBreakdownRead, RentalRequest


class BookingConfirmRequest(RentalRequest):
    """Confirmation payload; the amount is always recomputed server-side."""

    payment_intent_id: str = Field(min_length=1, max_length=255)
    pickup_point: str | None = Field(default=None, max_length=255)
    start_at: datetime | None = None


class BookingCharges(APIModel):
    amount: int
    captured_amount: int | None = None
    rate_version: int | None = None
    currency: str
    paid_at: datetime
    breakdown: PriceBreakdownRead | None = None


class BookingRead(APIModel):
    id: uuid.UUID
    user_id: uuid.UUID
    vehicle_id: str
    start_at: datetime
    end_at: datetime
    pickup_point: str
    duration_hours: Decimal
    distance_km: Decimal
    payment_intent_id: str
    status: BookingStatus
    charges: BookingCharges
    created_at: datetime
