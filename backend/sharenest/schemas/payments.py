"""Schemas for payment operations."""

from __future__ import annotations

from sharenest.schemas.base import APIModel
from sharenest.schemas.pricing import PriceBreakdownRead, RentalRequest


class PaymentIntentCreateRequest(RentalRequest):
    """Request payload for creating a payment intent. Carries no price."""


class PaymentIntentCreateResponse(APIModel):
    """Response payload returned when creating a payment intent."""

    payment_intent_id: str
    client_handle: str
    amount: int
    currency: str
    breakdown: PriceBreakdownRead
