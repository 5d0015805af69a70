"""Service layer for creating payment intents for rentals."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from sharenest.core.errors import PaymentGatewayUnavailable
from sharenest.core.settings import PaymentSettings, get_payment_settings
from sharenest.integrations import PaymentGateway, PaymentGatewayError
from sharenest.services import pricing_service, vehicle_service
from sharenest.services.identity_service import CallerIdentity
from sharenest.services.pricing_service import Number, PriceBreakdown, RateCard

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IntentResult:
    """What the client needs to collect the card for a rental."""

    intent_id: str
    client_handle: str
    amount: int
    currency: str
    breakdown: PriceBreakdown


def format_quantity(value: Decimal) -> str:
    """Canonical text form used in intent metadata (``30``, ``12.5``)."""
    return format(value.normalize(), "f")


def charge_amount(breakdown: PriceBreakdown, minimum_amount: int) -> int:
    """Amount sent to the gateway; low totals are clamped up to its floor."""
    return max(breakdown.total_amount, minimum_amount)


def build_metadata(
    *,
    vehicle_id: str,
    hours: Decimal,
    distance: Decimal,
    rate_card: RateCard,
    insurance_amount: int,
    caller: CallerIdentity | None,
) -> dict[str, str]:
    metadata = {
        "vehicle_id": vehicle_id,
        "duration_hours": format_quantity(hours),
        "distance_km": format_quantity(distance),
        "insurance_amount": str(insurance_amount),
        **rate_card.to_metadata(),
    }
    if caller is not None:
        metadata["user_id"] = str(caller.user_id)
    return metadata


async def create_intent(
    session: AsyncSession,
    gateway: PaymentGateway | None,
    *,
    vehicle_id: str,
    duration_hours: Number,
    distance_km: Number,
    caller: CallerIdentity | None = None,
    idempotency_key: str | None = None,
    settings: PaymentSettings | None = None,
) -> IntentResult:
    """Price the rental server-side and open a payment intent for it.

    The vehicle is loaded before the gateway is contacted. Each call makes at
    most one authorization request; repeated calls may open distinct intents,
    booking confirmation is what guarantees a single booking per payment.
    """

    settings = settings or get_payment_settings()
    hours = pricing_service.to_quantity(duration_hours, "duration_hours")
    distance = pricing_service.to_quantity(distance_km, "distance_km")

    vehicle = await vehicle_service.require_vehicle(session, vehicle_id)
    rate_card = pricing_service.rate_card_for(vehicle)
    breakdown = pricing_service.compute_price(
        rate_card, hours, distance, insurance_amount=settings.insurance_flat_fee
    )
    amount = charge_amount(breakdown, settings.minimum_amount)

    if gateway is None:
        raise PaymentGatewayUnavailable("Payment gateway is not configured")

    metadata = build_metadata(
        vehicle_id=vehicle.id,
        hours=hours,
        distance=distance,
        rate_card=rate_card,
        insurance_amount=breakdown.insurance_amount,
        caller=caller,
    )
    try:
        intent = await gateway.create_intent(
            amount=amount,
            currency=settings.currency,
            metadata=metadata,
            idempotency_key=idempotency_key,
        )
    except PaymentGatewayError as exc:
        logger.warning("Payment intent creation failed for vehicle %s", vehicle.id)
        raise PaymentGatewayUnavailable() from exc
    if not intent.client_secret:
        raise PaymentGatewayUnavailable("Payment gateway returned no client secret")

    logger.info(
        "Created payment intent %s for vehicle %s amount=%s %s",
        intent.id,
        vehicle.id,
        amount,
        settings.currency,
    )
    return IntentResult(
        intent_id=intent.id,
        client_handle=intent.client_secret,
        amount=amount,
        currency=settings.currency,
        breakdown=breakdown,
    )
