"""Payments API opening Stripe intents for rentals."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from sharenest.api import deps
from sharenest.api.errors import to_http_exception
from sharenest.core.errors import SharenestError
from sharenest.integrations import PaymentGateway
from sharenest.schemas.payments import (
    PaymentIntentCreateRequest,
    PaymentIntentCreateResponse,
)
from sharenest.schemas.pricing import PriceBreakdownRead
from sharenest.services import payments_service
from sharenest.services.identity_service import CallerIdentity

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/intent", response_model=PaymentIntentCreateResponse)
async def create_payment_intent(
    payload: PaymentIntentCreateRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    gateway: Annotated[PaymentGateway | None, Depends(deps.get_payment_gateway)],
    caller: Annotated[CallerIdentity | None, Depends(deps.get_optional_caller)],
    idempotency_key: Annotated[str | None, Header(alias="Idempotency-Key")] = None,
) -> PaymentIntentCreateResponse:
    """Price the rental server-side and return the handle the client pays with."""
    try:
        result = await payments_service.create_intent(
            session,
            gateway,
            vehicle_id=payload.vehicle_id,
            duration_hours=payload.hours,
            distance_km=payload.distance_km,
            caller=caller,
            idempotency_key=idempotency_key,
        )
    except SharenestError as exc:
        raise to_http_exception(exc) from exc
    return PaymentIntentCreateResponse(
        payment_intent_id=result.intent_id,
        client_handle=result.client_handle,
        amount=result.amount,
        currency=result.currency,
        breakdown=PriceBreakdownRead.model_validate(result.breakdown),
    )
