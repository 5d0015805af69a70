"""Pricing-related API endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sharenest.api import deps
from sharenest.api.errors import to_http_exception
from sharenest.core.errors import SharenestError
from sharenest.core.settings import get_payment_settings
from sharenest.schemas.pricing import PriceBreakdownRead, PricingQuoteRead, RentalRequest
from sharenest.services import pricing_service

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.post("/quote", response_model=PricingQuoteRead, summary="Quote rental pricing")
async def quote_rental_pricing(
    payload: RentalRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> PricingQuoteRead:
    try:
        vehicle, breakdown = await pricing_service.quote_vehicle(
            session,
            vehicle_id=payload.vehicle_id,
            duration_hours=payload.hours,
            distance_km=payload.distance_km,
            insurance_amount=get_payment_settings().insurance_flat_fee,
        )
    except SharenestError as exc:
        raise to_http_exception(exc) from exc
    return PricingQuoteRead(
        vehicle_id=vehicle.id,
        hours=payload.hours,
        distance_km=payload.distance_km,
        rate_version=vehicle.rate_version,
        breakdown=PriceBreakdownRead.model_validate(breakdown),
    )
