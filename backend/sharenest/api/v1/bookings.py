"""Booking confirmation and lookup endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from sharenest.api import deps
from sharenest.api.errors import to_http_exception
from sharenest.core.errors import SharenestError
from sharenest.integrations import PaymentGateway
from sharenest.schemas.booking import BookingConfirmRequest, BookingRead
from sharenest.services import booking_service
from sharenest.services.identity_service import CallerIdentity

router = APIRouter()


@router.post(
    "/confirm",
    response_model=BookingRead,
    status_code=status.HTTP_201_CREATED,
    summary="Confirm a paid booking",
)
async def confirm_booking(
    payload: BookingConfirmRequest,
    response: Response,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    gateway: Annotated[PaymentGateway | None, Depends(deps.get_payment_gateway)],
    caller: Annotated[CallerIdentity, Depends(deps.get_current_caller)],
) -> BookingRead:
    """Record the booking for a succeeded payment.

    Returns 201 when this call created the booking and 200 when the payment
    was already confirmed.
    """
    try:
        result = await booking_service.confirm_booking(
            session,
            gateway,
            caller=caller,
            payment_intent_id=payload.payment_intent_id,
            vehicle_id=payload.vehicle_id,
            duration_hours=payload.hours,
            distance_km=payload.distance_km,
            pickup_point=payload.pickup_point,
            start_at=payload.start_at,
        )
    except SharenestError as exc:
        raise to_http_exception(exc) from exc
    if not result.created:
        response.status_code = status.HTTP_200_OK
    return BookingRead.model_validate(result.booking)


@router.get("", response_model=list[BookingRead], summary="List bookings")
async def list_bookings(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    caller: Annotated[CallerIdentity, Depends(deps.get_current_caller)],
    scope: Literal["mine", "owned", "all"] = "mine",
    skip: int = 0,
    limit: int = 50,
) -> list[BookingRead]:
    try:
        bookings = await booking_service.list_bookings_for(
            session, caller, scope=scope, skip=skip, limit=min(limit, 100)
        )
    except SharenestError as exc:
        raise to_http_exception(exc) from exc
    return [BookingRead.model_validate(obj) for obj in bookings]


@router.get("/{booking_id}", response_model=BookingRead, summary="Get booking")
async def get_booking(
    booking_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    caller: Annotated[CallerIdentity, Depends(deps.get_current_caller)],
) -> BookingRead:
    try:
        booking = await booking_service.get_booking_for(session, caller, booking_id)
    except SharenestError as exc:
        raise to_http_exception(exc) from exc
    return BookingRead.model_validate(booking)
