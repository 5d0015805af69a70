"""Durable booking storage keyed uniquely by payment intent."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sharenest.core.errors import PersistenceFailed
from sharenest.models import Booking

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


async def get_booking_by_payment_intent(
    session: AsyncSession,
    payment_intent_id: str,
    *,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> Booking | None:
    """Return the booking recorded for a payment intent, if any."""
    stmt = select(Booking).where(Booking.payment_intent_id == payment_intent_id)
    try:
        async with asyncio.timeout(timeout):
            result = await session.execute(stmt)
    except (SQLAlchemyError, TimeoutError) as exc:
        raise PersistenceFailed("Booking store is unavailable") from exc
    return result.scalar_one_or_none()


async def get_booking(session: AsyncSession, booking_id: uuid.UUID) -> Booking | None:
    """Return a booking by ID."""
    return await session.get(Booking, booking_id)


async def list_bookings(
    session: AsyncSession,
    *,
    user_id: uuid.UUID | None = None,
    vehicle_ids: Iterable[str] | None = None,
    skip: int = 0,
    limit: int = 50,
) -> list[Booking]:
    """Return bookings newest first, optionally filtered by user or vehicles."""
    stmt = select(Booking)
    if user_id is not None:
        stmt = stmt.where(Booking.user_id == user_id)
    if vehicle_ids is not None:
        stmt = stmt.where(Booking.vehicle_id.in_(list(vehicle_ids)))
    stmt = stmt.order_by(Booking.created_at.desc()).offset(skip).limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def insert_booking(
    session: AsyncSession,
    booking: Booking,
    *,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> tuple[Booking, bool]:
    """Insert ``booking`` unless one already exists for its payment intent.

    Returns the stored row and whether this call created it. A concurrent
    writer that loses the unique-constraint race gets the winner's row back.
    Any other storage failure raises ``PersistenceFailed``.
    """

    session.add(booking)
    try:
        async with asyncio.timeout(timeout):
            await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        existing = await get_booking_by_payment_intent(
            session, booking.payment_intent_id, timeout=timeout
        )
        if existing is None:
            logger.error(
                "Booking insert for %s violated a constraint",
                booking.payment_intent_id,
            )
            raise PersistenceFailed() from exc
        logger.info(
            "Booking for payment %s already stored as %s",
            booking.payment_intent_id,
            existing.id,
        )
        return existing, False
    except (SQLAlchemyError, TimeoutError) as exc:
        await session.rollback()
        logger.exception("Booking insert for %s failed", booking.payment_intent_id)
        raise PersistenceFailed() from exc

    await session.refresh(booking)
    return booking, True
