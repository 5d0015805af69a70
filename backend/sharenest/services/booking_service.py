"""Booking confirmation workflow.

A confirmation attempt moves ``requested -> payment_verified -> persisted ->
done`` and leaves early as ``rejected``, ``payment_not_succeeded`` or
``persistence_failed``. Exactly one booking exists per payment intent; the
unique constraint in the booking store arbitrates concurrent attempts.
"""

from __future__ import annotations

import enum
import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from sharenest.core.errors import (
    BookingNotFound,
    Forbidden,
    InvalidInput,
    PaymentGatewayUnavailable,
    PaymentNotSucceeded,
    PersistenceFailed,
    SharenestError,
    Unauthenticated,
)
from sharenest.core.settings import (
    BookingSettings,
    PaymentSettings,
    get_booking_settings,
    get_payment_settings,
)
from sharenest.integrations import (
    PaymentGateway,
    PaymentGatewayError,
    PaymentIntent,
    PaymentIntentNotFound,
    PaymentIntentStatus,
)
from sharenest.models import Booking, BookingStatus, UserRole, Vehicle
from sharenest.services import booking_store, pricing_service, vehicle_service
from sharenest.services.identity_service import CallerIdentity, has_role
from sharenest.services.payments_service import charge_amount
from sharenest.services.pricing_service import Number, RateCard

logger = logging.getLogger(__name__)

# Clock skew tolerated for a client-supplied start time.
_START_GRACE = timedelta(minutes=5)


class ConfirmationState(str, enum.Enum):
    REQUESTED = "requested"
    PAYMENT_VERIFIED = "payment_verified"
    PERSISTED = "persisted"
    DONE = "done"
    REJECTED = "rejected"
    PAYMENT_NOT_SUCCEEDED = "payment_not_succeeded"
    PERSISTENCE_FAILED = "persistence_failed"


_EXIT_STATES: Mapping[type[SharenestError], ConfirmationState] = {
    Unauthenticated: ConfirmationState.REJECTED,
    Forbidden: ConfirmationState.REJECTED,
    PaymentNotSucceeded: ConfirmationState.PAYMENT_NOT_SUCCEEDED,
    PersistenceFailed: ConfirmationState.PERSISTENCE_FAILED,
}


@dataclass(slots=True)
class ConfirmationResult:
    booking: Booking
    created: bool


class _Attempt:
    """Tracks and logs the state of one confirmation attempt."""

    def __init__(self, payment_intent_id: str) -> None:
        self.payment_intent_id = payment_intent_id
        self.state = ConfirmationState.REQUESTED

    def advance(self, state: ConfirmationState) -> None:
        logger.info(
            "Booking confirmation %s: %s -> %s",
            self.payment_intent_id,
            self.state.value,
            state.value,
        )
        self.state = state

    def fail(self, exc: SharenestError) -> None:
        exit_state = _EXIT_STATES.get(type(exc), ConfirmationState.REJECTED)
        logger.warning(
            "Booking confirmation %s failed in %s -> %s: %s",
            self.payment_intent_id,
            self.state.value,
            exit_state.value,
            exc.code,
        )
        self.state = exit_state


def _ensure_owner(booking: Booking, caller: CallerIdentity) -> None:
    if booking.user_id != caller.user_id:
        raise Forbidden("Payment belongs to another user")


def _metadata_quantity(metadata: Mapping[str, str], key: str) -> Decimal | None:
    raw = metadata.get(key)
    if raw is None:
        return None
    try:
        return Decimal(raw)
    except InvalidOperation:
        return None


def _reconcile_metadata(
    intent: PaymentIntent,
    *,
    vehicle_id: str,
    hours: Decimal,
    distance: Decimal,
    caller: CallerIdentity,
) -> None:
    """Check the request describes the rental the payment was opened for."""
    metadata = intent.metadata
    if (
        metadata.get("vehicle_id") != vehicle_id
        or _metadata_quantity(metadata, "duration_hours") != hours
        or _metadata_quantity(metadata, "distance_km") != distance
    ):
        raise InvalidInput("Booking request does not match the payment")
    owner = metadata.get("user_id")
    if owner is not None and owner != str(caller.user_id):
        raise Forbidden("Payment belongs to another user")


def _ensure_replay_matches(
    booking: Booking, *, vehicle_id: str, hours: Decimal, distance: Decimal
) -> None:
    if (
        booking.vehicle_id != vehicle_id
        or Decimal(booking.duration_hours) != hours
        or Decimal(booking.distance_km) != distance
    ):
        raise InvalidInput("Booking request does not match the payment")


def _resolve_pickup(
    vehicle: Vehicle, requested: str | None, settings: BookingSettings
) -> str:
    points = list(vehicle.pickup_points or [])
    if requested:
        if points and requested not in points:
            raise InvalidInput("Pickup point is not offered for this vehicle")
        return requested
    return points[0] if points else settings.default_pickup_point


def _resolve_window(
    hours: Decimal,
    start_at: datetime | None,
    settings: BookingSettings,
    now: datetime,
) -> tuple[datetime, datetime]:
    if start_at is None:
        start = now + timedelta(hours=settings.start_offset_hours)
    else:
        start = start_at if start_at.tzinfo else start_at.replace(tzinfo=UTC)
        if start < now - _START_GRACE:
            raise InvalidInput("Rental cannot start in the past")
    try:
        return start, start + timedelta(hours=float(hours))
    except OverflowError as exc:
        raise InvalidInput("Rental ends beyond the supported calendar") from exc


async def _retrieve_intent(
    gateway: PaymentGateway | None, payment_intent_id: str
) -> PaymentIntent:
    if gateway is None:
        raise PaymentGatewayUnavailable("Payment gateway is not configured")
    try:
        return await gateway.retrieve_intent(payment_intent_id)
    except PaymentIntentNotFound as exc:
        raise PaymentNotSucceeded("Payment intent is unknown") from exc
    except PaymentGatewayError as exc:
        raise PaymentGatewayUnavailable() from exc


async def confirm_booking(
    session: AsyncSession,
    gateway: PaymentGateway | None,
    *,
    caller: CallerIdentity | None,
    payment_intent_id: str,
    vehicle_id: str,
    duration_hours: Number,
    distance_km: Number,
    pickup_point: str | None = None,
    start_at: datetime | None = None,
    payment_settings: PaymentSettings | None = None,
    booking_settings: BookingSettings | None = None,
) -> ConfirmationResult:
    """Record the booking paid for by ``payment_intent_id``.

    Safe to call repeatedly for the same payment: later calls return the
    booking created by the first. The charged amount is recomputed from the
    rate card snapshot stamped on the intent, never taken from the request.
    """

    payment_settings = payment_settings or get_payment_settings()
    booking_settings = booking_settings or get_booking_settings()
    timeout = booking_settings.database_timeout_seconds
    attempt = _Attempt(payment_intent_id)

    try:
        if caller is None:
            raise Unauthenticated()
        if booking_settings.requires_verified_license and not caller.is_verified:
            raise Forbidden("Driver license verification required")
        if not payment_intent_id:
            raise InvalidInput("payment_intent_id is required")
        hours = pricing_service.to_quantity(duration_hours, "duration_hours")
        distance = pricing_service.to_quantity(distance_km, "distance_km")

        existing = await booking_store.get_booking_by_payment_intent(
            session, payment_intent_id, timeout=timeout
        )
        if existing is not None:
            _ensure_owner(existing, caller)
            _ensure_replay_matches(
                existing, vehicle_id=vehicle_id, hours=hours, distance=distance
            )
            logger.info(
                "Booking confirmation %s replayed; returning %s",
                payment_intent_id,
                existing.id,
            )
            attempt.advance(ConfirmationState.DONE)
            return ConfirmationResult(booking=existing, created=False)

        intent = await _retrieve_intent(gateway, payment_intent_id)
        if intent.status is not PaymentIntentStatus.SUCCEEDED:
            raise PaymentNotSucceeded(f"Payment status is {intent.status.value}")
        attempt.advance(ConfirmationState.PAYMENT_VERIFIED)

        _reconcile_metadata(
            intent, vehicle_id=vehicle_id, hours=hours, distance=distance, caller=caller
        )
        vehicle = await vehicle_service.require_vehicle(
            session, vehicle_id, include_inactive=True
        )
        rate_card = RateCard.from_metadata(intent.metadata) or pricing_service.rate_card_for(
            vehicle
        )
        insurance = int(
            intent.metadata.get("insurance_amount", payment_settings.insurance_flat_fee)
        )
        breakdown = pricing_service.compute_price(
            rate_card, hours, distance, insurance_amount=insurance
        )
        captured = charge_amount(breakdown, payment_settings.minimum_amount)
        if intent.amount != captured:
            raise InvalidInput("Payment amount does not match the booking price")

        now = datetime.now(UTC)
        start, end = _resolve_window(hours, start_at, booking_settings, now)
        booking = Booking(
            id=uuid.uuid4(),
            user_id=caller.user_id,
            vehicle_id=vehicle.id,
            start_at=start,
            end_at=end,
            pickup_point=_resolve_pickup(vehicle, pickup_point, booking_settings),
            duration_hours=hours,
            distance_km=distance,
            payment_intent_id=intent.id,
            status=BookingStatus.CONFIRMED,
            charges={
                "amount": breakdown.total_amount,
                "captured_amount": intent.amount,
                "currency": intent.currency,
                "paid_at": now.isoformat(),
                "rate_version": rate_card.version,
                "breakdown": breakdown.to_dict(),
            },
        )
        stored, created = await booking_store.insert_booking(
            session, booking, timeout=timeout
        )
        attempt.advance(ConfirmationState.PERSISTED)
        if not created:
            _ensure_owner(stored, caller)
            _ensure_replay_matches(
                stored, vehicle_id=vehicle_id, hours=hours, distance=distance
            )
        attempt.advance(ConfirmationState.DONE)
        return ConfirmationResult(booking=stored, created=created)
    except SharenestError as exc:
        attempt.fail(exc)
        raise


async def get_booking_for(
    session: AsyncSession, caller: CallerIdentity, booking_id: uuid.UUID
) -> Booking:
    """Return a booking visible to the caller.

    Renters see their own bookings, owners also see bookings of their
    vehicles and admins see everything.
    """

    booking = await booking_store.get_booking(session, booking_id)
    if booking is None:
        raise BookingNotFound()
    if booking.user_id == caller.user_id or has_role(caller, UserRole.ADMIN):
        return booking
    if caller.role is UserRole.OWNER:
        vehicle = await vehicle_service.get_vehicle(session, booking.vehicle_id)
        if vehicle is not None and vehicle.owner_id == caller.user_id:
            return booking
    raise BookingNotFound()


async def list_bookings_for(
    session: AsyncSession,
    caller: CallerIdentity,
    *,
    scope: str = "mine",
    skip: int = 0,
    limit: int = 50,
) -> list[Booking]:
    """List bookings for ``scope`` ``mine``, ``owned`` (owner+) or ``all`` (admin)."""

    if scope == "mine":
        return await booking_store.list_bookings(
            session, user_id=caller.user_id, skip=skip, limit=limit
        )
    if scope == "owned":
        if not has_role(caller, UserRole.OWNER):
            raise Forbidden("owner role required")
        vehicles = await vehicle_service.list_owned_vehicle_ids(session, caller.user_id)
        return await booking_store.list_bookings(
            session, vehicle_ids=vehicles, skip=skip, limit=limit
        )
    if scope == "all":
        if not has_role(caller, UserRole.ADMIN):
            raise Forbidden("admin role required")
        return await booking_store.list_bookings(session, skip=skip, limit=limit)
    raise InvalidInput(f"Unknown booking scope {scope}")
