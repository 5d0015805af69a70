"""Specialized settings adapters for integrations."""

from __future__ import annotations

from pydantic import BaseModel

from sharenest.core.config import get_settings


class PaymentSettings(BaseModel):
    """Slim view of payment-related configuration."""

    stripe_secret_key: str | None = None
    stripe_publishable_key: str | None = None
    currency: str = "jpy"
    minimum_amount: int = 50
    gateway_timeout_seconds: float = 10.0
    gateway_max_retries: int = 1
    insurance_flat_fee: int = 1000


class BookingSettings(BaseModel):
    """Configuration consulted while confirming bookings."""

    default_pickup_point: str
    start_offset_hours: int = 24
    requires_verified_license: bool = False
    database_timeout_seconds: float = 10.0


def get_payment_settings() -> PaymentSettings:
    """Return payment-specific configuration."""

    settings = get_settings()
    return PaymentSettings(
        stripe_secret_key=settings.stripe_secret_key or None,
        stripe_publishable_key=settings.stripe_publishable_key or None,
        currency=settings.payment_currency,
        minimum_amount=settings.payment_minimum_amount,
        gateway_timeout_seconds=settings.payment_gateway_timeout_seconds,
        gateway_max_retries=settings.payment_gateway_max_retries,
        insurance_flat_fee=settings.insurance_flat_fee,
    )


def get_booking_settings() -> BookingSettings:
    """Return booking-specific configuration."""

    settings = get_settings()
    return BookingSettings(
        default_pickup_point=settings.default_pickup_point,
        start_offset_hours=settings.booking_start_offset_hours,
        requires_verified_license=settings.booking_requires_verified_license,
        database_timeout_seconds=settings.database_timeout_seconds,
    )
