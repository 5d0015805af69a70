"""Service layer exports."""
from sharenest.services import (
    booking_service,
    booking_store,
    identity_service,
    payments_service,
    pricing_service,
    user_service,
    vehicle_service,
)

__all__ = [
    "booking_service",
    "booking_store",
    "identity_service",
    "payments_service",
    "pricing_service",
    "user_service",
    "vehicle_service",
]
