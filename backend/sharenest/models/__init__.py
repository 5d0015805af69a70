"""ORM models package export."""

from sharenest.models.booking import Booking, BookingStatus
from sharenest.models.user import LicenseStatus, User, UserRole, UserStatus
from sharenest.models.vehicle import RATE_FIELDS, Vehicle

__all__ = [
    "Booking",
    "BookingStatus",
    "LicenseStatus",
    "RATE_FIELDS",
    "User",
    "UserRole",
    "UserStatus",
    "Vehicle",
]
