"""Schema exports."""

from sharenest.schemas.auth import RegistrationRequest, RegistrationResponse, Token
from sharenest.schemas.booking import BookingCharges, BookingConfirmRequest, BookingRead
from sharenest.schemas.payments import (
    PaymentIntentCreateRequest,
    PaymentIntentCreateResponse,
)
from sharenest.schemas.pricing import (
    PriceBreakdownRead,
    PricingQuoteRead,
    RentalRequest,
)
from sharenest.schemas.user import (
    LicenseRead,
    LicenseReviewRequest,
    ProfileProvisionRequest,
    UserCreate,
    UserRead,
)
from sharenest.schemas.vehicle import VehicleCreate, VehicleRead, VehicleUpdate

__all__ = [
    "BookingCharges",
    "BookingConfirmRequest",
    "BookingRead",
    "LicenseRead",
    "LicenseReviewRequest",
    "PaymentIntentCreateRequest",
    "PaymentIntentCreateResponse",
    "PriceBreakdownRead",
    "PricingQuoteRead",
    "ProfileProvisionRequest",
    "RegistrationRequest",
    "RegistrationResponse",
    "RentalRequest",
    "Token",
    "UserCreate",
    "UserRead",
    "VehicleCreate",
    "VehicleRead",
    "VehicleUpdate",
]
