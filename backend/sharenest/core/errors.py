"""Typed failures raised by the service layer.

Each error carries a stable ``code``, the HTTP status routers translate it
to, and whether the same call may be retried unchanged. Clients rely on
``retryable`` to choose between repeating a confirmation and restarting the
payment flow.
"""

from __future__ import annotations

from fastapi import status


class SharenestError(Exception):
    """Base class for domain failures."""

    code: str = "error"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    retryable: bool = False
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, object]:
        return {
            "code": self.code,
            "message": self.message,
            "retryable": self.retryable,
        }


class InvalidInput(SharenestError):
    code = "invalid_input"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthenticated(SharenestError):
    code = "unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Could not validate credentials"


class Forbidden(SharenestError):
    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions"


class ProfileNotFound(SharenestError):
    """Credential is valid but no stored profile exists for its subject."""

    code = "profile_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User profile has not been provisioned"


class VehicleNotFound(SharenestError):
    code = "vehicle_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Vehicle not found"


class BookingNotFound(SharenestError):
    code = "booking_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Booking not found"


class PaymentGatewayUnavailable(SharenestError):
    code = "payment_gateway_unavailable"
    status_code = status.HTTP_502_BAD_GATEWAY
    retryable = True
    default_message = "Payment gateway is unavailable"


class PaymentNotSucceeded(SharenestError):
    """The gateway does not report the payment as succeeded.

    ``retryable`` only flags errors where repeating the identical call may
    succeed without client action. This one needs the client to finish or
    restart the payment first; confirming again afterwards is safe.
    """

    code = "payment_not_succeeded"
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_message = "Payment has not succeeded"


class PersistenceFailed(SharenestError):
    """Storage failed after payment; retry confirmation, never re-pay."""

    code = "persistence_failed"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    retryable = True
    default_message = "Booking could not be stored; retry confirmation"


__all__ = [
    "BookingNotFound",
    "Forbidden",
    "InvalidInput",
    "PaymentGatewayUnavailable",
    "PaymentNotSucceeded",
    "PersistenceFailed",
    "ProfileNotFound",
    "SharenestError",
    "Unauthenticated",
    "VehicleNotFound",
]
