"""Integration shortcuts."""

from .gateway import (
    PaymentGateway,
    PaymentGatewayError,
    PaymentIntent,
    PaymentIntentNotFound,
    PaymentIntentStatus,
)
from .stripe_client import StripeClient, StripeClientError

__all__ = [
    "PaymentGateway",
    "PaymentGatewayError",
    "PaymentIntent",
    "PaymentIntentNotFound",
    "PaymentIntentStatus",
    "StripeClient",
    "StripeClientError",
]
