"""Payment gateway contract consumed by the payment and booking services."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Protocol


class PaymentIntentStatus(str, enum.Enum):
    """Gateway intent states as seen by the application."""

    CREATED = "created"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(slots=True)
class PaymentIntent:
    """Simplified payment intent payload."""

    id: str
    client_secret: str | None
    amount: int
    currency: str
    status: PaymentIntentStatus
    metadata: dict[str, str] = field(default_factory=dict)


class PaymentGatewayError(RuntimeError):
    """Raised when the gateway cannot be reached or rejects the call."""


class PaymentIntentNotFound(PaymentGatewayError):
    """Raised when the gateway has no intent with the requested id."""


class PaymentGateway(Protocol):
    """Authorization operations the application needs from a gateway.

    Both calls are awaited from request handlers and must not block the loop.
    """

    async def create_intent(
        self,
        *,
        amount: int,
        currency: str,
        metadata: dict[str, Any],
        idempotency_key: str | None = None,
    ) -> PaymentIntent: ...

    async def retrieve_intent(self, payment_intent_id: str) -> PaymentIntent: ...


__all__ = [
    "PaymentGateway",
    "PaymentGatewayError",
    "PaymentIntent",
    "PaymentIntentNotFound",
    "PaymentIntentStatus",
]
