"""Stripe SDK wrapper implementing the payment gateway contract."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import stripe

from sharenest.core.settings import PaymentSettings
from sharenest.integrations.gateway import (
    PaymentGatewayError,
    PaymentIntent,
    PaymentIntentNotFound,
    PaymentIntentStatus,
)

logger = logging.getLogger(__name__)

_STATUS_MAP: Mapping[str, PaymentIntentStatus] = {
    "succeeded": PaymentIntentStatus.SUCCEEDED,
    "canceled": PaymentIntentStatus.FAILED,
}


def _to_status(status: str | None) -> PaymentIntentStatus:
    # requires_payment_method, requires_action, processing, ... are all pending
    return _STATUS_MAP.get(status or "", PaymentIntentStatus.CREATED)


class StripeClientError(PaymentGatewayError):
    """Raised when Stripe interaction fails."""


class StripeClient:
    """Wrapper around ``stripe.StripeClient`` using its async httpx transport."""

    def __init__(
        self,
        secret_key: str,
        *,
        timeout_seconds: float = 10.0,
        max_network_retries: int = 1,
        idempotency_prefix: str = "sharenest",
        client: Any | None = None,
    ) -> None:
        self._idempotency_prefix = idempotency_prefix
        self._http_client: stripe.HTTPClient | None = None
        if client is None:
            self._http_client = stripe.HTTPXClient(timeout=timeout_seconds)
            client = stripe.StripeClient(
                secret_key,
                http_client=self._http_client,
                max_network_retries=max_network_retries,
            )
        self._client = client

    @classmethod
    def from_settings(cls, settings: PaymentSettings) -> "StripeClient":
        if not settings.stripe_secret_key:
            raise StripeClientError("Stripe secret key is not configured")
        return cls(
            settings.stripe_secret_key,
            timeout_seconds=settings.gateway_timeout_seconds,
            max_network_retries=settings.gateway_max_retries,
        )

    def _idempotency_key(self, seed: str | None) -> str | None:
        if not seed:
            return None
        return f"{self._idempotency_prefix}_{seed}"

    @staticmethod
    def _to_intent(intent: Any) -> PaymentIntent:
        metadata = intent.metadata or {}
        return PaymentIntent(
            id=str(intent.id),
            client_secret=intent.client_secret,
            amount=int(intent.amount),
            currency=str(intent.currency),
            status=_to_status(intent.status),
            metadata={str(key): str(metadata[key]) for key in metadata.keys()},
        )

    async def create_intent(
        self,
        *,
        amount: int,
        currency: str,
        metadata: dict[str, Any],
        idempotency_key: str | None = None,
    ) -> PaymentIntent:
        params: dict[str, Any] = {
            "amount": amount,
            "currency": currency,
            "metadata": {key: str(value) for key, value in metadata.items()},
            "automatic_payment_methods": {"enabled": True},
        }
        options: dict[str, Any] = {}
        key = self._idempotency_key(idempotency_key)
        if key:
            options["idempotency_key"] = key
        try:
            intent = await self._client.v1.payment_intents.create_async(
                params=params, options=options
            )
        except stripe.StripeError as exc:
            logger.warning("Stripe intent creation failed: %s", type(exc).__name__)
            raise StripeClientError("Failed to create payment intent") from exc
        return self._to_intent(intent)

    async def retrieve_intent(self, payment_intent_id: str) -> PaymentIntent:
        try:
            intent = await self._client.v1.payment_intents.retrieve_async(
                payment_intent_id
            )
        except stripe.InvalidRequestError as exc:
            if exc.code == "resource_missing":
                raise PaymentIntentNotFound("Payment intent not found") from exc
            raise StripeClientError("Failed to retrieve payment intent") from exc
        except stripe.StripeError as exc:
            logger.warning("Stripe intent lookup failed: %s", type(exc).__name__)
            raise StripeClientError("Failed to retrieve payment intent") from exc
        return self._to_intent(intent)

    async def aclose(self) -> None:
        """Release the pooled HTTP connections of an owned SDK client."""
        if self._http_client is not None:
            await self._http_client.close_async()
