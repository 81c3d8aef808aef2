"""
Payment collaborator client.

Thin async HTTP client for the payment backend: payment intents, card
confirmation, payment history and subscriptions. Amounts are integer cents.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from academy.config import Settings
from academy.errors import ExternalServiceError, PaymentDeclinedError

logger = structlog.get_logger()


def default_idempotency_key(user_id: str, challenge_id: Any) -> str:
    """Derived from (user, challenge) only, so a retried checkout reuses the same intent."""
    return f"{user_id}_{challenge_id}"


@dataclass(frozen=True)
class PaymentResult:
    payment_id: str
    status: str
    amount: int
    challenge_id: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == "succeeded"


def _json_object(response: httpx.Response) -> dict[str, Any] | None:
    """The decoded body when it is a JSON object, else None."""
    try:
        body = response.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def _error_message(response: httpx.Response, fallback: str) -> str:
    body = _json_object(response)
    error = body.get("error") if body is not None else None
    if isinstance(error, dict):
        return error.get("message") or fallback
    return error or fallback


def _payment_result(intent: dict[str, Any]) -> PaymentResult:
    metadata = intent.get("metadata") or {}
    challenge_id = metadata.get("challengeId") if isinstance(metadata, dict) else None
    try:
        amount = int(intent.get("amount", 0))
    except (TypeError, ValueError) as e:
        msg = "Invalid response from payment server"
        raise ExternalServiceError(msg) from e
    return PaymentResult(
        payment_id=str(intent.get("id", "")),
        status=str(intent.get("status", "")),
        amount=amount,
        challenge_id=None if challenge_id is None else str(challenge_id),
    )


class PaymentClient:
    """Talks to the payment backend's REST API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        currency: str = "usd",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.currency = currency
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.AsyncClient | None = None) -> PaymentClient:
        return cls(
            settings.payment_api_base_url,
            timeout=settings.payment_api_timeout_seconds,
            currency=settings.currency,
            client=client,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.base_url}{path}"
        if self._client is not None:
            return await self._client.request(method, url, timeout=self.timeout, **kwargs)
        async with httpx.AsyncClient() as client:
            return await client.request(method, url, timeout=self.timeout, **kwargs)

    async def create_payment_intent(
        self,
        user_id: str,
        challenge_id: Any,
        amount_cents: int,
        idempotency_key: str | None = None,
    ) -> dict[str, Any]:
        """Create a payment intent. Returns the backend payload, which includes ``clientSecret``."""
        key = idempotency_key or default_idempotency_key(user_id, challenge_id)
        try:
            response = await self._request(
                "POST",
                "/payments/create-intent",
                json={
                    "userId": user_id,
                    "challengeId": challenge_id,
                    "amount": amount_cents,
                    "currency": self.currency,
                    "idempotencyKey": key,
                },
                headers={"Idempotency-Key": key},
            )
        except httpx.HTTPError as e:
            logger.error("payment_intent_failed", user_id=user_id, challenge_id=challenge_id, error=str(e))
            msg = "Failed to create payment intent"
            raise ExternalServiceError(msg) from e

        if response.is_error:
            logger.error("payment_intent_rejected", user_id=user_id, status=response.status_code)
            raise ExternalServiceError(_error_message(response, "Failed to create payment intent"))

        data = _json_object(response)
        if not data or not data.get("clientSecret"):
            logger.error("payment_intent_malformed", user_id=user_id, status=response.status_code)
            msg = "Invalid response from payment server"
            raise ExternalServiceError(msg)

        logger.info("payment_intent_created", user_id=user_id, challenge_id=challenge_id, amount=amount_cents)
        return data

    async def confirm_payment(self, client_secret: str, card_details: dict[str, Any]) -> PaymentResult:
        """Confirm a card payment. Declines raise PaymentDeclinedError with the network's message."""
        try:
            response = await self._request(
                "POST",
                "/payments/confirm",
                json={"clientSecret": client_secret, "paymentMethod": {"card": card_details}},
            )
        except httpx.HTTPError as e:
            logger.error("payment_confirm_failed", error=str(e))
            msg = "Payment service unavailable"
            raise ExternalServiceError(msg) from e

        if response.status_code == 402:
            raise PaymentDeclinedError(_error_message(response, "Your card was declined."))
        if response.is_error:
            raise ExternalServiceError(_error_message(response, "Failed to confirm payment"))

        body = _json_object(response)
        if body is None:
            logger.error("payment_confirm_malformed", status=response.status_code)
            msg = "Invalid response from payment server"
            raise ExternalServiceError(msg)
        if body.get("error"):
            raise PaymentDeclinedError(_error_message(response, "Your card was declined."))

        intent = body.get("paymentIntent")
        result = _payment_result(intent if isinstance(intent, dict) else {})
        if not result.succeeded:
            msg = f"Payment was not completed (status: {result.status or 'unknown'})"
            raise PaymentDeclinedError(msg)

        logger.info("payment_confirmed", payment_id=result.payment_id, amount=result.amount)
        return result

    async def get_payment_history(self, user_id: str) -> list[dict[str, Any]]:
        """Past transactions; an unavailable backend or unreadable reply yields an empty history."""
        try:
            response = await self._request("GET", f"/payments/history/{user_id}")
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError):
            logger.warning("payment_history_unavailable", user_id=user_id, exc_info=True)
            return []
        if not isinstance(data, list):
            logger.warning("payment_history_malformed", user_id=user_id, body_type=type(data).__name__)
            return []
        return data

    async def get_subscription(self, user_id: str) -> dict[str, Any] | None:
        """The user's subscription as the backend reports it, or None when unavailable."""
        try:
            response = await self._request("GET", f"/subscriptions/{user_id}")
            response.raise_for_status()
        except httpx.HTTPError:
            logger.warning("subscription_unavailable", user_id=user_id, exc_info=True)
            return None
        return _json_object(response)

    async def update_subscription(self, user_id: str, plan_id: str) -> dict[str, Any]:
        """Move the user onto ``plan_id``. Returns the backend's subscription payload."""
        try:
            response = await self._request("POST", "/subscriptions/update", json={"userId": user_id, "planId": plan_id})
        except httpx.HTTPError as e:
            logger.error("subscription_update_failed", user_id=user_id, error=str(e))
            msg = "Failed to update subscription"
            raise ExternalServiceError(msg) from e

        if response.is_error:
            logger.error("subscription_update_rejected", user_id=user_id, status=response.status_code)
            raise ExternalServiceError(_error_message(response, "Failed to update subscription"))

        data = _json_object(response)
        if data is None:
            msg = "Invalid response from payment server"
            raise ExternalServiceError(msg)
        logger.info("subscription_updated", user_id=user_id, plan_id=plan_id)
        return data

    async def cancel_subscription(self, user_id: str) -> None:
        try:
            response = await self._request("POST", "/subscriptions/cancel", json={"userId": user_id})
        except httpx.HTTPError as e:
            logger.error("subscription_cancel_failed", user_id=user_id, error=str(e))
            msg = "Failed to cancel subscription"
            raise ExternalServiceError(msg) from e

        if response.is_error:
            logger.error("subscription_cancel_rejected", user_id=user_id, status=response.status_code)
            raise ExternalServiceError(_error_message(response, "Failed to cancel subscription"))
        logger.info("subscription_cancelled", user_id=user_id)
