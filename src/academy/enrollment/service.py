"""Enrollment tracker.

Free challenges enroll immediately; paid challenges go through checkout and
are only recorded once the payment collaborator reports a completed payment.
Enrollment writes are idempotent: the record id is ``{user}_{challenge}`` and
the profile update is append-if-absent, so retrying after a partial failure
never duplicates anything.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

import structlog

from academy.auth.service import Principal, require_principal
from academy.catalog.service import challenge_key
from academy.errors import (
    ExternalServiceError,
    PaymentDeclinedError,
    PaymentNotRequiredError,
    PaymentRequiredError,
)
from academy.payments.client import PaymentClient, PaymentResult, default_idempotency_key
from academy.store.base import ENROLLMENTS, PAYMENTS, USERS, DocumentStore, utc_timestamp

logger = structlog.get_logger()


@dataclass
class Enrollment:
    id: str
    user_id: str
    challenge_id: str
    enrolled_at: str
    payment_id: str | None = None
    amount_paid: int = 0
    status: str = "active"

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> Enrollment:
        return cls(
            id=doc["id"],
            user_id=doc["userId"],
            challenge_id=challenge_key(doc["challengeId"]),
            enrolled_at=doc["enrolledAt"],
            payment_id=doc.get("paymentId"),
            amount_paid=doc.get("amountPaid", 0),
            status=doc.get("status", "active"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def enrollment_id(user_id: str, challenge_id: Any) -> str:
    return f"{user_id}_{challenge_key(challenge_id)}"


def price_in_cents(challenge: dict[str, Any]) -> int:
    """Prices are whole currency units."""
    return int(round(float(challenge.get("price") or 0) * 100))


async def _add_to_profile(store: DocumentStore, user_id: str, challenge_id: str) -> None:
    """Append the challenge to the profile's enrolled list, creating the profile if missing."""
    try:
        profile = await store.read(USERS, user_id)
        if profile is not None:
            enrolled = [challenge_key(c) for c in profile.get("enrolledChallenges", [])]
            if challenge_id not in enrolled:
                await store.update(USERS, user_id, {"enrolledChallenges": [*enrolled, challenge_id]})
        else:
            await store.set(USERS, user_id, {
                "enrolledChallenges": [challenge_id],
                "createdAt": utc_timestamp(),
            }, merge=True)
    except (ExternalServiceError, KeyError):
        logger.warning("enrollment_profile_update_fallback", user_id=user_id, challenge_id=challenge_id, exc_info=True)
        await store.set(USERS, user_id, {"enrolledChallenges": [challenge_id]}, merge=True)


async def record_enrollment(
    store: DocumentStore,
    user_id: str,
    challenge_id: Any,
    payment: PaymentResult | None = None,
) -> Enrollment:
    """Write the enrollment record and update the profile. Idempotent."""
    key = challenge_key(challenge_id)
    doc_id = enrollment_id(user_id, key)

    existing = await store.read(ENROLLMENTS, doc_id)
    if existing is not None:
        await _add_to_profile(store, user_id, key)
        return Enrollment.from_document(existing)

    data = {
        "userId": user_id,
        "challengeId": key,
        "enrolledAt": utc_timestamp(),
        "paymentId": payment.payment_id if payment else None,
        "amountPaid": payment.amount if payment else 0,
        "status": "active",
    }
    await store.set(ENROLLMENTS, doc_id, data)
    await _add_to_profile(store, user_id, key)
    logger.info("enrollment_recorded", user_id=user_id, challenge_id=key, paid=payment is not None)
    return Enrollment.from_document({"id": doc_id, **data})


async def enroll(store: DocumentStore, principal: Principal | None, challenge: dict[str, Any]) -> Enrollment:
    """Enroll in a free challenge.

    Raises:
        NotAuthenticatedError: No signed-in user.
        PaymentRequiredError: The challenge has a price; nothing is written.
    """
    principal = require_principal(principal)
    if price_in_cents(challenge) > 0:
        logger.info("enrollment_payment_required", user_id=principal.user_id, challenge_id=challenge["id"])
        raise PaymentRequiredError(challenge)
    return await record_enrollment(store, principal.user_id, challenge["id"])


async def start_checkout(
    principal: Principal | None,
    challenge: dict[str, Any],
    payments: PaymentClient,
) -> dict[str, Any]:
    """Create a payment intent for a paid challenge."""
    principal = require_principal(principal)
    amount = price_in_cents(challenge)
    if amount <= 0:
        raise PaymentNotRequiredError(challenge)
    intent = await payments.create_payment_intent(
        principal.user_id,
        challenge_key(challenge["id"]),
        amount,
        idempotency_key=default_idempotency_key(principal.user_id, challenge_key(challenge["id"])),
    )
    return {"clientSecret": intent["clientSecret"], "amount": amount, "challengeId": challenge_key(challenge["id"])}


async def complete_paid_enrollment(
    store: DocumentStore,
    principal: Principal | None,
    challenge: dict[str, Any],
    payments: PaymentClient,
    client_secret: str,
    card_details: dict[str, Any],
) -> Enrollment:
    """Confirm payment, then record the enrollment.

    The confirmed payment must cover this challenge's price, and when the
    backend reports which challenge the intent was for, it must be this one.
    Nothing is written unless both hold.

    Raises:
        PaymentNotRequiredError: The challenge is free; no charge is attempted.
        PaymentDeclinedError: Declined, unfinished, short, or for another challenge.
    """
    principal = require_principal(principal)
    key = challenge_key(challenge["id"])
    expected = price_in_cents(challenge)
    if expected <= 0:
        raise PaymentNotRequiredError(challenge)

    result = await payments.confirm_payment(client_secret, card_details)
    if result.challenge_id is not None and result.challenge_id != key:
        logger.warning(
            "payment_challenge_mismatch",
            user_id=principal.user_id, challenge_id=key, paid_for=result.challenge_id,
        )
        msg = "This payment was made for a different challenge"
        raise PaymentDeclinedError(msg)
    if result.amount < expected:
        logger.warning(
            "payment_amount_short",
            user_id=principal.user_id, challenge_id=key, amount=result.amount, expected=expected,
        )
        msg = f"Payment of {result.amount} cents does not cover the price of {expected} cents"
        raise PaymentDeclinedError(msg)

    await store.set(PAYMENTS, result.payment_id or enrollment_id(principal.user_id, key), {
        "userId": principal.user_id,
        "challengeId": key,
        "amount": result.amount,
        "status": result.status,
        "createdAt": utc_timestamp(),
    })
    return await record_enrollment(store, principal.user_id, key, payment=result)


async def list_enrollments(store: DocumentStore, user_id: str) -> list[Enrollment]:
    docs = await store.query(ENROLLMENTS, {"userId": user_id}, order_by="enrolledAt")
    return [Enrollment.from_document(d) for d in docs]


async def is_enrolled(store: DocumentStore, user_id: str, challenge_id: Any) -> bool:
    return await store.read(ENROLLMENTS, enrollment_id(user_id, challenge_id)) is not None
