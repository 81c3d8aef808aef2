"""Enrollment and checkout endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from academy.auth.service import Principal, require_principal
from academy.catalog.service import get_challenge
from academy.dependencies import get_current_principal, get_document_store, get_payment_client
from academy.enrollment.schemas import (
    CheckoutResponse,
    ConfirmCheckoutRequest,
    EnrollmentListResponse,
    EnrollmentResponse,
)
from academy.enrollment.service import complete_paid_enrollment, enroll, list_enrollments, start_checkout
from academy.payments.client import PaymentClient
from academy.store.base import DocumentStore

router = APIRouter(prefix="/api/v1", tags=["Enrollment"])


@router.post("/challenges/{challenge_id}/enroll", response_model=EnrollmentResponse, status_code=201)
async def enroll_endpoint(
    challenge_id: str,
    principal: Principal | None = Depends(get_current_principal),
    store: DocumentStore = Depends(get_document_store),
) -> EnrollmentResponse:
    """Enroll in a free challenge. Paid challenges answer 402 and must use checkout."""
    require_principal(principal)
    challenge = await get_challenge(store, challenge_id)
    enrollment = await enroll(store, principal, challenge)
    return EnrollmentResponse(**enrollment.to_dict())


@router.post("/challenges/{challenge_id}/checkout", response_model=CheckoutResponse)
async def checkout_endpoint(
    challenge_id: str,
    principal: Principal | None = Depends(get_current_principal),
    store: DocumentStore = Depends(get_document_store),
    payments: PaymentClient = Depends(get_payment_client),
) -> CheckoutResponse:
    """Create a payment intent for a paid challenge."""
    require_principal(principal)
    challenge = await get_challenge(store, challenge_id)
    intent = await start_checkout(principal, challenge, payments)
    return CheckoutResponse(
        client_secret=intent["clientSecret"],
        amount=intent["amount"],
        challenge_id=intent["challengeId"],
    )


@router.post("/challenges/{challenge_id}/checkout/confirm", response_model=EnrollmentResponse, status_code=201)
async def confirm_checkout_endpoint(
    challenge_id: str,
    body: ConfirmCheckoutRequest,
    principal: Principal | None = Depends(get_current_principal),
    store: DocumentStore = Depends(get_document_store),
    payments: PaymentClient = Depends(get_payment_client),
) -> EnrollmentResponse:
    """Confirm the card payment and record the enrollment."""
    require_principal(principal)
    challenge = await get_challenge(store, challenge_id)
    enrollment = await complete_paid_enrollment(
        store, principal, challenge, payments, body.client_secret, body.card,
    )
    return EnrollmentResponse(**enrollment.to_dict())


@router.get("/enrollments", response_model=EnrollmentListResponse)
async def list_enrollments_endpoint(
    principal: Principal | None = Depends(get_current_principal),
    store: DocumentStore = Depends(get_document_store),
) -> EnrollmentListResponse:
    """The current user's enrollments."""
    principal = require_principal(principal)
    enrollments = await list_enrollments(store, principal.user_id)
    return EnrollmentListResponse(
        enrollments=[EnrollmentResponse(**e.to_dict()) for e in enrollments],
        total=len(enrollments),
    )

