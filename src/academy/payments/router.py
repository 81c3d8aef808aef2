"""Payment history and subscription endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from academy.auth.service import Principal, require_principal
from academy.dependencies import get_current_principal, get_document_store, get_payment_client
from academy.payments.client import PaymentClient
from academy.payments.schemas import PaymentHistoryResponse, SubscriptionResponse, SubscriptionUpdateRequest
from academy.payments.service import cancel_subscription, change_subscription, get_subscription
from academy.store.base import DocumentStore

router = APIRouter(prefix="/api/v1", tags=["Payments"])


@router.get("/payments/history", response_model=PaymentHistoryResponse)
async def payment_history_endpoint(
    principal: Principal | None = Depends(get_current_principal),
    payments: PaymentClient = Depends(get_payment_client),
) -> PaymentHistoryResponse:
    principal = require_principal(principal)
    return PaymentHistoryResponse(payments=await payments.get_payment_history(principal.user_id))


@router.get("/subscription", response_model=SubscriptionResponse)
async def get_subscription_endpoint(
    principal: Principal | None = Depends(get_current_principal),
    store: DocumentStore = Depends(get_document_store),
    payments: PaymentClient = Depends(get_payment_client),
) -> SubscriptionResponse:
    """Current plan. Falls back to the profile's copy when the backend is unreachable."""
    return SubscriptionResponse(**await get_subscription(store, principal, payments))


@router.put("/subscription", response_model=SubscriptionResponse)
async def update_subscription_endpoint(
    body: SubscriptionUpdateRequest,
    principal: Principal | None = Depends(get_current_principal),
    store: DocumentStore = Depends(get_document_store),
    payments: PaymentClient = Depends(get_payment_client),
) -> SubscriptionResponse:
    return SubscriptionResponse(**await change_subscription(store, principal, payments, body.plan_id))


@router.delete("/subscription", status_code=204)
async def cancel_subscription_endpoint(
    principal: Principal | None = Depends(get_current_principal),
    store: DocumentStore = Depends(get_document_store),
    payments: PaymentClient = Depends(get_payment_client),
) -> None:
    await cancel_subscription(store, principal, payments)
