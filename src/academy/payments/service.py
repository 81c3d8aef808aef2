"""Subscription plans.

The payment backend owns the subscription; the plan id is mirrored onto the
user profile as ``subscriptionPlan`` so profile reads never need the backend.
"""

from __future__ import annotations

from typing import Any

import structlog

from academy.auth.service import Principal, require_principal
from academy.errors import MissingFieldsError
from academy.payments.client import PaymentClient
from academy.store.base import USERS, DocumentStore

logger = structlog.get_logger()


async def get_subscription(
    store: DocumentStore,
    principal: Principal | None,
    payments: PaymentClient,
) -> dict[str, Any]:
    """The backend's view when reachable, else the plan mirrored on the profile."""
    principal = require_principal(principal)
    remote = await payments.get_subscription(principal.user_id)
    if remote is not None:
        return {"plan_id": remote.get("planId"), "status": remote.get("status") or "unknown", "synced": True}
    profile = await store.read(USERS, principal.user_id) or {}
    plan = profile.get("subscriptionPlan")
    return {"plan_id": plan, "status": "active" if plan else "none", "synced": False}


async def change_subscription(
    store: DocumentStore,
    principal: Principal | None,
    payments: PaymentClient,
    plan_id: str,
) -> dict[str, Any]:
    principal = require_principal(principal)
    plan_id = (plan_id or "").strip()
    if not plan_id:
        msg = "Please choose a plan"
        raise MissingFieldsError(msg)

    remote = await payments.update_subscription(principal.user_id, plan_id)
    await store.set(USERS, principal.user_id, {"subscriptionPlan": plan_id}, merge=True)
    logger.info("subscription_plan_saved", user_id=principal.user_id, plan_id=plan_id)
    return {"plan_id": plan_id, "status": remote.get("status") or "active", "synced": True}


async def cancel_subscription(
    store: DocumentStore,
    principal: Principal | None,
    payments: PaymentClient,
) -> None:
    """Cancel with the backend first; the profile is only cleared once that succeeds."""
    principal = require_principal(principal)
    await payments.cancel_subscription(principal.user_id)
    await store.set(USERS, principal.user_id, {"subscriptionPlan": None}, merge=True)
    logger.info("subscription_plan_cleared", user_id=principal.user_id)
