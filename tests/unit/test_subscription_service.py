"""Subscription plans mirrored onto the user profile."""

from __future__ import annotations

import pytest

from academy.errors import ExternalServiceError, MissingFieldsError, NotAuthenticatedError
from academy.payments.service import cancel_subscription, change_subscription, get_subscription
from academy.store.base import USERS


class TestChangeSubscription:
    async def test_plan_saved_on_profile(self, store, principal, payment_client):
        result = await change_subscription(store, principal, payment_client, "plan_monthly")
        assert result == {"plan_id": "plan_monthly", "status": "active", "synced": True}
        assert (await store.read(USERS, principal.user_id))["subscriptionPlan"] == "plan_monthly"

    async def test_blank_plan(self, store, principal, payment_client, payment_backend):
        with pytest.raises(MissingFieldsError):
            await change_subscription(store, principal, payment_client, "  ")
        assert payment_backend.requests == []

    async def test_backend_failure_leaves_profile_alone(self, store, principal, payment_client, payment_backend):
        payment_backend.fail_subscriptions = True
        with pytest.raises(ExternalServiceError):
            await change_subscription(store, principal, payment_client, "plan_monthly")
        assert (await store.read(USERS, principal.user_id))["subscriptionPlan"] is None

    async def test_requires_principal(self, store, payment_client):
        with pytest.raises(NotAuthenticatedError):
            await change_subscription(store, None, payment_client, "plan_monthly")


class TestGetSubscription:
    async def test_backend_view(self, store, principal, payment_client):
        await change_subscription(store, principal, payment_client, "plan_yearly")
        result = await get_subscription(store, principal, payment_client)
        assert result == {"plan_id": "plan_yearly", "status": "active", "synced": True}

    async def test_falls_back_to_profile(self, store, principal, payment_client, payment_backend):
        await change_subscription(store, principal, payment_client, "plan_yearly")
        payment_backend.fail_subscriptions = True
        result = await get_subscription(store, principal, payment_client)
        assert result == {"plan_id": "plan_yearly", "status": "active", "synced": False}


class TestCancelSubscription:
    async def test_clears_profile_plan(self, store, principal, payment_client, payment_backend):
        await change_subscription(store, principal, payment_client, "plan_monthly")
        await cancel_subscription(store, principal, payment_client)
        assert (await store.read(USERS, principal.user_id))["subscriptionPlan"] is None
        assert principal.user_id not in payment_backend.subscriptions

    async def test_failed_cancel_keeps_plan(self, store, principal, payment_client, payment_backend):
        await change_subscription(store, principal, payment_client, "plan_monthly")
        payment_backend.fail_subscriptions = True
        with pytest.raises(ExternalServiceError):
            await cancel_subscription(store, principal, payment_client)
        assert (await store.read(USERS, principal.user_id))["subscriptionPlan"] == "plan_monthly"
