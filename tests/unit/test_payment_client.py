"""Payment client against a fake payment backend."""

from __future__ import annotations

import httpx
import pytest

from academy.errors import ExternalServiceError, PaymentDeclinedError
from academy.payments.client import PaymentClient, default_idempotency_key

from conftest import DECLINED_CARD, PAYMENT_API

GOOD_CARD = {"number": "4242424242424242", "exp_month": 12, "exp_year": 2030, "cvc": "123"}


class TestPaymentIntent:
    async def test_create_intent(self, payment_client, payment_backend):
        intent = await payment_client.create_payment_intent("u1", "12", 4900)
        assert intent["clientSecret"] == "cs_u1_12"
        request = payment_backend.requests[-1]
        assert request.headers["Idempotency-Key"] == "u1_12"
        assert request.url.path == "/api/payments/create-intent"

    def test_idempotency_key_is_stable(self):
        assert default_idempotency_key("u1", "12") == default_idempotency_key("u1", "12")
        assert default_idempotency_key("u1", "12") != default_idempotency_key("u2", "12")

    async def test_backend_error(self, payment_client, payment_backend):
        payment_backend.fail_intents = True
        with pytest.raises(ExternalServiceError, match="Payment backend is down"):
            await payment_client.create_payment_intent("u1", "12", 4900)

    async def test_missing_client_secret(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={}))
        async with httpx.AsyncClient(transport=transport) as http:
            client = PaymentClient(PAYMENT_API, client=http)
            with pytest.raises(ExternalServiceError, match="Invalid response"):
                await client.create_payment_intent("u1", "12", 4900)

    async def test_network_failure(self):
        def unreachable(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(unreachable)) as http:
            client = PaymentClient(PAYMENT_API, client=http)
            with pytest.raises(ExternalServiceError):
                await client.create_payment_intent("u1", "12", 4900)


class TestConfirmPayment:
    async def test_success(self, payment_client):
        result = await payment_client.confirm_payment("cs_u1_12", GOOD_CARD)
        assert result.succeeded
        assert result.payment_id == "pi_test_1"
        assert result.amount == 4900

    async def test_decline_carries_network_message(self, payment_client):
        with pytest.raises(PaymentDeclinedError, match="Your card was declined."):
            await payment_client.confirm_payment("cs_u1_12", {**GOOD_CARD, "number": DECLINED_CARD})

    async def test_unfinished_payment_is_declined(self):
        body = {"paymentIntent": {"id": "pi_2", "status": "requires_action", "amount": 4900}}
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=body))
        async with httpx.AsyncClient(transport=transport) as http:
            client = PaymentClient(PAYMENT_API, client=http)
            with pytest.raises(PaymentDeclinedError, match="requires_action"):
                await client.confirm_payment("cs", GOOD_CARD)


class TestPaymentHistory:
    async def test_history(self, payment_client, payment_backend):
        payment_backend.history = [{"id": "pi_test_1", "amount": 4900}]
        assert await payment_client.get_payment_history("u1") == [{"id": "pi_test_1", "amount": 4900}]

    async def test_history_unavailable_is_empty(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        async with httpx.AsyncClient(transport=transport) as http:
            client = PaymentClient(PAYMENT_API, client=http)
            assert await client.get_payment_history("u1") == []


def _client_returning(response: httpx.Response) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(lambda request: response))


class TestUnreadableResponses:
    async def test_history_with_html_body_is_empty(self):
        async with _client_returning(httpx.Response(200, text="<html>oops</html>")) as http:
            assert await PaymentClient(PAYMENT_API, client=http).get_payment_history("u1") == []

    async def test_history_with_object_body_is_empty(self):
        async with _client_returning(httpx.Response(200, json={"unexpected": True})) as http:
            assert await PaymentClient(PAYMENT_API, client=http).get_payment_history("u1") == []

    async def test_intent_with_html_body(self):
        async with _client_returning(httpx.Response(200, text="<html>oops</html>")) as http:
            with pytest.raises(ExternalServiceError, match="Invalid response"):
                await PaymentClient(PAYMENT_API, client=http).create_payment_intent("u1", "12", 4900)

    async def test_intent_with_list_body(self):
        async with _client_returning(httpx.Response(200, json=["cs_1"])) as http:
            with pytest.raises(ExternalServiceError, match="Invalid response"):
                await PaymentClient(PAYMENT_API, client=http).create_payment_intent("u1", "12", 4900)

    async def test_confirm_with_html_body(self):
        async with _client_returning(httpx.Response(200, text="<html>oops</html>")) as http:
            with pytest.raises(ExternalServiceError, match="Invalid response"):
                await PaymentClient(PAYMENT_API, client=http).confirm_payment("cs", GOOD_CARD)

    async def test_confirm_with_list_body(self):
        async with _client_returning(httpx.Response(200, json=[1, 2])) as http:
            with pytest.raises(ExternalServiceError, match="Invalid response"):
                await PaymentClient(PAYMENT_API, client=http).confirm_payment("cs", GOOD_CARD)

    async def test_error_with_html_body_uses_fallback_message(self):
        async with _client_returning(httpx.Response(500, text="<html>Bad Gateway</html>")) as http:
            with pytest.raises(ExternalServiceError, match="Failed to confirm payment"):
                await PaymentClient(PAYMENT_API, client=http).confirm_payment("cs", GOOD_CARD)


class TestConfirmReportsIntent:
    async def test_confirm_carries_intent_challenge(self, payment_client):
        intent = await payment_client.create_payment_intent("u1", "12", 4900)
        result = await payment_client.confirm_payment(intent["clientSecret"], GOOD_CARD)
        assert result.challenge_id == "12"
        assert result.amount == 4900


class TestSubscriptions:
    async def test_no_subscription_yet(self, payment_client):
        assert await payment_client.get_subscription("u1") == {"planId": None, "status": "none"}

    async def test_update_then_get(self, payment_client, payment_backend):
        updated = await payment_client.update_subscription("u1", "plan_monthly")
        assert updated == {"planId": "plan_monthly", "status": "active"}
        assert (await payment_client.get_subscription("u1"))["planId"] == "plan_monthly"
        request = payment_backend.requests[-2]
        assert request.url.path == "/api/subscriptions/update"

    async def test_cancel(self, payment_client, payment_backend):
        await payment_client.update_subscription("u1", "plan_monthly")
        await payment_client.cancel_subscription("u1")
        assert payment_backend.subscriptions == {}

    async def test_get_unavailable_is_none(self, payment_client, payment_backend):
        payment_backend.fail_subscriptions = True
        assert await payment_client.get_subscription("u1") is None

    async def test_update_failure_carries_backend_message(self, payment_client, payment_backend):
        payment_backend.fail_subscriptions = True
        with pytest.raises(ExternalServiceError, match="Subscriptions are down"):
            await payment_client.update_subscription("u1", "plan_monthly")

    async def test_cancel_failure(self, payment_client, payment_backend):
        payment_backend.fail_subscriptions = True
        with pytest.raises(ExternalServiceError, match="Subscriptions are down"):
            await payment_client.cancel_subscription("u1")

    async def test_cancel_network_failure(self):
        def unreachable(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(unreachable)) as http:
            client = PaymentClient(PAYMENT_API, client=http)
            with pytest.raises(ExternalServiceError, match="Failed to cancel subscription"):
                await client.cancel_subscription("u1")
            assert await client.get_subscription("u1") is None
