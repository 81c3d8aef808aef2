"""Shared test fixtures."""

from __future__ import annotations

import json
import os
import random
from collections.abc import AsyncGenerator, Awaitable, Callable

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("ACADEMY_DOCUMENT_STORE_BACKEND", "memory")
os.environ.setdefault("ACADEMY_LOG_FORMAT", "console")

from academy.auth.service import AuthStateNotifier, IdentityProvider, Principal  # noqa: E402
from academy.config import Settings, get_settings  # noqa: E402
from academy.dependencies import get_document_store, get_payment_client, get_reply_strategy, get_rng  # noqa: E402
from academy.main import create_app  # noqa: E402
from academy.pairing.replies import CannedReplyStrategy  # noqa: E402
from academy.payments.client import PaymentClient  # noqa: E402
from academy.store.memory import InMemoryDocumentStore  # noqa: E402

DECLINED_CARD = "4000000000000002"
PAYMENT_API = "http://payments.test/api"


class FakePaymentBackend:
    """In-process stand-in for the payment backend, served through httpx.MockTransport.

    Intents are remembered by client secret, so a confirmation reports the
    amount and challenge of the intent it settles. An unknown secret settles
    as a 4900 cent payment with no challenge metadata.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.history: list[dict[str, object]] = []
        self.intents: dict[str, dict[str, object]] = {}
        self.subscriptions: dict[str, dict[str, object]] = {}
        self.fail_intents = False
        self.fail_subscriptions = False

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.endswith("/payments/create-intent"):
            if self.fail_intents:
                return httpx.Response(500, json={"error": "Payment backend is down"})
            body = json.loads(request.content)
            secret = f"cs_{body['idempotencyKey']}"
            self.intents[secret] = {"amount": body["amount"], "challengeId": str(body["challengeId"])}
            return httpx.Response(200, json={"clientSecret": secret, "amount": body["amount"]})

        if path.endswith("/payments/confirm"):
            body = json.loads(request.content)
            card = body["paymentMethod"]["card"]
            if card.get("number") == DECLINED_CARD:
                return httpx.Response(402, json={"error": {"message": "Your card was declined."}})
            intent: dict[str, object] = {"id": "pi_test_1", "status": "succeeded", "amount": 4900}
            known = self.intents.get(body["clientSecret"])
            if known is not None:
                intent["amount"] = known["amount"]
                intent["metadata"] = {"challengeId": known["challengeId"]}
            return httpx.Response(200, json={"paymentIntent": intent})

        if "/payments/history/" in path:
            return httpx.Response(200, json=self.history)

        if path.startswith("/api/subscriptions"):
            if self.fail_subscriptions:
                return httpx.Response(503, json={"error": "Subscriptions are down"})
            if request.method == "GET":
                user_id = path.rsplit("/", 1)[-1]
                return httpx.Response(200, json=self.subscriptions.get(user_id, {"planId": None, "status": "none"}))
            body = json.loads(request.content)
            if path.endswith("/update"):
                self.subscriptions[body["userId"]] = {"planId": body["planId"], "status": "active"}
                return httpx.Response(200, json=self.subscriptions[body["userId"]])
            if path.endswith("/cancel"):
                self.subscriptions.pop(body["userId"], None)
                return httpx.Response(200, json={"cancelled": True})

        return httpx.Response(404, json={"error": "Not found"})


@pytest.fixture
def settings() -> Settings:
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def notifier() -> AuthStateNotifier:
    return AuthStateNotifier()


@pytest.fixture
def identity(store: InMemoryDocumentStore, notifier: AuthStateNotifier) -> IdentityProvider:
    return IdentityProvider(store, notifier=notifier)


@pytest_asyncio.fixture
async def principal(identity: IdentityProvider) -> Principal:
    """A signed-up user."""
    return await identity.sign_up("ada@example.com", "secret123", "Ada Lovelace")


@pytest.fixture
def payment_backend() -> FakePaymentBackend:
    return FakePaymentBackend()


@pytest_asyncio.fixture
async def payment_client(payment_backend: FakePaymentBackend) -> AsyncGenerator[PaymentClient, None]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(payment_backend.handle)) as http:
        yield PaymentClient(PAYMENT_API, client=http)


@pytest_asyncio.fixture
async def client(
    store: InMemoryDocumentStore,
    payment_client: PaymentClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP test client over the in-memory store.

    ASGITransport does not run the lifespan, so Redis stays uninitialized and
    rate limiting is bypassed.
    """
    app = create_app()
    app.dependency_overrides[get_document_store] = lambda: store
    app.dependency_overrides[get_rng] = lambda: random.Random(0)
    app.dependency_overrides[get_payment_client] = lambda: payment_client
    app.dependency_overrides[get_reply_strategy] = lambda: CannedReplyStrategy(random.Random(0))

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


SignUp = Callable[..., Awaitable[dict[str, str]]]


@pytest.fixture
def signup(client: AsyncClient) -> SignUp:
    """Register a user through the API and return its auth headers."""

    async def _signup(
        email: str = "ada@example.com",
        password: str = "secret123",
        name: str = "Ada Lovelace",
    ) -> dict[str, str]:
        response = await client.post(
            "/api/v1/auth/signup",
            json={"email": email, "password": password, "name": name},
        )
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _signup


@pytest_asyncio.fixture
async def auth_headers(signup: SignUp) -> dict[str, str]:
    return await signup()
