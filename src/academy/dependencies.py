"""Shared FastAPI dependencies."""

from __future__ import annotations

import random

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from academy.auth.service import IdentityProvider, Principal
from academy.config import Settings, get_settings
from academy.database import get_session_factory
from academy.pairing.replies import ReplyStrategy, build_reply_strategy
from academy.payments.client import PaymentClient
from academy.store.base import DocumentStore
from academy.store.memory import InMemoryDocumentStore
from academy.store.sql import SqlDocumentStore

_memory_store = InMemoryDocumentStore()
_bearer_optional = HTTPBearer(auto_error=False)


def get_settings_dep() -> Settings:
    return get_settings()


def get_document_store(settings: Settings = Depends(get_settings_dep)) -> DocumentStore:
    """Select the configured document store backend."""
    if settings.document_store_backend == "memory":
        return _memory_store
    return SqlDocumentStore(get_session_factory())


def get_identity_provider(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings_dep),
) -> IdentityProvider:
    return IdentityProvider(store, password_min_length=settings.password_min_length)


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_optional),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> Principal | None:
    """Resolve the bearer token to a principal, or None when absent or invalid.

    Services raise NotAuthenticatedError themselves when an action needs a principal.
    """
    if credentials is None:
        return None
    return await identity.resolve(credentials.credentials)


def get_rng() -> random.Random:
    """Randomness source for partner matching and canned replies."""
    return random.Random()


def get_payment_client(settings: Settings = Depends(get_settings_dep)) -> PaymentClient:
    return PaymentClient.from_settings(settings)


def get_reply_strategy(
    settings: Settings = Depends(get_settings_dep),
    rng: random.Random = Depends(get_rng),
) -> ReplyStrategy:
    return build_reply_strategy(settings, rng)
