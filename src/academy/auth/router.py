"""Authentication endpoints: signup, login, logout, profile."""

from __future__ import annotations

import random

from fastapi import APIRouter, Depends, HTTPException

from academy.auth.schemas import (
    LoginRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    SignUpRequest,
    TokenResponse,
    UserResponse,
)
from academy.auth.service import IdentityProvider, Principal, public_profile, require_principal
from academy.config import Settings
from academy.dependencies import (
    get_current_principal,
    get_document_store,
    get_identity_provider,
    get_rng,
    get_settings_dep,
)
from academy.pairing.service import assign_partner_if_absent
from academy.store.base import USERS, DocumentStore

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


async def _token_response(
    principal: Principal,
    store: DocumentStore,
    settings: Settings,
    rng: random.Random,
) -> TokenResponse:
    partner = await assign_partner_if_absent(store, principal.user_id, settings.partner_pool, rng)
    return TokenResponse(
        access_token=principal.token,
        user=UserResponse(id=principal.user_id, email=principal.email, name=principal.name),
        partner=partner,
    )


@router.post("/signup", response_model=TokenResponse, status_code=201)
async def signup(
    body: SignUpRequest,
    identity: IdentityProvider = Depends(get_identity_provider),
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings_dep),
    rng: random.Random = Depends(get_rng),
) -> TokenResponse:
    """Create an account, sign in, and match an accountability partner."""
    principal = await identity.sign_up(body.email, body.password, body.name)
    return await _token_response(principal, store, settings, rng)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    identity: IdentityProvider = Depends(get_identity_provider),
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings_dep),
    rng: random.Random = Depends(get_rng),
) -> TokenResponse:
    """Sign in. A partner is matched on first login if none exists yet."""
    principal = await identity.sign_in(body.email, body.password)
    return await _token_response(principal, store, settings, rng)


@router.post("/logout", status_code=204)
async def logout(
    principal: Principal | None = Depends(get_current_principal),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> None:
    """Revoke the current session."""
    await identity.sign_out(principal)


async def _profile_response(store: DocumentStore, principal: Principal) -> ProfileResponse:
    profile = await store.read(USERS, principal.user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    profile = public_profile(profile)
    return ProfileResponse(
        id=profile["id"],
        email=profile.get("email", principal.email),
        name=profile.get("name", principal.name),
        created_at=profile.get("createdAt"),
        subscription_plan=profile.get("subscriptionPlan"),
        enrolled_challenges=[str(c) for c in profile.get("enrolledChallenges", [])],
        published_essays=profile.get("publishedEssays", []),
        liked_essays=profile.get("likedEssays", []),
        partner=profile.get("partner"),
    )


@router.get("/me", response_model=ProfileResponse)
async def me(
    principal: Principal | None = Depends(get_current_principal),
    store: DocumentStore = Depends(get_document_store),
) -> ProfileResponse:
    """Current user's profile."""
    principal = require_principal(principal)
    return await _profile_response(store, principal)


@router.patch("/me", response_model=ProfileResponse)
async def update_me(
    body: ProfileUpdateRequest,
    principal: Principal | None = Depends(get_current_principal),
    identity: IdentityProvider = Depends(get_identity_provider),
    store: DocumentStore = Depends(get_document_store),
) -> ProfileResponse:
    """Update the display name."""
    principal = await identity.update_profile(principal, body.name)
    return await _profile_response(store, principal)
