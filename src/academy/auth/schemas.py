"""Request/response schemas for authentication endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class SignUpRequest(BaseModel):
    """Email registration request. Blank fields are rejected by the identity provider."""

    email: str = Field("", max_length=320)
    password: str = Field("", max_length=128)
    name: str = Field("", max_length=120)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()


class LoginRequest(BaseModel):
    """Login with email + password."""

    email: str = Field("", max_length=320)
    password: str = Field("", max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()


class UserResponse(BaseModel):
    id: str
    email: str
    name: str


class TokenResponse(BaseModel):
    """Token response returned after successful auth."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse
    partner: dict[str, Any] | None = None


class ProfileResponse(BaseModel):
    id: str
    email: str
    name: str
    created_at: str | None = None
    subscription_plan: str | None = None
    enrolled_challenges: list[str] = []
    published_essays: list[str] = []
    liked_essays: list[str] = []
    partner: dict[str, Any] | None = None


class ProfileUpdateRequest(BaseModel):
    name: str = Field("", max_length=120)
