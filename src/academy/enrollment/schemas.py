"""Pydantic schemas for enrollment and checkout endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class EnrollmentResponse(BaseModel):
    id: str
    user_id: str
    challenge_id: str
    enrolled_at: str
    payment_id: str | None = None
    amount_paid: int = 0
    status: str = "active"


class EnrollmentListResponse(BaseModel):
    enrollments: list[EnrollmentResponse]
    total: int


class CheckoutResponse(BaseModel):
    client_secret: str
    amount: int
    challenge_id: str


class ConfirmCheckoutRequest(BaseModel):
    client_secret: str = Field(..., min_length=1)
    card: dict[str, Any] = Field(default_factory=dict)
