"""Schemas for payment history and subscription endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class PaymentHistoryResponse(BaseModel):
    payments: list[dict[str, Any]]


class SubscriptionResponse(BaseModel):
    plan_id: str | None = None
    status: str
    synced: bool


class SubscriptionUpdateRequest(BaseModel):
    plan_id: str = Field("", max_length=120)
