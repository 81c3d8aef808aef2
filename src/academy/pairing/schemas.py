"""Pydantic schemas for partner endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PartnerResponse(BaseModel):
    id: int
    name: str
    interests: list[str] = []
    completed: int = 0
    streak: int = 0


class MessageResponse(BaseModel):
    author: str
    text: str
    is_partner: bool
    created_at: str


class MessageListResponse(BaseModel):
    messages: list[MessageResponse]


class SendMessageRequest(BaseModel):
    text: str = Field("", max_length=4000)
