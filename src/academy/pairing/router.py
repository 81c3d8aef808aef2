"""Accountability partner endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from academy.auth.service import Principal, require_principal
from academy.dependencies import get_current_principal, get_document_store, get_reply_strategy
from academy.errors import NotFoundError
from academy.pairing.replies import ReplyStrategy
from academy.pairing.schemas import MessageListResponse, MessageResponse, PartnerResponse, SendMessageRequest
from academy.pairing.service import get_partner, get_thread, send_message
from academy.store.base import DocumentStore

router = APIRouter(prefix="/api/v1/partner", tags=["Partner"])


def _message_response(message: dict[str, Any]) -> MessageResponse:
    return MessageResponse(
        author=message["author"],
        text=message["text"],
        is_partner=message.get("isPartner", False),
        created_at=message.get("createdAt", ""),
    )


@router.get("", response_model=PartnerResponse)
async def get_partner_endpoint(
    principal: Principal | None = Depends(get_current_principal),
    store: DocumentStore = Depends(get_document_store),
) -> PartnerResponse:
    """The current user's accountability partner."""
    principal = require_principal(principal)
    partner = await get_partner(store, principal.user_id)
    if partner is None:
        msg = "No accountability partner assigned"
        raise NotFoundError(msg)
    return PartnerResponse(**partner)


@router.get("/messages", response_model=MessageListResponse)
async def list_messages_endpoint(
    principal: Principal | None = Depends(get_current_principal),
    store: DocumentStore = Depends(get_document_store),
) -> MessageListResponse:
    principal = require_principal(principal)
    messages = await get_thread(store, principal.user_id)
    return MessageListResponse(messages=[_message_response(m) for m in messages])


@router.post("/messages", response_model=MessageListResponse, status_code=201)
async def send_message_endpoint(
    body: SendMessageRequest,
    principal: Principal | None = Depends(get_current_principal),
    store: DocumentStore = Depends(get_document_store),
    reply_strategy: ReplyStrategy = Depends(get_reply_strategy),
) -> MessageListResponse:
    """Send a message to the partner. Returns the new messages, including any reply."""
    principal = require_principal(principal)
    appended = await send_message(store, principal.user_id, body.text, reply_strategy)
    return MessageListResponse(messages=[_message_response(m) for m in appended])
