"""Community feed endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from academy.auth.service import Principal
from academy.config import Settings
from academy.dependencies import get_current_principal, get_document_store, get_settings_dep
from academy.feed.schemas import (
    CommentListResponse,
    CommentRequest,
    CommentResponse,
    FeedItemResponse,
    FeedResponse,
    LikeResponse,
)
from academy.feed.service import comment, like, list_comments, page_public, view
from academy.store.base import DocumentStore

router = APIRouter(prefix="/api/v1/feed", tags=["Feed"])


def _comment_response(c: dict[str, Any]) -> CommentResponse:
    return CommentResponse(text=c["text"], author=c.get("author", "Anonymous"), created_at=c.get("createdAt", ""))


@router.get("", response_model=FeedResponse)
async def feed_endpoint(
    page: int = Query(1, ge=1),
    per_page: int | None = Query(None, ge=1, le=100),
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings_dep),
) -> FeedResponse:
    """Public essays, newest first (public, no auth)."""
    per_page = per_page or settings.feed_page_size
    items, total = await page_public(store, page, per_page)
    return FeedResponse(
        items=[FeedItemResponse.from_entry(e) for e in items],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get("/{entry_id}", response_model=FeedItemResponse)
async def read_entry_endpoint(
    entry_id: str,
    store: DocumentStore = Depends(get_document_store),
) -> FeedItemResponse:
    """Full essay; counts a view."""
    return FeedItemResponse.from_entry(await view(store, entry_id), include_content=True)


@router.post("/{entry_id}/like", response_model=LikeResponse)
async def like_endpoint(
    entry_id: str,
    principal: Principal | None = Depends(get_current_principal),
    store: DocumentStore = Depends(get_document_store),
) -> LikeResponse:
    """Like or unlike."""
    return LikeResponse(**await like(store, principal, entry_id))


@router.get("/{entry_id}/comments", response_model=CommentListResponse)
async def list_comments_endpoint(
    entry_id: str,
    store: DocumentStore = Depends(get_document_store),
) -> CommentListResponse:
    comments = await list_comments(store, entry_id)
    return CommentListResponse(comments=[_comment_response(c) for c in comments])


@router.post("/{entry_id}/comments", response_model=CommentResponse, status_code=201)
async def add_comment_endpoint(
    entry_id: str,
    body: CommentRequest,
    principal: Principal | None = Depends(get_current_principal),
    store: DocumentStore = Depends(get_document_store),
) -> CommentResponse:
    return _comment_response(await comment(store, principal, entry_id, body.text))
