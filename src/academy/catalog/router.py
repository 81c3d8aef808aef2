"""Challenge catalog endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from academy.catalog.service import filter_catalog, get_challenge, load_catalog
from academy.dependencies import get_document_store
from academy.store.base import DocumentStore

router = APIRouter(prefix="/api/v1/challenges", tags=["Catalog"])


@router.get("")
async def list_challenges(
    category: str | None = Query(None),
    type: str | None = Query(None),  # noqa: A002
    store: DocumentStore = Depends(get_document_store),
) -> dict[str, Any]:
    """All challenges, optionally filtered by category and type."""
    challenges = filter_catalog(await load_catalog(store), category=category, challenge_type=type)
    return {"challenges": challenges, "total": len(challenges)}


@router.get("/{challenge_id}")
async def get_challenge_endpoint(
    challenge_id: str,
    store: DocumentStore = Depends(get_document_store),
) -> dict[str, Any]:
    """Challenge detail."""
    return await get_challenge(store, challenge_id)
