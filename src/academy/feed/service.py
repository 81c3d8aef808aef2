"""Community feed: public submissions plus seed essays, with likes, comments and views."""

from __future__ import annotations

import copy
from collections.abc import AsyncIterator
from typing import Any

import structlog

from academy.auth.service import Principal, require_principal
from academy.catalog.seed import SEED_COMMUNITY_ESSAYS
from academy.errors import MissingFieldsError, NotFoundError
from academy.store.base import ESSAYS, USERS, DocumentStore, utc_timestamp

logger = structlog.get_logger()


def _feed_order(entry: dict[str, Any]) -> tuple[str, str]:
    return (entry.get("publishedAt") or "", str(entry["id"]))


async def list_public(
    store: DocumentStore,
    seed: list[dict[str, Any]] | None = None,
) -> AsyncIterator[dict[str, Any]]:
    """Yield every public entry, newest first.

    Re-evaluated on each call. A seed essay that has picked up likes or
    comments has a stored copy, which replaces the seed entry.
    """
    seed = SEED_COMMUNITY_ESSAYS if seed is None else seed
    stored = {doc["id"]: doc for doc in await store.query(ESSAYS, {"isPublic": True})}
    entries = [stored.pop(s["id"], None) or copy.deepcopy(s) for s in seed]
    entries.extend(stored.values())
    entries.sort(key=_feed_order, reverse=True)
    for entry in entries:
        yield entry


async def page_public(store: DocumentStore, page: int, per_page: int) -> tuple[list[dict[str, Any]], int]:
    """One page of the feed plus the total count."""
    offset = (page - 1) * per_page
    items: list[dict[str, Any]] = []
    total = 0
    async for entry in list_public(store):
        if offset <= total < offset + per_page:
            items.append(entry)
        total += 1
    return items, total


def _seed_entry(entry_id: str) -> dict[str, Any] | None:
    for essay in SEED_COMMUNITY_ESSAYS:
        if essay["id"] == entry_id:
            return copy.deepcopy(essay)
    return None


async def get_public(store: DocumentStore, entry_id: str) -> dict[str, Any]:
    """A public entry by id, stored or seed."""
    doc = await store.read(ESSAYS, entry_id)
    if doc is not None and doc.get("isPublic"):
        return doc
    seed = _seed_entry(entry_id) if doc is None else None
    if seed is None:
        msg = f"Essay {entry_id} not found"
        raise NotFoundError(msg)
    return seed


async def _save(store: DocumentStore, entry: dict[str, Any], changes: dict[str, Any]) -> dict[str, Any]:
    """Apply ``changes``, materializing a seed entry into the store on first write."""
    entry.update(changes)
    if await store.read(ESSAYS, entry["id"]) is None:
        await store.set(ESSAYS, entry["id"], entry)
    else:
        await store.update(ESSAYS, entry["id"], changes)
    return entry


async def like(store: DocumentStore, principal: Principal | None, entry_id: str) -> dict[str, Any]:
    """Toggle the entry in the user's liked set; the like counter follows the toggle."""
    principal = require_principal(principal)
    entry = await get_public(store, entry_id)

    profile = await store.read(USERS, principal.user_id) or {}
    liked_set = list(profile.get("likedEssays", []))
    if entry_id in liked_set:
        liked_set.remove(entry_id)
        liked = False
        likes = max(0, entry.get("likes", 0) - 1)
    else:
        liked_set.append(entry_id)
        liked = True
        likes = entry.get("likes", 0) + 1

    await store.set(USERS, principal.user_id, {"likedEssays": liked_set}, merge=True)
    await _save(store, entry, {"likes": likes})
    logger.info("essay_like_toggled", essay_id=entry_id, user_id=principal.user_id, liked=liked)
    return {"liked": liked, "likes": likes}


async def comment(
    store: DocumentStore,
    principal: Principal | None,
    entry_id: str,
    text: str,
) -> dict[str, Any]:
    """Append a comment. Comments are never edited or removed."""
    if not text or not text.strip():
        msg = "Comment text cannot be empty"
        raise MissingFieldsError(msg)
    principal = require_principal(principal)
    entry = await get_public(store, entry_id)

    new_comment = {
        "text": text.strip(),
        "author": principal.name or "Anonymous",
        "userId": principal.user_id,
        "createdAt": utc_timestamp(),
    }
    comments = [*entry.get("comments", []), new_comment]
    await _save(store, entry, {"comments": comments, "commentCount": entry.get("commentCount", 0) + 1})
    return new_comment


async def list_comments(store: DocumentStore, entry_id: str) -> list[dict[str, Any]]:
    entry = await get_public(store, entry_id)
    return list(entry.get("comments", []))


async def view(store: DocumentStore, entry_id: str) -> dict[str, Any]:
    """Fetch an entry for reading, counting the view on user submissions."""
    entry = await get_public(store, entry_id)
    if entry.get("authorId"):
        entry = await _save(store, entry, {"views": entry.get("views", 0) + 1})
    return entry
