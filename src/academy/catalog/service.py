"""Challenge catalog: seed challenges merged with authored ones."""

from __future__ import annotations

import copy
from typing import Any

import structlog

from academy.catalog.seed import SEED_CHALLENGES
from academy.errors import NotFoundError
from academy.store.base import CHALLENGES, DocumentStore

logger = structlog.get_logger()


def challenge_key(challenge_id: Any) -> str:
    """Ids may be ints (seed) or strings (store); compare them as strings."""
    return str(challenge_id)


def merge_catalog(
    seed: list[dict[str, Any]],
    dynamic: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Seed entries first, then dynamic ones whose id is not taken yet."""
    merged = [copy.deepcopy(c) for c in seed]
    seen = {challenge_key(c["id"]) for c in merged}
    for challenge in dynamic:
        key = challenge_key(challenge.get("id"))
        if key in seen:
            continue
        seen.add(key)
        merged.append(challenge)
    return merged


async def load_catalog(
    store: DocumentStore,
    seed: list[dict[str, Any]] | None = None,
) -> list[dict[str, Any]]:
    """Seed challenges plus the ``challenges`` collection.

    Never fails: if the store is unavailable the seed list is returned alone.
    """
    seed = SEED_CHALLENGES if seed is None else seed
    try:
        dynamic = await store.query(CHALLENGES)
    except Exception:
        logger.warning("catalog_store_unavailable", exc_info=True)
        return [copy.deepcopy(c) for c in seed]
    return merge_catalog(seed, dynamic)


async def get_challenge(store: DocumentStore, challenge_id: Any) -> dict[str, Any]:
    """Look up one challenge in the merged catalog."""
    key = challenge_key(challenge_id)
    for challenge in await load_catalog(store):
        if challenge_key(challenge["id"]) == key:
            return challenge
    msg = f"Challenge {challenge_id} not found"
    raise NotFoundError(msg)


def filter_catalog(
    challenges: list[dict[str, Any]],
    category: str | None = None,
    challenge_type: str | None = None,
) -> list[dict[str, Any]]:
    return [
        c for c in challenges
        if (category is None or c.get("category") == category)
        and (challenge_type is None or c.get("type") == challenge_type)
    ]
