"""Accountability pairing: partner assignment and the user/partner message thread.

Each user gets exactly one partner, drawn uniformly at random from the
configured pool the first time they sign in. The assignment is stored on
the user's profile and the thread lives in the ``threads`` collection
(keyed by user id), so both survive a reload.
"""

from __future__ import annotations

import random
from typing import Any

import structlog

from academy.config import PartnerProfile
from academy.errors import MissingFieldsError, NotFoundError
from academy.pairing.replies import ReplyStrategy
from academy.store.base import THREADS, USERS, DocumentStore, utc_timestamp

logger = structlog.get_logger()

USER_AUTHOR = "You"


def greeting_for(partner: dict[str, Any]) -> str:
    return (
        f"Hi! I'm {partner['name']}, your accountability partner. "
        "Looking forward to supporting you through your learning journey!"
    )


def _message(author: str, text: str, is_partner: bool) -> dict[str, Any]:
    return {"author": author, "text": text, "isPartner": is_partner, "createdAt": utc_timestamp()}


async def get_partner(store: DocumentStore, user_id: str) -> dict[str, Any] | None:
    """The user's assigned partner, if any."""
    profile = await store.read(USERS, user_id)
    if profile is None:
        return None
    return profile.get("partner")


async def assign_partner_if_absent(
    store: DocumentStore,
    user_id: str,
    pool: list[PartnerProfile],
    rng: random.Random,
) -> dict[str, Any]:
    """Assign a partner from ``pool`` unless the user already has one.

    A second call returns the existing assignment without writing anything.
    """
    existing = await get_partner(store, user_id)
    if existing:
        return existing

    if not pool:
        msg = "Partner pool is empty"
        raise ValueError(msg)

    partner = rng.choice(pool).model_dump()
    await store.set(USERS, user_id, {"partner": partner}, merge=True)
    await store.set(THREADS, user_id, {
        "userId": user_id,
        "partner": partner,
        "messages": [_message(partner["name"], greeting_for(partner), is_partner=True)],
        "reviewQueue": [],
    })
    logger.info("partner_assigned", user_id=user_id, partner_id=partner["id"], pool_size=len(pool))
    return partner


async def _load_thread(store: DocumentStore, user_id: str) -> dict[str, Any]:
    thread = await store.read(THREADS, user_id)
    if thread is None:
        msg = "No accountability partner assigned"
        raise NotFoundError(msg)
    return thread


async def get_thread(store: DocumentStore, user_id: str) -> list[dict[str, Any]]:
    """Messages in insertion order."""
    thread = await _load_thread(store, user_id)
    return list(thread.get("messages", []))


async def post_to_thread(
    store: DocumentStore,
    user_id: str,
    text: str,
    *,
    from_partner: bool,
) -> dict[str, Any]:
    """Append one message, authored by the partner or by the user."""
    thread = await _load_thread(store, user_id)
    author = thread["partner"]["name"] if from_partner else USER_AUTHOR
    message = _message(author, text, is_partner=from_partner)
    await store.update(THREADS, user_id, {"messages": [*thread.get("messages", []), message]})
    return message


async def send_message(
    store: DocumentStore,
    user_id: str,
    text: str,
    reply_strategy: ReplyStrategy,
) -> list[dict[str, Any]]:
    """Append the user's message and the partner's reply (if the strategy gives one).

    Returns the appended messages.
    """
    if not text or not text.strip():
        msg = "Message text cannot be empty"
        raise MissingFieldsError(msg)

    thread = await _load_thread(store, user_id)
    appended = [_message(USER_AUTHOR, text, is_partner=False)]
    reply = reply_strategy.reply(thread["partner"], text)
    if reply:
        appended.append(_message(thread["partner"]["name"], reply, is_partner=True))

    await store.update(THREADS, user_id, {"messages": [*thread.get("messages", []), *appended]})
    return appended


# --- Review queue ---


async def enqueue_review(store: DocumentStore, user_id: str, submission_id: str) -> None:
    thread = await _load_thread(store, user_id)
    queue = list(thread.get("reviewQueue", []))
    if submission_id not in queue:
        queue.append(submission_id)
        await store.update(THREADS, user_id, {"reviewQueue": queue})


async def dequeue_review(store: DocumentStore, user_id: str, submission_id: str) -> None:
    thread = await _load_thread(store, user_id)
    queue = [sid for sid in thread.get("reviewQueue", []) if sid != submission_id]
    await store.update(THREADS, user_id, {"reviewQueue": queue})


async def review_queue(store: DocumentStore, user_id: str) -> list[str]:
    """Submission ids awaiting the partner's review, oldest first."""
    thread = await store.read(THREADS, user_id)
    return list(thread.get("reviewQueue", [])) if thread else []
