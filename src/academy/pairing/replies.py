"""Partner reply strategies.

The partner's reply to a user message is produced synchronously by an
injectable strategy, so it can be swapped out or disabled and is
deterministic under a seeded random source.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Any

from academy.config import DEFAULT_CANNED_REPLIES, Settings


class ReplyStrategy(ABC):
    """Produces the partner's reply to a user message, or None for no reply."""

    @abstractmethod
    def reply(self, partner: dict[str, Any], text: str) -> str | None:
        ...


class CannedReplyStrategy(ReplyStrategy):
    """Pick one of a fixed set of encouraging replies at random."""

    def __init__(self, rng: random.Random | None = None, replies: list[str] | None = None) -> None:
        self.rng = rng or random.Random()
        self.replies = list(replies or DEFAULT_CANNED_REPLIES)

    def reply(self, partner: dict[str, Any], text: str) -> str | None:
        if not self.replies:
            return None
        return self.rng.choice(self.replies)


class NoReplyStrategy(ReplyStrategy):
    def reply(self, partner: dict[str, Any], text: str) -> str | None:
        return None


def build_reply_strategy(settings: Settings, rng: random.Random) -> ReplyStrategy:
    """Strategy named by ``partner_reply_strategy``."""
    if settings.partner_reply_strategy == "none":
        return NoReplyStrategy()
    if settings.partner_reply_strategy == "canned":
        return CannedReplyStrategy(rng, settings.partner_canned_replies)
    msg = f"Unknown partner reply strategy: {settings.partner_reply_strategy}"
    raise ValueError(msg)
