"""Document store interface.

A minimal per-collection document API: create, read, set, update, delete
and equality-filtered queries. Writes are atomic per document only; nothing
here composes writes across documents.
"""

from __future__ import annotations

import copy
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

# Collections used by the application
CHALLENGES = "challenges"
USERS = "users"
SESSIONS = "sessions"
ENROLLMENTS = "enrollments"
ESSAYS = "essays"
THREADS = "threads"
PAYMENTS = "payments"


def new_document_id() -> str:
    """Generate an opaque document id."""
    return uuid.uuid4().hex


def merge_document(existing: dict[str, Any] | None, partial: dict[str, Any], merge: bool) -> dict[str, Any]:
    """Apply ``partial`` over ``existing`` (shallow merge) or replace it outright."""
    if merge and existing is not None:
        merged = copy.deepcopy(existing)
        merged.update(copy.deepcopy(partial))
        return merged
    return copy.deepcopy(partial)


def matches(data: dict[str, Any], filters: dict[str, Any] | None) -> bool:
    """Equality match on top-level fields."""
    if not filters:
        return True
    return all(data.get(key) == value for key, value in filters.items())


def sort_documents(
    docs: list[dict[str, Any]],
    order_by: str | None,
    descending: bool = False,
) -> list[dict[str, Any]]:
    """Sort by a top-level field; documents missing the field sort last."""
    if order_by is None:
        return docs
    present = [d for d in docs if d.get(order_by) is not None]
    missing = [d for d in docs if d.get(order_by) is None]
    present.sort(key=lambda d: d[order_by], reverse=descending)
    return present + missing


class DocumentStore(ABC):
    """Abstract async document store.

    Documents are plain dicts. Returned documents carry their ``id``; the id is
    never part of the stored body.
    """

    @abstractmethod
    async def create(self, collection: str, data: dict[str, Any], doc_id: str | None = None) -> str:
        """Insert a new document and return its id. Raises DocumentExistsError if the id is taken."""
        ...

    @abstractmethod
    async def read(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Fetch a document, or None if absent."""
        ...

    @abstractmethod
    async def set(self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = False) -> None:
        """Write a document, creating it if needed. ``merge`` keeps fields not in ``data``."""
        ...

    @abstractmethod
    async def update(self, collection: str, doc_id: str, partial: dict[str, Any], merge: bool = True) -> None:
        """Update an existing document. Raises KeyError if it does not exist."""
        ...

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. Deleting an absent document is a no-op."""
        ...

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return documents matching all equality ``filters``."""
        ...

    async def ping(self) -> None:
        """Raise if the backend is unreachable."""
        return None


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string, the timestamp format of every document."""
    return datetime.now(timezone.utc).isoformat()
