"""Dict-backed document store for development and tests."""

from __future__ import annotations

import copy
from typing import Any

from academy.errors import DocumentExistsError
from academy.store.base import DocumentStore, matches, merge_document, new_document_id, sort_documents


class InMemoryDocumentStore(DocumentStore):
    """Keeps every collection in a process-local dict, preserving insertion order."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    def _bucket(self, collection: str) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(collection, {})

    @staticmethod
    def _with_id(doc_id: str, data: dict[str, Any]) -> dict[str, Any]:
        doc = copy.deepcopy(data)
        doc["id"] = doc_id
        return doc

    async def create(self, collection: str, data: dict[str, Any], doc_id: str | None = None) -> str:
        doc_id = doc_id or new_document_id()
        bucket = self._bucket(collection)
        if doc_id in bucket:
            msg = f"Document {collection}/{doc_id} already exists"
            raise DocumentExistsError(msg)
        body = {k: v for k, v in data.items() if k != "id"}
        bucket[doc_id] = copy.deepcopy(body)
        return doc_id

    async def read(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        data = self._bucket(collection).get(str(doc_id))
        return None if data is None else self._with_id(str(doc_id), data)

    async def set(self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = False) -> None:
        bucket = self._bucket(collection)
        body = {k: v for k, v in data.items() if k != "id"}
        bucket[str(doc_id)] = merge_document(bucket.get(str(doc_id)), body, merge)

    async def update(self, collection: str, doc_id: str, partial: dict[str, Any], merge: bool = True) -> None:
        bucket = self._bucket(collection)
        if str(doc_id) not in bucket:
            msg = f"Document {collection}/{doc_id} does not exist"
            raise KeyError(msg)
        body = {k: v for k, v in partial.items() if k != "id"}
        bucket[str(doc_id)] = merge_document(bucket[str(doc_id)], body, merge)

    async def delete(self, collection: str, doc_id: str) -> None:
        self._bucket(collection).pop(str(doc_id), None)

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        docs = [
            self._with_id(doc_id, data)
            for doc_id, data in self._bucket(collection).items()
            if matches(data, filters)
        ]
        docs = sort_documents(docs, order_by, descending)
        return docs[:limit] if limit is not None else docs
