"""SQL-backed document store over the ``documents`` table."""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import delete, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from academy.db.models import Document
from academy.errors import DocumentExistsError, ExternalServiceError
from academy.store.base import DocumentStore, matches, merge_document, new_document_id, sort_documents

logger = structlog.get_logger()


class SqlDocumentStore(DocumentStore):
    """Each call runs in its own session and commits on success.

    Filters and ordering are evaluated in Python over the collection's rows so
    JSON typing stays identical across PostgreSQL and SQLite.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @staticmethod
    def _to_dict(row: Document) -> dict[str, Any]:
        doc = dict(row.data or {})
        doc["id"] = row.id
        return doc

    async def create(self, collection: str, data: dict[str, Any], doc_id: str | None = None) -> str:
        doc_id = doc_id or new_document_id()
        body = {k: v for k, v in data.items() if k != "id"}
        try:
            async with self._session_factory() as session:
                session.add(Document(collection=collection, id=str(doc_id), data=body))
                await session.commit()
        except IntegrityError as e:
            msg = f"Document {collection}/{doc_id} already exists"
            raise DocumentExistsError(msg) from e
        except SQLAlchemyError as e:
            logger.error("document_create_failed", collection=collection, doc_id=doc_id, error=str(e))
            msg = f"Could not create {collection} document"
            raise ExternalServiceError(msg) from e
        return str(doc_id)

    async def read(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        try:
            async with self._session_factory() as session:
                row = await session.get(Document, (collection, str(doc_id)))
                return None if row is None else self._to_dict(row)
        except SQLAlchemyError as e:
            msg = f"Could not read {collection} document"
            raise ExternalServiceError(msg) from e

    async def set(self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = False) -> None:
        body = {k: v for k, v in data.items() if k != "id"}
        try:
            async with self._session_factory() as session:
                row = await session.get(Document, (collection, str(doc_id)))
                if row is None:
                    session.add(Document(collection=collection, id=str(doc_id), data=body))
                else:
                    row.data = merge_document(row.data, body, merge)
                await session.commit()
        except SQLAlchemyError as e:
            msg = f"Could not write {collection} document"
            raise ExternalServiceError(msg) from e

    async def update(self, collection: str, doc_id: str, partial: dict[str, Any], merge: bool = True) -> None:
        body = {k: v for k, v in partial.items() if k != "id"}
        try:
            async with self._session_factory() as session:
                row = await session.get(Document, (collection, str(doc_id)))
                if row is None:
                    msg = f"Document {collection}/{doc_id} does not exist"
                    raise KeyError(msg)
                row.data = merge_document(row.data, body, merge)
                await session.commit()
        except SQLAlchemyError as e:
            msg = f"Could not update {collection} document"
            raise ExternalServiceError(msg) from e

    async def delete(self, collection: str, doc_id: str) -> None:
        try:
            async with self._session_factory() as session:
                await session.execute(
                    delete(Document).where(Document.collection == collection, Document.id == str(doc_id))
                )
                await session.commit()
        except SQLAlchemyError as e:
            msg = f"Could not delete {collection} document"
            raise ExternalServiceError(msg) from e

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(Document).where(Document.collection == collection).order_by(Document.created_at)
                )
                rows = list(result.scalars().all())
        except SQLAlchemyError as e:
            msg = f"Could not query {collection}"
            raise ExternalServiceError(msg) from e

        docs = [self._to_dict(row) for row in rows if matches(row.data or {}, filters)]
        docs = sort_documents(docs, order_by, descending)
        return docs[:limit] if limit is not None else docs

    async def ping(self) -> None:
        async with self._session_factory() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
