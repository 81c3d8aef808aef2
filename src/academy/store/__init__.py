"""Document store backends."""

from academy.store.base import DocumentStore
from academy.store.memory import InMemoryDocumentStore
from academy.store.sql import SqlDocumentStore

__all__ = ["DocumentStore", "InMemoryDocumentStore", "SqlDocumentStore"]
