"""app/store/__init__.py — public API of the store package."""

from app.store.base import DocumentStore, StoredDocument
from app.store.context import StoreContext, get_store_context
from app.store.gridfs_store import GridFSDocumentStore

__all__ = [
    "DocumentStore",
    "StoredDocument",
    "StoreContext",
    "get_store_context",
    "GridFSDocumentStore",
]
