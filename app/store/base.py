"""
app/store/base.py

Abstract interface for the blob store layer.

Design goals:
  - Services depend only on this interface, never on a concrete backend.
  - StoredDocument is the shared vocabulary between the store and services.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional


# ── Shared data-transfer objects ──────────────────────────────────────────────

@dataclass(frozen=True)
class StoredDocument:
    """
    Metadata of one PDF held by the store. The bytes stay in the store and
    are fetched separately through ``DocumentStore.open_stream``.

    Attributes:
        id           : Opaque identifier assigned by the store.
        filename     : Original filename as supplied by the uploader (untrusted).
        content_type : Always application/pdf for documents written by this service.
        upload_date  : UTC timestamp set by the service at write time.
        length       : Payload size in bytes.
    """

    id: str
    filename: str
    content_type: str
    upload_date: datetime
    length: int


# ── Abstract base ──────────────────────────────────────────────────────────────

class DocumentStore(ABC):
    """
    Contract every blob-store backend must fulfil.

    Concrete implementations (e.g. GridFSDocumentStore) wrap a specific
    backend and translate its API to this interface. Implementations must
    be safe to call from several threads at once.
    """

    @abstractmethod
    def put(self, filename: str, data: bytes, upload_date: datetime) -> str:
        """
        Durably write one PDF and return its store-assigned id.

        The document must not be visible to ``find_latest`` until the
        write has fully completed.

        Raises:
            StorageError: If the write fails. No partial document remains.
        """

    @abstractmethod
    def find_latest(self) -> Optional[StoredDocument]:
        """
        Return the document with the newest upload date, or None when the
        store is empty. Ties are broken by the most recent insertion.

        Raises:
            StorageError: If the metadata query fails.
        """

    @abstractmethod
    def open_stream(self, document_id: str) -> Iterator[bytes]:
        """
        Open a document for reading and return an iterator over its bytes.

        Opening happens eagerly so a missing document or a dead connection
        is reported before any byte is produced.

        Raises:
            StorageError: If the document cannot be opened, or (raised from
                          the iterator) if a later read fails.
        """

    def close(self) -> None:
        """Release backend resources. No-op by default."""
