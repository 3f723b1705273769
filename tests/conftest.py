"""
tests/conftest.py

Shared pytest fixtures available to all test modules.

Fixtures defined here are auto-discovered by pytest — no import needed.
The app is always built with an in-memory DocumentStore so no MongoDB
server is required.
"""

from __future__ import annotations

import io
import itertools
import threading
from datetime import datetime
from typing import Dict, Iterator, Optional

import pytest
from fastapi.testclient import TestClient

from app.core.exceptions import StorageError
from app.main import create_app
from app.store.base import DocumentStore, StoredDocument


# ── In-memory store ────────────────────────────────────────────────────────────

class InMemoryDocumentStore(DocumentStore):
    """
    Dict-backed DocumentStore.

    Ids are zero-padded insertion counters, so sorting on (upload_date, id)
    reproduces the newest-date-then-newest-insert ordering of the real store.
    """

    def __init__(self, chunk_size: int = 8) -> None:
        self.documents: Dict[str, StoredDocument] = {}
        self.payloads: Dict[str, bytes] = {}
        self.chunk_size = chunk_size
        self.closed = False
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def put(self, filename: str, data: bytes, upload_date: datetime) -> str:
        with self._lock:
            document_id = f"{next(self._ids):08d}"
            self.payloads[document_id] = bytes(data)
            self.documents[document_id] = StoredDocument(
                id=document_id,
                filename=filename,
                content_type="application/pdf",
                upload_date=upload_date,
                length=len(data),
            )
        return document_id

    def find_latest(self) -> Optional[StoredDocument]:
        with self._lock:
            if not self.documents:
                return None
            return max(self.documents.values(), key=lambda d: (d.upload_date, d.id))

    def open_stream(self, document_id: str) -> Iterator[bytes]:
        if document_id not in self.payloads:
            raise StorageError(f"Document '{document_id}' is missing from the store.")
        data = self.payloads[document_id]
        return iter([data[i:i + self.chunk_size] for i in range(0, len(data), self.chunk_size)])

    def close(self) -> None:
        self.closed = True


class BrokenDocumentStore(DocumentStore):
    """Store whose every operation fails, as if the server went away."""

    def put(self, filename: str, data: bytes, upload_date: datetime) -> str:
        raise StorageError("connection reset by peer")

    def find_latest(self) -> Optional[StoredDocument]:
        raise StorageError("connection reset by peer")

    def open_stream(self, document_id: str) -> Iterator[bytes]:
        raise StorageError("connection reset by peer")


# ── Store + client fixtures ────────────────────────────────────────────────────

@pytest.fixture
def memory_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def client(memory_store: InMemoryDocumentStore) -> Iterator[TestClient]:
    """
    A TestClient wrapping a fresh app bound to ``memory_store``.

    Function-scoped: every test starts from an empty store.
    The lifespan context (startup/shutdown) is entered automatically.
    """
    app = create_app(store_factory=lambda: memory_store)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def broken_client() -> Iterator[TestClient]:
    """A TestClient whose store fails every call."""
    app = create_app(store_factory=BrokenDocumentStore)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


# ── Sample file fixtures ───────────────────────────────────────────────────────

@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """Minimal PDF header bytes. Only the declared content type is checked."""
    return b"%PDF-1.4\n%%EOF"


def _pdf_part(filename: str, data: bytes, content_type: str = "application/pdf") -> tuple:
    return ("pdf", (filename, io.BytesIO(data), content_type))


@pytest.fixture
def pdf_part():
    """
    Factory for ``files=`` entries under the 'pdf' field:

        client.post("/upload", files=[pdf_part("a.pdf", b"...")])
    """
    return _pdf_part


@pytest.fixture
def sample_pdf_file(sample_pdf_bytes: bytes) -> tuple:
    """
    A (field_name, (filename, file_obj, content_type)) tuple ready for
    use with TestClient's `files=` parameter.

    Usage:
        response = client.post("/upload", files=[sample_pdf_file])
    """
    return _pdf_part("sample.pdf", sample_pdf_bytes)


@pytest.fixture
def sample_txt_file() -> tuple:
    """A non-PDF upload tuple for negative-case tests."""
    return ("pdf", ("readme.txt", io.BytesIO(b"hello world"), "text/plain"))
