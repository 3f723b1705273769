"""
app/services/document_service.py

Looks up the most recently uploaded PDF and opens it for streaming.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from fastapi.concurrency import run_in_threadpool

from app.core.exceptions import DocumentNotFoundError, StorageError
from app.core.logger import get_logger
from app.store.base import DocumentStore, StoredDocument

logger = get_logger(__name__)


@dataclass
class DocumentDownload:
    """A document's metadata plus an already-opened iterator over its bytes."""

    document: StoredDocument
    chunks: Iterator[bytes]


class DocumentService:

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def latest(self) -> DocumentDownload:
        """
        Return the newest document, opened and ready to stream.

        Raises:
            DocumentNotFoundError: The store holds no documents.
            StorageError:          The query or the open failed.
        """
        document = await run_in_threadpool(self._store.find_latest)
        if document is None:
            raise DocumentNotFoundError("No PDFs found")

        chunks = await run_in_threadpool(self._store.open_stream, document.id)
        logger.info("Serving latest PDF '%s' (%s, %d bytes).",
                    document.filename, document.id, document.length)
        return DocumentDownload(document=document, chunks=self._watch(chunks, document))

    @staticmethod
    def _watch(chunks: Iterator[bytes], document: StoredDocument) -> Iterator[bytes]:
        # Headers are already on the wire once this runs; a failure here
        # can only abort the connection.
        try:
            yield from chunks
        except StorageError:
            logger.exception("Stream of '%s' (%s) failed mid-transfer.",
                             document.filename, document.id)
            raise
        finally:
            # Runs on client disconnect too, releasing the backend cursor.
            close = getattr(chunks, "close", None)
            if close is not None:
                close()
