"""
app/services/upload_service.py

Validates one uploaded PDF and writes it to the blob store:

    UploadFile
      └─ content-type check      → UnsupportedMediaTypeError
           └─ bounded read       → PayloadTooLargeError
                └─ DocumentStore.put(filename, bytes, now)

The store is constructor-injected; controllers build one service per
request from the StoreContext, tests pass a mock.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from app.core.constants import ALLOWED_PDF_CONTENT_TYPE, MAX_UPLOAD_BYTES
from app.core.exceptions import PayloadTooLargeError, UnsupportedMediaTypeError
from app.core.logger import get_logger
from app.models.document_models import UploadResponse
from app.store.base import DocumentStore

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _media_type(content_type: str | None) -> str:
    """``application/PDF; name=x`` → ``application/pdf``."""
    return (content_type or "").split(";", 1)[0].strip().lower()


class UploadService:
    """
    Stores exactly one PDF per call.

    Validation happens entirely before the store is touched, so a rejected
    upload never leaves anything behind.
    """

    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], datetime] = _utcnow,
        max_bytes: int = MAX_UPLOAD_BYTES,
    ) -> None:
        self._store = store
        self._clock = clock
        self._max_bytes = max_bytes

    async def upload(self, upload: UploadFile) -> UploadResponse:
        """
        Validate and persist a single uploaded file.

        Args:
            upload: The file part taken from the multipart form.

        Returns:
            UploadResponse echoing the original filename.

        Raises:
            UnsupportedMediaTypeError: Declared content type is not application/pdf.
            PayloadTooLargeError:      File is larger than the size limit.
            StorageError:              Propagated from the store on write failure.
        """
        filename = upload.filename or "upload.pdf"

        if _media_type(upload.content_type) != ALLOWED_PDF_CONTENT_TYPE:
            raise UnsupportedMediaTypeError(
                f"'{filename}' was sent as '{upload.content_type}', expected {ALLOWED_PDF_CONTENT_TYPE}."
            )

        # At most limit + 1 bytes are held in memory.
        data = await upload.read(self._max_bytes + 1)
        if len(data) > self._max_bytes:
            raise PayloadTooLargeError(
                f"'{filename}' exceeds the maximum size of {self._max_bytes} bytes."
            )

        upload_date = self._clock()
        document_id = await run_in_threadpool(self._store.put, filename, data, upload_date)
        logger.info("Stored '%s' (%d bytes) as %s.", filename, len(data), document_id)

        return UploadResponse(message="PDF uploaded successfully", filename=filename)
