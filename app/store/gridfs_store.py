"""
app/store/gridfs_store.py

MongoDB GridFS implementation of the DocumentStore interface.

Layout in the configured bucket (default ``pdfs``):
  pdfs.files   one record per PDF: filename, length, chunkSize, uploadDate
               and metadata {uploadDate, contentType}
  pdfs.chunks  the payload split into GridFS chunks

GridFS inserts the ``files`` record only after every chunk has been
written, so an upload in progress is never returned by ``find_latest``.
All backend-specific details are fully contained here — the rest of the
application never imports from ``pymongo`` or ``gridfs`` directly.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

from bson import ObjectId
from bson.errors import InvalidId
from gridfs import GridFSBucket
from gridfs.errors import NoFile
from pymongo import DESCENDING, MongoClient
from pymongo.errors import PyMongoError

from app.core.config import settings
from app.core.constants import (
    ALLOWED_PDF_CONTENT_TYPE,
    METADATA_CONTENT_TYPE,
    METADATA_UPLOAD_DATE,
)
from app.core.exceptions import StorageError, StoreConnectionError
from app.core.logger import get_logger
from app.store.base import DocumentStore, StoredDocument

logger = get_logger(__name__)

DEFAULT_DATABASE = "pdfdrop"


class GridFSDocumentStore(DocumentStore):
    """
    DocumentStore backed by a GridFS bucket.

    Holds one MongoClient for its whole lifetime. MongoClient pools
    connections and is thread-safe, so a single instance is shared by
    every request.
    """

    def __init__(self, client: MongoClient, database: str, bucket_name: str) -> None:
        self._client = client
        self._db = client[database]
        self._bucket_name = bucket_name
        self._bucket = GridFSBucket(self._db, bucket_name=bucket_name)
        self._files = self._db[f"{bucket_name}.files"]

    @classmethod
    def connect(
        cls,
        uri: str | None = None,
        database: str | None = None,
        bucket_name: str | None = None,
        timeout_ms: int | None = None,
    ) -> "GridFSDocumentStore":
        """
        Connect to MongoDB, verify the server answers, and return a store.

        Args:
            uri         : Connection string. Defaults to ``settings.mongodb_uri``.
            database    : Database name. Defaults to ``settings.mongodb_database``,
                          then to the database named in the URI.
            bucket_name : GridFS bucket. Defaults to ``settings.mongodb_bucket``.
            timeout_ms  : Server selection timeout for the initial ping.

        Raises:
            StoreConnectionError: If the URI is invalid or the server does
                                  not answer the ping.
        """
        uri = uri or settings.mongodb_uri
        bucket_name = bucket_name or settings.mongodb_bucket
        timeout_ms = timeout_ms or settings.mongodb_timeout_ms

        try:
            client: MongoClient = MongoClient(
                uri,
                serverSelectionTimeoutMS=timeout_ms,
                tz_aware=True,
            )
            client.admin.command("ping")
        except PyMongoError as exc:
            raise StoreConnectionError(f"Cannot connect to MongoDB: {exc}") from exc

        database = (
            database
            or settings.mongodb_database
            or client.get_default_database(default=DEFAULT_DATABASE).name
        )
        logger.info("Connected to MongoDB — database=%s  bucket=%s", database, bucket_name)
        return cls(client, database, bucket_name)

    # ── DocumentStore interface ────────────────────────────────────────────────

    def put(self, filename: str, data: bytes, upload_date: datetime) -> str:
        metadata = {
            METADATA_UPLOAD_DATE: upload_date,
            METADATA_CONTENT_TYPE: ALLOWED_PDF_CONTENT_TYPE,
        }
        grid_in = None
        try:
            grid_in = self._bucket.open_upload_stream(filename, metadata=metadata)
            grid_in.write(data)
            grid_in.close()
        except PyMongoError as exc:
            if grid_in is not None:
                self._abort(grid_in)
            raise StorageError(str(exc)) from exc

        document_id = str(grid_in._id)
        logger.debug("Wrote '%s' (%d bytes) to bucket '%s' as %s.",
                     filename, len(data), self._bucket_name, document_id)
        return document_id

    def find_latest(self) -> Optional[StoredDocument]:
        try:
            record = self._files.find_one(
                {},
                sort=[
                    (f"metadata.{METADATA_UPLOAD_DATE}", DESCENDING),
                    ("_id", DESCENDING),
                ],
            )
        except PyMongoError as exc:
            raise StorageError(f"latest-document query failed: {exc}") from exc

        if record is None:
            return None
        return self._to_document(record)

    def open_stream(self, document_id: str) -> Iterator[bytes]:
        try:
            grid_out = self._bucket.open_download_stream(ObjectId(document_id))
        except NoFile as exc:
            raise StorageError(f"Document '{document_id}' is missing from the store.") from exc
        except InvalidId as exc:
            raise StorageError(f"Malformed document id '{document_id}'.") from exc
        except PyMongoError as exc:
            raise StorageError(f"Cannot open document '{document_id}': {exc}") from exc

        return self._iter_chunks(grid_out, document_id)

    def close(self) -> None:
        self._client.close()
        logger.info("MongoDB connection closed.")

    # ── Internals ──────────────────────────────────────────────────────────────

    @staticmethod
    def _iter_chunks(grid_out: Any, document_id: str) -> Iterator[bytes]:
        """Yield the stored chunks one by one; closes the GridOut when done."""
        try:
            while True:
                chunk = grid_out.readchunk()
                if not chunk:
                    break
                yield chunk
        except PyMongoError as exc:
            raise StorageError(f"Read of document '{document_id}' failed: {exc}") from exc
        finally:
            grid_out.close()

    def _abort(self, grid_in: Any) -> None:
        """Remove chunks already written for a failed upload."""
        try:
            grid_in.abort()
        except PyMongoError as exc:
            logger.warning("Could not abort partial upload %s: %s", grid_in._id, exc)

    @staticmethod
    def _to_document(record: Dict[str, Any]) -> StoredDocument:
        metadata = record.get("metadata") or {}
        upload_date = metadata.get(METADATA_UPLOAD_DATE) or record.get("uploadDate")
        if upload_date is not None and upload_date.tzinfo is None:
            upload_date = upload_date.replace(tzinfo=timezone.utc)

        return StoredDocument(
            id=str(record["_id"]),
            filename=record.get("filename") or "document.pdf",
            content_type=(
                metadata.get(METADATA_CONTENT_TYPE)
                or record.get("contentType")
                or ALLOWED_PDF_CONTENT_TYPE
            ),
            upload_date=upload_date,
            length=int(record.get("length", 0)),
        )
