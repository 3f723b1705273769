"""
app/core/exceptions.py

Custom exception hierarchy for the application.

Raising typed exceptions from services lets controllers catch specific
cases and return the correct HTTP status code without leaking internals.
"""


class AppBaseException(Exception):
    """Root exception — catch-all for any application-level error."""


# ── Upload validation exceptions ───────────────────────────────────────────────

class MissingFileError(AppBaseException):
    """Raised when the upload request carries no file part."""


class MultipleFilesError(AppBaseException):
    """Raised when the upload request carries more than one file part."""


class UnsupportedMediaTypeError(AppBaseException):
    """Raised when the declared content type is not application/pdf."""


class PayloadTooLargeError(AppBaseException):
    """Raised when an upload exceeds the fixed size limit."""


# ── Store exceptions ───────────────────────────────────────────────────────────

class StorageError(AppBaseException):
    """Raised when a read, write or query against the blob store fails."""


class StoreConnectionError(StorageError):
    """Raised at startup when the blob store cannot be reached."""


class DocumentNotFoundError(AppBaseException):
    """Raised when no document has been uploaded yet."""
