"""
app/core/constants.py

Application-wide fixed constants.

These are business rules that are part of the system's contract and are
NOT configurable via environment variables.
"""

# ── Accepted uploads ───────────────────────────────────────────────────────────

#: The only MIME type accepted on upload and served back on download.
ALLOWED_PDF_CONTENT_TYPE: str = "application/pdf"

#: Multipart field that carries the uploaded file.
UPLOAD_FIELD_NAME: str = "pdf"

#: Hard upper bound on a single uploaded file (10 MiB).
MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

#: Extra room allowed on top of MAX_UPLOAD_BYTES for multipart boundaries
#: and part headers when checking the raw request Content-Length.
MULTIPART_OVERHEAD_BYTES: int = 64 * 1024

# ── Stored metadata keys ───────────────────────────────────────────────────────

METADATA_UPLOAD_DATE: str = "uploadDate"
METADATA_CONTENT_TYPE: str = "contentType"
