"""
app/models/document_models.py

Pydantic DTOs for the JSON responses.
The upload request has no DTO — the controller reads the multipart form
directly; the latest-PDF success response is raw bytes, not JSON.
"""

from typing import Optional
from pydantic import BaseModel


class UploadResponse(BaseModel):
    """
    Successful response for POST /upload.

        {
            "message": "PDF uploaded successfully",
            "filename": "report.pdf"
        }
    """

    message: str
    filename: str


class ErrorResponse(BaseModel):
    """
    Error shape shared by every endpoint.

        { "error": "Error uploading PDF", "details": "connection reset" }

    ``details`` is omitted when there is nothing to add.
    """

    error: str
    details: Optional[str] = None


class HealthResponse(BaseModel):
    """Response for GET /health: ``{ "status": "API is running" }``."""

    status: str
