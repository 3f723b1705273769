"""
app/api/upload_controller.py

Handles incoming requests to POST /upload.

This layer is responsible only for HTTP concerns:
  - Parsing the multipart form and picking out the single 'pdf' file part.
  - Delegating validation and storage to UploadService.
  - Translating service-level errors into appropriate HTTP responses.

Responses:
  200  The PDF was stored.  Body: { "message", "filename" }.
  400  No file part, more than one file part, or an unreadable form.
  413  The file is larger than 10 MiB.
  415  The file was not declared as application/pdf.
  500  The blob store failed or something unexpected happened.
       Body: { "error", "details" }.
"""

from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import FormData, UploadFile

from app.core.constants import UPLOAD_FIELD_NAME
from app.core.exceptions import (
    MissingFileError,
    MultipleFilesError,
    PayloadTooLargeError,
    StorageError,
    UnsupportedMediaTypeError,
)
from app.core.logger import get_logger
from app.models.document_models import ErrorResponse, UploadResponse
from app.services.upload_service import UploadService
from app.store.context import StoreContext, get_store_context

logger = get_logger(__name__)

router = APIRouter(tags=["Upload"])


# ── Helpers ────────────────────────────────────────────────────────────────────

def _err(message: str, status: int = 400, details: Optional[str] = None) -> JSONResponse:
    """Return a JSON error response with the standard error shape."""
    body = ErrorResponse(error=message, details=details)
    return JSONResponse(status_code=status, content=body.model_dump(exclude_none=True))


def _single_file(form: FormData) -> UploadFile:
    """
    Return the only file part in the form, or raise.

    Every file part counts, whatever its field: a file under any field
    other than the upload field makes the request invalid.
    """
    files: List[Tuple[str, UploadFile]] = [
        (key, value) for key, value in form.multi_items() if isinstance(value, UploadFile)
    ]
    upload_files = [value for key, value in files if key == UPLOAD_FIELD_NAME]
    if not upload_files:
        raise MissingFileError("No file uploaded")
    if len(files) > 1:
        fields = ", ".join(sorted({key for key, _ in files}))
        raise MultipleFilesError(f"Expected exactly one '{UPLOAD_FIELD_NAME}' file, got {len(files)} ({fields}).")
    return upload_files[0]


def get_upload_service(context: StoreContext = Depends(get_store_context)) -> UploadService:
    return UploadService(store=context.store)


# ── Endpoint ───────────────────────────────────────────────────────────────────

@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        415: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Upload a single PDF",
)
async def upload(
    request: Request,
    service: UploadService = Depends(get_upload_service),
) -> JSONResponse:
    """
    Accepts one PDF sent as multipart/form-data under the 'pdf' field:

        curl -F "pdf=@report.pdf;type=application/pdf" http://localhost:3000/upload
    """
    # ── 1. Parse multipart form ────────────────────────────────────────────────
    try:
        form = await request.form()
    except Exception as exc:  # noqa: BLE001
        logger.warning("Unreadable upload form: %s", exc)
        return _err("Invalid multipart/form-data payload.", details=str(exc))

    # ── 2. Pick the file and delegate ──────────────────────────────────────────
    try:
        file = _single_file(form)
        logger.info("Upload request received — '%s' (%s)", file.filename, file.content_type)
        result = await service.upload(file)

    except MissingFileError as exc:
        logger.warning("Upload rejected: %s", exc)
        return _err(str(exc))

    except MultipleFilesError as exc:
        logger.warning("Upload rejected: %s", exc)
        return _err("Expected exactly one file", details=str(exc))

    except UnsupportedMediaTypeError as exc:
        logger.warning("Upload rejected: %s", exc)
        return _err("Only PDF files are allowed", status=415, details=str(exc))

    except PayloadTooLargeError as exc:
        logger.warning("Upload rejected: %s", exc)
        return _err("File too large", status=413, details=str(exc))

    except StorageError as exc:
        logger.exception("Storing upload failed: %s", exc)
        return _err("Error uploading PDF", status=500, details=str(exc))

    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error during upload: %s", exc)
        return _err("Server error", status=500, details=str(exc))

    finally:
        await form.close()

    return JSONResponse(status_code=200, content=result.model_dump())
