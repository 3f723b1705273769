"""
app/api/document_controller.py

Handles incoming requests to GET /latest-pdf.

Responses:
  200  Raw bytes of the most recently uploaded PDF, streamed from the
       store, with Content-Type and an inline Content-Disposition.
  404  Nothing has been uploaded yet.
  500  The store query or the open failed before any byte was sent.
       A failure after that point aborts the connection instead.
"""

from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse

from app.core.exceptions import DocumentNotFoundError, StorageError
from app.core.logger import get_logger
from app.models.document_models import ErrorResponse
from app.services.document_service import DocumentService
from app.store.context import StoreContext, get_store_context

logger = get_logger(__name__)

router = APIRouter(tags=["Documents"])

FALLBACK_FILENAME = "document.pdf"


# ── Helpers ────────────────────────────────────────────────────────────────────

def _err(message: str, status: int, details: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=message, details=details)
    return JSONResponse(status_code=status, content=body.model_dump(exclude_none=True))


def content_disposition(filename: str) -> str:
    """
    Build an ``inline`` Content-Disposition for an untrusted filename.

    Quotes, backslashes and control characters are replaced with ``_``.
    Non-ASCII names get an ASCII fallback plus an RFC 5987 ``filename*``.

    >>> content_disposition("b.pdf")
    'inline; filename="b.pdf"'
    """
    cleaned = "".join(
        "_" if ch in '"\\' or ord(ch) < 0x20 or ord(ch) == 0x7F else ch
        for ch in filename
    ).strip() or FALLBACK_FILENAME

    ascii_name = cleaned.encode("ascii", "replace").decode("ascii")
    header = f'inline; filename="{ascii_name}"'
    if ascii_name != cleaned:
        header += f"; filename*=UTF-8''{quote(cleaned, safe='')}"
    return header


def get_document_service(context: StoreContext = Depends(get_store_context)) -> DocumentService:
    return DocumentService(store=context.store)


# ── Endpoint ───────────────────────────────────────────────────────────────────

@router.get(
    "/latest-pdf",
    response_class=StreamingResponse,
    responses={
        200: {"content": {"application/pdf": {}}},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Download the most recently uploaded PDF",
)
async def latest_pdf(service: DocumentService = Depends(get_document_service)):
    try:
        download = await service.latest()

    except DocumentNotFoundError as exc:
        logger.info("Latest PDF requested but the store is empty.")
        return _err(str(exc), status=404)

    except StorageError as exc:
        logger.exception("Retrieving latest PDF failed: %s", exc)
        return _err("Error retrieving PDF", status=500, details=str(exc))

    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error retrieving latest PDF: %s", exc)
        return _err("Server error", status=500, details=str(exc))

    document = download.document
    return StreamingResponse(
        download.chunks,
        media_type=document.content_type,
        headers={
            "Content-Disposition": content_disposition(document.filename),
            "Content-Length": str(document.length),
        },
    )
