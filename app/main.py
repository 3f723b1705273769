"""
app/main.py

FastAPI application entry point.

Responsibilities:
  - Connect to the blob store on startup and exit if that fails
  - Create the FastAPI app with metadata and CORS origin from config
  - Reject oversized upload bodies before they reach the handler
  - Register all API routers
  - Add global exception handlers for anything controllers let through
  - Expose a /health endpoint for liveness probes
"""

from contextlib import asynccontextmanager
from typing import Callable, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.document_controller import router as document_router
from app.api.upload_controller import router as upload_router
from app.core.config import settings
from app.core.constants import MAX_UPLOAD_BYTES, MULTIPART_OVERHEAD_BYTES
from app.core.exceptions import AppBaseException, StoreConnectionError
from app.core.logger import get_logger
from app.models.document_models import HealthResponse
from app.store import DocumentStore, GridFSDocumentStore, StoreContext

logger = get_logger(__name__)

StoreFactory = Callable[[], DocumentStore]


def _declared_length(request: Request) -> Optional[int]:
    raw = request.headers.get("content-length", "")
    return int(raw) if raw.isdigit() else None


def create_app(store_factory: Optional[StoreFactory] = None) -> FastAPI:
    """
    Build the application.

    Args:
        store_factory: Zero-argument callable returning a connected
                       DocumentStore. Defaults to GridFSDocumentStore.connect
                       using the MONGODB_* settings.
    """
    factory = store_factory or GridFSDocumentStore.connect

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            store = await run_in_threadpool(factory)
        except StoreConnectionError as exc:
            # Propagating aborts startup; uvicorn exits with a non-zero status.
            logger.critical("Blob store unavailable, refusing to start: %s", exc)
            raise

        app.state.store_context = StoreContext(store=store)
        logger.info("%s %s ready (env=%s).", settings.app_name, settings.app_version, settings.app_env)
        try:
            yield
        finally:
            store.close()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Accepts PDF uploads and serves back the most recently uploaded one.",
        lifespan=lifespan,
    )

    # ── Middleware ─────────────────────────────────────────────────────────────

    @app.middleware("http")
    async def reject_oversized_uploads(request: Request, call_next):
        """413 before routing when the body cannot possibly hold a valid file."""
        if request.method == "POST" and request.url.path == "/upload":
            declared = _declared_length(request)
            if declared is not None and declared > MAX_UPLOAD_BYTES + MULTIPART_OVERHEAD_BYTES:
                logger.warning("Upload body of %d bytes rejected before parsing.", declared)
                return JSONResponse(
                    status_code=413,
                    content={
                        "error": "File too large",
                        "details": f"Uploads are limited to {MAX_UPLOAD_BYTES} bytes.",
                    },
                )
        return await call_next(request)

    # Added last so it wraps everything, the 413 above included.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # ── Routers ────────────────────────────────────────────────────────────────

    app.include_router(upload_router)
    app.include_router(document_router)

    # ── Global exception handlers ──────────────────────────────────────────────

    @app.exception_handler(AppBaseException)
    async def app_exception_handler(request: Request, exc: AppBaseException) -> JSONResponse:
        """Safety-net for any AppBaseException that escapes controller-level handling."""
        logger.exception("Unhandled application error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": "Server error", "details": str(exc)})

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unexpected error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": "Server error", "details": str(exc)})

    # ── Health endpoint ────────────────────────────────────────────────────────

    @app.get("/health", response_model=HealthResponse, tags=["Health"], summary="Liveness probe")
    async def health() -> dict:
        """Returns 200 whenever the process is serving; does not touch the store."""
        return {"status": "API is running"}

    return app


# ── App instance ───────────────────────────────────────────────────────────────

app = create_app()


def run() -> None:
    """Console entry point: serve ``app`` with uvicorn on HOST:PORT."""
    logger.info("Server running at http://%s:%d", settings.host, settings.port)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()
