"""
app/core/logger.py

Centralised logging configuration, applied once at import time.
Every module should obtain its logger via:

    from app.core.logger import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys
from app.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty at INFO: per-request access lines, driver heartbeats, test client.
QUIET_LOGGERS = ("uvicorn.access", "pymongo", "httpx")


def _level() -> int:
    return logging.DEBUG if settings.debug else logging.INFO


def configure_logging() -> None:
    """Attach a stdout handler to the root logger unless one is already set."""
    root = logging.getLogger()
    if root.handlers:
        # pytest / uvicorn got there first.
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(_level())
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    root.setLevel(_level())
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


configure_logging()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
