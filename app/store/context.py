"""
app/store/context.py

The store handle shared by every request.

Built once in the application lifespan, attached to ``app.state`` and
handed to controllers through FastAPI dependencies. Frozen: nothing
rebinds the store after startup.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from app.store.base import DocumentStore


@dataclass(frozen=True)
class StoreContext:
    store: DocumentStore


def get_store_context(request: Request) -> StoreContext:
    """FastAPI dependency returning the context created at startup."""
    return request.app.state.store_context
