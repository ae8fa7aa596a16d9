"""
Shared dependencies for the application.

The record store is created by the application factory and kept on
``app.state``; handlers receive it through FastAPI dependency injection.
"""

from fastapi import Request

from .store import RecordStore


def get_store(request: Request) -> RecordStore:
    """Return the record store bound to the running application."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Record store not initialized")
    return store
