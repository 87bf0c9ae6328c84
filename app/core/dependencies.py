"""
Core dependencies: settings and the storage backend, both owned by the app instance.
"""

from fastapi import Request
from app.config.settings import Settings
from app.database.store import StoragePort, create_store
import logging
import threading

logger = logging.getLogger(__name__)

_store_lock = threading.Lock()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> StoragePort:
    """Return the app's storage adapter, building it on first use."""
    state = request.app.state
    if getattr(state, "store", None) is None:
        with _store_lock:
            if getattr(state, "store", None) is None:
                state.store = create_store(state.settings)
                logger.info(f"Storage backend initialized: {state.settings.storage_backend}")
    return state.store
