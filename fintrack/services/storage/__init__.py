"""
Storage Services Package

Provides the abstract tabular store interface and its implementations.
Google Sheets is the production backend; the in-memory store is for tests
and credential-free local runs.
"""

from typing import Optional

from fintrack.config import AppSettings, get_settings
from fintrack.services.storage.interface import (
    ConnectionError,
    InvalidRowError,
    NotFoundError,
    StorageError,
    TabularStore,
)
from fintrack.services.storage.memory import InMemoryTabularStore
from fintrack.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsTabularStore,
)


def create_store(settings: Optional[AppSettings] = None) -> TabularStore:
    """Build the store selected by STORAGE_BACKEND."""
    settings = settings or get_settings().app
    if settings.storage_backend == "memory":
        return InMemoryTabularStore()
    return GoogleSheetsTabularStore(GoogleSheetsClient())


__all__ = [
    # Interface
    "TabularStore",
    # Exceptions
    "ConnectionError",
    "InvalidRowError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsTabularStore",
    "InMemoryTabularStore",
    "create_store",
]
