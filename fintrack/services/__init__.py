"""Services package."""

from fintrack.services.completion import (
    NOT_CONFIGURED_ERROR,
    CompletionError,
    GroqCompletionService,
)
from fintrack.services.storage import (
    ConnectionError,
    GoogleSheetsClient,
    GoogleSheetsTabularStore,
    InMemoryTabularStore,
    InvalidRowError,
    NotFoundError,
    StorageError,
    TabularStore,
    create_store,
)

__all__ = [
    # Completion services
    "NOT_CONFIGURED_ERROR",
    "CompletionError",
    "GroqCompletionService",
    # Storage services
    "ConnectionError",
    "GoogleSheetsClient",
    "GoogleSheetsTabularStore",
    "InMemoryTabularStore",
    "InvalidRowError",
    "NotFoundError",
    "StorageError",
    "TabularStore",
    "create_store",
]
