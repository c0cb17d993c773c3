"""
Storage Services Package

Provides the slot storage interface, its implementations and typed
collection slots. The JSON directory backend is the default; Google
Sheets is optional.
"""

from finance_tracker.services.storage.interface import (
    ConnectionError,
    KeyValueStoreInterface,
    NotFoundError,
    StorageError,
)
from finance_tracker.services.storage.local import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)
from finance_tracker.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
)
from finance_tracker.services.storage.slots import (
    SLOT_DEBTS,
    SLOT_FIXED_BILLS,
    SLOT_INCOMES,
    SLOT_PROJECTS,
    CollectionSlot,
)

__all__ = [
    # Interfaces
    "KeyValueStoreInterface",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # Local implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    # Google Sheets implementation
    "GoogleSheetsClient",
    "GoogleSheetsKeyValueStore",
    # Typed slots
    "SLOT_DEBTS",
    "SLOT_FIXED_BILLS",
    "SLOT_INCOMES",
    "SLOT_PROJECTS",
    "CollectionSlot",
]
