"""Services package."""

from finance_tracker.services.storage import (
    CollectionSlot,
    ConnectionError,
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    NotFoundError,
    StorageError,
)

__all__ = [
    # Storage services
    "CollectionSlot",
    "ConnectionError",
    "GoogleSheetsClient",
    "GoogleSheetsKeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStoreInterface",
    "NotFoundError",
    "StorageError",
]
