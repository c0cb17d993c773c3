"""
Abstract Storage Interface

DESIGN DECISION: Storage is a flat namespace of named slots, each holding
one serialized collection. This allows us to:
1. Keep a local JSON directory as the default system of record
2. Use in-memory storage for testing
3. Swap in Google Sheets without touching business logic

The interface is intentionally tiny - get and set of whole slots.
There are no partial updates and no transactions across slots.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for slot storage.

    Any storage implementation must implement these methods.
    Values are opaque strings (serialized JSON documents).
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a slot.

        Args:
            key: Slot name

        Returns:
            The stored text, or None if the slot is absent

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Overwrite a slot wholesale.

        Args:
            key: Slot name
            value: Text to store

        Raises:
            StorageError: If the backend cannot be written
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
