"""
Abstract Key-Value Storage Interface

DESIGN DECISION: The ledger core treats local persistence as an opaque
string store. This allows us to:
1. Back it with a file on disk, a mobile key-value API, or memory
2. Use in-memory storage (with failure injection) for testing
3. Keep the store and registry decoupled from any storage engine

The interface is intentionally tiny - read a string, write a string.
Typing and versioning of what goes inside the string is the job of
money_notes.storage.blobs.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional


class StorageKeys(str, Enum):
    """Keys the ledger core reads and writes."""
    LOCAL_BILLS = "local_bills"
    CUSTOM_CATEGORIES = "custom_categories"
    CURRENT_LEDGER_ID = "current_ledger_id"


class KeyValueStore(ABC):
    """
    Abstract interface for string storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def read_string(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if the key is absent

        Raises:
            PersistenceError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def write_string(self, key: str, value: str) -> None:
        """
        Store a string under a key, replacing any previous value.

        Args:
            key: Storage key
            value: String to store

        Raises:
            PersistenceError: If the write fails
        """
        pass
