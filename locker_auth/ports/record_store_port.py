"""
Record Store Port - Interface to the application's generic record store.

The vault persists credential records through this port. No transactional
guarantees are assumed: there is no compare-and-swap, so a read followed by
a write can race with another writer.

Implementations:
- MemoryRecordStore: In-memory (testing only)
- JsonFileRecordStore: JSON documents on the local disk
- RedisRecordStore: Redis hashes
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any


class RecordStorePort(ABC):
    """Port: Keyed record storage grouped into collections."""

    @abstractmethod
    def get(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        """
        Get a record by key.

        Args:
            collection: Collection name (e.g., "auth_users")
            key: Record identifier

        Returns:
            Record dict, or None if not found

        Raises:
            StorageError: If the backend fails
        """
        pass

    @abstractmethod
    def put(self, collection: str, record: Dict[str, Any]) -> None:
        """
        Insert or replace a record.

        Args:
            collection: Collection name
            record: Record dict; its key is taken from record["id"]

        Raises:
            StorageError: If the backend fails
        """
        pass

    @abstractmethod
    def delete(self, collection: str, key: str) -> None:
        """
        Delete a record. Deleting a missing record is not an error.

        Args:
            collection: Collection name
            key: Record identifier

        Raises:
            StorageError: If the backend fails
        """
        pass
