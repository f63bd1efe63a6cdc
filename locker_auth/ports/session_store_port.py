"""
Session Store Port - Interface for the persisted session slot.

A single keyed slot holding the serialized session descriptor
({user, expires_at}). Read once at startup, written on every successful
login, cleared on logout or when an expired descriptor is found.

Implementations:
- MemorySessionStore: In-memory (testing only)
- JsonFileSessionStore: JSON file on the local disk
- RedisSessionStore: Redis key with TTL
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any


class SessionStorePort(ABC):
    """Port: Persist the current session descriptor."""

    @abstractmethod
    def load(self) -> Optional[Dict[str, Any]]:
        """
        Read the persisted descriptor.

        Returns:
            Descriptor dict, or None if the slot is empty

        Raises:
            StorageError: If the backend fails or the slot is unreadable
        """
        pass

    @abstractmethod
    def save(self, data: Dict[str, Any]) -> None:
        """
        Replace the persisted descriptor.

        Args:
            data: Serialized session descriptor (must not contain key material)

        Raises:
            StorageError: If the backend fails
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """
        Empty the slot. Clearing an empty slot is not an error.

        Raises:
            StorageError: If the backend fails
        """
        pass
