"""
Memory Store Adapters - In-memory record and session storage (testing only).
"""

import copy
from typing import Optional, Dict, Any
from locker_auth.ports.record_store_port import RecordStorePort
from locker_auth.ports.session_store_port import SessionStorePort


class MemoryRecordStore(RecordStorePort):
    """
    In-memory record storage.

    WARNING: Only for testing. Records are lost on restart.
    Records are copied on the way in and out so callers never share state
    with the store.
    """

    def __init__(self):
        """Initialize in-memory storage."""
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def get(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        """Get a record from memory."""
        record = self._collections.get(collection, {}).get(key)
        if record is None:
            return None
        return copy.deepcopy(record)

    def put(self, collection: str, record: Dict[str, Any]) -> None:
        """Store a record in memory, keyed by record["id"]."""
        key = record["id"]
        self._collections.setdefault(collection, {})[key] = copy.deepcopy(record)

    def delete(self, collection: str, key: str) -> None:
        """Delete a record from memory."""
        records = self._collections.get(collection)
        if records is None:
            return

        records.pop(key, None)
        if not records:
            del self._collections[collection]

    def count(self, collection: str) -> int:
        """Number of records in a collection."""
        return len(self._collections.get(collection, {}))


class MemorySessionStore(SessionStorePort):
    """
    In-memory session slot.

    WARNING: Only for testing. The session does not survive a restart.
    """

    def __init__(self):
        self._data: Optional[Dict[str, Any]] = None

    def load(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._data)

    def save(self, data: Dict[str, Any]) -> None:
        self._data = copy.deepcopy(data)

    def clear(self) -> None:
        self._data = None
