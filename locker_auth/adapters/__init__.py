"""
Adapters - Implementations of ports.

Record & Session Storage:
- MemoryRecordStore / MemorySessionStore: In-memory (testing)
- JsonFileRecordStore / JsonFileSessionStore: Local JSON files (default)
- RedisRecordStore / RedisSessionStore: Redis (import from
  locker_auth.adapters.redis_store; requires a Redis server)

Federated Identity:
- FederatedAssertionDecoder: PyJWT-based identity assertion decoding
"""

from locker_auth.adapters.memory_store import MemoryRecordStore, MemorySessionStore
from locker_auth.adapters.file_store import JsonFileRecordStore, JsonFileSessionStore
from locker_auth.adapters.federated_assertion import FederatedAssertionDecoder, FederatedClaims

__all__ = [
    # Storage
    "MemoryRecordStore",
    "MemorySessionStore",
    "JsonFileRecordStore",
    "JsonFileSessionStore",
    # Federated identity
    "FederatedAssertionDecoder",
    "FederatedClaims",
]
