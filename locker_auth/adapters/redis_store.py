"""
Redis Store Adapters - Redis-backed record and session storage.
"""

from typing import Optional, Dict, Any
import json

import redis

from locker_auth.ports.record_store_port import RecordStorePort
from locker_auth.ports.session_store_port import SessionStorePort
from locker_auth.domain.session import SESSION_TTL
from locker_auth.errors import StorageError


class _RedisAdapter:
    """Shared client handling for the Redis adapters."""

    def __init__(self, redis_client=None, redis_url: str = "redis://localhost:6379/0", prefix: str = "locker:"):
        """
        Args:
            redis_client: Redis client instance (redis.Redis)
            redis_url: URL used when no client is given
            prefix: Key prefix
        """
        self._redis = redis_client
        self._redis_url = redis_url
        self._prefix = prefix

    def _get_redis(self):
        """Lazy load Redis client."""
        if self._redis is None:
            self._redis = redis.Redis.from_url(self._redis_url, decode_responses=True)
        return self._redis


class RedisRecordStore(_RedisAdapter, RecordStorePort):
    """
    Redis-backed record storage.

    Each collection is a Redis hash; records are stored as JSON under
    their "id". HSET replaces a field unconditionally, so concurrent
    writers race exactly as with any other store.
    """

    def _key(self, collection: str) -> str:
        """Generate Redis hash key for a collection."""
        return f"{self._prefix}{collection}"

    def get(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        try:
            data = self._get_redis().hget(self._key(collection), key)
        except redis.exceptions.RedisError as e:
            raise StorageError(f"Failed to read {collection}/{key}: {e}") from e

        if data is None:
            return None

        try:
            return json.loads(data)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt record {collection}/{key}") from e

    def put(self, collection: str, record: Dict[str, Any]) -> None:
        key = record["id"]
        try:
            self._get_redis().hset(self._key(collection), key, json.dumps(record))
        except redis.exceptions.RedisError as e:
            raise StorageError(f"Failed to write {collection}/{key}: {e}") from e

    def delete(self, collection: str, key: str) -> None:
        try:
            self._get_redis().hdel(self._key(collection), key)
        except redis.exceptions.RedisError as e:
            raise StorageError(f"Failed to delete {collection}/{key}: {e}") from e


class RedisSessionStore(_RedisAdapter, SessionStorePort):
    """
    Redis-backed session slot.

    The descriptor is stored as JSON with a Redis TTL matching the session
    lifetime; expiry is still checked by the session manager on restore.
    """

    def __init__(
        self,
        redis_client=None,
        redis_url: str = "redis://localhost:6379/0",
        prefix: str = "locker:",
        slot: str = "auth_session",
        ttl: int = int(SESSION_TTL.total_seconds()),
    ):
        """
        Args:
            redis_client: Redis client instance (redis.Redis)
            redis_url: URL used when no client is given
            prefix: Key prefix
            slot: Session slot name
            ttl: Time-to-live in seconds
        """
        super().__init__(redis_client=redis_client, redis_url=redis_url, prefix=prefix)
        self._slot = slot
        self._ttl = ttl

    def _key(self) -> str:
        return f"{self._prefix}{self._slot}"

    def load(self) -> Optional[Dict[str, Any]]:
        try:
            data = self._get_redis().get(self._key())
        except redis.exceptions.RedisError as e:
            raise StorageError(f"Failed to read session: {e}") from e

        if not data:
            return None

        try:
            return json.loads(data)
        except json.JSONDecodeError as e:
            raise StorageError("Corrupt session descriptor") from e

    def save(self, data: Dict[str, Any]) -> None:
        try:
            self._get_redis().setex(self._key(), self._ttl, json.dumps(data))
        except redis.exceptions.RedisError as e:
            raise StorageError(f"Failed to write session: {e}") from e

    def clear(self) -> None:
        try:
            self._get_redis().delete(self._key())
        except redis.exceptions.RedisError as e:
            raise StorageError(f"Failed to clear session: {e}") from e
