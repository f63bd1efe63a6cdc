"""
Session Manager - Persisted session descriptor lifecycle.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from locker_auth.crypto.cipher import CipherEngine
from locker_auth.domain.session import SessionDescriptor
from locker_auth.domain.user import UserProfile, utcnow
from locker_auth.ports.session_store_port import SessionStorePort

logger = logging.getLogger("locker.auth")


class SessionManager:
    """
    Starts, restores and ends the persisted session.

    The descriptor never contains the encryption key; a restored session
    has a user but no key until the user authenticates again.
    Expiry is only checked when restore() runs.
    """

    def __init__(
        self,
        store: SessionStorePort,
        engine: CipherEngine,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Args:
            store: Persisted session slot
            engine: Cipher engine whose key is cleared on end()
            clock: Time source returning aware UTC datetimes
        """
        self._store = store
        self._engine = engine
        self._clock = clock

    def restore(self) -> Optional[UserProfile]:
        """
        Restore the persisted session.

        Returns:
            The session's user, or None if absent, expired or unreadable.
            Expired and unreadable descriptors are deleted.
        """
        data = self._store.load()
        if data is None:
            return None

        try:
            descriptor = SessionDescriptor.from_dict(data)
            expired = descriptor.is_expired(self._clock())
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Failed to restore session: %s", e)
            self._store.clear()
            return None

        if expired:
            logger.info("Session for user %s expired at %s", descriptor.user.user_id, descriptor.expires_at.isoformat())
            self._store.clear()
            return None

        logger.debug("Session restored for user %s", descriptor.user.user_id)
        return descriptor.user

    def start(self, profile: UserProfile) -> SessionDescriptor:
        """Persist a new descriptor expiring SESSION_TTL from now."""
        descriptor = SessionDescriptor.create(profile, now=self._clock())
        self._store.save(descriptor.to_dict())
        logger.debug("Session started for user %s", profile.user_id)
        return descriptor

    def end(self):
        """Clear the engine key, then delete the persisted descriptor."""
        self._engine.set_key(None)
        self._store.clear()
