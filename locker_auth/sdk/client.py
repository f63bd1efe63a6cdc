"""
Auth Client - High-level facade over the credential ledger, cipher engine
and session manager.

This is the object the rest of the application calls to register, log in,
log out and ask who is logged in.
"""

import logging
import threading
from typing import Optional

from locker_auth.adapters.federated_assertion import FederatedAssertionDecoder
from locker_auth.adapters.file_store import JsonFileRecordStore, JsonFileSessionStore
from locker_auth.adapters.memory_store import MemoryRecordStore, MemorySessionStore
from locker_auth.config import VaultConfig
from locker_auth.crypto.cipher import CipherEngine, EncryptionKey
from locker_auth.domain.session import VaultSession
from locker_auth.domain.user import UserProfile
from locker_auth.services.credential_ledger import CredentialLedger
from locker_auth.services.session_manager import SessionManager

logger = logging.getLogger("locker.auth")


class AuthClient:
    """
    Auth orchestrator.

    Example:
        from locker_auth import AuthClient, VaultConfig, build_client

        client = build_client(VaultConfig(backend="memory"))

        # Register (also logs in)
        user = client.register("alice@example.com", "Secr3t!")
        session = client.current_session()
        blob = session.encrypt("hunter2")

        # Logout, then log back in with the same password
        client.logout()
        client.login_local("alice@example.com", "Secr3t!")
        assert client.current_session().decrypt(blob) == "hunter2"

    Ledger, cipher and storage errors propagate to the caller unchanged,
    except from logout(), which always succeeds.
    """

    def __init__(
        self,
        ledger: CredentialLedger,
        sessions: SessionManager,
        engine: CipherEngine,
    ):
        """
        Initialize auth client with its collaborators.

        Args:
            ledger: Credential ledger (local + federated identities)
            sessions: Session manager (persisted descriptor)
            engine: Cipher engine holding the current key
        """
        self._ledger = ledger
        self._sessions = sessions
        self._engine = engine
        self._current_user: Optional[UserProfile] = None
        self._session: Optional[VaultSession] = None

    @property
    def engine(self) -> CipherEngine:
        return self._engine

    def restore(self) -> Optional[UserProfile]:
        """
        Restore the persisted session at startup.

        The restored user has no key (keys are never persisted), so
        current_session() stays None until the next login.

        Returns:
            Restored user, or None
        """
        user = self._sessions.restore()
        self._current_user = user
        self._session = None
        return user

    def register(self, identifier: str, password: str) -> UserProfile:
        """
        Register a local user and log them in.

        Raises:
            DuplicateIdentifierError: If the identifier is taken
        """
        record = self._ledger.enroll(identifier, password)
        key = self._engine.derive_key(password, record.salt)
        return self._establish(record.user, key)

    def login_local(self, identifier: str, password: str) -> UserProfile:
        """
        Log in with a local identifier and password.

        The encryption key is re-derived from the password, so a returning
        user regains the key that protected their data.

        Raises:
            InvalidCredentialsError: If the identifier or password is wrong
        """
        record = self._ledger.authenticate(identifier, password)
        key = self._engine.derive_key(password, record.salt)
        return self._establish(record.user, key)

    def login_federated(self, assertion: str) -> UserProfile:
        """
        Log in with a federated identity assertion.

        There is no password to derive from, so a random key is generated;
        data encrypted in an earlier federated session is not recoverable.

        Raises:
            InvalidAssertionError: If the assertion is malformed
        """
        user = self._ledger.verify_federated(assertion)
        return self._establish(user, self._engine.generate_key())

    def _establish(self, user: UserProfile, key: EncryptionKey) -> UserProfile:
        """Install the key, start the session and cache the user."""
        self._engine.set_key(key)
        try:
            self._sessions.start(user)
        except Exception:
            self._engine.set_key(None)
            self._current_user = None
            self._session = None
            raise

        self._session = VaultSession(user=user, key=key)
        self._current_user = user
        logger.info("User %s logged in (%s)", user.user_id, user.provider.value)
        return user

    def logout(self):
        """
        Log out. Never raises.

        Clears the cached user, wipes the key and deletes the persisted
        session. A failing step is logged and the remaining steps still run.
        """
        user, self._current_user = self._current_user, None
        session, self._session = self._session, None

        try:
            self._engine.set_key(None)
        except Exception:
            logger.warning("Logout: failed to clear cipher key", exc_info=True)

        if session is not None and not session.key.is_wiped:
            session.key.wipe()

        try:
            self._sessions.end()
        except Exception:
            logger.warning("Logout: failed to delete persisted session", exc_info=True)

        if user is not None:
            logger.info("User %s logged out", user.user_id)

    def current_user(self) -> Optional[UserProfile]:
        """User of the current (or restored) session."""
        return self._current_user

    def current_session(self) -> Optional[VaultSession]:
        """Live session with its key, or None if no login happened yet."""
        return self._session

    def is_authenticated(self) -> bool:
        return self._current_user is not None


def build_client(config: Optional[VaultConfig] = None) -> AuthClient:
    """
    Wire an AuthClient from configuration.

    Args:
        config: Vault configuration (default: from environment)

    Returns:
        Ready-to-use client
    """
    config = config or VaultConfig.from_env()
    engine = CipherEngine(iterations=config.kdf_iterations)

    if config.backend == "memory":
        records = MemoryRecordStore()
        session_store = MemorySessionStore()
    elif config.backend == "redis":
        from locker_auth.adapters.redis_store import RedisRecordStore, RedisSessionStore
        records = RedisRecordStore(redis_url=config.redis_url)
        session_store = RedisSessionStore(redis_url=config.redis_url, slot=config.session_key)
    else:
        records = JsonFileRecordStore(config.data_dir)
        session_store = JsonFileSessionStore(config.data_dir, slot=config.session_key)

    decoder = FederatedAssertionDecoder(
        verification_key=config.assertion_key,
        algorithms=config.assertion_algorithms,
        audience=config.assertion_audience,
    )
    ledger = CredentialLedger(records, engine, decoder, collection=config.users_collection)
    sessions = SessionManager(session_store, engine)
    return AuthClient(ledger=ledger, sessions=sessions, engine=engine)


_default_client: Optional[AuthClient] = None
_default_lock = threading.Lock()


def get_default_client() -> AuthClient:
    """Process-wide client, built from the environment on first use."""
    global _default_client
    with _default_lock:
        if _default_client is None:
            _default_client = build_client()
        return _default_client


def set_default_client(client: Optional[AuthClient]):
    """Replace (or with None, reset) the process-wide client."""
    global _default_client
    with _default_lock:
        _default_client = client
