"""
Credential Ledger - Local registration and verification of login identifiers.

Maps a login identifier to its salt, password verification hash and
embedded user profile, stored through the record store port.

Known limitation: register() checks for an existing record and then
writes, without a transaction. Two concurrent registrations of the same
identifier can both pass the check; the later write wins. The record
store port offers no conditional write to close this gap.
"""

import uuid
import logging
from typing import Optional

from locker_auth.adapters.federated_assertion import FederatedAssertionDecoder
from locker_auth.crypto.cipher import KEY_LENGTH, CipherEngine, verifiers_match
from locker_auth.domain.credential import CredentialRecord
from locker_auth.domain.user import UserProfile, AuthProvider, utcnow
from locker_auth.errors import DuplicateIdentifierError, InvalidCredentialsError, StorageError
from locker_auth.ports.record_store_port import RecordStorePort

logger = logging.getLogger("locker.auth")

USERS_COLLECTION = "auth_users"


def display_name_for(identifier: str) -> str:
    """Local part of an email-style identifier, or the identifier itself."""
    return identifier.split("@")[0] or identifier


class CredentialLedger:
    """Registers and verifies local and federated identities."""

    def __init__(
        self,
        store: RecordStorePort,
        engine: CipherEngine,
        decoder: Optional[FederatedAssertionDecoder] = None,
        collection: str = USERS_COLLECTION,
    ):
        """
        Args:
            store: Record store holding credential records
            engine: Cipher engine supplying salts and derivations
            decoder: Federated assertion decoder (default: unsigned trust)
            collection: Collection name for credential records
        """
        self._store = store
        self._engine = engine
        self._decoder = decoder or FederatedAssertionDecoder()
        self._collection = collection
        self._dummy_salt = engine.generate_salt()
        self._dummy_hash = bytes(KEY_LENGTH)

    def _load(self, identifier: str) -> Optional[CredentialRecord]:
        data = self._store.get(self._collection, identifier)
        if data is None:
            return None
        try:
            return CredentialRecord.from_dict(data)
        except ValueError as e:
            raise StorageError(f"Unreadable credential record for {identifier!r}") from e

    def _save(self, record: CredentialRecord):
        self._store.put(self._collection, record.to_dict())

    def register(self, identifier: str, password: str) -> UserProfile:
        """
        Register a local identifier.

        Args:
            identifier: Login identifier (usually an email)
            password: Plain password; only a verifier is stored

        Returns:
            New profile with provider=local

        Raises:
            DuplicateIdentifierError: If the identifier is already registered
            StorageError: If the record store fails
        """
        return self.enroll(identifier, password).user

    def enroll(self, identifier: str, password: str) -> CredentialRecord:
        """Register a local identifier and return the stored record."""
        if not identifier:
            raise ValueError("Identifier cannot be empty")
        if not password:
            raise ValueError("Password cannot be empty")

        if self._store.get(self._collection, identifier) is not None:
            raise DuplicateIdentifierError(identifier)

        salt = self._engine.generate_salt()
        password_hash = self._engine.derive_verifier(password, salt)

        now = utcnow()
        user = UserProfile(
            user_id=str(uuid.uuid4()),
            email=identifier,
            name=display_name_for(identifier),
            provider=AuthProvider.LOCAL,
            created_at=now,
            last_login_at=now,
        )

        record = CredentialRecord.local(identifier, user, salt, password_hash)
        self._save(record)
        logger.info("Registered local user %s", user.user_id)
        return record

    def verify(self, identifier: str, password: str) -> UserProfile:
        """
        Verify a local identifier and password.

        Unknown identifiers, federated-only records and wrong passwords all
        raise the same error after the same key derivation work.

        Returns:
            Profile with a refreshed last_login_at

        Raises:
            InvalidCredentialsError: If verification fails
            StorageError: If the record store fails
        """
        return self.authenticate(identifier, password).user

    def authenticate(self, identifier: str, password: str) -> CredentialRecord:
        """Verify a local identifier and return the refreshed record."""
        record = self._load(identifier)
        if record is None or not record.is_local:
            # Same derivation cost as a wrong password.
            verifiers_match(
                self._engine.derive_verifier(password, self._dummy_salt),
                self._dummy_hash,
            )
            logger.info("Login rejected: unknown identifier")
            raise InvalidCredentialsError()

        candidate = self._engine.derive_verifier(password, record.salt)
        if not verifiers_match(candidate, record.password_hash):
            logger.info("Login rejected for user %s", record.user.user_id)
            raise InvalidCredentialsError()

        record = record.touch()
        self._save(record)
        return record

    def salt_for(self, identifier: str) -> bytes:
        """
        Salt of a local record, used to re-derive the encryption key.

        Raises:
            InvalidCredentialsError: If no local record exists
        """
        record = self._load(identifier)
        if record is None or not record.is_local:
            raise InvalidCredentialsError()
        return record.salt

    def verify_federated(self, signed_assertion: str) -> UserProfile:
        """
        Accept a federated identity assertion.

        The subject becomes the user id. A returning federated user keeps
        the original created_at.

        Raises:
            InvalidAssertionError: If the assertion is malformed
            StorageError: If the record store fails
        """
        claims = self._decoder.decode(signed_assertion)

        now = utcnow()
        created_at = now
        existing = self._load(claims.subject)
        if existing is not None and not existing.is_local:
            created_at = existing.user.created_at

        user = UserProfile(
            user_id=claims.subject,
            email=claims.email,
            name=claims.name,
            avatar=claims.picture,
            provider=AuthProvider.FEDERATED,
            created_at=created_at,
            last_login_at=now,
        )

        if existing is not None and existing.is_local:
            # A local identifier already uses this key; leave it untouched.
            logger.warning("Federated subject collides with a local identifier; profile not persisted")
        else:
            self._save(CredentialRecord.federated(user))

        return user
