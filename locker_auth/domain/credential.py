"""
Credential Record Domain Model - Stored login entry for one identifier.
"""

import base64
import binascii
from dataclasses import dataclass, replace
from typing import Dict, Any, Optional
from datetime import datetime

from locker_auth.domain.user import UserProfile, AuthProvider

SALT_SIZE = 16  # bytes


@dataclass(frozen=True)
class CredentialRecord:
    """
    Credential record - tagged union over the user's provider.

    Domain rules:
    - identifier is unique (login key, record store key)
    - local records carry salt + password_hash, never the raw password
    - federated records carry the assertion subject and no password material
    - salts are never reused across records (fresh salt per registration)
    """
    identifier: str
    user: UserProfile

    # Local-only
    salt: Optional[bytes] = None
    password_hash: Optional[bytes] = None

    # Federated-only
    subject: Optional[str] = None

    @classmethod
    def local(
        cls,
        identifier: str,
        user: UserProfile,
        salt: bytes,
        password_hash: bytes,
    ) -> "CredentialRecord":
        """Create a validated local credential record."""
        record = cls(
            identifier=identifier,
            user=user,
            salt=salt,
            password_hash=password_hash,
        )
        record.validate()
        return record

    @classmethod
    def federated(cls, user: UserProfile) -> "CredentialRecord":
        """Create a validated federated record keyed by the assertion subject."""
        record = cls(identifier=user.user_id, user=user, subject=user.user_id)
        record.validate()
        return record

    @property
    def is_local(self) -> bool:
        return self.user.provider == AuthProvider.LOCAL

    def validate(self):
        """
        Enforce the shape of the tagged union.

        Raises:
            ValueError: If the record mixes or lacks provider-specific fields
        """
        if not self.identifier:
            raise ValueError("Credential identifier cannot be empty")

        if self.is_local:
            if not self.salt or len(self.salt) != SALT_SIZE:
                raise ValueError(f"Local credential requires a {SALT_SIZE}-byte salt")
            if not self.password_hash:
                raise ValueError("Local credential requires a password hash")
            if self.subject is not None:
                raise ValueError("Local credential cannot carry a federated subject")
        else:
            if not self.subject:
                raise ValueError("Federated credential requires a subject")
            if self.salt is not None or self.password_hash is not None:
                raise ValueError("Federated credential cannot carry password material")

    def touch(self, when: Optional[datetime] = None) -> "CredentialRecord":
        """Return a copy whose embedded profile has a refreshed last login."""
        return replace(self, user=self.user.with_login(when))

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to a record-store document.

        The identifier is stored under "id", which the record store uses as key.
        """
        data = {
            "id": self.identifier,
            "provider": self.user.provider.value,
            "user": self.user.to_dict(),
        }
        if self.is_local:
            data["salt"] = base64.b64encode(self.salt).decode("ascii")
            data["password_hash"] = base64.b64encode(self.password_hash).decode("ascii")
        else:
            data["subject"] = self.subject
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CredentialRecord":
        """
        Deserialize and validate a record-store document.

        Raises:
            ValueError: If the document is malformed
        """
        try:
            user = UserProfile.from_dict(data["user"])
            record = cls(
                identifier=data["id"],
                user=user,
                salt=base64.b64decode(data["salt"], validate=True) if data.get("salt") else None,
                password_hash=base64.b64decode(data["password_hash"], validate=True) if data.get("password_hash") else None,
                subject=data.get("subject"),
            )
        except (KeyError, TypeError, binascii.Error) as e:
            raise ValueError(f"Malformed credential record: {e}") from e

        record.validate()
        return record
