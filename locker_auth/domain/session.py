"""
Session Domain Models - Persisted session descriptor and live vault session.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional, TYPE_CHECKING
from datetime import datetime, timedelta

from locker_auth.domain.user import UserProfile, parse_timestamp, utcnow

if TYPE_CHECKING:
    from locker_auth.crypto.cipher import EncryptionKey

# Fixed session lifetime
SESSION_TTL = timedelta(days=7)


@dataclass(frozen=True)
class SessionDescriptor:
    """
    Session descriptor - persisted "who is logged in until when".

    Domain rules:
    - Never contains key material
    - A descriptor whose expires_at has passed is treated as absent
    """
    user: UserProfile
    expires_at: datetime

    @classmethod
    def create(cls, user: UserProfile, now: Optional[datetime] = None) -> "SessionDescriptor":
        """Create a descriptor that expires SESSION_TTL from now."""
        now = now or utcnow()
        return cls(user=user, expires_at=now + SESSION_TTL)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check if the descriptor is past its expiry."""
        return (now or utcnow()) > self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {
            "user": self.user.to_dict(),
            "expires_at": self.expires_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionDescriptor":
        """Deserialize from dict."""
        return cls(
            user=UserProfile.from_dict(data["user"]),
            expires_at=parse_timestamp(data["expires_at"]),
        )


@dataclass(frozen=True)
class VaultSession:
    """
    Live session - the authenticated user and the key protecting their data.

    Passed explicitly to anything that encrypts or decrypts record fields.
    Exists only in memory.
    """
    user: UserProfile
    key: "EncryptionKey"

    @property
    def is_open(self) -> bool:
        """False once the key has been wiped (after logout)."""
        return not self.key.is_wiped

    def encrypt(self, plaintext: str) -> str:
        from locker_auth.crypto.cipher import encrypt
        return encrypt(plaintext, self.key)

    def decrypt(self, blob: str) -> str:
        from locker_auth.crypto.cipher import decrypt
        return decrypt(blob, self.key)
