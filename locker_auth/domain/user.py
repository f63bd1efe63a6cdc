"""
User Profile Domain Model - Pure business entity.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Any, Optional
from datetime import datetime, timezone
from enum import Enum


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed



class AuthProvider(Enum):
    """How the user authenticated."""
    LOCAL = "local"            # Password held in the local credential ledger
    FEDERATED = "federated"    # Third-party identity assertion


@dataclass(frozen=True)
class UserProfile:
    """
    User profile - identity of an authenticated user.

    Domain rules:
    - user_id is opaque and immutable
    - Only last_login_at changes, and only through with_login()
    - Owned by the credential ledger, referenced by sessions
    """
    user_id: str
    email: str
    name: str
    provider: AuthProvider = AuthProvider.LOCAL

    # Optional fields
    avatar: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    last_login_at: datetime = field(default_factory=utcnow)

    @property
    def is_federated(self) -> bool:
        return self.provider == AuthProvider.FEDERATED

    def with_login(self, when: Optional[datetime] = None) -> "UserProfile":
        """
        Return a copy with a refreshed last-login timestamp.

        Args:
            when: Login time (default now)

        Returns:
            New profile; the original is unchanged
        """
        return replace(self, last_login_at=when or utcnow())

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {
            "user_id": self.user_id,
            "email": self.email,
            "name": self.name,
            "provider": self.provider.value,
            "avatar": self.avatar,
            "created_at": self.created_at.isoformat(),
            "last_login_at": self.last_login_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        """Deserialize from dict."""
        return cls(
            user_id=data["user_id"],
            email=data["email"],
            name=data["name"],
            provider=AuthProvider(data.get("provider", "local")),
            avatar=data.get("avatar"),
            created_at=parse_timestamp(data["created_at"]) if data.get("created_at") else utcnow(),
            last_login_at=parse_timestamp(data["last_login_at"]) if data.get("last_login_at") else utcnow(),
        )
