"""
Domain Models - Pure business entities.

No infrastructure dependencies. Domain logic only.
"""

from locker_auth.domain.user import UserProfile, AuthProvider
from locker_auth.domain.credential import CredentialRecord
from locker_auth.domain.session import SessionDescriptor, VaultSession, SESSION_TTL

__all__ = [
    "UserProfile",
    "AuthProvider",
    "CredentialRecord",
    "SessionDescriptor",
    "VaultSession",
    "SESSION_TTL",
]
