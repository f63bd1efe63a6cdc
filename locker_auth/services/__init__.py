"""
Services - Credential ledger and session lifecycle.
"""

from locker_auth.services.credential_ledger import CredentialLedger, USERS_COLLECTION
from locker_auth.services.session_manager import SessionManager

__all__ = [
    "CredentialLedger",
    "USERS_COLLECTION",
    "SessionManager",
]
