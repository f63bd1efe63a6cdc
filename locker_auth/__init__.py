"""
Locker Auth - Local credential and encryption vault

Authenticates a user (local password or federated identity assertion),
derives an encryption key from the user's secret, keeps it in memory for
the life of the session, and encrypts sensitive record fields with it.

Usage:
    from locker_auth import VaultConfig, build_client, AuthStateController

    client = build_client(VaultConfig(backend="file", data_dir="~/.locker"))
    controller = AuthStateController(client)
    controller.initialize()

    # Authenticate
    controller.login("alice@example.com", "Secr3t!")

    # Protect a field
    blob = client.current_session().encrypt("hunter2")
"""

__version__ = "0.1.0"

from locker_auth.config import VaultConfig
from locker_auth.sdk.client import AuthClient, build_client, get_default_client
from locker_auth.sdk.state import AuthStateController, AuthState, AuthStatus
from locker_auth.domain.user import UserProfile, AuthProvider
from locker_auth.domain.session import VaultSession
from locker_auth.crypto.cipher import CipherEngine, EncryptionKey
from locker_auth.errors import (
    VaultError,
    DuplicateIdentifierError,
    InvalidCredentialsError,
    InvalidAssertionError,
    DecryptionError,
    MissingKeyError,
    StorageError,
    AuthInProgressError,
    InvalidTransitionError,
)

__all__ = [
    "VaultConfig",
    "AuthClient",
    "build_client",
    "get_default_client",
    "AuthStateController",
    "AuthState",
    "AuthStatus",
    "UserProfile",
    "AuthProvider",
    "VaultSession",
    "CipherEngine",
    "EncryptionKey",
    "VaultError",
    "DuplicateIdentifierError",
    "InvalidCredentialsError",
    "InvalidAssertionError",
    "DecryptionError",
    "MissingKeyError",
    "StorageError",
    "AuthInProgressError",
    "InvalidTransitionError",
]
