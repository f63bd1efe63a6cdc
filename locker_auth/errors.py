"""
Vault Errors - Error taxonomy for the credential and encryption vault.

Recoverable errors (the user retries the action):
- DuplicateIdentifierError: registration conflict
- InvalidCredentialsError: unknown identifier or wrong password
- InvalidAssertionError: malformed or expired federated assertion

Surfaced to the caller:
- DecryptionError: tampered, corrupted or wrong-key ciphertext
- MissingKeyError: no encryption key available
- StorageError: record store / session store failure

Caller errors (state machine):
- AuthInProgressError: a second auth attempt while one is pending
- InvalidTransitionError: action not allowed from the current state
"""


class VaultError(Exception):
    """Base class for all vault errors."""


class DuplicateIdentifierError(VaultError):
    """A credential record already exists for the identifier."""

    def __init__(self, identifier: str):
        super().__init__("User already exists")
        self.identifier = identifier


class InvalidCredentialsError(VaultError):
    """Login failed. Never says whether the identifier exists."""

    def __init__(self):
        super().__init__("Invalid credentials")


class InvalidAssertionError(VaultError):
    """Federated identity assertion could not be decoded or is inconsistent."""


class DecryptionError(VaultError):
    """Ciphertext failed authentication or could not be decoded."""


class MissingKeyError(VaultError):
    """No encryption key was supplied and none is installed."""


class StorageError(VaultError):
    """The record store or session store failed."""


class AuthInProgressError(VaultError):
    """An authentication attempt is already pending."""

    def __init__(self):
        super().__init__("Authentication already in progress")


class InvalidTransitionError(VaultError):
    """The requested state transition is not allowed."""
