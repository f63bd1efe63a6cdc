"""
Crypto - Key derivation and authenticated encryption for the vault.
"""

from locker_auth.crypto.cipher import (
    CipherEngine,
    EncryptionKey,
    generate_salt,
    generate_key,
    derive_key,
    derive_verifier,
    encrypt,
    decrypt,
    decrypt_bytes,
    encrypt_fields,
    decrypt_fields,
)

__all__ = [
    "CipherEngine",
    "EncryptionKey",
    "generate_salt",
    "generate_key",
    "derive_key",
    "derive_verifier",
    "encrypt",
    "decrypt",
    "decrypt_bytes",
    "encrypt_fields",
    "decrypt_fields",
]
