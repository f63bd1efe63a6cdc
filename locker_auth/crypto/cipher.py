"""
Vault Crypto Core - Key derivation, authenticated encryption, key slot.

- Key derivation: PBKDF2-HMAC-SHA256(passphrase, salt) -> 256-bit AES key
- Verification hash: PBKDF2 over a domain-separated salt, independent of the key
- Encryption: AES-256-GCM, fresh 96-bit nonce per message
- Blob format: base64([nonce 12B][ciphertext + GCM tag 16B])

Security Note:
    Never log passphrases, keys, plaintext or ciphertext values.
    Key wiping is best effort. EncryptionKey keeps its material in a
    bytearray that is zeroed on wipe(), but the interpreter and the
    cryptography backend may hold copies we cannot reach (every cipher
    call receives an immutable bytes copy). Treat wipe() as a hint,
    not a guarantee of secure erasure.
"""

import os
import base64
import binascii
import hmac
import logging
from typing import Any, Dict, Iterable, Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from locker_auth.errors import DecryptionError, MissingKeyError

logger = logging.getLogger("locker.vault")

SALT_SIZE = 16     # 128-bit salt
NONCE_SIZE = 12    # 96-bit nonce
TAG_SIZE = 16      # GCM tag
KEY_LENGTH = 32    # AES-256
KDF_ITERATIONS = 100_000
MIN_KDF_ITERATIONS = 100_000

_VERIFIER_CONTEXT = b"locker-auth:verify:"


class EncryptionKey:
    """
    In-memory symmetric key.

    Never serialized. Compare keys by behaviour (decrypting each other's
    ciphertexts), not by exposing their material.
    """

    __slots__ = ("_material", "_wiped")

    def __init__(self, material: bytes):
        if len(material) != KEY_LENGTH:
            raise ValueError(f"Encryption key must be {KEY_LENGTH} bytes, got {len(material)}")
        self._material = bytearray(material)
        self._wiped = False

    @property
    def is_wiped(self) -> bool:
        return self._wiped

    def material(self) -> bytes:
        """
        Raw key bytes for a cipher call.

        Raises:
            MissingKeyError: If the key has been wiped
        """
        if self._wiped:
            raise MissingKeyError("Encryption key has been wiped")
        return bytes(self._material)

    def wipe(self):
        """Zero the key material (best effort)."""
        for i in range(len(self._material)):
            self._material[i] = 0
        self._wiped = True

    def __repr__(self) -> str:
        state = "wiped" if self._wiped else "live"
        return f"<EncryptionKey {state}>"


# ---------------------------------------------------------------------------
# Key material
# ---------------------------------------------------------------------------

def generate_salt() -> bytes:
    """Generate a cryptographically random 16-byte salt."""
    return os.urandom(SALT_SIZE)


def generate_key() -> EncryptionKey:
    """Generate a random 256-bit key (no passphrase to derive from)."""
    return EncryptionKey(AESGCM.generate_key(bit_length=KEY_LENGTH * 8))


def _pbkdf2(passphrase: str, salt: bytes, iterations: int) -> bytes:
    if iterations < MIN_KDF_ITERATIONS:
        raise ValueError(f"KDF iterations must be at least {MIN_KDF_ITERATIONS}")
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(passphrase.encode("utf-8"))


def derive_key(passphrase: str, salt: bytes, iterations: int = KDF_ITERATIONS) -> EncryptionKey:
    """
    Derive an encryption key from a passphrase.

    Deterministic: the same (passphrase, salt) always yields a key that
    decrypts the other's ciphertexts.

    Args:
        passphrase: User secret
        salt: Per-user random salt
        iterations: PBKDF2 iteration count (>= 100,000)

    Returns:
        256-bit EncryptionKey
    """
    return EncryptionKey(_pbkdf2(passphrase, salt, iterations))


def derive_verifier(passphrase: str, salt: bytes, iterations: int = KDF_ITERATIONS) -> bytes:
    """
    Derive the password verification hash.

    Uses a domain-separated salt so the stored verifier never equals, and
    cannot be used as, the encryption key.
    """
    return _pbkdf2(passphrase, _VERIFIER_CONTEXT + salt, iterations)


def verifiers_match(a: bytes, b: bytes) -> bool:
    """Constant-time comparison of two verification hashes."""
    return hmac.compare_digest(a, b)


# ---------------------------------------------------------------------------
# Authenticated encryption
# ---------------------------------------------------------------------------

def encrypt(plaintext: Union[str, bytes], key: EncryptionKey) -> str:
    """
    Encrypt with AES-256-GCM under a fresh random nonce.

    Args:
        plaintext: Text (UTF-8 encoded) or bytes
        key: Encryption key

    Returns:
        base64 text of nonce + ciphertext + tag
    """
    if isinstance(plaintext, str):
        plaintext = plaintext.encode("utf-8")
    nonce = os.urandom(NONCE_SIZE)
    ct = AESGCM(key.material()).encrypt(nonce, plaintext, None)
    return base64.b64encode(nonce + ct).decode("ascii")


def decrypt_bytes(blob: Union[str, bytes], key: EncryptionKey) -> bytes:
    """
    Decrypt a blob produced by encrypt().

    Raises:
        DecryptionError: If the blob is malformed or fails authentication
    """
    try:
        raw = base64.b64decode(blob, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecryptionError("Ciphertext is not valid base64") from e

    _min = NONCE_SIZE + TAG_SIZE
    if len(raw) < _min:
        raise DecryptionError(
            f"Ciphertext too short: {len(raw)} bytes (minimum {_min})"
        )

    nonce, ct = raw[:NONCE_SIZE], raw[NONCE_SIZE:]
    try:
        return AESGCM(key.material()).decrypt(nonce, ct, None)
    except InvalidTag as e:
        raise DecryptionError("Ciphertext failed authentication") from e


def decrypt(blob: Union[str, bytes], key: EncryptionKey) -> str:
    """Decrypt a blob to text. See decrypt_bytes()."""
    data = decrypt_bytes(blob, key)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecryptionError("Decrypted payload is not valid UTF-8") from e


def encrypt_fields(record: Dict[str, Any], fields: Iterable[str], key: EncryptionKey) -> Dict[str, Any]:
    """
    Return a copy of record with the named fields encrypted.

    Missing or None fields are left as they are.
    """
    result = dict(record)
    for name in fields:
        value = result.get(name)
        if value is not None:
            result[name] = encrypt(value, key)
    return result


def decrypt_fields(record: Dict[str, Any], fields: Iterable[str], key: EncryptionKey) -> Dict[str, Any]:
    """Inverse of encrypt_fields()."""
    result = dict(record)
    for name in fields:
        value = result.get(name)
        if value is not None:
            result[name] = decrypt(value, key)
    return result


class CipherEngine:
    """
    Cipher engine with a single "current key" slot.

    Holds the KDF parameters and the key installed by the last login.
    Callers that have a VaultSession should pass its key explicitly; the
    slot exists for helpers that encrypt on behalf of the current user.
    """

    def __init__(self, iterations: int = KDF_ITERATIONS):
        if iterations < MIN_KDF_ITERATIONS:
            raise ValueError(f"KDF iterations must be at least {MIN_KDF_ITERATIONS}")
        self._iterations = iterations
        self._key: Optional[EncryptionKey] = None

    @property
    def iterations(self) -> int:
        return self._iterations

    def generate_salt(self) -> bytes:
        return generate_salt()

    def generate_key(self) -> EncryptionKey:
        return generate_key()

    def derive_key(self, passphrase: str, salt: bytes) -> EncryptionKey:
        return derive_key(passphrase, salt, self._iterations)

    def derive_verifier(self, passphrase: str, salt: bytes) -> bytes:
        return derive_verifier(passphrase, salt, self._iterations)

    def set_key(self, key: Optional[EncryptionKey]):
        """
        Install a key, or clear the slot with None.

        The previous key is replaced wholesale and wiped.
        """
        previous, self._key = self._key, key
        if previous is not None and previous is not key:
            previous.wipe()
        logger.debug("Cipher key %s", "installed" if key is not None else "cleared")

    def get_key(self) -> Optional[EncryptionKey]:
        return self._key

    def _resolve(self, key: Optional[EncryptionKey]) -> EncryptionKey:
        if key is not None:
            return key
        if self._key is None:
            raise MissingKeyError("No encryption key available")
        return self._key

    def encrypt(self, plaintext: Union[str, bytes], key: Optional[EncryptionKey] = None) -> str:
        return encrypt(plaintext, self._resolve(key))

    def decrypt(self, blob: Union[str, bytes], key: Optional[EncryptionKey] = None) -> str:
        return decrypt(blob, self._resolve(key))

    def encrypt_fields(
        self,
        record: Dict[str, Any],
        fields: Iterable[str],
        key: Optional[EncryptionKey] = None,
    ) -> Dict[str, Any]:
        return encrypt_fields(record, fields, self._resolve(key))

    def decrypt_fields(
        self,
        record: Dict[str, Any],
        fields: Iterable[str],
        key: Optional[EncryptionKey] = None,
    ) -> Dict[str, Any]:
        return decrypt_fields(record, fields, self._resolve(key))
