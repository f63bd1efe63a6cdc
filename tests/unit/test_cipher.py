"""
Unit tests for the vault crypto core.
"""

import base64
import pytest
from locker_auth.crypto.cipher import (
    CipherEngine,
    EncryptionKey,
    NONCE_SIZE,
    TAG_SIZE,
    decrypt,
    derive_key,
    derive_verifier,
    encrypt,
    generate_key,
    generate_salt,
    verifiers_match,
)
from locker_auth.errors import DecryptionError, MissingKeyError


@pytest.fixture(scope="module")
def salt():
    return generate_salt()


@pytest.fixture(scope="module")
def key(salt):
    return derive_key("correct horse", salt)


class TestKeyDerivation:
    """Tests for PBKDF2 key derivation."""

    def test_derivation_is_deterministic(self, salt, key):
        """Same passphrase and salt yield interchangeable keys."""
        again = derive_key("correct horse", salt)

        blob = encrypt("payload", key)
        assert decrypt(blob, again) == "payload"

    def test_different_passphrase_gives_different_key(self, salt, key):
        """Test a different passphrase cannot decrypt."""
        other = derive_key("battery staple", salt)

        with pytest.raises(DecryptionError):
            decrypt(encrypt("payload", key), other)

    def test_different_salt_gives_different_key(self, key):
        """Test a different salt cannot decrypt."""
        other = derive_key("correct horse", generate_salt())

        with pytest.raises(DecryptionError):
            decrypt(encrypt("payload", key), other)

    def test_salts_are_random(self):
        """Salts are 16 random bytes."""
        salts = {generate_salt() for _ in range(20)}
        assert len(salts) == 20
        assert all(len(s) == 16 for s in salts)

    def test_iterations_floor(self, salt):
        """Fewer than 100,000 iterations is refused."""
        with pytest.raises(ValueError):
            derive_key("correct horse", salt, iterations=1000)

        with pytest.raises(ValueError):
            CipherEngine(iterations=99_999)

    def test_verifier_is_not_the_key(self, salt, key):
        """The stored verifier never equals the encryption key."""
        verifier = derive_verifier("correct horse", salt)

        assert verifier != key.material()
        assert verifiers_match(verifier, derive_verifier("correct horse", salt))
        assert not verifiers_match(verifier, derive_verifier("wrong", salt))


class TestEncryption:
    """Tests for AES-GCM encryption."""

    def test_round_trip(self, key):
        """Test encrypt then decrypt returns the plaintext."""
        for text in ["", "hunter2", "pässwörd ✓", "x" * 10_000]:
            assert decrypt(encrypt(text, key), key) == text

    def test_fresh_nonce_per_message(self, key):
        """Encrypting the same plaintext twice gives different blobs."""
        first = encrypt("same", key)
        second = encrypt("same", key)

        assert first != second
        assert base64.b64decode(first)[:NONCE_SIZE] != base64.b64decode(second)[:NONCE_SIZE]

    def test_blob_layout(self, key):
        """Blob is nonce + ciphertext + tag."""
        raw = base64.b64decode(encrypt("abc", key))
        assert len(raw) == NONCE_SIZE + 3 + TAG_SIZE

    def test_tampering_detected(self, key):
        """Flipping any single byte fails authentication."""
        raw = bytearray(base64.b64decode(encrypt("secret", key)))

        for i in range(len(raw)):
            tampered = bytearray(raw)
            tampered[i] ^= 0x01
            blob = base64.b64encode(bytes(tampered)).decode("ascii")
            with pytest.raises(DecryptionError):
                decrypt(blob, key)

    def test_truncated_blob(self, key):
        """Blobs shorter than nonce + tag are rejected."""
        blob = base64.b64encode(b"\x00" * (NONCE_SIZE + TAG_SIZE - 1)).decode("ascii")

        with pytest.raises(DecryptionError, match="too short"):
            decrypt(blob, key)

    def test_invalid_base64(self, key):
        """Test non-base64 input raises DecryptionError."""
        with pytest.raises(DecryptionError):
            decrypt("not base64 at all!", key)

    def test_wiped_key_cannot_encrypt(self):
        """A wiped key refuses to hand out material."""
        fresh = generate_key()
        fresh.wipe()

        assert fresh.is_wiped
        with pytest.raises(MissingKeyError):
            encrypt("data", fresh)

    def test_key_length_checked(self):
        """Test EncryptionKey rejects non-256-bit material."""
        with pytest.raises(ValueError):
            EncryptionKey(b"short")

    def test_key_repr_hides_material(self):
        """repr() never shows key bytes."""
        assert repr(generate_key()) == "<EncryptionKey live>"


class TestCipherEngine:
    """Tests for the engine's current-key slot."""

    def setup_method(self):
        """Setup test fixtures."""
        self.engine = CipherEngine()

    def test_no_key_installed(self):
        """Encrypting without any key raises MissingKeyError."""
        assert self.engine.get_key() is None

        with pytest.raises(MissingKeyError):
            self.engine.encrypt("data")

    def test_set_key_replaces_and_wipes_previous(self):
        """Installing a new key wipes the old one."""
        first = generate_key()
        second = generate_key()

        self.engine.set_key(first)
        self.engine.set_key(second)

        assert self.engine.get_key() is second
        assert first.is_wiped
        assert not second.is_wiped

    def test_set_same_key_keeps_it(self):
        """Re-installing the current key does not wipe it."""
        key = generate_key()
        self.engine.set_key(key)
        self.engine.set_key(key)

        assert not key.is_wiped

    def test_clear_key(self):
        """set_key(None) clears and wipes the slot."""
        key = generate_key()
        self.engine.set_key(key)
        self.engine.set_key(None)

        assert self.engine.get_key() is None
        assert key.is_wiped

    def test_explicit_key_overrides_slot(self):
        """An explicit key is used even when the slot is empty."""
        key = generate_key()

        blob = self.engine.encrypt("data", key=key)
        assert self.engine.decrypt(blob, key=key) == "data"

    def test_field_helpers(self):
        """Only named, non-None fields are encrypted."""
        self.engine.set_key(generate_key())
        record = {"id": "1", "title": "bank", "password": "p@ss", "notes": None}

        sealed = self.engine.encrypt_fields(record, ["password", "notes"])

        assert sealed["title"] == "bank"
        assert sealed["notes"] is None
        assert sealed["password"] != "p@ss"
        assert record["password"] == "p@ss"  # Input not mutated

        opened = self.engine.decrypt_fields(sealed, ["password", "notes"])
        assert opened == record
