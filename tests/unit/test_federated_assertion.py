"""
Unit tests for FederatedAssertionDecoder.
"""

import base64
import json
import time
import jwt
import pytest
from locker_auth.adapters.federated_assertion import FederatedAssertionDecoder
from locker_auth.errors import InvalidAssertionError

SECRET = "test-signing-secret-at-least-32-bytes"
NOW = 1_700_000_000


def make_claims(**overrides):
    claims = {
        "sub": "sub-42",
        "email": "bob@example.com",
        "name": "Bob",
        "picture": "https://example.com/bob.png",
        "iat": NOW,
        "exp": NOW + 3600,
    }
    claims.update(overrides)
    return {k: v for k, v in claims.items() if v is not None}


def make_token(claims, key=SECRET):
    return jwt.encode(claims, key, algorithm="HS256")


def unsigned_token(payload):
    """Hand-built token with an arbitrary JSON payload."""
    def seg(obj):
        return base64.urlsafe_b64encode(json.dumps(obj).encode()).rstrip(b"=").decode()
    return f"{seg({'alg': 'none', 'typ': 'JWT'})}.{seg(payload)}.sig"


@pytest.fixture
def decoder():
    """Decoder without signature verification, clock fixed at NOW."""
    return FederatedAssertionDecoder(clock=lambda: NOW)


class TestUnverifiedDecoding:
    """Tests for the default (unsigned trust) mode."""

    def test_decode_valid(self, decoder):
        """Test a complete assertion decodes to claims."""
        claims = decoder.decode(make_token(make_claims(iss="https://accounts.example.com")))

        assert claims.subject == "sub-42"
        assert claims.email == "bob@example.com"
        assert claims.name == "Bob"
        assert claims.picture == "https://example.com/bob.png"
        assert claims.issued_at == NOW
        assert claims.expires_at == NOW + 3600
        assert claims.issuer == "https://accounts.example.com"
        assert not decoder.verifies_signature

    def test_signature_ignored(self, decoder):
        """Any signature is accepted when verification is off."""
        token = make_token(make_claims(), key="another-secret-that-is-32-bytes-long")
        assert decoder.decode(token).subject == "sub-42"

    @pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c.d", "x.!!!.y"])
    def test_malformed(self, decoder, token):
        """Wrong segment count or undecodable payload."""
        with pytest.raises(InvalidAssertionError):
            decoder.decode(token)

    def test_non_string(self, decoder):
        """Test non-string input is rejected."""
        with pytest.raises(InvalidAssertionError):
            decoder.decode(None)

    @pytest.mark.parametrize("missing", ["sub", "email", "name", "picture", "iat", "exp"])
    def test_missing_claim(self, decoder, missing):
        """Every required claim must be present."""
        claims = make_claims()
        del claims[missing]

        with pytest.raises(InvalidAssertionError):
            decoder.decode(make_token(claims))

    def test_empty_text_claim(self, decoder):
        """Test empty strings count as missing."""
        with pytest.raises(InvalidAssertionError, match="email"):
            decoder.decode(make_token(make_claims(email="")))

    def test_non_numeric_time_claim(self, decoder):
        """Timestamps must be numbers."""
        token = unsigned_token(make_claims(iat="yesterday"))

        with pytest.raises(InvalidAssertionError, match="iat"):
            decoder.decode(token)

    def test_issued_after_expiry(self, decoder):
        """iat later than exp is inconsistent."""
        with pytest.raises(InvalidAssertionError, match="issued after"):
            decoder.decode(make_token(make_claims(iat=NOW + 10, exp=NOW + 5)))

    def test_expired(self, decoder):
        """Test an assertion past exp is rejected."""
        with pytest.raises(InvalidAssertionError, match="expired"):
            decoder.decode(make_token(make_claims(iat=NOW - 7200, exp=NOW - 1)))

    def test_leeway(self):
        """Leeway tolerates small clock skew."""
        decoder = FederatedAssertionDecoder(leeway=30, clock=lambda: NOW)

        claims = decoder.decode(make_token(make_claims(iat=NOW - 100, exp=NOW - 10)))
        assert claims.subject == "sub-42"

    def test_header_segment_ignored(self, decoder):
        """Only the claims segment is decoded when verification is off."""
        payload = make_token(make_claims()).split(".")[1]

        claims = decoder.decode(f"garbage.{payload}.sig")

        assert claims.subject == "sub-42"

    def test_payload_not_object(self, decoder):
        """Test a JSON array payload is rejected."""
        with pytest.raises(InvalidAssertionError):
            decoder.decode(unsigned_token(["sub-42"]))


class TestVerifiedDecoding:
    """Tests with a verification key."""

    def test_valid_signature(self):
        """Test correctly signed assertion is accepted."""
        decoder = FederatedAssertionDecoder(verification_key=SECRET, algorithms=["HS256"])
        now = int(time.time())

        claims = decoder.decode(make_token(make_claims(iat=now, exp=now + 60)))
        assert claims.subject == "sub-42"
        assert decoder.verifies_signature

    def test_bad_signature(self):
        """Test assertion signed with another key is rejected."""
        decoder = FederatedAssertionDecoder(verification_key=SECRET, algorithms=["HS256"])
        now = int(time.time())
        token = make_token(make_claims(iat=now, exp=now + 60), key="another-secret-that-is-32-bytes-long")

        with pytest.raises(InvalidAssertionError):
            decoder.decode(token)

    def test_audience_checked(self):
        """Test audience mismatch is rejected when configured."""
        decoder = FederatedAssertionDecoder(
            verification_key=SECRET, algorithms=["HS256"], audience="locker-app",
        )
        now = int(time.time())

        ok = make_token(make_claims(iat=now, exp=now + 60, aud="locker-app"))
        assert decoder.decode(ok).audience == "locker-app"

        wrong = make_token(make_claims(iat=now, exp=now + 60, aud="other-app"))
        with pytest.raises(InvalidAssertionError):
            decoder.decode(wrong)
