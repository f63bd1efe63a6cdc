"""
Federated Assertion Adapter - Decode third-party identity tokens with PyJWT.

TRUST ASSUMPTION: by default the assertion's signature is NOT verified.
The token is expected to arrive over a channel that already authenticated
the identity provider (e.g., the provider's own sign-in widget). Anyone who
can hand this decoder an arbitrary token can log in as anyone. Pass a
verification_key to enable signature verification when that assumption
does not hold.
"""

import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import jwt
from jwt.utils import base64url_decode

from locker_auth.errors import InvalidAssertionError


REQUIRED_TEXT_CLAIMS = ("sub", "email", "name", "picture")
REQUIRED_TIME_CLAIMS = ("iat", "exp")


@dataclass(frozen=True)
class FederatedClaims:
    """Identity claims carried by a decoded assertion."""
    subject: str
    email: str
    name: str
    picture: str
    issued_at: int
    expires_at: int
    issuer: Optional[str] = None
    audience: Optional[Any] = None


class FederatedAssertionDecoder:
    """
    Decodes compact three-segment identity assertions.

    The middle segment is base64url JSON with at least
    sub, email, name, picture, iat and exp.
    """

    def __init__(
        self,
        verification_key: Optional[Any] = None,
        algorithms: Optional[List[str]] = None,
        audience: Optional[str] = None,
        leeway: int = 0,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the decoder.

        Args:
            verification_key: Key used to verify the signature; None keeps
                the unsigned trust assumption
            algorithms: Accepted signature algorithms (default RS256)
            audience: Expected audience when verifying
            leeway: Seconds of clock skew tolerated on exp
            clock: Time source (seconds since epoch)
        """
        self._verification_key = verification_key
        self._algorithms = algorithms or ["RS256"]
        self._audience = audience
        self._leeway = leeway
        self._clock = clock

    @property
    def verifies_signature(self) -> bool:
        return self._verification_key is not None

    def decode(self, assertion: str) -> FederatedClaims:
        """
        Decode and check an assertion.

        Args:
            assertion: Compact token string

        Returns:
            Validated claims

        Raises:
            InvalidAssertionError: If the token is malformed, incomplete,
                inconsistent, expired or (when verifying) badly signed
        """
        if not isinstance(assertion, str) or assertion.count(".") != 2:
            raise InvalidAssertionError("Assertion must have three segments")

        try:
            payload = self._decode_payload(assertion)
        except jwt.InvalidTokenError as e:
            raise InvalidAssertionError(f"Invalid assertion: {e}") from e

        if not isinstance(payload, dict):
            raise InvalidAssertionError("Assertion payload is not an object")

        return self._claims(payload)

    def _decode_payload(self, assertion: str) -> Dict[str, Any]:
        if self._verification_key is None:
            # Only the claims segment is read; header and signature are ignored.
            try:
                segment = assertion.split(".")[1].encode("ascii")
                return json.loads(base64url_decode(segment))
            except ValueError as e:
                raise jwt.DecodeError(f"Invalid payload segment: {e}") from e

        return jwt.decode(
            assertion,
            self._verification_key,
            algorithms=self._algorithms,
            audience=self._audience,
            leeway=self._leeway,
            options={"verify_aud": self._audience is not None},
        )

    def _claims(self, payload: Dict[str, Any]) -> FederatedClaims:
        for claim in REQUIRED_TEXT_CLAIMS:
            value = payload.get(claim)
            if not isinstance(value, str) or not value:
                raise InvalidAssertionError(f"Assertion claim '{claim}' is missing or empty")

        for claim in REQUIRED_TIME_CLAIMS:
            value = payload.get(claim)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidAssertionError(f"Assertion claim '{claim}' must be a timestamp")

        if payload["iat"] > payload["exp"]:
            raise InvalidAssertionError("Assertion issued after it expires")

        if payload["exp"] + self._leeway < self._clock():
            raise InvalidAssertionError("Assertion has expired")

        return FederatedClaims(
            subject=payload["sub"],
            email=payload["email"],
            name=payload["name"],
            picture=payload["picture"],
            issued_at=int(payload["iat"]),
            expires_at=int(payload["exp"]),
            issuer=payload.get("iss"),
            audience=payload.get("aud"),
        )
