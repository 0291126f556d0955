"""Stateless bearer token issuing and verification."""

from __future__ import annotations

import re
import time
import uuid
from dataclasses import dataclass
from typing import Any, Protocol

from joserfc import jwt
from joserfc.errors import JoseError
from joserfc.jwk import OctKey

_COMPACT_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+$")


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be trusted, for any reason."""


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims of a bearer token."""

    subject: str
    username: str
    issued_at: int
    expires_at: int


class TokenIssuer(Protocol):
    """Signs and verifies bearer tokens bound to a user identity."""

    def issue(self, user_id: str, username: str) -> str: ...

    def verify(self, token: str) -> TokenClaims: ...


class JWTTokenIssuer:
    """
    Compact JWT implementation of TokenIssuer using a shared HMAC secret.

    Tokens are never stored. Validity depends only on the signature and the
    ``exp`` claim. Each issue carries a fresh ``jti`` so repeated sign-ins
    produce distinct tokens that all remain valid.
    """

    def __init__(self, secret: str, algorithm: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            msg = "Token TTL must be positive"
            raise ValueError(msg)
        self._key = OctKey.import_key(secret)
        self._algorithm = algorithm
        self._ttl_seconds = ttl_seconds
        self._claims_registry = jwt.JWTClaimsRegistry(
            sub={"essential": True},
            exp={"essential": True},
            iat={"essential": True},
        )

    def issue(self, user_id: str, username: str) -> str:
        """Sign a new token for user_id."""
        now = int(time.time())
        claims: dict[str, Any] = {
            "sub": user_id,
            "username": username,
            "iat": now,
            "exp": now + self._ttl_seconds,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode({"alg": self._algorithm}, claims, self._key, algorithms=[self._algorithm])

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry and return the claims.

        Raises:
            InvalidTokenError: empty, malformed, tampered, foreign-key,
                               expired, or missing required claims
        """
        if not token or _COMPACT_TOKEN_PATTERN.match(token) is None:
            raise InvalidTokenError("Token is not a compact JWT")

        try:
            decoded = jwt.decode(token, self._key, algorithms=[self._algorithm])
            self._claims_registry.validate(decoded.claims)
        except (JoseError, ValueError) as exc:
            raise InvalidTokenError(str(exc)) from exc

        claims = decoded.claims
        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError("Token subject is missing")

        username = claims.get("username")
        return TokenClaims(
            subject=subject,
            username=username if isinstance(username, str) else "",
            issued_at=int(claims["iat"]),
            expires_at=int(claims["exp"]),
        )
