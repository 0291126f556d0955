"""Password hashing capability backed by argon2id."""

from __future__ import annotations

from argon2 import PasswordHasher as Argon2Hasher
from argon2 import Type
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError


class PasswordHasher:
    """Hashes and verifies passwords. Digests are self-describing argon2 strings."""

    def __init__(self) -> None:
        self._hasher = Argon2Hasher(type=Type.ID)

    def hash(self, password: str) -> str:
        """Return a salted argon2id digest for password."""
        return self._hasher.hash(password)

    def verify(self, password: str, digest: str) -> bool:
        """Return True only if password matches digest. Corrupt digests never match."""
        try:
            return self._hasher.verify(digest, password)
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False
