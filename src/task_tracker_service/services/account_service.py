"""
Signup and signin business logic.

Pure Python, no FastAPI imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from task_tracker_service.core.exceptions import ServiceError
from task_tracker_service.logging import get_logger
from task_tracker_service.services.credential_store import DuplicateUsernameError

if TYPE_CHECKING:
    from task_tracker_service.services.credential_store import CredentialStore
    from task_tracker_service.services.password_hasher import PasswordHasher
    from task_tracker_service.services.token_issuer import TokenIssuer

_INVALID_CREDENTIALS_MESSAGE = "Please check your login credentials"


class AccountService:
    """
    Registers users and exchanges verified credentials for bearer tokens.

    Inputs are assumed to have passed request validation already.
    """

    def __init__(
        self,
        credential_store: CredentialStore,
        password_hasher: PasswordHasher,
        token_issuer: TokenIssuer,
    ) -> None:
        self._store = credential_store
        self._hasher = password_hasher
        self._issuer = token_issuer
        self._logger = get_logger(__name__)
        # Verified against when the username is unknown so both failure
        # paths do the same amount of hashing work.
        self._dummy_digest = password_hasher.hash("dummy-password-for-timing")

    def signup(self, username: str, password: str) -> dict[str, str]:
        """
        Create a user.

        Raises:
            ServiceError: USERNAME_TAKEN (409) if the username exists
        """
        digest = self._hasher.hash(password)
        try:
            user = self._store.create(username, digest)
        except DuplicateUsernameError as exc:
            raise ServiceError(
                "USERNAME_TAKEN",
                "Username already exists",
                409,
                {},
            ) from exc

        self._logger.info("User signed up", extra={"user_id": user.user_id})
        return {"id": user.user_id, "username": user.username}

    def signin(self, username: str, password: str) -> dict[str, str]:
        """
        Verify credentials and issue an access token.

        Unknown username and wrong password are the same failure.

        Raises:
            ServiceError: INVALID_CREDENTIALS (401)
        """
        user = self._store.find(username)
        if user is None:
            self._hasher.verify(password, self._dummy_digest)
            self._logger.info("Signin rejected", extra={"reason": "unknown_user"})
            raise ServiceError("INVALID_CREDENTIALS", _INVALID_CREDENTIALS_MESSAGE, 401, {})

        if not self._hasher.verify(password, user.password_digest):
            self._logger.info(
                "Signin rejected",
                extra={"reason": "bad_password", "user_id": user.user_id},
            )
            raise ServiceError("INVALID_CREDENTIALS", _INVALID_CREDENTIALS_MESSAGE, 401, {})

        return {"accessToken": self._issuer.issue(user.user_id, user.username)}
