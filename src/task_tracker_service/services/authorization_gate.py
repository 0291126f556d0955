"""Bearer credential resolution for protected task operations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from task_tracker_service.core.exceptions import ServiceError
from task_tracker_service.logging import get_logger
from task_tracker_service.services.token_issuer import InvalidTokenError

if TYPE_CHECKING:
    from task_tracker_service.services.credential_store import CredentialStore
    from task_tracker_service.services.token_issuer import TokenIssuer

BEARER_PREFIX = "Bearer "


def unauthorized() -> ServiceError:
    """The one response for every authentication failure."""
    return ServiceError("UNAUTHORIZED", "Unauthorized", 401, {})


class AuthorizationGate:
    """
    Resolves the caller's user id from an Authorization header.

    Missing header, wrong scheme, empty token, bad token, and a token whose
    subject no longer exists all raise the same UNAUTHORIZED error. The
    distinction is only visible in DEBUG logs.
    """

    def __init__(self, token_issuer: TokenIssuer, credential_store: CredentialStore) -> None:
        self._issuer = token_issuer
        self._store = credential_store
        self._logger = get_logger(__name__)

    def _reject(self, reason: str) -> ServiceError:
        self._logger.debug("Bearer credential rejected", extra={"reason": reason})
        return unauthorized()

    def resolve_owner(self, authorization: str | None) -> str:
        """
        Return the user id the bearer token was issued to.

        Raises:
            ServiceError: UNAUTHORIZED (401)
        """
        if authorization is None:
            raise self._reject("missing_header")

        if not authorization.startswith(BEARER_PREFIX):
            raise self._reject("wrong_scheme")

        token = authorization[len(BEARER_PREFIX) :].strip()
        if not token:
            raise self._reject("empty_token")

        try:
            claims = self._issuer.verify(token)
        except InvalidTokenError:
            raise self._reject("invalid_token") from None

        if self._store.get_by_id(claims.subject) is None:
            raise self._reject("unknown_subject")

        return claims.subject
