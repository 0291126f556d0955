"""Unit tests for AuthorizationGate bearer resolution."""

from __future__ import annotations

import pytest

from task_tracker_service.core.exceptions import ServiceError
from task_tracker_service.services.authorization_gate import AuthorizationGate
from task_tracker_service.services.credential_store import CredentialStore
from task_tracker_service.services.token_issuer import JWTTokenIssuer
from tests.helpers import OTHER_TOKEN_SECRET, TEST_TOKEN_SECRET, make_expired_token, tamper_token


@pytest.fixture
def credential_store(tmp_path):
    store = CredentialStore(db_path=str(tmp_path / "users.db"))
    yield store
    store.close()


@pytest.fixture
def issuer() -> JWTTokenIssuer:
    return JWTTokenIssuer(secret=TEST_TOKEN_SECRET, algorithm="HS256", ttl_seconds=3600)


@pytest.fixture
def gate(issuer, credential_store) -> AuthorizationGate:
    return AuthorizationGate(token_issuer=issuer, credential_store=credential_store)


@pytest.fixture
def user(credential_store):
    return credential_store.create("alice01", "digest")


def _assert_unauthorized(gate: AuthorizationGate, header: str | None) -> None:
    with pytest.raises(ServiceError) as exc_info:
        gate.resolve_owner(header)
    assert exc_info.value.error == "UNAUTHORIZED"
    assert exc_info.value.message == "Unauthorized"
    assert exc_info.value.status_code == 401
    assert exc_info.value.details == {}


@pytest.mark.unit
def test_valid_token_resolves_owner(gate, issuer, user) -> None:
    token = issuer.issue(user.user_id, user.username)
    assert gate.resolve_owner(f"Bearer {token}") == user.user_id


@pytest.mark.unit
@pytest.mark.parametrize(
    "header",
    [
        None,
        "",
        "Bearer",
        "Bearer ",
        "Bearer    ",
        "NotBearer x",
        "Basic YWxpY2U6cHc=",
        "Bearer invalid-token",
    ],
)
def test_bad_headers_rejected(gate, header) -> None:
    _assert_unauthorized(gate, header)


@pytest.mark.unit
def test_scheme_is_case_sensitive(gate, issuer, user) -> None:
    token = issuer.issue(user.user_id, user.username)
    _assert_unauthorized(gate, f"bearer {token}")


@pytest.mark.unit
def test_tampered_token_rejected(gate, issuer, user) -> None:
    token = issuer.issue(user.user_id, user.username)
    _assert_unauthorized(gate, f"Bearer {tamper_token(token)}")


@pytest.mark.unit
def test_foreign_token_rejected(gate, user) -> None:
    foreign = JWTTokenIssuer(secret=OTHER_TOKEN_SECRET, algorithm="HS256", ttl_seconds=3600)
    _assert_unauthorized(gate, f"Bearer {foreign.issue(user.user_id, user.username)}")


@pytest.mark.unit
def test_expired_token_rejected(gate, user) -> None:
    _assert_unauthorized(gate, f"Bearer {make_expired_token(user.user_id)}")


@pytest.mark.unit
def test_token_for_unknown_user_rejected(gate, issuer) -> None:
    """A validly signed token whose subject does not exist is still refused."""
    _assert_unauthorized(gate, f"Bearer {issuer.issue('u-ghost', 'ghost01')}")
