"""Shared test helpers for config files and bearer tokens."""

from __future__ import annotations

import base64
import json
import time
import uuid
from typing import Any

from joserfc import jwt
from joserfc.jwk import OctKey

TEST_TOKEN_SECRET = "test-secret-key-for-hs256-signing-0123456789"
OTHER_TOKEN_SECRET = "another-secret-key-nobody-trusts-9876543210"

VALID_PASSWORD = "Test1234!"


def make_config_yaml(
    db_path: str,
    log_directory: str,
    *,
    token_ttl_seconds: int = 3600,
    max_body_size: int = 1048576,
) -> str:
    """Render a complete config file for the service."""
    return f"""\
service:
  name: "task-tracker"
  version: "0.1.0"
server:
  host: "0.0.0.0"
  port: 8010
  log_level: "info"
logging:
  level: "WARNING"
  directory: "{log_directory}"
database:
  path: "{db_path}"
auth:
  token_secret: "{TEST_TOKEN_SECRET}"
  token_algorithm: "HS256"
  token_ttl_seconds: {token_ttl_seconds}
credentials:
  username_min_length: 4
  username_max_length: 20
  password_min_length: 8
  password_max_length: 32
request:
  max_body_size: {max_body_size}
"""


def make_username(prefix: str = "user") -> str:
    """Generate a unique username that fits the 4..20 length rule."""
    return f"{prefix}{uuid.uuid4().hex[:8]}"


def make_token(
    claims: dict[str, Any],
    secret: str = TEST_TOKEN_SECRET,
    algorithm: str = "HS256",
) -> str:
    """Sign arbitrary claims. Used to forge expired or foreign tokens."""
    key = OctKey.import_key(secret)
    return jwt.encode({"alg": algorithm}, claims, key, algorithms=[algorithm])


def make_expired_token(subject: str, secret: str = TEST_TOKEN_SECRET) -> str:
    """Build a correctly signed token whose exp is in the past."""
    now = int(time.time())
    return make_token(
        {"sub": subject, "username": "expired", "iat": now - 7200, "exp": now - 3600},
        secret=secret,
    )


def tamper_token(token: str) -> str:
    """Alter the payload of a token after signing (creates invalid signature)."""
    parts = token.split(".")
    payload_bytes = base64.urlsafe_b64decode(parts[1] + "==")
    payload = json.loads(payload_bytes)
    payload["sub"] = str(uuid.uuid4())
    new_payload = base64.urlsafe_b64encode(json.dumps(payload).encode()).rstrip(b"=").decode()
    return f"{parts[0]}.{new_payload}.{parts[2]}"


def bearer(token: str) -> dict[str, str]:
    """Authorization header for token."""
    return {"Authorization": f"Bearer {token}"}
