"""Shared request validation helpers for task tracker routers."""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any

from task_tracker_service.core.exceptions import ServiceError

if TYPE_CHECKING:
    from task_tracker_service.config import CredentialsConfig

# Upper case, lower case, and at least one digit or non-word character.
_PASSWORD_STRENGTH_PATTERN = re.compile(r"^(?=.*[A-Z])(?=.*[a-z])(?=.*(\d|\W)).*$", re.DOTALL)


def _field_error(field_name: str, message: str) -> ServiceError:
    return ServiceError("VALIDATION_ERROR", message, 400, {"field": field_name})


def parse_json_body(raw_body: bytes) -> dict[str, Any]:
    """Parse JSON body, raising ServiceError on failure."""
    try:
        data = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ServiceError(
            "INVALID_JSON",
            "Request body is not valid JSON",
            400,
            {},
        ) from exc

    if not isinstance(data, dict):
        raise ServiceError(
            "INVALID_JSON",
            "Request body must be a JSON object",
            400,
            {},
        )

    return data


def require_string(
    data: dict[str, Any],
    field_name: str,
    *,
    min_length: int = 1,
    max_length: int | None = None,
) -> str:
    """Extract a required string field and check its length."""
    if field_name not in data or data[field_name] is None:
        raise _field_error(field_name, f"Missing required field: {field_name}")

    value = data[field_name]
    if not isinstance(value, str):
        raise _field_error(field_name, f"Field '{field_name}' must be a string")

    if not value.strip():
        raise _field_error(field_name, f"Field '{field_name}' must not be empty")

    if len(value) < min_length:
        raise _field_error(
            field_name,
            f"Field '{field_name}' must be at least {min_length} characters",
        )

    if max_length is not None and len(value) > max_length:
        raise _field_error(
            field_name,
            f"Field '{field_name}' must be at most {max_length} characters",
        )

    return value


def validate_credentials(data: dict[str, Any], rules: CredentialsConfig) -> tuple[str, str]:
    """Validate a signup/signin body and return (username, password)."""
    username = require_string(
        data,
        "username",
        min_length=rules.username_min_length,
        max_length=rules.username_max_length,
    )
    password = require_string(
        data,
        "password",
        min_length=rules.password_min_length,
        max_length=rules.password_max_length,
    )
    if _PASSWORD_STRENGTH_PATTERN.match(password) is None:
        raise _field_error("password", "password is too weak")
    return username, password


def validate_new_task(data: dict[str, Any]) -> tuple[str, str]:
    """Validate a create-task body and return (title, description)."""
    title = require_string(data, "title")
    description = require_string(data, "description")
    return title, description
