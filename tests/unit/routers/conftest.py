"""Router test fixtures with a real app, temp database and request helpers."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient

from task_tracker_service.app import create_app
from task_tracker_service.config import clear_settings_cache
from task_tracker_service.core.lifespan import lifespan
from task_tracker_service.core.state import reset_app_state
from tests.helpers import VALID_PASSWORD, bearer, make_config_yaml, make_username

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

UNAUTHORIZED_BODY = {"error": "UNAUTHORIZED", "message": "Unauthorized", "details": {}}
TASK_NOT_FOUND_BODY = {"error": "TASK_NOT_FOUND", "message": "Task not found", "details": {}}


# ---------------------------------------------------------------------------
# App + client fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
async def app(tmp_path: Path) -> AsyncIterator[Any]:
    """Create a test app with a temp database and temp log directory."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        make_config_yaml(
            db_path=str(tmp_path / "test.db"),
            log_directory=str(tmp_path / "logs"),
        )
    )

    old_config = os.environ.get("CONFIG_PATH")
    os.environ["CONFIG_PATH"] = str(config_path)

    clear_settings_cache()
    reset_app_state()

    test_app = create_app()
    async with lifespan(test_app):
        yield test_app

    reset_app_state()
    clear_settings_cache()
    if old_config is None:
        os.environ.pop("CONFIG_PATH", None)
    else:
        os.environ["CONFIG_PATH"] = old_config


@pytest.fixture
async def client(app: Any) -> AsyncIterator[AsyncClient]:
    """Create an async HTTP client for the test app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def alice(client: AsyncClient) -> dict[str, str]:
    """Auth headers for a freshly registered user."""
    return await register_and_sign_in(client, make_username("alice"))


@pytest.fixture
async def bob(client: AsyncClient) -> dict[str, str]:
    """Auth headers for a second, unrelated user."""
    return await register_and_sign_in(client, make_username("bob"))


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------
async def signup(
    client: AsyncClient,
    username: str,
    password: str = VALID_PASSWORD,
) -> Any:
    """POST /auth/signup and return the raw response."""
    return await client.post("/auth/signup", json={"username": username, "password": password})


async def signin(
    client: AsyncClient,
    username: str,
    password: str = VALID_PASSWORD,
) -> Any:
    """POST /auth/signin and return the raw response."""
    return await client.post("/auth/signin", json={"username": username, "password": password})


async def register_and_sign_in(client: AsyncClient, username: str) -> dict[str, str]:
    """Sign up and sign in username, returning the Authorization header."""
    signup_resp = await signup(client, username)
    assert signup_resp.status_code == 201, signup_resp.text
    signin_resp = await signin(client, username)
    assert signin_resp.status_code == 200, signin_resp.text
    return bearer(signin_resp.json()["accessToken"])


async def create_task(
    client: AsyncClient,
    headers: dict[str, str],
    title: str = "Write report",
    description: str = "Quarterly numbers",
) -> dict[str, Any]:
    """Create a task and return its JSON."""
    resp = await client.post(
        "/tasks",
        json={"title": title, "description": description},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


async def set_status(
    client: AsyncClient,
    headers: dict[str, str],
    task_id: str,
    status: Any,
) -> Any:
    """PATCH a task's status and return the raw response."""
    return await client.patch(
        f"/tasks/{task_id}/status",
        json={"status": status},
        headers=headers,
    )
