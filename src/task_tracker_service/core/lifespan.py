"""Application lifecycle management."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from task_tracker_service.config import get_settings
from task_tracker_service.core.state import init_app_state
from task_tracker_service.logging import get_logger, setup_logging
from task_tracker_service.services.account_service import AccountService
from task_tracker_service.services.authorization_gate import AuthorizationGate
from task_tracker_service.services.credential_store import CredentialStore
from task_tracker_service.services.password_hasher import PasswordHasher
from task_tracker_service.services.task_lifecycle import TaskLifecycleManager
from task_tracker_service.services.task_query import TaskQueryEngine
from task_tracker_service.services.task_store import TaskStore
from task_tracker_service.services.token_issuer import JWTTokenIssuer

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    # === STARTUP ===
    settings = get_settings()

    setup_logging(settings.logging.level, settings.service.name, settings.logging.directory)
    logger = get_logger(__name__)

    state = init_app_state()

    db_path = settings.database.path
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    # Users and tasks share one database file
    credential_store = CredentialStore(db_path=db_path)
    state.credential_store = credential_store
    task_store = TaskStore(db_path=db_path)
    state.task_store = task_store

    token_issuer = JWTTokenIssuer(
        secret=settings.auth.token_secret,
        algorithm=settings.auth.token_algorithm,
        ttl_seconds=settings.auth.token_ttl_seconds,
    )
    state.account_service = AccountService(
        credential_store=credential_store,
        password_hasher=PasswordHasher(),
        token_issuer=token_issuer,
    )
    state.authorization_gate = AuthorizationGate(
        token_issuer=token_issuer,
        credential_store=credential_store,
    )
    state.task_lifecycle = TaskLifecycleManager(store=task_store)
    state.task_query = TaskQueryEngine(store=task_store)

    logger.info(
        "Service starting",
        extra={
            "service": settings.service.name,
            "version": settings.service.version,
            "port": settings.server.port,
            "db_path": db_path,
            "token_algorithm": settings.auth.token_algorithm,
            "token_ttl_seconds": settings.auth.token_ttl_seconds,
            "total_users": credential_store.count(),
            "total_tasks": task_store.count(),
            "tasks_by_status": task_store.count_by_status(),
        },
    )

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Service shutting down", extra={"uptime_seconds": state.uptime_seconds})

    task_store.close()
    credential_store.close()
