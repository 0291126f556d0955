"""Application state management."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from task_tracker_service.services.account_service import AccountService
    from task_tracker_service.services.authorization_gate import AuthorizationGate
    from task_tracker_service.services.credential_store import CredentialStore
    from task_tracker_service.services.task_lifecycle import TaskLifecycleManager
    from task_tracker_service.services.task_query import TaskQueryEngine
    from task_tracker_service.services.task_store import TaskStore


class TaskStatus(StrEnum):
    """Task status values. The only values ever persisted."""

    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


@dataclass(frozen=True)
class TaskRecord:
    """A single stored task."""

    task_id: str
    owner_id: str
    title: str
    description: str
    status: TaskStatus
    created_at: str

    def to_public(self) -> dict[str, str]:
        """Client representation. The owner is never serialized."""
        return {
            "id": self.task_id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
        }


@dataclass
class AppState:
    """Runtime application state."""

    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    credential_store: CredentialStore | None = None
    task_store: TaskStore | None = None
    account_service: AccountService | None = None
    authorization_gate: AuthorizationGate | None = None
    task_lifecycle: TaskLifecycleManager | None = None
    task_query: TaskQueryEngine | None = None

    @property
    def uptime_seconds(self) -> float:
        """Calculate uptime in seconds."""
        return (datetime.now(UTC) - self.start_time).total_seconds()

    @property
    def started_at(self) -> str:
        """ISO format start time."""
        return self.start_time.isoformat(timespec="seconds").replace("+00:00", "Z")


# Global application state container
_state_container: dict[str, AppState | None] = {"app_state": None}


def get_app_state() -> AppState:
    """Get the current application state."""
    app_state = _state_container["app_state"]
    if app_state is None:
        msg = "Application state not initialized"
        raise RuntimeError(msg)
    return app_state


def init_app_state() -> AppState:
    """Initialize application state. Called during startup."""
    app_state = AppState()
    _state_container["app_state"] = app_state
    return app_state


def reset_app_state() -> None:
    """Reset application state. Used in testing."""
    _state_container["app_state"] = None
