"""
Task lifecycle: creation, status transitions, lookup and deletion.

Pure Python, no FastAPI imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from task_tracker_service.core.exceptions import ServiceError
from task_tracker_service.core.state import TaskStatus
from task_tracker_service.logging import get_logger

if TYPE_CHECKING:
    from task_tracker_service.core.state import TaskRecord
    from task_tracker_service.services.task_store import TaskStore

VALID_STATUSES: frozenset[str] = frozenset(status.value for status in TaskStatus)

# Every status may move to every status, itself included. No terminal state.
ALLOWED_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    status: frozenset(TaskStatus) for status in TaskStatus
}


def task_not_found() -> ServiceError:
    """Same error for a missing task and for a task owned by someone else."""
    return ServiceError("TASK_NOT_FOUND", "Task not found", 404, {})


def parse_status(value: object) -> TaskStatus:
    """
    Convert a raw client value into a TaskStatus.

    Only the exact literals are accepted: no case folding, no numbers,
    no empty strings.

    Raises:
        ServiceError: INVALID_STATUS (400)
    """
    if not isinstance(value, str) or value not in VALID_STATUSES:
        raise ServiceError(
            "INVALID_STATUS",
            f"status must be one of: {', '.join(status.value for status in TaskStatus)}",
            400,
            {"field": "status"},
        )
    return TaskStatus(value)


def can_transition(current: TaskStatus, target: TaskStatus) -> bool:
    """Return True if a task in current may be moved to target."""
    return target in ALLOWED_TRANSITIONS[current]


def allowed_sources(target: TaskStatus) -> frozenset[TaskStatus]:
    """Statuses from which a task may be moved to target."""
    return frozenset(current for current in TaskStatus if can_transition(current, target))


class TaskLifecycleManager:
    """Owner-scoped task operations. Every lookup is keyed by (task_id, owner_id)."""

    def __init__(self, store: TaskStore) -> None:
        self._store = store
        self._logger = get_logger(__name__)

    def create_task(self, owner_id: str, title: str, description: str) -> TaskRecord:
        """Create a task. New tasks always start OPEN."""
        task = self._store.insert(owner_id, title, description)
        self._logger.info(
            "Task created",
            extra={"task_id": task.task_id, "owner_id": owner_id},
        )
        return task

    def get_task(self, task_id: str, owner_id: str) -> TaskRecord:
        """
        Fetch one of the owner's tasks.

        Raises:
            ServiceError: TASK_NOT_FOUND (404)
        """
        task = self._store.get(task_id, owner_id)
        if task is None:
            raise task_not_found()
        return task

    def update_status(self, task_id: str, owner_id: str, new_status: object) -> TaskRecord:
        """
        Move one of the owner's tasks to new_status.

        The status value is checked before the task is looked up. The
        transition rule is part of the conditional update, so the current
        status cannot change between the check and the write.

        Raises:
            ServiceError: INVALID_STATUS (400), TASK_NOT_FOUND (404) or
                          INVALID_TRANSITION (409)
        """
        target = parse_status(new_status)

        updated = self._store.update_status(
            task_id,
            owner_id,
            target,
            expected_statuses=allowed_sources(target),
        )
        if updated is None:
            current = self._store.get(task_id, owner_id)
            if current is None:
                raise task_not_found()
            raise ServiceError(
                "INVALID_TRANSITION",
                f"Cannot move task from {current.status.value} to {target.value}",
                409,
                {"from": current.status.value, "to": target.value},
            )

        self._logger.info(
            "Task status changed",
            extra={"task_id": task_id, "status": target.value},
        )
        return updated

    def delete_task(self, task_id: str, owner_id: str) -> None:
        """
        Permanently delete one of the owner's tasks.

        Raises:
            ServiceError: TASK_NOT_FOUND (404), also on a repeated delete
        """
        if not self._store.delete(task_id, owner_id):
            raise task_not_found()
        self._logger.info("Task deleted", extra={"task_id": task_id, "owner_id": owner_id})
