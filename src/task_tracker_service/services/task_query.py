"""Status and search filtering over an owner's tasks."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from task_tracker_service.core.state import TaskRecord, TaskStatus
    from task_tracker_service.services.task_store import TaskStore


def matches_search(task: TaskRecord, term: str) -> bool:
    """Case-insensitive substring match on title OR description."""
    needle = term.casefold()
    return needle in task.title.casefold() or needle in task.description.casefold()


class TaskQueryEngine:
    """
    Lists an owner's tasks with optional filters.

    Both filters are optional and combine with AND. The status value must
    already be a valid TaskStatus; rejecting unknown values is the
    router's job.
    """

    def __init__(self, store: TaskStore) -> None:
        self._store = store

    def list_tasks(
        self,
        owner_id: str,
        status: TaskStatus | None = None,
        search: str | None = None,
    ) -> list[TaskRecord]:
        """Return the owner's tasks that pass every supplied filter."""
        tasks = self._store.list_for_owner(owner_id)

        if status is not None:
            tasks = [task for task in tasks if task.status == status]

        if search:
            tasks = [task for task in tasks if matches_search(task, search)]

        return tasks
