"""SQLite-backed task storage."""

from __future__ import annotations

import contextlib
import sqlite3
import uuid
from datetime import UTC, datetime
from pathlib import Path
from threading import RLock
from typing import TYPE_CHECKING

from task_tracker_service.core.state import TaskRecord, TaskStatus

if TYPE_CHECKING:
    from collections.abc import Collection


class TaskStore:
    """
    SQLite-backed storage for tasks.

    Every per-task read or write is keyed by (task_id, owner_id) in a single
    statement. A task owned by someone else behaves exactly like a task that
    does not exist.
    """

    _TASK_COLUMNS_SQL = "task_id, owner_id, title, description, status, created_at"
    _TASK_SELECT_BASE_SQL = "SELECT " + _TASK_COLUMNS_SQL + " FROM tasks"

    def __init__(self, db_path: str) -> None:
        self._lock = RLock()
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db = sqlite3.connect(db_path, check_same_thread=False)
        self._db.row_factory = sqlite3.Row
        self._db.execute("PRAGMA journal_mode=WAL")
        self._db.execute("PRAGMA foreign_keys=ON")
        self._db.execute("PRAGMA busy_timeout=5000")
        self._init_schema()

    def _init_schema(self) -> None:
        with self._lock:
            self._db.executescript(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    task_id TEXT PRIMARY KEY,
                    owner_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'OPEN'
                        CHECK (status IN ('OPEN', 'IN_PROGRESS', 'DONE')),
                    created_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS ix_tasks_owner
                    ON tasks (owner_id, created_at);
                """
            )
            self._db.commit()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> TaskRecord:
        return TaskRecord(
            task_id=str(row["task_id"]),
            owner_id=str(row["owner_id"]),
            title=str(row["title"]),
            description=str(row["description"]),
            status=TaskStatus(row["status"]),
            created_at=str(row["created_at"]),
        )

    def insert(self, owner_id: str, title: str, description: str) -> TaskRecord:
        """Insert a new OPEN task owned by owner_id."""
        if not owner_id:
            msg = "Task owner must be set"
            raise ValueError(msg)

        task = TaskRecord(
            task_id=str(uuid.uuid4()),
            owner_id=owner_id,
            title=title,
            description=description,
            status=TaskStatus.OPEN,
            created_at=datetime.now(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z"),
        )

        with self._lock:
            try:
                self._db.execute("BEGIN IMMEDIATE")
                self._db.execute(
                    "INSERT INTO tasks (" + self._TASK_COLUMNS_SQL + ") VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        task.task_id,
                        task.owner_id,
                        task.title,
                        task.description,
                        task.status.value,
                        task.created_at,
                    ),
                )
                self._db.commit()
            except Exception:
                with contextlib.suppress(sqlite3.Error):
                    self._db.execute("ROLLBACK")
                raise

        return task

    def get(self, task_id: str, owner_id: str) -> TaskRecord | None:
        """Fetch a task by ID, scoped to its owner."""
        with self._lock:
            row = self._db.execute(
                self._TASK_SELECT_BASE_SQL + " WHERE task_id = ? AND owner_id = ?",
                (task_id, owner_id),
            ).fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    def update_status(
        self,
        task_id: str,
        owner_id: str,
        status: TaskStatus,
        expected_statuses: Collection[TaskStatus] | None = None,
    ) -> TaskRecord | None:
        """
        Set the status of an owned task and return the updated row.

        When expected_statuses is given, the update only applies if the
        current status is one of them. The conditional update and the
        re-read run in one transaction. Returns None when no task matches.
        """
        sql = "UPDATE tasks SET status = ? WHERE task_id = ? AND owner_id = ?"
        params: list[str] = [status.value, task_id, owner_id]
        if expected_statuses is not None:
            expected = sorted(item.value for item in expected_statuses)
            if not expected:
                return None
            sql += " AND status IN (" + ", ".join("?" for _ in expected) + ")"
            params.extend(expected)

        with self._lock:
            try:
                self._db.execute("BEGIN IMMEDIATE")
                cursor = self._db.execute(sql, params)
                row = None
                if cursor.rowcount == 1:
                    row = self._db.execute(
                        self._TASK_SELECT_BASE_SQL + " WHERE task_id = ? AND owner_id = ?",
                        (task_id, owner_id),
                    ).fetchone()
                self._db.commit()
            except Exception:
                with contextlib.suppress(sqlite3.Error):
                    self._db.execute("ROLLBACK")
                raise
        if row is None:
            return None
        return self._row_to_task(row)

    def delete(self, task_id: str, owner_id: str) -> bool:
        """Permanently delete an owned task. Returns False if nothing matched."""
        with self._lock:
            try:
                self._db.execute("BEGIN IMMEDIATE")
                cursor = self._db.execute(
                    "DELETE FROM tasks WHERE task_id = ? AND owner_id = ?",
                    (task_id, owner_id),
                )
                self._db.commit()
            except Exception:
                with contextlib.suppress(sqlite3.Error):
                    self._db.execute("ROLLBACK")
                raise
        return int(cursor.rowcount) == 1

    def list_for_owner(self, owner_id: str) -> list[TaskRecord]:
        """List all and only the tasks of owner_id, oldest first."""
        with self._lock:
            rows = self._db.execute(
                self._TASK_SELECT_BASE_SQL + " WHERE owner_id = ? ORDER BY created_at, rowid",
                (owner_id,),
            ).fetchall()
        return [self._row_to_task(row) for row in rows]

    def count(self) -> int:
        """Count total tasks."""
        with self._lock:
            row = self._db.execute("SELECT COUNT(*) FROM tasks").fetchone()
        return int(row[0]) if row is not None else 0

    def count_by_status(self) -> dict[str, int]:
        """Count tasks grouped by status. Every status is present, zero or not."""
        counts = {status.value: 0 for status in TaskStatus}
        with self._lock:
            rows = self._db.execute("SELECT status, COUNT(*) FROM tasks GROUP BY status").fetchall()
        for row in rows:
            counts[str(row[0])] = int(row[1])
        return counts

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            self._db.close()
