"""SQLite-backed user credential storage."""

from __future__ import annotations

import contextlib
import sqlite3
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from threading import RLock


class DuplicateUsernameError(Exception):
    """Raised when a username is already registered."""


@dataclass(frozen=True)
class UserRecord:
    """A stored user. The digest never leaves the service."""

    user_id: str
    username: str
    password_digest: str
    created_at: str


class CredentialStore:
    """
    SQLite-backed username -> password digest records.

    Username uniqueness is enforced by a UNIQUE constraint, so the
    uniqueness check and the insert are a single atomic statement.
    Comparisons use SQLite's default BINARY collation (case-sensitive).
    """

    _SELECT_SQL = "SELECT user_id, username, password_digest, created_at FROM users"

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
                CREATE TABLE IF NOT EXISTS users (
                    user_id TEXT PRIMARY KEY,
                    username TEXT NOT NULL UNIQUE,
                    password_digest TEXT NOT NULL,
                    created_at TEXT NOT NULL
                );
                """
            )
            self._db.commit()

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> UserRecord:
        return UserRecord(
            user_id=str(row["user_id"]),
            username=str(row["username"]),
            password_digest=str(row["password_digest"]),
            created_at=str(row["created_at"]),
        )

    def create(self, username: str, password_digest: str) -> UserRecord:
        """Insert a new user. Raises DuplicateUsernameError if the username is taken."""
        user = UserRecord(
            user_id=str(uuid.uuid4()),
            username=username,
            password_digest=password_digest,
            created_at=datetime.now(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z"),
        )

        with self._lock:
            try:
                self._db.execute("BEGIN IMMEDIATE")
                self._db.execute(
                    "INSERT INTO users (user_id, username, password_digest, created_at) "
                    "VALUES (?, ?, ?, ?)",
                    (user.user_id, user.username, user.password_digest, user.created_at),
                )
                self._db.commit()
            except sqlite3.IntegrityError as exc:
                with contextlib.suppress(sqlite3.Error):
                    self._db.execute("ROLLBACK")
                if "unique" in str(exc).lower():
                    raise DuplicateUsernameError(f"Username already exists: {username}") from exc
                raise
            except Exception:
                with contextlib.suppress(sqlite3.Error):
                    self._db.execute("ROLLBACK")
                raise

        return user

    def find(self, username: str) -> UserRecord | None:
        """Look up a user by exact username. Returns None if not found."""
        with self._lock:
            row = self._db.execute(
                self._SELECT_SQL + " WHERE username = ?",
                (username,),
            ).fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    def get_by_id(self, user_id: str) -> UserRecord | None:
        """Look up a user by ID. Returns None if not found."""
        with self._lock:
            row = self._db.execute(
                self._SELECT_SQL + " WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    def count(self) -> int:
        """Count registered users."""
        with self._lock:
            row = self._db.execute("SELECT COUNT(*) FROM users").fetchone()
        return int(row[0]) if row is not None else 0

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            self._db.close()
