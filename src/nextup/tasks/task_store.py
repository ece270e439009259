# tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import math
import sqlite3
import time
from pathlib import Path

from .task_models import Task, TaskStatus

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite task store.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except sqlite3.Error:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    status TEXT NOT NULL DEFAULT 'open',
                    description TEXT NOT NULL,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL,
                    deferred_at REAL,
                    deadline_at REAL,
                    defer_count INTEGER NOT NULL DEFAULT 0,
                    completed_at REAL
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("status", "TEXT NOT NULL DEFAULT 'open'")
            add_col("description", "TEXT NOT NULL DEFAULT ''")
            add_col("created_at", "REAL NOT NULL DEFAULT 0")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")
            add_col("deferred_at", "REAL")
            add_col("deadline_at", "REAL")
            add_col("defer_count", "INTEGER NOT NULL DEFAULT 0")
            add_col("completed_at", "REAL")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status, created_at)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _opt_float(value: float | None) -> float | None:
        return float(value) if value is not None else None

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            status=TaskStatus.from_db(row["status"]),
            description=str(row["description"] or ""),
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
            deferred_at=self._opt_float(row["deferred_at"]),
            deadline_at=self._opt_float(row["deadline_at"]),
            defer_count=int(row["defer_count"] or 0),
            completed_at=self._opt_float(row["completed_at"]),
        )

    @staticmethod
    def _check_deadline(deadline_at: float | None) -> float | None:
        if deadline_at is None:
            return None
        value = float(deadline_at)
        if not math.isfinite(value):
            raise ValueError(f"deadline_at must be finite, got {deadline_at!r}")
        return value

    # ---- public API ----

    def count_tasks(self, status: TaskStatus | None = None) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            if status is None:
                cur.execute("SELECT COUNT(*) FROM tasks")
            else:
                cur.execute("SELECT COUNT(*) FROM tasks WHERE status = ?", (status.value,))
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def add_task(
        self,
        *,
        description: str,
        deadline_at: float | None = None,
        now_ts: float | None = None,
    ) -> int:
        if not description or not description.strip():
            raise ValueError("description is required")
        deadline = self._check_deadline(deadline_at)

        now = time.time() if now_ts is None else float(now_ts)

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO tasks(status, description, created_at, updated_at, deadline_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (TaskStatus.OPEN.value, description.strip(), now, now, deadline),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            task_id = int(rowid)
            logger.debug("Task added id=%s deadline_at=%s", task_id, deadline)
            return task_id
        finally:
            conn.close()

    def get_task(self, task_id: int) -> Task | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),))
            row = cur.fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def list_open_tasks(self, *, limit: int | None = None) -> list[Task]:
        """Open tasks, oldest first. limit=None returns all of them."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                SELECT *
                FROM tasks
                WHERE status = 'open'
                ORDER BY created_at ASC, id ASC
                    LIMIT ?
                """,
                (-1 if limit is None else int(limit),),
            )
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def defer_task(self, task_id: int, *, now_ts: float | None = None) -> bool:
        """
        Snooze an open task: deferred_at -> now, defer_count += 1.

        Returns True if the row was updated.
        """
        now = time.time() if now_ts is None else float(now_ts)
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                UPDATE tasks
                SET deferred_at = ?,
                    defer_count = defer_count + 1,
                    updated_at = ?
                WHERE id = ?
                  AND status = 'open'
                """,
                (now, now, int(task_id)),
            )
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def set_deadline(self, task_id: int, deadline_at: float | None) -> bool:
        """
        Set or clear (deadline_at=None) the deadline of an open task.

        Returns True if the row was updated.
        """
        deadline = self._check_deadline(deadline_at)
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                UPDATE tasks
                SET deadline_at = ?, updated_at = ?
                WHERE id = ?
                  AND status = 'open'
                """,
                (deadline, time.time(), int(task_id)),
            )
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def update_task_status(
        self,
        task_id: int,
        new_status: TaskStatus,
        *,
        now_ts: float | None = None,
    ) -> bool:
        """
        Close an open task (done / cancelled).

        Atomically transitions:
          status = open -> status = new_status

        Returns True if the row was updated by this caller; a task that is
        already closed is left as it is.
        """
        now = time.time() if now_ts is None else float(now_ts)
        completed_at = now if new_status == TaskStatus.DONE else None
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                UPDATE tasks
                SET status = ?, completed_at = ?, updated_at = ?
                WHERE id = ?
                  AND status = 'open'
                """,
                (new_status.value, completed_at, now, int(task_id)),
            )
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()
