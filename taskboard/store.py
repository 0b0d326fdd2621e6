"""
Task storage backend (SQLite).

Provides CRUD operations for board tasks. The store holds the
authoritative set; card order within a column is never persisted, so
listings come back in insertion order.
"""
import logging
import sqlite3
import time
import uuid
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional, Dict, Any

from .schema import Task, TaskStatus, utc_now, validate_title

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "status")


def _connect(db_path: str) -> sqlite3.Connection:
    """Open a connection with WAL mode."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


def make_task_id() -> str:
    """Generate a sortable unique task ID (ms-precision timestamp + random hex)."""
    ts = int(time.time() * 1000)
    rand = uuid.uuid4().hex[:8]
    return f"task-{ts}-{rand}"


def _next_timestamp(previous: str) -> str:
    """Current time, nudged forward so it is strictly after `previous`."""
    now = utc_now()
    if previous and now <= previous:
        try:
            bumped = datetime.fromisoformat(previous) + timedelta(microseconds=1)
            return bumped.isoformat(timespec="microseconds")
        except ValueError:
            pass
    return now


class TaskStore:
    """SQLite-backed store for board tasks."""

    def __init__(self, db_path: str = None):
        """Initialize store and create tables if needed."""
        if db_path is None:
            db_path = str(Path.home() / ".local" / "share" / "taskboard" / "tasks.db")
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _init_schema(self):
        """Create tables if they don't exist."""
        with _connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS tasks (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    status TEXT NOT NULL DEFAULT 'todo',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status)")
            conn.commit()

    def create(self, title: str, description: str = "",
               status: TaskStatus = TaskStatus.TODO) -> Task:
        """Insert a new task. Raises ValidationError on an empty title."""
        if not isinstance(status, TaskStatus):
            status = TaskStatus.from_str(status)
        now = utc_now()
        task = Task(
            id=make_task_id(),
            title=validate_title(title),
            description=description or "",
            status=status,
            created_at=now,
            updated_at=now,
        )
        with _connect(self.db_path) as conn:
            conn.execute(
                "INSERT INTO tasks (id, title, description, status, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (task.id, task.title, task.description, task.status.value,
                 task.created_at, task.updated_at),
            )
            conn.commit()
        logger.info("Created task %s (%s)", task.id, task.status.value)
        return task

    def get(self, task_id: str) -> Optional[Task]:
        """Retrieve a task by ID."""
        with _connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT * FROM tasks WHERE id = ?", (task_id,)
            ).fetchone()
        return self._row_to_task(row) if row else None

    def list_all(self) -> List[Task]:
        """List all tasks in insertion order."""
        with _connect(self.db_path) as conn:
            rows = conn.execute("SELECT * FROM tasks ORDER BY seq ASC").fetchall()
        return [self._row_to_task(row) for row in rows]

    def list_by_status(self, status: TaskStatus) -> List[Task]:
        """List the tasks in one column, in insertion order."""
        with _connect(self.db_path) as conn:
            rows = conn.execute(
                "SELECT * FROM tasks WHERE status = ? ORDER BY seq ASC",
                (status.value,)
            ).fetchall()
        return [self._row_to_task(row) for row in rows]

    def update(self, task_id: str, fields: Dict[str, Any]) -> Optional[Task]:
        """
        Apply a partial update. Unknown keys are ignored.

        Returns the updated task, or None if the id is unknown. Raises
        ValidationError if the result would have an empty title or an
        unknown status.
        """
        changes: Dict[str, Any] = {}
        if "title" in fields:
            changes["title"] = validate_title(fields["title"])
        if "description" in fields:
            changes["description"] = fields["description"] or ""
        if "status" in fields:
            status = fields["status"]
            changes["status"] = status if isinstance(status, TaskStatus) else TaskStatus.from_str(status)

        # Read-modify-write under one write lock: concurrent partial
        # updates must not overwrite each other's columns.
        conn = _connect(self.db_path)
        try:
            with conn:
                conn.execute("BEGIN IMMEDIATE")
                row = conn.execute(
                    "SELECT * FROM tasks WHERE id = ?", (task_id,)
                ).fetchone()
                if not row:
                    return None
                task = self._row_to_task(row)
                for key, value in changes.items():
                    setattr(task, key, value)
                task.updated_at = _next_timestamp(task.updated_at)
                conn.execute(
                    "UPDATE tasks SET title = ?, description = ?, status = ?, updated_at = ? "
                    "WHERE id = ?",
                    (task.title, task.description, task.status.value, task.updated_at, task.id),
                )
        finally:
            conn.close()
        logger.info("Updated task %s (%s)", task.id, ", ".join(
            k for k in fields if k in UPDATABLE_FIELDS) or "touch")
        return task

    def delete(self, task_id: str) -> bool:
        """Delete a task. Returns False if it did not exist."""
        with _connect(self.db_path) as conn:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            conn.commit()
            deleted = cur.rowcount > 0
        if deleted:
            logger.info("Deleted task %s", task_id)
        return deleted

    def clear(self) -> int:
        """Delete every task. Returns the number removed."""
        with _connect(self.db_path) as conn:
            cur = conn.execute("DELETE FROM tasks")
            conn.commit()
            return cur.rowcount

    def count_by_status(self) -> Dict[str, int]:
        """Task counts per column (zero-filled)."""
        counts = {s.value: 0 for s in TaskStatus}
        with _connect(self.db_path) as conn:
            for row in conn.execute("SELECT status, COUNT(*) FROM tasks GROUP BY status"):
                counts[row[0]] = row[1]
        return counts

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        """Convert a database row to a Task object."""
        data = dict(row)
        data.pop("seq", None)
        return Task.from_dict(data)
