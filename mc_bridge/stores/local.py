"""SQLite-backed local (MC) task store."""

from typing import Any, Dict, List, Optional
from uuid import uuid4
import logging
import sqlite3
import threading

from ..core.exceptions import LocalStoreError
from ..core.models import Agent, EventType, Task, DEFAULT_WORKSPACE
from ..events import EventBroadcaster
from ..utils.date import utc_now_iso


SCHEMA = """
CREATE TABLE IF NOT EXISTS agents (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS tasks (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL CHECK (length(title) > 0),
    description TEXT,
    status TEXT NOT NULL DEFAULT 'inbox',
    priority TEXT NOT NULL DEFAULT 'normal',
    assigned_agent_id TEXT REFERENCES agents(id),
    workspace_id TEXT NOT NULL DEFAULT 'default',
    business_id TEXT NOT NULL DEFAULT '',
    due_date TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_tasks_title_workspace ON tasks(title, workspace_id);
"""

# Columns a caller may change through update_task.
UPDATABLE_COLUMNS = (
    "title",
    "description",
    "status",
    "priority",
    "assigned_agent_id",
    "workspace_id",
    "business_id",
    "due_date",
)


class LocalTaskStore:
    """Single-row task and agent access over a SQLite database.

    Every mutation is committed before the matching change event is
    broadcast, so listeners always observe the persisted row.
    """

    def __init__(
        self,
        db_path: str = ":memory:",
        broadcaster: Optional[EventBroadcaster] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.db_path = db_path
        self.broadcaster = broadcaster
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(SCHEMA)

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    # ------------------------------------------------------------------
    # Queries

    def _query_one(self, sql: str, params: tuple) -> Optional[sqlite3.Row]:
        with self._lock:
            return self._conn.execute(sql, params).fetchone()

    def _run(self, sql: str, params: tuple) -> int:
        try:
            with self._lock, self._conn:
                cursor = self._conn.execute(sql, params)
                return cursor.rowcount
        except sqlite3.Error as e:
            raise LocalStoreError(str(e)) from e

    @staticmethod
    def _row_to_task(row: Optional[sqlite3.Row]) -> Optional[Task]:
        if row is None:
            return None
        return Task.from_dict(dict(row))

    def get_task(self, task_id: str) -> Optional[Task]:
        return self._row_to_task(
            self._query_one("SELECT * FROM tasks WHERE id = ?", (task_id,))
        )

    def find_task_by_title(self, title: str, workspace_id: str = DEFAULT_WORKSPACE) -> Optional[Task]:
        """Return the first task whose title matches exactly within a workspace."""
        return self._row_to_task(
            self._query_one(
                "SELECT * FROM tasks WHERE title = ? AND workspace_id = ? ORDER BY created_at LIMIT 1",
                (title, workspace_id),
            )
        )

    def list_tasks(self, workspace_id: Optional[str] = None) -> List[Task]:
        with self._lock:
            if workspace_id is None:
                rows = self._conn.execute("SELECT * FROM tasks ORDER BY created_at").fetchall()
            else:
                rows = self._conn.execute(
                    "SELECT * FROM tasks WHERE workspace_id = ? ORDER BY created_at",
                    (workspace_id,),
                ).fetchall()
        return [Task.from_dict(dict(row)) for row in rows]

    def count_tasks(self) -> int:
        row = self._query_one("SELECT COUNT(*) AS n FROM tasks", ())
        return int(row["n"]) if row else 0

    def get_agent_name(self, agent_id: Optional[str]) -> Optional[str]:
        """Resolve an agent id to its canonical name."""
        if not agent_id:
            return None
        row = self._query_one("SELECT name FROM agents WHERE id = ?", (agent_id,))
        return row["name"] if row else None

    def get_agent_id(self, name: Optional[str]) -> Optional[str]:
        """Resolve a canonical agent name to its id."""
        if not name:
            return None
        row = self._query_one("SELECT id FROM agents WHERE name = ?", (name,))
        return row["id"] if row else None

    # ------------------------------------------------------------------
    # Mutations

    def add_agent(self, name: str, agent_id: Optional[str] = None) -> Agent:
        agent = Agent(id=agent_id or str(uuid4()), name=name)
        self._run("INSERT INTO agents (id, name) VALUES (?, ?)", (agent.id, agent.name))
        return agent

    def insert_task(self, task: Task) -> Task:
        """Insert ``task`` and broadcast ``task_created``."""
        if not task.title or not task.title.strip():
            raise LocalStoreError("Task title is required")

        data = task.to_dict()
        columns = ", ".join(data.keys())
        placeholders = ", ".join("?" for _ in data)
        self._run(
            f"INSERT INTO tasks ({columns}) VALUES ({placeholders})",
            tuple(data.values()),
        )
        self.logger.debug(f"Inserted task {task.id} ({task.title!r})")
        self._emit(EventType.TASK_CREATED, task.to_dict())
        return task

    def update_task(self, task_id: str, **fields: Any) -> Optional[Task]:
        """Apply ``fields`` to one task and broadcast ``task_updated``.

        Returns the updated task, or None if no task has ``task_id``.
        """
        unknown = set(fields) - set(UPDATABLE_COLUMNS)
        if unknown:
            raise LocalStoreError(f"Cannot update columns: {sorted(unknown)}")
        if "title" in fields and not (fields["title"] or "").strip():
            raise LocalStoreError("Task title is required")

        values: Dict[str, Any] = dict(fields)
        values["updated_at"] = utc_now_iso()
        assignments = ", ".join(f"{column} = ?" for column in values)
        changed = self._run(
            f"UPDATE tasks SET {assignments} WHERE id = ?",
            tuple(values.values()) + (task_id,),
        )
        if not changed:
            return None

        task = self.get_task(task_id)
        if task is not None:
            self._emit(EventType.TASK_UPDATED, task.to_dict())
        return task

    def delete_task(self, task_id: str) -> bool:
        changed = self._run("DELETE FROM tasks WHERE id = ?", (task_id,))
        if changed:
            self._emit(EventType.TASK_DELETED, {"id": task_id})
        return bool(changed)

    def _emit(self, event_type: EventType, payload: Dict[str, Any]) -> None:
        if self.broadcaster is not None:
            self.broadcaster.emit(event_type, payload)
