import sqlite3
import json
import logging
import uuid
from datetime import date, datetime
from typing import Optional
from contextlib import contextmanager

import config
from models import Task, TimeSlot

logger = logging.getLogger(__name__)

DATABASE_PATH = config.DATABASE_PATH


class InvariantViolation(ValueError):
    """Raised when a write would leave a task in an inconsistent state."""


@contextmanager
def get_db():
    """Context manager for database connections."""
    conn = sqlite3.connect(DATABASE_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()

def init_db():
    """Initialize database by running Alembic migrations."""
    import subprocess
    import os

    # Run alembic upgrade from the backend directory
    backend_dir = os.path.dirname(os.path.abspath(__file__))
    subprocess.run(
        ["alembic", "upgrade", "head"],
        cwd=backend_dir,
        check=True
    )

def _row_to_task(row) -> Task:
    """Convert a database row to a Task model."""
    return Task(
        id=row["id"],
        text=row["text"],
        completed=bool(row["completed"]),
        archived=bool(row["archived"]),
        time_slot=row["time_slot"] or None,
        date=row["date"] or None,
        created_at=row["created_at"],
    )


def get_all_tasks(include_archived: bool = False) -> list[Task]:
    """All tasks in insertion order, archived ones only when asked for."""
    query = "SELECT * FROM tasks"
    if not include_archived:
        query += " WHERE archived = 0"
    query += " ORDER BY created_at, rowid"
    with get_db() as conn:
        rows = conn.execute(query).fetchall()
        return [_row_to_task(row) for row in rows]

def get_task_db(task_id: str) -> Optional[Task]:
    with get_db() as conn:
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return _row_to_task(row) if row else None

def create_task_db(
    task_id: str,
    text: str,
    time_slot: Optional[TimeSlot] = None,
    task_date: Optional[str] = None,
) -> Task:
    """Create an open, unarchived task.
    task_date is in YYYY-MM-DD format.
    """
    created_at = datetime.now().isoformat()
    with get_db() as conn:
        conn.execute(
            """INSERT INTO tasks (id, text, completed, archived, time_slot, date, created_at)
               VALUES (?, ?, 0, 0, ?, ?, ?)""",
            (task_id, text, time_slot, task_date, created_at)
        )
        conn.commit()

    return Task(
        id=task_id,
        text=text,
        completed=False,
        archived=False,
        time_slot=time_slot,
        date=task_date,
        created_at=created_at,
    )

def update_task_db(task_id: str, **updates) -> Optional[Task]:
    """
    Update a task with any fields provided.
    Only updates fields that differ from current values.

    Args:
        task_id: Task ID to update
        **updates: Field names and values to update (text, completed, archived, time_slot, date)

    Raises:
        InvariantViolation: if the result would be archived but not completed
    """
    with get_db() as conn:
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if not row:
            return None

        keys = row.keys()

        # Filter updates: only include fields that differ from current values
        changes = {}
        for field, new_value in updates.items():
            if field not in keys or field == "id":
                continue
            if isinstance(new_value, bool):
                new_value = int(new_value)
            elif isinstance(new_value, date):
                new_value = new_value.isoformat()
            if new_value != row[field]:
                changes[field] = new_value

        completed = changes.get("completed", row["completed"])
        archived = changes.get("archived", row["archived"])
        if archived and not completed:
            raise InvariantViolation(f"Task '{row['text']}' must be completed before it is archived")

        # Execute UPDATE only if there are actual changes
        if changes:
            set_clause = ", ".join(f"{field} = ?" for field in changes.keys())
            values = list(changes.values()) + [task_id]
            conn.execute(f"UPDATE tasks SET {set_clause} WHERE id = ?", values)
            conn.commit()

        # Return updated task (re-fetch to get current state)
        updated_row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return _row_to_task(updated_row)


class TaskStore:
    """
    The task operations the interpreter needs, backed by the functions above.
    Not-found ids return None; invariant breaches raise InvariantViolation.
    """

    def list_active_tasks(self) -> list[Task]:
        return get_all_tasks()

    def create_task(
        self,
        text: str,
        task_date: Optional[date] = None,
        time_slot: Optional[TimeSlot] = None,
    ) -> Task:
        task = create_task_db(
            str(uuid.uuid4()),
            text,
            time_slot=time_slot,
            task_date=task_date.isoformat() if task_date else None,
        )
        logger.info("Created task %s (%s, %s)", task.id, task.time_slot, task.date)
        return task

    def set_completed(self, task_id: str, completed: bool) -> Optional[Task]:
        return update_task_db(task_id, completed=completed)

    def set_archived(self, task_id: str) -> Optional[Task]:
        return update_task_db(task_id, archived=True)

    def set_time_slot(self, task_id: str, time_slot: Optional[TimeSlot]) -> Optional[Task]:
        return update_task_db(task_id, time_slot=time_slot)


# Conversation operations
def get_conversation() -> list[dict]:
    """Get the most recent conversation's messages."""
    with get_db() as conn:
        row = conn.execute(
            "SELECT messages FROM conversations ORDER BY updated_at DESC LIMIT 1"
        ).fetchone()
        if row:
            return json.loads(row["messages"])
        return []

def save_conversation(messages: list[dict]):
    """Save conversation messages, replacing the most recent conversation."""
    now = datetime.now().isoformat()
    messages_json = json.dumps(messages)
    with get_db() as conn:
        row = conn.execute(
            "SELECT id FROM conversations ORDER BY updated_at DESC LIMIT 1"
        ).fetchone()
        if row:
            conn.execute(
                "UPDATE conversations SET messages = ?, updated_at = ? WHERE id = ?",
                (messages_json, now, row["id"])
            )
        else:
            conn.execute(
                "INSERT INTO conversations (messages, created_at, updated_at) VALUES (?, ?, ?)",
                (messages_json, now, now)
            )
        conn.commit()
