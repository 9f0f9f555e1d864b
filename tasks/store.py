"""
tasks/store.py -- SQLAlchemy-backed persistence layer for tasks.

Uses SQLAlchemy Core (not ORM) so the dataclass in tasks/models.py remains
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change.

Pattern: Repository + Data Mapper. TaskStore is the repository, _row_to_task
is the mapper. Route handlers never touch SQL directly.

Authorization is NOT enforced here. Routes load a task, run
auth.policy.authorize_owned(), then call the mutating method. The store has
no method that writes owner_id after insert.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = TaskStore("sqlite:///taskguard.db")
    task_id = store.create_task(Task(title="Write report", owner_id="1"))
    store.list_tasks_for_owner("1")
    store.update_title(task_id, "Write final report")
    store.close()
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, Text
from sqlalchemy.engine import Engine

from core.database import create_store_engine
from tasks.models import Task

logger = logging.getLogger("taskguard.tasks")

_DEFAULT_DB_URL = "sqlite:///taskguard.db"

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_tasks = Table(
    "tasks",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", Text, nullable=False),
    Column("owner_id", String(64), nullable=False, index=True),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class TaskStore:
    def __init__(self, db_url: str = _DEFAULT_DB_URL) -> None:
        self.engine: Engine = create_store_engine(db_url)
        metadata.create_all(self.engine)

    def create_task(self, task: Task) -> int:
        """Insert a task and return its assigned ID."""
        now = _now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                _tasks.insert().values(
                    title=task.title,
                    owner_id=task.owner_id,
                    created_at=now,
                    updated_at=now,
                )
            )
            conn.commit()
            task_id = result.inserted_primary_key[0]
        logger.info("Created task id=%s owner=%s", task_id, task.owner_id)
        return task_id

    def get_task(self, task_id: int) -> Optional[Task]:
        """Return the task, or None if no task has this ID."""
        with self.engine.connect() as conn:
            row = conn.execute(_tasks.select().where(_tasks.c.id == task_id)).fetchone()
        return _row_to_task(row) if row is not None else None

    def list_tasks(self) -> list[Task]:
        """Return every task, oldest first. Admin view."""
        with self.engine.connect() as conn:
            rows = conn.execute(_tasks.select().order_by(_tasks.c.id)).fetchall()
        return [_row_to_task(r) for r in rows]

    def list_tasks_for_owner(self, owner_id: str) -> list[Task]:
        """Return the tasks owned by owner_id, oldest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _tasks.select().where(_tasks.c.owner_id == owner_id).order_by(_tasks.c.id)
            ).fetchall()
        return [_row_to_task(r) for r in rows]

    def update_title(self, task_id: int, title: str) -> bool:
        """Replace a task's title. Returns True if a row was updated."""
        with self.engine.connect() as conn:
            result = conn.execute(
                _tasks.update().where(_tasks.c.id == task_id).values(title=title, updated_at=_now_iso())
            )
            conn.commit()
        return result.rowcount > 0

    def delete_task(self, task_id: int) -> bool:
        """Delete a task. Returns True if deleted, False if not found."""
        with self.engine.connect() as conn:
            result = conn.execute(_tasks.delete().where(_tasks.c.id == task_id))
            conn.commit()
        if result.rowcount > 0:
            logger.info("Deleted task id=%s", task_id)
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_task(row) -> Task:
    return Task(
        id=row.id,
        title=row.title,
        owner_id=row.owner_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
