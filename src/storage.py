"""Persistence for tasks and categories (SQLite).

One connection is opened when Storage is constructed and used for the life
of the process; every call runs on the caller's thread. Errors from sqlite3
are re-raised as StorageError so callers can tell a storage failure apart
from a programming error.

Decision: the task listing inner-joins categories, so a task whose category
row was deleted (category_id set to NULL) is not loaded. Kept as a known
limitation.
"""
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from models import Category, Task

logger = logging.getLogger(__name__)

DB_FILE = Path('todos.db')

_CATEGORIES_TABLE = """
    CREATE TABLE IF NOT EXISTS categories (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL,
        color TEXT NOT NULL
    )
"""

_TASKS_TABLE = """
    CREATE TABLE IF NOT EXISTS tasks (
        id INTEGER PRIMARY KEY,
        title TEXT NOT NULL,
        description TEXT,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        completed BOOLEAN NOT NULL DEFAULT 0,
        completed_at DATETIME DEFAULT NULL,
        category_id INTEGER,
        FOREIGN KEY (category_id) REFERENCES categories(id) ON DELETE SET NULL
    )
"""

_SELECT_TASKS = """
    SELECT t.id, t.title, t.description, t.created_at, t.completed, t.completed_at,
           c.name AS category_name, c.color AS category_color
    FROM tasks t
    INNER JOIN categories c ON c.id = t.category_id
"""


class StorageError(Exception):
    """A storage operation failed (connection error, constraint violation, ...)."""


class Storage:
    def __init__(self, db_path: Union[str, Path] = DB_FILE):
        self.db_path = str(db_path)
        try:
            self.conn = sqlite3.connect(self.db_path)
            self.conn.row_factory = sqlite3.Row
            self.conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as e:
            raise StorageError(f"cannot open {self.db_path}: {e}") from e

    def close(self) -> None:
        self.conn.close()

    # -------------------- schema --------------------
    def ensure_schema(self) -> None:
        """Create the category and task tables if missing. Safe to call repeatedly."""
        try:
            with self.conn:
                self.conn.execute(_CATEGORIES_TABLE)
                self.conn.execute(_TASKS_TABLE)
        except sqlite3.Error as e:
            raise StorageError(f"schema setup failed: {e}") from e
        logger.info("Storage ready db=%s tasks=%s", self.db_path, self.count())

    # -------------------- queries --------------------
    def count(self) -> int:
        try:
            (n,) = self.conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"count failed: {e}") from e
        return int(n)

    def load_all(self) -> List[Task]:
        """All tasks with a resolvable category, in insertion order.

        Rows that cannot be turned into a Task are logged and skipped.
        """
        try:
            rows = self.conn.execute(_SELECT_TASKS + " ORDER BY t.id").fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"load failed: {e}") from e
        tasks: List[Task] = []
        for row in rows:
            try:
                tasks.append(_row_to_task(row))
            except (TypeError, ValueError) as e:
                logger.warning("Skipping undecodable task row id=%s: %s", row['id'], e)
        logger.debug("Loaded %d of %d task rows", len(tasks), len(rows))
        return tasks

    def get(self, task_id: int) -> Optional[Task]:
        try:
            row = self.conn.execute(_SELECT_TASKS + " WHERE t.id = ?", (task_id,)).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"get {task_id} failed: {e}") from e
        if row is None:
            return None
        try:
            return _row_to_task(row)
        except (TypeError, ValueError) as e:
            raise StorageError(f"task {task_id} cannot be decoded: {e}") from e

    # -------------------- mutations --------------------
    def create(self, task: Task) -> int:
        """Insert the task (and its category, when not already stored); return the new id."""
        try:
            with self.conn:
                category_id = self._category_id(task.category)
                cur = self.conn.execute(
                    "INSERT INTO tasks (title, description, created_at, completed, completed_at, category_id) "
                    "VALUES (?, ?, COALESCE(?, CURRENT_TIMESTAMP), ?, ?, ?)",
                    (task.title, task.description, task.created_at, bool(task.completed),
                     task.completed_at, category_id),
                )
        except sqlite3.Error as e:
            raise StorageError(f"create failed: {e}") from e
        task_id = int(cur.lastrowid)
        logger.debug("Task created id=%s category_id=%s", task_id, category_id)
        return task_id

    def _category_id(self, category: Category) -> int:
        row = self.conn.execute(
            "SELECT id FROM categories WHERE name = ? AND color = ? ORDER BY id LIMIT 1",
            (category.name, category.color),
        ).fetchone()
        if row:
            return int(row['id'])
        cur = self.conn.execute(
            "INSERT INTO categories (name, color) VALUES (?, ?)", (category.name, category.color)
        )
        logger.info("Category added id=%s name=%s", cur.lastrowid, category.name)
        return int(cur.lastrowid)

    def update(self, task_id: int, title: str, description: Optional[str]) -> None:
        """Write title and description only; completion and category are untouched."""
        try:
            with self.conn:
                self.conn.execute(
                    "UPDATE tasks SET title = ?, description = ? WHERE id = ?",
                    (title, description, task_id),
                )
        except sqlite3.Error as e:
            raise StorageError(f"update {task_id} failed: {e}") from e
        logger.debug("Task updated id=%s", task_id)

    def set_completed(self, task_id: int, completed: bool, completed_at: Optional[str]) -> None:
        try:
            with self.conn:
                self.conn.execute(
                    "UPDATE tasks SET completed = ?, completed_at = ? WHERE id = ?",
                    (completed, completed_at, task_id),
                )
        except sqlite3.Error as e:
            raise StorageError(f"completion update {task_id} failed: {e}") from e
        logger.debug("Task id=%s completed=%s", task_id, completed)

    def delete(self, task_id: int) -> bool:
        """Remove the task row. Returns False when no such row existed."""
        try:
            with self.conn:
                cur = self.conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        except sqlite3.Error as e:
            raise StorageError(f"delete {task_id} failed: {e}") from e
        if cur.rowcount == 0:
            logger.warning("Delete of missing task id=%s", task_id)
            return False
        logger.debug("Task deleted id=%s", task_id)
        return True


def _row_to_task(row: sqlite3.Row) -> Task:
    return Task(
        id=int(row['id']),
        title=str(row['title']),
        description=row['description'],
        created_at=_timestamp(row['created_at']),
        completed=_flag(row['completed']),
        completed_at=_timestamp(row['completed_at']),
        category=Category(name=str(row['category_name']), color=str(row['category_color'])),
    )


def _flag(value) -> Optional[bool]:
    if value is None:
        return None
    if value in (0, 1):
        return bool(value)
    raise ValueError(f"invalid completed value {value!r}")


def _timestamp(value) -> Optional[str]:
    """Normalise a stored timestamp to ISO-8601 text.

    SQLite's CURRENT_TIMESTAMP uses a space separator; fromisoformat accepts both.
    """
    if value is None:
        return None
    return datetime.fromisoformat(str(value)).isoformat()
