# tests/test_storage.py

from __future__ import annotations

import pytest

from models import Category, Task
from storage import Storage, StorageError

from .helpers import make_task


def _schema(storage: Storage) -> list[tuple[str, str]]:
    rows = storage.conn.execute("SELECT name, sql FROM sqlite_master ORDER BY name").fetchall()
    return [(r["name"], r["sql"]) for r in rows]


def test_ensure_schema_is_idempotent(storage: Storage) -> None:
    before = _schema(storage)
    storage.ensure_schema()
    assert _schema(storage) == before
    assert {name for name, _ in before} >= {"tasks", "categories"}


def test_create_returns_id_and_round_trips(storage: Storage) -> None:
    task = make_task("Buy milk", "two litres", Category("House", "Black"))
    task_id = storage.create(task)

    loaded = storage.load_all()
    assert len(loaded) == 1
    got = loaded[0]
    assert got.id == task_id
    assert got.title == "Buy milk"
    assert got.description == "two litres"
    assert got.category == Category("House", "Black")
    assert got.created_at == "2026-10-19T09:30:00"
    assert got.completed is False
    assert got.completed_at is None


def test_blank_task_round_trips(storage: Storage) -> None:
    task = Task.blank()
    task_id = storage.create(task)
    got = storage.get(task_id)
    assert got is not None
    assert got.title == ""
    assert got.description == ""
    assert got.created_at == task.created_at
    assert got.category == Category.default()


def test_missing_created_at_uses_database_default(storage: Storage) -> None:
    task = make_task("x")
    task.created_at = None
    task_id = storage.create(task)
    got = storage.get(task_id)
    assert got.created_at is not None
    assert "T" in got.created_at


def test_load_preserves_insertion_order(storage: Storage) -> None:
    for title in ("first", "second", "third"):
        storage.create(make_task(title))
    assert [t.title for t in storage.load_all()] == ["first", "second", "third"]


def test_same_category_is_stored_once(storage: Storage) -> None:
    storage.create(make_task("a"))
    storage.create(make_task("b"))
    storage.create(make_task("c", category=Category("Work", "Red")))
    (n,) = storage.conn.execute("SELECT COUNT(*) FROM categories").fetchone()
    assert n == 2


def test_update_changes_only_title_and_description(storage: Storage) -> None:
    task_id = storage.create(make_task("old", "old desc"))
    storage.set_completed(task_id, True, "2026-10-19T10:00:00")
    storage.update(task_id, "new", None)

    got = storage.get(task_id)
    assert got.title == "new"
    assert got.description is None
    assert got.completed is True
    assert got.completed_at == "2026-10-19T10:00:00"
    assert got.category == Category.default()


def test_set_completed_false_clears_timestamp(storage: Storage) -> None:
    task_id = storage.create(make_task("x"))
    storage.set_completed(task_id, True, "2026-10-19T10:00:00")
    storage.set_completed(task_id, False, None)
    got = storage.get(task_id)
    assert got.completed is False
    assert got.completed_at is None


def test_delete_removes_exactly_one_row(storage: Storage) -> None:
    keep = storage.create(make_task("keep"))
    gone = storage.create(make_task("gone"))
    assert storage.delete(gone) is True
    assert [t.id for t in storage.load_all()] == [keep]
    assert storage.get(gone) is None
    assert storage.count() == 1


def test_delete_missing_row_reports_false(storage: Storage) -> None:
    assert storage.delete(999) is False


def test_undecodable_rows_are_skipped(storage: Storage) -> None:
    good = storage.create(make_task("good"))
    (category_id,) = storage.conn.execute("SELECT id FROM categories").fetchone()
    storage.conn.execute(
        "INSERT INTO tasks (title, completed, category_id) VALUES ('bad flag', 7, ?)", (category_id,)
    )
    storage.conn.execute(
        "INSERT INTO tasks (title, created_at, category_id) VALUES ('bad date', 'yesterday', ?)",
        (category_id,),
    )
    storage.conn.commit()
    assert [t.id for t in storage.load_all()] == [good]


def test_task_with_deleted_category_is_not_loaded(storage: Storage) -> None:
    storage.create(make_task("orphan", category=Category("Old", "Blue")))
    storage.create(make_task("kept"))
    with storage.conn:
        storage.conn.execute("DELETE FROM categories WHERE name = 'Old'")
    (category_id,) = storage.conn.execute(
        "SELECT category_id FROM tasks WHERE title = 'orphan'"
    ).fetchone()
    assert category_id is None
    assert [t.title for t in storage.load_all()] == ["kept"]
    assert storage.count() == 2


def test_sqlite_errors_become_storage_errors(storage: Storage) -> None:
    storage.conn.execute("DROP TABLE tasks")
    with pytest.raises(StorageError):
        storage.load_all()
    with pytest.raises(StorageError):
        storage.create(make_task("x"))


def test_failed_create_leaves_no_category_behind(storage: Storage) -> None:
    storage.conn.execute("DROP TABLE tasks")
    with pytest.raises(StorageError):
        storage.create(make_task("x", category=Category("Fresh", "Green")))
    (n,) = storage.conn.execute("SELECT COUNT(*) FROM categories").fetchone()
    assert n == 0


def test_file_database_survives_reopen(tmp_path) -> None:
    path = tmp_path / "todos.db"
    first = Storage(path)
    first.ensure_schema()
    task_id = first.create(make_task("persisted"))
    first.close()

    second = Storage(path)
    second.ensure_schema()
    assert [(t.id, t.title) for t in second.load_all()] == [(task_id, "persisted")]
    second.close()


def test_get_of_undecodable_row_raises_storage_error(storage: Storage) -> None:
    storage.create(make_task("good"))
    (category_id,) = storage.conn.execute("SELECT id FROM categories").fetchone()
    cur = storage.conn.execute(
        "INSERT INTO tasks (title, created_at, category_id) VALUES ('bad date', 'yesterday', ?)",
        (category_id,),
    )
    storage.conn.commit()
    with pytest.raises(StorageError, match="cannot be decoded"):
        storage.get(cur.lastrowid)
