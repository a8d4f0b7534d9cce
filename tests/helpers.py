# tests/helpers.py

from __future__ import annotations

from app import App
from models import Category, Task
from storage import Storage, StorageError


def make_task(
    title: str,
    description: str | None = None,
    category: Category | None = None,
) -> Task:
    return Task(
        title=title,
        description=description,
        created_at="2026-10-19T09:30:00",
        completed=False,
        category=category or Category.default(),
    )


def seeded_app(storage: Storage, *titles: str) -> App:
    """App loaded from storage after inserting one task per title."""
    for title in titles:
        storage.create(make_task(title))
    return App.load(storage)


class BrokenStorage(Storage):
    """Storage whose mutating calls fail once `broken` is set."""

    def __init__(self) -> None:
        super().__init__(":memory:")
        self.broken = False

    def _check(self) -> None:
        if self.broken:
            raise StorageError("disk I/O error")

    def create(self, task: Task) -> int:
        self._check()
        return super().create(task)

    def update(self, task_id: int, title: str, description: str | None) -> None:
        self._check()
        super().update(task_id, title, description)

    def delete(self, task_id: int) -> bool:
        self._check()
        return super().delete(task_id)

    def set_completed(self, task_id: int, completed: bool, completed_at: str | None) -> None:
        self._check()
        super().set_completed(task_id, completed, completed_at)
