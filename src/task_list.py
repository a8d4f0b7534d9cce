"""In-memory task list with a selection cursor.

Insertion order is display order. The selected index is either None or a
valid index; every mutating method re-establishes that before returning.
Out-of-range index access raises IndexError and is not caught here.
"""
from typing import Iterable, Iterator, List, Optional

from models import Task


class TaskList:
    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        self.items: List[Task] = list(tasks or [])
        self._selected: Optional[int] = None

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Task:
        if not 0 <= index < len(self.items):
            raise IndexError(f"task index {index} out of range (length {len(self.items)})")
        return self.items[index]

    # -------------------- mutation --------------------
    def append(self, task: Task) -> int:
        self.items.append(task)
        return len(self.items) - 1

    def remove(self, index: int) -> Task:
        """Remove the task at index and re-clamp the selection.

        The element that slides into the removed slot becomes selected; when
        the removed task was last, the new last task is selected; an empty
        list leaves nothing selected.
        """
        task = self[index]
        del self.items[index]
        if self._selected is not None:
            if not self.items:
                self._selected = None
            elif self._selected > index or self._selected >= len(self.items):
                self._selected = min(max(self._selected - 1, 0), len(self.items) - 1)
        return task

    # -------------------- selection --------------------
    @property
    def selected(self) -> Optional[int]:
        return self._selected

    def select(self, index: Optional[int]) -> None:
        if index is not None and not 0 <= index < len(self.items):
            raise IndexError(f"cannot select {index} (length {len(self.items)})")
        self._selected = index

    def clear_selection(self) -> None:
        self._selected = None

    def select_next(self) -> None:
        if not self.items:
            return
        if self._selected is None:
            self._selected = 0
        else:
            self._selected = min(self._selected + 1, len(self.items) - 1)

    def select_previous(self) -> None:
        if not self.items:
            return
        if self._selected is None:
            self._selected = len(self.items) - 1
        else:
            self._selected = max(self._selected - 1, 0)

    def select_first(self) -> None:
        if self.items:
            self._selected = 0

    def select_last(self) -> None:
        if self.items:
            self._selected = len(self.items) - 1

    def target_index(self) -> Optional[int]:
        """Index a command should act on: the selection, else 0, else None when empty."""
        if not self.items:
            return None
        return self._selected if self._selected is not None else 0

    def __str__(self) -> str:
        done = sum(1 for t in self.items if t.completed)
        return f'{len(self.items)} tasks, {done} done, selected={self._selected}'
