"""Data models for the terminal to-do application.

Exposes the Category and Task dataclasses. Timestamps are ISO-8601 text,
the same representation the storage layer writes, so a task round-trips
through the database unchanged.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

DEFAULT_CATEGORY_NAME = "General"
DEFAULT_CATEGORY_COLOR = "White"


@dataclass
class Category:
    """A named, coloured grouping label. Tasks own a copy, never a shared reference."""
    name: str
    color: str

    @classmethod
    def default(cls) -> Category:
        return cls(name=DEFAULT_CATEGORY_NAME, color=DEFAULT_CATEGORY_COLOR)


@dataclass
class Task:
    """A single to-do item.

    Fields:
        title: May be empty while the task is being edited.
        description: Optional longer text (None means never set).
        created_at: ISO timestamp set when the task is created.
        completed: True / False, or None when the stored state is unknown.
        completed_at: ISO timestamp set only when completed becomes True.
        category: Denormalized copy of the category name and colour.
        id: Storage row id; None until the task is first persisted.
    """
    title: str = ""
    description: Optional[str] = None
    created_at: Optional[str] = None
    completed: Optional[bool] = None
    completed_at: Optional[str] = None
    category: Category = field(default_factory=Category.default)
    id: Optional[int] = None

    @classmethod
    def blank(cls) -> Task:
        """Fresh task as produced by the create command."""
        return cls(
            title="",
            description="",
            created_at=datetime.now().isoformat(timespec="seconds"),
            completed=False,
            category=Category.default(),
        )

    @property
    def completion(self) -> str:
        if self.completed is None:
            return "unknown"
        return "done" if self.completed else "pending"

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, title={self.title!r}, completed={self.completed})"
