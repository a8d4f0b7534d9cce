"""Application context and key dispatch.

App owns the storage handle, the task list, the current screen and the edit
buffer. handle_key() is the only entry point used by the event loop: it
looks up the handler table for the current mode, applies the matching
action and returns the resulting screen. Keys with no binding in the
current mode do nothing.

Keys are strings: one character for character input, or one of the KEY_*
names below for special keys.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Optional

from models import Task
from screen import Event, Field, Mode, Screen, BROWSING, transition
from storage import Storage
from task_list import TaskList
from view import TaskView, View

logger = logging.getLogger(__name__)

KEY_UP = 'KEY_UP'
KEY_DOWN = 'KEY_DOWN'
KEY_LEFT = 'KEY_LEFT'
KEY_RIGHT = 'KEY_RIGHT'
KEY_HOME = 'KEY_HOME'
KEY_END = 'KEY_END'
KEY_ENTER = 'KEY_ENTER'
KEY_BACKSPACE = 'KEY_BACKSPACE'
KEY_TAB = 'KEY_TAB'
KEY_ESC = 'KEY_ESC'
KEY_DC = 'KEY_DC'


@dataclass
class EditBuffer:
    """Binds editing to one task by its index in the list (not a copy)."""
    index: int
    field: Field


class App:
    def __init__(self, storage: Storage, tasks: TaskList):
        self.storage = storage
        self.tasks = tasks
        self.screen: Screen = BROWSING
        self.edit: Optional[EditBuffer] = None
        self.exited: bool = False
        self.status: str = ''
        self._browse_keys: Dict[str, Callable[[], None]] = {
            'j': self.tasks.select_next,
            KEY_DOWN: self.tasks.select_next,
            KEY_RIGHT: self.tasks.select_next,
            'k': self.tasks.select_previous,
            KEY_UP: self.tasks.select_previous,
            KEY_LEFT: self.tasks.select_previous,
            'g': self.tasks.select_first,
            KEY_HOME: self.tasks.select_first,
            'G': self.tasks.select_last,
            KEY_END: self.tasks.select_last,
            'h': self.tasks.clear_selection,
            'a': self.create_task,
            'e': self.edit_task,
            KEY_ENTER: self.edit_task,
            'd': self.delete_task,
            KEY_DC: self.delete_task,
            'x': self.toggle_completed,
            ' ': self.toggle_completed,
            'q': self.request_quit,
            KEY_ESC: self.request_quit,
        }
        self._edit_keys: Dict[str, Callable[[], None]] = {
            KEY_BACKSPACE: self.backspace,
            KEY_TAB: self.switch_field,
            KEY_ENTER: self.commit_edit,
            KEY_ESC: self.commit_edit,
        }
        self._confirm_keys: Dict[str, Callable[[], None]] = {
            'y': self.confirm_exit,
            'Y': self.confirm_exit,
            'n': self.cancel_exit,
            'N': self.cancel_exit,
            KEY_ESC: self.cancel_exit,
        }

    @classmethod
    def load(cls, storage: Storage) -> 'App':
        storage.ensure_schema()
        return cls(storage, TaskList(storage.load_all()))

    # -------------------- dispatch --------------------
    def handle_key(self, key: str) -> Screen:
        mode = self.screen.mode
        if mode is Mode.BROWSING:
            action = self._browse_keys.get(key)
        elif mode is Mode.EDITING:
            action = self._edit_keys.get(key)
            if action is None and len(key) == 1 and key.isprintable():
                self.insert_char(key)
        elif mode is Mode.CONFIRMING_EXIT:
            action = self._confirm_keys.get(key)
        else:
            action = None
        if action is not None:
            action()
        return self.screen

    def _go(self, event: Event) -> None:
        new_screen = transition(self.screen, event)
        logger.debug("Screen %s -> %s on %s", self.screen, new_screen, event.value)
        self.screen = new_screen

    # -------------------- browsing --------------------
    def create_task(self) -> None:
        task = Task.blank()
        task.id = self.storage.create(task)
        index = self.tasks.append(task)
        self.tasks.select(index)
        self._begin_edit(index)
        self.status = f'Task {task.id} created.'

    def edit_task(self) -> None:
        index = self.tasks.target_index()
        if index is None:
            self.status = 'Nothing to edit.'
            return
        self.tasks.select(index)
        self._begin_edit(index)
        self.status = ''

    def _begin_edit(self, index: int) -> None:
        self._go(Event.EDIT)
        self.edit = EditBuffer(index=index, field=self.screen.field)

    def delete_task(self) -> None:
        index = self.tasks.target_index()
        if index is None:
            self.status = 'Nothing to delete.'
            return
        task = self.tasks[index]
        if task.id is None:
            raise RuntimeError(f'task at index {index} was never persisted')
        self.storage.delete(task.id)
        self.tasks.remove(index)
        self.status = f'Task {task.id} removed.'

    def toggle_completed(self) -> None:
        index = self.tasks.target_index()
        if index is None:
            self.status = 'Nothing to complete.'
            return
        task = self.tasks[index]
        if task.id is None:
            raise RuntimeError(f'task at index {index} was never persisted')
        completed = not task.completed
        completed_at = datetime.now().isoformat(timespec='seconds') if completed else None
        self.storage.set_completed(task.id, completed, completed_at)
        task.completed = completed
        task.completed_at = completed_at
        self.status = f'Task {task.id} marked {"done" if completed else "not done"}.'

    def request_quit(self) -> None:
        self._go(Event.QUIT)

    # -------------------- editing --------------------
    def editing_task(self) -> Task:
        if self.edit is None:
            raise RuntimeError('no task is being edited')
        return self.tasks[self.edit.index]

    def insert_char(self, ch: str) -> None:
        task = self.editing_task()
        if self.edit.field is Field.TITLE:
            task.title += ch
        else:
            task.description = (task.description or '') + ch

    def backspace(self) -> None:
        task = self.editing_task()
        if self.edit.field is Field.TITLE:
            task.title = task.title[:-1]
        elif task.description:
            task.description = task.description[:-1]

    def switch_field(self) -> None:
        self._go(Event.SWITCH_FIELD)
        self.edit.field = self.screen.field

    def commit_edit(self) -> None:
        task = self.editing_task()
        self.storage.update(task.id, task.title, task.description)
        self._go(Event.COMMIT)
        self.edit = None
        self.status = f'Task {task.id} saved.'

    # -------------------- exit confirmation --------------------
    def confirm_exit(self) -> None:
        self._go(Event.CONFIRM)
        self.exited = True

    def cancel_exit(self) -> None:
        self._go(Event.CANCEL)

    # -------------------- rendering snapshot --------------------
    def view(self) -> View:
        """Read-only snapshot for the renderer."""
        return View(
            tasks=tuple(
                TaskView(
                    id=t.id,
                    title=t.title,
                    description=t.description or '',
                    completion=t.completion,
                    category_name=t.category.name,
                    category_color=t.category.color,
                )
                for t in self.tasks
            ),
            selected=self.tasks.selected,
            mode=self.screen.mode,
            field=self.screen.field,
            editing=self.edit.index if self.edit else None,
            status=self.status,
        )
