"""Read-only screen snapshot and the layout built from it.

render_lines() is a pure function: it turns a View into rows of
(text, style) segments that the curses loop paints. Style names are
resolved to terminal attributes by theme.attr().
"""
import textwrap
from dataclasses import dataclass
from typing import List, Optional, Tuple

from screen import Field, Mode

GLYPHS = {'done': '✓', 'pending': '☐', 'unknown': '?'}
HELP = {
    Mode.BROWSING: "j/k move  g/G top/bottom  h unselect  a add  e edit  x done  d delete  q quit",
    Mode.EDITING: "type to edit  Tab switch field  Backspace delete  Enter/Esc save",
    Mode.CONFIRMING_EXIT: "Quit? (y/n)",
    Mode.EXITED: "",
}
TITLE = " To-do list "
DETAIL_ROWS = 6
LABEL_WIDTH = 13

Segment = Tuple[str, str]
Row = List[Segment]


@dataclass(frozen=True)
class TaskView:
    id: Optional[int]
    title: str
    description: str
    completion: str
    category_name: str
    category_color: str

    @property
    def glyph(self) -> str:
        return GLYPHS[self.completion]


@dataclass(frozen=True)
class View:
    tasks: Tuple[TaskView, ...]
    selected: Optional[int]
    mode: Mode
    field: Optional[Field]
    editing: Optional[int]
    status: str = ''


def render_lines(view: View, width: int, height: int) -> List[Row]:
    """Lay the view out in exactly `height` rows no wider than `width`."""
    width = max(width, 1)
    header: List[Row] = [[(TITLE.center(width, '-')[:width], 'header')]]
    footer = _footer(view, width)
    detail = _detail(view, width)
    list_height = max(height - len(header) - len(detail) - len(footer), 0)
    body = _task_rows(view, width, list_height)
    body = _pad(body, list_height)
    return (header + body + detail + footer)[:height]


# -------------------- task list --------------------
def _task_rows(view: View, width: int, limit: int) -> List[Row]:
    if not view.tasks:
        return [[(_clip('  (no tasks - press a to add one)', width), 'empty')]][:limit]
    focus = _focus(view)
    start = 0
    if focus is not None and limit > 0 and focus >= limit:
        start = focus - limit + 1
    rows: List[Row] = []
    for i, task in enumerate(view.tasks[start:start + limit], start=start):
        marker = '>' if i == focus else ' '
        title = task.title if task.title else '<untitled>'
        text = f'{marker} {task.glyph} {title}'
        label = f'  [{task.category_name}]'
        style = 'selected' if i == focus else task.completion
        if len(text) + len(label) > width:
            if width - len(label) < 8:
                rows.append([(_clip(text, width), style)])
                continue
            text = _clip(text, width - len(label))
        rows.append([(text, style), (label, 'category:' + task.category_color)])
    return rows


# -------------------- detail pane --------------------
def _detail(view: View, width: int) -> List[Row]:
    rows: List[Row] = [[('-' * width, 'header')]]
    focus = _focus(view)
    if focus is None or focus >= len(view.tasks):
        rows.append([(_clip('Nothing selected.', width), 'empty')])
        return _pad(rows, DETAIL_ROWS)
    task = view.tasks[focus]
    editing = view.mode is Mode.EDITING
    title_active = editing and view.field is Field.TITLE
    desc_active = editing and view.field is Field.DESCRIPTION

    rows.append(_field_row('Title:', task.title, title_active, width))
    desc_room = DETAIL_ROWS - 3
    wrapped = textwrap.wrap(task.description, max(width - LABEL_WIDTH - 1, 1), drop_whitespace=False) or ['']
    # while typing, keep the end of the text (and the cursor) in view
    shown = wrapped[-desc_room:] if desc_active else wrapped[:desc_room]
    for n, line in enumerate(shown):
        label = 'Description:' if n == 0 else ''
        rows.append(_field_row(label, line, desc_active and n == len(shown) - 1, width))
    rows = _pad(rows, DETAIL_ROWS - 1)
    rows.append([(_clip(f'Category: {task.category_name} ({task.category_color})', width), 'dim')])
    return rows


def _field_row(label: str, value: str, active: bool, width: int) -> Row:
    room = max(width - LABEL_WIDTH - 1, 1)
    if active and len(value) > room:
        value = value[-room:]
    text = f'{label:<{LABEL_WIDTH}}{value}' + ('_' if active else '')
    return [(_clip(text, width), 'field-active' if active else 'normal')]


def _focus(view: View) -> Optional[int]:
    return view.editing if view.editing is not None else view.selected


def _pad(rows: List[Row], size: int) -> List[Row]:
    return (rows + [[('', 'normal')]] * size)[:size]


# -------------------- footer --------------------
def _footer(view: View, width: int) -> List[Row]:
    prompt_style = 'prompt' if view.mode is Mode.CONFIRMING_EXIT else 'dim'
    return [
        [(_clip(view.status, width), 'status')],
        [(_clip(HELP[view.mode], width), prompt_style)],
    ]


def _clip(text: str, width: int) -> str:
    if width <= 0:
        return ''
    if len(text) <= width:
        return text
    return text[:max(width - 1, 0)] + '…'
