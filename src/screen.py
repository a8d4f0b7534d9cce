"""Screen modes and the transitions between them.

Browsing is the initial mode. Editing carries the field keystrokes go to.
ConfirmingExit asks before quitting. Exited is terminal: nothing leaves it.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class Mode(Enum):
    BROWSING = "browsing"
    EDITING = "editing"
    CONFIRMING_EXIT = "confirming-exit"
    EXITED = "exited"


class Field(Enum):
    TITLE = "title"
    DESCRIPTION = "description"


class Event(Enum):
    QUIT = "quit"
    EDIT = "edit"
    SWITCH_FIELD = "switch-field"
    COMMIT = "commit"
    CONFIRM = "confirm"
    CANCEL = "cancel"


class IllegalTransition(ValueError):
    pass


@dataclass(frozen=True)
class Screen:
    mode: Mode = Mode.BROWSING
    field: Optional[Field] = None

    def __str__(self) -> str:
        return f'{self.mode.value}({self.field.value})' if self.field else self.mode.value


BROWSING = Screen(Mode.BROWSING)
EDITING_TITLE = Screen(Mode.EDITING, Field.TITLE)
EDITING_DESCRIPTION = Screen(Mode.EDITING, Field.DESCRIPTION)
CONFIRMING_EXIT = Screen(Mode.CONFIRMING_EXIT)
EXITED = Screen(Mode.EXITED)

TRANSITIONS: Dict[Tuple[Screen, Event], Screen] = {
    (BROWSING, Event.QUIT): CONFIRMING_EXIT,
    (BROWSING, Event.EDIT): EDITING_TITLE,
    (EDITING_TITLE, Event.SWITCH_FIELD): EDITING_DESCRIPTION,
    (EDITING_DESCRIPTION, Event.SWITCH_FIELD): EDITING_TITLE,
    (EDITING_TITLE, Event.COMMIT): BROWSING,
    (EDITING_DESCRIPTION, Event.COMMIT): BROWSING,
    (CONFIRMING_EXIT, Event.CONFIRM): EXITED,
    (CONFIRMING_EXIT, Event.CANCEL): BROWSING,
}


def can_transition(screen: Screen, event: Event) -> bool:
    return (screen, event) in TRANSITIONS


def transition(screen: Screen, event: Event) -> Screen:
    try:
        return TRANSITIONS[(screen, event)]
    except KeyError:
        raise IllegalTransition(f'{event.value} is not allowed in {screen}') from None
