# tests/test_screen.py

from __future__ import annotations

import itertools

import pytest

from screen import (
    BROWSING,
    CONFIRMING_EXIT,
    EDITING_DESCRIPTION,
    EDITING_TITLE,
    EXITED,
    TRANSITIONS,
    Event,
    IllegalTransition,
    can_transition,
    transition,
)


@pytest.mark.parametrize(
    ("start", "event", "end"),
    [
        (BROWSING, Event.QUIT, CONFIRMING_EXIT),
        (BROWSING, Event.EDIT, EDITING_TITLE),
        (EDITING_TITLE, Event.SWITCH_FIELD, EDITING_DESCRIPTION),
        (EDITING_DESCRIPTION, Event.SWITCH_FIELD, EDITING_TITLE),
        (EDITING_TITLE, Event.COMMIT, BROWSING),
        (EDITING_DESCRIPTION, Event.COMMIT, BROWSING),
        (CONFIRMING_EXIT, Event.CONFIRM, EXITED),
        (CONFIRMING_EXIT, Event.CANCEL, BROWSING),
    ],
)
def test_legal_transitions(start, event, end) -> None:
    assert transition(start, event) == end


def test_everything_else_is_illegal() -> None:
    screens = [BROWSING, EDITING_TITLE, EDITING_DESCRIPTION, CONFIRMING_EXIT, EXITED]
    for screen, event in itertools.product(screens, Event):
        if (screen, event) in TRANSITIONS:
            continue
        assert not can_transition(screen, event)
        with pytest.raises(IllegalTransition):
            transition(screen, event)


def test_exited_is_terminal() -> None:
    assert not any(can_transition(EXITED, e) for e in Event)


def test_screen_str() -> None:
    assert str(BROWSING) == "browsing"
    assert str(EDITING_TITLE) == "editing(title)"
