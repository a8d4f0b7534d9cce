"""Curses event loop for the to-do list.

Each cycle redraws the screen from a fresh App.view() snapshot and then
blocks on the next key; the loop ends once the app's exited flag is set.
"""
import curses
import logging
from typing import Optional, Union

from app import (
    App, KEY_BACKSPACE, KEY_DC, KEY_DOWN, KEY_END, KEY_ENTER, KEY_ESC, KEY_HOME,
    KEY_LEFT, KEY_RIGHT, KEY_TAB, KEY_UP,
)
from storage import StorageError
from theme import Theme, default_theme
from view import render_lines

logger = logging.getLogger(__name__)

# --- raw input normalisation ---
SPECIAL_CHARS = {
    '\n': KEY_ENTER,
    '\r': KEY_ENTER,
    '\t': KEY_TAB,
    '\x1b': KEY_ESC,
    '\x7f': KEY_BACKSPACE,
    '\b': KEY_BACKSPACE,
}

SPECIAL_CODES = {
    curses.KEY_UP: KEY_UP,
    curses.KEY_DOWN: KEY_DOWN,
    curses.KEY_LEFT: KEY_LEFT,
    curses.KEY_RIGHT: KEY_RIGHT,
    curses.KEY_HOME: KEY_HOME,
    curses.KEY_END: KEY_END,
    curses.KEY_ENTER: KEY_ENTER,
    curses.KEY_BACKSPACE: KEY_BACKSPACE,
    curses.KEY_DC: KEY_DC,
}


def normalize_key(raw: Union[str, int]) -> Optional[str]:
    """Map a get_wch() result to a dispatcher key; None for keys we ignore."""
    if isinstance(raw, int):
        return SPECIAL_CODES.get(raw)
    if raw in SPECIAL_CHARS:
        return SPECIAL_CHARS[raw]
    if len(raw) == 1 and raw.isprintable():
        return raw
    return None


class CLI:
    def __init__(self, app: App, theme: Optional[Theme] = None):
        self.app: App = app
        self.theme: Theme = theme or default_theme()

    def run(self, stdscr) -> None:
        """Main loop; intended to be called through curses.wrapper."""
        curses.curs_set(0)
        stdscr.keypad(True)
        curses.set_escdelay(25)
        self.theme.setup()
        logger.info("UI started with %s", self.app.tasks)
        while not self.app.exited:
            self.draw(stdscr)
            try:
                raw = stdscr.get_wch()
            except curses.error:
                continue
            if raw == curses.KEY_RESIZE:
                continue
            key = normalize_key(raw)
            if key is None:
                continue
            try:
                self.app.handle_key(key)
            except StorageError as e:
                logger.exception("Storage operation failed")
                self.app.status = f'Storage error: {e}'
        logger.info("UI exited with %s", self.app.tasks)

    def draw(self, stdscr) -> None:
        height, width = stdscr.getmaxyx()
        stdscr.erase()
        # the bottom-right cell cannot be written without curses raising
        for y, row in enumerate(render_lines(self.app.view(), width - 1, height)):
            x = 0
            for text, style in row:
                if text and x < width - 1:
                    stdscr.addnstr(y, x, text, max(width - 1 - x, 0), self.theme.attr(style))
                x += len(text)
        stdscr.refresh()
