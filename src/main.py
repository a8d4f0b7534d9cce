"""Main entry point for the terminal to-do list.

Storage lives in todos.db in the working directory. curses.wrapper restores
the terminal before any unrecovered error propagates, and the process then
exits with status 1.
"""
import curses
import logging
import sys

from app import App
from cli import CLI
from logging_setup import setup_logging
from storage import Storage

logger = logging.getLogger(__name__)


def main() -> int:
    setup_logging()
    storage = None
    try:
        storage = Storage()
        app = App.load(storage)
        curses.wrapper(CLI(app).run)
    except KeyboardInterrupt:
        # edits not yet committed are lost; everything else is already stored
        logger.info("Interrupted")
        print("Interrupted. Goodbye.")
        return 0
    except Exception as e:
        logger.exception("Fatal error")
        print(f"todo: {e}", file=sys.stderr)
        return 1
    finally:
        if storage is not None:
            storage.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
