"""Logging configuration.

The curses screen owns the terminal while the app runs, so records go to a
file only. Call setup_logging() once, before the first log call.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Union

LOG_FILE = Path('todo.log')


def setup_logging(log_file: Union[str, Path] = LOG_FILE, level: int = logging.DEBUG) -> None:
    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
