# tests/test_theme.py

from __future__ import annotations

import curses
from pathlib import Path

from theme import (
    HEX_DONE_DEFAULT,
    HEX_PRIMARY_DEFAULT,
    hex_to_rgb,
    load_env_overrides,
    resolve_palette,
    rgb_to_256,
    rgb_to_basic,
)


def test_hex_to_rgb() -> None:
    assert hex_to_rgb("#476EAE") == (0x47, 0x6E, 0xAE)
    assert hex_to_rgb("ffffff") == (255, 255, 255)


def test_rgb_to_256_cube_corners() -> None:
    assert rgb_to_256(0, 0, 0) == 16
    assert rgb_to_256(255, 255, 255) == 231
    assert rgb_to_256(255, 0, 0) == 196


def test_rgb_to_basic_nearest() -> None:
    assert rgb_to_basic(250, 10, 10) == curses.COLOR_RED
    assert rgb_to_basic(10, 10, 10) == curses.COLOR_BLACK
    assert rgb_to_basic(0, 0, 200) == curses.COLOR_BLUE


def test_env_file_overrides(tmp_path: Path) -> None:
    env = tmp_path / ".env"
    env.write_text(
        "# palette\n"
        "TODO_PRIMARY=#112233\n"
        "TODO_DONE=not-a-colour\n"
        "UNRELATED=#445566\n"
        "garbage line\n"
    )
    assert load_env_overrides(env) == {"TODO_PRIMARY": "#112233"}
    assert load_env_overrides(tmp_path / "missing.env") == {}


def test_palette_priority() -> None:
    palette = resolve_palette(
        {"TODO_PRIMARY": "#aabbcc", "TODO_ACCENT": "bogus"},
        {"TODO_PRIMARY": "#112233", "TODO_ACCENT": "#010203"},
    )
    assert palette["TODO_PRIMARY"] == "#aabbcc"
    assert palette["TODO_ACCENT"] == "#010203"
    assert palette["TODO_DONE"] == HEX_DONE_DEFAULT
    assert resolve_palette({}, {})["TODO_PRIMARY"] == HEX_PRIMARY_DEFAULT


def test_unreadable_env_file_is_ignored(tmp_path: Path) -> None:
    env = tmp_path / ".env"
    env.write_bytes(b"TODO_PRIMARY=#ffffff\n\xff\xfe junk\n")
    assert load_env_overrides(env) == {}


def test_env_path_that_is_a_directory_is_ignored(tmp_path: Path) -> None:
    env = tmp_path / ".env"
    env.mkdir()
    assert load_env_overrides(env) == {}
