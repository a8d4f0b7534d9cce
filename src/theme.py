"""Color & style helpers for the curses screen.

Decisions:
- Palette is given as hex; mapped onto the 256-colour cube when the terminal
  has it, otherwise onto the nearest of the 8 basic curses colours.
- Honors NO_COLOR for complete disable (attributes such as bold remain).
- Supports palette overrides via environment or project .env file.
- Category colours are stored by name ("White", "Red", ...); unknown names
  fall back to the terminal's default foreground.
"""
from __future__ import annotations
import curses
import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)

# Default palette
HEX_PRIMARY_DEFAULT = '#476EAE'
HEX_PENDING_DEFAULT = '#48B3AF'
HEX_DONE_DEFAULT = '#A7E399'
HEX_ACCENT_DEFAULT = '#F6FF99'

PALETTE_KEYS = ('TODO_PRIMARY', 'TODO_PENDING', 'TODO_DONE', 'TODO_ACCENT')

BASIC_COLORS: Dict[str, int] = {
    'black': curses.COLOR_BLACK,
    'red': curses.COLOR_RED,
    'green': curses.COLOR_GREEN,
    'yellow': curses.COLOR_YELLOW,
    'blue': curses.COLOR_BLUE,
    'magenta': curses.COLOR_MAGENTA,
    'cyan': curses.COLOR_CYAN,
    'white': curses.COLOR_WHITE,
}

_BASIC_RGB = {
    curses.COLOR_BLACK: (0, 0, 0),
    curses.COLOR_RED: (205, 0, 0),
    curses.COLOR_GREEN: (0, 205, 0),
    curses.COLOR_YELLOW: (205, 205, 0),
    curses.COLOR_BLUE: (0, 0, 238),
    curses.COLOR_MAGENTA: (205, 0, 205),
    curses.COLOR_CYAN: (0, 205, 205),
    curses.COLOR_WHITE: (229, 229, 229),
}


def _valid_hex(value: str) -> Optional[str]:
    h = value.strip().lstrip('#')
    if len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h):
        return '#' + h
    return None


def load_env_overrides(env_path: Path) -> Dict[str, str]:
    """Read palette overrides from a .env file.

    Malformed lines are ignored; an unreadable file is logged and skipped.
    """
    overrides: Dict[str, str] = {}
    if not env_path.exists():
        return overrides
    try:
        text = env_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Ignoring unreadable %s: %s", env_path, e)
        return overrides
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        if k in PALETTE_KEYS:
            h = _valid_hex(v)
            if h:
                overrides[k] = h
    return overrides


def resolve_palette(environ: Mapping[str, str], file_overrides: Mapping[str, str]) -> Dict[str, str]:
    """Final hex values (priority: real env var > .env override > default)."""
    defaults = {
        'TODO_PRIMARY': HEX_PRIMARY_DEFAULT,
        'TODO_PENDING': HEX_PENDING_DEFAULT,
        'TODO_DONE': HEX_DONE_DEFAULT,
        'TODO_ACCENT': HEX_ACCENT_DEFAULT,
    }
    palette: Dict[str, str] = {}
    for key in PALETTE_KEYS:
        from_env = _valid_hex(environ.get(key, ''))
        palette[key] = from_env or file_overrides.get(key) or defaults[key]
    return palette


def hex_to_rgb(hex_code: str) -> tuple[int, int, int]:
    """Convert a hex color code to an RGB tuple."""
    h = hex_code.lstrip('#')
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def rgb_to_256(r: int, g: int, b: int) -> int:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    return 16 + 36 * to_6(r) + 6 * to_6(g) + to_6(b)


def rgb_to_basic(r: int, g: int, b: int) -> int:
    """Nearest of the 8 basic curses colours."""
    return min(_BASIC_RGB, key=lambda c: sum((x - y) ** 2 for x, y in zip(_BASIC_RGB[c], (r, g, b))))


class Theme:
    """Style name -> curses attribute table. Built after curses is initialised."""

    def __init__(self, palette: Mapping[str, str], enable_color: bool = True):
        self.palette = dict(palette)
        self.enable_color = enable_color
        self._pairs: Dict[int, int] = {}
        self._attrs: Dict[str, int] = {}

    def setup(self) -> None:
        if self.enable_color and curses.has_colors():
            curses.start_color()
            curses.use_default_colors()
        else:
            self.enable_color = False
        primary = self._hex_pair(self.palette['TODO_PRIMARY'])
        accent = self._hex_pair(self.palette['TODO_ACCENT'])
        self._attrs = {
            'normal': curses.A_NORMAL,
            'header': primary | curses.A_BOLD,
            'selected': curses.A_REVERSE | curses.A_BOLD,
            'pending': self._hex_pair(self.palette['TODO_PENDING']),
            'done': self._hex_pair(self.palette['TODO_DONE']),
            'unknown': curses.A_DIM,
            'empty': primary | curses.A_DIM,
            'dim': curses.A_DIM,
            'status': accent,
            'prompt': accent | curses.A_BOLD,
            'field-active': curses.A_BOLD,
        }

    def attr(self, style: str) -> int:
        if style.startswith('category:'):
            name = style.split(':', 1)[1].lower()
            color = BASIC_COLORS.get(name)
            return self._pair(color) if color is not None else curses.A_NORMAL
        return self._attrs.get(style, curses.A_NORMAL)

    def _hex_pair(self, hex_code: str) -> int:
        if not self.enable_color:
            return curses.A_NORMAL
        rgb = hex_to_rgb(hex_code)
        color = rgb_to_256(*rgb) if curses.COLORS >= 256 else rgb_to_basic(*rgb)
        return self._pair(color)

    def _pair(self, color: int) -> int:
        if not self.enable_color:
            return curses.A_NORMAL
        if color not in self._pairs:
            number = len(self._pairs) + 1
            if number >= curses.COLOR_PAIRS:
                return curses.A_NORMAL
            curses.init_pair(number, color, -1)
            self._pairs[color] = number
        return curses.color_pair(self._pairs[color])


def default_theme() -> Theme:
    env_path = Path(__file__).resolve().parent.parent / '.env'
    palette = resolve_palette(os.environ, load_env_overrides(env_path))
    return Theme(palette, enable_color=os.environ.get('NO_COLOR') is None)
