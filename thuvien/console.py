"""Terminal drawing with ANSI escape sequences and single-key input."""

from __future__ import annotations

import os
import sys
import time
from typing import Optional, TextIO

KEY_UP = "UP"
KEY_DOWN = "DOWN"
KEY_LEFT = "LEFT"
KEY_RIGHT = "RIGHT"

_ANSI_ARROWS = {"A": KEY_UP, "B": KEY_DOWN, "C": KEY_RIGHT, "D": KEY_LEFT}
_WIN_ARROWS = {"H": KEY_UP, "P": KEY_DOWN, "K": KEY_LEFT, "M": KEY_RIGHT}


def _ansi_index(color: int) -> tuple[int, bool]:
    """Map a 4-bit console colour (blue=1, green=2, red=4, bright=8) to ANSI."""
    index = (1 if color & 4 else 0) | (2 if color & 2 else 0) | (4 if color & 1 else 0)
    return index, bool(color & 8)


class Console:
    """Cursor-addressed output to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def set_color(self, color: int) -> None:
        index, bright = _ansi_index(color)
        self.write(f"\x1b[{(90 if bright else 30) + index}m")

    def set_background(self, color: int) -> None:
        index, bright = _ansi_index(color)
        self.write(f"\x1b[{(100 if bright else 40) + index}m")

    def goto(self, x: int, y: int) -> None:
        """Move the cursor to zero-based column x, row y."""
        self.write(f"\x1b[{y + 1};{x + 1}H")

    def show_cursor(self, visible: bool) -> None:
        self.write("\x1b[?25h" if visible else "\x1b[?25l")

    def clear(self) -> None:
        self.write("\x1b[2J\x1b[H")

    def clear_to_eol(self) -> None:
        self.write("\x1b[K")

    def _box(self, x: int, y: int, text: str, length: int, chars: str) -> None:
        tl, horiz, tr, vert, bl, br = chars
        padding = " " * max(0, length - len(text))
        self.goto(x - 2, y - 1)
        self.write(tl + horiz * length + tr)
        self.goto(x - 2, y)
        self.write(vert + text + padding + vert)
        self.goto(x - 2, y + 1)
        self.write(bl + horiz * length + br)

    def box_single(self, x: int, y: int, text: str, length: int) -> None:
        self._box(x, y, text, length, "┌─┐│└┘")

    def box_double(self, x: int, y: int, text: str, length: int) -> None:
        self._box(x, y, text, length, "╔═╗║╚╝")

    def notify(self, message: str, delay: float = 2.0) -> None:
        """Show a message on the status line for `delay` seconds, then erase it."""
        self.write("\x1b7")
        self.goto(10, 24)
        self.write(message)
        time.sleep(delay)
        self.goto(10, 24)
        self.clear_to_eol()
        self.write("\x1b8")


def _read_key_windows() -> str:
    import msvcrt

    ch = msvcrt.getwch()
    if ch in ("\x00", "\xe0"):
        return _WIN_ARROWS.get(msvcrt.getwch(), "")
    return ch


def _read_key_posix() -> str:
    import select
    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ch = os.read(fd, 1).decode(errors="replace")
        if ch == "\x1b":
            ready, _, _ = select.select([fd], [], [], 0.05)
            if ready:
                seq = os.read(fd, 2).decode(errors="replace")
                if len(seq) == 2 and seq[0] in "[O" and seq[1] in _ANSI_ARROWS:
                    return _ANSI_ARROWS[seq[1]]
                return ""
            return ch
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)
    if ch == "\n":
        return "\r"
    if ch == "\x7f":
        return "\b"
    return ch


def read_key() -> str:
    """Block for one key press; arrows come back as KEY_UP/DOWN/LEFT/RIGHT."""
    if os.name == "nt":
        return _read_key_windows()
    return _read_key_posix()