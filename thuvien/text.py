"""Name normalisation and keyboard-driven field input."""

from __future__ import annotations

from typing import Callable, Iterable, Optional

ESC = "\x1b"
ENTER = "\r"
BACKSPACE = "\b"
ERASE_ECHO = "\b \b"

Echo = Optional[Callable[[str], None]]


class InputCancelled(Exception):
    """Raised when the user presses ESC while entering a field."""


def normalize_name(s: str) -> str:
    """Trim spaces, lower-case everything and capitalise each word."""
    s = s.strip(" ").lower()
    out = []
    capitalise = True
    for ch in s:
        if ch.isspace():
            capitalise = True
            out.append(ch)
        elif capitalise:
            out.append(ch.upper())
            capitalise = False
        else:
            out.append(ch)
    return "".join(out)


def is_valid_gender(s: str) -> bool:
    """Accept only 'nam' or 'nu', in any letter case."""
    return s.lower() in ("nam", "nu")


def _is_ascii_letter(key: str) -> bool:
    return len(key) == 1 and key.isascii() and key.isalpha()


def _is_ascii_digit(key: str) -> bool:
    return len(key) == 1 and key.isascii() and key.isdigit()


def _emit(echo: Echo, text: str) -> None:
    if echo is not None:
        echo(text)


def _read_field(
    keys: Iterable[str], accept: Callable[[list[str], str], bool], echo: Echo
) -> str:
    chars: list[str] = []
    for key in keys:
        if key == ESC:
            raise InputCancelled()
        if key == ENTER:
            return "".join(chars)
        if key == BACKSPACE:
            if chars:
                chars.pop()
                _emit(echo, ERASE_ECHO)
        elif accept(chars, key):
            chars.append(key)
            _emit(echo, key)
    raise EOFError("input ended before ENTER")


def read_name(
    keys: Iterable[str], max_len: int, allow_space: bool = False, echo: Echo = None
) -> str:
    """Read letters (and single spaces if allowed) until ENTER; return the normalised name."""

    def accept(chars: list[str], key: str) -> bool:
        if len(chars) >= max_len:
            return False
        if _is_ascii_letter(key):
            return True
        if key == " " and allow_space:
            return bool(chars) and chars[-1] != " "
        return False

    return normalize_name(_read_field(keys, accept, echo))


def read_number(keys: Iterable[str], max_len: int, echo: Echo = None) -> str:
    """Read digits until ENTER and return them as a string."""

    def accept(chars: list[str], key: str) -> bool:
        return len(chars) < max_len and _is_ascii_digit(key)

    return _read_field(keys, accept, echo)