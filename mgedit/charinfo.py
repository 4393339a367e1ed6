"""Character classes for the 256-character set and key naming."""

from __future__ import annotations

import enum
from collections.abc import Mapping


class CharClass(enum.IntFlag):
    """Classification bits for a character."""

    NONE = 0
    WORD = 0x01
    UPPER = 0x02
    LOWER = 0x04
    CTRL = 0x08
    PUNCT = 0x10
    DIGIT = 0x20


def _build_table() -> list[CharClass]:
    table = [CharClass.NONE] * 256
    for code in range(0x20):
        table[code] = CharClass.CTRL
    table[0x7F] = CharClass.CTRL
    for ch in "!.?":
        table[ord(ch)] = CharClass.PUNCT
    for ch in "$%'":
        table[ord(ch)] = CharClass.WORD
    for code in range(ord("0"), ord("9") + 1):
        table[code] = CharClass.DIGIT | CharClass.WORD
    for code in range(ord("A"), ord("Z") + 1):
        table[code] = CharClass.UPPER | CharClass.WORD
    for code in range(ord("a"), ord("z") + 1):
        table[code] = CharClass.LOWER | CharClass.WORD
    for code in range(0xC0, 0xDE):
        if code != 0xD0:
            table[code] = CharClass.UPPER | CharClass.WORD
    table[0xDF] = CharClass.WORD
    for code in range(0xE0, 0xFE):
        if code != 0xF0:
            table[code] = CharClass.LOWER | CharClass.WORD
    return table


# Mutable: the word status of some characters is changed at run time.
_TABLE = _build_table()

_NAMED_KEYS = {
    0x00: "C-SPC",
    0x09: "TAB",
    0x0D: "RET",
    0x1B: "ESC",
    0x20: "SPC",
    0x7F: "DEL",
}


def _code(c: int | str) -> int:
    value = ord(c) if isinstance(c, str) else c
    return value & 0xFF


def char_class(c: int | str) -> CharClass:
    """Return the classification bits of ``c``."""
    return _TABLE[_code(c)]


def is_word(c: int | str) -> bool:
    """True if ``c`` is part of a word."""
    return bool(char_class(c) & CharClass.WORD)


def is_upper(c: int | str) -> bool:
    """True if ``c`` is an upper-case letter."""
    return bool(char_class(c) & CharClass.UPPER)


def is_lower(c: int | str) -> bool:
    """True if ``c`` is a lower-case letter."""
    return bool(char_class(c) & CharClass.LOWER)


def is_digit(c: int | str) -> bool:
    """True if ``c`` is a decimal digit."""
    return bool(char_class(c) & CharClass.DIGIT)


def is_ctrl(c: int | str) -> bool:
    """True if ``c`` is a control character."""
    return bool(char_class(c) & CharClass.CTRL)


def is_punct(c: int | str) -> bool:
    """True if ``c`` ends a sentence."""
    return bool(char_class(c) & CharClass.PUNCT)


def set_word_char(c: int | str, enabled: bool) -> None:
    """Make ``c`` count, or stop counting, as a word character."""
    code = _code(c)
    if enabled:
        _TABLE[code] |= CharClass.WORD
    else:
        _TABLE[code] &= ~CharClass.WORD


def getkeyname(key: int | str, keystrings: Mapping[int, str | None] | None = None) -> str:
    """Return the printable name of keystroke ``key``.

    ``keystrings`` maps codes of function keys to their names.
    """
    k = ord(key) if isinstance(key, str) else key
    if k < 0:
        k &= 0xFF
    if k in _NAMED_KEYS:
        return _NAMED_KEYS[k]
    if keystrings is not None and keystrings.get(k):
        return keystrings[k]
    if k > 0x7F:
        return f"0{(k >> 6) & 7}{(k >> 3) & 7}{k & 7}"
    if k < 0x20:
        c = k ^ 0x40
        if is_upper(c):
            c += ord("a") - ord("A")
        return "C-" + chr(c)
    return chr(k)