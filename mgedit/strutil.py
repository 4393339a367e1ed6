"""Bounded string copying and range-checked integer parsing."""

from __future__ import annotations

import re

LLONG_MIN = -(2**63)
LLONG_MAX = 2**63 - 1

_NUMBER = re.compile(r"[ \t\n\v\f\r]*[+-]?[0-9]+\Z")


class StrtonumError(ValueError):
    """Raised when a string does not convert to an integer within range.

    ``errstr`` is one of ``"invalid"``, ``"too small"`` or ``"too large"``.
    """

    def __init__(self, errstr: str) -> None:
        super().__init__(errstr)
        self.errstr = errstr


def _check_size(size: int) -> None:
    if size < 0:
        raise ValueError("size must not be negative")


def strlcpy(src: str, size: int) -> tuple[str, int]:
    """Copy ``src`` into a buffer of ``size`` characters (terminator included).

    Returns the stored string and ``len(src)``; a returned length that is
    ``>= size`` means the copy was truncated.
    """
    _check_size(size)
    stored = src[: size - 1] if size > 0 else ""
    return stored, len(src)


def strlcat(dst: str, src: str, size: int) -> tuple[str, int]:
    """Append ``src`` to ``dst`` held in a buffer of ``size`` characters.

    Returns the stored string and the length the result would have had
    without truncation.  When ``dst`` already fills the buffer it is left
    untouched.
    """
    _check_size(size)
    dlen = min(len(dst), size)
    room = size - dlen
    if room == 0:
        return dst, dlen + len(src)
    return dst[:dlen] + src[: room - 1], dlen + len(src)


def strtonum(text: str, minval: int, maxval: int) -> int:
    """Convert decimal ``text`` to an integer in ``[minval, maxval]``.

    Leading whitespace and a sign are accepted; anything trailing is not.
    Raises :class:`StrtonumError` on failure.
    """
    if minval > maxval:
        raise StrtonumError("invalid")
    if not _NUMBER.match(text):
        raise StrtonumError("invalid")
    value = int(text.strip(" \t\n\v\f\r"))
    if value < LLONG_MIN or value < minval:
        raise StrtonumError("too small")
    if value > LLONG_MAX or value > maxval:
        raise StrtonumError("too large")
    return value