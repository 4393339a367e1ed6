"""Read logical lines with continuations, comments and escapes."""

from __future__ import annotations

import enum
from collections.abc import Iterator
from typing import TextIO

DEFAULT_DELIMS = "\\\\#"


class ParseFlags(enum.IntFlag):
    """Which escaped characters lose their escape in the returned line."""

    NONE = 0
    UNESCESC = 0x01
    UNESCCONT = 0x02
    UNESCCOMM = 0x04
    UNESCREST = 0x08
    UNESCALL = 0x0F


def _delim(ch: str) -> str | None:
    return None if ch in ("", "\0") else ch


def _split_delims(delims: str | None) -> tuple[str | None, str | None, str | None]:
    if delims is None:
        delims = DEFAULT_DELIMS
    if len(delims) != 3:
        raise ValueError("delims must hold exactly three characters")
    return _delim(delims[0]), _delim(delims[1]), _delim(delims[2])


def _isescaped(text: str, pos: int, esc: str | None) -> bool:
    """True if the character at ``pos`` follows an odd run of escapes."""
    if esc is None:
        return False
    count = 0
    i = pos - 1
    while i >= 0 and text[i] == esc:
        count += 1
        i -= 1
    return count % 2 == 1


def _unescape(
    line: str,
    esc: str,
    con: str | None,
    com: str | None,
    flags: ParseFlags,
) -> str:
    out: list[str] = []
    i = 0
    while i < len(line):
        ch = line[i]
        if ch != esc:
            out.append(ch)
            i += 1
            continue
        if i + 1 >= len(line):
            break
        nxt = line[i + 1]
        skip = False
        if nxt == com:
            skip = skip or bool(flags & ParseFlags.UNESCCOMM)
        if nxt == con:
            skip = skip or bool(flags & ParseFlags.UNESCCONT)
        if nxt == esc:
            skip = skip or bool(flags & ParseFlags.UNESCESC)
        if nxt not in (com, con, esc):
            skip = bool(flags & ParseFlags.UNESCREST)
        if not skip:
            out.append(esc)
        out.append(nxt)
        i += 2
    return "".join(out)


def fparseln(
    stream: TextIO,
    delims: str | None = None,
    flags: ParseFlags | int = ParseFlags.NONE,
) -> tuple[str | None, int]:
    """Read one logical line from ``stream``.

    ``delims`` holds the escape, continuation and comment characters, in
    that order; a NUL disables one.  Returns the line (``None`` at end of
    input) and the number of physical line reads it took.
    """
    esc, con, com = _split_delims(delims)
    flags = ParseFlags(flags)
    buf: str | None = None
    reads = 0
    more = True
    while more:
        more = False
        reads += 1
        raw = stream.readline()
        if not raw:
            break
        end = len(raw)

        if end and com is not None:
            for pos, ch in enumerate(raw):
                if ch == com and not _isescaped(raw, pos, esc):
                    end = pos
                    more = end == 0 and buf is None
                    break

        if end and raw[end - 1] == "\n":
            end -= 1

        if end and con is not None:
            if raw[end - 1] == con and not _isescaped(raw, end - 1, esc):
                end -= 1
                more = True

        if end == 0 and (more or buf is not None):
            continue

        buf = (buf or "") + raw[:end]

    if (
        flags & ParseFlags.UNESCALL
        and esc is not None
        and buf is not None
        and esc in buf
    ):
        buf = _unescape(buf, esc, con, com, flags)

    return buf, reads


def parse_lines(
    stream: TextIO,
    delims: str | None = None,
    flags: ParseFlags | int = ParseFlags.NONE,
) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, line)`` for each logical line in ``stream``.

    The line number is that of the last physical line the logical line used.
    """
    lineno = 0
    while True:
        line, reads = fparseln(stream, delims, flags)
        lineno += reads
        if line is None:
            return
        yield lineno, line