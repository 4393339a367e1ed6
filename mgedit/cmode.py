"""Indentation for C source in the KNF style."""

from __future__ import annotations

from dataclasses import dataclass

from mgedit.buffers import BufferFlag, Editor, WindowFlag
from mgedit.charinfo import is_ctrl

_SPACE = " \t\n\v\f\r"

_PAIRS = {'"': '"', "'": "'", "(": ")", "[": "]", "{": "}"}


@dataclass
class CModeSettings:
    """Tunable indentation amounts for C mode."""

    strip_trailp: bool = True
    basic_indent: int = 8
    cont_indent: int = 4
    colon_indent: int = -8


_DEFAULTS = CModeSettings()


def getmatch(c: str, mc: str) -> bool:
    """True if ``mc`` closes the delimiter ``c``."""
    return c in _PAIRS and _PAIRS[c] == mc


def in_whitespace(text: str) -> bool:
    """True if ``text`` is non-empty and consists of whitespace only."""
    return bool(text) and all(ch in _SPACE for ch in text)


def isnonblank(text: str, omax: int) -> bool:
    """True if ``text[:omax]`` holds C code.

    Preprocessor lines and ``//`` comments count as blank.
    """
    nonblank = False
    slashp = False
    for ch in text[:omax]:
        if ch not in _SPACE:
            nonblank = True
            if ch == "#" or (slashp and ch == "/"):
                return False
            if not slashp and ch == "/":
                slashp = True
                continue
        slashp = False
    return nonblank


def _advance(col: int, ch: str, tabw: int) -> int:
    if ch == "\t":
        return (col // tabw + 1) * tabw
    code = ord(ch)
    if code < 256 and is_ctrl(code):
        return col + 2
    if 0x20 <= code < 0x7F:
        return col + 1
    return col + len(f"\\{code:o}")


def findcolpos(text: str, offset: int, tabw: int = 8) -> int:
    """Display column of ``offset`` in ``text``."""
    col = 0
    for ch in text[:offset]:
        col = _advance(col, ch, tabw)
    return col


def getindent(
    text: str, tabw: int = 8, settings: CModeSettings | None = None
) -> tuple[int, int]:
    """Indentation effects of the line ``text``.

    Returns ``(next_indent, current_indent)``: the indentation the line sets
    up for the lines after it, and the adjustment it asks for itself.
    """
    s = settings or _DEFAULTS
    lo = 0
    nicol = 0
    for ch in text:
        if ch not in _SPACE:
            break
        nicol = _advance(nicol, ch, tabw) if ch == "\t" else nicol + 1
        lo += 1
    if lo == len(text):
        nicol = 0

    curi = 0
    newind = 0
    stringp = escp = False
    lastc = ""
    nparen = obrace = cbrace = 0
    firstnwsp = colonp = questionp = slashp = astp = cppp = False
    cpos = -1

    for co in range(lo, len(text)):
        c = text[co]
        if not firstnwsp and c not in _SPACE:
            if c == "#":
                cppp = True
            firstnwsp = True
        if c == "\\":
            escp = not escp
        elif stringp:
            if not escp and c in "\"'" and getmatch(c, lastc):
                stringp = False
        elif c in "\"'":
            stringp = True
            lastc = c
        elif c == "(":
            nparen += 1
        elif c == ")":
            nparen -= 1
        elif c == "{":
            obrace += 1
            firstnwsp = False
        elif c == "}":
            cbrace += 1
        elif c == "?":
            questionp = True
        elif c == ":":
            if not questionp:
                colonp = True
        elif c == "/":
            if firstnwsp:
                if astp:
                    cpos = -1
                else:
                    slashp = True
        elif c == "*":
            if slashp:
                cpos = co
            else:
                astp = True
        elif firstnwsp:
            firstnwsp = False

        if c != "\\":
            escp = False
        if c != "*":
            astp = False
        if c != "/":
            slashp = False

    if colonp:
        curi += s.colon_indent
        newind -= s.colon_indent
    curi -= cbrace * s.basic_indent
    newind += obrace * s.basic_indent
    if nparen < 0:
        newind -= s.cont_indent
    elif nparen > 0:
        newind += s.cont_indent
    curi += nicol

    if cppp:
        newind = nicol
        curi = 0
    else:
        newind += nicol

    if cpos != -1:
        newind = findcolpos(text, cpos, tabw)
    return newind, curi


def findnonblank(lines: list[str], index: int) -> int | None:
    """Index of the nearest line above ``index`` that holds C code.

    Whole ``/* */`` comments are skipped.  Returns None when the search
    reaches the top of the buffer without finding one.
    """
    lp = index
    nonblankp = False
    commentp = False
    while lp > 0 and (commentp or not nonblankp):
        lp -= 1
        text = lines[lp]
        slashp = astp = False
        nonblankp = isnonblank(text, len(text))
        for lo, c in reversed(list(enumerate(text))):
            if c in _SPACE:
                continue
            if commentp:
                if c == "*":
                    astp = True
                elif astp and c == "/":
                    commentp = False
                    nonblankp = isnonblank(text, lo)
            elif c == "/":
                slashp = True
            elif slashp and c == "*":
                commentp = True
    if lp == 0 and not nonblankp:
        return None
    return lp


def _writable(editor: Editor) -> bool:
    if editor.curbp.flags & BufferFlag.READONLY:
        editor.beep_msg("Buffer is read-only")
        return False
    return True


def _dot_line(editor: Editor) -> int:
    wp, bp = editor.curwp, editor.curbp
    if not bp.lines:
        bp.lines.append("")
    wp.dotp = min(max(wp.dotp, 0), len(bp.lines) - 1)
    wp.doto = min(wp.doto, len(bp.lines[wp.dotp]))
    return wp.dotp


def _store(editor: Editor, index: int, text: str) -> None:
    bp = editor.curbp
    if bp.lines[index] != text:
        bp.lines[index] = text
        bp.flags |= BufferFlag.CHANGED
        editor.curwp.rflag |= WindowFlag.EDIT


def _deltrailwhite(editor: Editor) -> None:
    idx = _dot_line(editor)
    text = editor.curbp.lines[idx].rstrip(_SPACE)
    _store(editor, idx, text)
    editor.curwp.doto = min(editor.curwp.doto, len(text))


def _delleadwhite(editor: Editor) -> None:
    idx = _dot_line(editor)
    text = editor.curbp.lines[idx]
    stripped = text.lstrip(_SPACE)
    removed = len(text) - len(stripped)
    _store(editor, idx, stripped)
    editor.curwp.doto = max(editor.curwp.doto - removed, 0)


def _indent(editor: Editor, cols: int) -> bool:
    """Replace the leading whitespace of the dot line by ``cols`` columns."""
    _delleadwhite(editor)
    idx = editor.curwp.dotp
    tabw = editor.curbp.tabw
    lead = "\t" * (cols // tabw) + " " * (cols % tabw)
    _store(editor, idx, lead + editor.curbp.lines[idx])
    editor.curwp.doto += len(lead)
    return True


def _insert(editor: Editor, chars: str) -> None:
    idx = _dot_line(editor)
    wp = editor.curwp
    text = editor.curbp.lines[idx]
    _store(editor, idx, text[: wp.doto] + chars + text[wp.doto :])
    wp.doto += len(chars)


def _newline(editor: Editor) -> None:
    idx = _dot_line(editor)
    wp, bp = editor.curwp, editor.curbp
    text = bp.lines[idx]
    bp.lines[idx : idx + 1] = [text[: wp.doto], text[wp.doto :]]
    bp.nlines += 1
    bp.flags |= BufferFlag.CHANGED
    wp.dotp = idx + 1
    wp.doto = 0
    wp.dotline += 1
    wp.rflag |= WindowFlag.EDIT | WindowFlag.MOVE


def cc_indent(editor: Editor, n: int = 1, settings: CModeSettings | None = None) -> bool:
    """Indent the dot line according to the code above it."""
    s = settings or _DEFAULTS
    if n < 0 or not _writable(editor):
        return False
    if s.strip_trailp:
        _deltrailwhite(editor)
    idx = _dot_line(editor)
    bp = editor.curbp
    above = findnonblank(bp.lines, idx)
    pi, _ = getindent(bp.lines[above] if above is not None else "", bp.tabw, s)
    _delleadwhite(editor)
    _, ci = getindent(bp.lines[idx], bp.tabw, s)
    return _indent(editor, max(pi + ci, 0))


def cc_tab(editor: Editor, n: int = 1, settings: CModeSettings | None = None) -> bool:
    """Insert a tab in leading whitespace; otherwise reindent the line."""
    idx = _dot_line(editor)
    text = editor.curbp.lines[idx]
    if not text or in_whitespace(text):
        if n < 0 or not _writable(editor):
            return False
        _insert(editor, "\t" * n)
        return True
    return cc_indent(editor, 1, settings)


def cc_lfindent(
    editor: Editor, n: int = 1, settings: CModeSettings | None = None
) -> bool:
    """Break the line at dot and indent the new line."""
    s = settings or _DEFAULTS
    if n < 0 or not _writable(editor):
        return False
    if s.strip_trailp:
        _deltrailwhite(editor)
    _newline(editor)
    return cc_indent(editor, n, s)


def cc_char(
    editor: Editor, n: int, char: str, settings: CModeSettings | None = None
) -> bool:
    """Insert ``char`` ``n`` times, then reindent the line."""
    if n < 0 or not _writable(editor):
        return False
    _insert(editor, char * n)
    return cc_indent(editor, n, settings)