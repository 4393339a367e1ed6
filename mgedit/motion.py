"""Cursor motion, paging, mark handling and going to a line."""

from __future__ import annotations

from mgedit.buffers import ArgFlag, Buffer, Editor, WindowFlag
from mgedit.charinfo import is_ctrl
from mgedit.strutil import StrtonumError, strtonum

# Command flag: the last command was a vertical line motion.
CFCPCN = 0x0001

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1


def _head(bp: Buffer) -> int:
    return len(bp.lines)


def _forw(bp: Buffer, index: int) -> int:
    return (index + 1) % (len(bp.lines) + 1)


def _back(bp: Buffer, index: int) -> int:
    return (index - 1) % (len(bp.lines) + 1)


def _text(bp: Buffer, index: int) -> str:
    return bp.lines[index] if index < len(bp.lines) else ""


def _advance(col: int, ch: str, tabw: int) -> int:
    """Column after displaying ``ch`` starting at ``col``."""
    if ch == "\t":
        return (col // tabw + 1) * tabw
    code = ord(ch)
    if code < 256 and is_ctrl(code):
        return col + 2
    if 0x20 <= code < 0x7F:
        return col + 1
    return col + len(f"\\{code:o}")


def _colpos(text: str, offset: int, tabw: int) -> int:
    col = 0
    for ch in text[:offset]:
        col = _advance(col, ch, tabw)
    return col


def _beep_unless(editor: Editor, f: int, msg: str) -> None:
    if not f & ArgFlag.RAND:
        editor.beep_msg(msg)


def _fix_goal(editor: Editor) -> None:
    if not getattr(editor, "lastflag", 0) & CFCPCN:
        setgoal(editor)
    editor.thisflag = getattr(editor, "thisflag", 0) | CFCPCN


def gotobol(editor: Editor, f: int, n: int) -> bool:
    """Move to the beginning of the line."""
    if n != 0:
        editor.curwp.doto = 0
    return True


def backchar(editor: Editor, f: int, n: int) -> bool:
    """Move back ``n`` characters, crossing line boundaries."""
    if n < 0:
        return forwchar(editor, f, -n)
    wp, bp = editor.curwp, editor.curbp
    for _ in range(n):
        if wp.doto == 0:
            lp = _back(bp, wp.dotp)
            if lp == _head(bp):
                _beep_unless(editor, f, "Beginning of buffer")
                return False
            wp.dotp = lp
            wp.doto = len(_text(bp, lp))
            wp.rflag |= WindowFlag.MOVE
            wp.dotline -= 1
        else:
            wp.doto -= 1
    return True


def gotoeol(editor: Editor, f: int, n: int) -> bool:
    """Move to the end of the line."""
    if n != 0:
        wp = editor.curwp
        wp.doto = len(_text(editor.curbp, wp.dotp))
    return True


def forwchar(editor: Editor, f: int, n: int) -> bool:
    """Move forward ``n`` characters, crossing line boundaries."""
    if n < 0:
        return backchar(editor, f, -n)
    wp, bp = editor.curwp, editor.curbp
    for _ in range(n):
        if wp.doto == len(_text(bp, wp.dotp)):
            wp.dotp = _forw(bp, wp.dotp)
            if wp.dotp == _head(bp):
                wp.dotp = _back(bp, wp.dotp)
                _beep_unless(editor, f, "End of buffer")
                return False
            wp.doto = 0
            wp.dotline += 1
            wp.rflag |= WindowFlag.MOVE
        else:
            wp.doto += 1
    return True


def gotobob(editor: Editor, f: int, n: int) -> bool:
    """Go to the start of the buffer; an argument of 1-9 goes to n tenths."""
    wp, bp = editor.curwp, editor.curbp
    if wp.markp is None:
        setmark(editor, f, n)
    wp.dotp = _forw(bp, _head(bp))
    wp.doto = 0
    wp.rflag |= WindowFlag.FULL
    wp.dotline = 1
    if f & ArgFlag.OTHARG and n > 0:
        if n > 9:
            gotoeob(editor, 0, 0)
        else:
            forwline(editor, f, int(wp.bufp.nlines * n * 0.1 - 1))
    return True


def gotoeob(editor: Editor, f: int, n: int) -> bool:
    """Go to the end of the buffer; an argument of 1-9 backs up n tenths."""
    wp, bp = editor.curwp, editor.curbp
    if wp.markp is None:
        setmark(editor, f, n)
    wp.dotp = _back(bp, _head(bp))
    wp.doto = len(_text(bp, wp.dotp))
    wp.dotline = wp.bufp.nlines

    last = wp.dotp
    ln = wp.ntrows - 3
    if 3 <= ln < wp.bufp.nlines:
        for _ in range(ln):
            wp.dotp = _back(bp, wp.dotp)
        wp.linep = wp.dotp
        wp.dotp = last
    if f & ArgFlag.OTHARG and n > 0:
        if n > 9:
            gotobob(editor, 0, 0)
        else:
            backline(editor, f, int(wp.bufp.nlines * n * 0.1))
    wp.rflag |= WindowFlag.FULL
    return True


def forwline(editor: Editor, f: int, n: int) -> bool:
    """Move down ``n`` lines, keeping the goal column."""
    if n < 0:
        return backline(editor, f | ArgFlag.RAND, -n)
    wp, bp = editor.curwp, editor.curbp
    dlp = wp.dotp
    if dlp == _head(bp):
        _beep_unless(editor, f, "End of buffer")
        return True
    _fix_goal(editor)
    if n == 0:
        return True
    for _ in range(n):
        dlp = _forw(bp, dlp)
        if dlp == _head(bp):
            wp.dotp = _back(bp, dlp)
            wp.doto = len(_text(bp, wp.dotp))
            wp.rflag |= WindowFlag.MOVE
            _beep_unless(editor, f, "End of buffer")
            return True
        wp.dotline += 1
    wp.rflag |= WindowFlag.MOVE
    wp.dotp = dlp
    wp.doto = getgoal(editor, _text(bp, dlp))
    return True


def backline(editor: Editor, f: int, n: int) -> bool:
    """Move up ``n`` lines, keeping the goal column."""
    if n < 0:
        return forwline(editor, f | ArgFlag.RAND, -n)
    wp, bp = editor.curwp, editor.curbp
    _fix_goal(editor)
    dlp = wp.dotp
    if _back(bp, dlp) == _head(bp):
        _beep_unless(editor, f, "Beginning of buffer")
        return True
    while n > 0 and _back(bp, dlp) != _head(bp):
        n -= 1
        dlp = _back(bp, dlp)
        wp.dotline -= 1
    if n > 1:
        _beep_unless(editor, f, "Beginning of buffer")
    wp.dotp = dlp
    wp.doto = getgoal(editor, _text(bp, dlp))
    wp.rflag |= WindowFlag.MOVE
    return True


def setgoal(editor: Editor) -> None:
    """Remember the display column of dot as the goal column."""
    wp, bp = editor.curwp, editor.curbp
    editor.curgoal = _colpos(_text(bp, wp.dotp), wp.doto, bp.tabw)


def getgoal(editor: Editor, text: str) -> int:
    """Offset in ``text`` best matching the goal column."""
    goal = getattr(editor, "curgoal", 0)
    tabw = editor.curbp.tabw
    col = 0
    for index, ch in enumerate(text):
        col = _advance(col, ch, tabw)
        if col > goal:
            return index
    return len(text)


def _dot_in_window(editor: Editor, lp: int) -> bool:
    wp, bp = editor.curwp, editor.curbp
    for _ in range(wp.ntrows):
        if lp == _head(bp):
            return False
        if lp == wp.dotp:
            return True
        lp = _forw(bp, lp)
    return False


def forwpage(editor: Editor, f: int, n: int) -> bool:
    """Scroll forward by ``n`` lines or by a screenful."""
    wp, bp = editor.curwp, editor.curbp
    if not f & ArgFlag.ARG:
        n = wp.ntrows - 2
        if n <= 0:
            n = 1
    elif n < 0:
        return backpage(editor, f | ArgFlag.RAND, -n)

    lp = wp.linep
    for _ in range(n):
        lp = _forw(bp, lp)
        if lp == _head(bp):
            editor.beep_msg("End of buffer")
            return True
    wp.linep = lp
    wp.rflag |= WindowFlag.FULL

    if _dot_in_window(editor, lp):
        return True

    while wp.dotp != wp.linep:
        wp.dotp = _forw(bp, wp.dotp)
        wp.dotline += 1
    wp.doto = 0
    return True


def backpage(editor: Editor, f: int, n: int) -> bool:
    """Scroll backward by ``n`` lines or by a screenful."""
    wp, bp = editor.curwp, editor.curbp
    if not f & ArgFlag.ARG:
        n = wp.ntrows - 2
        if n <= 0:
            return backline(editor, f, 1)
    elif n < 0:
        return forwpage(editor, f | ArgFlag.RAND, -n)

    lp = old_top = wp.linep
    for _ in range(n):
        if _back(bp, lp) == _head(bp):
            break
        lp = _back(bp, lp)
    if lp == wp.linep:
        editor.beep_msg("Beginning of buffer")

    wp.linep = lp
    wp.rflag |= WindowFlag.FULL

    if _dot_in_window(editor, lp):
        return True

    target = _forw(bp, old_top)
    while wp.dotp != target:
        if wp.dotline <= wp.ntrows:
            break
        wp.dotp = _back(bp, wp.dotp)
        wp.dotline -= 1
    wp.doto = 0
    return True


def forw1page(editor: Editor, f: int, n: int) -> bool:
    """Scroll the display up by one line (or ``n``)."""
    if not f & ArgFlag.ARG:
        n = 1
        f = ArgFlag.UNIV
    forwpage(editor, f | ArgFlag.RAND, n)
    return True


def back1page(editor: Editor, f: int, n: int) -> bool:
    """Scroll the display down by one line (or ``n``)."""
    if not f & ArgFlag.ARG:
        n = 1
        f = ArgFlag.UNIV
    backpage(editor, f | ArgFlag.RAND, n)
    return True


def isetmark(editor: Editor) -> None:
    """Set the mark at dot without a message."""
    wp = editor.curwp
    wp.markp = wp.dotp
    wp.marko = wp.doto
    wp.markline = wp.dotline


def setmark(editor: Editor, f: int, n: int) -> bool:
    """Set the mark at dot."""
    isetmark(editor)
    editor.message("Mark set")
    return True


def clearmark(editor: Editor, f: int, n: int) -> bool:
    """Clear the mark; False if there was none."""
    wp = editor.curwp
    if wp.markp is None:
        return False
    wp.markp = None
    wp.marko = 0
    wp.markline = 0
    return True


def swapmark(editor: Editor, f: int, n: int) -> bool:
    """Exchange dot and mark."""
    wp = editor.curwp
    if wp.markp is None:
        return editor.beep_msg("No mark in this window")
    wp.dotp, wp.markp = wp.markp, wp.dotp
    wp.doto, wp.marko = wp.marko, wp.doto
    wp.dotline, wp.markline = wp.markline, wp.dotline
    wp.rflag |= WindowFlag.MOVE
    return True


def gotoline(editor: Editor, f: int, n: int, answer: str | None = None) -> bool:
    """Go to line ``n``, or to the line number in ``answer`` without an argument."""
    if not f & ArgFlag.ARG:
        if not answer:
            return False
        try:
            n = strtonum(answer, INT_MIN, INT_MAX)
        except StrtonumError as exc:
            return editor.beep_msg(f"Line number {exc.errstr}")
    return setlineno(editor, n)


def setlineno(editor: Editor, n: int) -> bool:
    """Move dot to line ``n``; negative numbers count from the end."""
    wp, bp = editor.curwp, editor.curbp
    head = _head(bp)
    if n >= 0:
        n = max(n, 1)
        wp.dotline = n
        clp = _forw(bp, head)
        for _ in range(n - 1):
            if _forw(bp, clp) == head:
                wp.dotline = wp.bufp.nlines
                break
            clp = _forw(bp, clp)
    else:
        wp.dotline = wp.bufp.nlines + n
        clp = _back(bp, head)
        while n < 0:
            if _back(bp, clp) == head:
                wp.dotline = 1
                break
            clp = _back(bp, clp)
            n += 1
    wp.dotp = clp
    wp.doto = 0
    wp.rflag |= WindowFlag.MOVE
    return True