"""Dired commands that flag, delete, refresh and move between entries."""

from __future__ import annotations

import os

from mgedit import motion
from mgedit.buffers import ArgFlag, Buffer, BufferFlag, CommandError, Editor, WindowFlag
from mgedit.dired_listing import (
    DDELCHAR,
    createlist,
    d_makename,
    d_warpdot,
    dired_,
    findfname,
    redelete,
)


def _text(bp: Buffer, index: int) -> str:
    return bp.lines[index] if 0 <= index < len(bp.lines) else ""


def _warp(editor: Editor) -> bool:
    wp = editor.curwp
    off = d_warpdot(_text(editor.curbp, wp.dotp))
    wp.doto = off or 0
    return off is not None


def _set_first(bp: Buffer, index: int, ch: str) -> None:
    text = bp.lines[index]
    bp.lines[index] = ch + text[1:]


def d_del(editor: Editor, n: int = 1) -> bool:
    """Flag ``n`` entries for deletion, moving down after each."""
    if n < 0:
        return False
    wp, bp = editor.curwp, editor.curbp
    for _ in range(n):
        if d_warpdot(_text(bp, wp.dotp)) is not None:
            _set_first(bp, wp.dotp, DDELCHAR)
            bp.flags |= BufferFlag.DIREDDEL
        if wp.dotp + 1 < len(bp.lines):
            wp.dotp += 1
            wp.dotline += 1
    wp.rflag |= WindowFlag.EDIT | WindowFlag.MOVE
    return _warp(editor)


def d_undel(editor: Editor, n: int = 1) -> bool:
    """Remove the flag from ``n`` entries, moving down after each."""
    if n < 0:
        return d_undelbak(editor, -n)
    wp, bp = editor.curwp, editor.curbp
    for _ in range(n):
        if _text(bp, wp.dotp):
            _set_first(bp, wp.dotp, " ")
        if wp.dotp + 1 < len(bp.lines):
            wp.dotp += 1
            wp.dotline += 1
    wp.rflag |= WindowFlag.EDIT | WindowFlag.MOVE
    return _warp(editor)


def d_undelbak(editor: Editor, n: int = 1) -> bool:
    """Move up and remove the flag, ``n`` times."""
    if n < 0:
        return d_undel(editor, -n)
    wp, bp = editor.curwp, editor.curbp
    for _ in range(n):
        if wp.dotp > 0:
            wp.dotp -= 1
            wp.dotline -= 1
        if _text(bp, wp.dotp):
            _set_first(bp, wp.dotp, " ")
    wp.rflag |= WindowFlag.EDIT | WindowFlag.MOVE
    return _warp(editor)


def d_expunge(editor: Editor) -> bool:
    """Delete every flagged file and directory and drop their lines."""
    wp, bp = editor.curwp, editor.curbp
    tmp = wp.dotline
    counter = 0
    index = 0
    while index < len(bp.lines):
        counter += 1
        text = bp.lines[index]
        if not text.startswith(DDELCHAR):
            index += 1
            continue
        try:
            path, isdir = d_makename(bp, text)
        except CommandError:
            return editor.beep_msg("Bad line in dired buffer")
        name = os.path.basename(path.rstrip("/"))
        try:
            if isdir:
                os.rmdir(path)
            else:
                os.unlink(path)
        except OSError:
            if isdir:
                return editor.beep_msg(f"Could not delete directory '{name}'")
            return editor.beep_msg(f"Could not delete '{name}'")
        del bp.lines[index]
        for other in editor.windows:
            if other.bufp is bp:
                if other.dotp > index:
                    other.dotp -= 1
                if other.linep > index:
                    other.linep -= 1
        bp.nlines -= 1
        if tmp > counter:
            tmp -= 1
        wp.rflag |= WindowFlag.FULL
    wp.dotline = tmp
    _warp(editor)
    bp.flags &= ~BufferFlag.DIREDDEL
    return True


def refreshbuffer(editor: Editor, bp: Buffer) -> Buffer:
    """List the directory of ``bp`` afresh, keeping flags and the dot line."""
    dname = bp.fname
    dotline = editor.curwp.dotline
    names = createlist(bp) if bp.flags & BufferFlag.DIREDDEL else []

    editor.killbuffer(bp)
    new = dired_(editor, dname)
    if names:
        redelete(new, names)

    if dotline > new.nlines:
        dotline = new.nlines - 1
    line = max(dotline, 1)
    new.dotp = (line - 1) % (len(new.lines) + 1)
    new.dotline = line
    off = d_warpdot(_text(new, new.dotp))
    new.doto = off or 0
    editor.curbp = new
    return new


def d_refreshbuffer(editor: Editor) -> bool:
    """Refresh the current dired buffer and show it."""
    bp = refreshbuffer(editor, editor.curbp)
    return editor.showbuffer(bp, editor.curwp, WindowFlag.FULL | WindowFlag.MODE)


def d_forwline(editor: Editor, f: int, n: int) -> bool:
    """Move down ``n`` entries and onto the file name."""
    motion.forwline(editor, f | ArgFlag.RAND, n)
    return _warp(editor)


def d_backline(editor: Editor, f: int, n: int) -> bool:
    """Move up ``n`` entries and onto the file name."""
    motion.backline(editor, f | ArgFlag.RAND, n)
    return _warp(editor)


def d_forwpage(editor: Editor, f: int, n: int) -> bool:
    """Scroll forward and put dot on the file name."""
    motion.forwpage(editor, f | ArgFlag.RAND, n)
    return _warp(editor)


def d_backpage(editor: Editor, f: int, n: int) -> bool:
    """Scroll backward and put dot on the file name."""
    motion.backpage(editor, f | ArgFlag.RAND, n)
    return _warp(editor)


def gotofile(editor: Editor, path: str) -> bool:
    """Put dot on the entry for the base name of ``path``."""
    wp, bp = editor.curwp, editor.curbp
    fname = os.path.basename(path.rstrip("/"))
    for index, text in enumerate(bp.lines):
        if findfname(text) == fname:
            wp.dotp = index
            wp.dotline = index + 1
            _warp(editor)
            editor.echo = ""
            return True
    editor.message(f"File not found {fname}")
    return False


def d_gotofile(editor: Editor, path: str | None) -> bool:
    """Go to the entry for ``path``, taken relative to the buffer's directory."""
    if not path:
        return False
    base = editor.getbufcwd()
    target = os.path.normpath(os.path.join(base, os.path.expanduser(path)))
    if target == os.path.normpath(base):
        editor.message("No file to find")
        return True
    return gotofile(editor, target)