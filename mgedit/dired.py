"""Dired commands that visit, copy, rename and run commands on entries."""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable

from mgedit.buffers import NFILEN, Buffer, CommandError, Editor, WindowFlag
from mgedit.dired_listing import d_exec, d_makename, dired_
from mgedit.dired_marks import gotofile, refreshbuffer
from mgedit.dirs import make_dir

SHELL_OUTPUT = "*Shell Command Output*"


def _current_entry(editor: Editor) -> tuple[str, bool] | None:
    wp, bp = editor.curwp, editor.curbp
    text = bp.lines[wp.dotp] if 0 <= wp.dotp < len(bp.lines) else ""
    try:
        return d_makename(bp, text)
    except CommandError:
        return None


def _readin(editor: Editor, bp: Buffer, path: str) -> bool:
    try:
        bp.read_file(path)
    except FileNotFoundError:
        editor.message("(New file)")
    except OSError as exc:
        return editor.beep_msg(f"Cannot read {path}: {exc.strerror}")
    if not bp.fname:
        bp.fname = path
    wp = editor.curwp
    if wp.bufp is bp:
        wp.dotp = 0
        wp.doto = 0
        wp.dotline = 1
        wp.linep = 0
        wp.rflag |= WindowFlag.FULL
    return True


def d_findfile(editor: Editor) -> bool:
    """Visit the file or directory on the dot line."""
    entry = _current_entry(editor)
    if entry is None:
        return False
    fname, isdir = entry
    try:
        bp = dired_(editor, fname) if isdir else editor.findbuffer(fname)
    except CommandError:
        return False
    if bp is None:
        return False
    editor.curbp = bp
    if not editor.showbuffer(bp, editor.curwp, WindowFlag.FULL):
        return False
    if bp.fname:
        return True
    return _readin(editor, bp, fname)


def _destination(editor: Editor, frname: str, target: str) -> str | None:
    base = editor.getbufcwd()
    topath = os.path.normpath(os.path.join(base, os.path.expanduser(target)))
    if os.path.isdir(topath):
        topath = os.path.join(topath, os.path.basename(frname))
    if len(topath) >= NFILEN - 1:
        editor.beep_msg("Directory name too long")
        return None
    return topath


def _transfer(
    editor: Editor,
    target: str | None,
    operation: Callable[[str, str], object],
    verb: str,
    done: str,
) -> bool:
    entry = _current_entry(editor)
    if entry is None or entry[1]:
        return editor.beep_msg("Not a file")
    if not target:
        return False
    frname = entry[0]
    topath = _destination(editor, frname, target)
    if topath is None:
        return False
    if os.path.normpath(frname) == topath:
        editor.message(f"Cannot {verb} to same file: {frname}")
        return True
    try:
        operation(frname, topath)
    except OSError as exc:
        return editor.beep_msg(f"{exc.strerror or exc}: {topath}")
    bp = refreshbuffer(editor, editor.curbp)
    editor.message(done)
    return editor.showbuffer(bp, editor.curwp, WindowFlag.FULL | WindowFlag.MODE)


def _copy(src: str, dst: str) -> None:
    shutil.copyfile(src, dst)
    shutil.copymode(src, dst)


def d_copy(editor: Editor, target: str | None) -> bool:
    """Copy the file on the dot line to ``target`` (a file or directory)."""
    return _transfer(editor, target, _copy, "copy", "Copy: 1 file")


def d_rename(editor: Editor, target: str | None) -> bool:
    """Move the file on the dot line to ``target`` (a file or directory)."""
    return _transfer(editor, target, os.rename, "move", "Move: 1 file")


def d_shell_command(editor: Editor, command: str | None) -> bool:
    """Run ``command`` with the dot line's file as input and show its output."""
    bp = editor.bfind(SHELL_OUTPUT, True)
    if not editor.bclear(bp):
        return False
    entry = _current_entry(editor)
    if entry is None or entry[1]:
        return editor.beep_msg("bad line")
    if command is None:
        return False
    try:
        d_exec(bp, entry[0], ["sh", "-c", command], 0)
        wp = editor.popbuf(bp)
    except CommandError:
        return False
    if wp is None:
        return False
    editor.curwp = wp
    editor.curbp = wp.bufp
    return True


def d_create_directory(editor: Editor, path: str | None) -> bool:
    """Create directory ``path`` and list the dired buffer afresh."""
    if not make_dir(editor, path):
        return False
    bp = refreshbuffer(editor, editor.curbp)
    return editor.showbuffer(bp, editor.curwp, WindowFlag.FULL | WindowFlag.MODE)


def _mode_name(mode: object) -> str:
    return mode if isinstance(mode, str) else str(getattr(mode, "name", ""))


def dired_jump(editor: Editor) -> bool:
    """Open dired on the current buffer's directory, at the buffer's file."""
    cur = editor.curbp
    if any(_mode_name(mode).startswith("dired") for mode in cur.modes):
        return editor.beep_msg("In dired mode already")
    dname = editor.getbufcwd()
    fname = cur.fname
    try:
        bp = dired_(editor, dname)
    except CommandError:
        return False
    editor.curbp = bp
    if not editor.showbuffer(bp, editor.curwp, WindowFlag.FULL | WindowFlag.MODE):
        return False
    if fname:
        gotofile(editor, os.path.normpath(os.path.join(dname, fname)))
    return True