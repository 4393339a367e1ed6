"""Directory listings: building dired buffers and reading their lines."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Iterable, Sequence

from mgedit.buffers import NFILEN, Buffer, BufferFlag, CommandError, Editor

DDELCHAR = "D"
NAME_FIELD = 9
BUFSIZ = 8192


def d_warpdot(text: str) -> int | None:
    """Offset of the file name field in an ``ls -l`` line, or None."""
    off = 0
    field = 0
    size = len(text)
    while off < size:
        ch = text[off]
        off += 1
        if ch == " ":
            field += 1
            if field == NAME_FIELD:
                return off
            while off < size and text[off] == " ":
                off += 1
    return None


def findfname(text: str) -> str | None:
    """The file name on a dired line, or None if it has none."""
    start = d_warpdot(text)
    if start is None or start < 1:
        return None
    return text[start:]


def d_makename(bp: Buffer, text: str) -> tuple[str, bool]:
    """Full path named on a dired line of ``bp`` and whether it is a directory."""
    start = d_warpdot(text)
    if start is None:
        raise CommandError("Bad line in dired buffer")
    path = bp.fname + text[start:]
    if len(path) >= NFILEN:
        raise CommandError("File name too long")
    return path, text[2:3] == "d"


def d_exec(
    bp: Buffer,
    input_path: str | None,
    argv: Sequence[str],
    space: int = 0,
) -> bool:
    """Run ``argv`` with ``input_path`` as input, appending its output to ``bp``.

    Each output line is indented by ``space`` spaces; over-long lines are
    cut short and marked with ``...``.
    """
    prefix = " " * space
    try:
        infile = open(input_path if input_path is not None else os.devnull, "rb")
    except OSError as exc:
        raise CommandError(f"Can't open input file : {exc.strerror}") from exc
    with infile:
        try:
            proc = subprocess.run(
                list(argv),
                stdin=infile,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                check=False,
            )
        except OSError as exc:
            bp.append_line(f"{prefix}Can't exec {argv[0]}: {exc.strerror}")
            return True

    output = proc.stdout.decode("utf-8", "surrogateescape")
    pieces = output.split(bp.nlchr)
    if pieces and pieces[-1] == "":
        pieces.pop()
    for piece in pieces:
        if len(piece) >= BUFSIZ - 1:
            bp.append_line(f"{prefix}{piece[:BUFSIZ - 1]}...")
        else:
            bp.append_line(f"{prefix}{piece}")
    return True


def _resolve_dir(editor: Editor, dname: str) -> str:
    path = os.path.expanduser(dname)
    path = os.path.normpath(os.path.join(editor.getbufcwd(), path))
    return path if path.endswith("/") else path + "/"


def dired_(editor: Editor, dname: str) -> Buffer:
    """Return the dired buffer for directory ``dname``, listing it if new."""
    if not dname:
        editor.beep_msg("Bad directory name")
        raise CommandError("Bad directory name")
    dname = _resolve_dir(editor, dname)
    if not os.access(dname, os.R_OK | os.X_OK):
        if os.path.exists(dname):
            msg = f"Permission denied: {dname}"
        else:
            msg = f"Error opening: {dname}"
        editor.beep_msg(msg)
        raise CommandError(msg)

    for bp in editor.buffers:
        if bp.fname == dname:
            if bp._changed_on_disk():
                editor.message(
                    "Directory has changed on disk; type g to update Dired"
                )
            return bp

    bp = editor.bfind(dname, True)
    bp.flags |= BufferFlag.READONLY | BufferFlag.IGNDIRTY
    d_exec(bp, None, ["ls", "-al", dname], 2)

    # Put dot on the entry after "..", if there is one.
    count = len(bp.lines)
    idx = 0
    dotline = 1
    i = 0
    while i < bp.nlines:
        idx = (idx + 1) % (count + 1)
        dotline += 1
        text = bp.lines[idx] if idx < count else ""
        off = d_warpdot(text)
        if off is not None and text[off:] == "..":
            break
        i += 1
    i += 1
    if i < bp.nlines - 2:
        idx = (idx + 1) % (count + 1)
        dotline += 1
    bp.dotp = idx
    bp.dotline = dotline
    text = bp.lines[idx] if idx < count else ""
    bp.doto = d_warpdot(text) or 0

    bp.fname = dname
    bp.cwd = dname
    bp.modes = ["fundamental", "dired"]
    bp._mtime = os.stat(dname).st_mtime_ns
    return bp


def createlist(bp: Buffer) -> list[str]:
    """Names of the files flagged for deletion in ``bp``, in buffer order."""
    names = []
    for text in bp.lines:
        if text[:1] != DDELCHAR:
            continue
        name = findfname(text)
        if name is not None:
            names.append(name)
    return names


def redelete(bp: Buffer, names: Iterable[str]) -> int:
    """Flag again for deletion the lines of ``bp`` naming one of ``names``.

    Returns the number of lines flagged.
    """
    pending = list(names)
    bp.flags &= ~BufferFlag.DIREDDEL
    flagged = 0
    for index, text in enumerate(bp.lines):
        if not pending:
            break
        name = findfname(text)
        if name is None or name not in pending:
            continue
        bp.lines[index] = DDELCHAR + text[1:]
        bp.flags |= BufferFlag.DIREDDEL
        pending = [p for p in pending if p != name]
        flagged += 1
    return flagged