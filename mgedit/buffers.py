"""Buffers, windows and the editor state that ties them together."""

from __future__ import annotations

import enum
import os
import time
from collections.abc import Callable
from dataclasses import dataclass, field

NFILEN = 1024
NBUFN = NFILEN


class ArgFlag(enum.IntFlag):
    """Flags describing how a command was invoked."""

    NONE = 0
    UNIV = 0x1
    NEGARG = 0x2
    OTHARG = 0x4
    ARG = 0x7
    RAND = 0x8


class BufferFlag(enum.IntFlag):
    """State bits of a buffer."""

    NONE = 0
    CHANGED = 0x01
    BACKUP = 0x02
    NOTAB = 0x04
    OVERWRITE = 0x08
    READONLY = 0x10
    DIRTY = 0x20
    IGNDIRTY = 0x40
    DIREDDEL = 0x80


class WindowFlag(enum.IntFlag):
    """Redisplay requests for a window."""

    NONE = 0
    FRAME = 0x01
    MOVE = 0x02
    EDIT = 0x04
    FULL = 0x08
    MODE = 0x10


class CommandError(Exception):
    """An editor command could not be carried out."""


@dataclass(eq=False)
class Buffer:
    """A named list of text lines.

    ``dotp`` and ``markp`` are line indices; ``len(lines)`` stands for the
    position past the last line.  ``nlines`` is the running line counter
    used for line numbering and starts at 1.
    """

    name: str
    flags: BufferFlag = BufferFlag.NONE
    fname: str = ""
    cwd: str = ""
    lines: list[str] = field(default_factory=list)
    dotp: int = 0
    doto: int = 0
    markp: int | None = None
    marko: int = 0
    dotline: int = 1
    markline: int = 1
    nlines: int = 1
    nwnd: int = 0
    altb: Buffer | None = field(default=None, repr=False)
    modes: list[str] = field(default_factory=lambda: ["fundamental"])
    tabw: int = 8
    nlchr: str = "\n"
    undo: list = field(default_factory=list, repr=False)
    _mtime: int | None = field(default=None, init=False, repr=False)

    def text(self) -> str:
        """The whole buffer as one string."""
        return self.nlchr.join(self.lines)

    def size(self) -> int:
        """Number of characters, counting a newline between lines."""
        total = sum(len(line) + 1 for line in self.lines)
        return total - 1 if total else 0

    def append_line(self, text: str) -> None:
        """Add ``text`` as a new last line."""
        self.lines.append(text)
        self.nlines += 1

    def read_file(self, path: str | os.PathLike[str]) -> None:
        """Replace the contents with those of the file at ``path``."""
        path = os.fspath(path)
        with open(path, encoding="utf-8", errors="surrogateescape", newline="") as fh:
            content = fh.read()
        self.lines = content.split("\n")
        self.nlines = len(self.lines)
        self.dotp = 0
        self.doto = 0
        self.markp = None
        self.marko = 0
        self.dotline = self.markline = 1
        self.fname = path
        directory = os.path.dirname(os.path.abspath(path))
        self.cwd = directory if directory.endswith("/") else directory + "/"
        self.flags &= ~(BufferFlag.CHANGED | BufferFlag.DIRTY)
        self._mtime = os.stat(path).st_mtime_ns

    def _changed_on_disk(self) -> bool:
        if not self.fname or self._mtime is None:
            return False
        try:
            return os.stat(self.fname).st_mtime_ns != self._mtime
        except OSError:
            return False


@dataclass(eq=False)
class Window:
    """A view onto a buffer with its own dot and mark."""

    bufp: Buffer | None = None
    dotp: int = 0
    doto: int = 0
    markp: int | None = None
    marko: int = 0
    dotline: int = 1
    markline: int = 1
    linep: int = 0
    rflag: WindowFlag = WindowFlag.NONE
    ntrows: int = 22


_POSITION = ("dotp", "doto", "markp", "marko", "dotline", "markline")


def _copy_position(dst: Buffer | Window, src: Buffer | Window) -> None:
    for name in _POSITION:
        setattr(dst, name, getattr(src, name))


def _with_slash(path: str) -> str:
    return path if not path or path.endswith("/") else path + "/"


class Editor:
    """The set of buffers and windows, the current ones and user feedback.

    ``ask`` is called with a prompt and answers ``"yes"``, ``"no"`` or
    ``"revert"``.
    """

    def __init__(
        self,
        nrow: int = 24,
        ncol: int = 80,
        cwd: str | None = None,
        ask: Callable[[str], str] | None = None,
    ) -> None:
        self.nrow = nrow
        self.ncol = ncol
        self.ask: Callable[[str], str] = ask or (lambda prompt: "no")
        self.buffers: list[Buffer] = []
        self.windows: list[Window] = []
        self.defb_tabw = 8
        self.defb_flag = BufferFlag.NONE
        self.defb_modes = ["fundamental"]
        self.allbro = False
        self.global_wd = False
        self.audible_bell = True
        self.visible_bell = False
        self.in_macro = False
        self.bell_hook: Callable[[], object] | None = None
        self.bells = 0
        self.flashes = 0
        self.garbled = False
        self.echo = ""
        self.messages: list[str] = []
        self.cwd = _with_slash(cwd if cwd is not None else os.getcwd())
        scratch = self.bfind("*scratch*", True)
        window = Window(ntrows=max(nrow - 2, 1))
        self.windows.append(window)
        self.curbp: Buffer = scratch
        self.curwp: Window = window
        self.showbuffer(scratch, window, WindowFlag.FULL)

    # Buffer list management

    def bfind(self, name: str, create: bool = False) -> Buffer | None:
        """Find a buffer by name, creating it if asked to."""
        for bp in self.buffers:
            if bp.name == name:
                return bp
        if not create:
            return None
        flags = BufferFlag(self.defb_flag)
        if name and name[0] == "*" and name[-1] == "*":
            flags |= BufferFlag.IGNDIRTY
        bp = Buffer(
            name=name,
            flags=flags,
            modes=list(self.defb_modes),
            tabw=self.defb_tabw,
        )
        self.buffers.insert(0, bp)
        return bp

    def bclear(self, bp: Buffer) -> bool:
        """Empty ``bp``, asking first if it holds unsaved changes."""
        if (
            not bp.flags & BufferFlag.IGNDIRTY
            and bp.flags & BufferFlag.CHANGED
            and self.ask("Buffer modified; kill anyway") != "yes"
        ):
            return False
        bp.flags &= ~BufferFlag.CHANGED
        bp.lines.clear()
        bp.dotp = 0
        bp.doto = 0
        bp.markp = None
        bp.marko = 0
        bp.dotline = bp.markline = 1
        bp.nlines = 1
        return True

    def showbuffer(self, bp: Buffer, wp: Window, flags: WindowFlag | int) -> bool:
        """Display ``bp`` in ``wp``."""
        if bp._changed_on_disk():
            bp.flags |= BufferFlag.DIRTY

        if wp.bufp is bp:
            wp.rflag |= flags
            return True

        obp = wp.bufp
        bp.altb = obp
        if obp is not None:
            obp.nwnd -= 1
            if obp.nwnd == 0:
                _copy_position(obp, wp)

        wp.bufp = bp
        if bp.nwnd == 0:
            _copy_position(wp, bp)
        else:
            other = next(
                (w for w in self.windows if w is not wp and w.bufp is bp), None
            )
            if other is not None:
                _copy_position(wp, other)
        bp.nwnd += 1
        wp.rflag |= WindowFlag.MODE | flags
        return True

    def killbuffer(self, bp: Buffer) -> bool:
        """Remove ``bp``, showing another buffer wherever it was shown."""
        bp1 = bp.altb
        if bp1 is None:
            if bp is self.bfind("*scratch*"):
                if not self.bclear(bp):
                    return False
                for wp in self.windows:
                    wp.rflag |= WindowFlag.FULL
                return True
            bp1 = self.bfind("*scratch*", True)
        if not self.bclear(bp):
            return False

        for wp in list(self.windows):
            if bp.nwnd <= 0:
                break
            if wp.bufp is bp:
                saved = bp1.altb
                self.showbuffer(bp1, wp, WindowFlag.MODE | WindowFlag.FRAME | WindowFlag.FULL)
                bp1.altb = saved

        if bp is self.curbp:
            self.curbp = bp1

        self.buffers.remove(bp)
        for other in self.buffers:
            if other.altb is bp:
                other.altb = None if bp.altb is other else bp.altb
        bp.undo.clear()
        return True

    # Windows

    def split_window(self) -> Window:
        """Split the current window in two and return the lower half."""
        wp = self.curwp
        if wp.ntrows < 3:
            raise CommandError(f"Cannot split a {wp.ntrows}-line window")
        upper = (wp.ntrows - 1) // 2
        lower = wp.ntrows - 1 - upper
        new = Window(
            bufp=wp.bufp,
            linep=wp.linep,
            ntrows=lower,
            rflag=WindowFlag.MODE | WindowFlag.FULL,
        )
        _copy_position(new, wp)
        wp.ntrows = upper
        wp.rflag |= WindowFlag.MODE | WindowFlag.FULL
        if wp.bufp is not None:
            wp.bufp.nwnd += 1
        self.windows.insert(self.windows.index(wp) + 1, new)
        return new

    def popbuf(self, bp: Buffer) -> Window:
        """Show ``bp`` in a window other than the current one."""
        if bp.nwnd == 0:
            if len(self.windows) == 1:
                self.split_window()
            wp = next((w for w in self.windows if w is not self.curwp), None)
        else:
            for wp in self.windows:
                if wp.bufp is bp:
                    wp.rflag |= WindowFlag.FULL | WindowFlag.FRAME
                    return wp
            wp = None
        if wp is None:
            raise CommandError("No window to pop up into")
        self.showbuffer(bp, wp, WindowFlag.FULL)
        return wp

    def popbuftop(self, bp: Buffer) -> Window:
        """Pop ``bp`` up with every window on it at its top."""
        bp.dotp = 0
        bp.doto = 0
        if bp.nwnd:
            for wp in self.windows:
                if wp.bufp is bp:
                    wp.dotp = 0
                    wp.doto = 0
                    wp.rflag |= WindowFlag.FULL
        return self.popbuf(bp)

    # File names

    def augbname(self, fname: str) -> str:
        """Derive a unique buffer name from the base name of ``fname``."""
        stripped = fname.rstrip("/")
        base = os.path.basename(stripped) if stripped else "/"
        if len(base) >= NBUFN:
            raise CommandError("buffer name too long")
        name = base
        count = 2
        while self.bfind(name) is not None:
            name = f"{base}<{count}>"
            count += 1
        return name

    def findbuffer(self, fname: str) -> Buffer:
        """Find the buffer visiting ``fname`` or create an empty one for it."""
        if len(fname) >= NBUFN:
            self.beep_msg("filename too long")
            raise CommandError("filename too long")
        for bp in self.buffers:
            if bp.fname == fname:
                return bp
        return self.bfind(self.augbname(fname), True)

    def getbufcwd(self) -> str:
        """Working directory of the current buffer, ending in ``/``."""
        if not self.global_wd and self.curbp.cwd:
            return self.curbp.cwd
        return self.cwd

    def checkdirty(self, bp: Buffer) -> bool:
        """True if ``bp`` may be edited, asking when its file changed on disk."""
        if not bp.flags & (BufferFlag.CHANGED | BufferFlag.DIRTY):
            if bp._changed_on_disk():
                bp.flags |= BufferFlag.DIRTY

        if bp.flags & (BufferFlag.DIRTY | BufferFlag.IGNDIRTY) == BufferFlag.DIRTY:
            answer = self.ask("File changed on disk; really edit the buffer")
            if answer == "yes":
                bp.flags &= ~BufferFlag.DIRTY
                bp.flags |= BufferFlag.IGNDIRTY
                return True
            if answer == "revert":
                self._revert(bp)
            return False
        return True

    def _revert(self, bp: Buffer) -> bool:
        path = bp.fname
        if not os.access(path, os.R_OK):
            if not os.path.exists(path):
                self.beep_msg(f"File {path} no longer exists!")
            else:
                self.beep_msg(f"File {path} is no longer readable!")
            return False
        lineno = self.curwp.dotline
        bp.flags &= ~BufferFlag.CHANGED
        bp.undo.clear()
        bp.read_file(path)
        line = max(1, min(lineno, len(bp.lines) or 1))
        for wp in self.windows:
            if wp.bufp is bp:
                wp.dotp = line - 1
                wp.doto = 0
                wp.dotline = line
                wp.markp = None
                wp.marko = 0
                wp.rflag |= WindowFlag.MOVE
        return True

    # User feedback

    def message(self, text: str) -> None:
        """Show ``text`` on the echo line."""
        self.echo = text
        self.messages.append(text)

    def beep(self) -> None:
        """Ring the audible and/or visible bell."""
        if self.audible_bell:
            self.bells += 1
            if self.bell_hook is not None:
                self.bell_hook()
        if self.visible_bell:
            self.garbled = True
            self.flashes += 1
            if not self.in_macro:
                time.sleep(0.05)

    def beep_msg(self, msg: str) -> bool:
        """Show ``msg``, beep, and report failure."""
        self.message(msg)
        self.beep()
        return False

    def toggle_audible_bell(self, f: int, n: int) -> bool:
        """Toggle the audible bell, or set it from a numeric argument."""
        if f & ArgFlag.ARG:
            self.audible_bell = n > 0
        else:
            self.audible_bell = not self.audible_bell
        return True

    def toggle_visible_bell(self, f: int, n: int) -> bool:
        """Toggle the visible bell, or set it from a numeric argument."""
        if f & ArgFlag.ARG:
            self.visible_bell = n > 0
        else:
            self.visible_bell = not self.visible_bell
        return True