"""A minimal ANSI terminal description with termcap-style helpers."""

from __future__ import annotations

import os
import re
import select
from collections.abc import Callable
from dataclasses import dataclass, field

_QUERY = b"\x1b7" b"\x1b[r" b"\x1b[999;999H" b"\x1b[6n"

_REPORT = re.compile(rb"\x1b\[\s*([+-]?\d+);\s*([+-]?\d+)R")

_ANSI_STRINGS: tuple[str | None, ...] = (
    "\x1b[%dZ",        # 0: backtab
    "\a",              # 1: bell
    "\r",              # 2: carriage return
    None,              # 3: scroll region
    "\x1b[3g",         # 4: clear all tabs
    "\x1b[2J",         # 5: clear screen
    "\x1b[K",          # 6: clear to end of line
    "\x1b[J",          # 7: clear to end of screen
    None,              # 8: column address
    None,              # 9: command character
    "\x1b[%i%d;%dH",   # 10: cursor address
    "\x1b[B",          # 11: cursor down
    "\x1b[F",          # 12: cursor end
    "\x1b[H",          # 13: cursor home
    "\x1b[?25l",       # 14: cursor invisible
    "\x1b[D",          # 15: cursor left
    "\x1b[?25h",       # 16: cursor normal
    "\x1b[C",          # 17: cursor right
    None,              # 18: cursor to lower left
    "\x1b[A",          # 19: cursor up
    "\x1b[?25h",       # 20: cursor visible
    "\b",              # 21: delete character
    "\x1b[2K",         # 22: delete line
    "\x1b[1L",         # 23: insert line
    None,
    None,
    "\x1b[5m",         # 26: blink
    "\x1b[1m",         # 27: bold
    None,
    None,
    "\x1b[2m",         # 30: dim
    None,
    None,
    None,
    "\x1b[7m",         # 34: reverse
    "\x1b[7m",         # 35: standout
    "\x1b[4m",         # 36: underline
    None,
    None,
    "\x1b[0m",         # 39: attributes off
    None,
    None,
    None,
    "\x1b[0m",         # 43: exit standout
    "\x1b[0m",         # 44: exit underline
    None,
    "\x1b[%dM",        # 46: delete N lines
    "\x1b[%dL",        # 47: insert N lines
    "\x1b[%de",        # 48: cursor down N lines
    "\x1b[1~",         # 49: home
    "\x1b[2~",         # 50: insert
    "\x1b[3~",         # 51: delete
    "\x1b[4~",         # 52: end
    "\x1b[5~",         # 53: page up
    "\x1b[6~",         # 54: page down
    "\x1b[7~",         # 55: home
    "\x1b[8~",         # 56: end
    "\x1b[10~",        # 57: F0
    "\x1bOP",          # 58: F1
    "\x1bOQ",          # 59: F2
    "\x1bOR",          # 60: F3
    "\x1bOS",          # 61: F4
    "\x1b[15~",        # 62: F5
    "\x1b[17~",        # 63: F6
    "\x1b[18~",        # 64: F7
    "\x1b[19~",        # 65: F8
    "\x1b[20~",        # 66: F9
    "\x1b[21~",        # 67: F10
    "\x1b[23~",        # 68: F11
    "\x1b[24~",        # 69: F12
)

_STRING_CAPS: dict[str, int] = {
    "bell": 1,
    "key_down": 11,
    "key_eol": 12,
    "key_home": 13,
    "key_left": 15,
    "key_right": 17,
    "key_up": 19,
    "key_ppage": 53,
    "key_npage": 54,
    "key_beg": 49,
    "key_end": 52,
    "key_ic": 50,
    "key_dc": 51,
    **{f"key_f{i}": 57 + i for i in range(1, 13)},
    "scroll_reverse": 11,
    "scroll_forward": 10,
    "parm_delete_line": 46,
    "parm_insert_line": 47,
    "parm_down_cursor": 48,
    "insert_line": 23,
    "delete_line": 22,
    "clr_eol": 6,
    "clr_eos": 7,
    "cursor_up": 19,
    "cursor_address": 10,
    "enter_standout_mode": 35,
    "exit_standout_mode": 43,
}

_FIXED_CAPS: dict[str, str | None] = {
    "change_scroll_region": None,
    "keypad_local": None,
    "keypad_xmit": None,
    "enter_ca_mode": "",
    "exit_ca_mode": "",
}


def _default_strings() -> list[str | None]:
    return list(_ANSI_STRINGS) + [None] * (100 - len(_ANSI_STRINGS))


@dataclass
class Terminal:
    """Size and control strings of the output terminal."""

    name: str = "vt100"
    nrow: int = 24
    ncol: int = 80
    fd: int | None = None
    num: list[int] = field(default_factory=lambda: [0] * 10)
    strings: list[str | None] = field(default_factory=_default_strings)

    def capability(self, name: str) -> str | int | None:
        """Look up a capability by its terminfo variable name."""
        if name == "columns":
            return self.ncol
        if name == "lines":
            return self.nrow
        if name == "magic_cookie_glitch":
            return self.num[4]
        if name in _FIXED_CAPS:
            return _FIXED_CAPS[name]
        if name in _STRING_CAPS:
            return self.strings[_STRING_CAPS[name]]
        raise KeyError(name)


def _make_raw(fd: int) -> None:
    import termios

    try:
        attrs = termios.tcgetattr(fd)
    except termios.error:
        return
    iflag, oflag, cflag, lflag = attrs[0], attrs[1], attrs[2], attrs[3]
    iflag &= ~(
        getattr(termios, "IMAXBEL", 0)
        | termios.IGNBRK
        | termios.BRKINT
        | termios.PARMRK
        | termios.ISTRIP
        | termios.INLCR
        | termios.IGNCR
        | termios.ICRNL
        | termios.IXON
    )
    oflag &= ~termios.OPOST
    lflag &= ~(
        termios.ECHO | termios.ECHONL | termios.ICANON | termios.ISIG | termios.IEXTEN
    )
    cflag &= ~(termios.CSIZE | termios.PARENB)
    cflag |= termios.CS8
    attrs[0], attrs[1], attrs[2], attrs[3] = iflag, oflag, cflag, lflag
    try:
        termios.tcsetattr(fd, termios.TCSADRAIN, attrs)
    except termios.error:
        pass


def parse_cursor_report(data: bytes | str) -> tuple[int, int] | None:
    """Parse a cursor position report ``ESC [ row ; col R``."""
    if isinstance(data, str):
        data = data.encode("latin-1")
    match = _REPORT.match(data)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def setupterm(term: str | None = None, fd: int | None = None) -> Terminal:
    """Describe the terminal on ``fd``, asking it for its size.

    The terminal is put into raw mode, the cursor is sent far off and its
    reported position becomes the size.  Without ``fd`` the defaults are kept.
    """
    if term is None:
        term = os.environ.get("TERM", "vt100")
    terminal = Terminal(name=term, fd=fd)
    if fd is None:
        return terminal

    _make_raw(fd)
    try:
        os.write(fd, _QUERY)
    except OSError:
        return terminal

    poller = select.poll()
    poller.register(fd, select.POLLIN)
    if poller.poll(300):
        try:
            data = os.read(fd, 64)
        except OSError:
            return terminal
        report = parse_cursor_report(data)
        if report is not None:
            terminal.nrow, terminal.ncol = report
    return terminal


def tgoto(cap: str, col: int, row: int) -> str:
    """Expand a termcap-style cursor motion string.

    Returns ``"OOPS"`` for an unknown escape.
    """
    vals = [row, col]
    cur = 0
    out: list[str] = []
    i = 0
    while i < len(cap):
        ch = cap[i]
        if ch != "%":
            out.append(ch)
            i += 1
            continue
        i += 1
        op = cap[i] if i < len(cap) else ""
        if op in ("d", "2", "3"):
            width = {"d": 0, "2": 2, "3": 3}[op]
            out.append(f"{vals[cur]:0{width}d}" if width else str(vals[cur]))
            cur = 1
        elif op == ".":
            out.append(chr(vals[cur]))
            cur = 1
        elif op == "+":
            i += 1
            offset = ord(cap[i]) if i < len(cap) else 0
            out.append(chr(vals[cur] + offset))
            cur = 1
        elif op == ">":
            limit = ord(cap[i + 1]) if i + 1 < len(cap) else 0
            bump = ord(cap[i + 2]) if i + 2 < len(cap) else 0
            if vals[cur] > limit:
                vals[cur] += bump
            i += 2
        elif op == "r":
            vals[0], vals[1] = vals[1], vals[0]
        elif op == "i":
            vals[0] += 1
            vals[1] += 1
        elif op == "n":
            vals[0] ^= 0o140
            vals[1] ^= 0o140
        elif op == "B":
            vals[cur] += 6 * (vals[cur] // 10)
        elif op == "D":
            vals[cur] -= 2 * (vals[cur] % 16)
        elif op == "%":
            out.append("%")
        else:
            return "OOPS"
        i += 1
    return "".join(out)


def tputs(text: str, outc: Callable[[str], object]) -> str:
    """Send ``text`` to ``outc`` one character at a time, dropping padding.

    Returns what was sent.
    """
    start = 0
    while start < len(text) and (text[start] in ".*" or text[start].isdigit()):
        start += 1
    sent = text[start:]
    for ch in sent:
        outc(ch)
    return sent