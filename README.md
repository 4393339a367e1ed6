# mgedit

The working parts of a small Emacs-style editor, as a Python library: the
editor's state model (buffers, windows, dot and mark) and a set of commands
that act on it.

## What is in it

- `mgedit.buffers`: `Buffer`, `Window` and the `Editor` that owns them.
  `Editor` finds and creates buffers (`bfind`), clears them (`bclear`), shows
  them in windows (`showbuffer`, `popbuf`, `popbuftop`), kills them
  (`killbuffer`), splits windows (`split_window`), names buffers after files
  (`augbname`, `findbuffer`) and checks whether a file changed on disk
  (`checkdirty`). It also keeps the echo line (`message`) and the audible and
  visible bells (`beep`, `beep_msg`, `toggle_audible_bell`,
  `toggle_visible_bell`). Questions to the user go through the `ask` callable
  given to `Editor`, which answers `"yes"`, `"no"` or `"revert"`.
- `mgedit.motion`: cursor motion by character, line and page (`forwchar`,
  `backline`, `forwpage`, ...), beginning and end of buffer, setting, swapping
  and clearing the mark, and `gotoline` / `setlineno`.
- `mgedit.dirs`: the editor's current directory (`changedir`, `showcwdir`,
  `getcwdir`) and `make_dir`, which creates a directory and its parents.
- `mgedit.autoexec`: `AutoExecRegistry`, which pairs filename glob patterns
  with functions to run for matching files.
- The directory editor, in three modules:
  - `mgedit.dired_listing`: `dired_` lists a directory with `ls -al` into a
    buffer; `d_warpdot`, `findfname` and `d_makename` read its lines;
    `d_exec` runs a program and appends its output to a buffer.
  - `mgedit.dired_marks`: flagging and unflagging entries (`d_del`,
    `d_undel`, `d_undelbak`), deleting flagged files (`d_expunge`),
    refreshing the listing while keeping flags (`refreshbuffer`), and moving
    between entries (`d_forwline`, `gotofile`, ...).
  - `mgedit.dired`: visiting an entry (`d_findfile`), copying and renaming
    (`d_copy`, `d_rename`), running a shell command on a file
    (`d_shell_command`), creating a directory (`d_create_directory`) and
    `dired_jump`.
- `mgedit.cmode`: KNF-style indentation for C code (`cc_indent`, `cc_tab`,
  `cc_lfindent`, `cc_char`), tuned by `CModeSettings`.
- `mgedit.charinfo`: character classes (`char_class`, `is_word`, ...) and
  key names (`getkeyname`).
- `mgedit.terminal`: a small ANSI terminal description (`Terminal`) with
  `setupterm`, `tgoto`, `tputs` and `parse_cursor_report`.
- `mgedit.fparseln`: reads logical lines with continuations, comments and
  escapes (`fparseln`, `parse_lines`, `ParseFlags`).
- `mgedit.strutil`: `strlcpy`, `strlcat` and a range-checked `strtonum`,
  which raises `StrtonumError`.

## Example

```python
from mgedit.buffers import Editor
from mgedit import motion

editor = Editor()
bp = editor.bfind("notes", True)
bp.append_line("first line")
bp.append_line("second line")
editor.showbuffer(bp, editor.curwp, 0)
editor.curbp = bp

motion.setlineno(editor, 2)
motion.gotoeol(editor, 0, 1)
print(editor.curwp.dotp, editor.curwp.doto)   # 1 11
```

```python
from mgedit.strutil import strtonum, StrtonumError

strtonum("42", 1, 100)        # 42
try:
    strtonum("420", 1, 100)
except StrtonumError as exc:
    print(exc)                # too large
```

## What it does not do

- There is no program to run: no keyboard loop, no key bindings and no screen
  redraw. Commands are plain functions called on an `Editor`.
- Buffers can be read from files (`Buffer.read_file`) but there is no command
  that saves them.
- There are no commands to list buffers, insert one buffer into another,
  revert or diff a buffer, or set the tab width interactively.
- There is no source-code cross-reference lookup.

## Installing and testing

```
pip install .
pip install ".[test]"
pytest
```

The directory editor starts other programs: `ls` to list directories and
`sh` for `d_shell_command`. Those parts work only where these programs are
installed.