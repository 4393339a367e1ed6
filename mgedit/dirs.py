"""The editor's current directory and directory creation."""

from __future__ import annotations

import os
import stat

from mgedit.buffers import NFILEN, CommandError, Editor


def _with_slash(path: str) -> str:
    return path if path.endswith("/") else path + "/"


def changedir(editor: Editor, path: str | None) -> bool:
    """Change the working directory to ``path``."""
    if not path:
        return False
    target = os.path.join(editor.cwd, os.path.expanduser(path))
    try:
        os.chdir(target)
    except OSError:
        editor.beep()
        editor.message(f"Can't change dir to {path}")
        return False
    try:
        editor.cwd = os.getcwd()
    except OSError:
        editor.cwd = path if path.startswith("/") else editor.cwd + path
    editor.cwd = _with_slash(editor.cwd)
    editor.message(f"Current directory is now {editor.cwd}")
    return True


def showcwdir(editor: Editor) -> bool:
    """Show the current directory on the echo line."""
    editor.message(f"Current directory: {editor.cwd}")
    return True


def getcwdir(editor: Editor) -> str:
    """Return the current directory, ending in ``/``."""
    if len(editor.cwd) >= NFILEN:
        raise CommandError("current directory name too long")
    return editor.cwd


def make_dir(editor: Editor, path: str | None) -> bool:
    """Create ``path`` and its parents, relative to the buffer's directory."""
    if not path:
        return False
    return do_makedir(editor, path)


def _prefixes(path: str):
    """Yield each leading component path of ``path`` and whether it is the last."""
    pos = 0
    size = len(path)
    while True:
        while pos < size and path[pos] == "/":
            pos += 1
        while pos < size and path[pos] != "/":
            pos += 1
        finished = pos >= size
        yield path[:pos], finished
        if finished:
            return


def do_makedir(editor: Editor, path: str) -> bool:
    """Create the directory ``path`` together with any missing parents."""
    path = os.path.expanduser(path)
    path = os.path.normpath(os.path.join(editor.getbufcwd(), path))

    oumask = os.umask(0)
    try:
        f_mode = 0o777 & ~oumask
        dir_mode = f_mode | stat.S_IWUSR | stat.S_IXUSR
        for prefix, finished in _prefixes(path):
            try:
                mode = os.stat(prefix).st_mode
                ishere = True
            except OSError:
                mode = 0
                ishere = False
            isdir = ishere and stat.S_ISDIR(mode)

            if finished and ishere:
                editor.beep()
                editor.message(f"Cannot create directory {prefix}: file exists")
                return False
            if not finished and isdir:
                continue

            try:
                os.mkdir(prefix, f_mode if finished else dir_mode)
            except OSError:
                if not isdir:
                    if not ishere:
                        editor.beep()
                        editor.message(
                            f"Creating directory: permission denied, {prefix}"
                        )
                    else:
                        editor.echo = ""
                    return False
        editor.echo = ""
        return True
    finally:
        os.umask(oumask)