import pytest

from mgedit.buffers import BufferFlag, Editor, WindowFlag
from mgedit.dired_listing import dired_, findfname
from mgedit.dired_marks import (
    d_backline,
    d_del,
    d_expunge,
    d_forwline,
    d_gotofile,
    d_undel,
    d_undelbak,
    gotofile,
    refreshbuffer,
)


def _line(kind, name):
    perm = "drwxr-xr-x" if kind == "d" else "-rw-r--r--"
    return f"  {perm}  1 user group 0 Jan  1 00:00 {name}"


def _listing(editor, directory, entries):
    lines = ["  total 0", _line("d", "."), _line("d", "..")]
    lines += [_line(kind, name) for kind, name in entries]
    dname = str(directory) + "/"
    bp = editor.bfind(dname, True)
    bp.lines = lines
    bp.nlines = len(lines) + 1
    bp.fname = dname
    bp.cwd = dname
    bp.flags |= BufferFlag.READONLY | BufferFlag.IGNDIRTY
    editor.curbp = bp
    editor.showbuffer(bp, editor.curwp, WindowFlag.FULL)
    return bp


@pytest.fixture
def editor(tmp_path):
    return Editor(cwd=str(tmp_path))


def test_d_del_flags_and_moves(editor, tmp_path):
    bp = _listing(editor, tmp_path, [("-", "a.txt"), ("-", "b.txt")])
    wp = editor.curwp
    wp.dotp, wp.dotline = 3, 4
    assert d_del(editor, 1) is True
    assert bp.lines[3].startswith("D")
    assert findfname(bp.lines[3]) == "a.txt"
    assert wp.dotp == 4
    assert bp.flags & BufferFlag.DIREDDEL
    assert bp.lines[4][wp.doto:] == "b.txt"


def test_d_del_negative_is_refused(editor, tmp_path):
    bp = _listing(editor, tmp_path, [("-", "a.txt")])
    assert d_del(editor, -1) is False
    assert not any(line.startswith("D") for line in bp.lines)


def test_d_del_skips_lines_without_name(editor, tmp_path):
    bp = _listing(editor, tmp_path, [("-", "a.txt")])
    d_del(editor, 1)
    assert bp.lines[0] == "  total 0"
    assert editor.curwp.dotp == 1


def test_undel_and_undelbak_clear_flags(editor, tmp_path):
    bp = _listing(editor, tmp_path, [("-", "a.txt"), ("-", "b.txt")])
    wp = editor.curwp
    wp.dotp, wp.dotline = 3, 4
    d_del(editor, 2)
    assert bp.lines[3][0] == "D" and bp.lines[4][0] == "D"
    wp.dotp, wp.dotline = 3, 4
    d_undel(editor, 1)
    assert bp.lines[3][0] == " "
    assert wp.dotp == 4
    wp.dotp, wp.dotline = 5, 6
    d_undelbak(editor, 1)
    assert wp.dotp == 4
    assert bp.lines[4][0] == " "


def test_expunge_removes_flagged_files(editor, tmp_path):
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "b.txt").write_text("b")
    (tmp_path / "sub").mkdir()
    bp = _listing(editor, tmp_path, [("-", "a.txt"), ("-", "b.txt"), ("d", "sub")])
    wp = editor.curwp
    wp.dotp, wp.dotline = 4, 5
    d_del(editor, 2)
    assert d_expunge(editor) is True
    assert (tmp_path / "a.txt").exists()
    assert not (tmp_path / "b.txt").exists()
    assert not (tmp_path / "sub").exists()
    names = [findfname(line) for line in bp.lines]
    assert "b.txt" not in names and "sub" not in names
    assert bp.nlines == len(bp.lines) + 1
    assert not bp.flags & BufferFlag.DIREDDEL


def test_expunge_reports_missing_file(editor, tmp_path):
    bp = _listing(editor, tmp_path, [("-", "ghost.txt")])
    wp = editor.curwp
    wp.dotp, wp.dotline = 3, 4
    d_del(editor, 1)
    assert d_expunge(editor) is False
    assert editor.echo == "Could not delete 'ghost.txt'"
    assert len(bp.lines) == 4


def test_expunge_reports_bad_line(editor, tmp_path):
    bp = _listing(editor, tmp_path, [])
    bp.lines.append("D")
    assert d_expunge(editor) is False
    assert editor.echo == "Bad line in dired buffer"


def test_gotofile_finds_entry(editor, tmp_path):
    bp = _listing(editor, tmp_path, [("-", "a.txt"), ("-", "b.txt")])
    assert gotofile(editor, str(tmp_path / "b.txt")) is True
    wp = editor.curwp
    assert bp.lines[wp.dotp][wp.doto:] == "b.txt"
    assert wp.dotline == wp.dotp + 1


def test_gotofile_missing(editor, tmp_path):
    _listing(editor, tmp_path, [("-", "a.txt")])
    assert gotofile(editor, "nothere") is False
    assert editor.echo.startswith("File not found")


def test_d_gotofile_current_directory(editor, tmp_path):
    _listing(editor, tmp_path, [("-", "a.txt")])
    assert d_gotofile(editor, str(tmp_path)) is True
    assert editor.echo == "No file to find"
    assert d_gotofile(editor, "a.txt") is True
    assert editor.curwp.dotp == 3


def test_forwline_and_backline_land_on_names(editor, tmp_path):
    bp = _listing(editor, tmp_path, [("-", "a.txt")])
    wp = editor.curwp
    assert d_forwline(editor, 0, 3) is True
    assert bp.lines[wp.dotp][wp.doto:] == "a.txt"
    assert d_backline(editor, 0, 1) is True
    assert bp.lines[wp.dotp][wp.doto:] == ".."


def test_refreshbuffer_keeps_flags(editor, tmp_path, monkeypatch):
    monkeypatch.setenv("LC_ALL", "C")
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "b.txt").write_text("b")
    bp = dired_(editor, str(tmp_path))
    editor.curbp = bp
    editor.showbuffer(bp, editor.curwp, WindowFlag.FULL)
    assert gotofile(editor, "a.txt") is True
    d_del(editor, 1)
    new = refreshbuffer(editor, bp)
    assert new is not bp
    assert bp not in editor.buffers
    assert editor.curbp is new
    flagged = [findfname(line) for line in new.lines if line.startswith("D")]
    assert flagged == ["a.txt"]
    assert new.flags & BufferFlag.DIREDDEL