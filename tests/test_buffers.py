import os

import pytest

from mgedit.buffers import (
    ArgFlag,
    BufferFlag,
    CommandError,
    Editor,
    WindowFlag,
)


def make_editor(tmp_path, answer="no", **kwargs):
    return Editor(cwd=str(tmp_path), ask=lambda prompt: answer, **kwargs)


def test_new_editor_state(tmp_path):
    ed = make_editor(tmp_path)
    assert ed.curbp.name == "*scratch*"
    assert ed.curbp.flags & BufferFlag.IGNDIRTY
    assert ed.curwp.bufp is ed.curbp
    assert ed.curbp.nwnd == 1
    assert ed.cwd == str(tmp_path) + "/"


def test_bfind(tmp_path):
    ed = make_editor(tmp_path)
    bp = ed.bfind("notes", True)
    assert ed.buffers[0] is bp
    assert ed.bfind("notes") is bp
    assert ed.bfind("missing") is None
    assert not bp.flags & BufferFlag.IGNDIRTY


def test_bclear_refused(tmp_path):
    ed = make_editor(tmp_path, "no")
    bp = ed.bfind("work", True)
    bp.append_line("x")
    bp.flags |= BufferFlag.CHANGED
    assert ed.bclear(bp) is False
    assert bp.lines == ["x"]


def test_bclear_accepted(tmp_path):
    ed = make_editor(tmp_path, "yes")
    bp = ed.bfind("work", True)
    bp.append_line("x")
    bp.flags |= BufferFlag.CHANGED
    assert ed.bclear(bp) is True
    assert bp.lines == []
    assert bp.nlines == 1
    assert not bp.flags & BufferFlag.CHANGED


def test_append_and_text(tmp_path):
    ed = make_editor(tmp_path)
    bp = ed.bfind("t", True)
    bp.append_line("a")
    bp.append_line("bc")
    assert bp.text() == "a\nbc"
    assert bp.size() == len(bp.text())
    assert bp.nlines == 3


def test_read_file_round_trip(tmp_path):
    path = tmp_path / "f.txt"
    path.write_text("one\ntwo\n")
    ed = make_editor(tmp_path)
    bp = ed.bfind("f.txt", True)
    bp.read_file(path)
    assert bp.lines == ["one", "two", ""]
    assert bp.text() == "one\ntwo\n"
    assert bp.fname == str(path)
    assert bp.cwd == str(tmp_path) + "/"


def test_showbuffer_sets_alternate(tmp_path):
    ed = make_editor(tmp_path)
    scratch = ed.curbp
    bp = ed.bfind("other", True)
    assert ed.showbuffer(bp, ed.curwp, WindowFlag.NONE)
    assert bp.altb is scratch
    assert scratch.nwnd == 0
    assert bp.nwnd == 1
    assert ed.curwp.bufp is bp
    assert ed.curwp.rflag & WindowFlag.MODE


def test_killbuffer_shown(tmp_path):
    ed = make_editor(tmp_path)
    scratch = ed.curbp
    bp = ed.bfind("other", True)
    ed.showbuffer(bp, ed.curwp, WindowFlag.NONE)
    ed.curbp = bp
    assert ed.killbuffer(bp) is True
    assert bp not in ed.buffers
    assert ed.curbp is scratch
    assert ed.curwp.bufp is scratch


def test_killbuffer_without_alternate(tmp_path):
    ed = make_editor(tmp_path)
    bp = ed.bfind("lonely", True)
    assert ed.killbuffer(bp) is True
    assert bp not in ed.buffers
    assert ed.bfind("*scratch*") is not None


def test_killbuffer_scratch_only_clears(tmp_path):
    ed = make_editor(tmp_path)
    scratch = ed.curbp
    scratch.append_line("junk")
    assert ed.killbuffer(scratch) is True
    assert scratch in ed.buffers
    assert scratch.lines == []


def test_augbname(tmp_path):
    ed = make_editor(tmp_path)
    ed.bfind("file.txt", True)
    assert ed.augbname("/a/b/file.txt") == "file.txt<2>"
    assert ed.augbname("/a/new.c") == "new.c"


def test_findbuffer(tmp_path):
    path = tmp_path / "data.txt"
    path.write_text("hello")
    ed = make_editor(tmp_path)
    bp = ed.findbuffer(str(path))
    assert bp.name == "data.txt"
    bp.read_file(path)
    assert ed.findbuffer(str(path)) is bp
    with pytest.raises(CommandError):
        ed.findbuffer("x" * 2000)


def test_popbuf_splits(tmp_path):
    ed = make_editor(tmp_path)
    bp = ed.bfind("pop", True)
    wp = ed.popbuf(bp)
    assert len(ed.windows) == 2
    assert wp is not ed.curwp
    assert wp.bufp is bp
    again = ed.popbuf(bp)
    assert again is wp
    assert again.rflag & WindowFlag.FULL
    assert sum(w.ntrows for w in ed.windows) == ed.nrow - 3


def test_split_too_small(tmp_path):
    ed = make_editor(tmp_path, nrow=4)
    with pytest.raises(CommandError):
        ed.split_window()


def test_popbuftop(tmp_path):
    ed = make_editor(tmp_path)
    bp = ed.bfind("top", True)
    for word in ("a", "b", "c"):
        bp.append_line(word)
    bp.dotp = 2
    wp = ed.popbuftop(bp)
    assert wp.dotp == 0
    assert bp.dotp == 0


def test_getbufcwd(tmp_path):
    ed = make_editor(tmp_path)
    assert ed.getbufcwd() == ed.cwd
    ed.curbp.cwd = "/srv/"
    assert ed.getbufcwd() == "/srv/"
    ed.global_wd = True
    assert ed.getbufcwd() == ed.cwd


def _touch_later(path):
    st = os.stat(path)
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + 10**9))


def test_checkdirty_accept(tmp_path):
    path = tmp_path / "f.txt"
    path.write_text("x\n")
    ed = make_editor(tmp_path, "yes")
    bp = ed.bfind("f", True)
    bp.read_file(path)
    assert ed.checkdirty(bp) is True
    _touch_later(path)
    assert ed.checkdirty(bp) is True
    assert bp.flags & BufferFlag.IGNDIRTY
    assert not bp.flags & BufferFlag.DIRTY


def test_checkdirty_decline(tmp_path):
    path = tmp_path / "f.txt"
    path.write_text("x\n")
    ed = make_editor(tmp_path, "no")
    bp = ed.bfind("f", True)
    bp.read_file(path)
    _touch_later(path)
    assert ed.checkdirty(bp) is False
    assert bp.flags & BufferFlag.DIRTY


def test_checkdirty_revert(tmp_path):
    path = tmp_path / "f.txt"
    path.write_text("old\n")
    ed = make_editor(tmp_path, "revert")
    bp = ed.bfind("f", True)
    bp.read_file(path)
    path.write_text("new\n")
    _touch_later(path)
    assert ed.checkdirty(bp) is False
    assert bp.lines[0] == "new"


def test_beep_msg(tmp_path):
    ed = make_editor(tmp_path)
    assert ed.beep_msg("End of buffer") is False
    assert ed.echo == "End of buffer"
    assert ed.bells == 1
    ed.audible_bell = False
    ed.beep()
    assert ed.bells == 1


def test_toggle_bells(tmp_path):
    ed = make_editor(tmp_path)
    assert ed.toggle_audible_bell(0, 0) is True
    assert ed.audible_bell is False
    ed.toggle_audible_bell(ArgFlag.UNIV, 1)
    assert ed.audible_bell is True
    ed.toggle_audible_bell(ArgFlag.UNIV, 0)
    assert ed.audible_bell is False
    ed.toggle_visible_bell(0, 0)
    assert ed.visible_bell is True
    ed.toggle_visible_bell(ArgFlag.UNIV, -1)
    assert ed.visible_bell is False