import pytest

from mgedit.buffers import BufferFlag, Editor
from mgedit.cmode import (
    CModeSettings,
    cc_char,
    cc_indent,
    cc_lfindent,
    cc_tab,
    findcolpos,
    findnonblank,
    getindent,
    getmatch,
    in_whitespace,
    isnonblank,
)

S = CModeSettings()


def make_editor(lines, dotp, doto):
    editor = Editor()
    bp = editor.curbp
    bp.lines = list(lines)
    bp.nlines = len(lines)
    bp.tabw = 8
    wp = editor.curwp
    wp.dotp = dotp
    wp.doto = doto
    wp.dotline = dotp + 1
    return editor


def lead_width(text):
    return findcolpos(text, len(text) - len(text.lstrip(" \t")), 8)


@pytest.mark.parametrize(
    "c, mc, expected",
    [('"', '"', True), ("'", "'", True), ("(", ")", True), ("{", "}", True),
     ("[", "]", True), ("(", "(", False), ("x", "x", False), ('"', "'", False)],
)
def test_getmatch(c, mc, expected):
    assert getmatch(c, mc) is expected


def test_in_whitespace():
    assert in_whitespace("  \t")
    assert not in_whitespace("  x")
    assert not in_whitespace("")


def test_isnonblank():
    assert isnonblank("  foo", 5)
    assert not isnonblank("#define X", 9)
    assert not isnonblank("  // note", 9)
    assert not isnonblank("   ", 3)
    assert isnonblank("/x", 2)
    assert not isnonblank("  foo", 2)


def test_findcolpos():
    assert findcolpos("abc", 3, 8) == 3
    assert findcolpos("\t", 1, 4) == 4
    assert findcolpos("\x01", 1, 8) == 2


def test_getindent_open_brace():
    assert getindent("foo() {", 8, S) == (S.basic_indent, 0)


def test_getindent_close_brace():
    newind, curi = getindent("}", 8, S)
    assert curi == -S.basic_indent
    assert newind == 0


def test_getindent_open_paren_continues():
    newind, curi = getindent("\tfoo(a,", 8, S)
    assert newind == 8 + S.cont_indent
    assert curi == 8


def test_getindent_preprocessor_ignored():
    assert getindent("#define X {", 8, S) == (0, 0)


def test_getindent_label():
    newind, curi = getindent("case 1:", 8, S)
    assert curi == S.colon_indent
    assert newind == -S.colon_indent


def test_getindent_ternary_is_not_label():
    assert getindent("x = a ? b : c;", 8, S) == (0, 0)


def test_getindent_open_comment():
    text = "  x; /* note"
    newind, _ = getindent(text, 8, S)
    assert newind == findcolpos(text, text.index("*"), 8)


def test_getindent_blank_line():
    assert getindent("    ", 8, S) == (0, 0)


def test_findnonblank_skips_blank():
    assert findnonblank(["int x;", "", "y"], 2) == 0


def test_findnonblank_rewinds_to_top():
    assert findnonblank(["#include <a>", "// c", "z"], 2) is None
    assert findnonblank(["a"], 0) is None


def test_findnonblank_skips_c_comment():
    assert findnonblank(["a;", "/* multi", " line */", "b"], 3) == 0


def test_cc_indent_inside_block():
    editor = make_editor(["int f() {", "x;   "], 1, 0)
    assert cc_indent(editor, 1, S)
    line = editor.curbp.lines[1]
    assert line.lstrip() == "x;"
    assert lead_width(line) == S.basic_indent


def test_cc_indent_closing_brace():
    editor = make_editor(["f() {", "\tx;", "}"], 2, 0)
    assert cc_indent(editor, 1, S)
    assert editor.curbp.lines[2] == "}"


def test_cc_indent_readonly():
    editor = make_editor(["f() {", "x;"], 1, 0)
    editor.curbp.flags |= BufferFlag.READONLY
    assert cc_indent(editor, 1, S) is False
    assert editor.curbp.lines[1] == "x;"


def test_cc_indent_negative():
    editor = make_editor(["f() {", "x;"], 1, 0)
    assert cc_indent(editor, -1, S) is False


def test_cc_lfindent():
    editor = make_editor(["if (a) {"], 0, len("if (a) {"))
    assert cc_lfindent(editor, 1, S)
    lines = editor.curbp.lines
    assert len(lines) == 2
    assert lines[0] == "if (a) {"
    assert lines[1].strip() == ""
    assert lead_width(lines[1]) == S.basic_indent
    assert editor.curwp.dotp == 1


def test_cc_tab_in_whitespace_inserts():
    editor = make_editor(["  "], 0, 2)
    assert cc_tab(editor, 1, S)
    assert editor.curbp.lines[0] == "  " + "\t"


def test_cc_tab_reindents_code():
    editor = make_editor(["f() {", "   y;"], 1, 4)
    assert cc_tab(editor, 1, S)
    line = editor.curbp.lines[1]
    assert line.lstrip() == "y;"
    assert lead_width(line) == S.basic_indent


def test_cc_char_colon_outdents_label():
    editor = make_editor(["switch (x) {", "\tcase 1"], 1, len("\tcase 1"))
    assert cc_char(editor, 1, ":", S)
    assert editor.curbp.lines[1] == "case 1:"