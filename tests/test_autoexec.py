from mgedit.autoexec import AutoExecRegistry


def c_mode():
    return "c"


def fill_mode():
    return "fill"


def make_registry():
    return AutoExecRegistry({"c-mode": c_mode, "auto-fill-mode": fill_mode})


def test_empty_registry_finds_nothing():
    assert make_registry().find_autoexec("foo.c") == []


def test_pattern_match():
    reg = make_registry()
    assert reg.add_autoexec("*.c", "c-mode") is True
    assert reg.find_autoexec("foo.c") == [c_mode]
    assert reg.find_autoexec("foo.h") == []


def test_star_matches_slash():
    reg = make_registry()
    reg.add_autoexec("*.c", "c-mode")
    assert reg.find_autoexec("dir/x.c") == [c_mode]


def test_latest_registration_first():
    reg = make_registry()
    reg.add_autoexec("*.c", "c-mode")
    reg.add_autoexec("*", "auto-fill-mode")
    assert reg.find_autoexec("x.c") == [fill_mode, c_mode]
    assert reg.find_autoexec("README") == [fill_mode]


def test_unknown_function_rejected():
    reg = make_registry()
    assert reg.add_autoexec("*.c", "no-such-function") is False
    assert reg.find_autoexec("x.c") == []


def test_auto_execute_answers():
    reg = make_registry()
    assert reg.auto_execute(None, "c-mode") is False
    assert reg.auto_execute("", "c-mode") is False
    assert reg.auto_execute("*.c", "") is False
    assert reg.auto_execute("*.[ch]", "c-mode") is True
    assert reg.find_autoexec("x.h") == [c_mode]