from __future__ import annotations

import os

import pytest
from prompt_toolkit.document import Document

from tests.support.harness import YInteger

from yeetyoink.repl import (
    ReplState,
    _SlashCompleter,
    _normalize,
    eval_line,
    handle_slash,
    needs_more_input,
)
from yeetyoink.repl_highlight import GROUP_STYLE, _highlight_line, token_group
from yeetyoink.token_types import TT


@pytest.mark.parametrize(
    "text, more",
    [
        pytest.param("1 + 2", False, id="complete"),
        pytest.param("f := \\x {", True, id="open-block"),
        pytest.param("f := \\x {\n  x\n}", False, id="closed-block"),
        pytest.param("[1, 2", True, id="open-array"),
        pytest.param("%{", True, id="open-hashmap"),
        pytest.param("f(1,", True, id="open-call"),
        pytest.param("yif x { 1 } yels {", True, id="open-yels"),
        pytest.param("`abc", True, id="open-template"),
        pytest.param("`a {", True, id="open-hole"),
        pytest.param("`a {1}`", False, id="closed-template"),
        pytest.param('"abc', False, id="unterminated-plain-string"),
        pytest.param(")", False, id="stray-close"),
    ],
)
def test_needs_more_input(text: str, more: bool) -> None:
    assert needs_more_input(text) is more


def test_eval_line_keeps_environment(capsys) -> None:
    state = ReplState()

    assert eval_line("x := 41", state) == 0
    assert eval_line("x + 1", state) == 0
    assert capsys.readouterr().out == "41\n42\n"
    assert state.env.get("x") == YInteger(41)


def test_eval_line_keeps_macros(capsys) -> None:
    state = ReplState()

    eval_line("double := @\\a { quote(unquote(a) * 2) }", state)
    eval_line("double(21)", state)
    assert capsys.readouterr().out == "42\n"


def test_eval_line_error_does_not_reset(capsys) -> None:
    state = ReplState()

    eval_line("x := 1", state)
    assert eval_line("x + nope", state) == 1
    assert eval_line("x", state) == 0

    captured = capsys.readouterr()
    assert captured.err.startswith("error: identifier not found: nope")
    assert captured.out == "1\n1\n"


def test_slash_reset(capsys) -> None:
    state = ReplState()
    eval_line("x := 1", state)

    assert handle_slash("/reset", state)
    assert state.env.get("x") is None
    assert "Environment reset." in capsys.readouterr().out


def test_slash_debug_toggles(capsys) -> None:
    state = ReplState()

    assert handle_slash("/debug", state)
    assert state.debug is True
    assert handle_slash("/debug off", state)
    assert state.debug is False
    assert handle_slash("/debug on", state)
    assert state.debug is True

    out = capsys.readouterr().out
    assert out.splitlines() == ["Expansion dump: on", "Expansion dump: off", "Expansion dump: on"]


def test_slash_debug_bad_argument(capsys) -> None:
    state = ReplState()

    assert handle_slash("/debug maybe", state)
    assert state.debug is False
    assert capsys.readouterr().err == "Usage: /debug [on|off]\n"


def test_slash_py_traceback(monkeypatch, capsys) -> None:
    monkeypatch.delenv("YY_DEBUG_PY_TRACE", raising=False)
    state = ReplState()

    assert handle_slash("/py-traceback on", state)
    assert os.environ["YY_DEBUG_PY_TRACE"] == "1"
    assert handle_slash("/py-traceback", state)
    assert "YY_DEBUG_PY_TRACE" not in os.environ
    assert capsys.readouterr().out == "Python traceback: on\nPython traceback: off\n"


def test_slash_help_lists_commands(capsys) -> None:
    assert handle_slash("/help", ReplState())

    out = capsys.readouterr().out
    for cmd in ("/clear", "/debug", "/help", "/py-traceback", "/reset"):
        assert cmd in out


def test_unknown_slash_command(capsys) -> None:
    assert handle_slash("/nope", ReplState())
    assert capsys.readouterr().err == "Unknown command: /nope\n"


def test_plain_line_is_not_a_command() -> None:
    assert not handle_slash("1 / 2", ReplState())


def test_debug_state_reaches_runner(capsys) -> None:
    state = ReplState(debug=True)

    eval_line("1 + 1", state)
    captured = capsys.readouterr()
    assert captured.err == "(1 + 1)\n"
    assert captured.out == "2\n"


def test_normalize_strips_invisible_characters() -> None:
    assert _normalize("1\u200b + \ufeff1\r") == "1 + 1"


def test_slash_completer() -> None:
    completions = list(_SlashCompleter().get_completions(Document("/de"), None))
    assert [c.text for c in completions] == ["/debug"]

    assert list(_SlashCompleter().get_completions(Document("de"), None)) == []


@pytest.mark.parametrize(
    "tt, group",
    [
        (TT.YIF, "keyword"),
        (TT.TRUE, "boolean"),
        (TT.NULL, "constant"),
        (TT.INT, "number"),
        (TT.TEMPLATE, "string"),
        (TT.IDENT, "identifier"),
        (TT.MACRO, "macro"),
        (TT.ERROR, "error"),
        (TT.LBRACE, "punctuation"),
        (TT.WALRUS, "operator"),
    ],
)
def test_token_group(tt: TT, group: str) -> None:
    assert token_group(tt) == group


def test_highlight_line_covers_text() -> None:
    text = "x := 1 // note"
    fragments = _highlight_line(text)

    assert "".join(frag for _, frag in fragments) == text
    assert (GROUP_STYLE["number"], "1 ") in fragments
    assert (GROUP_STYLE["comment"], "// note") in fragments


def test_highlight_line_keyword_first() -> None:
    fragments = _highlight_line("yif x { 1 }")
    assert fragments[0] == (GROUP_STYLE["keyword"], "yif")


def test_highlight_keeps_slashes_inside_strings() -> None:
    text = 'url := "a//b"'
    fragments = _highlight_line(text)

    assert "".join(frag for _, frag in fragments) == text
    assert (GROUP_STYLE["string"], '"a//b"') in fragments


def test_highlight_comment_only_line() -> None:
    assert (GROUP_STYLE["comment"], "// just a note") in _highlight_line("// just a note")
