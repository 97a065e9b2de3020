from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import (
    Environment,
    MacroError,
    YMacro,
    define_macros,
    expand_macros,
    parse_ok,
    render,
    run_program,
    run_runtime_case,
)

from yeetyoink.eval.macros import value_to_node
from yeetyoink.runtime import YArray, YInteger, YString, YikesTypeError
from yeetyoink.tree import ArrayLiteral, IntegerLiteral, StringLiteral

UNLESS = "unless := @\\c, t, e { quote(yif (!(unquote(c))) { unquote(t) } yels { unquote(e) }) }"

QUOTE_SCENARIOS = [
    pytest.param("quote(5)", ("display", "quote(5)"), None, id="literal"),
    pytest.param("quote(5 + 8)", ("display", "quote((5 + 8))"), None, id="infix"),
    pytest.param("quote(foobar)", ("display", "quote(foobar)"), None, id="identifier"),
    pytest.param(
        "quote(foobar + barfoo)",
        ("display", "quote((foobar + barfoo))"),
        None,
        id="unbound-identifiers",
    ),
    pytest.param("quote(unquote(4))", ("display", "quote(4)"), None, id="unquote-literal"),
    pytest.param("quote(unquote(4 + 4))", ("display", "quote(8)"), None, id="unquote-evaluates"),
    pytest.param(
        "quote(8 + unquote(4 + 4))",
        ("display", "quote((8 + 8))"),
        None,
        id="unquote-right-operand",
    ),
    pytest.param(
        "quote(unquote(4 + 4) + 8)",
        ("display", "quote((8 + 8))"),
        None,
        id="unquote-left-operand",
    ),
    pytest.param(
        "foobar := 8; quote(foobar)",
        ("display", "quote(foobar)"),
        None,
        id="quote-keeps-identifier",
    ),
    pytest.param(
        "foobar := 8; quote(unquote(foobar))",
        ("display", "quote(8)"),
        None,
        id="unquote-identifier",
    ),
    pytest.param("quote(unquote(true))", ("display", "quote(true)"), None, id="unquote-true"),
    pytest.param(
        "quote(unquote(true == false))",
        ("display", "quote(false)"),
        None,
        id="unquote-comparison",
    ),
    pytest.param(
        "quote(unquote(quote(4 + 4)))",
        ("display", "quote((4 + 4))"),
        None,
        id="unquote-quote",
    ),
    pytest.param(
        dedent(
            """\
            quotedInfix := quote(4 + 4)
            quote(unquote(4 + 4) + unquote(quotedInfix))
        """
        ),
        ("display", "quote((8 + (4 + 4)))"),
        None,
        id="unquote-quoted-variable",
    ),
    pytest.param("quote(unquote(null))", ("display", "quote(null)"), None, id="unquote-null"),
    pytest.param("quote(unquote(1.5))", ("display", "quote(1.5)"), None, id="unquote-number"),
    pytest.param("quote(unquote([1, 2]))", ("display", "quote([1, 2])"), None, id="unquote-array"),
    pytest.param("quote(unquote(1..3))", ("display", "quote((1..3))"), None, id="unquote-range"),
    pytest.param(
        "quote(unquote(\\x { x }))",
        ("error", "cannot unquote FUNCTION"),
        None,
        id="unquote-function-rejected",
    ),
    pytest.param(
        "quote(unquote(%{}))",
        ("error", "cannot unquote HASHMAP"),
        None,
        id="unquote-hashmap-rejected",
    ),
    pytest.param(
        "quote()",
        ("error", "wrong number of args for quote (got 0, want 1)"),
        None,
        id="quote-no-args",
    ),
    pytest.param(
        "quote(1, 2)",
        ("error", "wrong number of args for quote (got 2, want 1)"),
        None,
        id="quote-two-args",
    ),
    pytest.param(
        "unquote(1)",
        ("error", "identifier not found: unquote"),
        None,
        id="unquote-outside-quote",
    ),
    pytest.param(
        "quote(1) == quote(1)",
        ("bool", True),
        None,
        id="quotes-compare-structurally",
    ),
]

MACRO_SCENARIOS = [
    pytest.param(
        UNLESS + '; unless(10 > 5, "not greater", "greater")',
        ("string", "greater"),
        None,
        id="unless",
    ),
    pytest.param(
        "m := @\\a { quote(unquote(a) + 1) }; f := \\x { x }; f(m(2))",
        ("integer", 3),
        None,
        id="expands-inside-call",
    ),
    pytest.param(
        "ignore := @\\a { quote(1) }; ignore(undefined_name)",
        ("integer", 1),
        None,
        id="arguments-not-evaluated",
    ),
    pytest.param(
        "twice := @\\a { quote({ unquote(a); unquote(a) }) }; n := 0; twice(n += 1); n",
        ("integer", 2),
        None,
        id="argument-spliced-twice",
    ),
    pytest.param(
        "m := @\\a { yeet quote(7) }; m(1)",
        ("integer", 7),
        None,
        id="yeet-from-macro-body",
    ),
    pytest.param(
        'm := @\\ { quote("a$$b") }; m()',
        ("string", "a$b"),
        None,
        id="quoted-string-literal",
    ),
    pytest.param(
        'm := @\\ { s := "$$x"; quote(unquote(s)) }; m()',
        ("string", "$x"),
        None,
        id="unquoted-string-not-reinterpolated",
    ),
    pytest.param(
        "m := @\\a { quote(unquote(a) * 2) }; yif true { m(21) }",
        ("integer", 42),
        None,
        id="expands-in-nested-block",
    ),
    pytest.param(
        "f := \\ { m := @\\ { quote(1) }; m() }; f()",
        ("error", "not a function: MACRO"),
        None,
        id="nested-macro-not-expanded",
    ),
    pytest.param("m := @\\a { quote(a) }; m(1, 2)", None, MacroError, id="arity-is-fatal"),
    pytest.param("m := @\\a { 1 / 0 }; m(1)", None, MacroError, id="body-error-is-fatal"),
    pytest.param("m := @\\a { a }; m(1)", ("integer", 1), None, id="returning-the-quoted-arg"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", QUOTE_SCENARIOS)
def test_quote(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


@pytest.mark.parametrize("source, expectation, expected_exc", MACRO_SCENARIOS)
def test_macros(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_define_macros_binds_and_strips() -> None:
    program = parse_ok(
        dedent(
            """\
            number := 1
            function := \\x, y { x + y }
            mymacro := @\\x, y { x + y }
            """
        )
    )
    env = Environment()
    define_macros(program, env)

    assert len(program.exprs) == 2
    assert env.get("number") is None
    assert env.get("function") is None

    macro = env.get("mymacro")
    assert isinstance(macro, YMacro)
    assert macro.params == ("x", "y")
    assert render(macro.body) == "{ (x + y) }"


def test_expand_unless_matches_literal_form() -> None:
    program = parse_ok(UNLESS + '; unless(69 > 7, yap("no"), yap("yes"))')
    env = Environment()
    define_macros(program, env)
    expand_macros(program, env)

    expected = parse_ok('yif (!(69 > 7)) { yap("no") } yels { yap("yes") }')
    assert program.exprs == expected.exprs


def test_expand_infix_macro() -> None:
    program = parse_ok("infixExpression := @\\ { quote(1 + 2) }; infixExpression()")
    env = Environment()
    define_macros(program, env)
    expand_macros(program, env)

    assert render(program) == "(1 + 2)"


def test_expand_reverse_macro() -> None:
    program = parse_ok(
        "reverse := @\\a, b { quote(unquote(b) - unquote(a)) }; reverse(2 + 2, 10 - 5)"
    )
    env = Environment()
    define_macros(program, env)
    expand_macros(program, env)

    assert render(program) == "((10 - 5) - (2 + 2))"


@pytest.mark.parametrize(
    "source, message",
    [
        pytest.param(
            "m := @\\a { quote(a) }; m()",
            "wrong number of args for m (got 0, want 1)",
            id="arity",
        ),
        pytest.param(
            "m := @\\a { 1 / 0 }; m(1)",
            "error expanding m: division by zero",
            id="body-error",
        ),
        pytest.param(
            "m := @\\ { 1 }; m()",
            "only quoted nodes can be returned from macros",
            id="non-quote",
        ),
    ],
)
def test_macro_error_messages(source: str, message: str) -> None:
    with pytest.raises(MacroError) as info:
        run_program(source)
    assert info.value.message == message


def test_macro_error_points_at_call_site() -> None:
    source = "m := @\\ { 1 }; m()"
    with pytest.raises(MacroError) as info:
        run_program(source)
    assert info.value.offset == source.index("()")


def test_debug_dumps_expanded_program(capsys) -> None:
    result = run_program("m := @\\a { quote(unquote(a) * 2) }; m(3)", debug=True)

    assert result == YInteger(6)
    assert capsys.readouterr().err == "(3 * 2)\n"


@pytest.mark.parametrize(
    "value, node",
    [
        pytest.param(YInteger(3), IntegerLiteral(3), id="integer"),
        pytest.param(YString("a$b"), StringLiteral("a$$b"), id="string-escapes-dollar"),
        pytest.param(
            YArray([YInteger(1), YString("x")]),
            ArrayLiteral((IntegerLiteral(1), StringLiteral("x"))),
            id="array",
        ),
    ],
)
def test_value_to_node(value, node) -> None:
    assert value_to_node(value) == node


def test_value_to_node_lenient_mode() -> None:
    fn = run_program("\\ { 1 }")
    assert value_to_node(fn, strict=False) is None
    assert value_to_node(YArray([fn]), strict=False) is None
    with pytest.raises(YikesTypeError):
        value_to_node(fn)
