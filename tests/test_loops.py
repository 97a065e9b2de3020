from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import run_runtime_case

SCENARIOS = [
    pytest.param(
        "i := 0; yoyo i < 5 { i += 1 }",
        ("integer", 5),
        None,
        id="yoyo-value-is-last-body",
    ),
    pytest.param(
        "i := 0; yoyo i < 5 { i += 1 }; i",
        ("integer", 5),
        None,
        id="yoyo-updates-outer",
    ),
    pytest.param("yoyo false { 1 }", ("null", None), None, id="yoyo-never-runs"),
    pytest.param("yoyo { yeet 7 }", ("integer", 7), None, id="yoyo-forever-until-yeet"),
    pytest.param(
        dedent(
            """\
            f := \\ {
              i := 0
              yoyo {
                i += 1
                yif i == 3 { yeet i * 10 }
              }
            }
            f()
        """
        ),
        ("integer", 30),
        None,
        id="yeet-leaves-loop-and-function",
    ),
    pytest.param(
        dedent(
            """\
            f := \\ {
              yall [1, 2, 3] { yif yt == 2 { yeet "found" } }
              "missing"
            };
            [f(), 1]
        """
        ),
        ("array", ["found", 1]),
        None,
        id="yeet-from-yall",
    ),
    pytest.param(
        "i := 0; yoyo i < 1 { j := 1; i += 1 }; j",
        ("error", "identifier not found: j"),
        None,
        id="yoyo-body-scope",
    ),
    pytest.param("yall [1, 2, 3] { yt }", ("integer", 3), None, id="yall-value-is-last"),
    pytest.param("yall [] { 1 }", ("null", None), None, id="yall-empty"),
    pytest.param(
        "s := 0; yall [1, 2, 3] { s += yt }; s",
        ("integer", 6),
        None,
        id="yall-array",
    ),
    pytest.param(
        's := []; yall "abc" { s << yt }; s',
        ("array", ["a", "b", "c"]),
        None,
        id="yall-string",
    ),
    pytest.param(
        "s := []; yall 1..3 { s << yt }; s",
        ("array", [1, 2, 3]),
        None,
        id="yall-range",
    ),
    pytest.param(
        "s := []; yall 3..1 { s << yt }; s",
        ("array", [3, 2, 1]),
        None,
        id="yall-range-descending",
    ),
    pytest.param(
        "s := []; yall 3 { s << yt }; s",
        ("array", [0, 1, 2, 3]),
        None,
        id="yall-integer-inclusive",
    ),
    pytest.param(
        "s := []; yall -2 { s << yt }; s",
        ("array", [-2, -1, 0]),
        None,
        id="yall-negative-integer",
    ),
    pytest.param(
        "s := 0; yall i: [1, 2] { s += i }; s",
        ("integer", 3),
        None,
        id="yall-named-key",
    ),
    pytest.param(
        "yall i: [1] { yt }",
        ("error", "identifier not found: yt"),
        None,
        id="yall-named-key-hides-yt",
    ),
    pytest.param(
        "yall [1] { yt }; yt",
        ("error", "identifier not found: yt"),
        None,
        id="yall-binding-does-not-leak",
    ),
    pytest.param(
        "a := [1, 2]; yall a { a << yt }; a",
        ("array", [1, 2, 1, 2]),
        None,
        id="yall-walks-a-snapshot",
    ),
    pytest.param(
        "yall 1.5 { 1 }",
        ("error", "cannot iterate over NUMBER"),
        None,
        id="yall-number-rejected",
    ),
    pytest.param(
        'yall %{"a": 1} { 1 }',
        ("error", "cannot iterate over HASHMAP"),
        None,
        id="yall-hashmap-rejected",
    ),
    pytest.param(
        dedent(
            """\
            n := 0
            yall 5 {
              n += 1
              yif n == 2 { boom }
            }
            n
        """
        ),
        ("error", "identifier not found: boom"),
        None,
        id="error-stops-loop",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_loops(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)
