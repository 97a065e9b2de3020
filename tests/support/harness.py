from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional, Tuple

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from yeetyoink.evaluator import define_macros, evaluate, expand_macros
from yeetyoink.lexer import Lexer, tokenize
from yeetyoink.parser import ParseError, Parser, parse_source
from yeetyoink.runner import run as run_program
from yeetyoink.runtime import (
    MacroError,
    Environment,
    YArray,
    YBool,
    YError,
    YFn,
    YHashmap,
    YInteger,
    YMacro,
    YNull,
    YNumber,
    YQuote,
    YRange,
    YString,
)
from yeetyoink.token_types import TT, Tok
from yeetyoink.tree import Program, render

RuntimeExpectation = Optional[Tuple[str, object]]

KEYWORDS = Lexer.KEYWORDS

__all__ = [
    "KEYWORDS",
    "TT",
    "Tok",
    "Environment",
    "MacroError",
    "ParseError",
    "Parser",
    "Program",
    "YArray",
    "YBool",
    "YError",
    "YFn",
    "YHashmap",
    "YInteger",
    "YMacro",
    "YNull",
    "YNumber",
    "YQuote",
    "YRange",
    "YString",
    "define_macros",
    "evaluate",
    "expand_macros",
    "parse_ok",
    "render",
    "render_source",
    "run_program",
    "run_runtime_case",
    "tokenize",
    "verify_result",
]


def parse_ok(code: str) -> Program:
    """Parse code and fail the test on any parse error."""
    program, errors = parse_source(code)
    assert not errors, f"unexpected parse errors: {[e.message for e in errors]}"
    return program


def render_source(code: str) -> str:
    return render(parse_ok(code))


def _plain(value: object) -> object:
    """Unwrap runtime values for comparison with Python literals."""
    match value:
        case YArray(items=items):
            return [_plain(item) for item in items]
        case YNull():
            return None
        case YInteger() | YNumber() | YString() | YBool():
            return value.value
        case _:
            return value


def verify_result(value: object, kind: str, expected: object) -> None:
    """Assert runtime result shape/value compatibility with the expectation."""
    match kind:
        case "integer":
            assert isinstance(
                value, YInteger
            ), f"expected YInteger, got {value!r}"
            assert value.value == expected, f"expected {expected}, got {value.value}"
            return
        case "number":
            assert isinstance(
                value, YNumber
            ), f"expected YNumber, got {value!r}"
            assert (
                abs(value.value - float(expected)) <= 1e-9
            ), f"expected {expected}, got {value.value}"
            return
        case "string":
            assert isinstance(
                value, YString
            ), f"expected YString, got {value!r}"
            assert (
                value.value == expected
            ), f"expected {expected!r}, got {value.value!r}"
            return
        case "bool":
            assert isinstance(
                value, YBool
            ), f"expected bool, got {value!r}"
            assert value.value is bool(expected), f"expected {expected}, got {value.value}"
            return
        case "null":
            assert isinstance(
                value, YNull
            ), f"expected YNull, got {value!r}"
            return
        case "array":
            assert isinstance(
                value, YArray
            ), f"expected YArray, got {value!r}"
            actual_items = _plain(value)
            assert (
                actual_items == expected
            ), f"expected {expected!r}, got {actual_items!r}"
            return
        case "error":
            assert isinstance(
                value, YError
            ), f"expected YError, got {value!r}"
            assert (
                value.message == expected
            ), f"expected {expected!r}, got {value.message!r}"
            return
        case "error_prefix":
            assert isinstance(
                value, YError
            ), f"expected YError, got {value!r}"
            assert value.message.startswith(
                str(expected)
            ), f"expected {expected!r}..., got {value.message!r}"
            return
        case "display":
            assert repr(value) == expected, f"expected {expected!r}, got {value!r}"
            return
        case _:
            raise AssertionError(f"unknown expectation kind {kind}")


def run_runtime_case(
    source: str,
    expectation: RuntimeExpectation,
    expected_exc: Optional[type],
) -> None:
    """Execute one runtime scenario with optional expected exception."""
    if expected_exc is not None:
        with pytest.raises(expected_exc):
            run_program(source)
        return

    result = run_program(source)
    if expectation is not None:
        verify_result(result, expectation[0], expectation[1])


def token_pairs(code: str) -> List[Tuple[TT, str]]:
    return [(tok.type, tok.value) for tok in tokenize(code) if tok.type != TT.EOF]
