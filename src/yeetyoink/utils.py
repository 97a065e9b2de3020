from __future__ import annotations

import os
from typing import Optional

from .types import (
    YArray,
    YBool,
    YBuiltin,
    YFn,
    YHashmap,
    YInteger,
    YMacro,
    YNull,
    YNumber,
    YQuote,
    YRange,
    YString,
    YValue,
)

I64_MIN = -(2**63)
U64 = 2**64


def y_equals(lhs: YValue, rhs: YValue) -> bool:
    match (lhs, rhs):
        case (YNull(), YNull()):
            return True
        case (YInteger(value=a) | YNumber(value=a), YInteger(value=b) | YNumber(value=b)):
            return a == b
        case (YString(value=a), YString(value=b)):
            return a == b
        case (YBool(value=a), YBool(value=b)):
            return a == b
        case (YRange(), YRange()):
            return lhs.start == rhs.start and lhs.end == rhs.end
        case (YArray(items=items_a), YArray(items=items_b)):
            return len(items_a) == len(items_b) and all(
                y_equals(a, b) for a, b in zip(items_a, items_b)
            )
        case (YHashmap(), YHashmap()):
            if len(lhs) != len(rhs):
                return False
            for pair in lhs.pairs():
                other = rhs.get(pair.key)
                if other is None or not y_equals(pair.value, other):
                    return False
            return True
        case (YQuote(node=a), YQuote(node=b)):
            return a == b
        case (YFn(), YFn()) | (YMacro(), YMacro()) | (YBuiltin(), YBuiltin()):
            return lhs is rhs
        case _:
            return False


def stringify(value: Optional[YValue]) -> str:
    """Display form, except that strings render without quotes."""
    if isinstance(value, YString):
        return value.value

    if value is None:
        return "null"

    return repr(value)


# ---------- 64-bit integer arithmetic ----------

def wrap_i64(value: int) -> int:
    return (value - I64_MIN) % U64 + I64_MIN


def int_div(a: int, b: int) -> int:
    """Division truncating toward zero."""
    q = abs(a) // abs(b)
    return wrap_i64(q if (a < 0) == (b < 0) else -q)


def int_mod(a: int, b: int) -> int:
    """Remainder taking the sign of the dividend."""
    r = abs(a) % abs(b)
    return -r if a < 0 else r


def parse_int(text: str) -> Optional[int]:
    """Integer value of `text` if it is a plain (optionally signed) decimal."""
    body = text[1:] if text[:1] in ("+", "-") else text
    if not body or not body.isascii() or not body.isdigit():
        return None
    value = int(text)
    if value != wrap_i64(value):
        return None
    return value


# ---------- configuration ----------

def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


def debug_enabled() -> bool:
    """YY_DEBUG: dump the macro-expanded program before evaluating it."""
    return _env_flag("YY_DEBUG")


def debug_py_trace_enabled() -> bool:
    """YY_DEBUG_PY_TRACE: show Python tracebacks for runtime errors."""
    return _env_flag("YY_DEBUG_PY_TRACE")


# ---------- diagnostics ----------

def line_col(source: str, offset: int) -> tuple[int, int]:
    """1-based line and column of `offset` in `source`."""
    offset = max(0, min(offset, len(source)))
    line = source.count("\n", 0, offset) + 1
    last_nl = source.rfind("\n", 0, offset)
    col = offset + 1 if last_nl == -1 else offset - last_nl
    return line, col


def pretty_error(source: str, offset: Optional[int], message: str) -> str:
    """Render an error with the offending source line and a caret."""
    if offset is None:
        return f"error: {message}"

    line, col = line_col(source, offset)
    text = source.split("\n")[line - 1] if source else ""
    gutter = f"{line:>3} | "
    caret = " " * (len(gutter) + col - 1) + "^"
    return f"error: {message}\n{gutter}{text}\n{caret}"
