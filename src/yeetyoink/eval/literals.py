from __future__ import annotations

from typing import List

from ..runtime import (
    Environment,
    YArray,
    YHashmap,
    YInteger,
    YRange,
    YString,
    YikesKeyError,
    YikesTypeError,
    is_hashable,
    type_name,
)
from ..tree import ArrayLiteral, HashmapLiteral, RangeLiteral, StringLiteral, TemplateString
from ..utils import stringify
from .helpers import EvalFunc, resolve_name

def eval_string(node: StringLiteral, env: Environment) -> YString:
    """Plain strings substitute `$name`; `$$` is a literal `$`."""
    text = node.value

    if "$" not in text:
        return YString(text)

    return YString(interpolate_dollars(text, env))

def interpolate_dollars(text: str, env: Environment) -> str:
    out: List[str] = []
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]

        if ch != "$":
            out.append(ch)
            i += 1
            continue

        nxt = text[i + 1:i + 2]

        if nxt == "$":
            out.append("$")
            i += 2
            continue

        if nxt == "_" or (nxt.isascii() and nxt.isalpha()):
            j = i + 1
            while j < n and (text[j] == "_" or (text[j].isascii() and text[j].isalnum())):
                j += 1
            out.append(stringify(resolve_name(text[i + 1:j], env)))
            i = j
            continue

        out.append("$")
        i += 1

    return "".join(out)

def eval_template(node: TemplateString, env: Environment, eval_func: EvalFunc) -> YString:
    parts = tuple(stringify(eval_func(value, env)) for value in node.values)
    return YString(node.template % parts)

def eval_array(node: ArrayLiteral, env: Environment, eval_func: EvalFunc) -> YArray:
    return YArray([eval_func(element, env) for element in node.elements])

def eval_hashmap(node: HashmapLiteral, env: Environment, eval_func: EvalFunc) -> YHashmap:
    result = YHashmap()

    for key_node, value_node in node.pairs:
        key = eval_func(key_node, env)

        if not is_hashable(key):
            raise YikesKeyError(f"key not hashable: {type_name(key)}")

        result.put(key, eval_func(value_node, env))

    return result

def eval_range(node: RangeLiteral, env: Environment, eval_func: EvalFunc) -> YRange:
    start = eval_func(node.start, env)
    end = eval_func(node.end, env)

    if not isinstance(start, YInteger) or not isinstance(end, YInteger):
        raise YikesTypeError(
            f"range endpoints must be integers, got {type_name(start)}..{type_name(end)}"
        )

    return YRange(start.value, end.value)

def range_values(rng: YRange):
    """Inclusive walk from start to end in whichever direction they point."""
    step = 1 if rng.start <= rng.end else -1
    for i in range(rng.start, rng.end + step, step):
        yield YInteger(i)
