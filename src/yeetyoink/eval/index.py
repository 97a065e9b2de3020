from __future__ import annotations

from typing import Tuple

from ..runtime import (
    NULL,
    Environment,
    YArray,
    YHashmap,
    YInteger,
    YRange,
    YString,
    YValue,
    YikesIndexError,
    type_name,
)
from ..tree import Index
from .helpers import EvalFunc

def eval_index(node: Index, env: Environment, eval_func: EvalFunc) -> YValue:
    container = eval_func(node.container, env)
    index = eval_func(node.index, env)
    return index_value(container, index)

def index_value(container: YValue, index: YValue) -> YValue:
    match (container, index):
        case (YArray(items=items), YInteger(value=i)):
            return items[i] if 0 <= i < len(items) else NULL
        case (YArray(items=items), YRange()):
            lo, hi = slice_bounds(index, len(items))
            return YArray(items[lo:hi])
        case (YString(value=s), YInteger(value=i)):
            return YString(s[i]) if 0 <= i < len(s) else NULL
        case (YString(value=s), YRange()):
            lo, hi = slice_bounds(index, len(s))
            return YString(s[lo:hi])
        case (YHashmap(), _):
            found = container.get(index)
            return NULL if found is None else found
        case _:
            raise YikesIndexError(
                f"index operator not supported: {type_name(container)}[{type_name(index)}]"
            )

def slice_bounds(rng: YRange, size: int) -> Tuple[int, int]:
    """Clamp a range to [0, size]; the end is exclusive and never before the start."""
    lo = min(max(0, rng.start), size)
    hi = min(max(lo, rng.end), size)
    return lo, hi
