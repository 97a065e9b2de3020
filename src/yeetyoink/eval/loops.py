from __future__ import annotations

from typing import Iterator

from ..runtime import (
    NULL,
    Environment,
    YArray,
    YInteger,
    YRange,
    YString,
    YValue,
    YikesTypeError,
    type_name,
)
from ..tree import Yall, Yoyo
from .control import eval_block
from .helpers import EvalFunc, is_truthy
from .literals import range_values

def eval_yoyo(node: Yoyo, env: Environment, eval_func: EvalFunc) -> YValue:
    loop_env = env.enclose()
    result: YValue = NULL

    while is_truthy(eval_func(node.cond, loop_env)):
        result = eval_block(node.body, loop_env, eval_func)

    return result

def eval_yall(node: Yall, env: Environment, eval_func: EvalFunc) -> YValue:
    iterable = eval_func(node.iterable, env)
    loop_env = env.enclose()
    result: YValue = NULL

    for item in iterate(iterable):
        loop_env.set(node.key_name, item)
        result = eval_block(node.body, loop_env, eval_func)

    return result

def iterate(value: YValue) -> Iterator[YValue]:
    match value:
        case YArray(items=items):
            # snapshot: the body may grow the array it walks
            return iter(list(items))
        case YString(value=s):
            return (YString(ch) for ch in s)
        case YRange():
            return range_values(value)
        case YInteger(value=n):
            return range_values(YRange(0, n) if n >= 0 else YRange(n, 0))
        case _:
            raise YikesTypeError(f"cannot iterate over {type_name(value)}")
