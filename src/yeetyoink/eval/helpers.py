from __future__ import annotations

from typing import Callable

from ..runtime import Environment, YArray, YBool, YHashmap, YNull, YString, YValue, YikesNameError, lookup_builtin
from ..tree import Node

EvalFunc = Callable[[Node, Environment], YValue]

def is_truthy(val: YValue) -> bool:
    match val:
        case YBool(value=b):
            return b
        case YNull():
            return False
        case YString(value=s):
            return bool(s)
        case YArray(items=items):
            return bool(items)
        case YHashmap():
            return len(val) > 0
        case _:
            return True

def resolve_name(name: str, env: Environment) -> YValue:
    """Environment chain first, then builtins."""
    value = env.get(name)
    if value is not None:
        return value

    builtin = lookup_builtin(name)
    if builtin is not None:
        return builtin

    raise YikesNameError(f"identifier not found: {name}")
