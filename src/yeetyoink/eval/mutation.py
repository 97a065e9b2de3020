from __future__ import annotations

from ..runtime import (
    Environment,
    YArray,
    YFn,
    YHashmap,
    YInteger,
    YString,
    YValue,
    YikesIndexError,
    YikesNameError,
    is_hashable,
    type_name,
)
from ..tree import Assign, AssignKind, Identifier, Index, Lambda, render
from ..utils import stringify
from .helpers import EvalFunc

def eval_assign(node: Assign, env: Environment, eval_func: EvalFunc) -> YValue:
    match node.target:
        case Identifier(name=name):
            value = eval_func(node.value, env)

            if node.kind is AssignKind.DECLARE:
                if isinstance(value, YFn) and value.name is None and isinstance(node.value, Lambda):
                    value.name = name
                return env.set(name, value)

            return assign_ident(name, value, env)

        case Index(container=container_node, index=index_node):
            container = eval_func(container_node, env)
            index = eval_func(index_node, env)
            value = eval_func(node.value, env)
            return set_index_value(container, index, value, render(container_node))

        case target:
            raise YikesNameError(f"cannot assign to {render(target)}")

def assign_ident(name: str, value: YValue, env: Environment) -> YValue:
    """Plain `=`: overwrite the nearest binding; yolo regions auto-declare."""
    if env.update(name, value):
        return value

    if env.is_yolo():
        return env.set(name, value)

    raise YikesNameError(f"identifier not found: {name} (to declare a variable use := operator)")

def set_index_value(container: YValue, index: YValue, value: YValue, name: str) -> YValue:
    match (container, index):
        case (YArray(items=items), YInteger(value=i)):
            if not 0 <= i < len(items):
                raise YikesIndexError(f"attempted to assign out of bounds for array '{name}'")
            items[i] = value
        case (YString(value=s), YInteger(value=i)):
            if not 0 <= i < len(s):
                raise YikesIndexError(f"attempted to assign out of bounds for string '{name}'")
            container.value = s[:i] + stringify(value) + s[i + 1:]
        case (YHashmap(), _):
            # unhashable keys leave the map untouched
            if is_hashable(index):
                container.put(index, value)
        case _:
            raise YikesIndexError(
                f"index operator not supported: {type_name(container)}[{type_name(index)}]"
            )

    return value
