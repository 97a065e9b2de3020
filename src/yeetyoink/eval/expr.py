from __future__ import annotations

import math
from typing import Optional

from ..runtime import (
    Environment,
    YArray,
    YInteger,
    YNumber,
    YString,
    YValue,
    YikesTypeError,
    YikesZeroDivisionError,
    to_bool,
    type_name,
)
from ..tree import And, Identifier, Index, Infix, Or, Prefix
from ..utils import int_div, int_mod, wrap_i64, y_equals
from .helpers import EvalFunc, is_truthy

def eval_prefix(node: Prefix, env: Environment, eval_func: EvalFunc) -> YValue:
    right = eval_func(node.right, env)
    return apply_prefix(node.op, right, env.is_yolo())

def apply_prefix(op: str, right: YValue, yolo: bool) -> YValue:
    if op == "!":
        return to_bool(not is_truthy(right))

    match right:
        case YInteger(value=v):
            return YInteger(wrap_i64(-v))
        case YNumber(value=v):
            return YNumber(-v)

    if yolo:
        from .yolo import yolo_prefix
        return yolo_prefix(op, right)

    raise YikesTypeError(f"unknown operator: {op}{type_name(right)}")

def eval_infix(node: Infix, env: Environment, eval_func: EvalFunc) -> YValue:
    left = eval_func(node.left, env)
    right = eval_func(node.right, env)

    # `a << x` on a named array appends in place so later reads see it
    if node.op == "<<" and isinstance(left, YArray) and isinstance(node.left, (Identifier, Index)):
        left.items.append(right)
        return left

    return apply_infix(node.op, left, right, env.is_yolo())

def apply_infix(op: str, left: YValue, right: YValue, yolo: bool) -> YValue:
    if op == "==":
        return to_bool(y_equals(left, right))
    if op == "!=":
        return to_bool(not y_equals(left, right))

    result = _strict_infix(op, left, right)
    if result is not None:
        return result

    if yolo:
        from .yolo import yolo_infix
        return yolo_infix(op, left, right)

    lt, rt = type_name(left), type_name(right)
    if lt == rt or (_is_numeric(left) and _is_numeric(right)):
        raise YikesTypeError(f"unknown operator: {lt} {op} {rt}")
    raise YikesTypeError(f"type mismatch: {lt} {op} {rt}")

def _is_numeric(value: YValue) -> bool:
    return isinstance(value, (YInteger, YNumber))

def _strict_infix(op: str, left: YValue, right: YValue) -> Optional[YValue]:
    """Operators defined without coercion; None when the pair is unsupported."""
    match (left, right):
        case (YInteger(value=a), YInteger(value=b)):
            return _int_infix(op, a, b)
        case (YInteger(value=a) | YNumber(value=a), YInteger(value=b) | YNumber(value=b)):
            return _float_infix(op, float(a), float(b))
        case (YString(value=a), YString(value=b)) if op == "+":
            return YString(a + b)
        case (YArray(items=a), YArray(items=b)) if op == "+":
            return YArray(a + b)
        case (YArray(items=items), _) if op == "<<":
            return YArray(items + [right])
        case _:
            return None

def _int_infix(op: str, a: int, b: int) -> Optional[YValue]:
    match op:
        case "+":
            return YInteger(wrap_i64(a + b))
        case "-":
            return YInteger(wrap_i64(a - b))
        case "*":
            return YInteger(wrap_i64(a * b))
        case "/":
            if b == 0:
                raise YikesZeroDivisionError("division by zero")
            return YInteger(int_div(a, b))
        case "%":
            if b == 0:
                raise YikesZeroDivisionError("division by zero")
            return YInteger(int_mod(a, b))
        case "<":
            return to_bool(a < b)
        case "<=":
            return to_bool(a <= b)
        case ">":
            return to_bool(a > b)
        case ">=":
            return to_bool(a >= b)
        case _:
            return None

def _float_infix(op: str, a: float, b: float) -> Optional[YValue]:
    match op:
        case "+":
            return YNumber(a + b)
        case "-":
            return YNumber(a - b)
        case "*":
            return YNumber(a * b)
        case "/":
            if b == 0:
                raise YikesZeroDivisionError("division by zero")
            return YNumber(a / b)
        case "%":
            if b == 0:
                raise YikesZeroDivisionError("division by zero")
            return YNumber(math.fmod(a, b))
        case "<":
            return to_bool(a < b)
        case "<=":
            return to_bool(a <= b)
        case ">":
            return to_bool(a > b)
        case ">=":
            return to_bool(a >= b)
        case _:
            return None

def eval_and(node: And, env: Environment, eval_func: EvalFunc) -> YValue:
    left = eval_func(node.left, env)
    if not is_truthy(left):
        return left
    return eval_func(node.right, env)

def eval_or(node: Or, env: Environment, eval_func: EvalFunc) -> YValue:
    left = eval_func(node.left, env)
    if is_truthy(left):
        return left
    return eval_func(node.right, env)
