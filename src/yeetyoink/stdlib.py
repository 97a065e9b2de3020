"""Builtin functions (len, yoink, yell, ...) registered via register_builtin."""

from __future__ import annotations

from typing import List

from .runtime import (
    NULL,
    Environment,
    YArray,
    YBool,
    YHashmap,
    YInteger,
    YNumber,
    YRange,
    YString,
    YValue,
    YikesAssertionError,
    YikesIndexError,
    YikesTypeError,
    register_builtin,
    type_name,
    unsupported,
)
from .eval.helpers import is_truthy
from .utils import parse_int, stringify

@register_builtin("len", arity=(1, 1))
def std_len(_env: Environment, args: List[YValue]) -> YInteger:
    match args[0]:
        case YString(value=s):
            return YInteger(len(s.encode("utf-8")))
        case YArray(items=items):
            return YInteger(len(items))
        case YHashmap() | YRange() as sized:
            return YInteger(len(sized))
        case other:
            raise unsupported("len", other)

@register_builtin("last", arity=(1, 1))
def std_last(_env: Environment, args: List[YValue]) -> YValue:
    arr = _array_arg("last", args[0])
    return arr.items[-1] if arr.items else NULL

@register_builtin("rest", arity=(1, 1))
def std_rest(_env: Environment, args: List[YValue]) -> YValue:
    arr = _array_arg("rest", args[0])
    return YArray(arr.items[1:]) if arr.items else NULL

@register_builtin("push", arity=(2, 2))
def std_push(_env: Environment, args: List[YValue]) -> YArray:
    arr = _array_arg("push", args[0])
    return YArray(arr.items + [args[1]])

@register_builtin("yoink", arity=(1, 2))
def std_yoink(_env: Environment, args: List[YValue]) -> YValue:
    """Remove and return one element (default: the last). Mutates its argument."""
    target = args[0]

    if not isinstance(target, (YArray, YString)):
        raise YikesIndexError(f"cannot yoink from {type_name(target)}")

    size = len(target.items) if isinstance(target, YArray) else len(target.value)
    idx = size - 1

    if len(args) == 2:
        if not isinstance(args[1], YInteger):
            raise unsupported("yoink", args[1])
        idx = args[1].value

    if not 0 <= idx < size:
        return NULL

    if isinstance(target, YArray):
        return target.items.pop(idx)

    ch = target.value[idx]
    target.value = target.value[:idx] + target.value[idx + 1:]
    return YString(ch)

@register_builtin("swap", arity=(3, 3))
def std_swap(_env: Environment, args: List[YValue]) -> YArray:
    arr = _array_arg("swap", args[0])
    i, j = args[1], args[2]

    if not isinstance(i, YInteger):
        raise unsupported("swap", i)
    if not isinstance(j, YInteger):
        raise unsupported("swap", j)

    size = len(arr.items)
    if 0 <= i.value < size and 0 <= j.value < size:
        arr.items[i.value], arr.items[j.value] = arr.items[j.value], arr.items[i.value]

    return arr

@register_builtin("yell")
def std_yell(_env: Environment, args: List[YValue]) -> YValue:
    print(*(stringify(arg).upper() for arg in args))
    return NULL

@register_builtin("yelp")
def std_yelp(_env: Environment, args: List[YValue]) -> YValue:
    print(*(stringify(arg) for arg in args))
    return NULL

@register_builtin("yap")
def std_yap(env: Environment, args: List[YValue]) -> YValue:
    return std_yelp(env, args)

@register_builtin("yassert", arity=(1, 2))
def std_yassert(_env: Environment, args: List[YValue]) -> YValue:
    if is_truthy(args[0]):
        return NULL

    if len(args) == 2:
        raise YikesAssertionError(f"yassert failed: {stringify(args[1])}")
    raise YikesAssertionError("yassert failed")

@register_builtin("yarn", arity=(1, 1))
def std_yarn(_env: Environment, args: List[YValue]) -> YString:
    return YString(stringify(args[0]))

@register_builtin("chr", arity=(1, 1))
def std_chr(_env: Environment, args: List[YValue]) -> YString:
    code = args[0]
    if not isinstance(code, YInteger):
        raise unsupported("chr", code)
    if not 0 <= code.value <= 0x10FFFF:
        raise YikesTypeError(f"chr argument out of range: {code.value}")
    return YString(chr(code.value))

@register_builtin("int", arity=(1, 1))
def std_int(_env: Environment, args: List[YValue]) -> YInteger:
    match args[0]:
        case YInteger() as i:
            return i
        case YNumber(value=f):
            return YInteger(int(f))
        case YBool(value=b):
            return YInteger(1 if b else 0)
        case YString(value=s):
            parsed = parse_int(s.strip())
            if parsed is not None:
                return YInteger(parsed)
            try:
                return YInteger(int(float(s)))
            except (ValueError, OverflowError):
                raise YikesTypeError(f"could not convert {s!r} to int") from None
        case other:
            raise unsupported("int", other)

@register_builtin("float", arity=(1, 1))
def std_float(_env: Environment, args: List[YValue]) -> YNumber:
    match args[0]:
        case YNumber() as f:
            return f
        case YInteger(value=i):
            return YNumber(float(i))
        case YBool(value=b):
            return YNumber(1.0 if b else 0.0)
        case YString(value=s):
            try:
                return YNumber(float(s))
            except ValueError:
                raise YikesTypeError(f"could not convert {s!r} to float") from None
        case other:
            raise unsupported("float", other)

def _array_arg(fn_name: str, value: YValue) -> YArray:
    if not isinstance(value, YArray):
        raise unsupported(fn_name, value)
    return value
