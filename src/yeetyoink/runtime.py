from __future__ import annotations

import importlib
from typing import List, Optional, Tuple

from .types import (
    ABYSS_TEXT,
    FALSE,
    NULL,
    TRUE,
    BuiltinFn,
    Builtins,
    Environment,
    HashKey,
    HashPair,
    MacroError,
    YArray,
    YBool,
    YBuiltin,
    YError,
    YFn,
    YHashmap,
    YInteger,
    YMacro,
    YNull,
    YNumber,
    YQuote,
    YRange,
    YOLO_KEY,
    YString,
    YValue,
    YeetSignal,
    YikesArityError,
    YikesAssertionError,
    YikesIndexError,
    YikesKeyError,
    YikesNameError,
    YikesRuntimeError,
    YikesTypeError,
    YikesZeroDivisionError,
    abyss,
    hash_key,
    is_hashable,
    to_bool,
    type_name,
)

_STDLIB_INITIALIZED = False

def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_builtin hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("yeetyoink.stdlib")
    _STDLIB_INITIALIZED = True

def register_builtin(name: str, *, arity: Optional[Tuple[int, int]] = None):
    """Register `fn(env, args)` as builtin `name`; arity is (min, max) inclusive."""
    def dec(fn: BuiltinFn):
        Builtins.functions[name] = YBuiltin(name=name, fn=fn, arity=arity)
        return fn

    return dec

def lookup_builtin(name: str) -> Optional[YBuiltin]:
    init_stdlib()
    return Builtins.functions.get(name)

def want_description(arity: Tuple[int, int]) -> str:
    lo, hi = arity
    if lo == hi:
        return str(lo)
    return f"{lo} or {hi}" if hi == lo + 1 else f"{lo}..{hi}"

def check_arity(name: str, args: List[YValue], arity: Optional[Tuple[int, int]]) -> None:
    if arity is None:
        return

    lo, hi = arity
    if not lo <= len(args) <= hi:
        raise YikesArityError(
            f"wrong number of args for {name} (got {len(args)}, want {want_description(arity)})"
        )

def call_builtin(builtin: YBuiltin, args: List[YValue], env: Environment) -> YValue:
    check_arity(builtin.name, args, builtin.arity)
    return builtin.fn(env, args)

def unsupported(fn_name: str, value: YValue) -> YikesTypeError:
    return YikesTypeError(f"unsupported argument type for {fn_name}, got {type_name(value)}")
