from __future__ import annotations

from typing import List

from ..runtime import (
    Environment,
    YBuiltin,
    YFn,
    YMacro,
    YValue,
    YeetSignal,
    YikesArityError,
    YikesTypeError,
    call_builtin,
    type_name,
)
from ..tree import Call, Identifier, Lambda, MacroLiteral
from .control import eval_block
from .helpers import EvalFunc

def eval_lambda(node: Lambda, env: Environment) -> YFn:
    return YFn(params=node.params, body=node.body, env=env)

def eval_macro_literal(node: MacroLiteral, env: Environment) -> YMacro:
    return YMacro(params=node.params, body=node.body, env=env)

def eval_call(node: Call, env: Environment, eval_func: EvalFunc) -> YValue:
    if isinstance(node.callee, Identifier) and node.callee.name == "quote":
        from .macros import eval_quote
        return eval_quote(node, env, eval_func)

    callee = eval_func(node.callee, env)
    args = [eval_func(arg, env) for arg in node.args]
    return call_value(callee, args, env, eval_func)

def call_value(callee: YValue, args: List[YValue], env: Environment, eval_func: EvalFunc) -> YValue:
    match callee:
        case YFn():
            return call_fn(callee, args, eval_func)
        case YBuiltin():
            return call_builtin(callee, args, env)
        case _:
            raise YikesTypeError(f"not a function: {type_name(callee)}")

def call_fn(fn: YFn, args: List[YValue], eval_func: EvalFunc) -> YValue:
    """Run `fn` in a scope enclosing its captured env; `yeet` stops here."""
    if len(args) != len(fn.params):
        raise YikesArityError(
            f"wrong number of args for {fn.name or '<lambda>'} "
            f"(got {len(args)}, want {len(fn.params)})"
        )

    call_env = bind_params(fn.params, args, fn.env)

    try:
        return eval_block(fn.body, call_env, eval_func)
    except YeetSignal as signal:
        return signal.value

def bind_params(params, args: List[YValue], outer: Environment) -> Environment:
    call_env = outer.enclose()
    for name, value in zip(params, args):
        call_env.set(name, value)
    return call_env
