"""quote/unquote and the two macro passes that run before evaluation."""

from __future__ import annotations

from typing import Optional

from ..runtime import (
    Environment,
    MacroError,
    YArray,
    YBool,
    YInteger,
    YMacro,
    YNull,
    YNumber,
    YQuote,
    YRange,
    YString,
    YValue,
    YeetSignal,
    YikesArityError,
    YikesRuntimeError,
    YikesTypeError,
    type_name,
)
from ..tree import (
    ArrayLiteral,
    Assign,
    BooleanLiteral,
    Call,
    Identifier,
    IntegerLiteral,
    MacroLiteral,
    Node,
    NullLiteral,
    NumberLiteral,
    Program,
    RangeLiteral,
    StringLiteral,
    modify,
    modify_program,
)
from .control import eval_block
from .helpers import EvalFunc

# ---------- quote / unquote ----------

def eval_quote(node: Call, env: Environment, eval_func: EvalFunc) -> YQuote:
    if len(node.args) != 1:
        raise YikesArityError(f"wrong number of args for quote (got {len(node.args)}, want 1)")

    return YQuote(unquote_calls(node.args[0], env, eval_func))

def unquote_calls(quoted: Node, env: Environment, eval_func: EvalFunc) -> Node:
    def splice(node: Node) -> Node:
        if not _is_unquote(node):
            return node
        value = eval_func(node.args[0], env)
        return value_to_node(value, offset=node.offset)

    return modify(quoted, splice)

def _is_unquote(node: Node) -> bool:
    return (
        isinstance(node, Call)
        and isinstance(node.callee, Identifier)
        and node.callee.name == "unquote"
        and len(node.args) == 1
    )

def value_to_node(value: YValue, offset: int = -1, strict: bool = True) -> Optional[Node]:
    """AST literal that evaluates back to `value`.

    Values with no literal form raise, or give None when `strict` is off.
    """
    match value:
        case YQuote(node=node):
            return node
        case YBool(value=b):
            return BooleanLiteral(b, offset=offset)
        case YInteger(value=i):
            return IntegerLiteral(i, offset=offset)
        case YNumber(value=f):
            return NumberLiteral(f, offset=offset)
        case YString(value=s):
            # re-reading the literal must not interpolate
            return StringLiteral(s.replace("$", "$$"), offset=offset)
        case YNull():
            return NullLiteral(offset=offset)
        case YRange(start=start, end=end):
            return RangeLiteral(IntegerLiteral(start), IntegerLiteral(end), offset=offset)
        case YArray(items=items):
            elements = [value_to_node(item, offset, strict) for item in items]
            if any(e is None for e in elements):
                return None
            return ArrayLiteral(tuple(elements), offset=offset)

    if strict:
        raise YikesTypeError(f"cannot unquote {type_name(value)}")
    return None

# ---------- macro passes ----------

def define_macros(program: Program, env: Environment) -> None:
    """Bind every top-level `name := @\\...` and drop it from the program."""
    kept = []

    for expr in program.exprs:
        if (
            isinstance(expr, Assign)
            and isinstance(expr.target, Identifier)
            and isinstance(expr.value, MacroLiteral)
        ):
            macro = expr.value
            env.set(
                expr.target.name,
                YMacro(params=macro.params, body=macro.body, env=env, name=expr.target.name),
            )
            continue
        kept.append(expr)

    program.exprs = kept

def expand_macros(program: Program, env: Environment, eval_func: EvalFunc) -> Program:
    """Replace each call to a bound macro with the AST its body quotes."""
    def expand(node: Node) -> Node:
        if not isinstance(node, Call) or not isinstance(node.callee, Identifier):
            return node

        macro = env.get(node.callee.name)
        if not isinstance(macro, YMacro):
            return node

        return _expand_call(macro, node, eval_func)

    return modify_program(program, expand)

def _expand_call(macro: YMacro, call: Call, eval_func: EvalFunc) -> Node:
    name = macro.name or "<macro>"

    if len(call.args) != len(macro.params):
        raise MacroError(
            f"wrong number of args for {name} (got {len(call.args)}, want {len(macro.params)})",
            call.offset,
        )

    macro_env = macro.env.enclose()
    for param, arg in zip(macro.params, call.args):
        macro_env.set(param, YQuote(arg))

    try:
        result = eval_block(macro.body, macro_env, eval_func)
    except YeetSignal as signal:
        result = signal.value
    except MacroError:
        raise
    except YikesRuntimeError as e:
        raise MacroError(f"error expanding {name}: {e.message}", call.offset) from e

    if not isinstance(result, YQuote):
        raise MacroError("only quoted nodes can be returned from macros", call.offset)

    return result.node
