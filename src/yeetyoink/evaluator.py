from __future__ import annotations

import sys
from typing import Callable, Dict, Optional

from .runtime import (
    NULL,
    Environment,
    YError,
    YInteger,
    YNumber,
    YValue,
    YeetSignal,
    YikesRuntimeError,
    YikesTypeError,
    init_stdlib,
    to_bool,
)
from .tree import (
    And,
    ArrayLiteral,
    Assign,
    Bad,
    Block,
    BooleanLiteral,
    Call,
    HashmapLiteral,
    Identifier,
    Index,
    Infix,
    IntegerLiteral,
    Lambda,
    MacroLiteral,
    Node,
    NullLiteral,
    NumberLiteral,
    Or,
    Prefix,
    Program,
    RangeLiteral,
    StringLiteral,
    TemplateString,
    Yall,
    Yeet,
    Yif,
    Yolo,
    Yoyo,
)

from .eval.control import eval_block, eval_yeet, eval_yif, eval_yolo
from .eval.expr import eval_and, eval_infix, eval_or, eval_prefix
from .eval.fn import eval_call, eval_lambda, eval_macro_literal
from .eval.helpers import resolve_name
from .eval.index import eval_index
from .eval.literals import eval_array, eval_hashmap, eval_range, eval_string, eval_template
from .eval.loops import eval_yall, eval_yoyo
from .eval import macros
from .eval.mutation import eval_assign

# Roughly a dozen Python frames per Y call, so about 8000 nested calls.
# Relies on Python 3.11+ keeping Python-to-Python calls off the C stack.
RECURSION_LIMIT = 100_000

# ---------------- Public API ----------------

def evaluate(program: Program, env: Optional[Environment] = None) -> YValue:
    """Run a (macro-expanded) program. Runtime failures come back as YError."""
    init_stdlib()

    if env is None:
        env = Environment()

    old_limit = sys.getrecursionlimit()
    sys.setrecursionlimit(max(old_limit, RECURSION_LIMIT))

    try:
        result: YValue = NULL
        for expr in program.exprs:
            result = eval_node(expr, env)
        return result
    except YeetSignal as signal:
        return signal.value
    except YikesRuntimeError as e:
        return YError(e.message, e.offset, py_trace=e.__traceback__)
    except RecursionError:
        return YError("maximum recursion depth exceeded")
    finally:
        sys.setrecursionlimit(old_limit)

def define_macros(program: Program, env: Environment) -> None:
    macros.define_macros(program, env)

def expand_macros(program: Program, env: Environment) -> Program:
    init_stdlib()
    return macros.expand_macros(program, env, eval_node)

# ---------------- Core evaluator ----------------

def eval_node(n: Node, env: Environment) -> YValue:
    # one frame per node: each Y call nests several of these
    handler = _NODE_DISPATCH.get(type(n))
    try:
        if handler is None:
            raise YikesTypeError(f"cannot evaluate {type(n).__name__}")
        return handler(n, env)
    except YikesRuntimeError as e:
        if e.offset is None and n.offset >= 0:
            e.offset = n.offset
        raise

def _eval_bad(n: Bad, _env: Environment) -> YValue:
    raise YikesTypeError(f"cannot evaluate malformed expression near {n.token.value!r}")

_NODE_DISPATCH: Dict[type, Callable[[Node, Environment], YValue]] = {
    IntegerLiteral: lambda n, env: YInteger(n.value),
    NumberLiteral: lambda n, env: YNumber(n.value),
    BooleanLiteral: lambda n, env: to_bool(n.value),
    NullLiteral: lambda n, env: NULL,
    StringLiteral: eval_string,
    TemplateString: lambda n, env: eval_template(n, env, eval_node),
    ArrayLiteral: lambda n, env: eval_array(n, env, eval_node),
    HashmapLiteral: lambda n, env: eval_hashmap(n, env, eval_node),
    RangeLiteral: lambda n, env: eval_range(n, env, eval_node),
    Identifier: lambda n, env: resolve_name(n.name, env),
    Prefix: lambda n, env: eval_prefix(n, env, eval_node),
    Infix: lambda n, env: eval_infix(n, env, eval_node),
    And: lambda n, env: eval_and(n, env, eval_node),
    Or: lambda n, env: eval_or(n, env, eval_node),
    Index: lambda n, env: eval_index(n, env, eval_node),
    Call: lambda n, env: eval_call(n, env, eval_node),
    Assign: lambda n, env: eval_assign(n, env, eval_node),
    Block: lambda n, env: eval_block(n, env, eval_node),
    Yif: lambda n, env: eval_yif(n, env, eval_node),
    Yoyo: lambda n, env: eval_yoyo(n, env, eval_node),
    Yall: lambda n, env: eval_yall(n, env, eval_node),
    Yeet: lambda n, env: eval_yeet(n, env, eval_node),
    Yolo: lambda n, env: eval_yolo(n, env, eval_node),
    Lambda: eval_lambda,
    MacroLiteral: eval_macro_literal,
    Bad: _eval_bad,
}
