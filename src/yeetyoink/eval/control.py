from __future__ import annotations

from ..runtime import NULL, TRUE, YOLO_KEY, Environment, YValue, YeetSignal
from ..tree import Block, Yeet, Yif, Yolo
from .helpers import EvalFunc, is_truthy

def eval_block(node: Block, env: Environment, eval_func: EvalFunc) -> YValue:
    """A block is worth its last expression; empty blocks are null."""
    result: YValue = NULL
    for expr in node.exprs:
        result = eval_func(expr, env)
    return result

def eval_yif(node: Yif, env: Environment, eval_func: EvalFunc) -> YValue:
    if is_truthy(eval_func(node.cond, env)):
        return eval_block(node.then, env, eval_func)

    if node.otherwise is not None:
        return eval_block(node.otherwise, env, eval_func)

    return NULL

def eval_yeet(node: Yeet, env: Environment, eval_func: EvalFunc) -> YValue:
    raise YeetSignal(eval_func(node.value, env))

def eval_yolo(node: Yolo, env: Environment, eval_func: EvalFunc) -> YValue:
    yolo_env = env.enclose()
    yolo_env.set(YOLO_KEY, TRUE)
    return eval_block(node.body, yolo_env, eval_func)
