"""AST node definitions, canonical printer and the `modify` tree walker.

Every node is an expression. Nodes are frozen dataclasses so a rewrite
(`modify`) always builds new nodes instead of editing shared subtrees; the
`offset` field is positional metadata and takes no part in equality, so two
trees with the same shape compare equal wherever they came from.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .token_types import Tok


@dataclass(frozen=True)
class Node:
    offset: int = field(default=-1, compare=False, repr=False, kw_only=True)


# ---------- literals ----------

@dataclass(frozen=True)
class IntegerLiteral(Node):
    value: int


@dataclass(frozen=True)
class NumberLiteral(Node):
    value: float


@dataclass(frozen=True)
class BooleanLiteral(Node):
    value: bool


@dataclass(frozen=True)
class NullLiteral(Node):
    pass


@dataclass(frozen=True)
class StringLiteral(Node):
    value: str


@dataclass(frozen=True)
class TemplateString(Node):
    """`template` uses `%s` for each hole and `%%` for a literal percent."""

    template: str
    values: Tuple[Node, ...]


@dataclass(frozen=True)
class ArrayLiteral(Node):
    elements: Tuple[Node, ...]


@dataclass(frozen=True)
class HashmapLiteral(Node):
    pairs: Tuple[Tuple[Node, Node], ...]


@dataclass(frozen=True)
class RangeLiteral(Node):
    start: Node
    end: Node


# ---------- expressions ----------

@dataclass(frozen=True)
class Identifier(Node):
    name: str


@dataclass(frozen=True)
class Prefix(Node):
    op: str
    right: Node


@dataclass(frozen=True)
class Infix(Node):
    op: str
    left: Node
    right: Node


@dataclass(frozen=True)
class And(Node):
    left: Node
    right: Node


@dataclass(frozen=True)
class Or(Node):
    left: Node
    right: Node


@dataclass(frozen=True)
class Index(Node):
    container: Node
    index: Node


@dataclass(frozen=True)
class Call(Node):
    callee: Node
    args: Tuple[Node, ...]


class AssignKind(Enum):
    DECLARE = ":="
    ASSIGN = "="


@dataclass(frozen=True)
class Assign(Node):
    target: Node
    value: Node
    kind: AssignKind


# ---------- blocks and control flow ----------

@dataclass(frozen=True)
class Block(Node):
    exprs: Tuple[Node, ...]


@dataclass(frozen=True)
class Yif(Node):
    cond: Node
    then: Block
    otherwise: Optional[Block] = None


@dataclass(frozen=True)
class Yoyo(Node):
    cond: Node
    body: Block


@dataclass(frozen=True)
class Yall(Node):
    key_name: str
    iterable: Node
    body: Block


@dataclass(frozen=True)
class Yeet(Node):
    value: Node


@dataclass(frozen=True)
class Yolo(Node):
    body: Block


@dataclass(frozen=True)
class Lambda(Node):
    params: Tuple[str, ...]
    body: Block


@dataclass(frozen=True)
class MacroLiteral(Node):
    params: Tuple[str, ...]
    body: Block


@dataclass(frozen=True)
class Bad(Node):
    token: Tok = field(compare=False)


@dataclass
class Program:
    exprs: List[Node]


# ---------- printer ----------

def render(node: Node | Program) -> str:
    """Canonical source form; parsing the output yields an equal tree."""
    match node:
        case Program(exprs=exprs):
            return "; ".join(render(e) for e in exprs)
        case IntegerLiteral(value=v):
            return str(v)
        case NumberLiteral(value=v):
            return _render_number(v)
        case BooleanLiteral(value=v):
            return "true" if v else "false"
        case NullLiteral():
            return "null"
        case StringLiteral(value=v):
            return _render_string(v)
        case TemplateString():
            return _render_template(node)
        case ArrayLiteral(elements=elements):
            return "[" + ", ".join(render(e) for e in elements) + "]"
        case HashmapLiteral(pairs=pairs):
            return "%{" + ", ".join(f"{render(k)}: {render(v)}" for k, v in pairs) + "}"
        case RangeLiteral(start=start, end=end):
            return f"({render(start)}..{render(end)})"
        case Identifier(name=name):
            return name
        case Prefix(op=op, right=right):
            return f"({op}{render(right)})"
        case Infix(op=op, left=left, right=right):
            return f"({render(left)} {op} {render(right)})"
        case And(left=left, right=right):
            return f"({render(left)} && {render(right)})"
        case Or(left=left, right=right):
            return f"({render(left)} || {render(right)})"
        case Index(container=container, index=index):
            return f"({render(container)}[{render(index)}])"
        case Call(callee=callee, args=args):
            return f"{render(callee)}(" + ", ".join(render(a) for a in args) + ")"
        case Assign(target=target, value=value, kind=kind):
            return f"({render(target)} {kind.value} {render(value)})"
        case Block(exprs=exprs):
            if not exprs:
                return "{}"
            return "{ " + "; ".join(render(e) for e in exprs) + " }"
        case Yif(cond=cond, then=then, otherwise=otherwise):
            out = f"yif {render(cond)} {render(then)}"
            if otherwise is not None:
                out += f" yels {render(otherwise)}"
            return out
        case Yoyo(cond=cond, body=body):
            return f"yoyo {render(cond)} {render(body)}"
        case Yall(key_name=key, iterable=iterable, body=body):
            return f"yall {key}: {render(iterable)} {render(body)}"
        case Yeet(value=value):
            return f"yeet {render(value)}"
        case Yolo(body=body):
            return f"yolo {render(body)}"
        case Lambda(params=params, body=body):
            return "\\" + _render_params(params) + render(body)
        case MacroLiteral(params=params, body=body):
            return "@\\" + _render_params(params) + render(body)
        case Bad(token=tok):
            return f"<bad {tok.value!r}>"
        case _:
            raise TypeError(f"cannot render {type(node).__name__}")


def _render_number(value: float) -> str:
    # the lexer has no exponent syntax
    text = format(Decimal(repr(value)), "f")
    return text if "." in text else text + ".0"


def _render_string(value: str) -> str:
    """
    `"` has no escape, so a string holding one prints as a backtick literal.

    Backtick literals keep `$` as is, which undoes the `$$` form stored for
    literal dollars. A backtick inside such a string becomes a `{"`"}` hole.
    """
    if '"' not in value:
        return f'"{value}"'

    text = value.replace("$$", "$").replace("{", "{{").replace("}", "}}")
    return "`" + text.replace("`", '{"`"}') + "`"


def _render_params(params: Tuple[str, ...]) -> str:
    if not params:
        return ""
    return ", ".join(params) + " "


def _render_template(node: TemplateString) -> str:
    out = "`"
    values = iter(node.values)
    text = node.template
    i = 0

    while i < len(text):
        ch = text[i]
        if ch == "%" and text[i + 1:i + 2] == "s":
            out += "{" + render(next(values)) + "}"
            i += 2
            continue
        if ch == "%" and text[i + 1:i + 2] == "%":
            out += "%"
            i += 2
            continue
        if ch in "{}":
            out += ch * 2
        else:
            out += ch
        i += 1

    return out + "`"


# ---------- tree walker ----------

ModifyFn = Callable[[Node], Node]


def modify(node: Node, fn: ModifyFn) -> Node:
    """Rebuild `node` bottom-up, passing every rebuilt node through `fn`.

    Children are visited before their parent, so `fn` sees each node with its
    children already modified. Untouched subtrees are shared, never mutated.
    """
    match node:
        case Prefix(right=right):
            node = dataclasses.replace(node, right=modify(right, fn))
        case Infix(left=left, right=right) | And(left=left, right=right) | Or(left=left, right=right):
            node = dataclasses.replace(node, left=modify(left, fn), right=modify(right, fn))
        case Index(container=container, index=index):
            node = dataclasses.replace(node, container=modify(container, fn), index=modify(index, fn))
        case Call(callee=callee, args=args):
            node = dataclasses.replace(
                node,
                callee=modify(callee, fn),
                args=tuple(modify(a, fn) for a in args),
            )
        case Assign(target=target, value=value):
            node = dataclasses.replace(node, target=modify(target, fn), value=modify(value, fn))
        case TemplateString(values=values):
            node = dataclasses.replace(node, values=tuple(modify(v, fn) for v in values))
        case ArrayLiteral(elements=elements):
            node = dataclasses.replace(node, elements=tuple(modify(e, fn) for e in elements))
        case HashmapLiteral(pairs=pairs):
            node = dataclasses.replace(
                node,
                pairs=tuple((modify(k, fn), modify(v, fn)) for k, v in pairs),
            )
        case RangeLiteral(start=start, end=end):
            node = dataclasses.replace(node, start=modify(start, fn), end=modify(end, fn))
        case Block(exprs=exprs):
            node = dataclasses.replace(node, exprs=tuple(modify(e, fn) for e in exprs))
        case Yif(cond=cond, then=then, otherwise=otherwise):
            node = dataclasses.replace(
                node,
                cond=modify(cond, fn),
                then=_modify_block(then, fn),
                otherwise=None if otherwise is None else _modify_block(otherwise, fn),
            )
        case Yoyo(cond=cond, body=body):
            node = dataclasses.replace(node, cond=modify(cond, fn), body=_modify_block(body, fn))
        case Yall(iterable=iterable, body=body):
            node = dataclasses.replace(node, iterable=modify(iterable, fn), body=_modify_block(body, fn))
        case Yeet(value=value):
            node = dataclasses.replace(node, value=modify(value, fn))
        case Yolo(body=body) | Lambda(body=body) | MacroLiteral(body=body):
            node = dataclasses.replace(node, body=_modify_block(body, fn))

    return fn(node)


def _modify_block(block: Block, fn: ModifyFn) -> Block:
    result = modify(block, fn)
    if isinstance(result, Block):
        return result
    # A rewrite replaced a whole block; keep the slot block-shaped
    return Block((result,), offset=result.offset)


def modify_program(program: Program, fn: ModifyFn) -> Program:
    """Apply `modify` to every top-level expression, in place."""
    program.exprs = [modify(e, fn) for e in program.exprs]
    return program
