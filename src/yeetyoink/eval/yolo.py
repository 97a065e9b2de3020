"""Coercing operators used inside `yolo { ... }`.

Infix rules live in a table keyed by (left type, right type, operator).
`object` in a key slot matches any value. A rule may return None to decline,
which drops through to the catch-all: stringify both sides and concatenate.
"""

from __future__ import annotations

import codecs
from typing import Callable, Dict, Iterable, Optional, Tuple, Union

from ..runtime import (
    FALSE,
    TRUE,
    Environment,
    YArray,
    YBool,
    YFn,
    YHashmap,
    YInteger,
    YNull,
    YNumber,
    YRange,
    YString,
    YValue,
    abyss,
    is_hashable,
)
from ..tree import Block, Call, Identifier, Infix, Prefix
from ..utils import parse_int, stringify
from .expr import apply_infix, apply_prefix

YoloRule = Callable[[str, YValue, YValue], Optional[YValue]]
TypeSpec = Union[type, Tuple[type, ...]]

_INFIX_RULES: Dict[Tuple[type, type, str], YoloRule] = {}

ARITHMETIC = ("+", "-", "*", "/")
ALL_OPS = ("+", "-", "*", "/", "%", "<", "<=", ">", ">=", "<<")
NUMERIC = (YInteger, YNumber)

def yolo_rule(left: TypeSpec, right: TypeSpec, ops: Iterable[str]):
    def dec(fn: YoloRule) -> YoloRule:
        lefts = left if isinstance(left, tuple) else (left,)
        rights = right if isinstance(right, tuple) else (right,)
        for lt in lefts:
            for rt in rights:
                for op in ops:
                    _INFIX_RULES[(lt, rt, op)] = fn
        return fn

    return dec

def yolo_infix(op: str, left: YValue, right: YValue) -> YValue:
    for key in (
        (type(left), type(right), op),
        (type(left), object, op),
        (object, type(right), op),
    ):
        rule = _INFIX_RULES.get(key)
        if rule is None:
            continue
        result = rule(op, left, right)
        if result is not None:
            return result

    return YString(stringify(left) + stringify(right))

def yolo_prefix(op: str, right: YValue) -> YValue:
    if op == "-":
        match right:
            case YString(value=s):
                return YString(codecs.encode(s, "rot13"))
            case YArray(items=items):
                return YArray([apply_prefix(op, item, True) for item in items])
            case YNull():
                return abyss()
            case YBool(value=b):
                return FALSE if b else TRUE
            case YRange(start=start, end=end):
                return YRange(end, start)
            case YHashmap():
                swapped = YHashmap()
                for pair in right.pairs():
                    if is_hashable(pair.value):
                        swapped.put(pair.value, pair.key)
                return swapped
            case YFn():
                body = Block((Prefix(op, right.body, offset=right.body.offset),))
                return YFn(right.params, body, right.env, name=right.name)

    return YString(op + stringify(right))

# ---------- numbers and arrays ----------

@yolo_rule(NUMERIC, YArray, ARITHMETIC)
def _number_array(op: str, left: YValue, right: YValue) -> YValue:
    return YArray([apply_infix(op, left, item, True) for item in right.items])

@yolo_rule(YArray, NUMERIC, ARITHMETIC)
def _array_number(op: str, left: YValue, right: YValue) -> YValue:
    return YArray([apply_infix(op, item, right, True) for item in left.items])

# order between a number and an array: `<` always holds, `>` never does
@yolo_rule(YInteger, YArray, ("<", ">"))
@yolo_rule(YArray, YInteger, ("<", ">"))
def _array_order(op: str, left: YValue, right: YValue) -> YValue:
    return TRUE if op == "<" else FALSE

# ---------- numbers and strings ----------

@yolo_rule(YString, YInteger, ALL_OPS)
def _string_integer(op: str, left: YValue, right: YValue) -> Optional[YValue]:
    parsed = parse_int(left.value)
    if parsed is not None:
        return apply_infix(op, YInteger(parsed), right, True)

    if op == "+":
        return YString(left.value + stringify(right))

    return _integer_string(op, right, left)

@yolo_rule(YInteger, YString, ALL_OPS)
def _integer_string(op: str, left: YValue, right: YValue) -> Optional[YValue]:
    parsed = parse_int(right.value)
    if parsed is not None:
        return apply_infix(op, left, YInteger(parsed), True)

    count = left.value

    if op == "*":
        if count < 0:
            return abyss()
        noun = COLLECTIVE_NOUNS.get(right.value.strip())
        if noun is not None:
            return YString(noun)
        return YString(right.value * count)

    if op == "/":
        if count <= 0:
            return abyss()
        return YArray([YString(ch) for ch in right.value])

    if op in ("<", ">"):
        return TRUE if op == "<" else FALSE

    return None

# ---------- booleans count as 1 / 0 ----------

@yolo_rule(NUMERIC, YBool, ALL_OPS)
def _number_bool(op: str, left: YValue, right: YValue) -> YValue:
    return apply_infix(op, left, YInteger(int(right.value)), True)

@yolo_rule(YBool, NUMERIC, ALL_OPS)
def _bool_number(op: str, left: YValue, right: YValue) -> YValue:
    return apply_infix(op, YInteger(int(left.value)), right, True)

# ---------- ranges shift and scale ----------

@yolo_rule(YRange, YInteger, ARITHMETIC)
def _range_integer(op: str, left: YValue, right: YValue) -> YValue:
    start = apply_infix(op, YInteger(left.start), right, True)
    end = apply_infix(op, YInteger(left.end), right, True)
    return YRange(start.value, end.value)

@yolo_rule(YInteger, YRange, ARITHMETIC)
def _integer_range(op: str, left: YValue, right: YValue) -> YValue:
    start = apply_infix(op, left, YInteger(right.start), True)
    end = apply_infix(op, left, YInteger(right.end), True)
    return YRange(start.value, end.value)

# ---------- functions ----------

@yolo_rule(YFn, object, ("+",))
def _function_plus(op: str, left: YValue, right: YValue) -> YValue:
    if isinstance(right, YFn):
        return compose(left, right)
    return bake_args(left, right)

@yolo_rule(object, YFn, ("+",))
def _plus_function(op: str, left: YValue, right: YValue) -> YValue:
    return bake_args(right, left)

@yolo_rule(YFn, object, tuple(op for op in ALL_OPS if op != "+"))
def _function_op(op: str, left: YValue, right: YValue) -> Optional[YValue]:
    from .macros import value_to_node

    operand = value_to_node(right, strict=False)
    if operand is None:
        return None
    body = Block((Infix(op, left.body, operand, offset=left.body.offset),))
    return YFn(left.params, body, left.env, name=left.name)

@yolo_rule(object, YFn, tuple(op for op in ALL_OPS if op != "+"))
def _op_function(op: str, left: YValue, right: YValue) -> Optional[YValue]:
    from .macros import value_to_node

    operand = value_to_node(left, strict=False)
    if operand is None:
        return None
    body = Block((Infix(op, operand, right.body, offset=right.body.offset),))
    return YFn(right.params, body, right.env, name=right.name)

def bake_args(fn: YFn, value: YValue) -> YFn:
    """Pre-bind parameters: hashmap by name, array by position, else the first one."""
    baked = fn.env.enclose()

    match value:
        case YNull():
            return fn
        case YHashmap():
            remaining = []
            for param in fn.params:
                bound = value.get(YString(param))
                if bound is None:
                    remaining.append(param)
                else:
                    baked.set(param, bound)
        case YArray(items=items):
            count = min(len(items), len(fn.params))
            for param, item in zip(fn.params, items):
                baked.set(param, item)
            remaining = list(fn.params[count:])
        case _:
            if not fn.params:
                return fn
            baked.set(fn.params[0], value)
            remaining = list(fn.params[1:])

    return YFn(tuple(remaining), fn.body, baked, name=fn.name)

def compose(first: YFn, second: YFn) -> YFn:
    """(first + second)(x) == second(first(x))"""
    env = Environment()
    env.set("<first>", first)
    env.set("<second>", second)

    inner = Call(Identifier("<first>"), tuple(Identifier(p) for p in first.params))
    body = Block((Call(Identifier("<second>"), (inner,)),))
    return YFn(first.params, body, env)

COLLECTIVE_NOUNS = {
    "actor": "cast",
    "angel": "choir",
    "ant": "army",
    "asteroid": "belt",
    "bacteria": "culture",
    "badger": "cete",
    "balloon": "festival",
    "banana": "bunch",
    "barracuda": "battery",
    "bat": "colony",
    "beaver": "colony",
    "bee": "commonwealth",
    "book": "library",
    "camel": "caravan",
    "cat": "destruction",
    "cheetah": "coalition",
    "chick": "chattering",
    "chicken": "cluck",
    "chimpanzee": "cartload",
    "clam": "bed",
    "coyote": "pack",
    "crocodile": "bask",
    "crow": "murder",
    "cutlery": "canteen",
    "deer": "bevy",
    "director": "board",
    "diver": "bubble",
    "doctor": "confab",
    "donkey": "drove",
    "dove": "bevy",
    "drawer": "chest",
    "duck": "badelynge",
    "eagle": "aerie",
    "economist": "clashing",
    "eel": "bind",
    "egg": "clutch",
    "event": "chain",
    "fairie": "charm",
    "ferret": "business",
    "finche": "charm",
    "fish": "haul",
    "flie": "business",
    "flour": "boll",
    "flower": "bouquet",
    "game": "bag",
    "giraffe": "corps",
    "goat": "drove",
    "gorilla": "band",
    "grape": "bunch",
    "grasshopper": "cloud",
    "grouse": "brood",
    "guillemot": "bazaar",
    "gun": "arsenal",
    "hawk": "aerie",
    "hedgehog": "array",
    "hen": "brood",
    "herring": "army",
    "hippopotamus": "crash",
    "horsemen": "cavalcade",
    "hound": "cry",
    "hummingbird": "charm",
    "hyena": "clan",
    "insect": "swarm",
    "island": "archipelago",
    "judge": "bench",
    "knight": "banner",
    "lark": "ascension",
    "leper": "colony",
    "matche": "chain",
    "meerkat": "mob",
    "monkey": "cartload",
    "mule": "barren",
    "musician": "band",
    "native": "tribe",
    "onlooker": "crowd",
    "otter": "bevy",
    "owl": "wisdom",
    "oyster": "bed",
    "paper": "budget",
    "partridge": "bew",
    "peasant": "toil",
    "performer": "troupe",
    "pheasant": "brace",
    "pigeon": "bunch",
    "polar bear": "aurora",
    "prairie dog": "coterie",
    "ptarmigan": "covey",
    "puffin": "circus",
    "quail": "bevy",
    "rabbit": "wrack",
    "raven": "conspiracy",
    "reed": "clump",
    "rhinoceros": "crash",
    "sailor": "crew",
    "salmon": "bind",
    "savage": "horde",
    "seal": "harem",
    "ship": "armada",
    "slug": "cornucopia",
    "soldier": "brigade",
    "spider": "cluster",
    "star": "constellation",
    "starling": "clutter",
    "student": "class",
    "swan": "bevy",
    "thief": "den",
    "tiger": "ambush",
    "toucan": "durante",
    "tree": "forest",
    "truck": "convoy",
    "turkey": "brood",
    "turtle": "bale",
    "unicorn": "blessing",
    "vulture": "wake",
    "widow": "ambush",
    "wigeon": "coil",
    "woodcock": "covey",
    "worm": "clew",
    "zebra": "zeal",
}
