from __future__ import annotations

from dataclasses import dataclass, field
from types import TracebackType
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional, Tuple, Union
from typing_extensions import TypeAlias, TypeGuard

from .tree import Block, Node

# ---------- Value Model ----------

@dataclass
class YNull:
    def __repr__(self) -> str:
        return "null"

@dataclass
class YInteger:
    value: int
    def __repr__(self) -> str:
        return str(self.value)

@dataclass
class YNumber:
    value: float
    def __repr__(self) -> str:
        return repr(self.value)

@dataclass
class YBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass
class YString:
    """Mutable: index-assign and `yoink` rewrite `value` in place."""
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass
class YArray:
    items: List['YValue']
    def __repr__(self) -> str:
        return "[" + ", ".join(repr(x) for x in self.items) + "]"

@dataclass
class YRange:
    start: int
    end: int
    def __len__(self) -> int:
        return abs(self.end - self.start) + 1
    def __repr__(self) -> str:
        return f"{self.start}..{self.end}"

class HashKey(NamedTuple):
    type_tag: str
    value: int

@dataclass
class HashPair:
    key: 'YValue'
    value: 'YValue'

@dataclass
class YHashmap:
    """Pairs are bucketed by HashKey; a bucket holds every key that hashed there."""
    buckets: Dict[HashKey, List[HashPair]] = field(default_factory=dict)

    def get(self, key: 'YValue') -> Optional['YValue']:
        for pair in self.buckets.get(hash_key(key), ()):
            if _same_key(pair.key, key):
                return pair.value
        return None

    def put(self, key: 'YValue', value: 'YValue') -> None:
        bucket = self.buckets.setdefault(hash_key(key), [])
        for pair in bucket:
            if _same_key(pair.key, key):
                pair.value = value
                return
        bucket.append(HashPair(key, value))

    def pairs(self) -> Iterator[HashPair]:
        for bucket in self.buckets.values():
            yield from bucket

    def __len__(self) -> int:
        return sum(len(b) for b in self.buckets.values())

    def __repr__(self) -> str:
        return "%{" + ", ".join(f"{p.key!r}: {p.value!r}" for p in self.pairs()) + "}"

@dataclass(eq=False)
class YFn:
    params: Tuple[str, ...]
    body: Block
    env: 'Environment'
    name: Optional[str] = None
    def __repr__(self) -> str:
        from .tree import render
        return "\\" + ", ".join(self.params) + (" " if self.params else "") + render(self.body)

@dataclass(eq=False)
class YMacro:
    params: Tuple[str, ...]
    body: Block
    env: 'Environment'
    name: Optional[str] = None
    def __repr__(self) -> str:
        from .tree import render
        return "@\\" + ", ".join(self.params) + (" " if self.params else "") + render(self.body)

BuiltinFn = Callable[['Environment', List['YValue']], 'YValue']

@dataclass(frozen=True, eq=False)
class YBuiltin:
    name: str
    fn: BuiltinFn
    arity: Optional[Tuple[int, int]] = None
    def __repr__(self) -> str:
        return f"<builtin {self.name}>"

@dataclass
class YQuote:
    node: Node
    def __repr__(self) -> str:
        from .tree import render
        return f"quote({render(self.node)})"

@dataclass
class YError:
    """The value a failed program evaluates to."""
    message: str
    offset: Optional[int] = None
    py_trace: Optional[TracebackType] = field(default=None, compare=False, repr=False)
    def __repr__(self) -> str:
        return f"error: {self.message}"

YValue: TypeAlias = Union[
    YNull,
    YInteger,
    YNumber,
    YBool,
    YString,
    YArray,
    YHashmap,
    YRange,
    YFn,
    YMacro,
    YBuiltin,
    YQuote,
    YError,
]

# Canonical singletons
NULL = YNull()
TRUE = YBool(True)
FALSE = YBool(False)
ABYSS_TEXT = "Stare at the abyss long enough, and it starts to stare back at you."

def to_bool(value: bool) -> YBool:
    return TRUE if value else FALSE

def abyss() -> YString:
    # Strings are mutable, so every caller gets its own copy
    return YString(ABYSS_TEXT)

TYPE_NAMES: Dict[type, str] = {
    YInteger: "INTEGER",
    YNumber: "NUMBER",
    YBool: "BOOLEAN",
    YString: "STRING",
    YNull: "NULL",
    YArray: "ARRAY",
    YHashmap: "HASHMAP",
    YRange: "RANGE",
    YFn: "FUNCTION",
    YMacro: "MACRO",
    YBuiltin: "BUILTIN",
    YQuote: "QUOTE",
    YError: "ERROR",
}

def type_name(value: YValue) -> str:
    return TYPE_NAMES[type(value)]

# ---------- Hashing ----------

FNV_OFFSET_BASIS = 0xCBF29CE484222325
FNV_PRIME = 0x100000001B3
U64_MASK = 0xFFFFFFFFFFFFFFFF

def fnv1a_64(data: bytes) -> int:
    h = FNV_OFFSET_BASIS
    for byte in data:
        h ^= byte
        h = (h * FNV_PRIME) & U64_MASK
    return h

def is_hashable(value: YValue) -> TypeGuard[Union[YInteger, YBool, YString]]:
    return isinstance(value, (YInteger, YBool, YString))

def hash_key(value: YValue) -> HashKey:
    match value:
        case YBool(value=b):
            return HashKey("BOOLEAN", 1 if b else 0)
        case YInteger(value=i):
            return HashKey("INTEGER", i & U64_MASK)
        case YString(value=s):
            return HashKey("STRING", fnv1a_64(s.encode("utf-8")))
        case _:
            raise YikesKeyError(f"key not hashable: {type_name(value)}")

def _same_key(a: YValue, b: YValue) -> bool:
    return type(a) is type(b) and a.value == b.value  # type: ignore[union-attr]

# ---------- Environment ----------

# Not a valid identifier, so no program can bind or shadow it
YOLO_KEY = "<yolo>"

class Environment:
    def __init__(self, outer: Optional['Environment'] = None):
        self.outer = outer
        self.vars: Dict[str, YValue] = {}

    def get(self, name: str) -> Optional[YValue]:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.vars:
                return env.vars[name]
            env = env.outer
        return None

    def set(self, name: str, val: YValue) -> YValue:
        self.vars[name] = val
        return val

    def update(self, name: str, val: YValue) -> bool:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.vars:
                env.vars[name] = val
                return True
            env = env.outer
        return False

    def enclose(self) -> 'Environment':
        return Environment(outer=self)

    def is_yolo(self) -> bool:
        return self.get(YOLO_KEY) is not None

# ---------- Exceptions ----------

class YikesRuntimeError(Exception):
    """Base for every error a running program can raise."""
    def __init__(self, message: str, offset: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.offset = offset

class YikesTypeError(YikesRuntimeError):
    pass

class YikesNameError(YikesRuntimeError):
    pass

class YikesArityError(YikesRuntimeError):
    pass

class YikesIndexError(YikesRuntimeError):
    pass

class YikesKeyError(YikesRuntimeError):
    pass

class YikesZeroDivisionError(YikesRuntimeError):
    pass

class YikesAssertionError(YikesRuntimeError):
    pass

class MacroError(YikesRuntimeError):
    """Raised while expanding macros; expansion failures are fatal."""

class YeetSignal(Exception):
    """Internal control-flow exception used to implement `yeet`."""
    def __init__(self, value: YValue):
        self.value = value

# ---------- Builtin registry ----------

class Builtins:
    functions: Dict[str, YBuiltin] = {}
