"""
Token Types for the Y lexer and parser

Shared between lexer and parser to avoid circular dependencies.
"""

from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types"""

    # Literals
    INT = auto()
    NUMBER = auto()
    STRING = auto()
    TEMPLATE = auto()  # template segment followed by an interpolated expression
    TEMPLATE_END = auto()  # last segment of a template string
    IDENT = auto()

    # Keywords
    YIF = auto()
    YELS = auto()
    YEET = auto()
    YOYO = auto()
    YALL = auto()
    YOLO = auto()
    TRUE = auto()
    FALSE = auto()
    NULL = auto()

    # Operators
    ASSIGN = auto()
    WALRUS = auto()
    PLUSEQ = auto()
    MINUSEQ = auto()
    STAREQ = auto()
    SLASHEQ = auto()
    MODEQ = auto()
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    MOD = auto()
    BANG = auto()
    EQ = auto()
    NEQ = auto()
    LT = auto()
    LTE = auto()
    GT = auto()
    GTE = auto()
    SHL = auto()
    DOT = auto()
    RANGE = auto()
    AMP = auto()
    AND = auto()
    PIPE = auto()
    OR = auto()
    AT = auto()
    MACRO = auto()
    BACKSLASH = auto()

    # Delimiters
    LPAR = auto()
    RPAR = auto()
    LSQB = auto()
    RSQB = auto()
    LBRACE = auto()
    RBRACE = auto()
    HASHMAP = auto()
    COMMA = auto()
    COLON = auto()
    SEMI = auto()

    # Special
    ERROR = auto()
    EOF = auto()


@dataclass
class Tok:
    """Token with the offset of its first character in the source"""

    type: TT
    value: str
    offset: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, @{self.offset})"
