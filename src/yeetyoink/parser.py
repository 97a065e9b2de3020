"""
Pratt parser for Y

Structure:
- Lexer: Token stream from source
- Parser: prefix/infix handler tables keyed by token type, one precedence
  ladder, and panic-mode recovery at statement boundaries
- AST: frozen dataclasses from `tree`
"""

from enum import IntEnum
from typing import Callable, Dict, List, Optional, Tuple

from .lexer import tokenize
from .token_types import TT, Tok
from .tree import (
    And,
    ArrayLiteral,
    Assign,
    AssignKind,
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
    render,
)

# ============================================================================
# Parser
# ============================================================================

I64_MAX = 2**63 - 1


class ParseError(Exception):
    """Parse error with the source offset it points at"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        self.offset = token.offset if token is not None else 0
        super().__init__(message)


class Precedence(IntEnum):
    LOWEST = 1
    ASSIGNMENT = 2
    OR = 3
    AND = 4
    EQUALS = 5
    LESSGREATER = 6
    RANGE = 7
    SUM = 8
    PRODUCT = 9
    PREFIX = 10
    CALL = 11
    INDEX = 12


PRECEDENCES: Dict[TT, Precedence] = {
    TT.ASSIGN: Precedence.ASSIGNMENT,
    TT.WALRUS: Precedence.ASSIGNMENT,
    TT.PLUSEQ: Precedence.ASSIGNMENT,
    TT.MINUSEQ: Precedence.ASSIGNMENT,
    TT.STAREQ: Precedence.ASSIGNMENT,
    TT.SLASHEQ: Precedence.ASSIGNMENT,
    TT.MODEQ: Precedence.ASSIGNMENT,
    TT.OR: Precedence.OR,
    TT.AND: Precedence.AND,
    TT.EQ: Precedence.EQUALS,
    TT.NEQ: Precedence.EQUALS,
    TT.LT: Precedence.LESSGREATER,
    TT.LTE: Precedence.LESSGREATER,
    TT.GT: Precedence.LESSGREATER,
    TT.GTE: Precedence.LESSGREATER,
    TT.SHL: Precedence.LESSGREATER,
    TT.RANGE: Precedence.RANGE,
    TT.PLUS: Precedence.SUM,
    TT.MINUS: Precedence.SUM,
    TT.STAR: Precedence.PRODUCT,
    TT.SLASH: Precedence.PRODUCT,
    TT.MOD: Precedence.PRODUCT,
    TT.LPAR: Precedence.CALL,
    TT.LSQB: Precedence.INDEX,
}

# Compound assignment token -> the infix operator it desugars to
COMPOUND_OPS: Dict[TT, str] = {
    TT.PLUSEQ: '+',
    TT.MINUSEQ: '-',
    TT.STAREQ: '*',
    TT.SLASHEQ: '/',
    TT.MODEQ: '%',
}

# Tokens that can start a fresh statement after an error
STATEMENT_STARTS = frozenset({
    TT.YEET, TT.YIF, TT.YALL, TT.YOYO, TT.YOLO, TT.BACKSLASH, TT.MACRO,
})

PrefixFn = Callable[[], Node]
InfixFn = Callable[[Node], Node]


class Parser:
    """
    Pratt parser for Y.

    Expression precedence (lowest to highest):
    1. assignment (= := += -= *= /= %=), right associative
    2. or (||)
    3. and (&&)
    4. equality (== !=)
    5. comparison (< <= > >=) and push (<<)
    6. range (..)
    7. additive (+ -)
    8. multiplicative (* / %)
    9. prefix (- !)
    10. call
    11. index
    """

    def __init__(self, tokens: List[Tok]):
        self.tokens = tokens
        self.pos = 0
        self.current = tokens[0] if tokens else Tok(TT.EOF, '', 0)
        self.errors: List[ParseError] = []
        self.panic_mode = False

        self.prefix_fns: Dict[TT, PrefixFn] = {
            TT.INT: self.parse_integer,
            TT.NUMBER: self.parse_number,
            TT.STRING: self.parse_string,
            TT.TEMPLATE: self.parse_template,
            TT.TRUE: self.parse_boolean,
            TT.FALSE: self.parse_boolean,
            TT.NULL: self.parse_null,
            TT.IDENT: self.parse_identifier,
            TT.MINUS: self.parse_prefix,
            TT.BANG: self.parse_prefix,
            TT.LPAR: self.parse_group,
            TT.LSQB: self.parse_array,
            TT.HASHMAP: self.parse_hashmap,
            TT.LBRACE: self.parse_block,
            TT.YIF: self.parse_yif,
            TT.YOYO: self.parse_yoyo,
            TT.YALL: self.parse_yall,
            TT.YEET: self.parse_yeet,
            TT.YOLO: self.parse_yolo,
            TT.BACKSLASH: self.parse_lambda,
            TT.MACRO: self.parse_lambda,
            TT.ERROR: self.parse_error_token,
        }

        self.infix_fns: Dict[TT, InfixFn] = {
            TT.PLUS: self.parse_infix,
            TT.MINUS: self.parse_infix,
            TT.STAR: self.parse_infix,
            TT.SLASH: self.parse_infix,
            TT.MOD: self.parse_infix,
            TT.EQ: self.parse_infix,
            TT.NEQ: self.parse_infix,
            TT.LT: self.parse_infix,
            TT.LTE: self.parse_infix,
            TT.GT: self.parse_infix,
            TT.GTE: self.parse_infix,
            TT.SHL: self.parse_infix,
            TT.AND: self.parse_logical,
            TT.OR: self.parse_logical,
            TT.RANGE: self.parse_range,
            TT.LPAR: self.parse_call,
            TT.LSQB: self.parse_index,
            TT.ASSIGN: self.parse_assign,
            TT.WALRUS: self.parse_assign,
            TT.PLUSEQ: self.parse_assign,
            TT.MINUSEQ: self.parse_assign,
            TT.STAREQ: self.parse_assign,
            TT.SLASHEQ: self.parse_assign,
            TT.MODEQ: self.parse_assign,
        }

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self, offset: int = 0) -> Tok:
        """Look ahead at token"""
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return self.tokens[-1]

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        self.current = self.tokens[self.pos]
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: Optional[str] = None) -> Tok:
        """Consume token of expected type or raise error"""
        if not self.check(token_type):
            raise ParseError(message or self._unexpected(self.current), self.current)
        return self.advance()

    def _unexpected(self, tok: Tok) -> str:
        if tok.type == TT.EOF:
            return "unexpected end of input"
        return f"unexpected '{tok.value}'"

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse_program(self) -> Program:
        """Parse every top-level expression, recovering after errors"""
        exprs: List[Node] = []

        while not self.check(TT.EOF):
            if self.match(TT.SEMI):
                continue

            start, start_pos = self.current, self.pos
            try:
                exprs.append(self.parse_expression(Precedence.LOWEST))
            except ParseError as err:
                self.report(err)
                exprs.append(Bad(start, offset=start.offset))
                self.sync()
                if self.pos == start_pos:
                    self.advance()

        return Program(exprs)

    def report(self, err: ParseError) -> None:
        if self.panic_mode:
            return
        self.panic_mode = True
        self.errors.append(err)

    def sync(self) -> None:
        """Skip to a `;` or a token that starts a new statement"""
        while not self.check(TT.EOF):
            if self.check(TT.SEMI) or self.current.type in STATEMENT_STARTS:
                break
            self.advance()

        self.panic_mode = False

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expression(self, min_prec: Precedence) -> Node:
        prefix = self.prefix_fns.get(self.current.type)
        if prefix is None:
            raise ParseError(self._unexpected(self.current), self.current)

        left = prefix()

        while PRECEDENCES.get(self.current.type, Precedence.LOWEST) > min_prec:
            infix = self.infix_fns[self.current.type]
            left = infix(left)

        return left

    def parse_error_token(self) -> Node:
        tok = self.current
        raise ParseError(tok.value, tok)

    # ---------- literals ----------

    def parse_integer(self) -> Node:
        tok = self.advance()
        value = int(tok.value)
        if value > I64_MAX:
            raise ParseError(f"could not parse {tok.value} as integer", tok)
        return IntegerLiteral(value, offset=tok.offset)

    def parse_number(self) -> Node:
        tok = self.advance()
        return NumberLiteral(float(tok.value), offset=tok.offset)

    def parse_string(self) -> Node:
        tok = self.advance()
        return StringLiteral(tok.value, offset=tok.offset)

    def parse_template(self) -> Node:
        """TEMPLATE (expr TEMPLATE)* expr TEMPLATE_END"""
        head = self.advance()
        segments = [head.value]
        values: List[Node] = []

        while True:
            values.append(self.parse_expression(Precedence.LOWEST))

            seg = self.current
            if seg.type not in (TT.TEMPLATE, TT.TEMPLATE_END):
                if seg.type == TT.ERROR:
                    raise ParseError(seg.value, seg)
                raise ParseError("expected '}' to close string interpolation", seg)

            self.advance()
            segments.append(seg.value)

            if seg.type == TT.TEMPLATE_END:
                break

        template = "%s".join(s.replace("%", "%%") for s in segments)
        return TemplateString(template, tuple(values), offset=head.offset)

    def parse_boolean(self) -> Node:
        tok = self.advance()
        return BooleanLiteral(tok.type == TT.TRUE, offset=tok.offset)

    def parse_null(self) -> Node:
        tok = self.advance()
        return NullLiteral(offset=tok.offset)

    def parse_identifier(self) -> Node:
        tok = self.advance()
        return Identifier(tok.value, offset=tok.offset)

    def parse_array(self) -> Node:
        tok = self.advance()
        elements = self.parse_expression_list(TT.RSQB, "missing closing ']' in array literal")
        return ArrayLiteral(tuple(elements), offset=tok.offset)

    def parse_hashmap(self) -> Node:
        """%{ key: value, ... } with an optional trailing comma"""
        tok = self.advance()
        pairs: List[Tuple[Node, Node]] = []

        while not self.check(TT.RBRACE):
            key = self.parse_expression(Precedence.LOWEST)
            self.expect(TT.COLON, "expected ':' after hashmap key")
            value = self.parse_expression(Precedence.LOWEST)
            pairs.append((key, value))

            if not self.match(TT.COMMA):
                break

        self.expect(TT.RBRACE, "missing closing '}' in hashmap literal")
        return HashmapLiteral(tuple(pairs), offset=tok.offset)

    def parse_expression_list(self, end: TT, message: str) -> List[Node]:
        """Comma separated expressions up to `end`; trailing comma allowed"""
        items: List[Node] = []

        while not self.check(end):
            items.append(self.parse_expression(Precedence.LOWEST))
            if not self.match(TT.COMMA):
                break

        self.expect(end, message)
        return items

    # ---------- operators ----------

    def parse_prefix(self) -> Node:
        tok = self.advance()
        right = self.parse_expression(Precedence.PREFIX)
        return Prefix(tok.value, right, offset=tok.offset)

    def parse_group(self) -> Node:
        self.advance()
        expr = self.parse_expression(Precedence.LOWEST)
        self.expect(TT.RPAR, "missing closing ')' in grouped expression")
        return expr

    def parse_infix(self, left: Node) -> Node:
        tok = self.advance()
        right = self.parse_expression(PRECEDENCES[tok.type])
        return Infix(tok.value, left, right, offset=tok.offset)

    def parse_logical(self, left: Node) -> Node:
        tok = self.advance()
        right = self.parse_expression(PRECEDENCES[tok.type])
        if tok.type == TT.AND:
            return And(left, right, offset=tok.offset)
        return Or(left, right, offset=tok.offset)

    def parse_range(self, left: Node) -> Node:
        tok = self.advance()
        right = self.parse_expression(Precedence.RANGE)
        return RangeLiteral(left, right, offset=tok.offset)

    def parse_call(self, callee: Node) -> Node:
        tok = self.advance()
        args = self.parse_expression_list(TT.RPAR, "missing closing ')' in call arguments")
        return Call(callee, tuple(args), offset=tok.offset)

    def parse_index(self, container: Node) -> Node:
        tok = self.advance()
        index = self.parse_expression(Precedence.LOWEST)
        self.expect(TT.RSQB, "missing closing ']' in index expression")
        return Index(container, index, offset=tok.offset)

    def parse_assign(self, target: Node) -> Node:
        """
        Right associative: `a := b := 1` is `a := (b := 1)`.
        `x op= e` desugars to `x = x op e`.
        """
        tok = self.advance()

        if tok.type == TT.WALRUS:
            if not isinstance(target, Identifier):
                raise ParseError(f"can only declare an identifier with ':=' (got '{render(target)}')", tok)
        elif not isinstance(target, (Identifier, Index)):
            raise ParseError(
                f"can only assign to an identifier or index expression (got '{render(target)}')", tok
            )

        value = self.parse_expression(Precedence.LOWEST)

        if tok.type == TT.WALRUS:
            return Assign(target, value, AssignKind.DECLARE, offset=tok.offset)

        if tok.type in COMPOUND_OPS:
            value = Infix(COMPOUND_OPS[tok.type], target, value, offset=tok.offset)

        return Assign(target, value, AssignKind.ASSIGN, offset=tok.offset)

    # ---------- blocks and control flow ----------

    def parse_block(self) -> Block:
        """{ expr (; expr)* }"""
        tok = self.expect(TT.LBRACE, f"expected '{{', got {self._describe(self.current)}")
        exprs: List[Node] = []

        while not self.check(TT.RBRACE):
            if self.check(TT.EOF):
                raise ParseError("missing closing '}' in block", self.current)
            if self.match(TT.SEMI):
                continue
            exprs.append(self.parse_expression(Precedence.LOWEST))

        self.advance()
        return Block(tuple(exprs), offset=tok.offset)

    def parse_yif(self) -> Node:
        """yif cond { ... } [yels { ... } | yels yif ...]"""
        tok = self.advance()
        cond = self.parse_expression(Precedence.LOWEST)
        then = self.parse_block()
        otherwise: Optional[Block] = None

        if self.match(TT.YELS):
            if self.check(TT.YIF):
                chained = self.parse_yif()
                otherwise = Block((chained,), offset=chained.offset)
            elif self.check(TT.LBRACE):
                otherwise = self.parse_block()
            else:
                raise ParseError(
                    f"expected '{{' or 'yif' after 'yels', got {self._describe(self.current)}",
                    self.current,
                )

        return Yif(cond, then, otherwise, offset=tok.offset)

    def parse_yoyo(self) -> Node:
        """yoyo [cond] { ... }; a missing condition loops forever"""
        tok = self.advance()
        if self.check(TT.LBRACE):
            cond: Node = BooleanLiteral(True, offset=tok.offset)
        else:
            cond = self.parse_expression(Precedence.LOWEST)
        body = self.parse_block()
        return Yoyo(cond, body, offset=tok.offset)

    def parse_yall(self) -> Node:
        """yall [name:] iterable { ... }; the element binds to `yt` by default"""
        tok = self.advance()
        key_name = "yt"

        if self.check(TT.IDENT) and self.peek(1).type == TT.COLON:
            key_name = self.advance().value
            self.advance()

        iterable = self.parse_expression(Precedence.LOWEST)
        body = self.parse_block()
        return Yall(key_name, iterable, body, offset=tok.offset)

    def parse_yeet(self) -> Node:
        tok = self.advance()
        if self.check(TT.SEMI, TT.RBRACE, TT.EOF):
            return Yeet(NullLiteral(offset=tok.offset), offset=tok.offset)
        value = self.parse_expression(Precedence.LOWEST)
        return Yeet(value, offset=tok.offset)

    def parse_yolo(self) -> Node:
        tok = self.advance()
        body = self.parse_block()
        return Yolo(body, offset=tok.offset)

    def parse_lambda(self) -> Node:
        r"""\a, b { ... } or @\(a b) { ... }; commas and parens are optional"""
        tok = self.advance()
        params: List[str] = []
        wrapped = self.match(TT.LPAR)

        while self.check(TT.IDENT):
            params.append(self.advance().value)
            self.match(TT.COMMA)

        if wrapped:
            self.expect(TT.RPAR, "missing closing ')' in parameter list")

        body = self.parse_block()

        if tok.type == TT.MACRO:
            return MacroLiteral(tuple(params), body, offset=tok.offset)
        return Lambda(tuple(params), body, offset=tok.offset)

    def _describe(self, tok: Tok) -> str:
        if tok.type == TT.EOF:
            return "end of input"
        return f"'{tok.value}'"


def parse_source(source: str) -> Tuple[Program, List[ParseError]]:
    """Parse source text; evaluation must not proceed when errors is non-empty"""
    parser = Parser(tokenize(source))
    program = parser.parse_program()
    return program, parser.errors
