"""
Lexer for Y

Turns source text into a stream of tokens.

Features:
- Pull-based (`next_token`) with a `tokenize` helper for whole inputs
- Offset tracking (index of each token's first character)
- Template strings with `{expr}` holes, nested to a fixed depth
- Lexical problems surface as ERROR tokens; the parser reports them
"""

from typing import List

from .token_types import TT, Tok

# Open template interpolations allowed at once (`a {`b {`c`}`}` is depth 2).
MAX_TEMPLATE_DEPTH = 16

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Y lexer with template-string brace tracking.

    Each open `{expr}` hole inside a backtick string pushes a counter onto
    `brackets`. Braces that belong to ordinary syntax inside the hole (blocks,
    hashmap literals) bump the top counter; the `}` that brings it back to
    zero closes the hole and string scanning resumes.
    """

    # Keyword mapping
    KEYWORDS = {
        'yif': TT.YIF,
        'yels': TT.YELS,
        'yeet': TT.YEET,
        'yoyo': TT.YOYO,
        'yall': TT.YALL,
        'yolo': TT.YOLO,
        'true': TT.TRUE,
        'false': TT.FALSE,
        'null': TT.NULL,
    }

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Two-character operators
        ('%{', TT.HASHMAP),
        ('@\\', TT.MACRO),
        ('==', TT.EQ),
        ('!=', TT.NEQ),
        ('<=', TT.LTE),
        ('>=', TT.GTE),
        ('<<', TT.SHL),
        ('&&', TT.AND),
        ('||', TT.OR),
        (':=', TT.WALRUS),
        ('+=', TT.PLUSEQ),
        ('-=', TT.MINUSEQ),
        ('*=', TT.STAREQ),
        ('/=', TT.SLASHEQ),
        ('%=', TT.MODEQ),
        ('..', TT.RANGE),

        # Single-character operators
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('*', TT.STAR),
        ('/', TT.SLASH),
        ('%', TT.MOD),
        ('<', TT.LT),
        ('>', TT.GT),
        ('!', TT.BANG),
        ('=', TT.ASSIGN),
        ('(', TT.LPAR),
        (')', TT.RPAR),
        ('[', TT.LSQB),
        (']', TT.RSQB),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        ('.', TT.DOT),
        (',', TT.COMMA),
        (':', TT.COLON),
        (';', TT.SEMI),
        ('@', TT.AT),
        ('&', TT.AMP),
        ('|', TT.PIPE),
        ('\\', TT.BACKSLASH),
    ]

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.brackets: List[int] = []

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list (EOF included)"""
        tokens: List[Tok] = []

        while True:
            tok = self.next_token()
            tokens.append(tok)

            if tok.type == TT.EOF:
                return tokens

    def next_token(self) -> Tok:
        self.skip_trivia()
        start = self.pos

        if self.pos >= len(self.source):
            return Tok(TT.EOF, '', start)

        ch = self.peek()

        if ch == '"':
            return self.scan_string()

        if ch == '`':
            self.advance()
            return self.scan_template(start, head=True)

        if _is_digit(ch):
            return self.scan_number()

        if _is_ident_start(ch):
            return self.scan_identifier()

        # Closing brace of an interpolation hole resumes the template
        if ch == '}' and self.brackets:
            self.brackets[-1] -= 1

            if self.brackets[-1] == 0:
                self.brackets.pop()
                self.advance()
                return self.scan_template(start, head=False)

        return self.scan_operator()

    # ========================================================================
    # Strings
    # ========================================================================

    def scan_string(self) -> Tok:
        """Scan a double-quoted string; `$name` is left for the evaluator"""
        start = self.pos
        self.advance()  # Opening quote
        value = ''

        while self.peek() != '"':
            if self.pos >= len(self.source):
                return Tok(TT.ERROR, 'unterminated string', start)
            value += self.advance()

        self.advance()  # Closing quote
        return Tok(TT.STRING, value, start)

    def scan_template(self, start: int, head: bool) -> Tok:
        """
        Scan one template segment, stopping at a hole or the closing backtick.

        A template without holes comes back as a plain STRING with `$` doubled,
        since templates never substitute `$name`. `{{` and `}}` are literal braces.
        """
        value = ''

        while True:
            if self.pos >= len(self.source):
                return Tok(TT.ERROR, 'unterminated string', start)

            ch = self.peek()

            if ch == '`':
                self.advance()
                if head:
                    return Tok(TT.STRING, value.replace('$', '$$'), start)
                return Tok(TT.TEMPLATE_END, value, start)

            if ch == '{' and self.peek(1) == '{':
                self.advance(2)
                value += '{'
                continue

            if ch == '}' and self.peek(1) == '}':
                self.advance(2)
                value += '}'
                continue

            if ch == '{':
                self.advance()

                if len(self.brackets) >= MAX_TEMPLATE_DEPTH:
                    return Tok(TT.ERROR, 'string interpolation nested too deeply', start)

                self.brackets.append(1)
                return Tok(TT.TEMPLATE, value, start)

            value += self.advance()

    # ========================================================================
    # Numbers, identifiers, operators
    # ========================================================================

    def scan_number(self) -> Tok:
        """Digit run is INT; digits '.' digits is NUMBER (`1..2` stays a range)"""
        start = self.pos
        value = ''

        while _is_digit(self.peek()):
            value += self.advance()

        if self.peek() == '.' and _is_digit(self.peek(1)):
            value += self.advance()  # .
            while _is_digit(self.peek()):
                value += self.advance()
            return Tok(TT.NUMBER, value, start)

        return Tok(TT.INT, value, start)

    def scan_identifier(self) -> Tok:
        """Scan identifier or keyword"""
        start = self.pos
        value = ''

        while _is_ident_char(self.peek()):
            value += self.advance()

        token_type = self.KEYWORDS.get(value, TT.IDENT)
        return Tok(token_type, value, start)

    def scan_operator(self) -> Tok:
        """Scan operators and punctuation"""
        start = self.pos

        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))

                if op_type in (TT.LBRACE, TT.HASHMAP) and self.brackets:
                    self.brackets[-1] += 1

                return Tok(op_type, op_str, start)

        ch = self.advance()
        return Tok(TT.ERROR, f"unexpected character '{ch}'", start)

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        result = self.source[self.pos:self.pos + n]
        self.pos += n
        return result

    def skip_trivia(self) -> None:
        """Skip whitespace (newlines included) and `//` line comments"""
        while self.pos < len(self.source):
            ch = self.peek()

            if ch in (' ', '\t', '\n', '\r'):
                self.advance()
            elif ch == '/' and self.peek(1) == '/':
                while self.peek() not in ('\n', '\0'):
                    self.advance()
            else:
                return


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def _is_ident_start(ch: str) -> bool:
    return ch == '_' or ('a' <= ch <= 'z') or ('A' <= ch <= 'Z')


def _is_ident_char(ch: str) -> bool:
    return _is_ident_start(ch) or _is_digit(ch)


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    return Lexer(source).tokenize()
