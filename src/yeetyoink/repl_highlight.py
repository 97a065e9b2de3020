"""prompt_toolkit lexer for live Y syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer import tokenize
from .token_types import TT

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "operator": "",
    "punctuation": "",
    "macro": "bold ansimagenta",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

_KEYWORDS = {TT.YIF, TT.YELS, TT.YEET, TT.YOYO, TT.YALL, TT.YOLO}
_STRINGS = {TT.STRING, TT.TEMPLATE, TT.TEMPLATE_END}
_PUNCTUATION = {
    TT.LPAR, TT.RPAR, TT.LSQB, TT.RSQB, TT.LBRACE, TT.RBRACE,
    TT.COMMA, TT.COLON, TT.SEMI,
}

def token_group(tt: TT) -> str:
    if tt in _KEYWORDS:
        return "keyword"
    if tt in (TT.TRUE, TT.FALSE):
        return "boolean"
    if tt == TT.NULL:
        return "constant"
    if tt in (TT.INT, TT.NUMBER):
        return "number"
    if tt in _STRINGS:
        return "string"
    if tt == TT.IDENT:
        return "identifier"
    if tt in (TT.MACRO, TT.AT):
        return "macro"
    if tt == TT.ERROR:
        return "error"
    if tt in _PUNCTUATION:
        return "punctuation"
    return "operator"

def _split_trivia(chunk: str, in_string: bool) -> StyleAndTextTuples:
    """Pull trailing whitespace and `//` comments off a token's span."""
    body = chunk.rstrip()
    tail = chunk[len(body):]

    comment = ""
    if not in_string:
        at = body.find("//")
        if at >= 0:
            body, comment = body[:at], body[at:]

    out: StyleAndTextTuples = []
    if comment:
        out.append(("", body))
        out.append((GROUP_STYLE["comment"], comment))
    else:
        out.append(("", body))
    if tail:
        out.append(("", tail))
    return out

def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments.

    Tokens carry only a start offset, so a token's span runs to the next
    token's start.
    """
    if not text:
        return [("", "")]

    tokens = [tok for tok in tokenize(text) if tok.type != TT.EOF]
    result: StyleAndTextTuples = []

    if not tokens:
        return _split_trivia(text, False)

    if tokens[0].offset > 0:
        result.extend(_split_trivia(text[:tokens[0].offset], False))

    for i, tok in enumerate(tokens):
        end = tokens[i + 1].offset if i + 1 < len(tokens) else len(text)
        chunk = text[tok.offset:end]
        if not chunk:
            continue

        style = GROUP_STYLE[token_group(tok.type)]
        in_string = tok.type in _STRINGS
        pieces = _split_trivia(chunk, in_string)
        # the first piece is the token itself
        result.append((style, pieces[0][1]))
        result.extend(pieces[1:])

    return [frag for frag in result if frag[1]] or [("", text)]

class YLexer(Lexer):
    """prompt_toolkit Lexer that highlights Y source using the interpreter's lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights for all lines.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
