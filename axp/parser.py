"""Parser for axp documents.

A document is the contents of a compound without the parentheses. A
compound is a map if a colon follows its first key, otherwise a list:

    a b (c d)        -> (a b (c d))
    k: v list: (x)   -> (k: v list: (x))

Nested compounds are kept on an explicit stack of frames, so deeply nested
input does not hit the interpreter's recursion limit.
"""

import logging
import sys
from typing import Optional

from .lexer import Lexer, Token, TokenKind
from .pretty import pretty
from .types import Atom, List, Map, Value

logger = logging.getLogger(__name__)

_SIMPLE_ESCAPES = {
    b" ": b" ",
    b'"': b'"',
    b"\\": b"\\",
    b"e": b"\x1b",
    b"n": b"\n",
    b"r": b"\r",
    b"t": b"\t",
    b"0": b"\0",
}


class ParseError(SyntaxError):
    """A syntax error with the position of the offending token."""

    def __init__(self, message: str, pos: int = 0, line: int = 1, column: int = 1):
        super().__init__(f"{message} at {line}:{column}")
        self.message = message
        self.pos = pos
        self.line = line
        self.column = column


class _Tokens:
    """One token of lookahead over the lexer."""

    def __init__(self, src):
        self.lexer = Lexer(src)
        self.src = self.lexer.src
        self.token = self.lexer.next_token()

    def advance(self) -> None:
        self.token = self.lexer.next_token()

    def peek(self) -> Optional[Token]:
        """The next token that is not whitespace or a comment."""
        while self.token is not None and self.token.kind in (TokenKind.WHITESPACE, TokenKind.COMMENT):
            self.token = self.lexer.next_token()
        return self.token

    def error(self, message: str, token: Optional[Token] = None) -> ParseError:
        pos = token.offset if token is not None else len(self.src)
        line = self.src.count(b"\n", 0, pos) + 1
        column = pos - (self.src.rfind(b"\n", 0, pos) + 1) + 1
        return ParseError(message, pos, line, column)

    def unexpected(self, token: Optional[Token]) -> ParseError:
        if token is None:
            return self.error("unexpected end")
        if token.kind is TokenKind.BAD:
            if token.is_empty():
                return self.error("unterminated string", token)
            return self.error(f"bad: {pretty(token.text)}", token)
        if token.kind in (TokenKind.COLON, TokenKind.OPEN, TokenKind.CLOSE):
            return self.error(f"unexpected {bytes(token.text).decode('ascii')}", token)
        return self.error(f"unexpected {token.kind.value} {pretty(token.text)}", token)

    def bare(self) -> Atom:
        parts = []
        while self.token is not None and self.token.kind is TokenKind.BARE:
            parts.append(self.token.text)
            self.advance()
        return Atom(b"".join(parts))

    def quoted(self) -> Atom:
        guard_len = len(self.token.text) - 1
        self.advance()
        parts = []
        while True:
            token = self.token
            if token is None:
                raise self.error("unterminated string")
            kind = token.kind
            if kind is TokenKind.QUOTE_END:
                self.advance()
                return Atom(b"".join(parts))
            if kind is TokenKind.QUOTED:
                parts.append(token.text)
            elif kind is TokenKind.ESCAPE:
                parts.append(self.unescape(token, bytes(token.text[guard_len + 1:])))
            else:
                raise self.unexpected(token)
            self.advance()

    def unescape(self, token: Token, body: bytes) -> bytes:
        letter = body[:1]
        if letter in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[letter]
        if letter == b"x":
            return bytes([int(body[1:3], 16)])
        code = int(body[2:-1], 16)
        # surrogates and values past U+10FFFF have no UTF-8 encoding
        if code > sys.maxunicode or 0xD800 <= code <= 0xDFFF:
            raise self.error(f"invalid code point: {pretty(body)}", token)
        return chr(code).encode("utf-8")


class _Frame:
    __slots__ = ("items", "is_map", "key", "top")

    def __init__(self, top: bool = False):
        self.items: list = []
        self.is_map = False
        # set while the value of a map entry is expected
        self.key: Optional[Value] = None
        self.top = top

    def build(self) -> Value:
        if self.is_map:
            return Map(tuple(self.items))
        return List(tuple(self.items))


def parse(src, *, max_depth: Optional[int] = None) -> Value:
    """Parse an axp document (bytes or str) into a List or a Map.

    Raises ParseError on the first syntax error.
    """
    tokens = _Tokens(src)
    stack = [_Frame(top=True)]

    def complete(frame: _Frame, item: Value) -> None:
        if frame.key is not None:
            frame.items.append((frame.key, item))
            frame.key = None
            return

        token = tokens.peek()
        colon = token is not None and token.kind is TokenKind.COLON
        if colon and not frame.is_map and not frame.items:
            logger.debug("compound at %d is a map", token.offset)
            frame.is_map = True
        if not frame.is_map:
            frame.items.append(item)
            return
        if not colon:
            raise tokens.unexpected(token)
        tokens.advance()
        frame.key = item

    while True:
        frame = stack[-1]
        expecting_value = frame.key is not None
        token = tokens.peek()

        if token is None:
            if frame.top and not expecting_value:
                return frame.build()
            raise tokens.unexpected(token)

        kind = token.kind
        if kind is TokenKind.BARE:
            complete(frame, tokens.bare())
        elif kind is TokenKind.QUOTE_START:
            complete(frame, tokens.quoted())
        elif kind is TokenKind.OPEN:
            if max_depth is not None and len(stack) > max_depth:
                raise tokens.error("max nesting depth exceeded", token)
            tokens.advance()
            stack.append(_Frame())
        elif kind is TokenKind.CLOSE and not frame.top and not expecting_value:
            tokens.advance()
            stack.pop()
            complete(stack[-1], frame.build())
        else:
            raise tokens.unexpected(token)
