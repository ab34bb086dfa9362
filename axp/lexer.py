"""Mode-switching tokenizer for axp documents.

The lexer is a lazy iterator over an immutable byte buffer. It is always in
one of three modes (BASE, COMMENT, QUOTED); each mode has its own scanner
and the switch between modes is a lookup in MORPHS. Every token is bounded
in length, so a run of bare bytes, whitespace or string contents is split
into several consecutive tokens.

Bad input never raises: a disallowed byte or an unknown escape is a BAD
token and an unterminated string ends with an empty BAD token. The parser
decides what is fatal.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

MAX_BARE = 32
MAX_WHITESPACE = 99
MAX_COMMENT = 99
MAX_QUOTED = 32
MAX_GUARD = 9

WHITESPACE = b" \n\r\t"
LINE_END = b"\n\r"
HEX_DIGITS = b"0123456789abcdefABCDEF"
GUARD_CHARS = b"_#" + HEX_DIGITS
ESCAPE_LETTERS = b' "\\enrt0'

# bytes that end a bare word
NOT_BARE = WHITESPACE + b'\0:()"\\#'


class Mode(Enum):
    BASE = "base"
    COMMENT = "comment"
    QUOTED = "quoted"


class TokenKind(Enum):
    WHITESPACE = "whitespace"
    COMMENT = "comment"
    BARE = "bare"
    COLON = "colon"
    OPEN = "open"
    CLOSE = "close"
    BAD = "bad"
    QUOTE_START = "quote_start"
    QUOTED = "quoted"
    ESCAPE = "escape"
    QUOTE_END = "quote_end"


@dataclass(frozen=True)
class Token:
    """The span `src[offset:end]`, produced in `mode`."""

    kind: TokenKind
    offset: int
    end: int
    mode: Mode = Mode.BASE
    src: bytes = field(default=b"", repr=False, compare=False)

    @property
    def text(self) -> memoryview:
        """A view of the span, no copy of the source is made."""
        return memoryview(self.src)[self.offset:self.end]

    def is_empty(self) -> bool:
        return self.end == self.offset


MORPHS = {
    (Mode.BASE, TokenKind.COMMENT): Mode.COMMENT,
    (Mode.BASE, TokenKind.QUOTE_START): Mode.QUOTED,
    (Mode.COMMENT, TokenKind.WHITESPACE): Mode.BASE,
    (Mode.QUOTED, TokenKind.QUOTE_END): Mode.BASE,
}


def morph(mode: Mode, token: Token) -> Mode:
    """The mode the lexer is in after `token` was produced in `mode`."""
    if mode is Mode.QUOTED and token.kind is TokenKind.BAD and token.is_empty():
        # end of input inside a string
        return Mode.BASE
    return MORPHS.get((mode, token.kind), mode)


def _to_bytes(src) -> bytes:
    if isinstance(src, str):
        return src.encode("utf-8")
    return bytes(src)


class Lexer:
    """Iterate over the tokens of `src` (bytes or str)."""

    def __init__(self, src):
        self.src = _to_bytes(src)
        self.pos = 0
        self.mode = Mode.BASE
        self.guard = b""

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token

    def next_token(self) -> Optional[Token]:
        mode = self.mode
        if mode is Mode.BASE:
            token = self._scan_base()
        elif mode is Mode.COMMENT:
            token = self._scan_comment()
        else:
            token = self._scan_quoted()
        if token is None:
            return None

        self.pos = token.end
        new_mode = morph(mode, token)
        if new_mode is not mode:
            logger.debug("lexer %s -> %s at %d", mode.value, new_mode.value, token.offset)
            if new_mode is Mode.QUOTED:
                self.guard = self.src[token.offset:token.end - 1]
            elif mode is Mode.QUOTED:
                self.guard = b""
            self.mode = new_mode
        return token

    # --- helpers ---

    def _token(self, kind: TokenKind, end: int) -> Token:
        return Token(kind, self.pos, end, self.mode, self.src)

    def _run(self, start: int, limit: int, allowed=None, stop=None) -> int:
        """End of the run from `start`, at most `limit` bytes long."""
        src = self.src
        end = start
        last = min(len(src), start + limit)
        while end < last:
            b = src[end:end + 1]
            if allowed is not None and b not in allowed:
                break
            if stop is not None and b in stop:
                break
            end += 1
        return end

    def _guard_end(self, start: int) -> int:
        """End of the `[_#0-9a-fA-F]{0,9}` guard after the `#` at `start`."""
        return self._run(start + 1, MAX_GUARD, allowed=GUARD_CHARS)

    # --- BASE ---

    def _scan_base(self) -> Optional[Token]:
        src, pos = self.src, self.pos
        if pos >= len(src):
            return None
        b = src[pos:pos + 1]

        if b in WHITESPACE:
            return self._token(TokenKind.WHITESPACE, self._run(pos, MAX_WHITESPACE, allowed=WHITESPACE))
        if b == b":":
            return self._token(TokenKind.COLON, pos + 1)
        if b == b"(":
            return self._token(TokenKind.OPEN, pos + 1)
        if b == b")":
            return self._token(TokenKind.CLOSE, pos + 1)
        if b == b'"':
            return self._token(TokenKind.QUOTE_START, pos + 1)
        if b == b"#":
            return self._scan_hash()
        if b in b"\0\\":
            return self._token(TokenKind.BAD, pos + 1)
        return self._token(TokenKind.BARE, self._run(pos, MAX_BARE, stop=NOT_BARE))

    def _scan_hash(self) -> Token:
        src, pos = self.src, self.pos

        # comment opener: `#+` then a space or tab
        hashes = self._run(pos, MAX_COMMENT, allowed=b"#")
        if src[hashes:hashes + 1] in (b" ", b"\t"):
            return self._token(TokenKind.COMMENT, hashes + 1)

        # guarded quote opener: `#guard"`
        guard_end = self._guard_end(pos)
        if src[guard_end:guard_end + 1] == b'"':
            return self._token(TokenKind.QUOTE_START, guard_end + 1)

        return self._token(TokenKind.BAD, pos + 1)

    # --- COMMENT ---

    def _scan_comment(self) -> Optional[Token]:
        src, pos = self.src, self.pos
        if pos >= len(src):
            return None
        b = src[pos:pos + 1]
        if b in LINE_END:
            return self._token(TokenKind.WHITESPACE, pos + 1)
        if b == b"\0":
            return self._token(TokenKind.BAD, pos + 1)
        return self._token(TokenKind.COMMENT, self._run(pos, MAX_COMMENT, stop=b"\0\n\r"))

    # --- QUOTED ---

    def _scan_quoted(self) -> Optional[Token]:
        src, pos, guard = self.src, self.pos, self.guard
        if pos >= len(src):
            return Token(TokenKind.BAD, pos, pos, self.mode, src)

        if src.startswith(guard + b'"', pos):
            return self._token(TokenKind.QUOTE_END, pos + len(guard) + 1)

        prefix = guard + b"\\"
        if src.startswith(prefix, pos):
            return self._scan_escape(pos + len(prefix))

        b = src[pos:pos + 1]
        if b == b"\0":
            return self._token(TokenKind.BAD, pos + 1)

        stop = b'\0"\\#' if guard else b'\0"\\'
        end = self._run(pos, MAX_QUOTED, stop=stop)
        if end == pos:
            # a quote, backslash or `#` not matching the guard is content
            end = pos + 1
        return self._token(TokenKind.QUOTED, end)

    def _scan_escape(self, start: int) -> Token:
        src = self.src
        b = src[start:start + 1]
        if not b:
            return self._token(TokenKind.BAD, start)
        if b in ESCAPE_LETTERS:
            return self._token(TokenKind.ESCAPE, start + 1)
        if b == b"x":
            digits = self._run(start + 1, 2, allowed=HEX_DIGITS)
            if digits - start - 1 == 2:
                return self._token(TokenKind.ESCAPE, digits)
        elif b == b"u" and src[start + 1:start + 2] == b"{":
            digits = self._run(start + 2, 8, allowed=HEX_DIGITS)
            if digits - start - 2 >= 2 and src[digits:digits + 1] == b"}":
                return self._token(TokenKind.ESCAPE, digits + 1)
        return self._token(TokenKind.BAD, start + 1)


def tokenize(src) -> "list[Token]":
    """All tokens of `src` as a list."""
    return list(Lexer(src))
