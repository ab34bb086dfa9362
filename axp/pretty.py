"""UTF-8 safe pretty printing and shortening of byte strings.

`pretty()` escapes a byte string into readable text:

- invalid UTF-8 is coalesced into runs like ``\\Uf080;``
- ``\\``, CR, LF, TAB and NUL become ``\\\\``, ``\\r``, ``\\n``, ``\\t``, ``\\0``
- other ASCII control codes become ``\\xhh``
- non-ASCII control codes and whitespace other than space become ``\\Xhhh;``

Given a width it keeps the head and the tail of the text and puts a gap
marker in the middle, never reading more of the tail than needed.
"""

import unicodedata
from dataclasses import dataclass
from typing import Iterator, Optional

GAP = "⠤"
MIN_WIDTH = 6

_SHORT_ESCAPES = {
    "\\": "\\\\",
    "\r": "\\r",
    "\n": "\\n",
    "\t": "\\t",
    "\0": "\\0",
}


@dataclass(frozen=True)
class _Unit:
    contents: str
    input_len: int
    valid: bool

    def char_count(self) -> int:
        return len(self.contents)


def _escape(c: str) -> str:
    if c in _SHORT_ESCAPES:
        return _SHORT_ESCAPES[c]
    code = ord(c)
    if code < 0x20 or code == 0x7F:
        return f"\\x{code:02x}"
    if code > 0x7F and (c.isspace() or unicodedata.category(c) == "Cc"):
        return f"\\X{code:x};"
    return c


def _decode_char(data: bytes, pos: int) -> Optional[str]:
    for n in range(1, 5):
        chunk = data[pos:pos + n]
        if len(chunk) < n:
            return None
        try:
            return chunk.decode("utf-8")
        except UnicodeDecodeError:
            continue
    return None


def _units(data: bytes) -> Iterator[_Unit]:
    pos = 0
    while pos < len(data):
        c = _decode_char(data, pos)
        if c is None:
            yield _Unit(f"{data[pos]:02x}", 1, False)
            pos += 1
        else:
            n = len(c.encode("utf-8"))
            yield _Unit(_escape(c), n, True)
            pos += n


def _coalesced(units: "list[_Unit]") -> str:
    out = []
    invalid = False
    for unit in units:
        if unit.valid and invalid:
            invalid = False
            out.append(";")
        elif not unit.valid and not invalid:
            invalid = True
            out.append("\\U")
        out.append(unit.contents)
    if invalid:
        out.append(";")
    return "".join(out)


def pretty(data: bytes, width: Optional[int] = None) -> str:
    """Escape `data` and shorten it to about `width` characters.

    A width of None or 0 renders everything. Widths from 1 to 6 are
    clamped to 6.
    """
    data = bytes(data)
    width = width or 0
    if width < 0:
        width = 0
    if 0 < width < MIN_WIDTH:
        width = MIN_WIDTH
    shortened = width > 0
    half = width // 2

    head: "list[_Unit]" = []
    char_count = 0
    head_len = 0
    for unit in _units(data):
        if shortened and char_count >= half:
            break
        char_count += unit.char_count()
        head_len += unit.input_len
        head.append(unit)
    text = _coalesced(head)

    if not shortened:
        return text

    # The tail's start in bytes is unknown, scan back at most four bytes per
    # character (the length of the longest UTF-8 sequence).
    start = max(len(data) - 4 * half, head_len)
    tail = list(_units(data[start:]))
    budget = half + width % 2 - 1

    char_count = 0
    tail_len = 0
    taken = 0
    for unit in reversed(tail):
        char_count += unit.char_count()
        tail_len += unit.input_len
        if char_count > budget:
            break
        taken += 1

    if head_len + tail_len >= len(data):
        return text + _coalesced(tail)
    return text + GAP + _coalesced(tail[len(tail) - taken:])


def shorten_lossy(data: bytes, width: Optional[int] = None) -> str:
    """Shorten to `width` bytes around a gap marker and decode lossily.

    Invalid UTF-8 and control characters become U+FFFD.
    """
    data = bytes(data)
    size = len(data)
    if width is not None and size > width + 1:
        head = data[:(width + 1) // 2].decode("utf-8", "replace")
        tail = data[size - width // 2:].decode("utf-8", "replace")
        text = head + GAP + tail
    else:
        text = data.decode("utf-8", "replace")
    return "".join("�" if unicodedata.category(c) == "Cc" else c for c in text)
