"""Display and serialization of value trees."""

from typing import Optional

from .types import ATOM, COLON, CLOSE, OPEN_LIST, OPEN_MAP, SEPARATOR, Value, walk

_MARKS = {OPEN_LIST: b"(", OPEN_MAP: b"(", SEPARATOR: b" ", COLON: b": ", CLOSE: b")"}


def render(value: Value, width: Optional[int] = None) -> str:
    """Render `value` for display.

    Atoms are escaped and, given a width, shortened one by one. Lists and
    maps render as ``(a b)`` and ``(k: v)``, empty ones as ``()``.
    """
    return value.format(width)


def to_bytes(value: Value) -> bytes:
    """Serialize `value` without escaping, atoms are copied verbatim."""
    out = bytearray()
    for event, item in walk(value):
        out += item.data if event == ATOM else _MARKS[event]
    return bytes(out)
