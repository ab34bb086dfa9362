"""Value model: an atom, a list or a map. Nil is the empty list.

Lists and maps may nest arbitrarily deep, so everything that visits a whole
tree (display, serialization, equality, hashing) goes through `walk()`,
which keeps its own stack instead of recursing.
"""

from dataclasses import dataclass
from itertools import zip_longest
from typing import Iterable, Iterator, Union

from .pretty import pretty


@dataclass(frozen=True)
class Atom:
    """Immutable, opaque byte string. Not required to be valid UTF-8."""

    data: bytes = b""

    @classmethod
    def new(cls, data: "bytes | str") -> "Atom":
        if isinstance(data, str):
            data = data.encode("utf-8")
        return cls(bytes(data))

    def is_empty(self) -> bool:
        return not self.data

    def format(self, width: "int | None" = None) -> str:
        return pretty(self.data, width)

    def __str__(self) -> str:
        return self.format()


# walk() events; an atom event carries the Atom, the others carry None
ATOM, OPEN_LIST, OPEN_MAP, SEPARATOR, COLON, CLOSE = "atom", "list", "map", "sep", "colon", "close"

_MARKS = {OPEN_LIST: "(", OPEN_MAP: "(", SEPARATOR: " ", COLON: ": ", CLOSE: ")"}


def walk(value: "Value") -> Iterator["tuple[str, Atom | None]"]:
    """Visit `value` depth first, in display order."""
    stack: list = [value]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            yield item, None
        elif isinstance(item, Atom):
            yield ATOM, item
        elif isinstance(item, List):
            yield OPEN_LIST, None
            stack.append(CLOSE)
            for i in range(len(item.items) - 1, -1, -1):
                stack.append(item.items[i])
                if i:
                    stack.append(SEPARATOR)
        elif isinstance(item, Map):
            yield OPEN_MAP, None
            stack.append(CLOSE)
            for i in range(len(item.entries) - 1, -1, -1):
                key, val = item.entries[i]
                stack.extend((val, COLON, key))
                if i:
                    stack.append(SEPARATOR)
        else:
            raise TypeError(f"not a value: {item!r}")


class _Compound:
    """Tree-wide operations shared by List and Map."""

    __slots__ = ()

    def format(self, width: "int | None" = None) -> str:
        """``(a b)`` or ``(k: v)``; `width` shortens each atom separately."""
        parts = []
        for event, item in walk(self):
            parts.append(item.format(width) if event == ATOM else _MARKS[event])
        return "".join(parts)

    def __eq__(self, other):
        if not isinstance(other, _Compound):
            return NotImplemented
        return all(a == b for a, b in zip_longest(walk(self), walk(other)))

    def __hash__(self) -> int:
        return hash(tuple(walk(self)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}{self.format()}"

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True, eq=False, repr=False)
class List(_Compound):
    items: "tuple[Value, ...]" = ()

    @classmethod
    def of(cls, *items: "Value") -> "List":
        return cls(tuple(items))

    def first(self) -> "Value":
        """The first element, or nil if empty."""
        if not self.items:
            return nil()
        return self.items[0]

    def tail(self) -> "List":
        """A new list without the first element, nil if empty or singleton."""
        return List(self.items[1:])

    def is_empty(self) -> bool:
        return not self.items

    def __iter__(self) -> Iterator["Value"]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> "Value":
        return self.items[index]


@dataclass(frozen=True, eq=False, repr=False)
class Map(_Compound):
    """Ordered (key, value) entries. Duplicate keys are kept in insertion order."""

    entries: "tuple[tuple[Value, Value], ...]" = ()

    @classmethod
    def of(cls, *entries: "tuple[Value, Value]") -> "Map":
        return cls(tuple((k, v) for k, v in entries))

    def get(self, key: "Value") -> "Value | None":
        # first match wins
        for k, v in self.entries:
            if k == key:
                return v
        return None

    def keys(self) -> "list[Value]":
        return [k for k, _ in self.entries]

    def is_empty(self) -> bool:
        return not self.entries

    def __iter__(self) -> Iterator["tuple[Value, Value]"]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


Value = Union[Atom, List, Map]

_NIL = List()


def nil() -> List:
    return _NIL


def atom(data: "bytes | str") -> Atom:
    return Atom.new(data)


def list_of(items: Iterable[Value]) -> List:
    return List(tuple(items))


def map_of(entries: Iterable["tuple[Value, Value]"]) -> Map:
    return Map(tuple((k, v) for k, v in entries))
