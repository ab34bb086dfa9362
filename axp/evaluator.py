"""Tree-walk evaluator for axp values. Table dispatch on primitives, gas/depth metering."""

import logging
import sys
import threading
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from .pretty import pretty
from .render import to_bytes
from .types import Atom, List, Value, nil

logger = logging.getLogger(__name__)

DEFAULT_MAX_GAS = 10_000
MAX_DEPTH = 64

MAP_OPERATOR = Atom(b"map_as_operator")
NIL_OPERATOR = Atom(b"")


class EvalError(RuntimeError):
    pass


class GasExhausted(EvalError):
    pass


class DepthExceeded(EvalError):
    pass


class _EvalState:
    __slots__ = ("gas", "depth", "out")

    def __init__(self, max_gas: int, out):
        self.gas = max_gas
        self.depth = 0
        self.out = out


Primitive = Callable[[List, _EvalState], Value]


def evaluate(value: Value, ctx: Optional[dict] = None) -> Value:
    """Evaluate a value.

    An atom is called without arguments, a list calls its first element with
    the rest as arguments, a map evaluates to itself. Unknown operators
    evaluate to nil.

    ctx keys: out (file for `print`, default stdout), max_gas/maxGas
    """
    ctx = ctx or {}
    max_gas = ctx.get("max_gas") or ctx.get("maxGas") or DEFAULT_MAX_GAS
    state = _EvalState(max_gas, ctx.get("out") or sys.stdout)
    if isinstance(value, Atom):
        return call(value, nil(), state)
    if isinstance(value, List):
        return evaluate_list(value, state)
    return value


def evaluate_list(args: List, st: _EvalState) -> Value:
    st.depth += 1
    if st.depth > MAX_DEPTH:
        st.depth -= 1
        raise DepthExceeded("max nesting depth exceeded")
    try:
        return call(operator(args.first(), st), args.tail(), st)
    finally:
        st.depth -= 1


def operator(op: Value, st: _EvalState) -> Atom:
    if isinstance(op, Atom):
        return op
    if isinstance(op, List):
        if op.is_empty():
            return NIL_OPERATOR
        return operator(evaluate_list(op, st), st)
    return MAP_OPERATOR


def call(name: Atom, args: List, st: _EvalState) -> Value:
    st.gas -= 1
    if st.gas < 0:
        raise GasExhausted("gas budget exceeded")
    fn = primitives().get(name.data)
    if fn is None:
        logger.debug("unknown operator %s", name)
        return nil()
    return fn(args, st)


# --- Primitives ---

def prim_if(args: List, st: _EvalState) -> Value:
    if args.first().is_empty():
        return args.tail().tail().first()
    return args.tail().first()


def prim_first(args: List, st: _EvalState) -> Value:
    return args.first()


def prim_tail(args: List, st: _EvalState) -> Value:
    return args.tail()


def prim_quote(args: List, st: _EvalState) -> Value:
    return args


def prim_eval(args: List, st: _EvalState) -> Value:
    return evaluate_list(args, st)


def prim_print(args: List, st: _EvalState) -> Value:
    st.out.write(pretty(to_bytes(args)))
    return nil()


def prim_to_bytes(args: List, st: _EvalState) -> Value:
    return Atom(to_bytes(args))


_PRIMITIVES: Optional[Mapping[bytes, Primitive]] = None
_PRIMITIVES_LOCK = threading.Lock()


def define_primitives() -> "dict[bytes, Primitive]":
    table: "dict[bytes, Primitive]" = {}
    for name, fn in (
        ("if", prim_if),
        ("print", prim_print),
        ("to_bytes", prim_to_bytes),
        ("eval", prim_eval),
        ("first", prim_first),
        ("tail", prim_tail),
        ("quote", prim_quote),
    ):
        key = name.encode("ascii")
        assert key not in table, f"duplicate primitive {name}"
        table[key] = fn
    return table


def primitives() -> Mapping[bytes, Primitive]:
    """The primitive table, built on first use. Read-only."""
    global _PRIMITIVES
    if _PRIMITIVES is None:
        with _PRIMITIVES_LOCK:
            if _PRIMITIVES is None:
                _PRIMITIVES = MappingProxyType(define_primitives())
    return _PRIMITIVES
