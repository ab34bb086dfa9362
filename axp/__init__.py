from .types import Atom, List, Map, Value, nil, atom
from .lexer import Lexer, Mode, Token, TokenKind, tokenize
from .parser import parse, ParseError
from .pretty import pretty, shorten_lossy
from .render import render, to_bytes
from .evaluator import evaluate, EvalError, GasExhausted, DepthExceeded

__all__ = [
    "Atom", "List", "Map", "Value", "nil", "atom",
    "Lexer", "Mode", "Token", "TokenKind", "tokenize",
    "parse", "ParseError",
    "pretty", "shorten_lossy",
    "render", "to_bytes",
    "evaluate", "EvalError", "GasExhausted", "DepthExceeded",
]
