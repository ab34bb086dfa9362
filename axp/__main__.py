"""CLI: python -m axp [--eval] <document.axp> [width]"""

import logging
import os
import sys
from pathlib import Path

from .evaluator import EvalError, evaluate
from .parser import ParseError, parse
from .render import render
from .types import Map

USAGE = "Usage: python -m axp [--eval] <document.axp> [width]"


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(level=os.environ.get("AXP_LOG_LEVEL", "WARNING").upper())

    do_eval = "--eval" in args
    if do_eval:
        args.remove("--eval")
    if not args or len(args) > 2:
        print(USAGE, file=sys.stderr)
        sys.exit(1)

    width = None
    if len(args) == 2:
        try:
            width = int(args[1])
        except ValueError:
            print(f"width must be a number: {args[1]}", file=sys.stderr)
            sys.exit(1)

    src = Path(args[0]).read_bytes()
    try:
        document = parse(src)
    except ParseError as e:
        print(f"{args[0]}: {e}", file=sys.stderr)
        sys.exit(1)

    if isinstance(document, Map):
        for key, value in document:
            print(f"{render(key, width)}: {render(value, width)}")
        return

    for item in document:
        if do_eval:
            try:
                item = evaluate(item)
            except EvalError as e:
                print(f"{args[0]}: {e}", file=sys.stderr)
                sys.exit(1)
        print(render(item, width))


if __name__ == "__main__":
    main()
