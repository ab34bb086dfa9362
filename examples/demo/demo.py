"""
axp End-to-End Example

Demonstrates the full lifecycle:
1. Tokenize a document
2. Parse it into a value tree
3. Render the tree, full and shortened
4. Evaluate a few expressions

Run: pip install -e . && python examples/demo/demo.py
"""

from axp import Atom, evaluate, parse, pretty, render, tokenize

print("=== axp Demo ===\n")

source = b'greeting: "Hello\\tworld" items: (one two (three)) blob: "\\xff\\xfe raw"'

# 1. Tokenize
tokens = tokenize(source)
print(f"1. {len(tokens)} tokens")
for token in tokens[:6]:
    print(f"   {token.mode.value:7} {token.kind.value:12} {pretty(token.text)}")
print()

# 2. Parse
doc = parse(source)
print("2. Parsed a", type(doc).__name__)
print(f"   items: {render(doc.get(Atom(b'items')))}\n")

# 3. Render
print("3. Rendered")
print(f"   full:     {render(doc)}")
print(f"   width 8:  {render(doc, 8)}\n")

long_atom = ("Lorem ipsum dolor sit amet, " * 4).encode("utf-8")
print(f"   shortened atom: {pretty(long_atom, 24)}\n")

# 4. Evaluate
print("4. Evaluated")
for expr in ["if yes then else", "first a b c", "tail a b c", "eval if () no yes"]:
    result = evaluate(parse(expr))
    print(f"   ({expr}) => {render(result)}")
