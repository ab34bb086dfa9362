from axp.render import render, to_bytes
from axp.types import Atom, List, Map, atom, list_of, map_of, nil


def test_nil_is_empty_list():
    assert nil() == List()
    assert nil().is_empty()
    assert nil().first() == nil()
    assert nil().tail() == nil()


def test_first_and_tail():
    lst = List.of(atom("a"), atom("b"), atom("c"))
    assert lst.first() == atom("a")
    assert lst.tail() == List.of(atom("b"), atom("c"))
    assert List.of(atom("a")).tail() == nil()


def test_is_empty():
    assert Atom(b"").is_empty()
    assert not atom("x").is_empty()
    assert Map().is_empty()
    assert not Map.of((atom("k"), atom("v"))).is_empty()


def test_atom_equality_is_bytes():
    assert atom("ä") == Atom("ä".encode("utf-8"))
    assert Atom(b"\xff") != Atom(b"\xfe")
    assert len({Atom(b"a"), Atom(b"a"), Atom(b"b")}) == 2


def test_list_and_map_differ():
    assert List() != Map()
    assert render(List()) == render(Map()) == "()"


def test_map_keeps_duplicates():
    m = map_of([(atom("k"), atom("1")), (atom("k"), atom("2"))])
    assert len(m) == 2
    assert m.get(atom("k")) == atom("1")
    assert m.get(atom("missing")) is None


def test_render():
    lst = list_of([atom("a"), List()])
    m = Map.of((atom("key"), atom("value")), (atom("list"), lst))
    assert render(lst) == "(a ())"
    assert str(lst) == "(a ())"
    assert render(m) == "(key: value list: (a ()))"


def test_render_escapes_atoms():
    assert render(List.of(Atom(b"tab\there"), Atom(b"\xff"))) == r"(tab\there \Uff;)"


def test_render_width_applies_per_atom():
    lst = List.of(atom("abcdefghijklmn"), atom("short"))
    assert render(lst, 7) == "(abc⠤lmn short)"
    assert render(lst, 0) == render(lst)


def test_to_bytes():
    assert to_bytes(List.of(atom("if"), atom("true"), atom("a"))) == b"(if true a)"
    assert to_bytes(List()) == b"()"
    assert to_bytes(Map.of((atom("k"), List.of(atom("v"))))) == b"(k: (v))"
    assert to_bytes(List.of(Atom(b"\xff\n"))) == b"(\xff\n)"


def test_compound_equality_and_hash_are_structural():
    a = Map.of((atom("k"), List.of(atom("v"), List())))
    b = Map.of((atom("k"), List.of(atom("v"), List())))
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b, List.of(atom("k"), atom("v"))}) == 2
    assert List.of(atom("a b")) != List.of(atom("a"), atom("b"))
    assert List.of(atom("a")) != atom("a")
    assert repr(List.of(atom("a"), Map())) == "List(a ())"


# --- Deep trees ---

def deep_list(depth):
    value = List.of(atom("x"))
    for _ in range(depth):
        value = List.of(value)
    return value


def test_render_deep_tree():
    depth = 5000
    text = render(deep_list(depth))
    assert text == "(" * (depth + 1) + "x" + ")" * (depth + 1)
    assert render(deep_list(depth), 6) == text


def test_to_bytes_deep_tree():
    depth = 5000
    assert to_bytes(deep_list(depth)) == b"(" * (depth + 1) + b"x" + b")" * (depth + 1)


def test_deep_tree_equality():
    depth = 5000
    assert deep_list(depth) == deep_list(depth)
    assert deep_list(depth) != deep_list(depth - 1)
    assert hash(deep_list(depth)) == hash(deep_list(depth))
