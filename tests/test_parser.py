import pytest
from axp.parser import ParseError, parse
from axp.render import render
from axp.types import Atom, List, Map, atom, nil


def test_parse_empty():
    assert parse(b"") == nil()
    assert parse(b"  # only a comment\n") == nil()


def test_parse_single_atom():
    assert parse(b"a") == List.of(Atom(b"a"))


def test_parse_list():
    assert parse(b" x y ") == List.of(atom("x"), atom("y"))


def test_parse_nested_empty():
    assert parse(b" x () ") == List.of(atom("x"), List())


def test_parse_utf8():
    assert parse(" Schönen ( Tag ) ! ".encode("utf-8")) == List.of(
        atom("Schönen"),
        List.of(atom("Tag")),
        atom("!"),
    )


def test_parse_str_input():
    assert parse("a (b)") == List.of(atom("a"), List.of(atom("b")))


def test_parse_top_level_map():
    assert parse(b"k: v") == Map.of((atom("k"), atom("v")))


def test_parse_nested_map():
    doc = parse("(a: 1 b: (c d)) e")
    assert doc == List.of(
        Map.of((atom("a"), atom("1")), (atom("b"), List.of(atom("c"), atom("d")))),
        atom("e"),
    )


def test_parse_compound_key():
    assert parse("(a b): c") == Map.of((List.of(atom("a"), atom("b")), atom("c")))


def test_parse_duplicate_keys_kept():
    doc = parse("k: 1 k: 2")
    assert doc.keys() == [atom("k"), atom("k")]
    assert doc.get(atom("k")) == atom("1")


def test_parse_long_bare_is_one_atom():
    word = "0123456789abcdefghijklmnopqrstuvwxyz" * 3
    assert parse(word) == List.of(atom(word))


def test_parse_comments_ignored():
    assert parse("a # comment\nb") == List.of(atom("a"), atom("b"))


def test_parse_quoted():
    assert parse('"hello world" x') == List.of(atom("hello world"), atom("x"))
    assert parse('""') == List.of(Atom(b""))


def test_parse_quoted_escapes():
    doc = parse(r'"a\tb\x00\u{e4}\e\ \"\\\n\r\0"')
    assert doc == List.of(Atom(b'a\tb\x00\xc3\xa4\x1b "\\\n\r\x00'))


def test_parse_raw_byte_escape():
    assert parse(r'"\xff"') == List.of(Atom(b"\xff"))


def test_parse_guarded_quote():
    assert parse(b'#a"say "hi" #a"') == List.of(Atom(b'say "hi" '))
    assert parse(b'#"a\\n#\\n#"') == List.of(Atom(b"a\\n\n"))


def test_parse_quoted_key():
    assert parse('"my key": "my value"') == Map.of((atom("my key"), atom("my value")))


def test_parse_deep_nesting():
    depth = 5000
    doc = parse(b"(" * depth + b"x" + b")" * depth)
    assert render(doc) == "(" * (depth + 1) + "x" + ")" * (depth + 1)
    assert doc == parse(b"(" * depth + b"x" + b")" * depth)
    for _ in range(depth):
        doc = doc.first()
    assert doc == List.of(atom("x"))


# --- Errors ---

def test_unexpected_close_paren():
    with pytest.raises(ParseError, match=r"unexpected \)"):
        parse(")")


def test_unexpected_colon():
    with pytest.raises(ParseError, match="unexpected :"):
        parse(":")


def test_colon_after_list_element():
    with pytest.raises(ParseError, match="unexpected :"):
        parse("a b: c")


def test_unterminated_paren():
    with pytest.raises(ParseError, match="unexpected end"):
        parse("(a b")


def test_missing_map_value():
    with pytest.raises(ParseError, match="unexpected end"):
        parse("k:")
    with pytest.raises(ParseError, match=r"unexpected \)"):
        parse("(k: )")


def test_map_key_without_colon():
    with pytest.raises(ParseError, match="unexpected end"):
        parse("k: v x")
    with pytest.raises(ParseError, match="unexpected bare y"):
        parse("(k: v x y)")


def test_bad_byte():
    with pytest.raises(ParseError, match="bad"):
        parse(b"a\0")


def test_bad_escape():
    with pytest.raises(ParseError, match="bad"):
        parse(r'"\q"')


def test_unterminated_string():
    with pytest.raises(ParseError, match="unterminated string"):
        parse('"abc')


def test_invalid_code_point():
    with pytest.raises(ParseError, match="invalid code point"):
        parse(r'"\u{110000}"')
    with pytest.raises(ParseError, match="invalid code point"):
        parse(r'"\u{d800}"')
    with pytest.raises(ParseError, match="invalid code point"):
        parse(r'"\u{FFFFFFFF}"')


def test_error_position():
    with pytest.raises(ParseError) as exc:
        parse(b"a\n  )")
    err = exc.value
    assert isinstance(err, SyntaxError)
    assert (err.pos, err.line, err.column) == (4, 2, 3)
    assert str(err) == "unexpected ) at 2:3"


def test_max_depth():
    assert parse(b"(a)", max_depth=1) == List.of(List.of(atom("a")))
    with pytest.raises(ParseError, match="max nesting depth"):
        parse(b"((a))", max_depth=1)


# --- Round trip ---

def test_render_then_parse_round_trip():
    # only atoms that are valid bare words survive the trip
    value = List.of(
        atom("a"),
        List.of(atom("b"), List()),
        Map.of((atom("k"), atom("v")), (atom("nested"), List.of(atom("x")))),
        atom("Schönen"),
    )
    assert parse(render(value)).first() == value


def test_rendered_atoms_are_not_quoted():
    value = List.of(atom("a b"), Atom(b""))
    assert render(value) == "(a b )"
    assert parse(render(value)).first() == List.of(atom("a"), atom("b"))
    with pytest.raises(ParseError):
        parse(render(List.of(atom("k:"))))
