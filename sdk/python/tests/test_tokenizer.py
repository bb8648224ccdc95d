import io

import pytest
from sexp.tokenizer import Tokenizer, UnreadError
from sexp.types import Token, TokenKind

OPEN = Token(TokenKind.OPEN_PAREN, "(")
CLOSE = Token(TokenKind.CLOSE_PAREN, ")")


def sym(text):
    return Token(TokenKind.SYMBOL, text)


def num(text):
    return Token(TokenKind.NUMBER, text)


def string(text):
    return Token(TokenKind.STRING, text)


def first_token(src):
    return Tokenizer(src).next_token()


def test_symbols():
    assert list(Tokenizer("a b c")) == [sym("a"), sym("b"), sym("c")]


def test_wast_command():
    src = '(assert_return (invoke "add" (i32.const 1) (i32.const 1)) (i32.const 2))'
    assert list(Tokenizer(src)) == [
        OPEN, sym("assert_return"),
        OPEN, sym("invoke"), string('"add"'),
        OPEN, sym("i32.const"), num("1"), CLOSE,
        OPEN, sym("i32.const"), num("1"), CLOSE,
        CLOSE,
        OPEN, sym("i32.const"), num("2"), CLOSE,
        CLOSE,
    ]


def test_empty_input():
    assert Tokenizer("").next_token() is None
    assert Tokenizer(" \t\n ").next_token() is None


def test_end_of_input_is_sticky():
    lex = Tokenizer("a")
    assert lex.next_token() == sym("a")
    assert lex.next_token() is None
    assert lex.next_token() is None


def test_reads_from_stream():
    lex = Tokenizer(io.StringIO("(x 1)"))
    assert list(lex) == [OPEN, sym("x"), num("1"), CLOSE]


def test_parens_need_no_whitespace():
    assert list(Tokenizer("((a)b)")) == [OPEN, OPEN, sym("a"), CLOSE, sym("b"), CLOSE]


@pytest.mark.parametrize("src,expected", [
    ("a b c", "a"),
    ('assert_return (invoke "add"', "assert_return"),
    ("$x)", "$x"),
    ('foo"bar"', "foo"),
    ("a-1 b", "a-1"),
])
def test_symbol_text(src, expected):
    assert first_token(src) == sym(expected)


@pytest.mark.parametrize("src,expected", [
    ("123 b c", "123"),
    ("-123 234 56", "-123"),
    ("-0.0 6.28318", "-0.0"),
    ("6.023e23 -0.0 6.28318", "6.023e23"),
    ("1)", "1"),
])
def test_number_text(src, expected):
    assert first_token(src) == num(expected)


def test_number_class_is_permissive():
    assert first_token("--1.2.e-e") == num("--1.2.e-e")
    assert first_token("-") == num("-")


def test_number_stops_at_other_characters():
    assert list(Tokenizer("0x00000001")) == [num("0"), sym("x00000001")]


@pytest.mark.parametrize("src,expected", [
    ('"123 b c"', '"123 b c"'),
    ('"he said \\"hello\\""', '"he said \\"hello\\""'),
    ('""', '""'),
    ('"a (b) c" d', '"a (b) c"'),
])
def test_string_text(src, expected):
    assert first_token(src) == string(expected)


def test_string_keeps_escapes_verbatim():
    tok = first_token('"tab\\there"')
    assert tok.text == '"tab\\there"'


def test_string_double_backslash_does_not_close():
    # "a\\" b" is a single literal: only the preceding character is checked
    assert list(Tokenizer('"a\\\\" b"')) == [string('"a\\\\" b"')]


def test_unterminated_string_runs_to_end():
    assert list(Tokenizer('("abc')) == [OPEN, string('"abc')]


def test_unread_restores_tokens():
    lex = Tokenizer("(a b c)")
    assert lex.next_token() == OPEN
    lex.unread()
    assert lex.next_token() == OPEN
    assert lex.next_token() == sym("a")
    lex.unread()
    lex.unread()
    assert lex.next_token() == OPEN
    assert lex.next_token() == sym("a")
    assert lex.next_token() == sym("b")


def test_unread_to_arbitrary_depth():
    lex = Tokenizer("t1 t2 t3 t4")
    read = [lex.next_token() for _ in range(3)]
    lex.unread()
    lex.unread()
    assert lex.next_token() == read[1]
    assert lex.next_token() == read[2]
    assert lex.next_token() == sym("t4")
    assert lex.next_token() is None


def test_unread_returns_same_objects():
    lex = Tokenizer("x y")
    x = lex.next_token()
    lex.unread()
    assert lex.next_token() is x


def test_unread_past_start_fails():
    lex = Tokenizer("a b")
    lex.next_token()
    lex.unread()
    with pytest.raises(UnreadError, match="unable to unread"):
        lex.unread()


def test_unread_on_fresh_tokenizer_fails():
    with pytest.raises(UnreadError):
        Tokenizer("a").unread()


def test_history_and_pending_partition_tokens():
    lex = Tokenizer("a b c")
    a, b, c = lex.next_token(), lex.next_token(), lex.next_token()
    lex.unread()
    lex.unread()
    assert lex.history == (a,)
    assert lex.pending == (c, b)
    lex.next_token()
    assert lex.history == (a, b)
    assert lex.pending == (c,)


def test_peek_does_not_consume():
    lex = Tokenizer("(a)")
    assert lex.peek() == OPEN
    assert lex.peek() == OPEN
    assert lex.next_token() == OPEN
    assert lex.peek() == sym("a")
    assert lex.history == (OPEN,)


def test_peek_at_end():
    lex = Tokenizer("a")
    lex.next_token()
    assert lex.peek() is None
    assert lex.history == (sym("a"),)


def test_information_separators_are_symbol_characters():
    assert list(Tokenizer("a\x1cb \x1f")) == [sym("a\x1cb"), sym("\x1f")]


def test_unicode_whitespace_separates():
    assert list(Tokenizer("a b c\x85d")) == [sym("a"), sym("b"), sym("c"), sym("d")]
