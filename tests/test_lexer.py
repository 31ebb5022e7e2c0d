import pytest
from hypothesis import given, strategies as st

from scriptlang.errors import LexerError
from scriptlang.lexer import KEYWORDS, Lexer, TokenKind, tokenize


def kinds_and_texts(source):
    return [(t.kind, t.text) for t in tokenize(source)]


@pytest.mark.parametrize(
    "source,expected",
    [
        ("x", [(TokenKind.IDENTIFIER, "x")]),
        ("abc123", [(TokenKind.IDENTIFIER, "abc123")]),
        ("const x = 1", [
            (TokenKind.KWD_CONST, None), (TokenKind.IDENTIFIER, "x"),
            (TokenKind.EQU, None), (TokenKind.NUMBER, "1"),
        ]),
        ("a.b.c", [
            (TokenKind.IDENTIFIER, "a"), (TokenKind.DOT, None), (TokenKind.IDENTIFIER, "b"),
            (TokenKind.DOT, None), (TokenKind.IDENTIFIER, "c"),
        ]),
        ("3.25 .5 7.", [(TokenKind.NUMBER, "3.25"), (TokenKind.NUMBER, ".5"), (TokenKind.NUMBER, "7.")]),
        ("f(a, b)", [
            (TokenKind.IDENTIFIER, "f"), (TokenKind.LPAREN, None), (TokenKind.IDENTIFIER, "a"),
            (TokenKind.COMMA, None), (TokenKind.IDENTIFIER, "b"), (TokenKind.RPAREN, None),
        ]),
        ("{ }", [(TokenKind.LBRACE, None), (TokenKind.RBRACE, None)]),
        ("+-*/", [(TokenKind.ADD, None), (TokenKind.SUB, None), (TokenKind.MUL, None), (TokenKind.DIV, None)]),
        ("< > <> =", [(TokenKind.LT, None), (TokenKind.GT, None), (TokenKind.NEQ, None), (TokenKind.EQU, None)]),
        ('"hello world"', [(TokenKind.STRING, "hello world")]),
        ('""', [(TokenKind.STRING, "")]),
        ("", []),
        ("   \n\t ", []),
    ]
)
def test_lexer_basic(source, expected):
    assert kinds_and_texts(source) == expected


def test_keywords_override_identifiers():
    source = "const var set func return and or not if then else for end"
    kinds = [t.kind for t in tokenize(source)]
    assert kinds == [KEYWORDS[word] for word in source.split()]
    assert all(t.text is None for t in tokenize(source))
    # a keyword prefix is still an identifier
    assert kinds_and_texts("ending constant") == [
        (TokenKind.IDENTIFIER, "ending"), (TokenKind.IDENTIFIER, "constant"),
    ]


def test_doubled_quote_is_one_quote():
    assert kinds_and_texts('"a""b"') == [(TokenKind.STRING, 'a"b')]
    assert kinds_and_texts('""""') == [(TokenKind.STRING, '"')]


def test_number_followed_by_dot_identifier():
    # '1.' takes the decimal point; a dot before a letter is a DOT token
    assert kinds_and_texts("x.y 1.") == [
        (TokenKind.IDENTIFIER, "x"), (TokenKind.DOT, None), (TokenKind.IDENTIFIER, "y"),
        (TokenKind.NUMBER, "1."),
    ]


def test_trailing_dot_is_punctuation():
    assert kinds_and_texts("a.") == [(TokenKind.IDENTIFIER, "a"), (TokenKind.DOT, None)]


def test_line_and_column_tracking():
    tokens = tokenize("const a = 1\n  var bb = 22\n")
    positions = [(t.display, t.line, t.column) for t in tokens]
    assert positions == [
        ("const", 1, 1), ("a", 1, 7), ("=", 1, 9), ("1", 1, 11),
        ("var", 2, 3), ("bb", 2, 7), ("=", 2, 10), ("22", 2, 12),
    ]


def test_lookahead_and_advance():
    lexer = Lexer("a b")
    assert lexer.current is None
    assert lexer.following.text == "a"
    assert lexer.advance().text == "a"
    assert lexer.current.text == "a"
    assert lexer.following.text == "b"
    lexer.advance()
    assert lexer.following.kind is TokenKind.EOF
    # EOF is sticky
    lexer.advance()
    assert lexer.current.kind is TokenKind.EOF
    assert lexer.following.kind is TokenKind.EOF


def test_unterminated_string():
    with pytest.raises(LexerError) as excinfo:
        tokenize('const s = "abc')
    assert "Unterminated string literal" in str(excinfo.value)
    assert (excinfo.value.line, excinfo.value.column) == (1, 11)


def test_unterminated_string_after_escaped_quote():
    with pytest.raises(LexerError):
        tokenize('"abc""')


def test_unexpected_character():
    with pytest.raises(LexerError) as excinfo:
        tokenize("const a = 1\nvar b = 2 # comment")
    err = excinfo.value
    assert err.text == "#"
    assert (err.line, err.column) == (2, 11)


def test_non_ascii_digits_are_rejected():
    with pytest.raises(LexerError):
        tokenize("²")


@pytest.mark.parametrize("source, column, text", [("x²", 2, "²"), ("café", 4, "é"), ("ß", 1, "ß")])
def test_identifiers_are_ascii(source, column, text):
    with pytest.raises(LexerError) as excinfo:
        tokenize(source)
    assert (excinfo.value.column, excinfo.value.text) == (column, text)


def test_token_str():
    tokens = tokenize('x "y" 1 ,')
    assert [str(t) for t in tokens] == ["IDENTIFIER(x)", "STRING(y)", "NUMBER(1)", "COMMA"]


# Round-trip: serialize a token sequence, lex it again, get the same sequence.

FIXED_KINDS = [
    kind for kind in TokenKind
    if kind not in (TokenKind.EOF, TokenKind.IDENTIFIER, TokenKind.STRING, TokenKind.NUMBER)
]

identifiers = st.from_regex(r"[A-Za-z][A-Za-z0-9]{0,8}", fullmatch=True).filter(lambda s: s not in KEYWORDS)
numbers = st.from_regex(r"[0-9]{1,5}(\.[0-9]{0,3})?|\.[0-9]{1,3}", fullmatch=True)
strings = st.text(alphabet=st.characters(exclude_categories=("Cs",)), max_size=12)

tokens = st.one_of(
    st.sampled_from(FIXED_KINDS).map(lambda kind: (kind, None)),
    identifiers.map(lambda text: (TokenKind.IDENTIFIER, text)),
    numbers.map(lambda text: (TokenKind.NUMBER, text)),
    strings.map(lambda text: (TokenKind.STRING, text)),
)


def serialize(kind, text):
    if kind is TokenKind.STRING:
        return '"' + text.replace('"', '""') + '"'
    if text is None:
        return kind.value
    return text


@given(st.lists(tokens, max_size=20))
def test_lexer_round_trip(sequence):
    source = " ".join(serialize(kind, text) for kind, text in sequence)
    assert kinds_and_texts(source) == sequence
