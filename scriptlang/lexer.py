"""Tokenizer for scriptlang source text.

The lexer is a cursor over the immutable source string. It keeps exactly
two tokens buffered: `current`, the token most recently consumed by the
parser, and `following`, the one-token lookahead the parser inspects
before committing to a production. `advance()` shifts the lookahead into
`current` and scans the next token; nothing is ever pushed back.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Optional

from .errors import LexerError


DIGITS = '0123456789'
LETTERS = 'abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ'


def is_digit(ch: str) -> bool:
    # str.isdigit() also accepts superscripts and other scripts' digits
    return len(ch) == 1 and ch in DIGITS


def is_letter(ch: str) -> bool:
    return len(ch) == 1 and ch in LETTERS


class TokenKind(enum.Enum):
    EOF = 'end of input'
    IDENTIFIER = 'identifier'
    STRING = 'string'
    NUMBER = 'number'

    COMMA = ','
    DOT = '.'
    LPAREN = '('
    RPAREN = ')'
    LBRACE = '{'
    RBRACE = '}'
    ADD = '+'
    SUB = '-'
    MUL = '*'
    DIV = '/'
    EQU = '='
    NEQ = '<>'
    LT = '<'
    GT = '>'

    KWD_CONST = 'const'
    KWD_VAR = 'var'
    KWD_SET = 'set'
    KWD_FUNC = 'func'
    KWD_RETURN = 'return'
    KWD_AND = 'and'
    KWD_OR = 'or'
    KWD_NOT = 'not'
    KWD_IF = 'if'
    KWD_THEN = 'then'
    KWD_ELSE = 'else'
    KWD_FOR = 'for'
    KWD_END = 'end'

    @property
    def is_keyword(self) -> bool:
        return self.name.startswith('KWD_')


KEYWORDS = {kind.value: kind for kind in TokenKind if kind.is_keyword}

PUNCTUATION = {
    ',': TokenKind.COMMA,
    '(': TokenKind.LPAREN,
    ')': TokenKind.RPAREN,
    '{': TokenKind.LBRACE,
    '}': TokenKind.RBRACE,
    '+': TokenKind.ADD,
    '-': TokenKind.SUB,
    '*': TokenKind.MUL,
    '/': TokenKind.DIV,
    '=': TokenKind.EQU,
    '>': TokenKind.GT,
}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: Optional[str] = None
    line: int = 0
    column: int = 0

    @property
    def display(self) -> str:
        """Text used in diagnostics: the payload, or the fixed spelling of the kind."""
        if self.text is not None:
            return self.text
        return self.kind.value

    def __str__(self) -> str:
        if self.text is None:
            return self.kind.name
        return f"{self.kind.name}({self.text})"


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.offset = 0
        self.line = 1
        self.line_start = 0
        self.current: Optional[Token] = None
        self.following: Token = self.scan()

    @property
    def column(self) -> int:
        return self.offset - self.line_start + 1

    def advance(self) -> Token:
        self.current = self.following
        self.following = self.scan()
        return self.current

    def error(self, message: str, line: int, column: int, text: str) -> LexerError:
        return LexerError(message, line, column, text)

    def skip_whitespace(self):
        source = self.source
        while self.offset < len(source) and source[self.offset].isspace():
            if source[self.offset] == '\n':
                self.line += 1
                self.line_start = self.offset + 1
            self.offset += 1

    def skip_digits(self):
        while self.offset < len(self.source) and is_digit(self.source[self.offset]):
            self.offset += 1

    def scan(self) -> Token:
        self.skip_whitespace()
        source = self.source
        length = len(source)
        line = self.line
        column = self.column
        if self.offset >= length:
            return Token(TokenKind.EOF, None, line, column)

        start = self.offset
        c = source[start]
        nxt = source[start + 1] if start + 1 < length else ''

        # '<' is either less-than or the first half of '<>'
        if c == '<':
            if nxt == '>':
                self.offset += 2
                return Token(TokenKind.NEQ, None, line, column)
            self.offset += 1
            return Token(TokenKind.LT, None, line, column)
        if c in PUNCTUATION:
            self.offset += 1
            return Token(PUNCTUATION[c], None, line, column)
        if c == '.':
            self.offset += 1
            if not is_digit(nxt):
                return Token(TokenKind.DOT, None, line, column)
            self.skip_digits()
            return Token(TokenKind.NUMBER, source[start:self.offset], line, column)

        if is_letter(c):
            while self.offset < length and (is_letter(source[self.offset]) or is_digit(source[self.offset])):
                self.offset += 1
            text = source[start:self.offset]
            kind = KEYWORDS.get(text)
            if kind is not None:
                return Token(kind, None, line, column)
            return Token(TokenKind.IDENTIFIER, text, line, column)

        if is_digit(c):
            self.skip_digits()
            if self.offset < length and source[self.offset] == '.':
                self.offset += 1
                self.skip_digits()
            return Token(TokenKind.NUMBER, source[start:self.offset], line, column)

        if c == '"':
            return self.scan_string(line, column)

        raise self.error(f"Unexpected character scanned ({c!r}).", line, column, c)

    def scan_string(self, line: int, column: int) -> Token:
        source = self.source
        length = len(source)
        start = self.offset
        self.offset += 1  # opening quote
        chars: List[str] = []
        while True:
            if self.offset >= length:
                raise self.error("Unterminated string literal.", line, column, source[start:])
            ch = source[self.offset]
            if ch == '"':
                # a doubled quote is one literal quote character
                if self.offset + 1 < length and source[self.offset + 1] == '"':
                    chars.append('"')
                    self.offset += 2
                    continue
                self.offset += 1
                break
            if ch == '\n':
                self.line += 1
                self.line_start = self.offset + 1
            chars.append(ch)
            self.offset += 1
        return Token(TokenKind.STRING, ''.join(chars), line, column)

    def __iter__(self):
        while self.following.kind is not TokenKind.EOF:
            yield self.advance()


def tokenize(source: str) -> List[Token]:
    """Convert source code into a list of tokens, excluding the end-of-input marker."""
    return list(Lexer(source))
