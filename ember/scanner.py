"""Scanner for the Ember language.

Turns source text into a flat list of tokens terminated by a single EOF
token. Bad characters and unterminated strings are reported to the
diagnostics collector and skipped, so one scan reports every lexical
problem in the unit instead of stopping at the first.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from .errors import Diagnostics


class TokenType(Enum):
    # Single-character tokens
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()

    # One or two character tokens
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # Literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Keywords
    AND = auto()
    ELSE = auto()
    FALSE = auto()
    FOR = auto()
    FUN = auto()
    IF = auto()
    NULL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    EOF = auto()


KEYWORDS: Dict[str, TokenType] = {
    'and': TokenType.AND,
    'else': TokenType.ELSE,
    'false': TokenType.FALSE,
    'for': TokenType.FOR,
    'fun': TokenType.FUN,
    'if': TokenType.IF,
    'null': TokenType.NULL,
    'or': TokenType.OR,
    'print': TokenType.PRINT,
    'return': TokenType.RETURN,
    'true': TokenType.TRUE,
    'var': TokenType.VAR,
    'while': TokenType.WHILE,
}

SINGLE_CHAR_TOKENS: Dict[str, TokenType] = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '*': TokenType.STAR,
}

# first char -> (token without '=', token with '=')
EQUAL_SUFFIX_TOKENS: Dict[str, tuple] = {
    '!': (TokenType.BANG, TokenType.BANG_EQUAL),
    '=': (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    '<': (TokenType.LESS, TokenType.LESS_EQUAL),
    '>': (TokenType.GREATER, TokenType.GREATER_EQUAL),
}

WHITESPACE = ' \t\r\n'
DIGITS = '0123456789'
IDENT_START = 'abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_'
IDENT_CHARS = IDENT_START + DIGITS


@dataclass(frozen=True)
class Token:
    kind: TokenType
    lexeme: str
    literal: Any
    line: int
    column: int = 0

    def __str__(self) -> str:
        return f"{self.kind.name} {self.lexeme} {self.literal} line:{self.line}"


class Scanner:
    """Single-pass cursor over the source text."""

    def __init__(self, source: str, diagnostics: Optional[Diagnostics] = None):
        self.source = source
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.tokens: List[Token] = []
        self.pos = 0
        self.line = 1
        self.column = 1
        # position of the lexeme being scanned
        self.start = 0
        self.start_line = 1
        self.start_column = 1

    def is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self) -> str:
        if self.is_at_end():
            return '\0'
        return self.source[self.pos]

    def peek_next(self) -> str:
        if self.pos + 1 >= len(self.source):
            return '\0'
        return self.source[self.pos + 1]

    def advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def match(self, expected: str) -> bool:
        if self.is_at_end() or self.peek() != expected:
            return False
        self.advance()
        return True

    def scan_tokens(self) -> List[Token]:
        while not self.is_at_end():
            self.start = self.pos
            self.start_line = self.line
            self.start_column = self.column
            self.scan_token()
        self.tokens.append(Token(TokenType.EOF, '', None, self.line, self.column))
        return self.tokens

    def scan_token(self) -> None:
        c = self.advance()
        if c in WHITESPACE:
            return
        if c in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[c])
            return
        if c in EQUAL_SUFFIX_TOKENS:
            plain, with_equal = EQUAL_SUFFIX_TOKENS[c]
            self.add_token(with_equal if self.match('=') else plain)
            return
        if c == '/':
            if self.match('/'):
                while self.peek() != '\n' and not self.is_at_end():
                    self.advance()
            else:
                self.add_token(TokenType.SLASH)
            return
        if c == '"':
            self.string()
            return
        if c in DIGITS:
            self.number()
            return
        if c in IDENT_START:
            self.identifier()
            return
        self.diagnostics.lexical(f"Unexpected character '{c}'.", self.start_line, self.start_column)

    def string(self) -> None:
        chars: List[str] = []
        while self.peek() != '"' and not self.is_at_end():
            ch = self.advance()
            if ch == '\\':
                if self.is_at_end():
                    break
                ch = self.advance()
            chars.append(ch)
        if self.is_at_end():
            self.diagnostics.lexical('Unterminated string.', self.start_line, self.start_column)
            return
        self.advance()  # closing quote
        self.add_token(TokenType.STRING, ''.join(chars))

    def number(self) -> None:
        while self.peek() in DIGITS:
            self.advance()
        if self.peek() == '.' and self.peek_next() in DIGITS:
            self.advance()  # consume '.'
            while self.peek() in DIGITS:
                self.advance()
        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.pos]))

    def identifier(self) -> None:
        while self.peek() in IDENT_CHARS:
            self.advance()
        text = self.source[self.start:self.pos]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def add_token(self, kind: TokenType, literal: Any = None) -> None:
        lexeme = self.source[self.start:self.pos]
        self.tokens.append(Token(kind, lexeme, literal, self.start_line, self.start_column))


def scan(source: str, diagnostics: Optional[Diagnostics] = None) -> List[Token]:
    """Convert source code into a list of tokens ending with EOF."""
    return Scanner(source, diagnostics).scan_tokens()
