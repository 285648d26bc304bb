"""Lexer for the Bisaya++ language.

The lexer walks the source once, left to right, with one character of
lookahead (two for decimal numbers) and produces a list of tokens that
always ends with a single EOF token. Newlines only advance the line counter;
the grammar needs no statement terminator. Any malformed input aborts the
scan with a LexError.
"""

from __future__ import annotations

from typing import Any, List

from .errors import LexError
from .tokens import KEYWORDS, TWO_WORD_KEYWORDS, Token, TokenKind
from .values import CharVal


SINGLE_CHAR_TOKENS = {
    '(': TokenKind.LPAREN,
    ')': TokenKind.RPAREN,
    '{': TokenKind.LBRACE,
    '}': TokenKind.RBRACE,
    ',': TokenKind.COMMA,
    ':': TokenKind.COLON,
    '&': TokenKind.CONCAT,
    '+': TokenKind.PLUS,
    '*': TokenKind.STAR,
    '/': TokenKind.SLASH,
    '%': TokenKind.PERCENT,
    '$': TokenKind.NEWLINE,
}


def is_alpha(c: str) -> bool:
    return ('a' <= c <= 'z') or ('A' <= c <= 'Z') or c == '_'


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def is_alphanumeric(c: str) -> bool:
    return is_alpha(c) or is_digit(c)


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.tokens: List[Token] = []
        self.start = 0
        self.current = 0
        self.line = 1

    def scan_tokens(self) -> List[Token]:
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()
        self.tokens.append(Token(TokenKind.EOF, '', None, self.line))
        return self.tokens

    def scan_token(self):
        c = self.advance()
        if c in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[c])
        elif c == '-':
            if self.match('-'):
                # comment runs to the end of the line
                while self.peek() != '\n' and not self.is_at_end():
                    self.advance()
            else:
                self.add_token(TokenKind.MINUS)
        elif c == '=':
            self.add_token(TokenKind.EQUAL if self.match('=') else TokenKind.ASSIGN)
        elif c == '<':
            if self.match('>'):
                self.add_token(TokenKind.NOT_EQUAL)
            elif self.match('='):
                self.add_token(TokenKind.LESS_EQUAL)
            else:
                self.add_token(TokenKind.LESS)
        elif c == '>':
            self.add_token(TokenKind.GREATER_EQUAL if self.match('=') else TokenKind.GREATER)
        elif c in ' \r\t':
            pass
        elif c == '\n':
            self.line += 1
        elif c == '"':
            self.string()
        elif c == "'":
            self.character()
        elif c == '[':
            if self.match('#') and self.match(']'):
                self.add_token(TokenKind.STRING, '#')
            else:
                raise LexError("Unexpected character: '['", self.line)
        elif is_digit(c):
            self.number()
        elif is_alpha(c):
            self.identifier()
        else:
            raise LexError(f"Unexpected character: {c!r}", self.line)

    def string(self):
        start_line = self.line
        while self.peek() != '"' and not self.is_at_end():
            if self.peek() == '\n':
                self.line += 1
            self.advance()
        if self.is_at_end():
            raise LexError('Unterminated string.', start_line)
        self.advance()  # closing quote
        self.add_token(TokenKind.STRING, self.source[self.start + 1:self.current - 1])

    def character(self):
        start_line = self.line
        while self.peek() != "'" and not self.is_at_end():
            if self.peek() == '\n':
                self.line += 1
            self.advance()
        if self.is_at_end():
            raise LexError('Unterminated character literal.', start_line)
        self.advance()  # closing quote
        value = self.source[self.start + 1:self.current - 1]
        if len(value) != 1:
            raise LexError('Character literal must contain exactly one character.', start_line)
        self.add_token(TokenKind.CHAR, CharVal(value))

    def number(self):
        while is_digit(self.peek()):
            self.advance()
        kind = TokenKind.INTEGER
        if self.peek() == '.' and is_digit(self.peek_next()):
            kind = TokenKind.DECIMAL
            self.advance()  # the '.'
            while is_digit(self.peek()):
                self.advance()
            if self.peek() == '.' and is_digit(self.peek_next()):
                raise LexError(f"Invalid number format: {self.source[self.start:self.current]}.", self.line)
        if is_alpha(self.peek()):
            while is_alphanumeric(self.peek()):
                self.advance()
            raise LexError(f"Invalid number format: {self.source[self.start:self.current]}", self.line)
        self.add_token(kind, float(self.source[self.start:self.current]))

    def identifier(self):
        while is_alphanumeric(self.peek()):
            self.advance()
        text = self.source[self.start:self.current]
        suffixes = TWO_WORD_KEYWORDS.get(text)
        if suffixes and self.peek() == ' ':
            # The space and the following word are consumed either way; a
            # mismatch still yields only the first word.
            end = self.current + 1
            while end < len(self.source) and is_alphanumeric(self.source[end]):
                end += 1
            second = self.source[self.current + 1:end]
            self.current = end
            if second in suffixes:
                self.add_token(suffixes[second])
                return
        kind = KEYWORDS.get(text, TokenKind.IDENTIFIER)
        self.tokens.append(Token(kind, text, None, self.line))

    # ------------------------------------------------------------------ helpers

    def match(self, expected: str) -> bool:
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self) -> str:
        if self.is_at_end():
            return '\0'
        return self.source[self.current]

    def peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return '\0'
        return self.source[self.current + 1]

    def is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        return c

    def add_token(self, kind: TokenKind, literal: Any = None):
        text = self.source[self.start:self.current]
        self.tokens.append(Token(kind, text, literal, self.line))


def scan(source: str) -> List[Token]:
    """Convert Bisaya++ source text into a list of tokens."""
    return Lexer(source).scan_tokens()
