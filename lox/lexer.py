#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
Lox lexer – converts source text into a list of tokens.
Scanning never stops on bad input: errors are collected and the offending
characters are skipped.
"""

import math
from decimal import Decimal
from enum import IntEnum, auto
from typing import List, Optional, Tuple, Union


class TokenType(IntEnum):
    """All token kinds produced by the lexer."""

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
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    EOF = auto()


LiteralValue = Union[float, str, None]


def format_double(value: float) -> str:
    """Render a number the way the JVM's Double.toString does.

    Magnitudes in [1e-3, 1e7) print as plain decimals (123.0, 0.5); others
    use scientific notation with a bare exponent (1.0E21, 1.5E-7).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    magnitude = abs(value)
    if magnitude == 0 or 1e-3 <= magnitude < 1e7:
        return repr(value)

    # repr gives the shortest digits that round-trip
    _, digit_tuple, exponent = Decimal(repr(magnitude)).as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    exponent += len(digits) - 1
    digits = digits.rstrip("0") or "0"
    sign = "-" if value < 0 else ""
    return f"{sign}{digits[0]}.{digits[1:] or '0'}E{exponent}"


class Token:
    """A single token with its source line."""

    __slots__ = ("type", "lexeme", "literal", "line")

    def __init__(self, type: TokenType, lexeme: str, literal: LiteralValue, line: int):
        self.type = type
        self.lexeme = lexeme  # exact source text
        self.literal = literal  # decoded number or string contents
        self.line = line  # 1‑based line number

    def __str__(self):
        if self.literal is None:
            literal = "null"
        elif isinstance(self.literal, float):
            literal = format_double(self.literal)
        else:
            literal = self.literal
        return f"{self.type.name} {self.lexeme} {literal}"

    def __repr__(self):
        return f"Token({self.type.name}, {self.lexeme!r}, {self.line})"


class LexerError(Exception):
    """An invalid character or malformed literal found while scanning."""

    def __init__(self, message: str, line: int):
        self.message = message
        self.line = line
        super().__init__(self._format())

    def _format(self) -> str:
        return f"[line {self.line}] Error: {self.message}"


class Lexer:
    """Lox lexer. Produces tokens via scan_tokens()."""

    KEYWORDS = {
        "and": TokenType.AND,
        "class": TokenType.CLASS,
        "else": TokenType.ELSE,
        "false": TokenType.FALSE,
        "for": TokenType.FOR,
        "fun": TokenType.FUN,
        "if": TokenType.IF,
        "nil": TokenType.NIL,
        "or": TokenType.OR,
        "print": TokenType.PRINT,
        "return": TokenType.RETURN,
        "super": TokenType.SUPER,
        "this": TokenType.THIS,
        "true": TokenType.TRUE,
        "var": TokenType.VAR,
        "while": TokenType.WHILE,
    }

    SINGLE_CHAR = {
        "(": TokenType.LEFT_PAREN,
        ")": TokenType.RIGHT_PAREN,
        "{": TokenType.LEFT_BRACE,
        "}": TokenType.RIGHT_BRACE,
        ",": TokenType.COMMA,
        ".": TokenType.DOT,
        "-": TokenType.MINUS,
        "+": TokenType.PLUS,
        ";": TokenType.SEMICOLON,
        "*": TokenType.STAR,
    }

    # Operators that may be followed by '=' (maximal munch)
    WITH_EQUAL = {
        "!": (TokenType.BANG, TokenType.BANG_EQUAL),
        "=": (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
        "<": (TokenType.LESS, TokenType.LESS_EQUAL),
        ">": (TokenType.GREATER, TokenType.GREATER_EQUAL),
    }

    # Whitespace (skipped except newline)
    WHITESPACE = {" ", "\t", "\r"}

    def __init__(self, source: str):
        self.source = source
        self.start = 0  # index of the first character of the current lexeme
        self.pos = 0  # current character index
        self.line = 1  # current line (1‑based)
        self.len = len(source)
        self.tokens: List[Token] = []
        self.errors: List[LexerError] = []

    def _current(self) -> Optional[str]:
        """Return the current character or None if at EOF."""
        if self.pos >= self.len:
            return None
        return self.source[self.pos]

    def _peek(self, offset: int = 1) -> Optional[str]:
        """Look ahead without advancing."""
        peek_pos = self.pos + offset
        if peek_pos >= self.len:
            return None
        return self.source[peek_pos]

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        return ch

    def _match(self, expected: str) -> bool:
        if self._current() != expected:
            return False
        self.pos += 1
        return True

    @staticmethod
    def _is_digit(ch: Optional[str]) -> bool:
        return ch is not None and "0" <= ch <= "9"

    @staticmethod
    def _is_alpha(ch: Optional[str]) -> bool:
        return ch is not None and ("a" <= ch <= "z" or "A" <= ch <= "Z" or ch == "_")

    def _add_token(self, type: TokenType, literal: LiteralValue = None) -> None:
        lexeme = self.source[self.start : self.pos]
        self.tokens.append(Token(type, lexeme, literal, self.line))

    def _error(self, message: str) -> None:
        self.errors.append(LexerError(message, self.line))

    def _skip_line_comment(self) -> None:
        """Skip from // to the end of the line."""
        while (ch := self._current()) is not None and ch != "\n":
            self.pos += 1
        # The newline itself is counted by the main loop

    def _read_number(self) -> None:
        """Read an integer part with an optional fractional part."""
        while self._is_digit(self._current()):
            self.pos += 1
        # A trailing '.' without a digit after it is left for the DOT token
        if self._current() == "." and self._is_digit(self._peek()):
            self.pos += 1
            while self._is_digit(self._current()):
                self.pos += 1
        self._add_token(TokenType.NUMBER, float(self.source[self.start : self.pos]))

    def _read_string(self) -> None:
        """Read a string literal; strings may span lines and have no escapes."""
        while (ch := self._current()) is not None and ch != '"':
            if ch == "\n":
                self.line += 1
            self.pos += 1
        if self._current() is None:
            self._error("Unterminated string.")
            return
        self.pos += 1  # closing quote
        self._add_token(TokenType.STRING, self.source[self.start + 1 : self.pos - 1])

    def _read_identifier_or_keyword(self) -> None:
        """Read an identifier (or keyword if it matches)."""
        while (ch := self._current()) is not None and (
            self._is_alpha(ch) or self._is_digit(ch)
        ):
            self.pos += 1
        text = self.source[self.start : self.pos]
        self._add_token(self.KEYWORDS.get(text, TokenType.IDENTIFIER))

    def _scan_token(self) -> None:
        ch = self._advance()

        if ch in self.WHITESPACE:
            return
        if ch == "\n":
            self.line += 1
            return
        if ch in self.SINGLE_CHAR:
            self._add_token(self.SINGLE_CHAR[ch])
            return
        if ch in self.WITH_EQUAL:
            single, double = self.WITH_EQUAL[ch]
            self._add_token(double if self._match("=") else single)
            return
        if ch == "/":
            if self._current() == "/":
                self._skip_line_comment()
            else:
                self._add_token(TokenType.SLASH)
            return
        if ch == '"':
            self._read_string()
            return
        if self._is_digit(ch):
            self._read_number()
            return
        if self._is_alpha(ch):
            self._read_identifier_or_keyword()
            return

        # If we reach here, it's an invalid character
        self._error(f"Unexpected character: {ch}")

    def scan_tokens(self) -> List[Token]:
        """Main lexer entry point: scan the whole source, ending with EOF."""
        while self.pos < self.len:
            self.start = self.pos
            self._scan_token()

        # End of file
        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        return self.tokens


def scan(source: str) -> Tuple[List[Token], List[LexerError]]:
    """Scan source text, returning the tokens and any errors found."""
    lexer = Lexer(source)
    tokens = lexer.scan_tokens()
    return tokens, lexer.errors
