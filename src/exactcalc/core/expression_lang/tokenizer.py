"""
Tokenizer for the exactcalc expression language.

Scans an expression string left to right exactly once, yielding typed
tokens lazily. A ``+`` or ``-`` directly followed by a digit is folded into
the numeric literal when it appears at the start of the expression or right
after ``*``, ``/`` or ``(``; everywhere else it is a binary operator.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from enum import StrEnum, auto

from exactcalc.core.errors import make_syntax_error


class TokenKind(StrEnum):
    """Token types for the expression language."""

    # Operands
    NUMBER = auto()
    IDENT = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()


class Token:
    """A single token from the expression tokenizer."""

    __slots__ = ("kind", "value", "pos")

    def __init__(self, kind: TokenKind, value: str, pos: int) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"


_SINGLE_MAP: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}

# Token kinds after which a sign binds to the following literal
_SIGN_PREFIX_KINDS = frozenset({None, TokenKind.STAR, TokenKind.SLASH, TokenKind.LPAREN})

_DIGITS = frozenset("0123456789")

# Digits, at most one '.', then an optional exponent whose sign belongs to it.
# The exponent digits are optional here so that "2e" is rejected as a
# malformed literal rather than read as 2 followed by a variable.
_NUMBER_RE = re.compile(r"[0-9]+(?:\.[0-9]*)?(?:[eE][+-]?[0-9]*)?")


def is_digit(c: str) -> bool:
    """ASCII digits only; numeric parsing is culture invariant."""
    return c in _DIGITS


def scan(source: str) -> Iterator[Token]:
    """Yield the tokens of an expression string one at a time.

    Raises:
        ExpressionSyntaxError: On a character that starts no token.
    """
    i = 0
    n = len(source)
    prev: TokenKind | None = None

    while i < n:
        c = source[i]

        # Whitespace never counts as the previous token
        if c.isspace():
            i += 1
            continue

        if is_digit(c):
            end = _number_end(source, i)
            yield Token(TokenKind.NUMBER, source[i:end], i)
            prev = TokenKind.NUMBER
            i = end
            continue

        # Signed literal: -5, 2*-3, (+4)
        if c in "+-" and i + 1 < n and is_digit(source[i + 1]) and prev in _SIGN_PREFIX_KINDS:
            end = _number_end(source, i + 1)
            yield Token(TokenKind.NUMBER, source[i:end], i)
            prev = TokenKind.NUMBER
            i = end
            continue

        if c.isalpha():
            end = i + 1
            while end < n and source[end].isalpha():
                end += 1
            yield Token(TokenKind.IDENT, source[i:end], i)
            prev = TokenKind.IDENT
            i = end
            continue

        kind = _SINGLE_MAP.get(c)
        if kind is None:
            raise make_syntax_error(f"Encountered invalid character {c!r}", source, i)
        yield Token(kind, c, i)
        prev = kind
        i += 1


def _number_end(source: str, start: int) -> int:
    """Return the end offset of the numeric literal starting at ``start``."""
    m = _NUMBER_RE.match(source, start)
    assert m is not None
    return m.end()
