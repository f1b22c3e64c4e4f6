"""Tokenizer for calculator expressions.

Splits an expression buffer into numbers, operators, parentheses and the
square-root marker. Display symbols (× ÷) and the word ``sqrt`` are
accepted and normalized, so both the canonical buffer and text typed by
hand can be lexed.
"""

from __future__ import annotations

from dataclasses import dataclass

from .config import INPUT_ALIASES, NUMBER_REGEX, OPERATORS, SQRT_SYMBOL, SQRT_WORD_REGEX
from .types import ParseError

NUMBER = "NUMBER"
OPERATOR = "OPERATOR"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
SQRT = "SQRT"


@dataclass(frozen=True)
class Token:
    """A lexeme of the expression with its position in the source text."""

    kind: str
    text: str
    start: int
    end: int


def tokenize(expr: str) -> list[Token]:
    """Split an expression into tokens.

    Args:
        expr: Expression text (e.g. "12*(3+√(4))")

    Returns:
        List of tokens in source order; operator tokens carry the
        canonical ASCII operator even when the source used × or ÷

    Raises:
        ParseError: On a character that is not part of the grammar
    """
    tokens: list[Token] = []
    pos = 0
    length = len(expr)
    while pos < length:
        char = expr[pos]
        if char.isspace():
            pos += 1
            continue
        number = NUMBER_REGEX.match(expr, pos)
        if number:
            tokens.append(Token(NUMBER, number.group(), pos, number.end()))
            pos = number.end()
            continue
        if char in OPERATORS or char in INPUT_ALIASES:
            tokens.append(Token(OPERATOR, INPUT_ALIASES.get(char, char), pos, pos + 1))
        elif char == "(":
            tokens.append(Token(LPAREN, char, pos, pos + 1))
        elif char == ")":
            tokens.append(Token(RPAREN, char, pos, pos + 1))
        elif char == SQRT_SYMBOL:
            tokens.append(Token(SQRT, char, pos, pos + 1))
        else:
            word = SQRT_WORD_REGEX.match(expr, pos)
            if not word:
                raise ParseError(
                    f"Unexpected character {char!r} at position {pos}",
                    "UNEXPECTED_CHARACTER",
                )
            tokens.append(Token(SQRT, SQRT_SYMBOL, pos, word.end()))
            pos = word.end()
            continue
        pos += 1
    return tokens


def is_unary_minus(tokens: list[Token], index: int) -> bool:
    """Return True if tokens[index] is a minus sign applied to what follows it."""
    token = tokens[index]
    if token.kind != OPERATOR or token.text != "-":
        return False
    if index == 0:
        return True
    return tokens[index - 1].kind in (OPERATOR, LPAREN, SQRT)


def trailing_number(tokens: list[Token]) -> tuple[int, int] | None:
    """Locate the number at the very end of a token list.

    Returns:
        (sign_index, number_index) where sign_index points at a unary minus
        written directly before the number, or equals number_index when the
        number carries no sign. None if the last token is not a number.
    """
    if not tokens or tokens[-1].kind != NUMBER:
        return None
    number_index = len(tokens) - 1
    if number_index > 0 and is_unary_minus(tokens, number_index - 1):
        return number_index - 1, number_index
    return number_index, number_index
