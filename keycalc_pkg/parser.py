"""Expression parsing, evaluation and result formatting.

This module handles:
- Input validation (length, nesting depth, balanced parentheses)
- Recursive-descent evaluation of flat infix arithmetic with parentheses
  and square root, using IEEE-754 doubles
- Closing unmatched parentheses before evaluation
- Result formatting and the cosmetic display form of expressions
"""

from __future__ import annotations

import math

from .config import (
    DISPLAY_SYMBOLS,
    MAX_EXPRESSION_DEPTH,
    MAX_EXPRESSION_LENGTH,
    RESULT_DECIMALS,
)
from .lexer import LPAREN, NUMBER, OPERATOR, RPAREN, SQRT, Token, tokenize
from .types import EvaluationError, ParseError, ValidationError


def format_number(value: float, decimals: int | None = None) -> str:
    """Format a float for display.

    Integral values print without a decimal point. Everything else is fixed
    to ``decimals`` places with trailing zeros (and a dangling point) removed.

    Args:
        value: Finite float to format
        decimals: Number of decimal places kept before stripping
            (default: RESULT_DECIMALS)

    Returns:
        Formatted string (e.g. 3.0 -> "3", 0.1 + 0.2 -> "0.3")
    """
    if decimals is None:
        decimals = RESULT_DECIMALS
    if value.is_integer():
        text = str(int(value))
    else:
        text = f"{value:.{decimals}f}".rstrip("0").rstrip(".")
    if text == "-0":
        return "0"
    return text


def prettify_expr(expr_str: str) -> str:
    """Convert a canonical expression to its display form.

    Args:
        expr_str: Expression with ASCII operators (e.g. "6*2/3")

    Returns:
        Display string (e.g. "6×2÷3")
    """
    for ascii_op, symbol in DISPLAY_SYMBOLS.items():
        expr_str = expr_str.replace(ascii_op, symbol)
    return expr_str


def close_expression(expr_str: str, open_parens: int) -> str:
    """Append one closing parenthesis per unmatched opening one."""
    return expr_str + ")" * max(open_parens, 0)


def count_open_parens(expr_str: str) -> int:
    """Count unmatched opening parentheses in an expression.

    Raises:
        ParseError: If a closing parenthesis has no matching opening one
    """
    depth = 0
    for pos, char in enumerate(expr_str):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise ParseError(
                    f"Unmatched ')' at position {pos}", "UNBALANCED_PARENTHESES"
                )
    return depth


class _Evaluator:
    """Recursive-descent evaluator over a token list.

    Grammar::

        expression := term (('+' | '-') term)*
        term       := unary (('*' | '/' | '%') unary)*
        unary      := ('+' | '-') unary | primary
        primary    := NUMBER | '(' expression ')' | '√' '(' expression ')'
    """

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    def _peek(self) -> Token | None:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _advance(self) -> Token:
        token = self._peek()
        if token is None:
            raise ParseError("Unexpected end of expression")
        self.pos += 1
        return token

    def _expect(self, kind: str) -> Token:
        token = self._advance()
        if token.kind != kind:
            raise ParseError(
                f"Unexpected {token.text!r} at position {token.start}"
            )
        return token

    def run(self) -> float:
        if not self.tokens:
            raise ParseError("Expression is empty", "EMPTY_INPUT")
        value = self.expression()
        token = self._peek()
        if token is not None:
            raise ParseError(f"Unexpected {token.text!r} at position {token.start}")
        return value

    def expression(self) -> float:
        value = self.term()
        while True:
            token = self._peek()
            if token is None or token.kind != OPERATOR or token.text not in "+-":
                return value
            self.pos += 1
            right = self.term()
            value = _finite(value + right if token.text == "+" else value - right)

    def term(self) -> float:
        value = self.unary()
        while True:
            token = self._peek()
            if token is None or token.kind != OPERATOR or token.text not in "*/%":
                return value
            self.pos += 1
            right = self.unary()
            if token.text == "*":
                value = _finite(value * right)
            elif right == 0:
                raise EvaluationError(
                    "Division by zero" if token.text == "/" else "Modulo by zero"
                )
            elif token.text == "/":
                value = _finite(value / right)
            else:
                value = _finite(math.fmod(value, right))

    def unary(self) -> float:
        token = self._peek()
        if token is not None and token.kind == OPERATOR and token.text in "+-":
            self.pos += 1
            self._enter()
            operand = self.unary()
            self.depth -= 1
            return -operand if token.text == "-" else operand
        return self.primary()

    def primary(self) -> float:
        token = self._advance()
        if token.kind == NUMBER:
            return _finite(float(token.text))
        if token.kind == LPAREN:
            return self._group()
        if token.kind == SQRT:
            self._expect(LPAREN)
            value = self._group()
            if value < 0:
                raise EvaluationError("Square root of a negative number")
            return math.sqrt(value)
        raise ParseError(f"Unexpected {token.text!r} at position {token.start}")

    def _group(self) -> float:
        # Opening parenthesis already consumed
        self._enter()
        value = self.expression()
        token = self._peek()
        if token is None or token.kind != RPAREN:
            raise ParseError("Missing closing parenthesis", "UNBALANCED_PARENTHESES")
        self.pos += 1
        self.depth -= 1
        return value

    def _enter(self) -> None:
        self.depth += 1
        if self.depth > MAX_EXPRESSION_DEPTH:
            raise ValidationError(
                f"Expression too deeply nested (>{MAX_EXPRESSION_DEPTH} levels)",
                "TOO_DEEP",
            )


def _finite(value: float) -> float:
    if not math.isfinite(value):
        raise EvaluationError("Result is not a finite number")
    return value


def evaluate_expression(expr_str: str) -> float:
    """Evaluate a closed infix expression.

    Args:
        expr_str: Expression text with balanced parentheses

    Returns:
        The value as a finite float

    Raises:
        ValidationError: If the input is too long or too deeply nested
        ParseError: If the expression is malformed
        EvaluationError: If the value is infinite or not a real number
    """
    if len(expr_str) > MAX_EXPRESSION_LENGTH:
        raise ValidationError(
            f"Expression too long (>{MAX_EXPRESSION_LENGTH} characters)", "TOO_LONG"
        )
    return _Evaluator(tokenize(expr_str)).run()
