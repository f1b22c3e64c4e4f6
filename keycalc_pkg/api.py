"""Public API for keycalc - returns structured objects without side effects."""

from __future__ import annotations

from typing import Iterable

from . import converters
from .engine import Calculator
from .keys import parse_keys
from .lexer import tokenize
from .logging_config import get_logger
from .parser import (
    close_expression,
    count_open_parens,
    evaluate_expression,
    format_number,
    prettify_expr,
)
from .types import (
    BmiResult,
    ConversionResult,
    EvalResult,
    EvaluationError,
    HistoryEntry,
    KeypadResult,
    ParseError,
    ValidationError,
)

logger = get_logger("api")


def evaluate(expression: str) -> EvalResult:
    """Evaluate an expression string.

    Unmatched opening parentheses are closed automatically, as the keypad
    does before evaluating.

    Args:
        expression: Expression such as "2+3*4", "√(16)÷2" or "sqrt(2"

    Returns:
        EvalResult with the formatted result and the closed display form

    Example:
        >>> from keycalc_pkg.api import evaluate
        >>> evaluate("(2)*3").result
        '6'
        >>> evaluate("5/0").code
        'NON_FINITE_RESULT'
    """
    text = (expression or "").strip()
    try:
        closed = close_expression(text, count_open_parens(text))
        value = evaluate_expression(closed)
    except (ParseError, EvaluationError, ValidationError) as e:
        logger.info(f"Evaluation of {text!r} failed ({e.code}): {e}")
        return EvalResult(ok=False, error=str(e), code=e.code)
    return EvalResult(ok=True, result=format_number(value), expression=prettify_expr(closed))


def validate_expression(expression: str) -> tuple[bool, str | None]:
    """Check that an expression only uses calculator tokens and balanced parentheses.

    Args:
        expression: Expression string to validate

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> from keycalc_pkg.api import validate_expression
        >>> validate_expression("2 + 2")
        (True, None)
        >>> validate_expression("2 + a")
        (False, "Unexpected character 'a' at position 4")
        >>> validate_expression("")
        (False, 'Expression is empty')
    """
    try:
        if not tokenize(expression or ""):
            return False, "Expression is empty"
        if count_open_parens(expression or ""):
            return False, "Unclosed parenthesis"
        return True, None
    except ParseError as e:
        return False, str(e)


def press_keys(
    keys: str, history: Iterable[HistoryEntry] | None = None
) -> KeypadResult:
    """Run a key sequence on a fresh calculator.

    Args:
        keys: Key text, e.g. "12+3=" or "sqrt 9 ) ="
        history: Optional starting history (most recent first)

    Returns:
        KeypadResult with the final display, readout and history; ok is
        False when the keys could not be parsed or the last evaluation failed

    Example:
        >>> from keycalc_pkg.api import press_keys
        >>> press_keys("( 2 ) 3 =").display
        '6'
    """
    try:
        events = parse_keys(keys)
    except ValidationError as e:
        return KeypadResult(ok=False, error=str(e), history=list(history or []))
    calculator = Calculator(history=history)
    state = calculator.press_many(events)
    return KeypadResult(
        ok=not state.error,
        display=state.display,
        expression=state.expression_text,
        error=state.summary if state.error else None,
        history=list(state.history),
    )


def bmi(height: float | str, weight: float | str, system: str = "metric") -> BmiResult:
    """Compute body-mass index.

    Example:
        >>> from keycalc_pkg.api import bmi
        >>> bmi(180, 72).category
        'Normal weight'
    """
    try:
        value, category = converters.bmi(height, weight, system)
    except ValidationError as e:
        return BmiResult(ok=False, error=str(e))
    return BmiResult(ok=True, bmi=value, category=category)


def convert_units(
    value: float | str, from_unit: str, to_unit: str, category: str | None = None
) -> ConversionResult:
    """Convert a value between units of length, weight, volume or temperature.

    Example:
        >>> from keycalc_pkg.api import convert_units
        >>> convert_units(1, "km", "m").result
        '1000'
    """
    try:
        result, resolved = converters.convert_units(value, from_unit, to_unit, category)
    except ValidationError as e:
        return ConversionResult(ok=False, error=str(e))
    return ConversionResult(ok=True, result=result, category=resolved)
