"""Keypad expression builder and evaluator.

The calculator state is an immutable value. ``reduce`` applies one key
event and returns the next state; ``Calculator`` wraps it for callers that
want a mutable session with history load/save hooks.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from typing import Callable, Iterable

from .config import ERROR_SENTINEL, ERROR_SUMMARY, HISTORY_LIMIT, OPERATORS, SQRT_SYMBOL
from .keys import (
    Clear,
    ClearHistory,
    CloseParen,
    Decimal,
    Digit,
    Equals,
    KeyEvent,
    OpenParen,
    Operator,
    SelectHistoryEntry,
    SquareRoot,
    ToggleSign,
)
from .lexer import tokenize, trailing_number
from .logging_config import get_logger
from .parser import close_expression, evaluate_expression, format_number, prettify_expr
from .types import EvaluationError, HistoryEntry, ParseError, ValidationError

logger = get_logger("engine")


@dataclass(frozen=True)
class CalculatorState:
    """Complete state of one calculator session."""

    display: str = "0"
    expression: str = ""  # canonical ASCII operators, √( for square root
    open_parens: int = 0
    last_result: str | None = None
    waiting_for_operand: bool = False
    error: bool = False
    summary: str = ""  # secondary readout once the expression is consumed
    history: tuple[HistoryEntry, ...] = ()

    @property
    def expression_text(self) -> str:
        """Text for the secondary readout."""
        if self.error or not self.expression:
            return self.summary
        return prettify_expr(self.expression)


def _fresh(state: CalculatorState) -> CalculatorState:
    return CalculatorState(history=state.history)


def _last_char(state: CalculatorState) -> str:
    return state.expression[-1:]


def _on_digit(state: CalculatorState, event: Digit) -> CalculatorState:
    d = event.digit
    if state.last_result is not None:
        return replace(_fresh(state), display=d, expression=d)
    if _last_char(state) == ")":
        return replace(
            state, display=d, expression=state.expression + "*" + d,
            waiting_for_operand=False,
        )
    if state.waiting_for_operand:
        return replace(
            state, display=d, expression=state.expression + d,
            waiting_for_operand=False,
        )
    if state.display == "0":
        # Replace a lone leading zero of the current operand
        expression = state.expression
        if expression.endswith("0"):
            expression = expression[:-1]
        return replace(state, display=d, expression=expression + d)
    return replace(state, display=state.display + d, expression=state.expression + d)


def _on_decimal(state: CalculatorState, event: Decimal) -> CalculatorState:
    if state.last_result is not None:
        return replace(_fresh(state), display="0.", expression="0.")
    if _last_char(state) == ")":
        return replace(
            state, display="0.", expression=state.expression + "*0.",
            waiting_for_operand=False,
        )
    if state.waiting_for_operand:
        return replace(
            state, display="0.", expression=state.expression + "0.",
            waiting_for_operand=False,
        )
    if "." in state.display:
        return state
    if not _last_char(state).isdigit():
        return replace(state, display="0.", expression=state.expression + "0.")
    return replace(state, display=state.display + ".", expression=state.expression + ".")


def _append_operator(expression: str, op: str, display: str) -> str | None:
    """Return the expression with ``op`` applied, or None if the press is ignored."""
    last = expression[-1:]
    if last in OPERATORS:
        # Last operator wins
        return _append_operator(expression[:-1], op, display)
    if not expression:
        return "-" if op == "-" else display + op
    if last == "(" and op != "-":
        return None
    return expression + op


def _on_operator(state: CalculatorState, event: Operator) -> CalculatorState:
    if state.last_result is not None:
        return replace(
            state,
            display=state.last_result,
            expression=state.last_result + event.op,
            last_result=None,
            waiting_for_operand=True,
            summary="",
        )
    expression = _append_operator(state.expression, event.op, state.display)
    if expression is None:
        return state
    return replace(state, expression=expression, waiting_for_operand=True)


def _on_open_paren(state: CalculatorState, event: OpenParen) -> CalculatorState:
    if state.last_result is not None:
        state = _fresh(state)
    last = _last_char(state)
    prefix = "*(" if last.isdigit() or last in (")", ".") else "("
    return replace(
        state,
        expression=state.expression + prefix,
        open_parens=state.open_parens + 1,
        waiting_for_operand=True,
    )


def _on_close_paren(state: CalculatorState, event: CloseParen) -> CalculatorState:
    last = _last_char(state)
    if state.open_parens == 0 or last == "(" or last in OPERATORS:
        return state
    return replace(
        state,
        expression=state.expression + ")",
        open_parens=state.open_parens - 1,
        waiting_for_operand=False,
    )


def _on_square_root(state: CalculatorState, event: SquareRoot) -> CalculatorState:
    if state.last_result is not None:
        return replace(
            state,
            expression=f"{SQRT_SYMBOL}({state.last_result})",
            last_result=None,
            waiting_for_operand=True,
            summary="",
        )
    last = _last_char(state)
    if not state.expression or last in OPERATORS or last == "(":
        prefix = SQRT_SYMBOL + "("
    else:
        prefix = "*" + SQRT_SYMBOL + "("
    return replace(
        state,
        expression=state.expression + prefix,
        open_parens=state.open_parens + 1,
        waiting_for_operand=True,
    )


def _on_toggle_sign(state: CalculatorState, event: ToggleSign) -> CalculatorState:
    if state.display == "0":
        return state
    if state.last_result is not None:
        negated = format_number(-float(state.last_result))
        previous = state.summary.split(" = ")[0] if state.summary else state.last_result
        return replace(
            state,
            display=negated,
            last_result=negated,
            summary=f"-({previous}) = {negated}",
        )
    tokens = tokenize(state.expression)
    located = trailing_number(tokens)
    if located is None:
        return state
    sign_index, number_index = located
    text = tokens[number_index].text
    if float(text) == 0:
        return state
    # Keep the typed digits so a trailing "." survives
    negated = "-" + text if sign_index == number_index else text
    start = tokens[sign_index].start
    return replace(state, display=negated, expression=state.expression[:start] + negated)


def _on_clear(state: CalculatorState, event: Clear) -> CalculatorState:
    return _fresh(state)


def _on_equals(state: CalculatorState, event: Equals) -> CalculatorState:
    if state.error or not state.expression:
        return state
    closed = close_expression(state.expression, state.open_parens)
    try:
        value = evaluate_expression(closed)
    except (ParseError, EvaluationError, ValidationError) as e:
        logger.info(f"Evaluation of {closed!r} failed ({e.code}): {e}")
        return replace(
            state,
            display=ERROR_SENTINEL,
            error=True,
            summary=ERROR_SUMMARY,
            waiting_for_operand=False,
        )
    result = format_number(value)
    pretty = prettify_expr(closed)
    entry = HistoryEntry(
        expression=pretty, result=result, timestamp=int(time.time() * 1000)
    )
    logger.debug(f"Evaluated {closed!r} = {result}")
    return replace(
        state,
        display=result,
        expression="",
        open_parens=0,
        last_result=result,
        waiting_for_operand=False,
        summary=f"{pretty} = {result}",
        history=((entry,) + state.history)[:HISTORY_LIMIT],
    )


def _on_select_history(
    state: CalculatorState, event: SelectHistoryEntry
) -> CalculatorState:
    if not 0 <= event.index < len(state.history):
        return state
    entry = state.history[event.index]
    return replace(
        _fresh(state),
        display=entry.result,
        last_result=entry.result,
        summary=f"{entry.expression} = {entry.result}",
    )


def _on_clear_history(state: CalculatorState, event: ClearHistory) -> CalculatorState:
    return replace(state, history=())


_HANDLERS: dict[type, Callable[[CalculatorState, KeyEvent], CalculatorState]] = {
    Digit: _on_digit,
    Decimal: _on_decimal,
    Operator: _on_operator,
    OpenParen: _on_open_paren,
    CloseParen: _on_close_paren,
    SquareRoot: _on_square_root,
    ToggleSign: _on_toggle_sign,
    Clear: _on_clear,
    Equals: _on_equals,
    SelectHistoryEntry: _on_select_history,
    ClearHistory: _on_clear_history,
}

# Keys that act on an errored state without resetting it first
_KEEP_ERROR = (Equals, SelectHistoryEntry, ClearHistory)


def reduce(state: CalculatorState, event: KeyEvent) -> CalculatorState:
    """Apply one key event to a state and return the next state.

    Raises:
        TypeError: If ``event`` is not a key event
    """
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unsupported key event: {event!r}")
    if state.error and not isinstance(event, _KEEP_ERROR):
        state = _fresh(state)
    return handler(state, event)


class Calculator:
    """Mutable calculator session.

    Args:
        history: Entries to start with (most recent first), e.g. from
            ``history.load_history()``
        on_history_change: Called with the new history list whenever a key
            press changes it
    """

    def __init__(
        self,
        history: Iterable[HistoryEntry] | None = None,
        on_history_change: Callable[[list[HistoryEntry]], None] | None = None,
    ):
        self.state = CalculatorState(history=tuple(history or ())[:HISTORY_LIMIT])
        self._on_history_change = on_history_change

    def press(self, event: KeyEvent) -> CalculatorState:
        previous = self.state
        self.state = reduce(previous, event)
        if self.state.history is not previous.history and self._on_history_change:
            self._on_history_change(list(self.state.history))
        return self.state

    def press_many(self, events: Iterable[KeyEvent]) -> CalculatorState:
        for event in events:
            self.press(event)
        return self.state

    @property
    def display(self) -> str:
        return self.state.display

    @property
    def expression_text(self) -> str:
        return self.state.expression_text

    @property
    def history(self) -> list[HistoryEntry]:
        return list(self.state.history)
