"""Key events accepted by the calculator engine.

Each key on the keypad maps to one frozen dataclass. ``parse_keys`` turns
typed text (as used by the CLI) into a list of events.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .config import HISTORY_KEY_REGEX, INPUT_ALIASES, OPERATORS, SQRT_SYMBOL
from .types import ValidationError


@dataclass(frozen=True)
class Digit:
    digit: str

    def __post_init__(self) -> None:
        if len(self.digit) != 1 or self.digit not in "0123456789":
            raise ValidationError(f"Not a digit: {self.digit!r}", "INVALID_KEY")


@dataclass(frozen=True)
class Decimal:
    pass


@dataclass(frozen=True)
class Operator:
    op: str

    def __post_init__(self) -> None:
        if self.op not in OPERATORS:
            raise ValidationError(f"Not an operator: {self.op!r}", "INVALID_KEY")


@dataclass(frozen=True)
class OpenParen:
    pass


@dataclass(frozen=True)
class CloseParen:
    pass


@dataclass(frozen=True)
class SquareRoot:
    pass


@dataclass(frozen=True)
class ToggleSign:
    pass


@dataclass(frozen=True)
class Clear:
    pass


@dataclass(frozen=True)
class Equals:
    pass


@dataclass(frozen=True)
class SelectHistoryEntry:
    index: int


@dataclass(frozen=True)
class ClearHistory:
    pass


KeyEvent = Union[
    Digit,
    Decimal,
    Operator,
    OpenParen,
    CloseParen,
    SquareRoot,
    ToggleSign,
    Clear,
    Equals,
    SelectHistoryEntry,
    ClearHistory,
]

# Multi-character key names
_WORD_KEYS = {
    "sqrt": SquareRoot,
    "neg": ToggleSign,
    "+/-": ToggleSign,
    "clear": Clear,
    "ac": Clear,
    "enter": Equals,
    "clear-history": ClearHistory,
    "ch": ClearHistory,
}

_CHAR_KEYS = {
    ".": Decimal,
    "(": OpenParen,
    ")": CloseParen,
    SQRT_SYMBOL: SquareRoot,
    "±": ToggleSign,
    "c": Clear,
    "=": Equals,
}


def parse_key(text: str) -> KeyEvent:
    """Convert one key name into an event.

    Args:
        text: Key name, e.g. "7", "+", "×", "(", "sqrt", "neg", "=", "h2"

    Returns:
        The matching key event

    Raises:
        ValidationError: If the name does not denote a key
    """
    name = text.strip().lower()
    if name in _WORD_KEYS:
        return _WORD_KEYS[name]()
    history = HISTORY_KEY_REGEX.match(name)
    if history:
        return SelectHistoryEntry(int(history.group(1)))
    if len(name) == 1:
        if name.isdigit():
            return Digit(name)
        op = INPUT_ALIASES.get(name, name)
        if op in OPERATORS:
            return Operator(op)
        if name in _CHAR_KEYS:
            return _CHAR_KEYS[name]()
    raise ValidationError(f"Unknown key: {text!r}", "INVALID_KEY")


def parse_keys(text: str) -> list[KeyEvent]:
    """Convert a whitespace-separated key sequence into events.

    Named keys ("sqrt", "neg", "h0", ...) must stand alone; any other word
    is read one character per key, so "12+3=" and "1 2 + 3 =" are equivalent.
    """
    events: list[KeyEvent] = []
    for word in text.split():
        lowered = word.lower()
        if lowered in _WORD_KEYS or HISTORY_KEY_REGEX.match(lowered):
            events.append(parse_key(lowered))
        else:
            events.extend(parse_key(char) for char in word)
    return events
