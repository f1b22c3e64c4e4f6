"""Tests for key names and key sequence parsing."""

import pytest

from keycalc_pkg.keys import (
    Clear,
    ClearHistory,
    CloseParen,
    Decimal,
    Digit,
    Equals,
    OpenParen,
    Operator,
    SelectHistoryEntry,
    SquareRoot,
    ToggleSign,
    parse_key,
    parse_keys,
)
from keycalc_pkg.types import ValidationError


class TestParseKey:
    def test_digits_and_operators(self):
        assert parse_key("7") == Digit("7")
        assert parse_key("%") == Operator("%")
        assert parse_key("×") == Operator("*")
        assert parse_key("÷") == Operator("/")
        assert parse_key("x") == Operator("*")

    def test_named_keys(self):
        assert parse_key("sqrt") == SquareRoot()
        assert parse_key("√") == SquareRoot()
        assert parse_key("neg") == ToggleSign()
        assert parse_key("±") == ToggleSign()
        assert parse_key("+/-") == ToggleSign()
        assert parse_key("C") == Clear()
        assert parse_key("AC") == Clear()
        assert parse_key("=") == Equals()
        assert parse_key("enter") == Equals()
        assert parse_key(".") == Decimal()
        assert parse_key("(") == OpenParen()
        assert parse_key(")") == CloseParen()
        assert parse_key("ch") == ClearHistory()

    def test_history_keys(self):
        assert parse_key("h3") == SelectHistoryEntry(3)
        assert parse_key("history:12") == SelectHistoryEntry(12)

    def test_unknown_key(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_key("?")
        assert exc_info.value.code == "INVALID_KEY"

    def test_invalid_event_values(self):
        with pytest.raises(ValidationError):
            Digit("12")
        with pytest.raises(ValidationError):
            Operator("^")


class TestParseKeys:
    def test_compact_and_spaced_equivalent(self):
        assert parse_keys("12+3=") == parse_keys("1 2 + 3 =")

    def test_named_keys_stand_alone(self):
        assert parse_keys("sqrt 9 ) =") == [SquareRoot(), Digit("9"), CloseParen(), Equals()]
        assert parse_keys("5+3 neg h0") == [
            Digit("5"),
            Operator("+"),
            Digit("3"),
            ToggleSign(),
            SelectHistoryEntry(0),
        ]

    def test_invalid_character_in_word(self):
        with pytest.raises(ValidationError):
            parse_keys("2+a")
