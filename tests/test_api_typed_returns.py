"""Test that API functions return typed dataclasses."""

from keycalc_pkg.api import (
    bmi,
    convert_units,
    evaluate,
    press_keys,
    validate_expression,
)
from keycalc_pkg.types import (
    BmiResult,
    ConversionResult,
    EvalResult,
    HistoryEntry,
    KeypadResult,
)


class TestAPITypedReturns:
    """Test that all API functions return typed dataclasses."""

    def test_evaluate_returns_eval_result(self):
        result = evaluate("2 + 2")
        assert isinstance(result, EvalResult)
        assert result.ok is True
        assert result.result == "4"

    def test_evaluate_closes_parentheses(self):
        result = evaluate("√(16")
        assert result.ok is True
        assert result.result == "4"
        assert result.expression == "√(16)"

    def test_evaluate_display_form(self):
        result = evaluate("6*2/3")
        assert result.expression == "6×2÷3"

    def test_evaluate_error_returns_eval_result(self):
        result = evaluate("5/0")
        assert isinstance(result, EvalResult)
        assert result.ok is False
        assert result.code == "NON_FINITE_RESULT"
        assert result.to_dict() == {
            "ok": False,
            "error": "Division by zero",
            "code": "NON_FINITE_RESULT",
        }

    def test_validate_expression_returns_tuple(self):
        assert validate_expression("2 + 2") == (True, None)
        is_valid, error = validate_expression("2 + a")
        assert is_valid is False
        assert "position 4" in error
        assert validate_expression("(2")[0] is False

    def test_press_keys_returns_keypad_result(self):
        result = press_keys("( 2 ) 3 =")
        assert isinstance(result, KeypadResult)
        assert result.ok is True
        assert result.display == "6"
        assert result.expression == "(2)×3 = 6"
        assert [entry.result for entry in result.history] == ["6"]

    def test_press_keys_error(self):
        result = press_keys("5/0=")
        assert result.ok is False
        assert result.display == "Error"
        assert result.error == "Error in expression"

    def test_press_keys_bad_key(self):
        result = press_keys("2 ? 3")
        assert result.ok is False
        assert "Unknown key" in result.error

    def test_press_keys_with_history(self):
        result = press_keys("h0 * 2 =", history=[HistoryEntry("3+4", "7", 1)])
        assert result.display == "14"
        assert len(result.history) == 2
        assert result.to_dict()["history"][1]["result"] == "7"

    def test_bmi_returns_bmi_result(self):
        result = bmi(180, 72)
        assert isinstance(result, BmiResult)
        assert result.ok is True
        assert result.category == "Normal weight"
        assert bmi(0, 72).ok is False

    def test_convert_units_returns_conversion_result(self):
        result = convert_units(5, "km", "m")
        assert isinstance(result, ConversionResult)
        assert result.to_dict() == {"ok": True, "result": "5000", "category": "length"}
        assert convert_units(5, "km", "kg").ok is False

    def test_validate_and_evaluate_agree_on_empty_input(self):
        for text in ("", "   "):
            assert validate_expression(text) == (False, "Expression is empty")
            assert evaluate(text).code == "EMPTY_INPUT"

    def test_bmi_never_raises_on_extreme_input(self):
        result = bmi(1e-200, 70)
        assert result.ok is False
        assert result.bmi is None
        assert bmi(1e-150, 1e300).ok is False

    def test_convert_units_reports_overflow(self):
        result = convert_units(1e308, "km", "mm")
        assert result.ok is False
        assert result.result is None
        assert "finite" in result.error
