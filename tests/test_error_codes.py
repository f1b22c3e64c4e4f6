"""Test error codes returned by various functions."""

import unittest

from keycalc_pkg.api import evaluate
from keycalc_pkg.converters import convert_units
from keycalc_pkg.keys import parse_key
from keycalc_pkg.parser import evaluate_expression
from keycalc_pkg.types import ParseError, ValidationError


class TestErrorCodes(unittest.TestCase):
    """Test that functions return appropriate error codes."""

    def test_malformed_expression_code(self):
        with self.assertRaises(ParseError) as ctx:
            evaluate_expression("2 +")
        self.assertEqual(ctx.exception.code, "MALFORMED_EXPRESSION")

    def test_non_finite_result_code(self):
        self.assertEqual(evaluate("1/0").code, "NON_FINITE_RESULT")
        self.assertEqual(evaluate("√(-1)").code, "NON_FINITE_RESULT")
        self.assertEqual(evaluate("3%0").code, "NON_FINITE_RESULT")

    def test_unexpected_character_code(self):
        self.assertEqual(evaluate("2+y").code, "UNEXPECTED_CHARACTER")

    def test_unbalanced_parentheses_code(self):
        self.assertEqual(evaluate("2+3)").code, "UNBALANCED_PARENTHESES")

    def test_empty_input_code(self):
        self.assertEqual(evaluate("   ").code, "EMPTY_INPUT")

    def test_too_long_error_code(self):
        result = evaluate("1" * 1001)
        self.assertEqual(result.code, "TOO_LONG")
        self.assertIn("too long", result.error.lower())

    def test_invalid_key_code(self):
        with self.assertRaises(ValidationError) as ctx:
            parse_key("^")
        self.assertEqual(ctx.exception.code, "INVALID_KEY")

    def test_unknown_unit_code(self):
        with self.assertRaises(ValidationError) as ctx:
            convert_units(1, "furlong", "m")
        self.assertEqual(ctx.exception.code, "UNKNOWN_UNIT")


if __name__ == "__main__":
    unittest.main()
