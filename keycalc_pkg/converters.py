"""Body-mass index and unit conversion helpers."""

from __future__ import annotations

import math

from .config import CONVERSION_DECIMALS
from .parser import format_number
from .types import ValidationError

# Factors to the base unit of each category (m, kg, l)
UNIT_FACTORS: dict[str, dict[str, float]] = {
    "length": {
        "mm": 0.001,
        "cm": 0.01,
        "m": 1,
        "km": 1000,
        "in": 0.0254,
        "ft": 0.3048,
        "yd": 0.9144,
        "mi": 1609.344,
    },
    "weight": {
        "mg": 0.000001,
        "g": 0.001,
        "kg": 1,
        "t": 1000,
        "oz": 0.0283495,
        "lb": 0.453592,
        "st": 6.35029,
    },
    "volume": {
        "ml": 0.001,
        "l": 1,
        "gal": 3.78541,
        "qt": 0.946353,
        "pt": 0.473176,
        "cup": 0.236588,
        "oz": 0.0295735,
        "tbsp": 0.0147868,
        "tsp": 0.00492892,
    },
}

# Temperature scales convert through Celsius
_TO_CELSIUS = {
    "c": lambda value: value,
    "f": lambda value: (value - 32) * 5 / 9,
    "k": lambda value: value - 273.15,
}
_FROM_CELSIUS = {
    "c": lambda value: value,
    "f": lambda value: value * 9 / 5 + 32,
    "k": lambda value: value + 273.15,
}

CATEGORIES = tuple(UNIT_FACTORS) + ("temperature",)

BMI_CATEGORIES = (
    (18.5, "Underweight"),
    (25.0, "Normal weight"),
    (30.0, "Overweight"),
)


def _positive(value: float | str, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be a number", "INVALID_INPUT") from e
    if not math.isfinite(number) or number <= 0:
        raise ValidationError(f"{name} must be a positive number", "INVALID_INPUT")
    return number


def bmi(height: float | str, weight: float | str, system: str = "metric") -> tuple[float, str]:
    """Compute body-mass index and its category.

    Args:
        height: Height in centimeters (metric) or inches (imperial)
        weight: Weight in kilograms (metric) or pounds (imperial)
        system: "metric" or "imperial"

    Returns:
        (bmi rounded to one decimal, category label)

    Raises:
        ValidationError: On non-positive inputs or an unknown system
    """
    height_value = _positive(height, "Height")
    weight_value = _positive(weight, "Weight")
    if system == "metric":
        meters = height_value / 100
        numerator, denominator = weight_value, meters * meters
    elif system == "imperial":
        numerator, denominator = weight_value * 703, height_value * height_value
    else:
        raise ValidationError(f"Unknown unit system: {system!r}", "INVALID_INPUT")
    if denominator == 0:
        raise ValidationError("Height is too small", "INVALID_INPUT")
    value = numerator / denominator
    if not math.isfinite(value):
        raise ValidationError("BMI is not a finite number", "INVALID_INPUT")

    for limit, label in BMI_CATEGORIES:
        if value < limit:
            return round(value, 1), label
    return round(value, 1), "Obesity"


def unit_category(unit: str) -> str:
    """Find the category a unit belongs to.

    Raises:
        ValidationError: If the unit is unknown or belongs to several categories
    """
    unit = unit.lower()
    matches = [name for name, table in UNIT_FACTORS.items() if unit in table]
    if unit in _TO_CELSIUS:
        matches.append("temperature")
    if not matches:
        raise ValidationError(f"Unknown unit: {unit!r}", "UNKNOWN_UNIT")
    if len(matches) > 1:
        raise ValidationError(
            f"Unit {unit!r} is ambiguous ({', '.join(matches)}); specify a category",
            "AMBIGUOUS_UNIT",
        )
    return matches[0]


def convert_units(
    value: float | str, from_unit: str, to_unit: str, category: str | None = None
) -> tuple[str, str]:
    """Convert a value between two units of the same category.

    Args:
        value: Amount to convert
        from_unit: Source unit symbol (e.g. "km", "lb", "f")
        to_unit: Target unit symbol
        category: "length", "weight", "volume" or "temperature"; inferred
            from the units when omitted

    Returns:
        (formatted converted value, category)

    Raises:
        ValidationError: On a non-numeric value or unknown/incompatible units
    """
    try:
        amount = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError("Value must be a number", "INVALID_INPUT") from e
    if not math.isfinite(amount):
        raise ValidationError("Value must be a finite number", "INVALID_INPUT")

    from_unit = from_unit.lower()
    to_unit = to_unit.lower()
    if category is None:
        try:
            category = unit_category(from_unit)
        except ValidationError as e:
            if e.code != "AMBIGUOUS_UNIT":
                raise
            category = unit_category(to_unit)
    elif category not in CATEGORIES:
        raise ValidationError(f"Unknown category: {category!r}", "UNKNOWN_UNIT")

    if category == "temperature":
        if from_unit not in _TO_CELSIUS or to_unit not in _FROM_CELSIUS:
            raise ValidationError(
                f"Cannot convert {from_unit!r} to {to_unit!r} as temperature",
                "INCOMPATIBLE_UNITS",
            )
        converted = _FROM_CELSIUS[to_unit](_TO_CELSIUS[from_unit](amount))
    else:
        table = UNIT_FACTORS[category]
        if from_unit not in table or to_unit not in table:
            raise ValidationError(
                f"Cannot convert {from_unit!r} to {to_unit!r} as {category}",
                "INCOMPATIBLE_UNITS",
            )
        converted = amount * table[from_unit] / table[to_unit]

    if not math.isfinite(converted):
        raise ValidationError("Result is not a finite number", "INVALID_INPUT")
    return format_number(converted, CONVERSION_DECIMALS), category
