"""keycalc package: keypad expression engine, history store, converters and CLI."""

__all__ = [
    "config",
    "lexer",
    "parser",
    "keys",
    "engine",
    "history",
    "converters",
    "cli",
    "types",
    "api",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "evaluate",
    "validate_expression",
    "press_keys",
    "bmi",
    "convert_units",
]
