"""Centralized configuration for keycalc.

This module defines:
- History and formatting limits
- Input validation limits (length, nesting depth)
- Operator and display symbols used by the keypad engine
- Regex patterns for lexing
- Default log level and log file

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with KEYCALC_)
"""

import importlib.metadata
import os
import re
from pathlib import Path

# Version is defined in pyproject.toml [project] section
try:
    VERSION = importlib.metadata.version("keycalc")
except importlib.metadata.PackageNotFoundError:
    # Running from a source checkout
    VERSION = "1.0.0"

# History
HISTORY_LIMIT = int(os.getenv("KEYCALC_HISTORY_LIMIT", "20"))
HISTORY_FILE = Path(
    os.getenv("KEYCALC_HISTORY_FILE", str(Path.home() / ".keycalc" / "history.json"))
)

# Logging (the CLI --log-level and --log-file flags take precedence)
LOG_LEVEL = os.getenv("KEYCALC_LOG_LEVEL", "WARNING").upper()
LOG_FILE = os.getenv("KEYCALC_LOG_FILE") or None

# Output formatting
RESULT_DECIMALS = int(os.getenv("KEYCALC_RESULT_DECIMALS", "8"))
CONVERSION_DECIMALS = int(os.getenv("KEYCALC_CONVERSION_DECIMALS", "6"))

# Input validation limits
MAX_EXPRESSION_LENGTH = int(
    os.getenv("KEYCALC_MAX_EXPRESSION_LENGTH", "1000")
)  # characters
MAX_EXPRESSION_DEPTH = int(
    os.getenv("KEYCALC_MAX_EXPRESSION_DEPTH", "100")
)  # nested groups

OPERATORS = ("+", "-", "*", "/", "%")
SQRT_SYMBOL = "√"
DISPLAY_SYMBOLS = {"*": "×", "/": "÷"}
INPUT_ALIASES = {"×": "*", "÷": "/", "x": "*"}

ERROR_SENTINEL = "Error"
ERROR_SUMMARY = "Error in expression"

NUMBER_REGEX = re.compile(r"\d+\.?\d*|\.\d+")
SQRT_WORD_REGEX = re.compile(r"sqrt", re.IGNORECASE)
HISTORY_KEY_REGEX = re.compile(r"^(?:h|history:)(\d+)$", re.IGNORECASE)
