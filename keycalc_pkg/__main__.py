"""Main entry point for running keycalc_pkg as a module.

This allows running keycalc with:
    python -m keycalc_pkg
    python -m keycalc_pkg -k "12+3="
    python -m keycalc_pkg -e "2+2"

This is equivalent to running:
    python -m keycalc_pkg.cli
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
