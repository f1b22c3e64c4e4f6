from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from . import config
from .engine import Calculator, CalculatorState
from .history import clear_saved_history, history_saver, load_history
from .keys import parse_keys
from .logging_config import get_logger, setup_logging
from .types import ValidationError

logger = get_logger("cli")


def _state_to_dict(state: CalculatorState) -> dict[str, Any]:
    result: dict[str, Any] = {
        "ok": not state.error,
        "display": state.display,
        "expression": state.expression_text,
    }
    if state.error:
        result["error"] = state.summary
    return result


def print_result_pretty(res: dict[str, Any], output_format: str = "human") -> None:
    """Print result in specified format.

    Args:
        res: Result dictionary
        output_format: "json" for JSON output, "human" for human-readable
    """
    if output_format == "json":
        print(json.dumps(res, indent=2, ensure_ascii=False))
        return
    if not res.get("ok"):
        print("Error:", res.get("error"))
        return
    if "display" in res:
        if res.get("expression"):
            print(res["expression"])
        print(res["display"])
    elif "bmi" in res:
        print(f"BMI: {res['bmi']} ({res['category']})")
    elif "result" in res:
        print(res["result"])
    else:
        print(res)


def print_history(entries: list[Any], output_format: str = "human") -> None:
    """Print history entries, most recent first, with their selection index."""
    if output_format == "json":
        print(json.dumps([entry.to_dict() for entry in entries], indent=2, ensure_ascii=False))
        return
    if not entries:
        print("No calculation history yet")
        return
    for index, entry in enumerate(entries):
        print(f"[{index}] {entry.expression} = {entry.result}")


def print_help_text() -> None:
    """Print help text for REPL commands."""
    print(
        f"""keycalc version {config.VERSION}

Type keys separated by spaces, or run them together:
  12+3=            digits, operators + - * / % (also × ÷ x), = evaluates
  ( 2 ) 3 =        parentheses; a number after ')' multiplies
  sqrt 9 ) =       square root (also √); open groups close on =
  5 + 3 neg =      neg (or ± or +/-) flips the sign of the last number
  .                decimal point
  c / clear        clear the current expression
  h0, h1 ...       recall a history entry as the current result
  ch               clear the history

Commands: help, history, quit"""
    )


def repl_loop(calculator: Calculator, output_format: str = "human") -> None:
    """Interactive key REPL."""
    try:
        import readline  # noqa: F401
    except ImportError:
        # readline not available on Windows - that's fine
        pass

    print("keycalc - type 'help' for keys, 'quit' to exit.")
    while True:
        try:
            raw = input(">>> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye.")
            break
        if not raw:
            continue
        command = raw.lower()
        if command in ("quit", "exit"):
            break
        if command == "help":
            print_help_text()
            continue
        if command == "history":
            print_history(calculator.history, output_format)
            continue
        try:
            events = parse_keys(raw)
        except ValidationError as e:
            print("Error:", e)
            continue
        state = calculator.press_many(events)
        print_result_pretty(_state_to_dict(state), output_format)


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for the keycalc CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(prog="keycalc")
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        help="Evaluate one expression and exit (non-interactive)",
        dest="eval_expr",
    )
    parser.add_argument(
        "-k",
        "--keys",
        type=str,
        help="Press a key sequence (e.g. '12+3=') and print the display",
    )
    parser.add_argument(
        "--bmi",
        nargs=2,
        metavar=("HEIGHT", "WEIGHT"),
        help="Compute body-mass index (cm and kg, or inches and lb with --imperial)",
    )
    parser.add_argument(
        "--imperial", action="store_true", help="Use inches and pounds for --bmi"
    )
    parser.add_argument(
        "--convert",
        nargs=3,
        metavar=("VALUE", "FROM", "TO"),
        help="Convert a value between units (e.g. --convert 5 km mi)",
    )
    parser.add_argument(
        "--category",
        type=str,
        choices=["length", "weight", "volume", "temperature"],
        help="Unit category for --convert (needed for units like 'oz')",
    )
    parser.add_argument("--history", action="store_true", help="Show saved history")
    parser.add_argument(
        "--clear-history", action="store_true", help="Delete saved history"
    )
    parser.add_argument("--history-file", type=str, help="History file location")
    parser.add_argument(
        "--no-history",
        action="store_true",
        help="Do not load or save calculation history",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "-p", "--precision", type=int, help="Decimal places kept in results"
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: KEYCALC_LOG_LEVEL or WARNING)",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)
    output_format = args.format

    if args.version:
        print(config.VERSION)
        return 0
    # Apply CLI configuration overrides
    if args.precision is not None and args.precision > 0:
        import keycalc_pkg.parser as _parser

        _parser.RESULT_DECIMALS = int(args.precision)

    from . import api

    if args.eval_expr is not None:
        result = api.evaluate(args.eval_expr)
        print_result_pretty(result.to_dict(), output_format)
        return 0 if result.ok else 1
    if args.bmi:
        system = "imperial" if args.imperial else "metric"
        result = api.bmi(args.bmi[0], args.bmi[1], system)
        print_result_pretty(result.to_dict(), output_format)
        return 0 if result.ok else 1
    if args.convert:
        value, from_unit, to_unit = args.convert
        result = api.convert_units(value, from_unit, to_unit, args.category)
        print_result_pretty(result.to_dict(), output_format)
        return 0 if result.ok else 1

    history_path = args.history_file
    if args.clear_history:
        clear_saved_history(history_path)
        print("History cleared.")
        return 0
    if args.no_history:
        calculator = Calculator()
    else:
        calculator = Calculator(
            history=load_history(history_path),
            on_history_change=history_saver(history_path),
        )
    if args.history:
        print_history(calculator.history, output_format)
        return 0
    if args.keys is not None:
        try:
            events = parse_keys(args.keys)
        except ValidationError as e:
            print_result_pretty({"ok": False, "error": str(e)}, output_format)
            return 1
        logger.debug(f"Pressing {len(events)} keys")
        state = calculator.press_many(events)
        print_result_pretty(_state_to_dict(state), output_format)
        return 1 if state.error else 0

    repl_loop(calculator, output_format)
    return 0


if __name__ == "__main__":
    sys.exit(main_entry())
