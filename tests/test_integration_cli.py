"""Integration tests for CLI functionality."""

import json
import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


def run_cli(*args, timeout=10):
    env = dict(os.environ, PYTHONIOENCODING="utf-8")
    return subprocess.run(
        [sys.executable, "-m", "keycalc_pkg.cli", *args],
        capture_output=True,
        text=True,
        encoding="utf-8",
        timeout=timeout,
        cwd=ROOT,
        env=env,
    )


def test_cli_version():
    """Test --version flag."""
    result = run_cli("--version")
    assert result.returncode == 0
    assert result.stdout.strip() != ""


def test_cli_eval_json():
    """Test CLI evaluation with JSON output."""
    result = run_cli("--eval", "2+3*4", "--format", "json")
    assert result.returncode == 0
    data = json.loads(result.stdout)
    assert data["ok"] is True
    assert data["result"] == "14"


def test_cli_eval_human():
    """Test CLI evaluation with human output."""
    result = run_cli("--eval", "7/2")
    assert result.returncode == 0
    assert result.stdout.strip() == "3.5"


def test_cli_eval_error_exit_code():
    result = run_cli("--eval", "1/0", "--format", "json")
    assert result.returncode == 1
    data = json.loads(result.stdout)
    assert data["code"] == "NON_FINITE_RESULT"


def test_cli_precision():
    result = run_cli("--eval", "1/3", "--precision", "3")
    assert result.stdout.strip() == "0.333"


def test_cli_keys():
    result = run_cli("--keys", "( 2 ) 3 =", "--no-history", "--format", "json")
    assert result.returncode == 0
    data = json.loads(result.stdout)
    assert data["display"] == "6"
    assert data["expression"] == "(2)×3 = 6"


def test_cli_keys_error():
    result = run_cli("--keys", "5/0=", "--no-history")
    assert result.returncode == 1
    assert "Error in expression" in result.stdout


def test_cli_history_file(tmp_path):
    history_file = str(tmp_path / "history.json")
    run_cli("--keys", "2+2=", "--history-file", history_file)
    run_cli("--keys", "3*3=", "--history-file", history_file)

    result = run_cli("--history", "--history-file", history_file)
    assert result.returncode == 0
    assert result.stdout.splitlines() == ["[0] 3×3 = 9", "[1] 2+2 = 4"]

    result = run_cli("--keys", "h1 +1=", "--history-file", history_file)
    assert result.stdout.splitlines()[-1] == "5"

    result = run_cli("--clear-history", "--history-file", history_file)
    assert result.returncode == 0
    assert not (tmp_path / "history.json").exists()


def test_cli_bmi():
    result = run_cli("--bmi", "180", "72", "--format", "json")
    assert result.returncode == 0
    data = json.loads(result.stdout)
    assert data["bmi"] == 22.2
    assert data["category"] == "Normal weight"


def test_cli_convert():
    result = run_cli("--convert", "100", "c", "f")
    assert result.returncode == 0
    assert result.stdout.strip() == "212"


def test_cli_convert_needs_category():
    result = run_cli("--convert", "1", "oz", "oz")
    assert result.returncode == 1
    result = run_cli("--convert", "1", "oz", "oz", "--category", "volume")
    assert result.stdout.strip() == "1"


def test_cli_help():
    """Test --help flag."""
    result = run_cli("--help")
    assert result.returncode == 0
    assert "usage" in result.stdout.lower()
    assert "--keys" in result.stdout
