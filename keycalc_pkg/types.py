"""Type definitions and result dataclasses for consistent API responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class HistoryEntry:
    """A completed calculation as shown in the history list."""

    expression: str
    result: str
    timestamp: int  # milliseconds since the epoch

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "expression": self.expression,
            "result": self.result,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryEntry:
        """Build an entry from a stored record.

        Raises:
            ValidationError: If a field is missing or has the wrong type
        """
        try:
            expression = data["expression"]
            result = data["result"]
            timestamp = int(data["timestamp"])
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise ValidationError(
                f"Invalid history record: {data!r}", "INVALID_HISTORY"
            ) from e
        if not isinstance(expression, str) or not isinstance(result, str):
            raise ValidationError(
                f"Invalid history record: {data!r}", "INVALID_HISTORY"
            )
        return cls(expression=expression, result=result, timestamp=timestamp)


@dataclass
class EvalResult:
    """Result of evaluating an expression string."""

    ok: bool
    result: str | None = None
    expression: str | None = None
    error: str | None = None
    code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.result is not None:
            result_dict["result"] = self.result
        if self.expression is not None:
            result_dict["expression"] = self.expression
        if self.error is not None:
            result_dict["error"] = self.error
        if self.code is not None:
            result_dict["code"] = self.code
        return result_dict

    def __repr__(self) -> str:
        if not self.ok:
            return f"EvalResult(ok=False, error={self.error!r}, code={self.code!r})"
        return f"EvalResult(ok=True, result={self.result!r}, expression={self.expression!r})"


@dataclass
class KeypadResult:
    """Outcome of feeding a key sequence to a calculator."""

    ok: bool
    display: str = "0"
    expression: str = ""
    error: str | None = None
    history: list[HistoryEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {
            "ok": self.ok,
            "display": self.display,
            "expression": self.expression,
            "history": [entry.to_dict() for entry in self.history],
        }
        if self.error is not None:
            result_dict["error"] = self.error
        return result_dict


@dataclass
class BmiResult:
    """Result of a body-mass-index calculation."""

    ok: bool
    bmi: float | None = None
    category: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.bmi is not None:
            result_dict["bmi"] = self.bmi
        if self.category is not None:
            result_dict["category"] = self.category
        if self.error is not None:
            result_dict["error"] = self.error
        return result_dict


@dataclass
class ConversionResult:
    """Result of a unit conversion."""

    ok: bool
    result: str | None = None
    category: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.result is not None:
            result_dict["result"] = self.result
        if self.category is not None:
            result_dict["category"] = self.category
        if self.error is not None:
            result_dict["error"] = self.error
        return result_dict


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ParseError(Exception):
    """Raised when an expression is not well-formed."""

    def __init__(self, message: str, code: str = "MALFORMED_EXPRESSION"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class EvaluationError(Exception):
    """Raised when a well-formed expression has no finite real value."""

    def __init__(self, message: str, code: str = "NON_FINITE_RESULT"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message
