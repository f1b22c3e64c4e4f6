"""Persistent calculation history for keycalc.

This module provides:
- Loading the saved history list when a session starts
- Saving it after every change (atomic write through a temp file)
- Removing the saved copy when the user clears the history

The file holds {"version": int, "history": [{expression, result, timestamp}]}
with the most recent entry first.
"""

from __future__ import annotations

import json
from pathlib import Path

from . import config
from .logging_config import get_logger
from .types import HistoryEntry, ValidationError

logger = get_logger("history")

_HISTORY_VERSION = 1  # Increment when the file format changes


def _history_file(path: Path | str | None) -> Path:
    return Path(path) if path is not None else config.HISTORY_FILE


def load_history(path: Path | str | None = None) -> list[HistoryEntry]:
    """Load saved history from disk.

    Args:
        path: History file (default: config.HISTORY_FILE)

    Returns:
        Entries, most recent first, at most config.HISTORY_LIMIT of them.
        A missing, unreadable or malformed file yields an empty list.
    """
    history_file = _history_file(path)
    if not history_file.exists():
        return []

    try:
        with open(history_file, encoding="utf-8") as f:
            data = json.load(f)
    except (ValueError, OSError) as e:  # bad JSON or bad encoding
        logger.warning(f"Failed to load history: {e}, starting with empty history")
        return []

    if not isinstance(data, dict) or data.get("version") != _HISTORY_VERSION:
        logger.info("History version mismatch, ignoring saved history")
        return []

    records = data.get("history")
    if not isinstance(records, list):
        logger.warning("Saved history is not a list, ignoring it")
        return []

    entries = []
    for record in records[: config.HISTORY_LIMIT]:
        try:
            entries.append(HistoryEntry.from_dict(record))
        except ValidationError as e:
            logger.warning(f"Skipping history record: {e}")
    logger.debug(f"Loaded {len(entries)} history entries from {history_file}")
    return entries


def save_history(
    entries: list[HistoryEntry], path: Path | str | None = None
) -> None:
    """Save history to disk.

    Args:
        entries: Entries, most recent first
        path: History file (default: config.HISTORY_FILE)
    """
    history_file = _history_file(path)
    payload = {
        "version": _HISTORY_VERSION,
        "history": [entry.to_dict() for entry in entries[: config.HISTORY_LIMIT]],
    }
    try:
        history_file.parent.mkdir(parents=True, exist_ok=True)
        # Write atomically (write to temp file then rename)
        temp_file = history_file.with_suffix(".tmp")
        with open(temp_file, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        temp_file.replace(history_file)
        logger.debug(f"Saved {len(payload['history'])} history entries")
    except OSError as e:
        logger.warning(f"Failed to save history: {e}")


def clear_saved_history(path: Path | str | None = None) -> None:
    """Remove the saved history file if there is one."""
    history_file = _history_file(path)
    try:
        history_file.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Failed to remove history file: {e}")


def history_saver(path: Path | str | None = None):
    """Build an ``on_history_change`` hook that persists to ``path``.

    An emptied history removes the file instead of writing an empty list.
    """

    def _save(entries: list[HistoryEntry]) -> None:
        if entries:
            save_history(entries, path)
        else:
            clear_saved_history(path)

    return _save
