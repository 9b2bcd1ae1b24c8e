#!/usr/bin/env python3
"""
Shared utilities for the MIT scripts.

Configuration via environment variables:
- TODO_FILE: Path to the todo.txt file
- TODO_DIR: Directory holding todo.txt (used when TODO_FILE is unset)
- TODOTXT_DATE_ON_ADD: Prefix a creation date on new MITs (1/true/yes/on)
- MIT_LOG_LEVEL: Logging level name (default WARNING)
"""

import logging
import os
import re
import tempfile
from datetime import date, datetime
from pathlib import Path

DEFAULT_TODO_FILE = Path.home() / "todo.txt"


class MitError(ValueError):
    """Base error for user-facing MIT failures."""


class InvalidDateError(MitError):
    def __init__(self, token: str):
        super().__init__(f"invalid date: {token}")
        self.token = token


class InvalidTaskIdError(MitError):
    def __init__(self, task_id):
        super().__init__(f"invalid task id: {task_id}")
        self.task_id = task_id


class MalformedMarkerError(MitError):
    """A {...} marker that matches none of the canonical period shapes."""


class TodoFileNotFoundError(MitError):
    def __init__(self, path: Path):
        super().__init__(f"todo file not found: {path}")
        self.path = path


def get_todo_file() -> Path:
    """Resolve the todo.txt path from TODO_FILE, then TODO_DIR, then ~/todo.txt."""
    explicit = os.getenv('TODO_FILE')
    if explicit:
        return Path(explicit).expanduser()
    todo_dir = os.getenv('TODO_DIR')
    if todo_dir:
        return Path(todo_dir).expanduser() / "todo.txt"
    return DEFAULT_TODO_FILE


def _truthy_env(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def date_on_add() -> bool:
    return _truthy_env(os.getenv('TODOTXT_DATE_ON_ADD'))


def configure_logging() -> None:
    level_name = os.getenv('MIT_LOG_LEVEL', 'WARNING').upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def parse_reference_date(value: str | None) -> date:
    """Return the date to treat as "today" (YYYY-MM-DD override or the real today)."""
    if not value:
        return date.today()
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise InvalidDateError(value) from None


def current_quarter(today: date) -> int:
    return (today.month - 1) // 3 + 1


def has_context(text: str, context: str) -> bool:
    """True if `text` carries the @context token (exact token, case-sensitive)."""
    if not context.startswith('@'):
        context = '@' + context
    return re.search(rf'(?<!\S){re.escape(context)}(?!\S)', text) is not None


def atomic_write(path: Path, content: str) -> None:
    """Write content atomically via tempfile + rename."""
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    finally:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
