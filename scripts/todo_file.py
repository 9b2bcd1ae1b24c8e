#!/usr/bin/env python3
"""
Line-addressable todo.txt list.

Lines are numbered from 1 the way todo.sh numbers them: blank lines keep
their number but are never listed. Ids shift when an external tool removes
or reorders lines, so resolve them again after structural edits.

Only the file's own line ending splits lines; other control characters
(form feed, lone \\r, ...) stay inside the line they appear in.
"""

import logging
import re
from pathlib import Path

from utils import InvalidTaskIdError, TodoFileNotFoundError, atomic_write

logger = logging.getLogger(__name__)


class TodoList:
    """In-memory list of todo lines, optionally backed by a file."""

    def __init__(self, lines: list[str] | None = None, path: Path | None = None):
        self.lines = list(lines or [])
        self.path = path
        self._newline = '\n'
        self._trailing_newline = True

    @classmethod
    def load(cls, path: Path) -> "TodoList":
        if not path.exists():
            raise TodoFileNotFoundError(path)
        # newline='' keeps \r\n and lone \r as written
        with open(path, encoding="utf-8", newline='') as f:
            content = f.read()

        newline = '\r\n' if '\r\n' in content else '\n'
        lines = content.split(newline)
        trailing = content.endswith(newline) or not content
        if content and trailing:
            lines.pop()

        todo = cls(lines if content else [], path)
        todo._newline = newline
        todo._trailing_newline = trailing
        return todo

    def __len__(self) -> int:
        return len(self.lines)

    def _index(self, task_id: int) -> int:
        if not 1 <= task_id <= len(self.lines):
            raise InvalidTaskIdError(task_id)
        return task_id - 1

    def get(self, task_id: int) -> str:
        return self.lines[self._index(task_id)]

    def set(self, task_id: int, text: str) -> None:
        self.lines[self._index(task_id)] = text

    def append(self, text: str) -> int:
        """Add a line at the end and return its id."""
        self.lines.append(text)
        return len(self.lines)

    def tasks(self) -> list[tuple[int, str]]:
        """(id, text) for every non-blank line."""
        return [(i, line) for i, line in enumerate(self.lines, start=1) if line.strip()]

    def save(self) -> None:
        if self.path is None:
            return
        content = self._newline.join(self.lines)
        if self.lines and self._trailing_newline:
            content += self._newline
        atomic_write(self.path, content)
        logger.info(f"Saved {len(self.lines)} lines to {self.path}")


def resolve_task_id(raw: str) -> int:
    """Parse a CLI task id; anything but ASCII digits or a zero id is rejected."""
    cleaned = raw.strip().rstrip('.')
    if not re.fullmatch(r'[0-9]+', cleaned) or int(cleaned) < 1:
        raise InvalidTaskIdError(raw)
    return int(cleaned)
