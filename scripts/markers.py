#!/usr/bin/env python3
"""
Read, write and clear the MIT marker on a todo.txt line.

Line layout:

    [(A) ][YYYY-MM-DD ][{PERIOD} ]body

The marker always sits right after the optional priority and creation date.
A `{...}` in that position that is not a canonical period is left alone and
the line counts as an ordinary task.
"""

import logging
import re

from periods import Period, parse_canonical
from utils import MalformedMarkerError

logger = logging.getLogger(__name__)

PREFIX_RE = re.compile(r'^(?:\([A-Z]\) )?(?:\d{4}-\d{2}-\d{2} )?')
MARKER_RE = re.compile(r'^\{([^{}]*)\}( *)')


def parse_line(text: str) -> dict:
    """Split a line into prefix, marker and body.

    Returns a dict with keys: prefix, period (Period or None), marker
    (raw marker text incl. braces, or None) and body.
    """
    prefix = PREFIX_RE.match(text).group(0)
    rest = text[len(prefix):]

    marker_match = MARKER_RE.match(rest)
    if marker_match:
        try:
            period = parse_canonical(marker_match.group(1))
        except MalformedMarkerError as e:
            logger.debug(f"Ignoring marker on {text!r}: {e}")
        else:
            return {
                'prefix': prefix,
                'period': period,
                'marker': rest[:marker_match.end(1) + 1],
                'body': rest[marker_match.end():],
            }

    return {'prefix': prefix, 'period': None, 'marker': None, 'body': rest}


def with_marker(text: str, period: Period) -> str:
    """Return `text` carrying `period`, replacing any existing marker."""
    parsed = parse_line(text)
    marker = f"{{{period.canonical_text()}}}"
    if not parsed['body']:
        return f"{parsed['prefix']}{marker}"
    return f"{parsed['prefix']}{marker} {parsed['body']}"


def without_marker(text: str) -> str:
    """Return `text` with its marker and the spaces after it removed."""
    parsed = parse_line(text)
    if parsed['period'] is None:
        return text
    return f"{parsed['prefix']}{parsed['body']}"


# ── Store operations ───────────────────────────────────────


def read_marker(store, task_id: int) -> Period | None:
    return parse_line(store.get(task_id))['period']


def write_marker(store, task_id: int, period: Period) -> str:
    """Set the marker of line `task_id`; returns the new line."""
    new_line = with_marker(store.get(task_id), period)
    store.set(task_id, new_line)
    logger.info(f"Line {task_id} scheduled for {period}")
    return new_line


def clear_marker(store, task_id: int) -> bool:
    """Demote line `task_id` to an ordinary task. Returns False if it had no marker."""
    old_line = store.get(task_id)
    new_line = without_marker(old_line)
    if new_line == old_line:
        return False
    store.set(task_id, new_line)
    logger.info(f"Line {task_id} is no longer an MIT")
    return True
