#!/usr/bin/env python3
"""Collect MIT lines and bucket them by granularity."""

from __future__ import annotations

from dataclasses import dataclass, field

from markers import parse_line
from periods import Granularity, Period
from utils import has_context

# Fixed display order of the buckets.
BUCKET_ORDER = (Granularity.YEAR, Granularity.QUARTER, Granularity.MONTH, Granularity.DAY)


def _empty_buckets() -> dict:
    return {granularity: [] for granularity in BUCKET_ORDER}


@dataclass
class TaskGroup:
    """Marked tasks split by granularity, each bucket in chronological order.

    Entries are dicts with keys: id, period, text (line without marker)
    and raw_line.
    """
    buckets: dict = field(default_factory=_empty_buckets)

    def bucket(self, granularity: Granularity) -> list[dict]:
        return self.buckets[granularity]

    def is_empty(self) -> bool:
        return not any(self.buckets.values())

    def __len__(self) -> int:
        return sum(len(entries) for entries in self.buckets.values())

    def only(self, period: Period) -> TaskGroup:
        """A group holding just the entries scheduled for `period`."""
        narrowed = _empty_buckets()
        narrowed[period.granularity] = [
            entry for entry in self.buckets[period.granularity] if entry['period'] == period
        ]
        return TaskGroup(narrowed)


def classify(tasks, context: str | None = None, invert: bool = False) -> TaskGroup:
    """Build a TaskGroup from (id, line) pairs.

    Lines without a well-formed marker are skipped. With `context`, only
    lines carrying that @context are kept (or only lines without it when
    `invert` is set).
    """
    buckets = _empty_buckets()

    for task_id, line in tasks:
        parsed = parse_line(line)
        period = parsed['period']
        if period is None:
            continue
        if context is not None and has_context(line, context) == invert:
            continue
        buckets[period.granularity].append({
            'id': task_id,
            'period': period,
            'text': parsed['prefix'] + parsed['body'],
            'raw_line': line,
        })

    # Key order is chronological within a bucket; ties keep file order.
    for entries in buckets.values():
        entries.sort(key=lambda entry: (entry['period'].comparable_key(), entry['id']))

    return TaskGroup(buckets)
