#!/usr/bin/env python3
"""Text report of MITs grouped by time horizon."""

import calendar
from datetime import date

from grouping import BUCKET_ORDER, TaskGroup
from periods import Granularity, Period

CURRENT_LABELS = {
    Granularity.YEAR: 'This Year',
    Granularity.QUARTER: 'This Quarter',
    Granularity.MONTH: 'This Month',
    Granularity.DAY: 'Today',
}

PAST_DUE_LABEL = 'Past Due'


def future_label(period: Period, today: date) -> str:
    """Heading for a period that lies after the current one."""
    if period.granularity is Granularity.YEAR:
        return str(period.year)
    if period.granularity is Granularity.QUARTER:
        return f"Q{period.quarter} {period.year}"
    if period.granularity is Granularity.MONTH:
        return f"{calendar.month_name[period.month]} {period.year}"

    try:
        due = period.as_date()
    except ValueError:
        # Accepted by the lenient YYYY.MM.DD grammar but not a real day.
        return period.canonical_text()
    if (due - today).days < 7:
        return calendar.day_name[due.weekday()]
    return f"{calendar.day_name[due.weekday()]}, {calendar.month_name[due.month]} {due.day:02d}"


def _format_section(label: str, entries: list[dict]) -> str:
    lines = [f"{label}:"]
    for entry in entries:
        lines.append(f"  {entry['text']} ({entry['id']})")
    return '\n'.join(lines)


def render_sections(group: TaskGroup, today: date) -> list[tuple[str, list[dict]]]:
    """(label, entries) pairs in display order."""
    sections = []
    for granularity in BUCKET_ORDER:
        entries = group.bucket(granularity)
        if not entries:
            continue
        now_key = Period.containing(today, granularity).comparable_key()

        past_due = [e for e in entries if e['period'].comparable_key() < now_key]
        if past_due:
            sections.append((PAST_DUE_LABEL, past_due))

        current_key = None
        for entry in entries:
            key = entry['period'].comparable_key()
            if key < now_key:
                continue
            if key != current_key:
                current_key = key
                if key == now_key:
                    label = CURRENT_LABELS[granularity]
                else:
                    label = future_label(entry['period'], today)
                sections.append((label, []))
            sections[-1][1].append(entry)
    return sections


def render(group: TaskGroup, today: date, context: str | None = None) -> str:
    """Render the grouped report; an empty group yields an informational line."""
    if group.is_empty():
        if context:
            return f"No MITs found for {context}."
        return "No MITs found."
    return '\n\n'.join(_format_section(label, entries) for label, entries in render_sections(group, today))
