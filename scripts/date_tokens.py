#!/usr/bin/env python3
"""
Date token normalization.

Turns the date spellings accepted on the command line (`today`, `wed`,
`jan`, `q2`, `3d`, `2016.11`, `2016q4`, ...) into a canonical Period.
Token shapes are tried in TOKEN_PATTERNS order, most specific first.
"""

import re
from datetime import date, timedelta
from enum import Enum

from periods import MAX_YEAR, Period
from utils import InvalidDateError, current_quarter


class TokenKind(Enum):
    TODAY = "today"
    TOMORROW = "tomorrow"
    WEEKDAY = "weekday"
    MONTH_NAME = "month-name"
    DAY_OFFSET = "day-offset"
    YEAR_CANONICAL = "year-canonical"
    QUARTER_CANONICAL = "quarter-canonical"
    MONTH_CANONICAL = "month-canonical"
    DAY_CANONICAL = "day-canonical"
    ISO_DAY = "iso-day"
    YEAR_QUARTER = "year-quarter"
    BARE_QUARTER = "bare-quarter"
    YEAR_MONTH = "year-month"
    YEAR = "year"


WEEKDAYS = {
    'monday': 0, 'mon': 0,
    'tuesday': 1, 'tue': 1, 'tues': 1,
    'wednesday': 2, 'wed': 2,
    'thursday': 3, 'thu': 3, 'thur': 3, 'thurs': 3,
    'friday': 4, 'fri': 4,
    'saturday': 5, 'sat': 5,
    'sunday': 6, 'sun': 6,
}

MONTHS = {
    'january': 1, 'jan': 1,
    'february': 2, 'feb': 2,
    'march': 3, 'mar': 3,
    'april': 4, 'apr': 4,
    'may': 5,
    'june': 6, 'jun': 6,
    'july': 7, 'jul': 7,
    'august': 8, 'aug': 8,
    'september': 9, 'sep': 9, 'sept': 9,
    'october': 10, 'oct': 10,
    'november': 11, 'nov': 11,
    'december': 12, 'dec': 12,
}


def _names_pattern(names) -> re.Pattern:
    alternatives = '|'.join(sorted(names, key=len, reverse=True))
    return re.compile(rf'^(?:{alternatives})$')


# Order matters: `2016.00.00` must be seen as a year before the generic
# day pattern, and `2016.11.00` as a month.
TOKEN_PATTERNS = [
    (TokenKind.TODAY, re.compile(r'^today$')),
    (TokenKind.TOMORROW, re.compile(r'^tomorrow$')),
    (TokenKind.WEEKDAY, _names_pattern(WEEKDAYS)),
    (TokenKind.MONTH_NAME, _names_pattern(MONTHS)),
    (TokenKind.DAY_OFFSET, re.compile(r'^(\d+)d(?:ays?)?$')),
    (TokenKind.YEAR_CANONICAL, re.compile(r'^(\d{4})\.00\.00$')),
    (TokenKind.QUARTER_CANONICAL, re.compile(r'^(\d{4})\.q(\d)\.00$')),
    (TokenKind.MONTH_CANONICAL, re.compile(r'^(\d{4})\.(\d{2})\.00$')),
    (TokenKind.DAY_CANONICAL, re.compile(r'^(\d{4})\.(\d{2})\.(\d{2})$')),
    (TokenKind.ISO_DAY, re.compile(r'^(\d{4})-(\d{2})-(\d{2})$')),
    (TokenKind.YEAR_QUARTER, re.compile(r'^(\d{4})\.?q(\d)$')),
    (TokenKind.BARE_QUARTER, re.compile(r'^q(\d)$')),
    (TokenKind.YEAR_MONTH, re.compile(r'^(\d{4})\.?(\d{2})$')),
    (TokenKind.YEAR, re.compile(r'^(\d{4})$')),
]


def classify_token(token: str) -> tuple[TokenKind, re.Match]:
    """Return the first matching token shape, or raise InvalidDateError."""
    cleaned = token.strip().lower()
    for kind, pattern in TOKEN_PATTERNS:
        match = pattern.match(cleaned)
        if match:
            return kind, match
    raise InvalidDateError(token)


def _check_month(token: str, month: int) -> int:
    if not 1 <= month <= 12:
        raise InvalidDateError(token)
    return month


def _check_day(token: str, day: int) -> int:
    if not 1 <= day <= 31:
        raise InvalidDateError(token)
    return day


def _check_quarter(token: str, quarter: int) -> int:
    if not 1 <= quarter <= 4:
        raise InvalidDateError(token)
    return quarter


def _days_after(token: str, today: date, days: int) -> Period:
    try:
        return Period.from_date(today + timedelta(days=days))
    except OverflowError:
        raise InvalidDateError(token) from None


def _days_to_weekday(today: date, weekday: int) -> int:
    days_ahead = (weekday - today.weekday()) % 7
    if days_ahead == 0:
        days_ahead = 7
    return days_ahead


def _nearest_year(token: str, today: date, this_year: bool) -> int:
    if this_year:
        return today.year
    if today.year >= MAX_YEAR:
        raise InvalidDateError(token)
    return today.year + 1


def _day_from_fields(token: str, match: re.Match) -> Period:
    year = int(match.group(1))
    month = _check_month(token, int(match.group(2)))
    day = _check_day(token, int(match.group(3)))
    return Period.for_day(year, month, day)


def _month_from_fields(token: str, match: re.Match) -> Period:
    year = int(match.group(1))
    return Period.for_month(year, _check_month(token, int(match.group(2))))


def _quarter_from_fields(token: str, match: re.Match) -> Period:
    year = int(match.group(1))
    return Period.for_quarter(year, _check_quarter(token, int(match.group(2))))


def normalize(token: str, today: date) -> Period:
    """Parse a user-entered date token relative to `today`.

    Raises InvalidDateError when the token matches no known shape or a
    numeric field is out of range.
    """
    kind, match = classify_token(token)
    word = match.group(0)

    if kind is TokenKind.TODAY:
        return Period.from_date(today)
    if kind is TokenKind.TOMORROW:
        return _days_after(token, today, 1)
    if kind is TokenKind.WEEKDAY:
        return _days_after(token, today, _days_to_weekday(today, WEEKDAYS[word]))
    if kind is TokenKind.MONTH_NAME:
        month = MONTHS[word]
        year = _nearest_year(token, today, month >= today.month)
        return Period.for_month(year, month)
    if kind is TokenKind.DAY_OFFSET:
        return _days_after(token, today, int(match.group(1)))
    if kind is TokenKind.YEAR_CANONICAL or kind is TokenKind.YEAR:
        return Period.for_year(int(match.group(1)))
    if kind is TokenKind.QUARTER_CANONICAL or kind is TokenKind.YEAR_QUARTER:
        return _quarter_from_fields(token, match)
    if kind is TokenKind.MONTH_CANONICAL or kind is TokenKind.YEAR_MONTH:
        return _month_from_fields(token, match)
    if kind is TokenKind.DAY_CANONICAL or kind is TokenKind.ISO_DAY:
        return _day_from_fields(token, match)
    if kind is TokenKind.BARE_QUARTER:
        quarter = _check_quarter(token, int(match.group(1)))
        year = _nearest_year(token, today, quarter >= current_quarter(today))
        return Period.for_quarter(year, quarter)

    raise InvalidDateError(token)  # pragma: no cover - every kind handled above
