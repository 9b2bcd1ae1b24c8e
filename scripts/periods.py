#!/usr/bin/env python3
"""
Period values used as MIT markers.

A period is exactly one of four granularities, stored in todo.txt as:

    Day      YYYY.MM.DD
    Month    YYYY.MM.00
    Quarter  YYYY.QN.00
    Year     YYYY.00.00

`00` means "not specified at this level". Periods only compare within one
granularity; callers bucket first.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from functools import total_ordering

from utils import MalformedMarkerError, current_quarter


class Granularity(Enum):
    DAY = "day"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


# First month of each quarter.
QUARTER_START_MONTH = {1: 1, 2: 4, 3: 7, 4: 10}

CANONICAL_RE = re.compile(r'^(\d{4})\.(\d{2}|Q[1-4])\.(\d{2})$')

# Four-digit years only; the canonical text has no room for more.
MAX_YEAR = 9999


@total_ordering
@dataclass(frozen=True)
class Period:
    granularity: Granularity
    year: int
    month: int = 0
    day: int = 0
    quarter: int = 0

    def __post_init__(self):
        if not 0 <= self.year <= MAX_YEAR:
            raise ValueError(f"year out of range: {self.year}")
        if self.granularity is Granularity.QUARTER:
            if not 1 <= self.quarter <= 4 or self.month or self.day:
                raise ValueError(f"bad quarter period: {self!r}")
            return
        if self.quarter:
            raise ValueError(f"quarter set on a {self.granularity.value} period")
        if self.granularity is Granularity.YEAR:
            if self.month or self.day:
                raise ValueError(f"bad year period: {self!r}")
        elif not 1 <= self.month <= 12:
            raise ValueError(f"month out of range: {self!r}")
        elif self.granularity is Granularity.MONTH and self.day:
            raise ValueError(f"month period with a day: {self!r}")
        elif self.granularity is Granularity.DAY and not 1 <= self.day <= 31:
            raise ValueError(f"day out of range: {self!r}")

    @classmethod
    def for_day(cls, year: int, month: int, day: int) -> Period:
        return cls(Granularity.DAY, year, month, day)

    @classmethod
    def for_month(cls, year: int, month: int) -> Period:
        return cls(Granularity.MONTH, year, month)

    @classmethod
    def for_quarter(cls, year: int, quarter: int) -> Period:
        return cls(Granularity.QUARTER, year, quarter=quarter)

    @classmethod
    def for_year(cls, year: int) -> Period:
        return cls(Granularity.YEAR, year)

    @classmethod
    def from_date(cls, d: date) -> Period:
        return cls.for_day(d.year, d.month, d.day)

    @classmethod
    def containing(cls, d: date, granularity: Granularity) -> Period:
        """The period of the given granularity that `d` falls in."""
        if granularity is Granularity.DAY:
            return cls.from_date(d)
        if granularity is Granularity.MONTH:
            return cls.for_month(d.year, d.month)
        if granularity is Granularity.QUARTER:
            return cls.for_quarter(d.year, current_quarter(d))
        return cls.for_year(d.year)

    def canonical_text(self) -> str:
        if self.granularity is Granularity.DAY:
            return f"{self.year:04d}.{self.month:02d}.{self.day:02d}"
        if self.granularity is Granularity.MONTH:
            return f"{self.year:04d}.{self.month:02d}.00"
        if self.granularity is Granularity.QUARTER:
            return f"{self.year:04d}.Q{self.quarter}.00"
        return f"{self.year:04d}.00.00"

    def comparable_key(self) -> int:
        """YYYYMMDD-shaped integer; quarters use their first month, coarse fields are 00."""
        if self.granularity is Granularity.QUARTER:
            month = QUARTER_START_MONTH[self.quarter]
        else:
            month = self.month
        return self.year * 10000 + month * 100 + self.day

    def as_date(self) -> date:
        """First calendar day of the period.

        Raises ValueError for a day that passed range checks but does not
        exist in the calendar (e.g. 2021.02.30).
        """
        if self.granularity is Granularity.DAY:
            return date(self.year, self.month, self.day)
        if self.granularity is Granularity.MONTH:
            return date(self.year, self.month, 1)
        if self.granularity is Granularity.QUARTER:
            return date(self.year, QUARTER_START_MONTH[self.quarter], 1)
        return date(self.year, 1, 1)

    def __lt__(self, other):
        if not isinstance(other, Period):
            return NotImplemented
        if other.granularity is not self.granularity:
            raise TypeError(
                f"cannot order a {self.granularity.value} period against a {other.granularity.value} period"
            )
        return self.comparable_key() < other.comparable_key()

    def __str__(self) -> str:
        return self.canonical_text()


def parse_canonical(text: str) -> Period:
    """Parse `YYYY.MM.DD` / `YYYY.MM.00` / `YYYY.QN.00` / `YYYY.00.00`."""
    match = CANONICAL_RE.match(text)
    if not match:
        raise MalformedMarkerError(f"not a period: {text!r}")

    year = int(match.group(1))
    middle = match.group(2)
    day = int(match.group(3))

    if middle.startswith('Q'):
        if day != 0:
            raise MalformedMarkerError(f"quarter period with a day: {text!r}")
        return Period.for_quarter(year, int(middle[1]))

    month = int(middle)
    if month == 0:
        if day != 0:
            raise MalformedMarkerError(f"day without a month: {text!r}")
        return Period.for_year(year)
    if month > 12:
        raise MalformedMarkerError(f"month out of range: {text!r}")
    if day == 0:
        return Period.for_month(year, month)
    if day > 31:
        raise MalformedMarkerError(f"day out of range: {text!r}")
    return Period.for_day(year, month, day)
