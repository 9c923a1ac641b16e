"""
Data models — the structure of our data.
Every scored day, whether it comes from the dashboard or from a saved payload,
gets converted into these shapes.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum, IntEnum

from daymark.errors import InvalidDayKey

# "2024-03-05" (canonical) or "2024-3-5" (how older payloads wrote it)
_KEY_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


class Score(IntEnum):
    """A day's judgment. The int value is what gets summed."""
    NEGATIVE = -1
    NEUTRAL = 0
    POSITIVE = 1

    @property
    def label(self) -> str:
        return f"+{self.value}" if self.value > 0 else str(self.value)


class Period(Enum):
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


@dataclass(frozen=True, order=True)
class DayKey:
    """
    A calendar day used as the lookup key into the score store.

    Not an instant: there is no time and no timezone. Field order makes
    sorting chronological. An impossible date raises InvalidDayKey at
    construction, so every DayKey that exists is a real day.
    """
    year: int
    month: int
    day: int

    def __post_init__(self):
        for name in ("year", "month", "day"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidDayKey(f"{name} must be an integer, got {value!r}")
        if not 1 <= self.year <= 9999:
            raise InvalidDayKey(f"year out of range: {self.year}")
        if not 1 <= self.month <= 12:
            raise InvalidDayKey(f"month out of range: {self.month}")
        last_day = calendar.monthrange(self.year, self.month)[1]
        if not 1 <= self.day <= last_day:
            raise InvalidDayKey(
                f"day out of range for {self.year}-{self.month:02d}: {self.day}"
            )

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    @classmethod
    def parse(cls, text: str) -> "DayKey":
        """Parse "YYYY-MM-DD" (zero padding optional)."""
        if not isinstance(text, str):
            raise InvalidDayKey(f"day key must be a string, got {text!r}")
        match = _KEY_PATTERN.match(text.strip())
        if not match:
            raise InvalidDayKey(f"not a day key: {text!r}")
        year, month, day = (int(part) for part in match.groups())
        return cls(year, month, day)

    @classmethod
    def from_date(cls, value: date) -> "DayKey":
        return cls(value.year, value.month, value.day)

    @classmethod
    def today(cls) -> "DayKey":
        return cls.from_date(date.today())

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    @property
    def quarter(self) -> int:
        """0-indexed quarter: Jan-Mar is 0, Oct-Dec is 3."""
        return (self.month - 1) // 3

    @property
    def quarter_label(self) -> str:
        return f"{self.year}-Q{self.quarter + 1}"


def as_day_key(value) -> DayKey:
    """
    Coerce a DayKey, a date or a key string into a DayKey.
    Anything else is rejected with InvalidDayKey.
    """
    if isinstance(value, DayKey):
        return value
    if isinstance(value, date):
        # datetime is a date subclass; only the calendar day matters
        return DayKey.from_date(value)
    if isinstance(value, str):
        return DayKey.parse(value)
    raise InvalidDayKey(f"cannot use {value!r} as a day key")


@dataclass(frozen=True)
class PeriodTotals:
    """Net score for each period containing a reference date."""
    week: int = 0
    month: int = 0
    quarter: int = 0
    year: int = 0

    def as_dict(self) -> dict:
        return {
            "week": self.week,
            "month": self.month,
            "quarter": self.quarter,
            "year": self.year,
        }
