"""
Month grid helpers for the calendar view.

The grid is Sunday-first, 7 columns wide. Cells before the 1st and after the
last day are None so every row has exactly 7 entries.
"""

import calendar
from datetime import date

from dateutil.relativedelta import relativedelta

from daymark.models import DayKey

WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

# English names on purpose: titles never depend on the host locale
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def leading_blanks(year: int, month: int) -> int:
    """Weekday of the 1st, Sunday=0 ... Saturday=6."""
    return (date(year, month, 1).weekday() + 1) % 7


def month_grid(year: int, month: int) -> list[list]:
    """
    Week rows for a month.

    e.g., June 2024 starts on a Saturday:
        [[None, None, None, None, None, None, 2024-06-01],
         [2024-06-02, ..., 2024-06-08],
         ...]
    """
    cells = [None] * leading_blanks(year, month)
    cells += [DayKey(year, month, d) for d in range(1, days_in_month(year, month) + 1)]
    cells += [None] * (-len(cells) % 7)
    return [cells[i:i + 7] for i in range(0, len(cells), 7)]


def can_shift_month(year: int, month: int, delta: int) -> bool:
    """False when the move would leave January 0001 .. December 9999."""
    target = year * 12 + (month - 1) + delta
    return date.min.year * 12 <= target <= date.max.year * 12 + 11


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move `delta` months forward (or back) from year/month."""
    if not can_shift_month(year, month, delta):
        raise ValueError(f"{year:04d}-{month:02d} shifted by {delta} months leaves the calendar")
    shifted = date(year, month, 1) + relativedelta(months=delta)
    return shifted.year, shifted.month


def month_title(year: int, month: int) -> str:
    return f"{MONTH_NAMES[month - 1]} {year}"
