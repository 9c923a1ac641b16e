"""
Aggregation engine — turns a store snapshot into period totals.

Everything here is a pure function of (snapshot, reference date). Nothing is
cached and nothing is stored: the caller asks again whenever the store or the
displayed date changes.

Period rules:
    - Year:    same calendar year as the reference date.
    - Month:   same year and month.
    - Quarter: same year and same 0-indexed quarter, (month - 1) // 3.
    - Week:    Sunday on or before the reference date through the following
               Saturday, inclusive. Fixed, regardless of locale.

Days that aren't in the snapshot contribute 0. Every key is assumed to be a
valid calendar day; the store rejects bad dates before they get here.
"""

import calendar
from datetime import date, timedelta
from typing import Mapping, Optional

from daymark.models import DayKey, Period, PeriodTotals, Score, as_day_key


# ============================================================
# PART 1: Period boundaries
# ============================================================

def _add_days(day: date, days: int) -> date:
    """day + days, clamped to date.min/date.max at the ends of the calendar."""
    try:
        return day + timedelta(days=days)
    except OverflowError:
        return date.min if days < 0 else date.max


def week_range(reference) -> tuple[str, date, date]:
    """
    The Sunday-to-Saturday week containing `reference`.

    The first and last weeks of the calendar are cut at 0001-01-01 and
    9999-12-31; no real day lies outside them anyway.
    """
    ref = as_day_key(reference).to_date()

    # date.weekday(): Monday=0 ... Sunday=6
    days_since_sunday = (ref.weekday() + 1) % 7
    week_start = _add_days(ref, -days_since_sunday)
    week_end = _add_days(ref, 6 - days_since_sunday)  # Saturday
    return f"W{week_start.isoformat()}", week_start, week_end


def month_range(reference) -> tuple[str, date, date]:
    """
    First and last day of the month containing `reference`.

    e.g., 2024-02-10 returns ("2024-02", 2024-02-01, 2024-02-29)
    """
    ref = as_day_key(reference)
    month_start = date(ref.year, ref.month, 1)
    month_end = date(ref.year, ref.month, calendar.monthrange(ref.year, ref.month)[1])
    return f"{ref.year:04d}-{ref.month:02d}", month_start, month_end


def quarter_range(reference) -> tuple[str, date, date]:
    ref = as_day_key(reference)
    q_start_month = ref.quarter * 3 + 1
    q_end_month = q_start_month + 2
    q_start = date(ref.year, q_start_month, 1)
    if q_end_month == 12:
        q_end = date(ref.year, 12, 31)
    else:
        q_end = date(ref.year, q_end_month + 1, 1) - timedelta(days=1)
    return ref.quarter_label, q_start, q_end


def year_range(reference) -> tuple[str, date, date]:
    ref = as_day_key(reference)
    return str(ref.year), date(ref.year, 1, 1), date(ref.year, 12, 31)


# ============================================================
# PART 2: Classification and sums
# ============================================================

def in_period(key: DayKey, period: Period, reference) -> bool:
    """Does `key` fall inside the `period` that contains `reference`?"""
    ref = as_day_key(reference)

    if period is Period.YEAR:
        return key.year == ref.year
    if period is Period.MONTH:
        return key.year == ref.year and key.month == ref.month
    if period is Period.QUARTER:
        return key.year == ref.year and key.quarter == ref.quarter
    if period is Period.WEEK:
        _, week_start, week_end = week_range(ref)
        return week_start <= key.to_date() <= week_end

    raise ValueError(f"Unknown period: {period!r}")


def period_total(snapshot: Mapping[DayKey, Score], period: Period, reference) -> int:
    """Net score of every day in `snapshot` inside one period."""
    return sum(int(score) for key, score in snapshot.items()
               if in_period(key, period, reference))


def aggregate(snapshot: Mapping[DayKey, Score], reference_date,
              week_anchor=None) -> PeriodTotals:
    """
    Week, month, quarter and year totals for `reference_date`.

    Args:
        snapshot:       A ScoreStore.snapshot() (any DayKey -> Score mapping).
        reference_date: Picks the month, quarter and year.
        week_anchor:    Picks the week. Defaults to reference_date. The
                        dashboard passes today's date here so the weekly
                        figure stays on the real current week while the user
                        pages through other months.
    """
    ref = as_day_key(reference_date)
    anchor = as_day_key(week_anchor) if week_anchor is not None else ref

    _, week_start, week_end = week_range(anchor)

    week = month = quarter = year = 0
    for key, score in snapshot.items():
        value = int(score)
        if week_start <= key.to_date() <= week_end:
            week += value
        if key.year != ref.year:
            continue
        year += value
        if key.quarter == ref.quarter:
            quarter += value
            if key.month == ref.month:
                month += value

    return PeriodTotals(week=week, month=month, quarter=quarter, year=year)


def view_totals(snapshot: Mapping[DayKey, Score], year: int, month: int,
                today=None) -> PeriodTotals:
    """
    Totals for the month on screen.

    Month, quarter and year follow the displayed month. The week is always
    the real current week (`today`, default date.today()), so paging
    through months never changes it.
    """
    today = as_day_key(today if today is not None else date.today())
    return aggregate(snapshot, DayKey(year, month, 1), week_anchor=today)


# ============================================================
# PART 3: Summaries for the dashboard
# ============================================================

def monthly_totals(snapshot: Mapping[DayKey, Score], year: int) -> list[tuple[str, int]]:
    """
    Net score for each month of `year`, January first.
    Always 12 entries; months with no scored days are 0.
    """
    totals = [0] * 12
    for key, score in snapshot.items():
        if key.year == year:
            totals[key.month - 1] += int(score)
    return [(f"{year:04d}-{m:02d}", totals[m - 1]) for m in range(1, 13)]


def compute_score_stats(snapshot: Mapping[DayKey, Score],
                        start_date, end_date) -> dict:
    """
    Count positive and negative days in an inclusive date range.
    Pure counting, same shape whether or not anything was scored.
    """
    start = as_day_key(start_date)
    end = as_day_key(end_date)

    positive = negative = 0
    for key, score in snapshot.items():
        if not start <= key <= end:
            continue
        if score is Score.POSITIVE:
            positive += 1
        elif score is Score.NEGATIVE:
            negative += 1

    return {
        "positive_days": positive,
        "negative_days": negative,
        "scored_days": positive + negative,
        "net_total": positive - negative,
    }


def target_progress(total: int, target: Optional[int]) -> float:
    """Fraction of an annual target reached, clamped to 0..1."""
    if not target or target <= 0:
        return 0.0
    return max(0.0, min(1.0, total / target))
