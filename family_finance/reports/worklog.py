"""
Work-hour Statistics

Fixed-window sums over work log entries: this week, this month, the
last 8 weeks and the last 12 months, each ending at a reference day.
Weeks start on Monday. Windows with no entries are reported as zero.

Nothing is cached; every call recomputes from the entries it is given.
"""

from collections import defaultdict
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from family_finance.models.records import WorkLog


WEEKS_WINDOW = 8
MONTHS_WINDOW = 12


class HolidayFilter(str, Enum):
    ALL = "all"
    ONLY = "only"
    EXCLUDE = "exclude"


def week_start(day: date) -> date:
    """Monday of the week containing `day`."""
    return day - timedelta(days=day.weekday())


def month_start(day: date) -> date:
    return day.replace(day=1)


def _shift_months(first_of_month: date, delta: int) -> date:
    index = first_of_month.year * 12 + (first_of_month.month - 1) + delta
    return date(index // 12, index % 12 + 1, 1)


def filter_holidays(
    entries: Iterable[WorkLog],
    holiday_filter: HolidayFilter = HolidayFilter.ALL,
) -> list[WorkLog]:
    if holiday_filter is HolidayFilter.ONLY:
        return [e for e in entries if e.is_holiday]
    if holiday_filter is HolidayFilter.EXCLUDE:
        return [e for e in entries if not e.is_holiday]
    return list(entries)


class HoursBucket(BaseModel):
    start: date
    hours: float = 0.0


class WorkHourStats(BaseModel):
    reference_day: date
    this_week: float = 0.0
    this_month: float = 0.0
    weeks: list[HoursBucket] = Field(default_factory=list)
    months: list[HoursBucket] = Field(default_factory=list)


def compute_work_hour_stats(
    entries: Iterable[WorkLog],
    today: Optional[date] = None,
    holiday_filter: HolidayFilter = HolidayFilter.ALL,
) -> WorkHourStats:
    """
    Sum effective hours into week and month windows ending at `today`.

    Weeks and months are listed oldest first. Entries without a date
    are skipped.
    """
    today = today or date.today()
    selected = [e for e in filter_holidays(entries, holiday_filter) if e.date is not None]

    by_week: dict[date, float] = defaultdict(float)
    by_month: dict[date, float] = defaultdict(float)
    for entry in selected:
        hours = entry.effective_hours
        by_week[week_start(entry.date)] += hours
        by_month[month_start(entry.date)] += hours

    current_week = week_start(today)
    current_month = month_start(today)

    weeks = [
        HoursBucket(start=start, hours=round(by_week.get(start, 0.0), 2))
        for start in (
            current_week - timedelta(weeks=offset)
            for offset in range(WEEKS_WINDOW - 1, -1, -1)
        )
    ]
    months = [
        HoursBucket(start=start, hours=round(by_month.get(start, 0.0), 2))
        for start in (
            _shift_months(current_month, -offset)
            for offset in range(MONTHS_WINDOW - 1, -1, -1)
        )
    ]

    return WorkHourStats(
        reference_day=today,
        this_week=weeks[-1].hours,
        this_month=months[-1].hours,
        weeks=weeks,
        months=months,
    )
