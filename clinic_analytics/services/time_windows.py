"""Calendar boundaries used by every dashboard aggregation.

All windows are closed intervals: the start instant is midnight of the first
day and the end instant is the last representable moment of the final day
(``datetime.max.time()``). Weeks run Monday through Sunday regardless of the
server locale.

Bounds are naive wall-clock times in the reporting timezone; the aware
"now" passed in only contributes its local date.
"""
import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Tuple

from ..errors import InvalidParameterError

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


def _start_of(day: date) -> datetime:
    return datetime.combine(day, time.min)


def _end_of(day: date) -> datetime:
    return datetime.combine(day, datetime.max.time())


def day_bounds(now: datetime) -> TimeWindow:
    today = now.date()
    return TimeWindow(_start_of(today), _end_of(today))


def week_bounds(now: datetime) -> TimeWindow:
    monday = now.date() - timedelta(days=now.weekday())
    sunday = monday + timedelta(days=6)
    return TimeWindow(_start_of(monday), _end_of(sunday))


def week_bounds_offset(now: datetime, weeks_ago: int) -> TimeWindow:
    """Bounds of the Monday–Sunday week ``weeks_ago`` weeks before the current one."""
    if weeks_ago < 0:
        raise ValueError("weeks_ago must be zero or positive")
    current = week_bounds(now)
    shift = timedelta(weeks=weeks_ago)
    monday = current.start.date() - shift
    sunday = current.end.date() - shift
    return TimeWindow(_start_of(monday), _end_of(sunday))


def month_bounds(year: int, month: int) -> TimeWindow:
    if month < 1 or month > 12:
        raise InvalidParameterError("month", "Parameter month must be an integer between 1 and 12")
    last_day = calendar.monthrange(year, month)[1]
    return TimeWindow(_start_of(date(year, month, 1)), _end_of(date(year, month, last_day)))


def previous_month(year: int, month: int) -> Tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def shift_months(moment: datetime, months: int) -> datetime:
    """Move ``moment`` by whole calendar months, clamping the day to the target month."""
    index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def month_label(year: int, month: int) -> str:
    return f"{MONTH_NAMES[month - 1]} {year}"


def week_label(window: TimeWindow) -> str:
    return f"{window.start:%d/%m} - {window.end:%d/%m}"
