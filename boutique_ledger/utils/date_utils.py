"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, time
from typing import Tuple

MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    """First and last instant of a calendar month (closed interval)"""
    last_day = calendar.monthrange(year, month)[1]
    return start_of_day(date(year, month, 1)), end_of_day(date(year, month, last_day))


def year_bounds(year: int) -> Tuple[datetime, datetime]:
    """First and last instant of a calendar year (closed interval)"""
    return start_of_day(date(year, 1, 1)), end_of_day(date(year, 12, 31))


def within_interval(moment: datetime, start: datetime, end: datetime) -> bool:
    """Inclusive on both ends; aware timestamps are compared on their wall clock"""
    return start <= moment.replace(tzinfo=None) <= end


def month_label(month: int) -> str:
    return MONTH_LABELS[month - 1]


def add_months(day: date, months: int) -> date:
    """Shift a date by whole months, clamping to the last day of the target month"""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))
