"""Calendar helpers and the monetary rounding boundary."""

from __future__ import annotations

import calendar
import math
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from staff_payroll.calculators.types import WeekWindow

SUNDAY = 6  # date.weekday()
WEEK_LENGTH = 7

TEN = Decimal("10")


def round_to_nearest_10(amount: Decimal | int) -> Decimal:
    """Round an amount to the nearest 10 (half-up)."""
    tens = (Decimal(amount) / TEN).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return tens * TEN


def round_half_up(amount: Decimal) -> Decimal:
    """Round an amount to whole units (half-up)."""
    return Decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def is_sunday(day: date) -> bool:
    return day.weekday() == SUNDAY


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def weeks_in_month(year: int, month: int) -> list[WeekWindow]:
    """Partition a month into consecutive 7-day windows anchored to day 1.

    Windows are day 1-7, 8-14, ... and the final window runs a full seven
    days, spilling into the following month. They are not aligned to any
    weekday.
    """
    first, last = month_bounds(year, month)
    windows: list[WeekWindow] = []
    start = first
    while start <= last:
        windows.append(
            WeekWindow(
                week_number=len(windows),
                start_date=start,
                end_date=start + timedelta(days=WEEK_LENGTH - 1),
            )
        )
        start += timedelta(days=WEEK_LENGTH)
    return windows


def week_bucket(day: date) -> int:
    """Display week of a day: ceil(day_of_month / 7), 1-based.

    Used only for earnings display; the advance ledger uses weeks_in_month.
    """
    return math.ceil(day.day / WEEK_LENGTH)


def iter_months(start: date, end: date) -> list[tuple[int, int]]:
    """(year, month) pairs from start's month through end's month."""
    months: list[tuple[int, int]] = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        months.append((year, month))
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return months


def previous_month(year: int, month: int) -> tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def experience_label(joined_date: date, today: date | None = None) -> str:
    """Elapsed tenure as "Xy Ym"."""
    today = today or date.today()
    years = today.year - joined_date.year
    months = today.month - joined_date.month
    if months < 0:
        years -= 1
        months += 12
    return f"{years}y {months}m"
