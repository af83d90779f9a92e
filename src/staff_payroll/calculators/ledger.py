"""Part-time advance ledger and settlement aggregation.

Each (staff name, location) pair carries a running balance tracked per
ledger week (the 0-based 7-day windows of weeks_in_month). A week is
settled on its own, from its opening balance, the advance handed out and
the week's earnings:

    total_debt         = opening_balance + advance_given
    balance_after_work = total_debt - earnings

    balance_after_work > 0  -> staff still owes it (closing balance),
                               all earnings go to repayment
    otherwise               -> debt cleared, the rest of the earnings is
                               pending salary owed to the staff member

Settlement flags are stored per week only; monthly and date-range status
is always aggregated from the underlying weekly keys.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Protocol

from staff_payroll.calculators.dates import iter_months, previous_month, weeks_in_month
from staff_payroll.calculators.part_time import normalize_name

ZERO = Decimal("0")


class LedgerWeek(Protocol):
    """Anything that looks like a stored part-time advance record."""

    staff_name: str
    location: str
    year: int
    month: int
    week_number: int
    closing_balance: Decimal


@dataclass(frozen=True)
class WeekSettlement:
    """Outcome of settling one ledger week."""

    opening_balance: Decimal
    advance_given: Decimal
    earnings: Decimal
    adjustment: Decimal  # Part of earnings used to repay debt
    pending_salary: Decimal  # Still owed to the staff member
    closing_balance: Decimal  # Still owed by the staff member


def settle_week(
    opening_balance: Decimal, advance_given: Decimal, earnings: Decimal
) -> WeekSettlement:
    """Settle one week. Single-step; prior weeks are never reopened."""
    total_debt = opening_balance + advance_given
    balance_after_work = total_debt - earnings

    if balance_after_work > 0:
        closing_balance = balance_after_work
        pending_salary = ZERO
        adjustment = earnings
    else:
        closing_balance = ZERO
        pending_salary = -balance_after_work
        adjustment = total_debt

    return WeekSettlement(
        opening_balance=opening_balance,
        advance_given=advance_given,
        earnings=earnings,
        adjustment=adjustment,
        pending_salary=pending_salary,
        closing_balance=closing_balance,
    )


def _week_order(record: LedgerWeek) -> tuple[int, int, int]:
    return (record.year, record.month, record.week_number)


def resolve_opening_balance(
    history: Iterable[LedgerWeek],
    staff_name: str,
    location: str,
    year: int,
    month: int,
    week_number: int,
) -> Decimal:
    """Opening balance of a week: the previous ledger week's closing balance.

    The immediately preceding week of the same month is used when it has a
    record. Otherwise the most recent record strictly before the target
    week is used, skipping weeks (and months) without activity. No earlier
    record means a zero opening balance.
    """
    key = normalize_name(staff_name)
    target = (year, month, week_number)
    earlier = [
        r
        for r in history
        if normalize_name(r.staff_name) == key
        and r.location == location
        and _week_order(r) < target
    ]
    if not earlier:
        return ZERO

    if week_number > 0:
        for record in earlier:
            if _week_order(record) == (year, month, week_number - 1):
                return record.closing_balance

    return max(earlier, key=_week_order).closing_balance


# ===== Settlement =====


def settlement_key(
    staff_name: str, location: str, year: int, month: int, week_number: int
) -> str:
    """Unique key for one settled ledger week."""
    return f"{normalize_name(staff_name)}|{location}|{year:04d}-{month:02d}|W{week_number}"


def weekly_keys_for_month(
    staff_name: str, location: str, year: int, month: int
) -> list[str]:
    return [
        settlement_key(staff_name, location, year, month, window.week_number)
        for window in weeks_in_month(year, month)
    ]


def weekly_keys_for_range(
    staff_name: str, location: str, start: date, end: date
) -> list[str]:
    """Keys of every ledger week overlapping [start, end], across months.

    The month before start is included for its spill-over window.
    """
    keys: list[str] = []
    prev_year, prev_month = previous_month(start.year, start.month)
    for year, month in iter_months(date(prev_year, prev_month, 1), end):
        for window in weeks_in_month(year, month):
            if window.overlaps(start, end):
                keys.append(
                    settlement_key(staff_name, location, year, month, window.week_number)
                )
    return keys


@dataclass(frozen=True)
class SettlementStatus:
    """Aggregated settlement state over a set of weekly keys."""

    total: int
    settled_count: int

    @property
    def is_fully_settled(self) -> bool:
        return self.total > 0 and self.settled_count == self.total

    @property
    def is_partially_settled(self) -> bool:
        return 0 < self.settled_count < self.total


def settlement_status(keys: Sequence[str], settled_keys: set[str]) -> SettlementStatus:
    unique = list(dict.fromkeys(keys))
    return SettlementStatus(
        total=len(unique),
        settled_count=sum(1 for k in unique if k in settled_keys),
    )


def plan_toggle(keys: Sequence[str], settled_keys: set[str]) -> list[tuple[str, bool]]:
    """Bulk toggle: every key goes to the inverse of "fully settled".

    A partially settled set therefore becomes fully settled.
    """
    target = not settlement_status(keys, settled_keys).is_fully_settled
    return [(key, target) for key in dict.fromkeys(keys)]
