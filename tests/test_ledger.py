"""Unit tests for the part-time advance ledger and settlement aggregation."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from hypothesis import given
from hypothesis import strategies as st

from staff_payroll.calculators.ledger import (
    plan_toggle,
    resolve_opening_balance,
    settle_week,
    settlement_key,
    settlement_status,
    weekly_keys_for_month,
    weekly_keys_for_range,
)

amounts = st.integers(min_value=0, max_value=100000).map(Decimal)


@dataclass
class Week:
    staff_name: str
    location: str
    year: int
    month: int
    week_number: int
    closing_balance: Decimal


class TestSettleWeek:
    """Test one-week settlement."""

    def test_advance_exceeds_earnings(self):
        result = settle_week(Decimal("0"), Decimal("1200"), Decimal("1000"))

        assert result.closing_balance == Decimal("200")
        assert result.pending_salary == Decimal("0")
        assert result.adjustment == Decimal("1000")

    def test_earnings_exceed_advance(self):
        result = settle_week(Decimal("0"), Decimal("800"), Decimal("1000"))

        assert result.closing_balance == Decimal("0")
        assert result.pending_salary == Decimal("200")
        assert result.adjustment == Decimal("800")

    def test_exact_repayment(self):
        result = settle_week(Decimal("300"), Decimal("200"), Decimal("500"))

        assert result.closing_balance == Decimal("0")
        assert result.pending_salary == Decimal("0")
        assert result.adjustment == Decimal("500")

    @given(opening=amounts, advance=amounts, earnings=amounts)
    def test_settlement_invariants(self, opening, advance, earnings):
        result = settle_week(opening, advance, earnings)

        assert result.closing_balance >= 0
        assert result.pending_salary >= 0
        if result.closing_balance > 0:
            assert result.pending_salary == 0
            assert result.adjustment == earnings
        else:
            assert result.pending_salary == earnings - opening - advance
            assert result.adjustment == opening + advance


class TestOpeningBalance:
    """Test carry-forward of closing balances."""

    def test_no_history_opens_at_zero(self):
        assert resolve_opening_balance([], "Ravi", "Big Shop", 2025, 1, 0) == Decimal("0")

    def test_previous_week_in_month(self):
        history = [
            Week("Ravi", "Big Shop", 2025, 1, 0, Decimal("100")),
            Week("Ravi", "Big Shop", 2025, 1, 1, Decimal("250")),
        ]
        assert resolve_opening_balance(history, "Ravi", "Big Shop", 2025, 1, 2) == Decimal("250")

    def test_carries_across_month_with_gaps(self):
        history = [
            Week("Ravi", "Big Shop", 2024, 12, 1, Decimal("400")),
            Week("Ravi", "Big Shop", 2024, 12, 2, Decimal("650")),
            # Different location and different staff never leak in
            Week("Ravi", "Small Shop", 2025, 1, 0, Decimal("999")),
            Week("Mani", "Big Shop", 2025, 1, 0, Decimal("999")),
        ]

        # Weeks 3 and 4 of December and week 0 of January had no activity
        assert resolve_opening_balance(history, "Ravi", "Big Shop", 2025, 1, 1) == Decimal("650")
        assert resolve_opening_balance(history, "ravi", "Big Shop", 2025, 1, 0) == Decimal("650")

    def test_ignores_later_weeks(self):
        history = [Week("Ravi", "Big Shop", 2025, 2, 0, Decimal("700"))]
        assert resolve_opening_balance(history, "Ravi", "Big Shop", 2025, 1, 3) == Decimal("0")

    def test_chained_weeks(self):
        """Each settled week opens the next."""
        history: list[Week] = []
        plan = [(2025, 1, 0, "1000", "600"), (2025, 1, 1, "0", "300"), (2025, 2, 0, "500", "0")]
        for year, month, week, advance, earnings in plan:
            opening = resolve_opening_balance(history, "Ravi", "Big Shop", year, month, week)
            result = settle_week(opening, Decimal(advance), Decimal(earnings))
            history.append(Week("Ravi", "Big Shop", year, month, week, result.closing_balance))

        assert [w.closing_balance for w in history] == [
            Decimal("400"),
            Decimal("100"),
            Decimal("600"),
        ]


class TestSettlementKeys:
    def test_key_format(self):
        assert settlement_key(" Ravi ", "Big Shop", 2025, 1, 3) == "ravi|Big Shop|2025-01|W3"

    def test_month_keys(self):
        keys = weekly_keys_for_month("Ravi", "Big Shop", 2025, 1)
        assert len(keys) == 5
        assert keys[-1] == "ravi|Big Shop|2025-01|W4"

    def test_range_keys_cross_months(self):
        keys = weekly_keys_for_range("Ravi", "Big Shop", date(2025, 1, 27), date(2025, 2, 9))
        assert keys == [
            "ravi|Big Shop|2025-01|W3",
            "ravi|Big Shop|2025-01|W4",
            "ravi|Big Shop|2025-02|W0",
            "ravi|Big Shop|2025-02|W1",
        ]

    def test_range_includes_previous_month_spill(self):
        keys = weekly_keys_for_range("Ravi", "Big Shop", date(2025, 2, 2), date(2025, 2, 3))
        assert keys == ["ravi|Big Shop|2025-01|W4", "ravi|Big Shop|2025-02|W0"]


class TestSettlementStatus:
    """Test aggregation of weekly settled flags."""

    def test_fully_settled_requires_every_week(self):
        keys = weekly_keys_for_month("Ravi", "Big Shop", 2025, 1)

        partial = settlement_status(keys, set(keys[:3]))
        full = settlement_status(keys, set(keys))

        assert not partial.is_fully_settled
        assert partial.is_partially_settled
        assert partial.settled_count == 3
        assert full.is_fully_settled
        assert not full.is_partially_settled

    def test_empty_key_set_is_not_settled(self):
        status = settlement_status([], set())
        assert not status.is_fully_settled
        assert not status.is_partially_settled

    def test_partial_toggle_settles_everything(self):
        keys = weekly_keys_for_month("Ravi", "Big Shop", 2025, 1)

        plan = plan_toggle(keys, {keys[0]})

        assert [target for _, target in plan] == [True] * 5

    def test_full_toggle_unsettles_everything(self):
        keys = weekly_keys_for_month("Ravi", "Big Shop", 2025, 1)

        plan = plan_toggle(keys, set(keys))

        assert [target for _, target in plan] == [False] * 5
