"""
Tests for the budget summarizer.
"""

import math
import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from finplan.calculations import BudgetCalculator, clamp_timeframe
from finplan.calculations.budget import find_emergency_goal, sum_fixed_expenses
from finplan.models.finance import (
    Category,
    CategoryName,
    FinancialGoal,
    FinancialProfile,
    GoalType,
    Transaction,
    TransactionType,
)

AS_OF = datetime(2025, 3, 31, 12, 0, tzinfo=timezone.utc)


def expense(txn_id: str, amount: str, day: date, category_id: str = None) -> Transaction:
    return Transaction(
        id=txn_id,
        category_id=category_id,
        amount=Decimal(amount),
        type=TransactionType.EXPENSE,
        date=day,
    )


def income(txn_id: str, amount: str, day: date) -> Transaction:
    return Transaction(
        id=txn_id,
        amount=Decimal(amount),
        type=TransactionType.INCOME,
        date=day,
    )


class TestTimeframeClamping:
    """Timeframes outside [7, 180] collapse to a bound or the default."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, 30),
            (0, 30),
            (float("nan"), 30),
            ("abc", 30),
            (-5, 7),
            (3, 7),
            (45, 45),
            (45.9, 45),
            (1000, 180),
            (float("inf"), 180),
            (float("-inf"), 7),
        ],
    )
    def test_clamp_timeframe(self, value, expected):
        assert clamp_timeframe(value) == expected

    def test_summary_reports_effective_timeframe(self):
        summary = BudgetCalculator().calculate(
            FinancialProfile(), [], [], [], timeframe_days=-10, as_of=AS_OF
        )
        assert summary.metadata.timeframe_days == 7
        assert summary.expenses.timeframe == "7d"


class TestEndToEnd:
    """Worked examples from profile to summary."""

    def test_emergency_fund_goal_is_used_directly(self):
        profile = FinancialProfile(
            monthly_income=Decimal("4600"),
            monthly_expenses=Decimal("2800"),
            fixed_expenses={"rent": 1200, "utilities": 200},
        )
        goal = FinancialGoal(
            id="ef",
            goal_type=GoalType.EMERGENCY_FUND,
            target_amount=Decimal("2000"),
            current_amount=Decimal("600"),
        )

        summary = BudgetCalculator().calculate(profile, [], [], [goal], as_of=AS_OF)

        assert summary.expenses.fixed_monthly == 1400
        assert summary.expenses.effective_monthly == 2800
        assert summary.emergency_fund.current_amount == 600
        assert summary.emergency_fund.target_amount == 2000
        assert summary.emergency_fund.source == "goal"
        assert summary.emergency_fund.completion_percentage == 30.0
        assert summary.cash_flow.disposable_income == 1800
        assert summary.cash_flow.savings_rate == 39.13
        assert summary.emergency_fund.months_to_target == 0.8

    def test_emergency_fund_synthesized_without_goal(self):
        profile = FinancialProfile(
            bank_account_balance=Decimal("1000"),
            monthly_income=Decimal("4600"),
            monthly_expenses=Decimal("2000"),
        )
        vacation = FinancialGoal(
            id="v", goal_type=GoalType.VACATION, target_amount=Decimal("900")
        )

        summary = BudgetCalculator().calculate(profile, [], [], [vacation], as_of=AS_OF)

        assert summary.emergency_fund.source == "synthesized"
        assert summary.emergency_fund.target_amount == 6000
        assert summary.emergency_fund.current_amount == 1000
        assert summary.emergency_fund.completion_percentage == pytest.approx(16.67)
        assert summary.emergency_fund.months_to_target == 1.9

    def test_variable_spend_scaled_to_thirty_days(self):
        profile = FinancialProfile(monthly_income=Decimal("3000"))
        transactions = [
            expense("t1", "300", date(2025, 3, 21)),
            expense("t2", "100", date(2025, 3, 1)),
            expense("t3", "999", date(2025, 1, 1)),  # outside the window
            income("t4", "3000", date(2025, 3, 25)),
        ]

        summary = BudgetCalculator().calculate(
            profile, [], transactions, [], timeframe_days=60, as_of=AS_OF
        )

        # 400 over 60 days -> 200 per 30 days
        assert summary.expenses.variable_monthly == 200
        assert summary.expenses.effective_monthly == 200
        assert summary.expenses.average_transaction == 200
        assert summary.metadata.transactions_considered == 3

    def test_reported_expenses_win_when_higher(self):
        profile = FinancialProfile(
            monthly_income=Decimal("5000"),
            monthly_expenses=Decimal("4000"),
            fixed_expenses={"rent": 1000},
        )
        summary = BudgetCalculator().calculate(
            profile, [], [expense("t1", "500", date(2025, 3, 30))], [], as_of=AS_OF
        )
        assert summary.expenses.effective_monthly == 4000
        assert summary.cash_flow.projected_annual_savings == 12000


class TestDegenerateNumbers:
    """Zero denominators resolve to sentinels, never errors."""

    def test_zero_income_gives_zero_savings_rate(self):
        profile = FinancialProfile(monthly_expenses=Decimal("1000"))
        summary = BudgetCalculator().calculate(profile, [], [], [], as_of=AS_OF)
        assert summary.cash_flow.savings_rate == 0
        assert summary.cash_flow.disposable_income == -1000
        assert summary.cash_flow.projected_annual_savings == 0

    def test_zero_expenses_gives_infinite_runway(self):
        profile = FinancialProfile(bank_account_balance=Decimal("500"))
        summary = BudgetCalculator().calculate(profile, [], [], [], as_of=AS_OF)
        assert math.isinf(summary.cash_flow.runway_months)

    def test_runway_rounded_to_one_decimal(self):
        profile = FinancialProfile(
            bank_account_balance=Decimal("1000"),
            monthly_expenses=Decimal("300"),
        )
        summary = BudgetCalculator().calculate(profile, [], [], [], as_of=AS_OF)
        assert summary.cash_flow.runway_months == 3.3

    def test_zero_target_emergency_goal(self):
        goal = FinancialGoal(
            id="ef",
            goal_type=GoalType.EMERGENCY_FUND,
            target_amount=Decimal("0"),
            current_amount=Decimal("10"),
        )
        summary = BudgetCalculator().calculate(FinancialProfile(), [], [], [goal], as_of=AS_OF)
        assert summary.emergency_fund.completion_percentage == 100

        goal = goal.model_copy(update={"current_amount": Decimal("0")})
        summary = BudgetCalculator().calculate(FinancialProfile(), [], [], [goal], as_of=AS_OF)
        assert summary.emergency_fund.completion_percentage == 0
        assert summary.emergency_fund.months_to_target is None

    def test_no_profile_is_all_zeros(self):
        summary = BudgetCalculator().calculate(None, [], [], [], as_of=AS_OF)
        assert summary.income.monthly == 0
        assert summary.emergency_fund.target_amount == 0
        assert summary.emergency_fund.completion_percentage == 0


class TestCategoryBreakdown:
    """Per-category figures and the top-by-spend subset."""

    def test_breakdown_figures(self):
        category = Category(
            id="c1",
            name=CategoryName.FINANCE,
            budget_allocated=Decimal("500"),
            spent_amount=Decimal("200"),
        )
        transactions = [
            expense("t1", "120", date(2025, 3, 21), category_id="c1"),
            expense("t2", "80", date(2025, 1, 5), category_id="c1"),
            income("t3", "50", date(2025, 3, 29)),
        ]

        summary = BudgetCalculator().calculate(
            FinancialProfile(), [category], transactions, [], as_of=AS_OF
        )
        row = summary.expenses.by_category[0]

        assert row.name == "Finance"
        assert row.remaining_budget == 300
        assert row.utilization == 40
        assert row.last_transaction_date == date(2025, 3, 21)
        assert row.window_spent == 120

    def test_zero_allocation_utilization(self):
        category = Category(
            id="c1",
            name=CategoryName.FAMILY,
            budget_allocated=Decimal("0"),
            spent_amount=Decimal("75"),
        )
        summary = BudgetCalculator().calculate(
            FinancialProfile(), [category], [], [], as_of=AS_OF
        )
        row = summary.expenses.by_category[0]
        assert row.utilization == 0
        assert row.remaining_budget == -75
        assert row.last_transaction_date is None

    def test_top_three_by_spend(self):
        spends = {
            "c1": ("Finance", "10"),
            "c2": ("Education", "400"),
            "c3": ("Family", "250"),
            "c4": ("Friends", "300"),
        }
        categories = [
            Category(id=cid, name=name, budget_allocated=Decimal("500"), spent_amount=Decimal(spent))
            for cid, (name, spent) in spends.items()
        ]
        summary = BudgetCalculator().calculate(
            FinancialProfile(), categories, [], [], as_of=AS_OF
        )
        assert len(summary.expenses.by_category) == 4
        assert [row.id for row in summary.expenses.top_categories] == ["c2", "c4", "c3"]


class TestHelpers:

    def test_sum_fixed_expenses_ignores_garbage(self):
        profile = FinancialProfile(
            fixed_expenses={"rent": "1200", "utilities": 200.5, "gym": "n/a", "misc": None}
        )
        assert sum_fixed_expenses(profile) == 1400.5

    def test_find_emergency_goal_picks_first(self):
        goals = [
            FinancialGoal(id="a", goal_type=GoalType.OTHER, target_amount=Decimal("1")),
            FinancialGoal(id="b", goal_type=GoalType.EMERGENCY_FUND, target_amount=Decimal("1")),
            FinancialGoal(id="c", goal_type=GoalType.EMERGENCY_FUND, target_amount=Decimal("1")),
        ]
        assert find_emergency_goal(goals).id == "b"
        assert find_emergency_goal([]) is None
