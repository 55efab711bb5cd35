"""
Budget Summarizer

Combines the user's declared profile, category budgets and recent
transaction history into a point-in-time BudgetSummary.

DESIGN DECISION: Expenses are estimated conservatively. The summarizer
compares the self-reported monthly expenses with its own estimate
(fixed expenses + variable spend scaled to 30 days) and keeps the higher
of the two. Where the two figures overlap this may double-count; that is
the accepted trade-off for never overstating disposable income.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional, Sequence

from finplan.calculations.numeric import (
    clamp_int,
    percentage,
    round_currency,
    to_number,
)
from finplan.models.finance import (
    Category,
    FinancialGoal,
    FinancialProfile,
    GoalType,
    Transaction,
    TransactionType,
)
from finplan.models.results import (
    BudgetSummary,
    CashFlowSummary,
    CategoryBudgetBreakdown,
    EmergencyFundSummary,
    ExpenseSummary,
    IncomeSummary,
    SummaryMetadata,
)

DEFAULT_TIMEFRAME_DAYS = 30
MIN_TIMEFRAME_DAYS = 7
MAX_TIMEFRAME_DAYS = 180
DAYS_PER_MONTH = 30


def clamp_timeframe(
    days: Any,
    default: int = DEFAULT_TIMEFRAME_DAYS,
    minimum: int = MIN_TIMEFRAME_DAYS,
    maximum: int = MAX_TIMEFRAME_DAYS,
) -> int:
    """
    Normalize a caller-supplied timeframe.

    None, 0, NaN and non-numeric values give the default; negative or
    too-small values give the minimum; oversized values give the maximum.
    """
    return clamp_int(days, default=default, minimum=minimum, maximum=maximum)


def sum_fixed_expenses(profile: Optional[FinancialProfile]) -> float:
    """Total of the profile's fixed expenses; unusable values count as 0."""
    if profile is None:
        return 0.0
    return sum(to_number(value) for value in profile.fixed_expenses.values())


def find_emergency_goal(goals: Iterable[FinancialGoal]) -> Optional[FinancialGoal]:
    """First goal of type EMERGENCY_FUND, if any."""
    return next(
        (goal for goal in goals if goal.goal_type == GoalType.EMERGENCY_FUND),
        None,
    )


class BudgetCalculator:
    """
    Computes budget summaries.

    Stateless apart from its tunables; one instance can serve any number
    of concurrent calls.
    """

    def __init__(
        self,
        emergency_fund_months: int = 3,
        top_categories_count: int = 3,
        default_timeframe_days: int = DEFAULT_TIMEFRAME_DAYS,
        min_timeframe_days: int = MIN_TIMEFRAME_DAYS,
        max_timeframe_days: int = MAX_TIMEFRAME_DAYS,
    ):
        self._emergency_fund_months = emergency_fund_months
        self._top_categories_count = top_categories_count
        self._default_timeframe_days = default_timeframe_days
        self._min_timeframe_days = min_timeframe_days
        self._max_timeframe_days = max_timeframe_days

    def calculate(
        self,
        profile: Optional[FinancialProfile],
        categories: Sequence[Category],
        transactions: Sequence[Transaction],
        goals: Sequence[FinancialGoal],
        timeframe_days: Any = None,
        as_of: Optional[datetime] = None,
    ) -> BudgetSummary:
        """
        Build a budget summary.

        Args:
            profile: Declared financial profile (None is treated as all zeros)
            categories: The user's budget categories
            transactions: Transaction history; only those inside the
                timeframe window feed the variable-expense estimate
            goals: The user's goals; an EMERGENCY_FUND goal overrides the
                synthesized emergency fund
            timeframe_days: Trailing window size, clamped to [7, 180]
            as_of: Reference instant (defaults to now, UTC)
        """
        as_of = as_of or datetime.now(timezone.utc)
        days = clamp_timeframe(
            timeframe_days,
            default=self._default_timeframe_days,
            minimum=self._min_timeframe_days,
            maximum=self._max_timeframe_days,
        )

        monthly_income = to_number(profile.monthly_income) if profile else 0.0
        reported_expenses = to_number(profile.monthly_expenses) if profile else 0.0
        bank_balance = to_number(profile.bank_account_balance) if profile else 0.0
        fixed_monthly = sum_fixed_expenses(profile)

        window_start = as_of.date() - timedelta(days=days)
        recent = [txn for txn in transactions if txn.date >= window_start]
        recent_expenses = [txn for txn in recent if txn.type == TransactionType.EXPENSE]

        total_variable = sum(to_number(txn.amount) for txn in recent_expenses)
        average_transaction = (
            total_variable / len(recent_expenses) if recent_expenses else 0.0
        )
        variable_monthly = total_variable * (DAYS_PER_MONTH / days)

        effective_expenses = max(reported_expenses, fixed_monthly + variable_monthly)

        disposable = monthly_income - effective_expenses
        savings_rate = percentage(disposable, monthly_income)
        monthly_savings = max(disposable, 0.0)
        runway = (
            bank_balance / effective_expenses if effective_expenses > 0 else float("inf")
        )

        emergency_fund = self._emergency_fund(
            goals, effective_expenses, bank_balance, monthly_savings
        )

        breakdown = [
            self._category_breakdown(category, transactions, recent_expenses)
            for category in categories
        ]
        top = sorted(breakdown, key=lambda item: item.spent_amount, reverse=True)

        return BudgetSummary(
            income=IncomeSummary(
                monthly=round_currency(monthly_income),
                annual=round_currency(monthly_income * 12),
            ),
            expenses=ExpenseSummary(
                reported_monthly=round_currency(reported_expenses),
                fixed_monthly=round_currency(fixed_monthly),
                variable_monthly=round_currency(variable_monthly),
                effective_monthly=round_currency(effective_expenses),
                average_transaction=round_currency(average_transaction),
                timeframe=f"{days}d",
                by_category=breakdown,
                top_categories=top[: self._top_categories_count],
            ),
            cash_flow=CashFlowSummary(
                disposable_income=round_currency(disposable),
                savings_rate=round_currency(savings_rate),
                projected_annual_savings=round_currency(monthly_savings * 12),
                runway_months=runway if runway == float("inf") else round(runway, 1),
            ),
            emergency_fund=emergency_fund,
            metadata=SummaryMetadata(
                timeframe_days=days,
                transactions_considered=len(recent),
                generated_at=as_of,
            ),
        )

    def _emergency_fund(
        self,
        goals: Sequence[FinancialGoal],
        effective_expenses: float,
        bank_balance: float,
        monthly_savings: float,
    ) -> EmergencyFundSummary:
        """Emergency fund posture from a goal, or synthesized from expenses."""
        goal = find_emergency_goal(goals)
        if goal is not None:
            target = to_number(goal.target_amount)
            current = to_number(goal.current_amount)
            source = "goal"
        else:
            target = max(effective_expenses * self._emergency_fund_months, 0.0)
            current = bank_balance
            source = "synthesized"

        if target > 0:
            completion = current / target * 100
        else:
            completion = 100.0 if current > 0 else 0.0

        months_to_target = None
        if monthly_savings > 0 and target > current:
            months_to_target = round((target - current) / monthly_savings, 1)

        return EmergencyFundSummary(
            target_amount=round_currency(target),
            current_amount=round_currency(current),
            completion_percentage=round_currency(completion),
            months_to_target=months_to_target,
            source=source,
        )

    @staticmethod
    def _category_breakdown(
        category: Category,
        transactions: Sequence[Transaction],
        recent_expenses: Sequence[Transaction],
    ) -> CategoryBudgetBreakdown:
        allocated = to_number(category.budget_allocated)
        spent = to_number(category.spent_amount)

        expense_dates = [
            txn.date
            for txn in transactions
            if txn.category_id == category.id and txn.type == TransactionType.EXPENSE
        ]
        window_spent = sum(
            to_number(txn.amount)
            for txn in recent_expenses
            if txn.category_id == category.id
        )

        return CategoryBudgetBreakdown(
            id=category.id,
            name=category.name.value,
            budget_allocated=round_currency(allocated),
            spent_amount=round_currency(spent),
            remaining_budget=round_currency(allocated - spent),
            utilization=round_currency(percentage(spent, allocated)),
            last_transaction_date=max(expense_dates) if expense_dates else None,
            window_spent=round_currency(window_spent),
        )
