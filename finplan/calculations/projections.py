"""
Projection Generator

Extrapolates historical monthly income and expense averages forward under
independent monthly growth rates.

Averages are taken over the calendar months present in the history: a
month counts toward both averages as soon as it holds any transaction,
so a month with income but no expenses pulls the expense average down.
Month 1 of the projection is the historical average itself; compounding
starts with month 2.
"""

from collections import defaultdict
from typing import Optional, Sequence

from pydantic import ValidationError

from finplan.calculations.errors import InsufficientDataError, InvalidParameterError
from finplan.calculations.numeric import round_currency, to_number
from finplan.models.finance import Transaction, TransactionType
from finplan.models.requests import ProjectionRequest
from finplan.models.results import (
    ProjectionAssumptions,
    ProjectionPoint,
    ProjectionResult,
)

DEFAULT_INCOME_GROWTH_RATE_PERCENT = 1.5
DEFAULT_EXPENSE_GROWTH_RATE_PERCENT = 2.0


def monthly_totals(
    transactions: Sequence[Transaction],
) -> dict[tuple[int, int], dict[TransactionType, float]]:
    """Sum transactions per (year, month) and type."""
    totals: dict[tuple[int, int], dict[TransactionType, float]] = defaultdict(
        lambda: {TransactionType.INCOME: 0.0, TransactionType.EXPENSE: 0.0}
    )
    for txn in transactions:
        totals[(txn.date.year, txn.date.month)][txn.type] += to_number(txn.amount)
    return dict(totals)


class ProjectionEngine:
    """Generates month-by-month income/expense projections."""

    def generate(
        self,
        transactions: Sequence[Transaction],
        period_months: int,
        income_growth_rate_percent: Optional[float] = None,
        expense_growth_rate_percent: Optional[float] = None,
    ) -> ProjectionResult:
        """
        Project cash flow forward.

        Raises:
            InsufficientDataError: no transactions to learn averages from
            InvalidParameterError: horizon or growth rates out of range
        """
        if not transactions:
            raise InsufficientDataError(
                "Not enough transaction data to generate projections"
            )

        request = self._build_request(
            period_months, income_growth_rate_percent, expense_growth_rate_percent
        )

        totals = monthly_totals(transactions)
        month_count = len(totals)
        average_income = (
            sum(month[TransactionType.INCOME] for month in totals.values()) / month_count
        )
        average_expenses = (
            sum(month[TransactionType.EXPENSE] for month in totals.values()) / month_count
        )

        income_growth = 1 + request.income_growth_rate_percent / 100
        expense_growth = 1 + request.expense_growth_rate_percent / 100

        projections = []
        income = average_income
        expenses = average_expenses
        for month in range(1, request.period_months + 1):
            if month > 1:
                income *= income_growth
                expenses *= expense_growth
            projections.append(ProjectionPoint(
                month_index=month,
                projected_income=round_currency(income),
                projected_expenses=round_currency(expenses),
                projected_net_cash_flow=round_currency(income - expenses),
            ))

        return ProjectionResult(
            period_months=request.period_months,
            average_historical_income=round_currency(average_income),
            average_historical_expenses=round_currency(average_expenses),
            months_sampled=month_count,
            monthly_projections=projections,
            assumptions=ProjectionAssumptions(
                income_growth_rate_percent=request.income_growth_rate_percent,
                expense_growth_rate_percent=request.expense_growth_rate_percent,
            ),
        )

    @staticmethod
    def _build_request(
        period_months: int,
        income_growth_rate_percent: Optional[float],
        expense_growth_rate_percent: Optional[float],
    ) -> ProjectionRequest:
        if income_growth_rate_percent is None:
            income_growth_rate_percent = DEFAULT_INCOME_GROWTH_RATE_PERCENT
        if expense_growth_rate_percent is None:
            expense_growth_rate_percent = DEFAULT_EXPENSE_GROWTH_RATE_PERCENT
        try:
            return ProjectionRequest(
                period_months=period_months,
                income_growth_rate_percent=income_growth_rate_percent,
                expense_growth_rate_percent=expense_growth_rate_percent,
            )
        except ValidationError as e:
            raise InvalidParameterError(f"Invalid projection parameters: {e}") from e
