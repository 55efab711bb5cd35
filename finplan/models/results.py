"""
Result Models

Output views produced by the calculators. Every currency or percentage is
already rounded to 2 decimals and every month/hour count to 1 decimal when
it reaches these models; they perform no arithmetic of their own.

Infinite figures (runway with zero expenses) are kept as float('inf') so
consumers can render them explicitly; unbounded timelines elsewhere are None.
"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from finplan.models.finance import GoalMetricUnit, GoalStatus, GoalType
from finplan.models.scenarios import ScenarioType


# =============================================================================
# BUDGET SUMMARY
# =============================================================================

class CategoryBudgetBreakdown(BaseModel):
    """Allocation vs. spend for one category."""

    id: str
    name: str
    budget_allocated: float
    spent_amount: float
    remaining_budget: float  # negative when over budget
    utilization: float = Field(ge=0, description="Spent as % of allocation")
    last_transaction_date: Optional[date] = None
    window_spent: float = Field(
        default=0.0,
        ge=0,
        description="EXPENSE transactions for this category inside the timeframe"
    )


class IncomeSummary(BaseModel):
    monthly: float
    annual: float


class ExpenseSummary(BaseModel):
    reported_monthly: float
    fixed_monthly: float
    variable_monthly: float
    effective_monthly: float
    average_transaction: float
    timeframe: str
    by_category: list[CategoryBudgetBreakdown] = Field(default_factory=list)
    top_categories: list[CategoryBudgetBreakdown] = Field(default_factory=list)


class CashFlowSummary(BaseModel):
    disposable_income: float
    savings_rate: float
    projected_annual_savings: float
    runway_months: float  # inf when there are no expenses


class EmergencyFundSummary(BaseModel):
    target_amount: float
    current_amount: float
    completion_percentage: float = Field(ge=0)
    months_to_target: Optional[float] = None
    source: str = Field(
        default="synthesized",
        pattern="^(goal|synthesized)$",
        description="Whether the figures come from an EMERGENCY_FUND goal"
    )


class SummaryMetadata(BaseModel):
    timeframe_days: int
    transactions_considered: int
    generated_at: datetime


class BudgetSummary(BaseModel):
    """Point-in-time snapshot of income, expenses, cash flow and emergency fund."""

    income: IncomeSummary
    expenses: ExpenseSummary
    cash_flow: CashFlowSummary
    emergency_fund: EmergencyFundSummary
    metadata: SummaryMetadata


# =============================================================================
# SCENARIOS
# =============================================================================

class ScenarioResult(BaseModel):
    """Outcome of a what-if evaluation."""

    type: ScenarioType
    summary: str
    details: dict[str, Any] = Field(default_factory=dict)
    recommendations: list[str] = Field(default_factory=list)


# =============================================================================
# PROJECTIONS
# =============================================================================

class ProjectionPoint(BaseModel):
    month_index: int = Field(ge=1)
    projected_income: float
    projected_expenses: float
    projected_net_cash_flow: float


class ProjectionAssumptions(BaseModel):
    income_growth_rate_percent: float
    expense_growth_rate_percent: float


class ProjectionResult(BaseModel):
    """Forward extrapolation of historical monthly averages."""

    period_months: int
    average_historical_income: float
    average_historical_expenses: float
    months_sampled: int = Field(ge=0)
    monthly_projections: list[ProjectionPoint] = Field(default_factory=list)
    assumptions: ProjectionAssumptions


# =============================================================================
# GOAL PROGRESS
# =============================================================================

class EducationProgress(BaseModel):
    """Time/skill-based view of an education or hours goal."""

    hours_remaining: float
    weekly_hours_needed: Optional[float] = None
    weekly_target_hours: Optional[float] = None
    next_milestone: Optional[str] = None
    focus_areas: list[str] = Field(default_factory=list)
    upcoming_deadline: Optional[str] = None


class GoalComputed(BaseModel):
    remaining_amount: float
    time_remaining_days: Optional[int] = None
    education: Optional[EducationProgress] = None


class GoalProgress(BaseModel):
    """Normalized progress view of a stored goal."""

    id: str
    name: str
    goal_type: GoalType
    target_amount: float
    current_amount: float
    completion_percentage: float = Field(ge=0)
    status: GoalStatus
    deadline: Optional[date] = None
    metric_unit: GoalMetricUnit
    metadata: Optional[dict[str, Any]] = None
    computed: GoalComputed
