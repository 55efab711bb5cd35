"""
Input Snapshot Models for the Financial Planning Engine

These models describe the read-only records the engine consumes:
the user's declared financial profile, budget categories, transactions
and financial goals. They are designed to:
1. Enforce type safety at the engine boundary
2. Tolerate open-ended maps (fixed expenses, goal metadata)
3. Be serializable for caching and logging

DESIGN DECISION: The engine never mutates these snapshots.
Every calculator receives them by value and returns a fresh result.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class CategoryName(str, Enum):
    """
    Supported budget categories.

    DESIGN DECISION: Category names come from a fixed set so that
    breakdowns and comparisons stay consistent across users.
    """
    FINANCE = "Finance"
    EDUCATION = "Education"
    FAMILY = "Family"
    FRIENDS = "Friends"
    VACATION = "Weekend Activities/Vacation"


class GoalType(str, Enum):
    """
    Financial goal kinds.

    EMERGENCY_FUND drives the emergency-fund section of the budget summary.
    EDUCATION unlocks the study-plan view of goal progress.
    """
    EMERGENCY_FUND = "Emergency Fund"
    HOUSE_DOWN_PAYMENT = "House Down Payment"
    DEBT_PAYOFF = "Debt Payoff"
    SAVINGS = "General Savings"
    INVESTMENT = "Investment"
    EDUCATION = "Education"
    VACATION = "Vacation"
    OTHER = "Other"


class GoalStatus(str, Enum):
    """Lifecycle status of a goal."""
    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"


class GoalMetricUnit(str, Enum):
    """Unit in which a goal's target and current amounts are expressed."""
    CURRENCY = "currency"
    HOURS = "hours"
    POINTS = "points"
    TASKS = "tasks"
    PERCENT = "percent"
    NONE = "none"


# =============================================================================
# PROFILE
# =============================================================================

class FinancialProfile(BaseModel):
    """
    The user's self-declared financial profile.

    fixed_expenses is an open-ended label -> amount map (rent, utilities,
    carPayment, ...). Unknown labels are kept; values that are not numbers
    simply count as zero when summed.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    bank_account_balance: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Current bank balance"
    )
    monthly_income: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Self-reported monthly take-home income"
    )
    monthly_expenses: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Self-reported total monthly expenses"
    )
    fixed_expenses: dict[str, Any] = Field(
        default_factory=dict,
        description="Recurring fixed expenses by label"
    )

    # Display-only
    job_title: Optional[str] = None
    employment_status: Optional[str] = None

    @field_validator('fixed_expenses', mode='before')
    @classmethod
    def default_missing_fixed_expenses(cls, v: Any) -> Any:
        """A null map is the same as an empty one."""
        return {} if v is None else v


# =============================================================================
# CATEGORIES & TRANSACTIONS
# =============================================================================

class Category(BaseModel):
    """
    A budget category with its allocation and recorded spend.

    spent_amount is expected to mirror the sum of EXPENSE transactions for
    the category, but the summarizer also recomputes that figure from the
    transactions it is given.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Category identifier"
    )
    name: CategoryName
    budget_allocated: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Monthly budget allocated to the category"
    )
    spent_amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Amount spent so far"
    )
    description: Optional[str] = Field(
        default=None,
        max_length=1000
    )


class Transaction(BaseModel):
    """
    A single income or expense entry.

    metadata is passed through untouched; the engine never reads it.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Transaction identifier"
    )
    category_id: Optional[str] = Field(
        default=None,
        description="Owning category, None for uncategorized"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Transaction amount (always positive, direction is in type)"
    )
    type: TransactionType
    date: date
    description: Optional[str] = Field(
        default=None,
        max_length=500
    )
    metadata: Optional[dict[str, Any]] = None


# =============================================================================
# GOALS
# =============================================================================

class FinancialGoal(BaseModel):
    """
    A savings or behavioral goal.

    target_amount and current_amount are expressed in metric_unit, which is
    currency unless stated otherwise. metadata is a free-form document; for
    education goals it may carry a studyPlan, examDate, nextAction and
    milestones, all of which are optional.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Goal identifier"
    )
    name: str = Field(
        default="",
        max_length=255
    )
    goal_type: GoalType
    target_amount: Decimal = Field(
        ...,
        ge=0,
        description="Target in metric_unit"
    )
    current_amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Progress so far in metric_unit"
    )
    deadline: Optional[date] = None
    status: GoalStatus = GoalStatus.ACTIVE
    metric_unit: GoalMetricUnit = GoalMetricUnit.CURRENCY
    description: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None

    @field_validator('metric_unit', mode='before')
    @classmethod
    def default_metric_unit(cls, v: Any) -> Any:
        """Goals stored before units existed are currency goals."""
        return GoalMetricUnit.CURRENCY if v is None else v
