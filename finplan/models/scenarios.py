"""
Scenario Models

A scenario is a parameterized "what-if" question. Each scenario kind has its
own parameter shape, so the parameters are modelled as a tagged union on
`type`: pydantic picks the variant from the discriminator and validates only
that variant's fields.

Parameter keys are accepted in snake_case or camelCase (itemCost,
monthsToSave, ...), so payloads from JSON clients validate unchanged.

DESIGN DECISION: Defaults that depend on the user's budget (monthly
contribution, current savings) are left as None here and resolved by the
evaluator against the ScenarioContext.
"""

from enum import Enum
from typing import TYPE_CHECKING, Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from finplan.models.finance import FinancialProfile

if TYPE_CHECKING:
    from finplan.models.results import BudgetSummary


class ScenarioType(str, Enum):
    """Supported scenario kinds."""
    CAN_I_AFFORD = "can_i_afford"
    EXPENSE_PROJECTION = "expense_projection"
    HOUSING_AFFORDABILITY = "housing_affordability"
    DEBT_PAYOFF = "debt_payoff"
    SAVINGS_GOAL = "savings_goal"


class _ScenarioParameters(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class AffordabilityParameters(_ScenarioParameters):
    """Can I afford an item within a savings timeline?"""
    type: Literal[ScenarioType.CAN_I_AFFORD] = ScenarioType.CAN_I_AFFORD
    item_cost: float = Field(..., gt=0, description="Price of the item")
    months_to_save: int = Field(default=6, ge=1, le=60)
    upfront_contribution: float = Field(default=0.0, ge=0)
    monthly_contribution: Optional[float] = Field(
        default=None,
        ge=0,
        description="Defaults to the user's positive disposable income"
    )


class ExpenseProjectionParameters(_ScenarioParameters):
    """How does a monthly expense grow under compounding?"""
    type: Literal[ScenarioType.EXPENSE_PROJECTION] = ScenarioType.EXPENSE_PROJECTION
    current_monthly_expense: float = Field(..., ge=0)
    growth_rate_percent: float = Field(default=2.0, ge=0, le=50)
    period_months: int = Field(default=12, ge=1, le=120)


class HousingAffordabilityParameters(_ScenarioParameters):
    """Does a housing cost respect the share-of-income guideline?"""
    type: Literal[ScenarioType.HOUSING_AFFORDABILITY] = ScenarioType.HOUSING_AFFORDABILITY
    housing_cost: float = Field(..., ge=0)
    housing_budget_percentage: float = Field(default=30.0, ge=5, le=60)


class DebtPayoffParameters(_ScenarioParameters):
    """How long does a fixed monthly payment take to clear a debt?"""
    type: Literal[ScenarioType.DEBT_PAYOFF] = ScenarioType.DEBT_PAYOFF
    current_debt: float = Field(..., ge=0)
    interest_rate_percent: float = Field(..., ge=0, le=60, description="Annual rate")
    monthly_payment: float = Field(..., ge=0)


class SavingsGoalParameters(_ScenarioParameters):
    """How long until a savings target is reached?"""
    type: Literal[ScenarioType.SAVINGS_GOAL] = ScenarioType.SAVINGS_GOAL
    target_amount: float = Field(..., ge=0)
    current_amount: Optional[float] = Field(
        default=None,
        ge=0,
        description="Defaults to the user's bank balance"
    )
    monthly_contribution: Optional[float] = Field(
        default=None,
        ge=0,
        description="Defaults to the user's positive disposable income"
    )


ScenarioParameters = Annotated[
    Union[
        AffordabilityParameters,
        ExpenseProjectionParameters,
        HousingAffordabilityParameters,
        DebtPayoffParameters,
        SavingsGoalParameters,
    ],
    Field(discriminator="type"),
]


class ScenarioContext(BaseModel):
    """
    Budget context a scenario is evaluated against.

    Normally derived from a prior budget summary via from_summary().
    """

    monthly_income: float = Field(default=0.0, ge=0)
    monthly_expenses: float = Field(default=0.0, ge=0)
    disposable_income: float = 0.0  # negative when overspending
    bank_balance: float = Field(default=0.0, ge=0)
    profile: Optional[FinancialProfile] = None

    @classmethod
    def from_summary(
        cls,
        summary: "BudgetSummary",
        profile: Optional[FinancialProfile] = None,
    ) -> "ScenarioContext":
        """
        Build a context from a budget summary.

        Monthly expenses are the computed (fixed + variable) figure, and the
        bank balance comes from the profile, not from any goal.
        """
        bank_balance = float(profile.bank_account_balance) if profile else 0.0
        return cls(
            monthly_income=summary.income.monthly,
            monthly_expenses=summary.expenses.fixed_monthly + summary.expenses.variable_monthly,
            disposable_income=summary.cash_flow.disposable_income,
            bank_balance=bank_balance,
            profile=profile,
        )
