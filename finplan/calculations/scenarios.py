"""
Scenario Evaluator

Answers "what-if" questions against a budget context. Each scenario kind
has its own parameter model (see finplan.models.scenarios) and its own
pure evaluator; evaluate() validates the payload into the right variant
and dispatches on it.

GUARANTEES:
- No I/O, no shared state
- Unknown scenario types fail before any payload validation
- Unbounded timelines are reported as None, never as a number
"""

import math
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import TypeAdapter, ValidationError

from finplan.calculations.errors import (
    InvalidParameterError,
    UnsupportedScenarioError,
)
from finplan.calculations.numeric import percentage, round_currency, round_months
from finplan.models.results import ScenarioResult
from finplan.models.scenarios import (
    AffordabilityParameters,
    DebtPayoffParameters,
    ExpenseProjectionParameters,
    HousingAffordabilityParameters,
    SavingsGoalParameters,
    ScenarioContext,
    ScenarioParameters,
    ScenarioType,
)

DEBT_PAYOFF_MAX_MONTHS = 600

_PARAMETERS_ADAPTER: TypeAdapter = TypeAdapter(ScenarioParameters)


def parse_scenario_type(value: Union[str, ScenarioType]) -> ScenarioType:
    """Resolve a scenario type, rejecting anything unknown."""
    try:
        return ScenarioType(value)
    except ValueError:
        raise UnsupportedScenarioError(f"Unsupported scenario type: {value}") from None


def parse_scenario_parameters(
    scenario_type: Union[str, ScenarioType],
    data: Optional[Mapping[str, Any]],
) -> ScenarioParameters:
    """
    Validate a free-form payload into the parameter model for its type.

    Raises:
        UnsupportedScenarioError: unknown scenario type
        InvalidParameterError: payload does not satisfy the variant's schema
    """
    resolved = parse_scenario_type(scenario_type)
    payload = dict(data or {})
    payload.pop("type", None)
    payload["type"] = resolved
    try:
        return _PARAMETERS_ADAPTER.validate_python(payload)
    except ValidationError as e:
        raise InvalidParameterError(
            f"Invalid parameters for {resolved.value} scenario: {e}"
        ) from e


def _months_phrase(months: float) -> str:
    return f"{math.ceil(months)} month(s)"


def _default_contribution(context: ScenarioContext) -> float:
    return max(context.disposable_income, 0.0)


# =============================================================================
# EVALUATORS
# =============================================================================

def evaluate_affordability(
    params: AffordabilityParameters,
    context: ScenarioContext,
) -> ScenarioResult:
    """Can the item be paid for within months_to_save?"""
    monthly_contribution = (
        params.monthly_contribution
        if params.monthly_contribution is not None
        else _default_contribution(context)
    )

    remaining_cost = max(
        params.item_cost - (context.bank_balance + params.upfront_contribution), 0.0
    )
    if monthly_contribution > 0:
        months_needed = remaining_cost / monthly_contribution
    else:
        months_needed = math.inf
    affordable = months_needed <= params.months_to_save

    if math.isinf(months_needed):
        summary = (
            "Without a monthly contribution you will not be able to save for "
            "this purchase."
        )
    elif affordable:
        summary = (
            f"You can afford this purchase in approximately "
            f"{_months_phrase(months_needed)} with your current savings plan."
        )
    else:
        summary = (
            f"At your current savings rate it will take about "
            f"{_months_phrase(months_needed)} to afford this purchase."
        )

    recommendations = []
    if not affordable:
        recommendations.append(
            "Increase monthly contributions or extend your savings timeline."
        )
    if context.disposable_income < 0:
        recommendations.append(
            "Focus on reducing expenses first so you are not going further into debt."
        )

    return ScenarioResult(
        type=ScenarioType.CAN_I_AFFORD,
        summary=summary,
        details={
            "item_cost": round_currency(params.item_cost),
            "upfront_contribution": round_currency(params.upfront_contribution),
            "remaining_cost": round_currency(remaining_cost),
            "monthly_contribution": round_currency(monthly_contribution),
            "months_needed": round_months(months_needed),
            "target_months": params.months_to_save,
            "can_afford_within_timeframe": affordable,
        },
        recommendations=recommendations,
    )


def evaluate_expense_projection(
    params: ExpenseProjectionParameters,
    context: ScenarioContext,
) -> ScenarioResult:
    """Compound a monthly expense forward, one point per month."""
    growth = params.growth_rate_percent / 100
    expense = params.current_monthly_expense
    projections = []
    for month in range(1, params.period_months + 1):
        expense *= 1 + growth
        projections.append({
            "month": month,
            "projected_expense": round_currency(expense),
        })

    start = round_currency(params.current_monthly_expense)
    final = projections[-1]["projected_expense"] if projections else start
    summary = (
        f"Your expense could grow from ${start:,.2f} to ~${final:,.2f} over "
        f"{params.period_months} month(s) with a "
        f"{params.growth_rate_percent:g}% growth rate."
    )

    return ScenarioResult(
        type=ScenarioType.EXPENSE_PROJECTION,
        summary=summary,
        details={
            "starting_expense": start,
            "growth_rate_percent": round_currency(params.growth_rate_percent),
            "period_months": params.period_months,
            "projections": projections,
        },
        recommendations=[
            "Compare projected expenses against your income to ensure your "
            "budget stays balanced.",
            "Look for opportunities to cap or reduce variable costs if "
            "projections exceed comfort levels.",
        ],
    )


def evaluate_housing_affordability(
    params: HousingAffordabilityParameters,
    context: ScenarioContext,
) -> ScenarioResult:
    """Compare a housing cost with the share-of-income guideline."""
    pct = params.housing_budget_percentage
    recommended = pct / 100 * context.monthly_income
    ratio = params.housing_cost / (context.monthly_income or 1) * 100
    within_guideline = params.housing_cost <= recommended

    if within_guideline:
        summary = (
            f"This housing cost keeps you within the {pct:g}% guideline of "
            f"your monthly income."
        )
        recommendations = [
            "Housing is within healthy limits; protect that disposable income.",
        ]
    else:
        summary = (
            f"This housing cost is above the {pct:g}% guideline and may "
            f"stress your budget."
        )
        recommendations = [
            "Aim to keep housing at or below 30% of take-home pay for flexibility.",
            "Consider negotiating rent, finding roommates, or increasing income "
            "before committing.",
        ]

    return ScenarioResult(
        type=ScenarioType.HOUSING_AFFORDABILITY,
        summary=summary,
        details={
            "housing_cost": round_currency(params.housing_cost),
            "recommended_housing_budget": round_currency(recommended),
            "housing_budget_percentage": round_currency(pct),
            "affordability_ratio": round_currency(ratio),
            "within_guideline": within_guideline,
        },
        recommendations=recommendations,
    )


def evaluate_debt_payoff(
    params: DebtPayoffParameters,
    context: ScenarioContext,
    max_months: int = DEBT_PAYOFF_MAX_MONTHS,
) -> ScenarioResult:
    """
    Amortize a debt month by month.

    A payment that does not exceed the first month's interest never makes
    progress, so it short-circuits without running the loop. Otherwise the
    loop runs for at most max_months; a balance left after the cap is
    reported as an unbounded payoff.
    """
    monthly_rate = params.interest_rate_percent / 100 / 12
    balance = params.current_debt
    base_details = {
        "current_debt": round_currency(params.current_debt),
        "interest_rate_percent": round_currency(params.interest_rate_percent),
        "monthly_payment": round_currency(params.monthly_payment),
    }

    if params.monthly_payment <= balance * monthly_rate:
        return ScenarioResult(
            type=ScenarioType.DEBT_PAYOFF,
            summary=(
                "Monthly payment is too low to cover interest; consider "
                "increasing it to make progress."
            ),
            details={
                **base_details,
                "months_to_payoff": None,
                "total_interest_paid": 0.0,
                "iterations": 0,
            },
            recommendations=[
                "Increase monthly payments so they exceed the interest charged "
                "each month.",
                "Explore refinancing options to secure a lower interest rate.",
            ],
        )

    months = 0
    total_interest = 0.0
    while balance > 0 and months < max_months:
        interest = balance * monthly_rate
        total_interest += interest
        balance = max(balance + interest - params.monthly_payment, 0.0)
        months += 1

    months_to_payoff = None if balance > 0 else months
    if months_to_payoff is None:
        summary = (
            f"With these inputs the debt payoff extends beyond "
            f"{max_months // 12} years; consider increasing your monthly payment."
        )
    else:
        summary = (
            f"You can pay off this debt in about {months_to_payoff} month(s) by "
            f"contributing ${params.monthly_payment:,.2f} monthly."
        )

    return ScenarioResult(
        type=ScenarioType.DEBT_PAYOFF,
        summary=summary,
        details={
            **base_details,
            "months_to_payoff": months_to_payoff,
            "total_interest_paid": round_currency(total_interest),
            "iterations": months,
        },
        recommendations=[
            "Automate payments so you never miss a due date.",
            "If extra cash appears (bonus, tax refund), put it toward the "
            "principal to shorten the payoff timeline.",
        ],
    )


def evaluate_savings_goal(
    params: SavingsGoalParameters,
    context: ScenarioContext,
) -> ScenarioResult:
    """How many months of contributions until the target is reached?"""
    current = (
        params.current_amount
        if params.current_amount is not None
        else context.bank_balance
    )
    monthly_contribution = (
        params.monthly_contribution
        if params.monthly_contribution is not None
        else _default_contribution(context)
    )

    remaining = max(params.target_amount - current, 0.0)
    if monthly_contribution > 0:
        months_to_goal = remaining / monthly_contribution
    else:
        months_to_goal = math.inf
    completion = percentage(current, params.target_amount)

    if math.isinf(months_to_goal):
        summary = "Add a monthly contribution to start making progress on this savings goal."
        recommendations = ["Set a realistic monthly contribution so you can reach the goal."]
    else:
        summary = (
            f"You are about {_months_phrase(months_to_goal)} away from this "
            f"savings goal if you keep contributing ${monthly_contribution:,.2f} "
            f"each month."
        )
        if months_to_goal > 12:
            recommendations = [
                "Consider boosting monthly contributions or extending the timeline.",
            ]
        else:
            recommendations = [
                "You are on track; keep depositing consistently to hit the goal.",
            ]

    return ScenarioResult(
        type=ScenarioType.SAVINGS_GOAL,
        summary=summary,
        details={
            "target_amount": round_currency(params.target_amount),
            "current_amount": round_currency(current),
            "remaining_amount": round_currency(remaining),
            "monthly_contribution": round_currency(monthly_contribution),
            "months_to_goal": round_months(months_to_goal),
            "completion_percentage": round_currency(completion),
        },
        recommendations=recommendations,
    )


_EVALUATORS: dict[ScenarioType, Callable[..., ScenarioResult]] = {
    ScenarioType.CAN_I_AFFORD: evaluate_affordability,
    ScenarioType.EXPENSE_PROJECTION: evaluate_expense_projection,
    ScenarioType.HOUSING_AFFORDABILITY: evaluate_housing_affordability,
    ScenarioType.DEBT_PAYOFF: evaluate_debt_payoff,
    ScenarioType.SAVINGS_GOAL: evaluate_savings_goal,
}


class ScenarioEngine:
    """
    Dispatches scenario evaluations.

    Usage:
        engine = ScenarioEngine()
        result = engine.evaluate("can_i_afford", {"itemCost": 3000}, context)
    """

    def __init__(self, debt_payoff_max_months: int = DEBT_PAYOFF_MAX_MONTHS):
        self._debt_payoff_max_months = debt_payoff_max_months

    @staticmethod
    def supported_types() -> list[ScenarioType]:
        return list(_EVALUATORS)

    def evaluate(
        self,
        scenario_type: Union[str, ScenarioType],
        data: Optional[Mapping[str, Any]],
        context: ScenarioContext,
    ) -> ScenarioResult:
        """
        Validate the payload for scenario_type and evaluate it.

        Raises:
            UnsupportedScenarioError: unknown scenario type
            InvalidParameterError: malformed or out-of-range payload
        """
        params = parse_scenario_parameters(scenario_type, data)
        return self.evaluate_parameters(params, context)

    def evaluate_parameters(
        self,
        params: ScenarioParameters,
        context: ScenarioContext,
    ) -> ScenarioResult:
        """Evaluate an already-validated parameter model."""
        evaluator = _EVALUATORS.get(params.type)
        if evaluator is None:
            raise UnsupportedScenarioError(f"Unsupported scenario type: {params.type}")
        if params.type == ScenarioType.DEBT_PAYOFF:
            return evaluator(params, context, max_months=self._debt_payoff_max_months)
        return evaluator(params, context)
