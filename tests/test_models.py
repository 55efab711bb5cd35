"""
Tests for the planning engine models

Test strategy:
1. Unit tests for individual components (models, calculators)
2. Integration tests for the service layer (with in-memory backends)
3. No real storage or network in tests
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from finplan.models.finance import (
    Category,
    CategoryName,
    FinancialGoal,
    FinancialProfile,
    GoalMetricUnit,
    GoalStatus,
    GoalType,
    Transaction,
    TransactionType,
)
from finplan.models.audit import (
    CalculationEvent,
    CalculationEventBuilder,
    CalculationEventType,
    EventSeverity,
)
from finplan.models.requests import ProjectionRequest
from finplan.models.scenarios import (
    AffordabilityParameters,
    ScenarioContext,
    ScenarioType,
)


class TestFinanceModels:
    """Tests for the input snapshot models."""

    def test_profile_defaults(self):
        """An empty profile is all zeros."""
        profile = FinancialProfile()
        assert profile.bank_account_balance == Decimal("0")
        assert profile.monthly_income == Decimal("0")
        assert profile.fixed_expenses == {}

    def test_profile_null_fixed_expenses(self):
        """A null fixed expense map becomes an empty one."""
        profile = FinancialProfile(fixed_expenses=None)
        assert profile.fixed_expenses == {}

    def test_profile_keeps_unknown_fixed_expense_labels(self):
        profile = FinancialProfile(fixed_expenses={"rent": 1200, "gym": "n/a"})
        assert profile.fixed_expenses["gym"] == "n/a"

    def test_profile_rejects_negative_income(self):
        with pytest.raises(ValidationError):
            FinancialProfile(monthly_income=Decimal("-1"))

    def test_transaction_rejects_zero_amount(self):
        """Amounts are strictly positive; direction lives in the type."""
        with pytest.raises(ValidationError):
            Transaction(
                id="t1",
                amount=Decimal("0"),
                type=TransactionType.EXPENSE,
                date=date(2025, 1, 1),
            )

    def test_transaction_creation(self):
        txn = Transaction(
            id="t1",
            category_id="c1",
            amount=Decimal("42.50"),
            type="expense",
            date=date(2025, 1, 15),
        )
        assert txn.type == TransactionType.EXPENSE
        assert txn.date == date(2025, 1, 15)

    def test_category_rejects_unknown_name(self):
        with pytest.raises(ValidationError):
            Category(id="c1", name="Groceries")

    def test_goal_metric_unit_defaults_to_currency(self):
        """Goals without a unit, or with a null one, are currency goals."""
        goal = FinancialGoal(id="g1", goal_type=GoalType.VACATION, target_amount=Decimal("500"))
        assert goal.metric_unit == GoalMetricUnit.CURRENCY
        assert goal.status == GoalStatus.ACTIVE

        legacy = FinancialGoal(
            id="g2",
            goal_type=GoalType.VACATION,
            target_amount=Decimal("500"),
            metric_unit=None,
        )
        assert legacy.metric_unit == GoalMetricUnit.CURRENCY

    def test_goal_rejects_negative_target(self):
        with pytest.raises(ValidationError):
            FinancialGoal(id="g1", goal_type=GoalType.OTHER, target_amount=Decimal("-5"))


class TestEnumValues:
    """Enum values are shared with stored data and must not drift."""

    def test_goal_type_values(self):
        assert GoalType.EMERGENCY_FUND.value == "Emergency Fund"
        assert GoalType.EDUCATION.value == "Education"

    def test_category_names(self):
        expected = [
            "Finance", "Education", "Family", "Friends",
            "Weekend Activities/Vacation",
        ]
        for name in expected:
            assert CategoryName(name) is not None

    def test_scenario_type_values(self):
        assert {t.value for t in ScenarioType} == {
            "can_i_afford",
            "expense_projection",
            "housing_affordability",
            "debt_payoff",
            "savings_goal",
        }


class TestScenarioModels:
    """Tests for scenario parameter payloads."""

    def test_camel_case_keys_accepted(self):
        params = AffordabilityParameters.model_validate(
            {"itemCost": 3000, "monthsToSave": 3, "upfrontContribution": 500}
        )
        assert params.item_cost == 3000
        assert params.months_to_save == 3
        assert params.upfront_contribution == 500

    def test_snake_case_keys_accepted(self):
        params = AffordabilityParameters(item_cost=3000)
        assert params.months_to_save == 6
        assert params.monthly_contribution is None

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValidationError):
            AffordabilityParameters.model_validate({"itemCost": 10, "colour": "red"})

    def test_context_allows_negative_disposable_income(self):
        context = ScenarioContext(monthly_income=1000, monthly_expenses=1500, disposable_income=-500)
        assert context.disposable_income == -500


class TestProjectionRequest:

    def test_defaults(self):
        request = ProjectionRequest()
        assert request.period_months == 6
        assert request.income_growth_rate_percent == 1.5
        assert request.expense_growth_rate_percent == 2.0

    def test_bounds(self):
        with pytest.raises(ValidationError):
            ProjectionRequest(period_months=121)
        with pytest.raises(ValidationError):
            ProjectionRequest(income_growth_rate_percent=20.5)
        with pytest.raises(ValidationError):
            ProjectionRequest(expense_growth_rate_percent=-1)


class TestCalculationEvents:
    """Tests for calculation event models."""

    def test_event_creation(self):
        event = CalculationEvent(
            event_type=CalculationEventType.SCENARIO_EVALUATED,
            description="Scenario evaluated: debt_payoff",
        )
        assert event.severity == EventSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_event_to_log_dict(self):
        correlation_id = uuid4()
        event = CalculationEventBuilder.budget_computed(
            user_id="user-1",
            timeframe_days=30,
            transactions_considered=12,
            correlation_id=correlation_id,
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "budget_summary_computed"
        assert log_dict["calculator"] == "budget"
        assert log_dict["correlation_id"] == str(correlation_id)
        assert log_dict["details"]["transactions_considered"] == 12

    def test_builder_rejection_is_warning(self):
        event = CalculationEventBuilder.calculation_rejected(
            user_id="user-1",
            calculator="projection",
            error_code="insufficient_data",
            error_message="no transactions",
        )
        assert event.severity == EventSeverity.WARNING
        assert event.error_code == "insufficient_data"

    def test_builder_cache_hit_is_debug(self):
        event = CalculationEventBuilder.cache_hit(
            user_id="user-1",
            calculator="scenario",
            cache_key="budget_calc:user-1:debt_payoff:abc",
        )
        assert event.severity == EventSeverity.DEBUG
        assert event.details["cache_key"].startswith("budget_calc:user-1:")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
