"""
Data Models Package

This package contains all Pydantic models used by the planning engine:
input snapshots, scenario parameters, result views and calculation events.
"""

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
from finplan.models.results import (
    BudgetSummary,
    CashFlowSummary,
    CategoryBudgetBreakdown,
    EducationProgress,
    EmergencyFundSummary,
    ExpenseSummary,
    GoalComputed,
    GoalProgress,
    IncomeSummary,
    ProjectionAssumptions,
    ProjectionPoint,
    ProjectionResult,
    ScenarioResult,
    SummaryMetadata,
)
from finplan.models.requests import ProjectionRequest
from finplan.models.audit import (
    CalculationEvent,
    CalculationEventBuilder,
    CalculationEventType,
    EventSeverity,
)

__all__ = [
    # Input snapshots
    "Category",
    "CategoryName",
    "FinancialGoal",
    "FinancialProfile",
    "GoalMetricUnit",
    "GoalStatus",
    "GoalType",
    "Transaction",
    "TransactionType",
    # Scenarios
    "AffordabilityParameters",
    "DebtPayoffParameters",
    "ExpenseProjectionParameters",
    "HousingAffordabilityParameters",
    "SavingsGoalParameters",
    "ScenarioContext",
    "ScenarioParameters",
    "ScenarioType",
    # Requests
    "ProjectionRequest",
    # Results
    "BudgetSummary",
    "CashFlowSummary",
    "CategoryBudgetBreakdown",
    "EducationProgress",
    "EmergencyFundSummary",
    "ExpenseSummary",
    "GoalComputed",
    "GoalProgress",
    "IncomeSummary",
    "ProjectionAssumptions",
    "ProjectionPoint",
    "ProjectionResult",
    "ScenarioResult",
    "SummaryMetadata",
    # Events
    "CalculationEvent",
    "CalculationEventBuilder",
    "CalculationEventType",
    "EventSeverity",
]
