"""
Calculation Engine Package

Four stateless calculators: budget summary, scenarios, projections and
goal progress. All are pure functions of their inputs.
"""

from finplan.calculations.budget import BudgetCalculator, clamp_timeframe
from finplan.calculations.errors import (
    CalculationError,
    InsufficientDataError,
    InvalidParameterError,
    UnsupportedScenarioError,
)
from finplan.calculations.goals import GoalProgressCalculator, build_goal_progress
from finplan.calculations.projections import ProjectionEngine
from finplan.calculations.scenarios import ScenarioEngine, parse_scenario_parameters

__all__ = [
    "BudgetCalculator",
    "CalculationError",
    "GoalProgressCalculator",
    "InsufficientDataError",
    "InvalidParameterError",
    "ProjectionEngine",
    "ScenarioEngine",
    "UnsupportedScenarioError",
    "build_goal_progress",
    "clamp_timeframe",
    "parse_scenario_parameters",
]
