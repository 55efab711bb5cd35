"""
Calculation Errors

Only genuine caller-contract or data problems are raised. Degenerate
numbers (division by zero, unbounded timelines) are never errors; the
calculators resolve them to 0, None or float('inf').
"""


class CalculationError(Exception):
    """Base error for the calculation engine."""
    code = "calculation_error"


class InvalidParameterError(CalculationError):
    """Malformed or out-of-range scenario/projection input."""
    code = "invalid_parameter"


class InsufficientDataError(CalculationError):
    """Not enough history to run the calculation (e.g. no transactions)."""
    code = "insufficient_data"


class UnsupportedScenarioError(CalculationError):
    """Unknown scenario type. Indicates a caller/version mismatch."""
    code = "unsupported_scenario"
