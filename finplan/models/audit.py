"""
Calculation Event Models

Every calculation served by the orchestration layer is described by an
event. This provides:
1. Traceability of which calculator ran for which user, and why
2. Visibility into cache behaviour (hits, invalidations, backend errors)
3. Debugging information when a calculation is rejected

DESIGN DECISION: Events are emitted by the orchestration layer only.
The calculators stay pure and never log.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CalculationEventType(str, Enum):
    """Types of events we record."""
    # Calculators
    BUDGET_SUMMARY_COMPUTED = "budget_summary_computed"
    SCENARIO_EVALUATED = "scenario_evaluated"
    PROJECTION_GENERATED = "projection_generated"
    GOAL_PROGRESS_COMPUTED = "goal_progress_computed"
    CALCULATION_REJECTED = "calculation_rejected"

    # Cache
    CACHE_HIT = "cache_hit"
    CACHE_INVALIDATED = "cache_invalidated"
    CACHE_ERROR = "cache_error"

    # Storage
    STORAGE_ERROR = "storage_error"


class EventSeverity(str, Enum):
    """Severity level for events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class CalculationEvent(BaseModel):
    """A single calculation event."""

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Classification
    event_type: CalculationEventType
    severity: EventSeverity = EventSeverity.INFO

    # Context - who and which calculator?
    user_id: Optional[str] = None
    calculator: Optional[str] = Field(
        default=None,
        description="budget, scenario, projection or goal_progress"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate the events of one request"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "user_id": self.user_id,
            "calculator": self.calculator,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class CalculationEventBuilder:
    """
    Helper class to build events with common patterns.

    Usage:
        event = CalculationEventBuilder.budget_computed(user_id, 30, 12, correlation_id)
        event = CalculationEventBuilder.cache_hit(user_id, "scenario", key, correlation_id)
    """

    @staticmethod
    def budget_computed(
        user_id: str,
        timeframe_days: int,
        transactions_considered: int,
        correlation_id: Optional[UUID] = None,
    ) -> CalculationEvent:
        return CalculationEvent(
            event_type=CalculationEventType.BUDGET_SUMMARY_COMPUTED,
            user_id=user_id,
            calculator="budget",
            correlation_id=correlation_id,
            description=(
                f"Budget summary computed over {timeframe_days}d "
                f"({transactions_considered} transactions)"
            ),
            details={
                "timeframe_days": timeframe_days,
                "transactions_considered": transactions_considered,
            },
        )

    @staticmethod
    def scenario_evaluated(
        user_id: str,
        scenario_type: str,
        correlation_id: Optional[UUID] = None,
    ) -> CalculationEvent:
        return CalculationEvent(
            event_type=CalculationEventType.SCENARIO_EVALUATED,
            user_id=user_id,
            calculator="scenario",
            correlation_id=correlation_id,
            description=f"Scenario evaluated: {scenario_type}",
            details={"scenario_type": scenario_type},
        )

    @staticmethod
    def projection_generated(
        user_id: str,
        period_months: int,
        months_sampled: int,
        correlation_id: Optional[UUID] = None,
    ) -> CalculationEvent:
        return CalculationEvent(
            event_type=CalculationEventType.PROJECTION_GENERATED,
            user_id=user_id,
            calculator="projection",
            correlation_id=correlation_id,
            description=(
                f"Projection generated for {period_months} month(s) "
                f"from {months_sampled} month(s) of history"
            ),
            details={
                "period_months": period_months,
                "months_sampled": months_sampled,
            },
        )

    @staticmethod
    def goal_progress_computed(
        user_id: str,
        goal_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> CalculationEvent:
        return CalculationEvent(
            event_type=CalculationEventType.GOAL_PROGRESS_COMPUTED,
            user_id=user_id,
            calculator="goal_progress",
            correlation_id=correlation_id,
            description=f"Goal progress computed for {goal_count} goal(s)",
            details={"goal_count": goal_count},
        )

    @staticmethod
    def calculation_rejected(
        user_id: str,
        calculator: str,
        error_code: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> CalculationEvent:
        return CalculationEvent(
            event_type=CalculationEventType.CALCULATION_REJECTED,
            severity=EventSeverity.WARNING,
            user_id=user_id,
            calculator=calculator,
            correlation_id=correlation_id,
            description=f"{calculator.capitalize()} calculation rejected: {error_code}",
            error_code=error_code,
            error_message=error_message,
        )

    @staticmethod
    def cache_hit(
        user_id: str,
        calculator: str,
        cache_key: str,
        correlation_id: Optional[UUID] = None,
    ) -> CalculationEvent:
        return CalculationEvent(
            event_type=CalculationEventType.CACHE_HIT,
            severity=EventSeverity.DEBUG,
            user_id=user_id,
            calculator=calculator,
            correlation_id=correlation_id,
            description=f"Served {calculator} result from cache",
            details={"cache_key": cache_key},
        )

    @staticmethod
    def cache_invalidated(
        user_id: str,
        reason: str,
        removed: int,
        correlation_id: Optional[UUID] = None,
    ) -> CalculationEvent:
        return CalculationEvent(
            event_type=CalculationEventType.CACHE_INVALIDATED,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"Cached calculations invalidated: {reason}",
            details={"reason": reason, "removed": removed},
        )

    @staticmethod
    def cache_error(
        operation: str,
        error_message: str,
        user_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> CalculationEvent:
        return CalculationEvent(
            event_type=CalculationEventType.CACHE_ERROR,
            severity=EventSeverity.WARNING,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"Cache {operation} failed, recomputing",
            error_message=error_message,
            details={"operation": operation},
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        user_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> CalculationEvent:
        return CalculationEvent(
            event_type=CalculationEventType.STORAGE_ERROR,
            severity=EventSeverity.ERROR,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"Storage read failed: {operation}",
            error_message=error_message,
            details={"operation": operation},
        )
