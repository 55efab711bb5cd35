"""
Calculation Audit Logger

DESIGN DECISION: Every calculation served by the orchestration layer is
logged as a structured event. This provides:
1. Traceability of which calculator ran for which user
2. Visibility into cache hits, invalidations and backend failures
3. Debugging capability when requests are rejected

The logger:
- Emits JSON lines through structlog
- Never raises into the calculation path
- Supports correlation IDs to trace the events of one request
"""

import logging
from typing import Any, Optional
from uuid import UUID, uuid4

import structlog

from finplan.config import get_settings
from finplan.models.audit import (
    CalculationEvent,
    CalculationEventBuilder,
    EventSeverity,
)


structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: Optional[str] = None) -> str:
    """
    Set the level of the stdlib logger that structlog writes through.

    `filter_by_level` drops anything below it. Without an explicit level
    the app settings decide: DEBUG when debug_mode is on, else log_level.
    """
    if level is None:
        app = get_settings().app
        level = "DEBUG" if app.debug_mode else app.log_level
    logging.getLogger("finplan").setLevel(level)
    return level


configure_logging()


class CalculationAuditLogger:
    """
    Central event logger for the planning engine.

    Keeps the last `history_size` events in memory so callers (and tests)
    can inspect what happened during a request.
    """

    def __init__(self, logger: Optional[Any] = None, history_size: int = 100):
        if logger is None:
            logger = structlog.get_logger("finplan.calculations").bind(
                environment=get_settings().app.app_environment
            )
        self._logger = logger
        self._history: list[CalculationEvent] = []
        self._history_size = history_size

    @property
    def history(self) -> list[CalculationEvent]:
        return list(self._history)

    def log(self, event: CalculationEvent) -> None:
        """Log an event locally and remember it."""
        self._history.append(event)
        if len(self._history) > self._history_size:
            del self._history[0]

        log_dict = event.to_log_dict()
        try:
            if event.severity == EventSeverity.ERROR:
                self._logger.error("calculation_event", **log_dict)
            elif event.severity == EventSeverity.WARNING:
                self._logger.warning("calculation_event", **log_dict)
            elif event.severity == EventSeverity.DEBUG:
                self._logger.debug("calculation_event", **log_dict)
            else:
                self._logger.info("calculation_event", **log_dict)
        except (TypeError, ValueError) as e:
            # A value the renderer cannot serialize must not break the request
            self._logger.error(
                "calculation_event_unloggable",
                error=str(e),
                event_id=str(event.event_id),
            )

    def log_budget_computed(
        self,
        user_id: str,
        timeframe_days: int,
        transactions_considered: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a freshly computed budget summary."""
        self.log(CalculationEventBuilder.budget_computed(
            user_id=user_id,
            timeframe_days=timeframe_days,
            transactions_considered=transactions_considered,
            correlation_id=correlation_id,
        ))

    def log_scenario_evaluated(
        self,
        user_id: str,
        scenario_type: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a scenario evaluation."""
        self.log(CalculationEventBuilder.scenario_evaluated(
            user_id=user_id,
            scenario_type=scenario_type,
            correlation_id=correlation_id,
        ))

    def log_projection_generated(
        self,
        user_id: str,
        period_months: int,
        months_sampled: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a projection."""
        self.log(CalculationEventBuilder.projection_generated(
            user_id=user_id,
            period_months=period_months,
            months_sampled=months_sampled,
            correlation_id=correlation_id,
        ))

    def log_goal_progress_computed(
        self,
        user_id: str,
        goal_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(CalculationEventBuilder.goal_progress_computed(
            user_id=user_id,
            goal_count=goal_count,
            correlation_id=correlation_id,
        ))

    def log_calculation_rejected(
        self,
        user_id: str,
        calculator: str,
        error_code: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a calculation that failed on caller input or missing data."""
        self.log(CalculationEventBuilder.calculation_rejected(
            user_id=user_id,
            calculator=calculator,
            error_code=error_code,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_cache_hit(
        self,
        user_id: str,
        calculator: str,
        cache_key: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(CalculationEventBuilder.cache_hit(
            user_id=user_id,
            calculator=calculator,
            cache_key=cache_key,
            correlation_id=correlation_id,
        ))

    def log_cache_invalidated(
        self,
        user_id: str,
        reason: str,
        removed: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(CalculationEventBuilder.cache_invalidated(
            user_id=user_id,
            reason=reason,
            removed=removed,
            correlation_id=correlation_id,
        ))

    def log_cache_error(
        self,
        operation: str,
        error_message: str,
        user_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a cache backend failure (the call carries on uncached)."""
        self.log(CalculationEventBuilder.cache_error(
            operation=operation,
            error_message=error_message,
            user_id=user_id,
            correlation_id=correlation_id,
        ))

    def log_storage_error(
        self,
        operation: str,
        error_message: str,
        user_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(CalculationEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            user_id=user_id,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a request and pass it through every step.
    """
    return uuid4()
