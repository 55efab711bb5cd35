"""Calculation event logging package."""

from finplan.audit.logger import (
    CalculationAuditLogger,
    configure_logging,
    create_correlation_id,
)

__all__ = ["CalculationAuditLogger", "configure_logging", "create_correlation_id"]
