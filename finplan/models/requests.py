"""
Request Models

Caller-supplied knobs for calculators whose inputs are validated rather
than clamped. Out-of-range values are rejected, not silently coerced.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProjectionRequest(BaseModel):
    """Horizon and growth assumptions for a cash-flow projection."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    period_months: int = Field(default=6, ge=1, le=120)
    income_growth_rate_percent: float = Field(
        default=1.5,
        ge=0,
        le=20,
        description="Monthly compounding rate applied from month 2 on"
    )
    expense_growth_rate_percent: float = Field(
        default=2.0,
        ge=0,
        le=30,
        description="Monthly compounding rate applied from month 2 on"
    )
