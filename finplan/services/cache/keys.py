"""
Cache key builders.

Every key lives under `{prefix}:{user_id}:` so a single prefix delete
drops everything cached for a user.
"""

import hashlib
import json
from typing import Any, Mapping, Optional

DEFAULT_KEY_PREFIX = "budget_calc"


def user_prefix(user_id: str, prefix: str = DEFAULT_KEY_PREFIX) -> str:
    return f"{prefix}:{user_id}:"


def fingerprint(data: Optional[Mapping[str, Any]]) -> str:
    """SHA-1 of the canonical JSON form of a payload (sorted keys)."""
    canonical = json.dumps(
        dict(data or {}),
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )
    return hashlib.sha1(canonical.encode("utf-8")).hexdigest()


def build_budget_cache_key(
    user_id: str,
    timeframe_days: int,
    prefix: str = DEFAULT_KEY_PREFIX,
) -> str:
    return f"{user_prefix(user_id, prefix)}budget:{timeframe_days}"


def build_scenario_cache_key(
    user_id: str,
    scenario_type: str,
    data: Optional[Mapping[str, Any]],
    prefix: str = DEFAULT_KEY_PREFIX,
) -> str:
    return f"{user_prefix(user_id, prefix)}{scenario_type}:{fingerprint(data)}"


def build_projection_cache_key(
    user_id: str,
    period_months: int,
    income_growth_rate_percent: Optional[float] = None,
    expense_growth_rate_percent: Optional[float] = None,
    prefix: str = DEFAULT_KEY_PREFIX,
) -> str:
    """Growth rates left to the engine default are keyed as `d`."""
    income = "d" if income_growth_rate_percent is None else f"{income_growth_rate_percent:g}"
    expense = "d" if expense_growth_rate_percent is None else f"{expense_growth_rate_percent:g}"
    return f"{user_prefix(user_id, prefix)}projection:{period_months}:{income}:{expense}"
