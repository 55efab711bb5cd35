"""
Calculation Cache Package

Advisory result cache for the orchestration layer.
"""

from finplan.services.cache.interface import CacheError, CalculationCacheInterface
from finplan.services.cache.keys import (
    build_budget_cache_key,
    build_projection_cache_key,
    build_scenario_cache_key,
    fingerprint,
    user_prefix,
)
from finplan.services.cache.memory import InMemoryCalculationCache

__all__ = [
    "CacheError",
    "CalculationCacheInterface",
    "InMemoryCalculationCache",
    "build_budget_cache_key",
    "build_projection_cache_key",
    "build_scenario_cache_key",
    "fingerprint",
    "user_prefix",
]
