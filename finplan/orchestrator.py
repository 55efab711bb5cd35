"""
Calculation Orchestrator

This module ties the pure calculators to the outside world and defines
the request flow shared by every calculation:

    read snapshot -> cache lookup -> compute -> cache store -> log

DESIGN DECISION: The orchestrator enforces the boundaries:
- Calculators never perform I/O; all reads happen here, concurrently
- The cache is advisory; a cache failure is logged, never raised
- Only transient storage failures are retried
- Every calculation (and every rejection) is logged as an event

Callers that mutate a user's transactions, categories, profile or goals
must call invalidate_user() afterwards.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar, Union
from uuid import UUID

from pydantic import BaseModel
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finplan.audit import CalculationAuditLogger, create_correlation_id
from finplan.calculations import (
    BudgetCalculator,
    CalculationError,
    GoalProgressCalculator,
    ProjectionEngine,
    ScenarioEngine,
    clamp_timeframe,
)
from finplan.calculations.numeric import clamp_int
from finplan.calculations.scenarios import parse_scenario_type
from finplan.config import CacheSettings, EngineSettings, StorageSettings, get_settings
from finplan.models.finance import FinancialProfile
from finplan.models.results import (
    BudgetSummary,
    GoalProgress,
    ProjectionResult,
    ScenarioResult,
)
from finplan.models.scenarios import ScenarioContext, ScenarioType
from finplan.services.cache import (
    CacheError,
    CalculationCacheInterface,
    InMemoryCalculationCache,
    build_budget_cache_key,
    build_projection_cache_key,
    build_scenario_cache_key,
    user_prefix,
)
from finplan.services.storage import (
    FinanceDataReader,
    InMemoryFinanceStore,
    NotFoundError,
    StorageConnectionError,
    StorageError,
)

T = TypeVar("T")
ResultT = TypeVar("ResultT", bound=BaseModel)


class CalculationService:
    """
    Async facade over the four calculators.

    Usage:
        service = CalculationService(reader=store, cache=cache)
        summary = await service.get_budget_summary("user-1", timeframe_days=60)
        result = await service.run_scenario("user-1", "can_i_afford", {"itemCost": 3000})
    """

    def __init__(
        self,
        reader: FinanceDataReader,
        cache: Optional[CalculationCacheInterface] = None,
        audit_logger: Optional[CalculationAuditLogger] = None,
        engine_settings: Optional[EngineSettings] = None,
        cache_settings: Optional[CacheSettings] = None,
        storage_settings: Optional[StorageSettings] = None,
    ):
        settings = get_settings()
        self._engine_settings = engine_settings or settings.engine
        self._cache_settings = cache_settings or settings.cache
        self._storage_settings = storage_settings or settings.storage

        self._reader = reader
        self._cache = cache if self._cache_settings.enabled else None
        self._audit = audit_logger or CalculationAuditLogger()

        engine = self._engine_settings
        self._budget_calculator = BudgetCalculator(
            emergency_fund_months=engine.emergency_fund_months,
            top_categories_count=engine.top_categories_count,
            default_timeframe_days=engine.default_timeframe_days,
            min_timeframe_days=engine.min_timeframe_days,
            max_timeframe_days=engine.max_timeframe_days,
        )
        self._scenario_engine = ScenarioEngine(
            debt_payoff_max_months=engine.debt_payoff_max_months,
        )
        self._projection_engine = ProjectionEngine()
        self._goal_calculator = GoalProgressCalculator()

    # ==================== Budget summary ====================

    async def get_budget_summary(
        self,
        user_id: str,
        timeframe_days: Any = None,
        as_of: Optional[datetime] = None,
        correlation_id: Optional[UUID] = None,
        profile: Optional[FinancialProfile] = None,
    ) -> BudgetSummary:
        """
        Summarize the user's budget over a trailing window.

        Results are cached per (user, timeframe). An explicit `as_of`
        asks for a point-in-time view and bypasses the cache. A `profile`
        the caller already holds is used instead of reading it again.

        Raises:
            NotFoundError: the user has no financial profile
        """
        correlation_id = correlation_id or create_correlation_id()
        engine = self._engine_settings
        days = clamp_timeframe(
            timeframe_days,
            default=engine.default_timeframe_days,
            minimum=engine.min_timeframe_days,
            maximum=engine.max_timeframe_days,
        )
        use_cache = as_of is None
        key = build_budget_cache_key(user_id, days, self._cache_settings.key_prefix)

        if use_cache:
            cached = await self._cache_get(key, BudgetSummary, user_id, "budget", correlation_id)
            if cached is not None:
                return cached

        now = as_of or datetime.now(timezone.utc)
        window_start = now.date() - timedelta(days=days)
        profile, categories, transactions, goals = await asyncio.gather(
            self._resolve_profile(user_id, correlation_id, profile),
            self._read("list_categories", self._reader.list_categories, user_id,
                       user_id=user_id, correlation_id=correlation_id),
            self._read("list_transactions", self._reader.list_transactions, user_id, window_start,
                       user_id=user_id, correlation_id=correlation_id),
            self._read("list_goals", self._reader.list_goals, user_id,
                       user_id=user_id, correlation_id=correlation_id),
        )

        summary = self._budget_calculator.calculate(
            profile=profile,
            categories=categories,
            transactions=transactions,
            goals=goals,
            timeframe_days=days,
            as_of=now,
        )
        self._audit.log_budget_computed(
            user_id=user_id,
            timeframe_days=days,
            transactions_considered=summary.metadata.transactions_considered,
            correlation_id=correlation_id,
        )

        if use_cache:
            await self._cache_set(key, summary, user_id, correlation_id)
        return summary

    # ==================== Scenarios ====================

    async def run_scenario(
        self,
        user_id: str,
        scenario_type: Union[str, ScenarioType],
        data: Optional[Mapping[str, Any]] = None,
        as_of: Optional[datetime] = None,
    ) -> ScenarioResult:
        """
        Evaluate a what-if scenario against the user's current budget.

        Raises:
            UnsupportedScenarioError: unknown scenario type
            InvalidParameterError: malformed payload
            NotFoundError: the user has no financial profile
        """
        correlation_id = create_correlation_id()
        try:
            resolved = parse_scenario_type(scenario_type)
        except CalculationError as e:
            self._log_rejection(user_id, "scenario", e, correlation_id)
            raise

        use_cache = as_of is None
        key = build_scenario_cache_key(
            user_id, resolved.value, data, self._cache_settings.key_prefix
        )
        if use_cache:
            cached = await self._cache_get(key, ScenarioResult, user_id, "scenario", correlation_id)
            if cached is not None:
                return cached

        profile = await self._require_profile(user_id, correlation_id)
        summary = await self.get_budget_summary(
            user_id,
            self._engine_settings.default_timeframe_days,
            as_of=as_of,
            correlation_id=correlation_id,
            profile=profile,
        )
        context = ScenarioContext.from_summary(summary, profile)

        try:
            result = self._scenario_engine.evaluate(resolved, data, context)
        except CalculationError as e:
            self._log_rejection(user_id, "scenario", e, correlation_id)
            raise

        self._audit.log_scenario_evaluated(
            user_id=user_id,
            scenario_type=resolved.value,
            correlation_id=correlation_id,
        )
        if use_cache:
            await self._cache_set(key, result, user_id, correlation_id)
        return result

    async def evaluate_affordability(
        self,
        user_id: str,
        data: Optional[Mapping[str, Any]] = None,
    ) -> ScenarioResult:
        """Shortcut for the can_i_afford scenario."""
        return await self.run_scenario(user_id, ScenarioType.CAN_I_AFFORD, data)

    # ==================== Projections ====================

    async def get_projections(
        self,
        user_id: str,
        period_months: Any = None,
        income_growth_rate_percent: Optional[float] = None,
        expense_growth_rate_percent: Optional[float] = None,
        as_of: Optional[datetime] = None,
    ) -> ProjectionResult:
        """
        Project cash flow from the trailing history window.

        The horizon defaults to 6 months and is capped at the configured
        maximum (24 by default). An explicit `as_of` anchors the history
        window and bypasses the cache.

        Raises:
            InsufficientDataError: no transactions in the history window
            InvalidParameterError: growth rates out of range
        """
        correlation_id = create_correlation_id()
        engine = self._engine_settings
        months = clamp_int(
            period_months,
            default=engine.default_projection_months,
            minimum=1,
            maximum=engine.max_projection_months,
        )
        key = build_projection_cache_key(
            user_id,
            months,
            income_growth_rate_percent,
            expense_growth_rate_percent,
            self._cache_settings.key_prefix,
        )
        use_cache = as_of is None
        if use_cache:
            cached = await self._cache_get(
                key, ProjectionResult, user_id, "projection", correlation_id
            )
            if cached is not None:
                return cached

        now = as_of or datetime.now(timezone.utc)
        since = now.date() - timedelta(days=engine.projection_history_days)
        transactions = await self._read(
            "list_transactions", self._reader.list_transactions, user_id, since,
            user_id=user_id, correlation_id=correlation_id,
        )

        if income_growth_rate_percent is None:
            income_growth_rate_percent = engine.default_income_growth_rate_percent
        if expense_growth_rate_percent is None:
            expense_growth_rate_percent = engine.default_expense_growth_rate_percent

        try:
            result = self._projection_engine.generate(
                transactions,
                months,
                income_growth_rate_percent=income_growth_rate_percent,
                expense_growth_rate_percent=expense_growth_rate_percent,
            )
        except CalculationError as e:
            self._log_rejection(user_id, "projection", e, correlation_id)
            raise

        self._audit.log_projection_generated(
            user_id=user_id,
            period_months=result.period_months,
            months_sampled=result.months_sampled,
            correlation_id=correlation_id,
        )
        if use_cache:
            await self._cache_set(key, result, user_id, correlation_id)
        return result

    # ==================== Goals ====================

    async def get_goal_progress(
        self,
        user_id: str,
        as_of: Optional[datetime] = None,
    ) -> list[GoalProgress]:
        """Progress view of every goal the user has."""
        correlation_id = create_correlation_id()
        goals = await self._read(
            "list_goals", self._reader.list_goals, user_id,
            user_id=user_id, correlation_id=correlation_id,
        )
        progress = self._goal_calculator.calculate(goals, as_of)
        self._audit.log_goal_progress_computed(
            user_id=user_id,
            goal_count=len(progress),
            correlation_id=correlation_id,
        )
        return progress

    # ==================== Cache invalidation ====================

    async def invalidate_user(self, user_id: str, reason: str = "data_changed") -> int:
        """
        Drop every cached calculation for a user.

        Returns:
            Number of cache entries removed (0 when the cache is off or failing)
        """
        if self._cache is None:
            return 0
        correlation_id = create_correlation_id()
        try:
            removed = await self._cache.delete_prefix(
                user_prefix(user_id, self._cache_settings.key_prefix)
            )
        except CacheError as e:
            self._audit.log_cache_error("delete_prefix", str(e), user_id, correlation_id)
            return 0
        self._audit.log_cache_invalidated(
            user_id=user_id,
            reason=reason,
            removed=removed,
            correlation_id=correlation_id,
        )
        return removed

    # ==================== Internals ====================

    async def _read(
        self,
        operation: str,
        call: Callable[..., Awaitable[T]],
        *args: Any,
        user_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> T:
        """Run a storage read, retrying only on connection failures."""
        storage = self._storage_settings
        retrying = AsyncRetrying(
            stop=stop_after_attempt(storage.retry_attempts),
            wait=wait_exponential(
                multiplier=storage.retry_backoff_multiplier,
                min=storage.retry_backoff_min_seconds,
                max=storage.retry_backoff_max_seconds,
            ),
            retry=retry_if_exception_type(StorageConnectionError),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await call(*args)
        except NotFoundError:
            raise
        except StorageError as e:
            self._audit.log_storage_error(operation, str(e), user_id, correlation_id)
            raise

    async def _require_profile(
        self,
        user_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> FinancialProfile:
        profile = await self._read(
            "get_profile", self._reader.get_profile, user_id,
            user_id=user_id, correlation_id=correlation_id,
        )
        if profile is None:
            raise NotFoundError(f"No financial profile for user {user_id}")
        return profile

    async def _resolve_profile(
        self,
        user_id: str,
        correlation_id: Optional[UUID],
        profile: Optional[FinancialProfile],
    ) -> FinancialProfile:
        if profile is not None:
            return profile
        return await self._require_profile(user_id, correlation_id)

    async def _cache_get(
        self,
        key: str,
        model: type[ResultT],
        user_id: str,
        calculator: str,
        correlation_id: UUID,
    ) -> Optional[ResultT]:
        if self._cache is None:
            return None
        try:
            value = await self._cache.get(key)
        except CacheError as e:
            self._audit.log_cache_error("get", str(e), user_id, correlation_id)
            return None
        if value is None:
            return None
        self._audit.log_cache_hit(
            user_id=user_id,
            calculator=calculator,
            cache_key=key,
            correlation_id=correlation_id,
        )
        return model.model_validate(value)

    async def _cache_set(
        self,
        key: str,
        result: BaseModel,
        user_id: str,
        correlation_id: UUID,
    ) -> None:
        if self._cache is None:
            return
        try:
            await self._cache.set(key, result.model_dump(), self._cache_settings.ttl_seconds)
        except CacheError as e:
            self._audit.log_cache_error("set", str(e), user_id, correlation_id)

    def _log_rejection(
        self,
        user_id: str,
        calculator: str,
        error: CalculationError,
        correlation_id: UUID,
    ) -> None:
        self._audit.log_calculation_rejected(
            user_id=user_id,
            calculator=calculator,
            error_code=error.code,
            error_message=str(error),
            correlation_id=correlation_id,
        )


def create_service_components(
    reader: Optional[FinanceDataReader] = None,
    use_cache: bool = True,
) -> tuple[CalculationService, FinanceDataReader, Optional[CalculationCacheInterface]]:
    """
    Factory function to create the calculation service.

    Args:
        reader: Storage backend. Defaults to an empty in-memory store.
        use_cache: Whether to attach an in-memory result cache.

    Returns:
        (service, reader, cache)
    """
    reader = reader or InMemoryFinanceStore()
    cache = InMemoryCalculationCache() if use_cache else None
    service = CalculationService(
        reader=reader,
        cache=cache,
        audit_logger=CalculationAuditLogger(),
    )
    return service, reader, cache
