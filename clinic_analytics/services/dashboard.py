import logging
from typing import Any, Callable, Mapping, Optional

from ..errors import ensure_in_range
from ..providers.base import AggregateSource
from .clock import Clock, SystemClock
from .metrics import MetricsAggregator
from .ranking import DEFAULT_LIMIT, DEFAULT_PERIOD_MONTHS, MAX_LIMIT, MAX_PERIOD_MONTHS, RankingEngine
from .result_cache import ResultCache, build_cache_key
from .results import AdvancedMetrics, Comparison, RankedList, Summary, WeeklySeries
from .trends import TrendAnalyzer
from .weekly_series import DEFAULT_WEEKS, MAX_WEEKS, WeeklySeriesBuilder

logger = logging.getLogger(__name__)

OP_SUMMARY = "summary"
OP_METRICS = "metrics"
OP_WEEKLY_PATIENTS = "weekly-patients"
OP_TOP_MEDICATIONS = "top-medications"
OP_REVENUE_COMPARISON = "monthly-revenue-comparison"


class DashboardService:
    """Entry point for the dashboard endpoints.

    Each call reads the clock once, so every window in that call is derived
    from the same instant. Results are cached per principal; a call without a
    principal is computed directly and never cached. The cache is an
    optimisation only: if it misbehaves the result is computed anyway, and a
    computation that fails stores nothing.
    """

    def __init__(
        self,
        source: AggregateSource,
        cache: Optional[ResultCache] = None,
        clock: Optional[Clock] = None,
        max_workers: int = 3,
    ):
        self.source = source
        self.cache = cache
        self.clock = clock or SystemClock()
        self.metrics = MetricsAggregator(source, max_workers=max_workers)
        self.weekly = WeeklySeriesBuilder(source)
        self.ranking = RankingEngine(source)
        self.trends = TrendAnalyzer(source)

    def _cached(
        self,
        operation: str,
        principal_id: Optional[str],
        params: Mapping[str, Any],
        compute: Callable[[], Any],
    ) -> Any:
        if self.cache is None or not principal_id:
            return compute()

        key = build_cache_key(operation, principal_id, params)
        try:
            cached = self.cache.get(key)
        except Exception as e:
            logger.warning(f"Result cache read failed, computing directly: operation={operation} error={e}")
            cached = None

        if cached is not None:
            logger.debug(f"Result cache hit: operation={operation} principal={principal_id}")
            return cached

        logger.debug(f"Result cache miss: operation={operation} principal={principal_id}")
        result = compute()

        try:
            self.cache.put(key, result)
        except Exception as e:
            logger.warning(f"Result cache write failed: operation={operation} error={e}")
        return result

    def get_summary(self, principal_id: Optional[str]) -> Summary:
        now = self.clock.now()
        return self._cached(
            OP_SUMMARY, principal_id, {},
            lambda: self.metrics.get_summary(principal_id, now),
        )

    def get_advanced_metrics(self, principal_id: Optional[str]) -> AdvancedMetrics:
        now = self.clock.now()
        return self._cached(
            OP_METRICS, principal_id, {},
            lambda: self.metrics.get_advanced_metrics(principal_id, now),
        )

    def get_weekly_series(self, principal_id: Optional[str], weeks_count: int = DEFAULT_WEEKS) -> WeeklySeries:
        ensure_in_range("weeks", weeks_count, 1, MAX_WEEKS)
        now = self.clock.now()
        return self._cached(
            OP_WEEKLY_PATIENTS, principal_id, {"weeks": weeks_count},
            lambda: self.weekly.get_weekly_series(principal_id, now, weeks_count),
        )

    def get_top_ranked(
        self,
        principal_id: Optional[str],
        limit: int = DEFAULT_LIMIT,
        period_months: int = DEFAULT_PERIOD_MONTHS,
    ) -> RankedList:
        ensure_in_range("limit", limit, 1, MAX_LIMIT)
        ensure_in_range("period", period_months, 1, MAX_PERIOD_MONTHS)
        now = self.clock.now()
        return self._cached(
            OP_TOP_MEDICATIONS, principal_id, {"limit": limit, "period": period_months},
            lambda: self.ranking.get_top_ranked(principal_id, now, limit, period_months),
        )

    def get_monthly_comparison(self, principal_id: Optional[str]) -> Comparison:
        now = self.clock.now()
        return self._cached(
            OP_REVENUE_COMPARISON, principal_id, {},
            lambda: self.trends.get_monthly_comparison(principal_id, now),
        )
