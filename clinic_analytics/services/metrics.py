import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any, Callable, Dict

from ..models.prescription import PrescriptionStatus
from ..providers.base import AggregateSource, Collection
from .results import AdvancedMetrics, CENTS, Summary, safe_average
from .time_windows import day_bounds, month_bounds, week_bounds

logger = logging.getLogger(__name__)


def run_concurrently(tasks: Dict[str, Callable[[], Any]], max_workers: int) -> Dict[str, Any]:
    """Run independent queries on a thread pool and wait for every one of them.

    The first failure is re-raised once all submitted work has settled, so a
    caller never sees a partially filled result.
    """
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(tasks)))) as executor:
        futures = {name: executor.submit(task) for name, task in tasks.items()}
        return {name: future.result() for name, future in futures.items()}


class MetricsAggregator:
    def __init__(self, source: AggregateSource, max_workers: int = 3):
        self.source = source
        self.max_workers = max_workers

    def _summary_tasks(self, owner_id: str, now: datetime) -> Dict[str, Callable[[], Any]]:
        today = day_bounds(now)
        this_week = week_bounds(now)
        return {
            "total": lambda: self.source.count(Collection.PATIENTS, owner_id),
            "today": lambda: self.source.count(Collection.PATIENTS, owner_id, today),
            "this_week": lambda: self.source.count(Collection.PATIENTS, owner_id, this_week),
        }

    def get_summary(self, owner_id: str, now: datetime) -> Summary:
        counts = run_concurrently(self._summary_tasks(owner_id, now), self.max_workers)
        return Summary(
            total_count=counts["total"],
            count_today=counts["today"],
            count_this_week=counts["this_week"],
            generated_at=now,
        )

    def get_advanced_metrics(self, owner_id: str, now: datetime) -> AdvancedMetrics:
        this_month = month_bounds(now.year, now.month)

        tasks = self._summary_tasks(owner_id, now)
        tasks["revenue"] = lambda: self.source.sum_amount(owner_id, this_month)
        tasks["receipts"] = lambda: self.source.count(Collection.RECEIPTS, owner_id, this_month)
        # Active prescriptions are deliberately not limited to the current month.
        tasks["active_prescriptions"] = lambda: self.source.count(
            Collection.PRESCRIPTIONS, owner_id, status=PrescriptionStatus.ACTIVE.value
        )

        values = run_concurrently(tasks, self.max_workers)
        revenue = values["revenue"].quantize(CENTS)
        receipt_count = values["receipts"]

        logger.debug(
            f"Advanced metrics computed: owner={owner_id} revenue={revenue} receipts={receipt_count}"
        )
        return AdvancedMetrics(
            total_count=values["total"],
            count_today=values["today"],
            count_this_week=values["this_week"],
            monthly_revenue=revenue,
            active_prescription_count=values["active_prescriptions"],
            monthly_receipt_count=receipt_count,
            average_receipt_value=safe_average(revenue, receipt_count),
            generated_at=now,
        )
