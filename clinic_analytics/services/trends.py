from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

from ..providers.base import AggregateSource, Collection
from .results import CENTS, Comparison, Trend, ZERO, round_half_up, safe_average
from .time_windows import month_bounds, month_label, previous_month


def percentage_change(current: Decimal, previous: Decimal) -> Optional[float]:
    """Relative change to one decimal; ``None`` when there is no previous baseline."""
    if previous == ZERO:
        return None
    return float(round_half_up(Decimal(100) * (current - previous) / previous, 1))


def classify_trend(absolute_delta: Decimal, percentage_delta: Optional[float]) -> Trend:
    if percentage_delta is None:
        return Trend.NO_BASELINE
    if absolute_delta == ZERO:
        return Trend.STABLE
    if absolute_delta > ZERO:
        return Trend.GROWTH
    return Trend.DECLINE


class TrendAnalyzer:
    def __init__(self, source: AggregateSource):
        self.source = source

    def _month_totals(self, owner_id: str, year: int, month: int) -> Tuple[Decimal, int]:
        window = month_bounds(year, month)
        total = self.source.sum_amount(owner_id, window).quantize(CENTS)
        count = self.source.count(Collection.RECEIPTS, owner_id, window)
        return total, count

    def get_monthly_comparison(self, owner_id: str, now: datetime) -> Comparison:
        prev_year, prev_month = previous_month(now.year, now.month)

        current_total, current_count = self._month_totals(owner_id, now.year, now.month)
        previous_total, previous_count = self._month_totals(owner_id, prev_year, prev_month)

        absolute_delta = current_total - previous_total
        percentage_delta = percentage_change(current_total, previous_total)

        return Comparison(
            current_total=current_total,
            previous_total=previous_total,
            absolute_delta=absolute_delta,
            percentage_delta=percentage_delta,
            trend=classify_trend(absolute_delta, percentage_delta),
            current_label=month_label(now.year, now.month),
            previous_label=month_label(prev_year, prev_month),
            current_count=current_count,
            previous_count=previous_count,
            current_average=safe_average(current_total, current_count),
            previous_average=safe_average(previous_total, previous_count),
            generated_at=now,
        )
