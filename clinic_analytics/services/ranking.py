import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, List

from ..errors import ensure_in_range
from ..providers.base import AggregateSource, Collection
from .results import RankedItem, RankedList, round_half_up
from .time_windows import TimeWindow, shift_months

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 50
DEFAULT_PERIOD_MONTHS = 6
MAX_PERIOD_MONTHS = 24


def period_label(period_months: int) -> str:
    if period_months == 1:
        return "last month"
    if period_months == 12:
        return "last year"
    return f"last {period_months} months"


def rank_counts(counts: Dict[str, int], limit: int) -> List[RankedItem]:
    """Order groups by count (desc) then name (asc) and normalise to percentages of the full total.

    Percentages are taken against every group, not just the ones kept, so a
    truncated list sums to less than 100.
    """
    total = sum(counts.values())
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))[:limit]

    items = []
    for name, count in ordered:
        if total > 0:
            percentage = float(round_half_up(Decimal(100) * count / total, 1))
        else:
            percentage = 0.0
        items.append(RankedItem(name=name, count=count, percentage=percentage))
    return items


class RankingEngine:
    def __init__(self, source: AggregateSource):
        self.source = source

    def get_top_ranked(
        self,
        owner_id: str,
        now: datetime,
        limit: int = DEFAULT_LIMIT,
        period_months: int = DEFAULT_PERIOD_MONTHS,
    ) -> RankedList:
        ensure_in_range("limit", limit, 1, MAX_LIMIT)
        ensure_in_range("period", period_months, 1, MAX_PERIOD_MONTHS)

        wall_time = now.replace(tzinfo=None)
        window = TimeWindow(shift_months(wall_time, -period_months), wall_time)
        counts = self.source.count_by(Collection.MEDICATIONS, owner_id, window)
        total = sum(counts.values())

        logger.debug(f"Ranking medications: owner={owner_id} groups={len(counts)} total={total}")
        return RankedList(
            items=tuple(rank_counts(counts, limit)),
            total_considered=total,
            period_label=period_label(period_months),
            generated_at=now,
        )
