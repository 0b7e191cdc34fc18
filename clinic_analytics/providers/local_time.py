from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Optional
from zoneinfo import ZoneInfo

from ..services.time_windows import TimeWindow
from .base import AggregateSource, Collection


class LocalTimeSource(AggregateSource):
    """Runs reporting-zone windows against a source that stores naive UTC timestamps.

    Day, week and month windows are built on local wall-clock time. Each
    bound is converted to naive UTC before it reaches the wrapped source, so
    a receipt stored at 01:00 UTC on the 1st still belongs to the previous
    month for a clinic west of Greenwich.
    """

    def __init__(self, source: AggregateSource, reporting_timezone: str = "UTC"):
        self.source = source
        self.zone = ZoneInfo(reporting_timezone)

    def to_utc(self, moment: datetime) -> datetime:
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=self.zone)
        try:
            return moment.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError:
            # Bounds on the first or last representable day can leave the range.
            return datetime.max if moment.year == datetime.max.year else datetime.min

    def _window(self, window: Optional[TimeWindow]) -> Optional[TimeWindow]:
        if window is None:
            return None
        return TimeWindow(self.to_utc(window.start), self.to_utc(window.end))

    def count(
        self,
        collection: Collection,
        owner_id: str,
        window: Optional[TimeWindow] = None,
        status: Optional[str] = None,
    ) -> int:
        return self.source.count(collection, owner_id, self._window(window), status)

    def sum_amount(
        self,
        owner_id: str,
        window: Optional[TimeWindow] = None,
        status: Optional[str] = None,
    ) -> Decimal:
        return self.source.sum_amount(owner_id, self._window(window), status)

    def count_by(
        self,
        collection: Collection,
        owner_id: str,
        window: Optional[TimeWindow] = None,
    ) -> Dict[str, int]:
        return self.source.count_by(collection, owner_id, self._window(window))
