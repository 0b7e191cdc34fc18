from datetime import datetime

from ..errors import ensure_in_range
from ..providers.base import AggregateSource, Collection
from .results import WeeklyPoint, WeeklySeries
from .time_windows import week_bounds_offset, week_label

DEFAULT_WEEKS = 8
MAX_WEEKS = 52


class WeeklySeriesBuilder:
    def __init__(self, source: AggregateSource):
        self.source = source

    def get_weekly_series(self, owner_id: str, now: datetime, weeks_count: int = DEFAULT_WEEKS) -> WeeklySeries:
        """New patients per Monday–Sunday week, oldest week first.

        Weeks without any registrations are still emitted with a zero count
        so the series has no gaps.
        """
        ensure_in_range("weeks", weeks_count, 1, MAX_WEEKS)

        points = []
        for weeks_ago in range(weeks_count - 1, -1, -1):
            window = week_bounds_offset(now, weeks_ago)
            count = self.source.count(Collection.PATIENTS, owner_id, window)
            points.append(
                WeeklyPoint(
                    week_start=window.start.date(),
                    week_end=window.end.date(),
                    count=count,
                    label=week_label(window),
                )
            )

        return WeeklySeries(points=tuple(points), week_count=weeks_count, generated_at=now)
