from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo


class Clock(ABC):
    """Source of "now" as an aware datetime in the reporting timezone."""

    @abstractmethod
    def now(self) -> datetime:
        pass


class SystemClock(Clock):
    def __init__(self, timezone: str = "UTC"):
        self.zone = ZoneInfo(timezone)

    def now(self) -> datetime:
        return datetime.now(self.zone)


class FixedClock(Clock):
    """Clock pinned to one instant; a naive ``moment`` is read as wall time in ``timezone``."""

    def __init__(self, moment: datetime, timezone: str = "UTC"):
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=ZoneInfo(timezone))
        self.moment = moment

    def now(self) -> datetime:
        return self.moment

    def advance(self, **delta) -> None:
        self.moment = self.moment + timedelta(**delta)
