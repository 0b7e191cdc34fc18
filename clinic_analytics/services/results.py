from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Tuple

ZERO = Decimal("0")
CENTS = Decimal("0.01")


def round_half_up(value: Decimal, places: int) -> Decimal:
    return Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def safe_average(total: Decimal, count: int) -> Decimal:
    """Mean receipt value to the cent; zero when there is nothing to average."""
    if count <= 0:
        return ZERO.quantize(CENTS)
    return round_half_up(Decimal(total) / count, 2)


class Trend(str, Enum):
    GROWTH = "growth"
    DECLINE = "decline"
    STABLE = "stable"
    NO_BASELINE = "no-baseline"


@dataclass(frozen=True)
class Summary:
    total_count: int
    count_today: int
    count_this_week: int
    generated_at: datetime


@dataclass(frozen=True)
class AdvancedMetrics:
    total_count: int
    count_today: int
    count_this_week: int
    monthly_revenue: Decimal
    active_prescription_count: int
    monthly_receipt_count: int
    average_receipt_value: Decimal
    generated_at: datetime


@dataclass(frozen=True)
class WeeklyPoint:
    week_start: date
    week_end: date
    count: int
    label: str


@dataclass(frozen=True)
class WeeklySeries:
    points: Tuple[WeeklyPoint, ...]
    week_count: int
    generated_at: datetime


@dataclass(frozen=True)
class RankedItem:
    name: str
    count: int
    percentage: float


@dataclass(frozen=True)
class RankedList:
    items: Tuple[RankedItem, ...]
    total_considered: int
    period_label: str
    generated_at: datetime


@dataclass(frozen=True)
class Comparison:
    current_total: Decimal
    previous_total: Decimal
    absolute_delta: Decimal
    percentage_delta: Optional[float]
    trend: Trend
    current_label: str
    previous_label: str
    current_count: int
    previous_count: int
    current_average: Decimal
    previous_average: Decimal
    generated_at: datetime


@dataclass(frozen=True)
class MonthlyReport:
    month: int
    year: int
    total_revenue: Decimal
    total_receipts: int
    pending_receipts: int
    paid_receipts: int
    cancelled_receipts: int
    average_receipt_value: Decimal
    generated_at: datetime
