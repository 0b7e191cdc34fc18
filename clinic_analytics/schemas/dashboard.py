from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel

from ..services.results import Trend


class SummaryResponse(BaseModel):
    total_count: int
    count_today: int
    count_this_week: int
    generated_at: datetime

    class Config:
        from_attributes = True


class AdvancedMetricsResponse(SummaryResponse):
    monthly_revenue: float
    active_prescription_count: int
    monthly_receipt_count: int
    average_receipt_value: float


class WeeklyPointResponse(BaseModel):
    week_start: date
    week_end: date
    count: int
    label: str

    class Config:
        from_attributes = True


class WeeklySeriesResponse(BaseModel):
    points: List[WeeklyPointResponse]
    week_count: int
    generated_at: datetime

    class Config:
        from_attributes = True


class RankedItemResponse(BaseModel):
    name: str
    count: int
    percentage: float

    class Config:
        from_attributes = True


class RankedListResponse(BaseModel):
    items: List[RankedItemResponse]
    total_considered: int
    period_label: str
    generated_at: datetime

    class Config:
        from_attributes = True


class ComparisonResponse(BaseModel):
    current_total: float
    previous_total: float
    absolute_delta: float
    percentage_delta: Optional[float] = None
    trend: Trend
    current_label: str
    previous_label: str
    current_count: int
    previous_count: int
    current_average: float
    previous_average: float
    generated_at: datetime

    class Config:
        from_attributes = True
