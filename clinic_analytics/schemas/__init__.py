from .dashboard import (
    SummaryResponse,
    AdvancedMetricsResponse,
    WeeklyPointResponse,
    WeeklySeriesResponse,
    RankedItemResponse,
    RankedListResponse,
    ComparisonResponse,
)
from .receipt import MonthlyReportResponse
from .user import UserResponse

__all__ = [
    "SummaryResponse",
    "AdvancedMetricsResponse",
    "WeeklyPointResponse",
    "WeeklySeriesResponse",
    "RankedItemResponse",
    "RankedListResponse",
    "ComparisonResponse",
    "MonthlyReportResponse",
    "UserResponse",
]
