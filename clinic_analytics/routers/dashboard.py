"""
Dashboard endpoints.

Read-only aggregates for the signed-in clinician's home screen. Every route is
scoped to the authenticated principal's own records, and results are cached
per principal for an hour, so ``generated_at`` reports when a value was
computed rather than when it was served.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..dependencies import analytics_errors, get_dashboard_service
from ..errors import parse_bounded_int
from ..models.user import User
from ..schemas.dashboard import (
    AdvancedMetricsResponse,
    ComparisonResponse,
    RankedListResponse,
    SummaryResponse,
    WeeklySeriesResponse,
)
from ..services.dashboard import DashboardService
from ..services.ranking import DEFAULT_LIMIT, DEFAULT_PERIOD_MONTHS, MAX_LIMIT, MAX_PERIOD_MONTHS
from ..services.weekly_series import DEFAULT_WEEKS, MAX_WEEKS
from .auth import require_rate_limited_user

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=SummaryResponse)
def get_summary(
    current_user: User = Depends(require_rate_limited_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    with analytics_errors():
        return service.get_summary(current_user.id)


@router.get("/metrics", response_model=AdvancedMetricsResponse)
def get_metrics(
    current_user: User = Depends(require_rate_limited_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    with analytics_errors():
        return service.get_advanced_metrics(current_user.id)


@router.get("/weekly-patients", response_model=WeeklySeriesResponse)
def get_weekly_patients(
    weeks: Optional[str] = Query(None, description=f"Number of weeks (1-{MAX_WEEKS}, default {DEFAULT_WEEKS})"),
    current_user: User = Depends(require_rate_limited_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    with analytics_errors():
        weeks_count = parse_bounded_int("weeks", weeks, 1, MAX_WEEKS, default=DEFAULT_WEEKS)
        return service.get_weekly_series(current_user.id, weeks_count)


@router.get("/top-medications", response_model=RankedListResponse)
def get_top_medications(
    limit: Optional[str] = Query(None, description=f"Maximum medications returned (1-{MAX_LIMIT}, default {DEFAULT_LIMIT})"),
    period: Optional[str] = Query(
        None, description=f"Look-back period in months (1-{MAX_PERIOD_MONTHS}, default {DEFAULT_PERIOD_MONTHS})"
    ),
    current_user: User = Depends(require_rate_limited_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    with analytics_errors():
        limit_count = parse_bounded_int("limit", limit, 1, MAX_LIMIT, default=DEFAULT_LIMIT)
        period_months = parse_bounded_int("period", period, 1, MAX_PERIOD_MONTHS, default=DEFAULT_PERIOD_MONTHS)
        return service.get_top_ranked(current_user.id, limit_count, period_months)


@router.get("/monthly-revenue-comparison", response_model=ComparisonResponse)
def get_monthly_revenue_comparison(
    current_user: User = Depends(require_rate_limited_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    with analytics_errors():
        return service.get_monthly_comparison(current_user.id)
