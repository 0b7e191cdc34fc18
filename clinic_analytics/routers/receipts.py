from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..dependencies import analytics_errors, get_clock, get_report_service
from ..errors import parse_bounded_int
from ..models.user import User
from ..schemas.receipt import MonthlyReportResponse
from ..services.clock import Clock
from ..services.reports import MAX_REPORT_YEAR, MIN_REPORT_YEAR, MonthlyReportService
from .auth import require_rate_limited_user

router = APIRouter(prefix="/receipts", tags=["receipts"])


@router.get("/reports/monthly", response_model=MonthlyReportResponse)
def get_monthly_report(
    month: Optional[str] = Query(None, description="Month (1-12)"),
    year: Optional[str] = Query(None, description=f"Year ({MIN_REPORT_YEAR}-{MAX_REPORT_YEAR})"),
    current_user: User = Depends(require_rate_limited_user),
    service: MonthlyReportService = Depends(get_report_service),
    clock: Clock = Depends(get_clock),
):
    """Monthly billing report for the authenticated clinician's receipts."""
    with analytics_errors():
        month_value = parse_bounded_int("month", month, 1, 12)
        year_value = parse_bounded_int("year", year, MIN_REPORT_YEAR, MAX_REPORT_YEAR)
        return service.get_monthly_report(current_user.id, month_value, year_value, clock.now())
