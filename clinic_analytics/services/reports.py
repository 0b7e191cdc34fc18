import logging
from datetime import MAXYEAR, datetime

from ..errors import ensure_in_range
from ..models.receipt import ReceiptStatus
from ..providers.base import AggregateSource, Collection
from .results import CENTS, MonthlyReport, safe_average
from .time_windows import month_bounds

logger = logging.getLogger(__name__)

MIN_REPORT_YEAR = 2000
MAX_REPORT_YEAR = MAXYEAR


class MonthlyReportService:
    def __init__(self, source: AggregateSource):
        self.source = source

    @staticmethod
    def validate_period(month: int, year: int) -> None:
        ensure_in_range("month", month, 1, 12)
        ensure_in_range("year", year, MIN_REPORT_YEAR, MAX_REPORT_YEAR)

    def get_monthly_report(self, owner_id: str, month: int, year: int, now: datetime) -> MonthlyReport:
        """Financial summary of one calendar month of receipts.

        Revenue covers receipts in every status; the per-status counts let the
        caller separate what was actually paid.
        """
        self.validate_period(month, year)
        window = month_bounds(year, month)

        revenue = self.source.sum_amount(owner_id, window).quantize(CENTS)
        by_status = self.source.count_by(Collection.RECEIPTS, owner_id, window)
        total = sum(by_status.values())

        logger.info(f"Monthly report generated: owner={owner_id} period={year}-{month:02d} receipts={total}")
        return MonthlyReport(
            month=month,
            year=year,
            total_revenue=revenue,
            total_receipts=total,
            pending_receipts=by_status.get(ReceiptStatus.PENDING.value, 0),
            paid_receipts=by_status.get(ReceiptStatus.PAID.value, 0),
            cancelled_receipts=by_status.get(ReceiptStatus.CANCELLED.value, 0),
            average_receipt_value=safe_average(revenue, total),
            generated_at=now,
        )
