from datetime import datetime

from pydantic import BaseModel


class MonthlyReportResponse(BaseModel):
    month: int
    year: int
    total_revenue: float
    total_receipts: int
    pending_receipts: int
    paid_receipts: int
    cancelled_receipts: int
    average_receipt_value: float
    generated_at: datetime

    class Config:
        from_attributes = True
