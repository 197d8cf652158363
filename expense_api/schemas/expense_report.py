# expense_api/schemas/expense_report.py

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from expense_api.core.enums import ExpenseReportStatus
from expense_api.schemas.base import ApiModel
from expense_api.schemas.expense import ExpenseResponse


class ExpenseReportCreate(ApiModel):
    user_id: UUID
    title: str = Field(min_length=1, max_length=200)
    report_date: date


class ExpenseReportUpdate(ApiModel):
    user_id: Optional[UUID] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    report_date: Optional[date] = None
    status: Optional[ExpenseReportStatus] = None
    reviewed_by: Optional[UUID] = None
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    @field_validator("user_id", "title", "report_date", "status")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be null")
        return value


class ExpenseReportOut(ApiModel):
    id: UUID
    user_id: UUID
    title: str
    report_date: date
    status: ExpenseReportStatus
    total_amount: float
    currency: str
    reviewed_by: Optional[UUID]
    reviewed_at: Optional[datetime]
    rejection_reason: Optional[str]
    created_at: datetime
    updated_at: datetime
    expenses: List[ExpenseResponse] = []


class PaginationMeta(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int


class PaginatedExpenseReports(ApiModel):
    data: List[ExpenseReportOut]
    meta: PaginationMeta


class ReportTotal(ApiModel):
    total: float
