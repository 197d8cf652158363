"""Search, filter, sort and pagination over expense reports."""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from expense_api.core.constants import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT
from expense_api.core.enums import ExpenseReportStatus, SortBy, SortOrder
from expense_api.core.exceptions import ValidationError
from expense_api.models.expense import Expense
from expense_api.models.expense_report import ExpenseReport

SORT_COLUMNS = {
    SortBy.REPORT_DATE: ExpenseReport.report_date,
    SortBy.TOTAL_AMOUNT: ExpenseReport.total_amount,
    SortBy.CREATED_AT: ExpenseReport.created_at,
}


@dataclass
class ReportQuery:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    search: Optional[str] = None
    status: Optional[ExpenseReportStatus] = None
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None
    sort_by: SortBy = SortBy.REPORT_DATE
    order: SortOrder = SortOrder.DESC

    def validate(self) -> None:
        if self.page < 1:
            raise ValidationError("page must be at least 1")
        if not 1 <= self.limit <= MAX_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_LIMIT}")
        for name, value in (("minAmount", self.min_amount), ("maxAmount", self.max_amount)):
            if value is not None and value < 0:
                raise ValidationError(f"{name} must not be negative")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Page:
    data: List[ExpenseReport]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def find_reports(db: Session, query: ReportQuery) -> Page:
    query.validate()

    q = db.query(ExpenseReport).filter(ExpenseReport.deleted_at.is_(None))

    if query.search:
        q = q.filter(
            ExpenseReport.title.ilike(f"%{_escape_like(query.search)}%", escape="\\")
        )
    if query.status is not None:
        q = q.filter(ExpenseReport.status == query.status)
    if query.min_amount is not None:
        q = q.filter(ExpenseReport.total_amount >= query.min_amount)
    if query.max_amount is not None:
        q = q.filter(ExpenseReport.total_amount <= query.max_amount)

    total = q.order_by(None).count()

    column = SORT_COLUMNS[SortBy(query.sort_by)]
    if SortOrder(query.order) == SortOrder.ASC:
        q = q.order_by(column.asc(), ExpenseReport.id.asc())
    else:
        q = q.order_by(column.desc(), ExpenseReport.id.desc())

    # selectinload keeps LIMIT/OFFSET applied to reports, not joined rows
    rows = (
        q.options(selectinload(ExpenseReport.expenses).selectinload(Expense.attachments))
        .offset(query.offset)
        .limit(query.limit)
        .all()
    )

    return Page(data=rows, page=query.page, limit=query.limit, total=total)
