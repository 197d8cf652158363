# expense_api/api/expense_reports.py

from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from expense_api.core.constants import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT
from expense_api.core.enums import ExpenseReportStatus, SortBy, SortOrder
from expense_api.db.session import get_db
from expense_api.schemas.expense_report import (
    ExpenseReportCreate,
    ExpenseReportOut,
    ExpenseReportUpdate,
    PaginatedExpenseReports,
    PaginationMeta,
    ReportTotal,
)
from expense_api.services import expense_report_service
from expense_api.services.report_query import ReportQuery, find_reports

router = APIRouter(tags=["Expense Reports"])


# --------------------------------------------------
# CREATE DRAFT
# --------------------------------------------------
@router.post("", response_model=ExpenseReportOut, status_code=status.HTTP_201_CREATED)
def create_report(payload: ExpenseReportCreate, db: Session = Depends(get_db)):
    return expense_report_service.create_report(
        db,
        title=payload.title,
        report_date=payload.report_date,
        user_id=payload.user_id,
    )


# --------------------------------------------------
# SEARCH / FILTER / SORT / PAGINATE
# --------------------------------------------------
@router.get("", response_model=PaginatedExpenseReports)
def list_reports(
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    search: Optional[str] = Query(None),
    report_status: Optional[ExpenseReportStatus] = Query(None, alias="status"),
    min_amount: Optional[Decimal] = Query(None, alias="minAmount", ge=0),
    max_amount: Optional[Decimal] = Query(None, alias="maxAmount", ge=0),
    sort_by: SortBy = Query(SortBy.REPORT_DATE, alias="sortBy"),
    order: SortOrder = Query(SortOrder.DESC),
    db: Session = Depends(get_db),
):
    result = find_reports(
        db,
        ReportQuery(
            page=page,
            limit=limit,
            search=search,
            status=report_status,
            min_amount=min_amount,
            max_amount=max_amount,
            sort_by=sort_by,
            order=order,
        ),
    )

    return PaginatedExpenseReports(
        data=[ExpenseReportOut.model_validate(r) for r in result.data],
        meta=PaginationMeta(
            page=result.page,
            limit=result.limit,
            total=result.total,
            total_pages=result.total_pages,
        ),
    )


# --------------------------------------------------
# REPORTS OF ONE USER
# --------------------------------------------------
@router.get("/user/{user_id}", response_model=List[ExpenseReportOut])
def list_user_reports(user_id: UUID, db: Session = Depends(get_db)):
    return expense_report_service.list_user_reports(db, user_id)


# --------------------------------------------------
# GET ONE REPORT
# --------------------------------------------------
@router.get("/{report_id}", response_model=ExpenseReportOut)
def get_report(report_id: UUID, db: Session = Depends(get_db)):
    return expense_report_service.get_report(db, report_id)


# --------------------------------------------------
# UPDATE (status is a free-form field here)
# --------------------------------------------------
@router.patch("/{report_id}", response_model=ExpenseReportOut)
def update_report(
    report_id: UUID,
    payload: ExpenseReportUpdate,
    db: Session = Depends(get_db),
):
    return expense_report_service.update_report(
        db, report_id, payload.model_dump(exclude_unset=True)
    )


# --------------------------------------------------
# RECALCULATE TOTAL
# --------------------------------------------------
@router.post("/{report_id}/calculate-total", response_model=ReportTotal)
def calculate_total(report_id: UUID, db: Session = Depends(get_db)):
    return ReportTotal(total=expense_report_service.calculate_total(db, report_id))


# --------------------------------------------------
# SUBMIT (DRAFT -> SUBMITTED)
# --------------------------------------------------
@router.post("/{report_id}/submit", response_model=ExpenseReportOut)
def submit_report(report_id: UUID, db: Session = Depends(get_db)):
    return expense_report_service.submit_report(db, report_id)


# --------------------------------------------------
# SOFT DELETE
# --------------------------------------------------
@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_report(report_id: UUID, db: Session = Depends(get_db)):
    expense_report_service.remove_report(db, report_id)
    return None
