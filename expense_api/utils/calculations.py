from sqlalchemy.orm import Session
from sqlalchemy import func

from expense_api.core.enums import ExpenseStatus
from expense_api.core.exceptions import NotFoundError
from expense_api.core.logging_config import get_logger
from expense_api.models.expense import Expense
from expense_api.models.expense_report import ExpenseReport

logger = get_logger(__name__)


def recalculate_report_total(db: Session, report_id):
    """Persist the sum of the report's non-rejected expense amounts.

    Reads and writes without a lock: two concurrent recalculations on the
    same report race and the last commit wins.
    """
    report = (
        db.query(ExpenseReport)
        .filter(ExpenseReport.id == report_id, ExpenseReport.deleted_at.is_(None))
        .first()
    )
    if not report:
        raise NotFoundError.for_entity("ExpenseReport", report_id)

    total = (
        db.query(func.coalesce(func.sum(Expense.amount), 0))
        .filter(
            Expense.report_id == report_id,
            Expense.status != ExpenseStatus.REJECTED,
        )
        .scalar()
    )

    report.total_amount = total
    db.commit()
    db.refresh(report)

    logger.info(
        "report_total_recalculated",
        report_id=str(report_id),
        total=str(report.total_amount),
    )
    return report.total_amount
