from datetime import datetime

from sqlalchemy.orm import Session

from expense_api.core.constants import DEFAULT_CURRENCY
from expense_api.core.enums import ExpenseReportStatus
from expense_api.core.exceptions import InvalidStateError, NotFoundError
from expense_api.core.logging_config import get_logger
from expense_api.models.expense_report import ExpenseReport
from expense_api.models.user import User
from expense_api.utils.calculations import recalculate_report_total

logger = get_logger(__name__)


def _live_reports(db: Session):
    return db.query(ExpenseReport).filter(ExpenseReport.deleted_at.is_(None))


def _ensure_user(db: Session, user_id):
    exists = (
        db.query(User.id)
        .filter(User.id == user_id, User.deleted_at.is_(None))
        .first()
    )
    if not exists:
        raise NotFoundError.for_entity("User", user_id)


def create_report(db: Session, title: str, report_date, user_id) -> ExpenseReport:
    _ensure_user(db, user_id)

    report = ExpenseReport(
        user_id=user_id,
        title=title,
        report_date=report_date,
        status=ExpenseReportStatus.DRAFT,
        total_amount=0,
        currency=DEFAULT_CURRENCY,
    )
    db.add(report)
    db.commit()
    db.refresh(report)

    logger.info("report_created", report_id=str(report.id), user_id=str(user_id))
    return report


def get_report(db: Session, report_id) -> ExpenseReport:
    report = _live_reports(db).filter(ExpenseReport.id == report_id).first()
    if not report:
        raise NotFoundError.for_entity("ExpenseReport", report_id)
    return report


def list_user_reports(db: Session, user_id):
    return (
        _live_reports(db)
        .filter(ExpenseReport.user_id == user_id)
        .order_by(ExpenseReport.report_date.desc(), ExpenseReport.id)
        .all()
    )


def update_report(db: Session, report_id, data: dict) -> ExpenseReport:
    """Apply a partial update. Status is a plain field here: no transition
    rules beyond the explicit submit action."""
    report = get_report(db, report_id)

    if "user_id" in data and data["user_id"] != report.user_id:
        _ensure_user(db, data["user_id"])

    for k, v in data.items():
        setattr(report, k, v)

    db.commit()
    db.refresh(report)
    return report


def submit_report(db: Session, report_id) -> ExpenseReport:
    report = get_report(db, report_id)

    if report.status != ExpenseReportStatus.DRAFT:
        raise InvalidStateError(
            f"Only draft reports can be submitted (current status: {report.status.value})"
        )

    report.status = ExpenseReportStatus.SUBMITTED
    db.commit()
    db.refresh(report)

    logger.info("report_submitted", report_id=str(report.id))
    return report


def calculate_total(db: Session, report_id):
    return recalculate_report_total(db, report_id)


def remove_report(db: Session, report_id) -> None:
    report = get_report(db, report_id)
    report.deleted_at = datetime.utcnow()
    db.commit()

    logger.info("report_deleted", report_id=str(report_id))
