from typing import Optional

from sqlalchemy.orm import Session, selectinload

from expense_api.core.exceptions import NotFoundError
from expense_api.core.logging_config import get_logger
from expense_api.models.expense import Expense
from expense_api.services.attachment_service import upload_attachment, validate_file
from expense_api.services.expense_report_service import get_report
from expense_api.utils.calculations import recalculate_report_total

logger = get_logger(__name__)


class UploadedReceipt:
    """A receipt file already read from the request."""

    def __init__(self, file_name: str, mime_type: Optional[str], data: bytes):
        self.file_name = file_name
        self.mime_type = mime_type
        self.data = data


def create_expense(db: Session, data: dict, receipt: UploadedReceipt = None) -> Expense:
    get_report(db, data["report_id"])
    if receipt is not None:
        validate_file(receipt.file_name, receipt.mime_type, len(receipt.data))

    data = dict(data)
    if data.get("status") is None:
        data.pop("status", None)
    if data.get("receipt_required") is None:
        data.pop("receipt_required", None)

    expense = Expense(**data)
    db.add(expense)
    db.flush()

    if receipt is not None:
        upload_attachment(
            db,
            expense.id,
            receipt.file_name,
            receipt.mime_type,
            receipt.data,
            commit=False,
        )

    db.commit()
    recalculate_report_total(db, expense.report_id)

    logger.info("expense_created", expense_id=str(expense.id), report_id=str(expense.report_id))
    return get_expense(db, expense.id)


def list_expenses(db: Session, report_id=None):
    q = db.query(Expense).options(selectinload(Expense.attachments))
    if report_id is not None:
        q = q.filter(Expense.report_id == report_id)
    return q.order_by(Expense.expense_date, Expense.created_at).all()


def get_expense(db: Session, expense_id) -> Expense:
    expense = (
        db.query(Expense)
        .options(selectinload(Expense.attachments))
        .filter(Expense.id == expense_id)
        .first()
    )
    if not expense:
        raise NotFoundError.for_entity("Expense", expense_id)
    return expense


def update_expense(
    db: Session,
    expense_id,
    data: dict,
    receipt: UploadedReceipt = None,
) -> Expense:
    expense = get_expense(db, expense_id)
    previous_report_id = expense.report_id

    # expenses of a soft-deleted report are read-only
    get_report(db, previous_report_id)
    if "report_id" in data and data["report_id"] != previous_report_id:
        get_report(db, data["report_id"])
    if receipt is not None:
        validate_file(receipt.file_name, receipt.mime_type, len(receipt.data))

    for k, v in data.items():
        setattr(expense, k, v)

    if receipt is not None:
        upload_attachment(
            db,
            expense.id,
            receipt.file_name,
            receipt.mime_type,
            receipt.data,
            commit=False,
        )

    db.commit()

    recalculate_report_total(db, expense.report_id)
    if expense.report_id != previous_report_id:
        _recalculate_if_live(db, previous_report_id)

    return get_expense(db, expense.id)


def remove_expense(db: Session, expense_id) -> None:
    expense = get_expense(db, expense_id)
    report_id = expense.report_id

    db.delete(expense)
    db.commit()
    _recalculate_if_live(db, report_id)

    logger.info("expense_deleted", expense_id=str(expense_id), report_id=str(report_id))


def _recalculate_if_live(db: Session, report_id) -> None:
    # expenses may still hang off a soft-deleted report
    try:
        recalculate_report_total(db, report_id)
    except NotFoundError:
        logger.info("report_total_skipped", report_id=str(report_id), reason="deleted")

