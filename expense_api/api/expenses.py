from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from expense_api.core.constants import MAX_FILE_SIZE
from expense_api.core.enums import ExpenseCategory, ExpenseStatus
from expense_api.db.session import get_db
from expense_api.schemas.expense import ExpenseResponse
from expense_api.services import attachment_service, expense_service
from expense_api.services.expense_service import UploadedReceipt

# main.py mounts this router with prefix="/expenses"
router = APIRouter(tags=["Expenses"])


def _read_receipt(file: Optional[UploadFile]) -> Optional[UploadedReceipt]:
    if file is None or not file.filename:
        return None
    return UploadedReceipt(
        file_name=file.filename,
        mime_type=file.content_type,
        # one byte past the limit is enough for the size check to reject it
        data=file.file.read(MAX_FILE_SIZE + 1),
    )


def _content_disposition(file_name: str) -> str:
    # latin-1 headers: ASCII fallback plus the RFC 5987 UTF-8 form
    fallback = (
        file_name.encode("ascii", "replace").decode("ascii")
        .replace("?", "_")
        .replace('"', "_")
        .replace("\\", "_")
    )
    return (
        f'attachment; filename="{fallback}"; '
        f"filename*=UTF-8''{quote(file_name, safe='')}"
    )


# -------------------------------------------------------------------
# CREATE (multipart: fields + optional "file")
# -------------------------------------------------------------------
@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
def create_expense(
    report_id: UUID = Form(..., alias="reportId"),
    name: str = Form(..., min_length=1, max_length=200),
    description: Optional[str] = Form(None),
    amount: Decimal = Form(..., ge=0, decimal_places=2),
    expense_date: date = Form(..., alias="expenseDate"),
    category: ExpenseCategory = Form(...),
    expense_status: Optional[ExpenseStatus] = Form(None, alias="status"),
    receipt_required: Optional[bool] = Form(None, alias="receiptRequired"),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    data = {
        "report_id": report_id,
        "name": name,
        "description": description,
        "amount": amount,
        "expense_date": expense_date,
        "category": category,
        "status": expense_status,
        "receipt_required": receipt_required,
    }
    return expense_service.create_expense(db, data, _read_receipt(file))


@router.get("", response_model=List[ExpenseResponse])
def list_expenses(
    report_id: Optional[UUID] = Query(None, alias="reportId"),
    db: Session = Depends(get_db),
):
    return expense_service.list_expenses(db, report_id)


# -------------------------------------------------------------------
# DOWNLOAD: the only endpoint that loads the payload
# -------------------------------------------------------------------
@router.get("/attachments/{attachment_id}/download")
def download_attachment(attachment_id: UUID, db: Session = Depends(get_db)):
    attachment = attachment_service.download_attachment(db, attachment_id)

    return Response(
        content=attachment.file_data,
        media_type=attachment.mime_type,
        headers={
            "Content-Disposition": _content_disposition(attachment.file_name)
        },
    )


@router.delete("/attachments/{attachment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_attachment(attachment_id: UUID, db: Session = Depends(get_db)):
    attachment_service.remove_attachment(db, attachment_id)
    return None


@router.get("/{expense_id}", response_model=ExpenseResponse)
def get_expense(expense_id: UUID, db: Session = Depends(get_db)):
    return expense_service.get_expense(db, expense_id)


# -------------------------------------------------------------------
# UPDATE (multipart, every field optional, optional new "file")
# -------------------------------------------------------------------
@router.patch("/{expense_id}", response_model=ExpenseResponse)
def update_expense(
    expense_id: UUID,
    report_id: Optional[UUID] = Form(None, alias="reportId"),
    name: Optional[str] = Form(None, min_length=1, max_length=200),
    description: Optional[str] = Form(None),
    amount: Optional[Decimal] = Form(None, ge=0, decimal_places=2),
    expense_date: Optional[date] = Form(None, alias="expenseDate"),
    category: Optional[ExpenseCategory] = Form(None),
    expense_status: Optional[ExpenseStatus] = Form(None, alias="status"),
    receipt_required: Optional[bool] = Form(None, alias="receiptRequired"),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    fields = {
        "report_id": report_id,
        "name": name,
        "description": description,
        "amount": amount,
        "expense_date": expense_date,
        "category": category,
        "status": expense_status,
        "receipt_required": receipt_required,
    }
    # multipart has no null: omitted fields stay untouched
    data = {k: v for k, v in fields.items() if v is not None}

    return expense_service.update_expense(db, expense_id, data, _read_receipt(file))


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(expense_id: UUID, db: Session = Depends(get_db)):
    expense_service.remove_expense(db, expense_id)
    return None
