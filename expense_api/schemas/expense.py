from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from expense_api.core.enums import ExpenseCategory, ExpenseStatus
from expense_api.schemas.attachment import AttachmentResponse
from expense_api.schemas.base import ApiModel


class ExpenseResponse(ApiModel):
    id: UUID
    report_id: UUID

    name: str
    description: Optional[str]
    amount: float
    expense_date: date
    category: ExpenseCategory
    status: ExpenseStatus
    receipt_required: bool

    created_at: datetime
    updated_at: datetime

    # metadata only, never the payload
    attachments: List[AttachmentResponse] = []
