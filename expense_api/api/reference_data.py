from fastapi import APIRouter

from expense_api.core.constants import ALLOWED_MIME_TYPES, MAX_FILE_SIZE
from expense_api.core.enums import (
    ExpenseCategory,
    ExpenseReportStatus,
    ExpenseStatus,
    UserRole,
)

router = APIRouter(prefix="/reference-data", tags=["Reference Data"])


@router.get("")
def get_reference_data():
    return {
        "reportStatuses": [s.value for s in ExpenseReportStatus],
        "expenseStatuses": [s.value for s in ExpenseStatus],
        "expenseCategories": [c.value for c in ExpenseCategory],
        "roles": [r.value for r in UserRole],
        "allowedMimeTypes": ALLOWED_MIME_TYPES,
        "maxFileSize": MAX_FILE_SIZE,
    }
