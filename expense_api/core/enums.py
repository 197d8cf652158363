# expense_api/core/enums.py

import enum


class UserRole(str, enum.Enum):
    EMPLOYEE = "EMPLOYEE"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


class ExpenseReportStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PAID = "PAID"


class ExpenseStatus(str, enum.Enum):
    SUBMITTED = "SUBMITTED"
    REVIEWED = "REVIEWED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ExpenseCategory(str, enum.Enum):
    TRAVEL = "TRAVEL"
    MEAL = "MEAL"
    HOTEL = "HOTEL"
    TRANSPORT = "TRANSPORT"
    OFFICE_SUPPLIES = "OFFICE_SUPPLIES"
    OTHER = "OTHER"


class SortBy(str, enum.Enum):
    REPORT_DATE = "reportDate"
    TOTAL_AMOUNT = "totalAmount"
    CREATED_AT = "createdAt"


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"
