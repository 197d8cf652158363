# expense_api/models/expense_report.py

import uuid
from sqlalchemy import (
    Column,
    String,
    Date,
    DateTime,
    Enum,
    Numeric,
    ForeignKey,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from expense_api.core.constants import DEFAULT_CURRENCY
from expense_api.core.enums import ExpenseReportStatus
from expense_api.db.base import Base, TimestampMixin


class ExpenseReport(TimestampMixin, Base):
    __tablename__ = "expense_reports"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title = Column(String(200), nullable=False)
    report_date = Column(Date, nullable=False, index=True)

    status = Column(
        Enum(ExpenseReportStatus),
        default=ExpenseReportStatus.DRAFT,
        nullable=False,
        index=True,
    )

    # derived from the expenses, see utils.calculations
    total_amount = Column(Numeric(10, 2), default=0, nullable=False)
    currency = Column(String(3), default=DEFAULT_CURRENCY, nullable=False)

    # review fields, set by callers
    reviewed_by = Column(Uuid, nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    deleted_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="expense_reports")

    expenses = relationship(
        "Expense",
        back_populates="report",
        cascade="all, delete-orphan",
        order_by="Expense.expense_date",
    )
