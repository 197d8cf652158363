import uuid
from sqlalchemy import (
    Boolean,
    Column,
    String,
    Date,
    Enum,
    Numeric,
    ForeignKey,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from expense_api.core.enums import ExpenseCategory, ExpenseStatus
from expense_api.db.base import Base, TimestampMixin


class Expense(TimestampMixin, Base):
    __tablename__ = "expenses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    report_id = Column(
        Uuid,
        ForeignKey("expense_reports.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    expense_date = Column(Date, nullable=False, index=True)

    category = Column(Enum(ExpenseCategory), nullable=False, index=True)
    status = Column(
        Enum(ExpenseStatus),
        default=ExpenseStatus.SUBMITTED,
        nullable=False,
        index=True,
    )
    receipt_required = Column(Boolean, default=True, nullable=False)

    report = relationship("ExpenseReport", back_populates="expenses")

    attachments = relationship(
        "Attachment",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="Attachment.uploaded_at",
    )
