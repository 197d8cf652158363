import uuid
from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    LargeBinary,
    String,
    Uuid,
)
from sqlalchemy.orm import deferred, relationship

from expense_api.db.base import Base, TimestampMixin


class Attachment(TimestampMixin, Base):
    __tablename__ = "attachments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    expense_id = Column(
        Uuid,
        ForeignKey("expenses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    file_name = Column(String(255), nullable=False)
    mime_type = Column(String(100), nullable=False)
    file_size = Column(Integer, nullable=False)
    uploaded_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    # BLOB: never loaded unless the query undefers it
    file_data = deferred(Column(LargeBinary, nullable=False))

    expense = relationship(
        "Expense",
        back_populates="attachments"
    )
