from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, undefer

from expense_api.core.constants import ALLOWED_MIME_TYPES, MAX_FILE_SIZE
from expense_api.core.exceptions import NotFoundError, ValidationError
from expense_api.core.logging_config import get_logger
from expense_api.models.attachment import Attachment

logger = get_logger(__name__)


def validate_file(file_name: str, mime_type: Optional[str], size: int) -> None:
    if size > MAX_FILE_SIZE:
        logger.warning("attachment_rejected", file_name=file_name, reason="size", size=size)
        raise ValidationError(
            f"File size exceeds maximum allowed size of {MAX_FILE_SIZE // (1024 * 1024)}MB"
        )

    if mime_type not in ALLOWED_MIME_TYPES:
        logger.warning("attachment_rejected", file_name=file_name, reason="type", mime_type=mime_type)
        raise ValidationError(
            f"File type {mime_type} is not allowed. "
            f"Allowed types: {', '.join(ALLOWED_MIME_TYPES)}"
        )


def upload_attachment(
    db: Session,
    expense_id,
    file_name: str,
    mime_type: Optional[str],
    data: bytes,
    commit: bool = True,
) -> Attachment:
    """Validate and store a receipt. The returned object has its payload
    expired, so serializing it never touches the BLOB."""
    validate_file(file_name, mime_type, len(data))

    attachment = Attachment(
        expense_id=expense_id,
        file_name=file_name,
        mime_type=mime_type,
        file_size=len(data),
        uploaded_at=datetime.utcnow(),
        file_data=data,
    )
    db.add(attachment)
    if commit:
        db.commit()
    else:
        db.flush()
    db.expire(attachment, ["file_data"])

    logger.info(
        "attachment_stored",
        attachment_id=str(attachment.id),
        expense_id=str(expense_id),
        size=attachment.file_size,
    )
    return attachment


def get_attachment(db: Session, attachment_id) -> Attachment:
    attachment = db.query(Attachment).filter(Attachment.id == attachment_id).first()
    if not attachment:
        raise NotFoundError.for_entity("Attachment", attachment_id)
    return attachment


def list_expense_attachments(db: Session, expense_id):
    return (
        db.query(Attachment)
        .filter(Attachment.expense_id == expense_id)
        .order_by(Attachment.uploaded_at)
        .all()
    )


def download_attachment(db: Session, attachment_id) -> Attachment:
    """The only read that loads the payload."""
    attachment = (
        db.query(Attachment)
        .options(undefer(Attachment.file_data))
        .filter(Attachment.id == attachment_id)
        .first()
    )
    if not attachment:
        raise NotFoundError.for_entity("Attachment", attachment_id)
    return attachment


def remove_attachment(db: Session, attachment_id) -> None:
    attachment = get_attachment(db, attachment_id)
    db.delete(attachment)
    db.commit()
