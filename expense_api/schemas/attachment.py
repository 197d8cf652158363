from datetime import datetime
from uuid import UUID

from expense_api.schemas.base import ApiModel


class AttachmentResponse(ApiModel):
    id: UUID
    expense_id: UUID
    file_name: str
    mime_type: str
    file_size: int
    uploaded_at: datetime
